from fastapi import APIRouter, Body, Depends, HTTPException, Query
from psycopg import Connection
from typing import List
from uuid import UUID

from ..db import get_conn
from ..models.client import Client, ClientIn
from ..repos.clients import (
    create_client,
    delete_client,
    get_client,
    list_clients as repo_list_clients,
    update_client,
)
from .deps import get_org_id

router = APIRouter(prefix="/clients", tags=["clients"])

# List all clients 
@router.get("", response_model=List[Client])
def list_clients(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    conn: Connection = Depends(get_conn),
):
    return repo_list_clients(conn, limit=limit, offset=offset)

# Get single client 
@router.get("/{client_id}", response_model=Client)
def get_client_by_id(client_id: UUID, conn: Connection = Depends(get_conn)):
    client = get_client(conn, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client

@router.post("", response_model=Client, status_code=201)
def post_client(
    payload: ClientIn = Body(...),
    conn: Connection = Depends(get_conn),
    org_id: str = Depends(get_org_id),
):
    with conn.transaction():
        return create_client(conn, org_id, payload.model_dump())

@router.put("/{client_id}", response_model=Client)
def put_client(client_id: UUID, payload: ClientIn = Body(...), conn: Connection = Depends(get_conn)):
    with conn.transaction():
        client = update_client(conn, client_id, payload.model_dump())
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return client

@router.delete("/{client_id}")
def remove_client(client_id: UUID, conn: Connection = Depends(get_conn)):
    with conn.transaction():
        if not delete_client(conn, client_id):
            raise HTTPException(status_code=404, detail="Client not found")
    return {"ok": True, "id": client_id}
