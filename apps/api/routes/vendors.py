from fastapi import APIRouter, Body, Depends, HTTPException, Query
from psycopg import Connection
from typing import List
from uuid import UUID

from ..db import get_conn
from ..models.vendor import Vendor, VendorIn
from ..repos.vendors import (
    create_vendor,
    delete_vendor,
    get_vendor,
    list_vendors as repo_list_vendors,
    update_vendor,
)
from .deps import get_org_id

router = APIRouter(prefix="/vendors", tags=["vendors"])

# List all vendors 
@router.get("", response_model=List[Vendor])
def list_vendors(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    conn: Connection = Depends(get_conn),
):
    return repo_list_vendors(conn, limit=limit, offset=offset)

# Get single vendor 
@router.get("/{vendor_id}", response_model=Vendor)
def get_vendor_by_id(vendor_id: UUID, conn: Connection = Depends(get_conn)):
    vendor = get_vendor(conn, vendor_id)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor

@router.post("", response_model=Vendor, status_code=201)
def post_vendor(
    payload: VendorIn = Body(...),
    conn: Connection = Depends(get_conn),
    org_id: str = Depends(get_org_id),
):
    with conn.transaction():
        return create_vendor(conn, org_id, payload.model_dump())

@router.put("/{vendor_id}", response_model=Vendor)
def put_vendor(vendor_id: UUID, payload: VendorIn = Body(...), conn: Connection = Depends(get_conn)):
    with conn.transaction():
        vendor = update_vendor(conn, vendor_id, payload.model_dump())
    if vendor is None:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor

@router.delete("/{vendor_id}")
def remove_vendor(vendor_id: UUID, conn: Connection = Depends(get_conn)):
    with conn.transaction():
        if not delete_vendor(conn, vendor_id):
            raise HTTPException(status_code=404, detail="Vendor not found")
    return {"ok": True, "id": vendor_id}
