from fastapi import APIRouter

from ..db import db_ok

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    ok_db = db_ok()
    return {"ok": ok_db, "db": ok_db}
