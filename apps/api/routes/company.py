import logging

from fastapi import APIRouter, Body, Depends, HTTPException
from psycopg import Connection

from ..db import get_conn
from ..models.company import CompanyProfile, CompanyProfileIn
from ..repos.company import get_company_profile, update_company_profile
from ..services.numbering import company_initials
from .deps import get_org_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/company-profile", tags=["company-profile"])


@router.get("", response_model=CompanyProfile)
def get_profile(conn: Connection = Depends(get_conn), org_id: str = Depends(get_org_id)):
    profile = get_company_profile(conn, org_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Company profile not found")
    return profile


# Renaming the company moves new documents into the series of the new initials;
# numbers already issued keep the old ones.
@router.put("", response_model=CompanyProfile)
def put_profile(
    payload: CompanyProfileIn = Body(...),
    conn: Connection = Depends(get_conn),
    org_id: str = Depends(get_org_id),
):
    with conn.transaction():
        if not update_company_profile(conn, org_id, payload.model_dump()):
            raise HTTPException(status_code=404, detail="Company profile not found")
    logger.info("company profile updated; document initials %s", company_initials(payload.name))
    return get_company_profile(conn, org_id)
