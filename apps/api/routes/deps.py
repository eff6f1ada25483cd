from fastapi import HTTPException

from ..settings import settings


def get_org_id() -> str:
    """Org the request acts for; every write is scoped to it."""
    org_id = settings.ORG_ID
    if not org_id:
        raise HTTPException(status_code=400, detail="Missing org context")
    return str(org_id)
