"""Template catalog endpoint."""

from typing import List

from fastapi import APIRouter

from ..models import ContractTemplate
from ..services.templates import get_templates

router = APIRouter()


@router.get("/templates", response_model=List[ContractTemplate])
async def list_templates():
    """GET /templates - built-in example contracts."""
    return get_templates()
