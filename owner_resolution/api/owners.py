"""Owner resolution endpoints."""

import logging
from typing import Optional, Union

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from owner_resolution.config import DEFAULT_NAME_ORDER, NAME_ORDERS
from owner_resolution.pipeline.resolver import resolve_owner_text
from owner_resolution.pipeline.timeline import build_ownership_timeline

router = APIRouter()
logger = logging.getLogger(__name__)


class OwnerEntryIn(BaseModel):
    name: str
    mailing_address: Optional[str] = None


class SaleRowIn(BaseModel):
    date: Optional[str] = None
    grantor: Union[str, list[str], None] = None
    grantee: Union[str, list[str], None] = None


class ResolveRequest(BaseModel):
    property_id: Optional[str] = None
    current_owners: list[Union[str, OwnerEntryIn]] = Field(default_factory=list)
    sales: list[SaleRowIn] = Field(default_factory=list)
    name_order: Optional[str] = None


class ParseRequest(BaseModel):
    text: str
    mailing_address: Optional[str] = None
    name_order: Optional[str] = None


def _check_name_order(name_order: Optional[str]) -> str:
    order = (name_order or DEFAULT_NAME_ORDER).strip().lower()
    if order not in NAME_ORDERS:
        raise HTTPException(
            status_code=400,
            detail=f"name_order must be one of {', '.join(NAME_ORDERS)}",
        )
    return order


@router.post("/resolve")
async def resolve_owners(req: ResolveRequest):
    """Resolve a parcel's current owners and sale history into owners_by_date."""
    if not req.current_owners and not req.sales:
        raise HTTPException(status_code=400, detail="No owners or sales supplied")
    order = _check_name_order(req.name_order)

    current = [
        entry if isinstance(entry, str) else entry.model_dump()
        for entry in req.current_owners
    ]
    sales = [row.model_dump() for row in req.sales]
    timeline = build_ownership_timeline(current, sales, name_order=order)

    body = timeline.to_dict()
    if req.property_id:
        body = {f"property_{req.property_id}": body}
    logger.info(
        "Resolved parcel %s: %d timeline key(s), %d invalid",
        req.property_id or "-", len(timeline.owners_by_date), len(timeline.invalid_owners),
    )
    return JSONResponse(content=body)


@router.post("/parse")
async def parse_owner(req: ParseRequest):
    """Resolve a single owner string; useful for checking one cell by hand."""
    if not req.text.strip():
        raise HTTPException(status_code=400, detail="Empty owner text")
    order = _check_name_order(req.name_order)
    owners, invalid = resolve_owner_text(req.text, req.mailing_address, name_order=order)
    return {
        "owners": [o.to_dict() for o in owners],
        "invalid_owners": [e.to_dict() for e in invalid],
    }
