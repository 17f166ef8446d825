"""
Opportunity Funnel API Endpoints
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.crm.models import ExperimentalClass, OpportunityCard
from app.crm.store import CrmStore, get_store

router = APIRouter()


# === Request Models ===

class ExperimentalClassIn(BaseModel):
    id: str = ""
    date: str
    time: str
    discipline: str
    student_name: str


class OpportunityCreate(BaseModel):
    """建立商機"""
    id: str = ""
    name: str
    amount: float = 0.0
    currency: str = "BRL"
    sales_type: Optional[str] = None
    type: Optional[str] = None
    close_date: Optional[str] = None
    account_id: Optional[str] = None
    contact_id: Optional[str] = None
    experimental_classes: List[ExperimentalClassIn] = []


class OpportunityUpdate(BaseModel):
    """更新商機"""
    name: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    sales_type: Optional[str] = None
    type: Optional[str] = None
    close_date: Optional[str] = None
    loss_reason: Optional[str] = None
    financial_status: Optional[str] = None
    account_id: Optional[str] = None
    contact_id: Optional[str] = None
    experimental_classes: Optional[List[ExperimentalClassIn]] = None


class OpportunityMove(BaseModel):
    """Drag-and-drop between stages; columns by id or title"""
    source_stage: str
    dest_stage: str
    loss_reason: Optional[str] = None
    patch: Dict[str, Any] = {}


def _card_view(card: OpportunityCard, stage: str) -> Dict[str, Any]:
    return {**card.to_dict(), "stage": stage}


# === Endpoints ===

@router.get("", response_model=List[Dict[str, Any]])
async def list_opportunity_columns(store: CrmStore = Depends(get_store)):
    """Funnel board, column by column"""
    return [col.to_dict() for col in store.get_opportunities()]


@router.post("", response_model=Dict[str, Any])
async def create_opportunity(request: OpportunityCreate, store: CrmStore = Depends(get_store)):
    data = request.model_dump()
    data["experimental_classes"] = [ExperimentalClass(**c) for c in data["experimental_classes"]]
    card = store.add_opportunity(OpportunityCard(**data))
    _, stage = store.get_opportunity_by_id(card.id)
    return _card_view(card, stage)


@router.get("/{opp_id}", response_model=Dict[str, Any])
async def get_opportunity(opp_id: str, store: CrmStore = Depends(get_store)):
    found = store.get_opportunity_by_id(opp_id)
    if not found:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    card, stage = found
    return _card_view(card, stage)


@router.put("/{opp_id}", response_model=Dict[str, Any])
async def update_opportunity(
    opp_id: str,
    request: OpportunityUpdate,
    store: CrmStore = Depends(get_store),
):
    found = store.get_opportunity_by_id(opp_id)
    if not found:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    card, stage = found

    updates = request.model_dump(exclude_unset=True)
    if updates.get("experimental_classes") is not None:
        updates["experimental_classes"] = [ExperimentalClass(**c) for c in updates["experimental_classes"]]
    for key, value in updates.items():
        setattr(card, key, value)

    result = store.update_opportunity(card)
    if not result:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return _card_view(result, stage)


@router.post("/{opp_id}/move", response_model=Dict[str, Any])
async def move_opportunity(
    opp_id: str,
    request: OpportunityMove,
    store: CrmStore = Depends(get_store),
):
    patch = dict(request.patch)
    if request.loss_reason:
        patch["loss_reason"] = request.loss_reason

    result = store.move_opportunity(opp_id, request.source_stage, request.dest_stage, patch or None)
    if not result:
        raise HTTPException(status_code=404, detail="Opportunity or stage not found")
    _, stage = store.get_opportunity_by_id(opp_id)
    return _card_view(result, stage)


@router.delete("/{opp_id}")
async def delete_opportunity(opp_id: str, store: CrmStore = Depends(get_store)):
    if not store.delete_opportunity(opp_id):
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return {"message": f"Opportunity {opp_id} deleted"}


@router.get("/{opp_id}/proposals", response_model=List[Dict[str, Any]])
async def list_opportunity_proposals(opp_id: str, store: CrmStore = Depends(get_store)):
    return [p.to_dict() for p in store.get_proposals_by_opportunity(opp_id)]
