"""
Proposal Board API Endpoints

Every status change is routed through the store's update path, so accepting
a proposal here supersedes any previously accepted sibling.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.crm.models import Proposal, ProposalStatus
from app.crm.store import CrmStore, get_store

router = APIRouter()


# === Request Models ===

class PaymentInfoIn(BaseModel):
    installments: str = ""
    expiry_date: str = ""
    payment_methods: str = ""
    contract_period: str = ""
    contract_status: Optional[str] = None
    description: Optional[str] = None
    automated_contract: bool = False


class ProductItemIn(BaseModel):
    id: str
    label: str
    quantity: str = "1"
    tag: Optional[str] = None


class ProductGroupIn(BaseModel):
    id: str
    name: str
    quantity: str = "1"
    price: float = 0.0
    items: List[ProductItemIn] = []


class ProposalTaskIn(BaseModel):
    id: str
    title: str
    due_date: str = ""
    is_completed: bool = False


class ProposalCreate(BaseModel):
    id: str = ""
    opportunity_id: str
    title: str = ""
    display_id: str = ""
    status: str = ProposalStatus.DRAFT.value
    value: float = 0.0
    date: str = ""
    discount: Optional[str] = None
    payment_info: Optional[PaymentInfoIn] = None
    products: List[ProductGroupIn] = []
    tasks: List[ProposalTaskIn] = []


class ProposalUpdate(BaseModel):
    title: Optional[str] = None
    display_id: Optional[str] = None
    status: Optional[str] = None
    value: Optional[float] = None
    date: Optional[str] = None
    discount: Optional[str] = None
    payment_info: Optional[PaymentInfoIn] = None
    products: Optional[List[ProductGroupIn]] = None
    tasks: Optional[List[ProposalTaskIn]] = None


class ProposalMove(BaseModel):
    source_status: str
    dest_status: str


def _parse_status(status: str) -> ProposalStatus:
    try:
        return ProposalStatus(status)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid status: {status}")


# === Endpoints ===

@router.get("", response_model=List[Dict[str, Any]])
async def list_proposal_columns(
    opportunity_id: Optional[str] = None,
    store: CrmStore = Depends(get_store),
):
    """Status board; flat list when filtered by opportunity"""
    if opportunity_id:
        return [p.to_dict() for p in store.get_proposals_by_opportunity(opportunity_id)]
    return [col.to_dict() for col in store.get_proposals_columns()]


@router.post("", response_model=Dict[str, Any])
async def create_proposal(request: ProposalCreate, store: CrmStore = Depends(get_store)):
    data = request.model_dump()
    data["status"] = _parse_status(request.status)
    if not store.get_opportunity_by_id(request.opportunity_id):
        raise HTTPException(status_code=404, detail="Opportunity not found")

    card = store.add_proposal(Proposal(**data))
    if not card:
        raise HTTPException(status_code=400, detail=f"No column for status {request.status}")
    return store.get_proposal_by_id(card.id).to_dict()


@router.get("/{proposal_id}", response_model=Dict[str, Any])
async def get_proposal(proposal_id: str, store: CrmStore = Depends(get_store)):
    card = store.get_proposal_by_id(proposal_id)
    if not card:
        raise HTTPException(status_code=404, detail="Proposal not found")
    return card.to_dict()


@router.put("/{proposal_id}", response_model=Dict[str, Any])
async def update_proposal(
    proposal_id: str,
    request: ProposalUpdate,
    store: CrmStore = Depends(get_store),
):
    updates = request.model_dump(exclude_unset=True)
    if "status" in updates:
        updates["status"] = _parse_status(updates["status"])

    card = store.patch_proposal(proposal_id, updates)
    if not card:
        raise HTTPException(status_code=404, detail="Proposal not found")
    return card.to_dict()


@router.post("/{proposal_id}/move", response_model=Dict[str, Any])
async def move_proposal(
    proposal_id: str,
    request: ProposalMove,
    store: CrmStore = Depends(get_store),
):
    card = store.move_proposal(proposal_id, request.source_status, request.dest_status)
    if not card:
        raise HTTPException(status_code=404, detail="Proposal or status column not found")
    return card.to_dict()


@router.delete("/{proposal_id}")
async def delete_proposal(proposal_id: str, store: CrmStore = Depends(get_store)):
    if not store.delete_proposal(proposal_id):
        raise HTTPException(status_code=404, detail="Proposal not found")
    return {"message": f"Proposal {proposal_id} deleted"}
