"""
Lead Funnel API Endpoints
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.crm.models import Lead, LeadStage
from app.crm.store import CrmStore, get_store

router = APIRouter()


class LeadCreate(BaseModel):
    id: str = ""
    name: str
    email: str = ""
    phone: str = ""
    source: str = ""
    company: Optional[str] = None
    priority: str = "Normal"
    note: Optional[str] = None
    stage: str = LeadStage.NEW_LEAD.value


class LeadUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    source: Optional[str] = None
    company: Optional[str] = None
    priority: Optional[str] = None
    note: Optional[str] = None


class LeadMove(BaseModel):
    source_stage: str
    dest_stage: str
    disqualification_reason: Optional[str] = None


def _lead_view(lead: Lead, stage: str) -> Dict[str, Any]:
    return {**lead.to_dict(), "stage": stage}


@router.get("", response_model=List[Dict[str, Any]])
async def list_lead_columns(store: CrmStore = Depends(get_store)):
    return [col.to_dict() for col in store.get_leads()]


@router.post("", response_model=Dict[str, Any])
async def create_lead(request: LeadCreate, store: CrmStore = Depends(get_store)):
    data = request.model_dump(exclude={"stage"})
    lead = store.add_lead(Lead(**data), request.stage)
    if not lead:
        raise HTTPException(status_code=400, detail=f"Invalid stage: {request.stage}")
    return _lead_view(lead, store.get_lead_by_id(lead.id)[1])


@router.get("/{lead_id}", response_model=Dict[str, Any])
async def get_lead(lead_id: str, store: CrmStore = Depends(get_store)):
    found = store.get_lead_by_id(lead_id)
    if not found:
        raise HTTPException(status_code=404, detail="Lead not found")
    return _lead_view(*found)


@router.put("/{lead_id}", response_model=Dict[str, Any])
async def update_lead(lead_id: str, request: LeadUpdate, store: CrmStore = Depends(get_store)):
    found = store.get_lead_by_id(lead_id)
    if not found:
        raise HTTPException(status_code=404, detail="Lead not found")
    lead, stage = found
    for key, value in request.model_dump(exclude_unset=True).items():
        setattr(lead, key, value)
    return _lead_view(store.update_lead(lead), stage)


@router.post("/{lead_id}/move", response_model=Dict[str, Any])
async def move_lead(lead_id: str, request: LeadMove, store: CrmStore = Depends(get_store)):
    dest = next(
        (col for col in store.get_leads() if request.dest_stage in (col.id, col.title)),
        None,
    )
    if dest and dest.title == LeadStage.DISQUALIFIED.value and not request.disqualification_reason:
        raise HTTPException(status_code=400, detail="disqualification_reason is required")

    lead = store.move_lead(
        lead_id,
        request.source_stage,
        request.dest_stage,
        request.disqualification_reason,
    )
    if not lead:
        raise HTTPException(status_code=404, detail="Lead or stage not found")
    return _lead_view(lead, store.get_lead_by_id(lead_id)[1])


@router.delete("/{lead_id}")
async def delete_lead(lead_id: str, store: CrmStore = Depends(get_store)):
    if not store.delete_lead(lead_id):
        raise HTTPException(status_code=404, detail="Lead not found")
    return {"message": f"Lead {lead_id} deleted"}
