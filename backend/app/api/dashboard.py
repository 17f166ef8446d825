"""
Dashboard Endpoints
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.crm.store import CrmStore, get_store

router = APIRouter()


@router.get("/summary", response_model=Dict[str, Any])
async def get_summary(store: CrmStore = Depends(get_store)):
    """Funnel totals per stage, open pipeline value, open tasks"""
    return store.get_pipeline_summary()
