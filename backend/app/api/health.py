"""
Health Check Endpoints
"""

from fastapi import APIRouter, Depends

from app.crm.store import CrmStore, get_store

router = APIRouter()


@router.get("/health")
async def health_check(store: CrmStore = Depends(get_store)):
    """Liveness plus a record count per board, so an empty store is visible"""
    return {
        "status": "healthy",
        "service": "kanban-crm-backend",
        "records": {
            "leads": sum(len(col.cards) for col in store.get_leads()),
            "opportunities": sum(len(col.cards) for col in store.get_opportunities()),
            "proposals": sum(len(col.cards) for col in store.get_proposals_columns()),
            "tasks": len(store.get_tasks()),
        },
    }
