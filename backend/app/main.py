"""
Kanban CRM - FastAPI Application Entry Point
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import accounts, contacts, dashboard, health, leads, opportunities, proposals, tasks
from app.crm.seed import seed_demo_data
from app.crm.store import CrmStore, set_store

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup: one store for the whole process
    store = CrmStore()
    if os.getenv("CRM_SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes"):
        seed_demo_data(store)
    set_store(store)

    logger.info("Kanban CRM is starting up...")
    yield
    # Shutdown
    set_store(None)
    logger.info("Kanban CRM is shutting down...")


app = FastAPI(
    title="Kanban CRM",
    description="Leads, opportunities, proposals and tasks on stage-based boards",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CRM_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(opportunities.router, prefix="/api/v1/opportunities", tags=["Sales Funnel"])
app.include_router(proposals.router, prefix="/api/v1/proposals", tags=["Proposals"])
app.include_router(accounts.router, prefix="/api/v1/accounts", tags=["Accounts"])
app.include_router(contacts.router, prefix="/api/v1/contacts", tags=["Contacts"])
app.include_router(contacts.students_router, prefix="/api/v1/students", tags=["Students"])
app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["Tasks"])
app.include_router(leads.router, prefix="/api/v1/leads", tags=["Lead Funnel"])
app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": "Kanban CRM",
        "version": "0.1.0",
        "status": "operational",
        "docs": "/docs",
    }
