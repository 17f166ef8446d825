"""
CRM Core Module

Pipeline boards, keyed collections and the CrmStore façade.
"""

from app.crm.models import (
    Account,
    Contact,
    ExperimentalClass,
    GlobalTask,
    Lead,
    LeadStage,
    OpportunityCard,
    OpportunityStage,
    Proposal,
    ProposalCard,
    ProposalStatus,
    RelatedObjectType,
    Student,
)
from app.crm.store import CrmStore, get_store, set_store

__all__ = [
    # Models
    "Account",
    "Contact",
    "ExperimentalClass",
    "GlobalTask",
    "Lead",
    "LeadStage",
    "OpportunityCard",
    "OpportunityStage",
    "Proposal",
    "ProposalCard",
    "ProposalStatus",
    "RelatedObjectType",
    "Student",
    # Store
    "CrmStore",
    "get_store",
    "set_store",
]
