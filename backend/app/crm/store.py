"""
CRM Store

The one object that owns every collection. Built once at start-up and
handed to callers (see get_store / set_store); there is no import-time
state.

Not-found never raises: mutations return None / False instead.
"""

import functools
import logging
import threading
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from app.crm.board import KeyedCollection, PipelineColumn
from app.crm.invariants import project_proposal, project_task
from app.crm.lead_repository import LeadRepository
from app.crm.models import (
    CLOSED_STAGES,
    Account,
    Contact,
    GlobalTask,
    Lead,
    OpportunityCard,
    OpportunityStage,
    Proposal,
    ProposalCard,
    ProposalStatus,
    RelatedObjectType,
    Student,
    today_iso,
)
from app.crm.opportunity_repository import OpportunityRepository
from app.crm.proposal_repository import ProposalRepository

logger = logging.getLogger(__name__)


def _serialized(method):
    """Run the whole call under the store lock"""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class CrmStore:
    """Relational in-memory store with pipeline transition rules"""

    def __init__(self):
        self._lock = threading.RLock()
        self._opportunities = OpportunityRepository()
        self._proposals = ProposalRepository()
        self._leads = LeadRepository()
        self._accounts: KeyedCollection[Account] = KeyedCollection()
        self._contacts: KeyedCollection[Contact] = KeyedCollection()
        self._students: KeyedCollection[Student] = KeyedCollection()
        self._tasks: KeyedCollection[GlobalTask] = KeyedCollection()

    # === Opportunities ===

    @_serialized
    def get_opportunities(self) -> List[PipelineColumn[OpportunityCard]]:
        return self._opportunities.list()

    @_serialized
    def get_opportunity_by_id(self, opp_id: str) -> Optional[Tuple[OpportunityCard, str]]:
        return self._opportunities.find_by_id(opp_id)

    @_serialized
    def update_opportunity(self, card: OpportunityCard) -> Optional[OpportunityCard]:
        return self._opportunities.update(card)

    @_serialized
    def move_opportunity(
        self,
        card_id: str,
        source_stage: str,
        dest_stage: str,
        patch: Optional[Dict[str, Any]] = None,
    ) -> Optional[OpportunityCard]:
        return self._opportunities.move(card_id, source_stage, dest_stage, patch)

    @_serialized
    def add_opportunity(self, card: OpportunityCard) -> OpportunityCard:
        return self._opportunities.create(card)

    @_serialized
    def delete_opportunity(self, opp_id: str) -> bool:
        return self._opportunities.delete(opp_id)

    # === Proposals ===

    @_serialized
    def get_proposals_columns(self) -> List[PipelineColumn[ProposalCard]]:
        columns = self._proposals.list()
        for col in columns:
            col.cards = [self._project_proposal(c) for c in col.cards]
        return columns

    @_serialized
    def get_proposals_by_opportunity(self, opportunity_id: str) -> List[ProposalCard]:
        return [self._project_proposal(c) for c in self._proposals.by_opportunity(opportunity_id)]

    @_serialized
    def get_proposal_by_id(self, proposal_id: str) -> Optional[ProposalCard]:
        card = self._proposals.get(proposal_id)
        return self._project_proposal(card) if card else None

    @_serialized
    def add_proposal(self, proposal: Proposal) -> Optional[ProposalCard]:
        opp_name, contact_name = self._proposal_names(proposal.opportunity_id)
        return self._proposals.create(proposal, opp_name, contact_name)

    @_serialized
    def update_proposal(self, proposal: Proposal) -> Optional[ProposalCard]:
        card = self._proposals.update(proposal)
        return self._project_proposal(card) if card else None

    @_serialized
    def patch_proposal(self, proposal_id: str, updates: Dict[str, Any]) -> Optional[ProposalCard]:
        card = self._proposals.patch(proposal_id, updates)
        return self._project_proposal(card) if card else None

    @_serialized
    def move_proposal(
        self,
        card_id: str,
        source_status: str,
        dest_status: str,
    ) -> Optional[ProposalCard]:
        card = self._proposals.move(card_id, source_status, dest_status)
        return self._project_proposal(card) if card else None

    @_serialized
    def delete_proposal(self, proposal_id: str) -> bool:
        return self._proposals.delete(proposal_id)

    # === Accounts / Contacts / Students ===

    @_serialized
    def get_accounts(self) -> List[Account]:
        return self._accounts.list()

    @_serialized
    def get_account_by_id(self, account_id: str) -> Optional[Account]:
        return self._accounts.get(account_id)

    @_serialized
    def update_account(self, account: Account) -> Optional[Account]:
        return self._accounts.update(account)

    @_serialized
    def delete_account(self, account_id: str) -> bool:
        return self._accounts.delete(account_id)

    @_serialized
    def add_account(self, account: Account) -> Account:
        logger.info(f"Created account: {account.id} - {account.name}")
        return self._accounts.add(account)

    @_serialized
    def get_contacts(self) -> List[Contact]:
        return self._contacts.list()

    @_serialized
    def get_contact_by_id(self, contact_id: str) -> Optional[Contact]:
        return self._contacts.get(contact_id)

    @_serialized
    def update_contact(self, contact: Contact) -> Optional[Contact]:
        return self._contacts.update(contact)

    @_serialized
    def delete_contact(self, contact_id: str) -> bool:
        return self._contacts.delete(contact_id)

    @_serialized
    def add_contact(self, contact: Contact) -> Contact:
        return self._contacts.add(contact)

    @_serialized
    def get_students(self) -> List[Student]:
        return self._students.list()

    @_serialized
    def get_student_by_id(self, student_id: str) -> Optional[Student]:
        return self._students.get(student_id)

    @_serialized
    def update_student(self, student: Student) -> Optional[Student]:
        return self._students.update(student)

    @_serialized
    def delete_student(self, student_id: str) -> bool:
        return self._students.delete(student_id)

    @_serialized
    def add_student(self, student: Student) -> Student:
        return self._students.add(student)

    # === Tasks ===

    @_serialized
    def get_tasks(self) -> List[GlobalTask]:
        return [project_task(t, self._related_name) for t in self._tasks.list()]

    @_serialized
    def get_task_by_id(self, task_id: str) -> Optional[GlobalTask]:
        task = self._tasks.get(task_id)
        return project_task(task, self._related_name) if task else None

    @_serialized
    def get_tasks_by_related(self, object_type: str, object_id: str) -> List[GlobalTask]:
        try:
            kind = RelatedObjectType(object_type)
        except ValueError:
            logger.debug(f"get_tasks_by_related: unknown type {object_type!r}")
            return []
        return [
            project_task(t, self._related_name)
            for t in self._tasks.list()
            if t.related_object_type == kind and t.related_object_id == object_id
        ]

    @_serialized
    def update_task(self, task: GlobalTask) -> Optional[GlobalTask]:
        stored = self._tasks.get(task.id)
        if stored is None:
            logger.debug(f"update_task: {task.id} not found")
            return None
        relinked = (
            stored.related_object_type != task.related_object_type
            or stored.related_object_id != task.related_object_id
        )
        if relinked:
            task = self._stamp_related_name(task)
        return self._tasks.update(task)

    @_serialized
    def delete_task(self, task_id: str) -> bool:
        return self._tasks.delete(task_id)

    @_serialized
    def add_task(self, task: GlobalTask) -> GlobalTask:
        logger.info(f"Created task: {task.id} - {task.title}")
        return self._tasks.add(project_task(task, self._related_name))

    @_serialized
    def toggle_task_completion(self, task_id: str) -> Optional[GlobalTask]:
        task = self._tasks.get(task_id)
        if task is None:
            logger.debug(f"toggle_task_completion: {task_id} not found")
            return None
        done = not task.is_completed
        return self._tasks.update(
            replace(task, is_completed=done, completed_at=today_iso() if done else None)
        )

    # === Leads ===

    @_serialized
    def get_leads(self) -> List[PipelineColumn[Lead]]:
        return self._leads.list()

    @_serialized
    def get_lead_by_id(self, lead_id: str) -> Optional[Tuple[Lead, str]]:
        return self._leads.find_by_id(lead_id)

    @_serialized
    def add_lead(self, lead: Lead, stage: Optional[str] = None) -> Optional[Lead]:
        if stage:
            return self._leads.create(lead, stage)
        return self._leads.create(lead)

    @_serialized
    def update_lead(self, lead: Lead) -> Optional[Lead]:
        return self._leads.update(lead)

    @_serialized
    def move_lead(
        self,
        lead_id: str,
        source_stage: str,
        dest_stage: str,
        disqualification_reason: Optional[str] = None,
    ) -> Optional[Lead]:
        return self._leads.move(lead_id, source_stage, dest_stage, disqualification_reason)

    @_serialized
    def delete_lead(self, lead_id: str) -> bool:
        return self._leads.delete(lead_id)

    # === Summary ===

    @_serialized
    def get_pipeline_summary(self) -> Dict[str, Any]:
        """Counts and amounts per funnel stage"""
        by_stage = {}
        for col in self._opportunities.list():
            by_stage[col.title] = {
                "count": len(col.cards),
                "total_amount": sum(c.amount or 0 for c in col.cards),
            }

        closed = {s.value for s in CLOSED_STAGES}
        open_value = sum(v["total_amount"] for k, v in by_stage.items() if k not in closed)
        tasks = self._tasks.list()

        return {
            "by_stage": by_stage,
            "open_count": sum(v["count"] for k, v in by_stage.items() if k not in closed),
            "open_pipeline_value": open_value,
            "won_value": by_stage[OpportunityStage.WON.value]["total_amount"],
            "lost_count": by_stage[OpportunityStage.LOST.value]["count"],
            "proposals_accepted": sum(
                1 for p in self._proposals.all_cards() if p.status == ProposalStatus.ACCEPTED
            ),
            "open_tasks": len([t for t in tasks if not t.is_completed]),
        }

    # === Name resolution ===

    def _opportunity_name(self, opp_id: str) -> Optional[str]:
        found = self._opportunities.find_by_id(opp_id)
        return found[0].name if found else None

    def _primary_contact_name(self, opp_id: str) -> Optional[str]:
        """Opportunity's own contact, else its account's main contact"""
        found = self._opportunities.find_by_id(opp_id)
        if not found:
            return None
        card = found[0]
        contact_id = card.contact_id
        if not contact_id and card.account_id:
            account = self._accounts.get(card.account_id)
            contact_id = account.main_contact_id if account else None
        if not contact_id:
            return None
        contact = self._contacts.get(contact_id)
        return contact.name if contact else None

    def _proposal_names(self, opp_id: str) -> Tuple[Optional[str], Optional[str]]:
        return self._opportunity_name(opp_id), self._primary_contact_name(opp_id)

    def _project_proposal(self, card: ProposalCard) -> ProposalCard:
        opp_name, contact_name = self._proposal_names(card.opportunity_id)
        return project_proposal(card, opp_name, contact_name)

    def _stamp_related_name(self, task: GlobalTask) -> GlobalTask:
        """Re-resolve the cached name after a relink; the old one is never kept"""
        name = None
        if task.related_object_id:
            name = self._related_name(task.related_object_type.value, task.related_object_id)
        return replace(task, related_object_name=name or "")

    def _related_name(self, object_type: str, object_id: str) -> Optional[str]:
        kind = RelatedObjectType(object_type)
        if kind == RelatedObjectType.ACCOUNT:
            account = self._accounts.get(object_id)
            return account.name if account else None
        if kind == RelatedObjectType.CONTACT:
            contact = self._contacts.get(object_id)
            return contact.name if contact else None
        if kind == RelatedObjectType.OPPORTUNITY:
            return self._opportunity_name(object_id)
        found = self._leads.find_by_id(object_id)
        return found[0].name if found else None


# === Global accessor ===

_store: Optional[CrmStore] = None


def get_store() -> CrmStore:
    """取得共享的 CrmStore 實例（FastAPI dependency）"""
    global _store
    if _store is None:
        _store = CrmStore()
    return _store


def set_store(store: Optional[CrmStore]) -> None:
    """設定共享實例（啟動時 / 測試注入）"""
    global _store
    _store = store
