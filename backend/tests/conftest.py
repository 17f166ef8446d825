from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `backend/` is on sys.path so `import app.*` works in tests.
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from app.crm.models import (  # noqa: E402
    Account,
    Contact,
    OpportunityCard,
    Proposal,
    ProposalStatus,
)
from app.crm.store import CrmStore  # noqa: E402


@pytest.fixture
def store() -> CrmStore:
    return CrmStore()


@pytest.fixture
def seeded_store(store: CrmStore) -> CrmStore:
    """One opportunity (o1) with a Sent proposal p1 and an Accepted proposal p2."""
    store.add_contact(Contact(id="c1", name="Marina Almeida", account_id="a1"))
    store.add_account(Account(id="a1", name="Família Almeida", main_contact_id="c1"))
    store.add_opportunity(OpportunityCard(id="o1", name="Lucas - Matemática", amount=1800.0, account_id="a1"))
    store.add_proposal(Proposal(id="p1", opportunity_id="o1", status=ProposalStatus.SENT, value=1000.0))
    store.add_proposal(Proposal(id="p2", opportunity_id="o1", status=ProposalStatus.ACCEPTED, value=1200.0))
    return store
