from __future__ import annotations

from app.crm.models import Lead, LeadStage


def test_new_lead_goes_to_first_stage(store):
    store.add_lead(Lead(id="l1", name="Beatriz"))
    _, stage = store.get_lead_by_id("l1")
    assert stage == LeadStage.NEW_LEAD.value


def test_disqualification_reason_only_kept_in_disqualified(store):
    store.add_lead(Lead(id="l1", name="Beatriz"))

    lead = store.move_lead("l1", "New Lead", "Disqualified", "No budget")
    assert lead.disqualification_reason == "No budget"

    lead = store.move_lead("l1", "Disqualified", "Follow-up", "ignored")
    assert lead.disqualification_reason is None
    assert store.get_lead_by_id("l1")[1] == "Follow-up"


def test_same_stage_move_and_unknown_lead_are_noops(store):
    store.add_lead(Lead(id="l1", name="Beatriz"))

    assert store.move_lead("l1", "New Lead", "New Lead") is None
    assert store.move_lead("ghost", "New Lead", "Qualified") is None
    assert store.get_lead_by_id("l1")[1] == "New Lead"


def test_delete_lead(store):
    store.add_lead(Lead(id="l1", name="Beatriz"), "Qualified")
    assert store.delete_lead("l1") is True
    assert store.get_lead_by_id("l1") is None
