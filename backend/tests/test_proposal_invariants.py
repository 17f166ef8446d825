from __future__ import annotations

from app.crm.models import OpportunityCard, Proposal, ProposalStatus


def _status(store, proposal_id):
    return store.get_proposal_by_id(proposal_id).status


def _accepted(store, opportunity_id):
    return [
        p for p in store.get_proposals_by_opportunity(opportunity_id)
        if p.status == ProposalStatus.ACCEPTED
    ]


def _column_of(store, proposal_id):
    for col in store.get_proposals_columns():
        if any(c.id == proposal_id for c in col.cards):
            return col.title
    return None


def test_accepting_a_proposal_supersedes_the_previous_one(seeded_store):
    p1 = seeded_store.get_proposal_by_id("p1")
    p1.status = ProposalStatus.ACCEPTED

    seeded_store.update_proposal(p1)

    assert _status(seeded_store, "p2") == ProposalStatus.SUPERSEDED
    assert _status(seeded_store, "p1") == ProposalStatus.ACCEPTED
    siblings = seeded_store.get_proposals_by_opportunity("o1")
    assert {p.id for p in siblings} == {"p1", "p2"}
    assert len(_accepted(seeded_store, "o1")) == 1


def test_demoted_proposal_is_relocated_to_superseded_column(seeded_store):
    seeded_store.patch_proposal("p1", {"status": ProposalStatus.ACCEPTED})

    assert _column_of(seeded_store, "p2") == "Superseded"
    assert _column_of(seeded_store, "p1") == "Accepted"
    superseded = next(c for c in seeded_store.get_proposals_columns() if c.title == "Superseded")
    assert superseded.cards[0].id == "p2"


def test_move_to_accepted_goes_through_demotion(seeded_store):
    result = seeded_store.move_proposal("p1", "Sent", "Accepted")

    assert result.status == ProposalStatus.ACCEPTED
    assert _status(seeded_store, "p2") == ProposalStatus.SUPERSEDED
    assert len(_accepted(seeded_store, "o1")) == 1


def test_move_keeps_card_on_board(seeded_store):
    seeded_store.move_proposal("p1", "Sent", "Review")

    assert _column_of(seeded_store, "p1") == "Review"
    assert _status(seeded_store, "p1") == ProposalStatus.REVIEW
    total = sum(len(c.cards) for c in seeded_store.get_proposals_columns())
    assert total == 2


def test_move_is_noop_when_card_not_in_source_column(seeded_store):
    assert seeded_store.move_proposal("p1", "Draft", "Accepted") is None
    assert _status(seeded_store, "p2") == ProposalStatus.ACCEPTED
    assert _status(seeded_store, "p1") == ProposalStatus.SENT


def test_uniqueness_holds_across_a_sequence_of_transitions(seeded_store):
    seeded_store.add_proposal(Proposal(id="p3", opportunity_id="o1", status=ProposalStatus.DRAFT))
    steps = [
        ("p3", "Draft", "Accepted"),
        ("p1", "Sent", "Accepted"),
        ("p2", "Superseded", "Accepted"),
        ("p2", "Accepted", "Rejected"),
        ("p3", "Superseded", "Accepted"),
    ]
    for proposal_id, source, dest in steps:
        seeded_store.move_proposal(proposal_id, source, dest)
        assert len(_accepted(seeded_store, "o1")) <= 1

    assert [p.id for p in _accepted(seeded_store, "o1")] == ["p3"]


def test_acceptance_does_not_touch_other_opportunities(seeded_store):
    seeded_store.add_opportunity(OpportunityCard(id="o2", name="Other"))
    seeded_store.add_proposal(Proposal(id="q1", opportunity_id="o2", status=ProposalStatus.ACCEPTED))

    seeded_store.move_proposal("p1", "Sent", "Accepted")

    assert _status(seeded_store, "q1") == ProposalStatus.ACCEPTED


def test_update_of_unknown_proposal_changes_nothing(seeded_store):
    ghost = Proposal(id="ghost", opportunity_id="o1", status=ProposalStatus.ACCEPTED)

    assert seeded_store.update_proposal(ghost) is None
    assert _status(seeded_store, "p2") == ProposalStatus.ACCEPTED


def test_update_merges_fields_and_keeps_display_names(seeded_store):
    p1 = seeded_store.get_proposal_by_id("p1")
    incoming = Proposal(id="p1", opportunity_id="o1", title="Revised", status=ProposalStatus.REVIEW, value=999.0)

    updated = seeded_store.update_proposal(incoming)

    assert updated.title == "Revised"
    assert updated.value == 999.0
    assert updated.opportunity_name == p1.opportunity_name
    assert updated.contact_name == "Marina Almeida"
    assert _column_of(seeded_store, "p1") == "Review"


def test_creation_stamps_names_and_reads_follow_renames(seeded_store):
    p1 = seeded_store.get_proposal_by_id("p1")
    assert p1.opportunity_name == "Lucas - Matemática"
    assert p1.contact_name == "Marina Almeida"

    card, _ = seeded_store.get_opportunity_by_id("o1")
    card.name = "Lucas - Física"
    seeded_store.update_opportunity(card)

    assert seeded_store.get_proposal_by_id("p1").opportunity_name == "Lucas - Física"


def test_names_fall_back_to_snapshot_when_parent_is_gone(seeded_store):
    seeded_store.delete_opportunity("o1")

    p1 = seeded_store.get_proposal_by_id("p1")
    assert p1.opportunity_name == "Lucas - Matemática"


def test_proposal_for_unknown_opportunity_gets_placeholder_names(store):
    card = store.add_proposal(Proposal(id="p9", opportunity_id="nope"))
    assert card.opportunity_name == "Unknown"
    assert card.contact_name == "Unknown"


def test_creating_an_accepted_proposal_supersedes_siblings(seeded_store):
    seeded_store.add_proposal(Proposal(id="p4", opportunity_id="o1", status=ProposalStatus.ACCEPTED))

    assert _status(seeded_store, "p2") == ProposalStatus.SUPERSEDED
    assert [p.id for p in _accepted(seeded_store, "o1")] == ["p4"]


def test_delete_proposal(seeded_store):
    assert seeded_store.delete_proposal("p1") is True
    assert seeded_store.get_proposal_by_id("p1") is None
    assert seeded_store.delete_proposal("p1") is False
