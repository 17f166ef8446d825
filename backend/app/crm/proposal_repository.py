"""
Proposal Pipeline Repository

Proposals sit in the column whose title equals their status. Every status
change, including drag-and-drop moves, goes through update() so the
single-Accepted rule is enforced on one path.
"""

import copy
import logging
from dataclasses import fields, replace
from typing import Any, Dict, List, Optional

from app.crm.board import PipelineBoard, PipelineColumn
from app.crm.invariants import demote_accepted_siblings
from app.crm.models import (
    DENORMALIZED_PROPOSAL_FIELDS,
    PROPOSAL_STATUS_ORDER,
    UNKNOWN_NAME,
    Proposal,
    ProposalCard,
    ProposalStatus,
)

logger = logging.getLogger(__name__)

_PROPOSAL_FIELDS = [f.name for f in fields(Proposal)]


class ProposalRepository:
    """Proposal 儲存庫"""

    def __init__(self):
        self._board: PipelineBoard[ProposalCard] = PipelineBoard(
            [s.value for s in PROPOSAL_STATUS_ORDER], id_prefix="prp-col"
        )

    # === Reads ===

    def list(self) -> List[PipelineColumn[ProposalCard]]:
        return self._board.snapshot()

    def all_cards(self) -> List[ProposalCard]:
        return self._board.cards()

    def by_opportunity(self, opportunity_id: str) -> List[ProposalCard]:
        return [c for c in self._board.cards() if c.opportunity_id == opportunity_id]

    def get(self, proposal_id: str) -> Optional[ProposalCard]:
        found = self._board.find(proposal_id)
        return found[0] if found else None

    # === Writes ===

    def create(
        self,
        proposal: Proposal,
        opportunity_name: Optional[str] = None,
        contact_name: Optional[str] = None,
    ) -> Optional[ProposalCard]:
        """
        Place a new proposal in the column of its status, stamping the
        display names. No-op when no column carries that status.
        """
        column = self._board.column_titled(ProposalStatus(proposal.status).value)
        if column is None:
            logger.debug(f"add_proposal: no column for status {proposal.status!r}")
            return None

        card = ProposalCard(
            **{name: copy.deepcopy(getattr(proposal, name)) for name in _PROPOSAL_FIELDS},
            opportunity_name=opportunity_name or UNKNOWN_NAME,
            contact_name=contact_name or UNKNOWN_NAME,
        )
        if card.status == ProposalStatus.ACCEPTED:
            demote_accepted_siblings(self._board, card.opportunity_id, keep_id=card.id)
        self._board.insert_head(column, card)
        logger.info(f"Created proposal: {card.id} ({card.status.value}) for {card.opportunity_id}")
        return copy.deepcopy(card)

    def update(self, proposal: Proposal) -> Optional[ProposalCard]:
        """
        Merge the proposal onto the stored card and file it under its
        (possibly new) status.

        If the new status is Accepted, accepted siblings are demoted first,
        so at most one Accepted proposal per opportunity survives.
        """
        found = self._board.locate(proposal.id)
        if found is None:
            logger.debug(f"update_proposal: {proposal.id} not found")
            return None
        previous = found[0].cards[found[1]]

        incoming = {name: copy.deepcopy(getattr(proposal, name)) for name in _PROPOSAL_FIELDS}
        merged = replace(previous, **incoming)
        for name in DENORMALIZED_PROPOSAL_FIELDS:
            setattr(merged, name, getattr(previous, name))

        if merged.status == ProposalStatus.ACCEPTED:
            demote_accepted_siblings(self._board, merged.opportunity_id, keep_id=merged.id)

        self._board.pop_anywhere(merged.id)
        target = self._board.column_titled(merged.status.value) or self._board.first_column
        self._board.insert_head(target, merged)

        if previous.status != merged.status:
            logger.info(f"Proposal {merged.id}: {previous.status.value} -> {merged.status.value}")
        return copy.deepcopy(merged)

    def patch(self, proposal_id: str, updates: Dict[str, Any]) -> Optional[ProposalCard]:
        """Field-level update routed through update()"""
        current = self.get(proposal_id)
        if current is None:
            return None
        allowed = {k: v for k, v in updates.items() if k in _PROPOSAL_FIELDS and k != "id"}
        return self.update(replace(current, **allowed))

    def move(self, proposal_id: str, from_status: str, to_status: str) -> Optional[ProposalCard]:
        """
        Drag-and-drop between status columns (by id or title).

        Same as update() with the destination title as the new status.
        """
        source = self._board.column(from_status)
        dest = self._board.column(to_status)
        if source is None or dest is None:
            logger.debug(f"move_proposal: column {from_status!r} or {to_status!r} not found")
            return None
        idx = source.index_of(proposal_id)
        if idx == -1:
            logger.debug(f"move_proposal: {proposal_id} not in {source.title!r}")
            return None

        card = source.cards[idx]
        return self.update(replace(card, status=ProposalStatus(dest.title)))

    def delete(self, proposal_id: str) -> bool:
        removed = self._board.remove_everywhere(proposal_id)
        if removed:
            logger.info(f"Deleted proposal: {proposal_id}")
        return removed > 0
