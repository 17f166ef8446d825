"""
Lead Funnel Repository

In-memory lead board. A disqualification reason only lives on leads that
sit in the Disqualified column.
"""

import copy
import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from app.crm.board import PipelineBoard, PipelineColumn
from app.crm.models import LEAD_STAGE_ORDER, Lead, LeadStage

logger = logging.getLogger(__name__)


class LeadRepository:

    def __init__(self):
        self._board: PipelineBoard[Lead] = PipelineBoard(
            [s.value for s in LEAD_STAGE_ORDER], id_prefix="lead-col"
        )

    def list(self) -> List[PipelineColumn[Lead]]:
        return self._board.snapshot()

    def find_by_id(self, lead_id: str) -> Optional[Tuple[Lead, str]]:
        return self._board.find(lead_id)

    def create(self, lead: Lead, stage: str = LeadStage.NEW_LEAD.value) -> Optional[Lead]:
        column = self._board.column(stage)
        if column is None:
            return None
        new_lead = copy.deepcopy(lead)
        if column.title != LeadStage.DISQUALIFIED.value:
            new_lead.disqualification_reason = None
        self._board.insert_head(column, new_lead)
        logger.info(f"Created lead: {new_lead.id} - {new_lead.name} ({column.title})")
        return copy.deepcopy(new_lead)

    def update(self, lead: Lead) -> Optional[Lead]:
        if not self._board.replace(copy.deepcopy(lead)):
            logger.debug(f"update_lead: {lead.id} not found")
            return None
        return copy.deepcopy(lead)

    def move(
        self,
        lead_id: str,
        from_stage: str,
        to_stage: str,
        disqualification_reason: Optional[str] = None,
    ) -> Optional[Lead]:
        """Move between stages; same-stage moves are no-ops"""
        source = self._board.column(from_stage)
        dest = self._board.column(to_stage)
        if source is None or dest is None or source is dest:
            return None

        card = self._board.pop(source, lead_id)
        if card is None:
            logger.debug(f"move_lead: {lead_id} not in {source.title!r}")
            return None

        reason = disqualification_reason if dest.title == LeadStage.DISQUALIFIED.value else None
        moved = replace(card, disqualification_reason=reason)
        self._board.append(dest, moved)
        logger.info(f"Moved lead {lead_id}: {source.title} -> {dest.title}")
        return copy.deepcopy(moved)

    def delete(self, lead_id: str) -> bool:
        return self._board.remove_everywhere(lead_id) > 0
