"""
Opportunity Pipeline Repository

Sales funnel board: CRUD + move between stage columns.
"""

import copy
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from app.crm.board import PipelineBoard, PipelineColumn
from app.crm.models import (
    CREATION_STAGE,
    OPPORTUNITY_STAGE_ORDER,
    OpportunityCard,
    display_status_for,
)

logger = logging.getLogger(__name__)


class OpportunityRepository:
    """
    Opportunity 儲存庫

    Stage is column membership. Any column may move to any other column;
    the funnel order is a display convention only.
    """

    def __init__(self):
        self._board: PipelineBoard[OpportunityCard] = PipelineBoard(
            [s.value for s in OPPORTUNITY_STAGE_ORDER], id_prefix="opp-col"
        )

    def list(self) -> List[PipelineColumn[OpportunityCard]]:
        return self._board.snapshot()

    def find_by_id(self, opp_id: str) -> Optional[Tuple[OpportunityCard, str]]:
        """(card, stage name), or None"""
        return self._board.find(opp_id)

    def create(self, card: OpportunityCard) -> OpportunityCard:
        """Insert at the head of the creation column, whatever the caller set"""
        column = self._board.column_titled(CREATION_STAGE.value)
        status, color = display_status_for(column.title)
        new_card = replace(copy.deepcopy(card), status=status, status_color=color.value)
        self._board.insert_head(column, new_card)
        logger.info(f"Created opportunity: {new_card.id} - {new_card.name}")
        return copy.deepcopy(new_card)

    def update(self, card: OpportunityCard) -> Optional[OpportunityCard]:
        """Replace in place; never migrates columns"""
        if not self._board.replace(copy.deepcopy(card)):
            logger.debug(f"update_opportunity: {card.id} not found")
            return None
        return copy.deepcopy(card)

    def move(
        self,
        opp_id: str,
        from_column: str,
        to_column: str,
        patch: Optional[Dict[str, Any]] = None,
    ) -> Optional[OpportunityCard]:
        """
        Move a card between columns (by id or title).

        Display status follows the destination column, then the optional
        patch is applied on top. Missing column or card is a no-op.
        """
        source = self._board.column(from_column)
        dest = self._board.column(to_column)
        if source is None or dest is None:
            logger.debug(f"move_opportunity: column {from_column!r} or {to_column!r} not found")
            return None

        idx = source.index_of(opp_id)
        if idx == -1:
            logger.debug(f"move_opportunity: {opp_id} not in {source.title!r}")
            return None

        status, color = display_status_for(dest.title)
        updates: Dict[str, Any] = {"status": status, "status_color": color.value}
        updates.update(_known_fields(patch or {}))

        if source is dest:
            if patch:
                source.cards[idx] = replace(source.cards[idx], **updates)
            return copy.deepcopy(source.cards[idx])

        card = self._board.pop(source, opp_id)
        moved = replace(card, **updates)
        self._board.append(dest, moved)
        logger.info(f"Moved opportunity {opp_id}: {source.title} -> {dest.title}")
        return copy.deepcopy(moved)

    def delete(self, opp_id: str) -> bool:
        removed = self._board.remove_everywhere(opp_id)
        if removed:
            logger.info(f"Deleted opportunity: {opp_id}")
        return removed > 0


def _known_fields(patch: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys that are not card fields; id is immutable"""
    allowed = set(OpportunityCard.__dataclass_fields__) - {"id"}
    return {k: v for k, v in patch.items() if k in allowed}
