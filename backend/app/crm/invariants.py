"""
Cross-Entity Invariants

- At most one Accepted proposal per opportunity: accepting a proposal demotes
  its accepted siblings to Superseded before the new one is placed.
- Display names cached on proposal cards and tasks are recomputed from the
  referenced entities on read.
"""

import logging
from dataclasses import replace
from typing import Callable, List, Optional

from app.crm.board import PipelineBoard
from app.crm.models import (
    GlobalTask,
    ProposalCard,
    ProposalStatus,
)

logger = logging.getLogger(__name__)


def demote_accepted_siblings(
    board: PipelineBoard[ProposalCard],
    opportunity_id: str,
    keep_id: str,
) -> List[str]:
    """
    Relabel every other Accepted proposal of the opportunity as Superseded
    and move it to the head of the Superseded column (first column if the
    board has none). Returns the demoted ids.
    """
    accepted = board.select(
        lambda c: c.opportunity_id == opportunity_id
        and c.id != keep_id
        and c.status == ProposalStatus.ACCEPTED
    )
    target = board.column_titled(ProposalStatus.SUPERSEDED.value) or board.first_column

    demoted = []
    for column, card in accepted:
        board.pop(column, card.id)
        board.insert_head(target, replace(card, status=ProposalStatus.SUPERSEDED))
        demoted.append(card.id)
        logger.info(
            f"Proposal {card.id} superseded by {keep_id} (opportunity {opportunity_id})"
        )
    return demoted


def project_proposal(
    card: ProposalCard,
    opportunity_name: Optional[str],
    contact_name: Optional[str],
) -> ProposalCard:
    """Refresh cached names; keep the stamped snapshot when a parent is gone"""
    return replace(
        card,
        opportunity_name=opportunity_name or card.opportunity_name,
        contact_name=contact_name or card.contact_name,
    )


def project_task(
    task: GlobalTask,
    resolve_name: Callable[[str, str], Optional[str]],
) -> GlobalTask:
    """Fill related_object_name from the live entity"""
    if not task.related_object_id:
        return task
    name = resolve_name(task.related_object_type.value, task.related_object_id)
    if name is None:
        return task
    return replace(task, related_object_name=name)
