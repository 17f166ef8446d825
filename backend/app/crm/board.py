"""
Entity Collections

PipelineBoard: ordered columns, each exclusively owning its cards.
KeyedCollection: ordered list of records keyed by id.

Both hand out deep copies so that callers never hold a mutable handle to
stored state; mutation goes through the repositories only.
"""

import copy
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class PipelineColumn(Generic[T]):
    """A stage / status bucket"""
    id: str
    title: str
    cards: List[T] = field(default_factory=list)

    def index_of(self, card_id: str) -> int:
        for i, card in enumerate(self.cards):
            if card.id == card_id:
                return i
        return -1

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "cards": [c.to_dict() for c in self.cards],
        }


class PipelineBoard(Generic[T]):
    """Ordered columns of cards; a card lives in exactly one column"""

    def __init__(self, titles: Iterable[str], id_prefix: str = "col"):
        self._columns: List[PipelineColumn[T]] = [
            PipelineColumn(id=f"{id_prefix}-{i + 1}", title=title)
            for i, title in enumerate(titles)
        ]

    # === Column lookup ===

    def column(self, key: str) -> Optional[PipelineColumn[T]]:
        """Resolve a column by id or by title"""
        for col in self._columns:
            if col.id == key or col.title == key:
                return col
        return None

    def column_titled(self, title: str) -> Optional[PipelineColumn[T]]:
        for col in self._columns:
            if col.title == title:
                return col
        return None

    @property
    def first_column(self) -> PipelineColumn[T]:
        return self._columns[0]

    # === Reads (copies) ===

    def snapshot(self) -> List[PipelineColumn[T]]:
        return copy.deepcopy(self._columns)

    def cards(self) -> List[T]:
        """All cards, flattened in column order"""
        return [copy.deepcopy(c) for col in self._columns for c in col.cards]

    def locate(self, card_id: str) -> Optional[Tuple[PipelineColumn[T], int]]:
        """(column, index) of the first card with the id"""
        for col in self._columns:
            idx = col.index_of(card_id)
            if idx != -1:
                return col, idx
        return None

    def find(self, card_id: str) -> Optional[Tuple[T, str]]:
        """(card copy, column title); first match wins"""
        found = self.locate(card_id)
        if not found:
            return None
        col, idx = found
        return copy.deepcopy(col.cards[idx]), col.title

    # === Writes ===

    def insert_head(self, column: PipelineColumn[T], card: T) -> None:
        column.cards.insert(0, card)

    def append(self, column: PipelineColumn[T], card: T) -> None:
        column.cards.append(card)

    def pop(self, column: PipelineColumn[T], card_id: str) -> Optional[T]:
        idx = column.index_of(card_id)
        if idx == -1:
            return None
        return column.cards.pop(idx)

    def pop_anywhere(self, card_id: str) -> Optional[T]:
        """Remove the card from whichever column holds it"""
        found = self.locate(card_id)
        if not found:
            return None
        col, idx = found
        return col.cards.pop(idx)

    def replace(self, card: T) -> bool:
        found = self.locate(card.id)
        if not found:
            return False
        col, idx = found
        col.cards[idx] = card
        return True

    def remove_everywhere(self, card_id: str) -> int:
        """Drop every card with the id; returns how many were removed"""
        removed = 0
        for col in self._columns:
            before = len(col.cards)
            col.cards = [c for c in col.cards if c.id != card_id]
            removed += before - len(col.cards)
        return removed

    def select(self, predicate: Callable[[T], bool]) -> List[Tuple[PipelineColumn[T], T]]:
        """Live (column, card) pairs matching predicate; internal use only"""
        return [(col, c) for col in self._columns for c in col.cards if predicate(c)]


class KeyedCollection(Generic[T]):
    """Newest-first list of records matched by id"""

    def __init__(self, items: Optional[Iterable[T]] = None):
        self._items: List[T] = [copy.deepcopy(i) for i in (items or [])]

    def list(self) -> List[T]:
        return copy.deepcopy(self._items)

    def get(self, item_id: str) -> Optional[T]:
        for item in self._items:
            if item.id == item_id:
                return copy.deepcopy(item)
        return None

    def add(self, item: T) -> T:
        self._items.insert(0, copy.deepcopy(item))
        return copy.deepcopy(item)

    def update(self, item: T) -> Optional[T]:
        for i, existing in enumerate(self._items):
            if existing.id == item.id:
                self._items[i] = copy.deepcopy(item)
                return copy.deepcopy(item)
        return None

    def delete(self, item_id: str) -> bool:
        before = len(self._items)
        self._items = [i for i in self._items if i.id != item_id]
        return len(self._items) != before

    def __len__(self) -> int:
        return len(self._items)
