"""
search.py -- Case-insensitive substring search over the three record sets.

No ranking, no fuzzy matching. A record matches when any of its searchable
fields contains the normalized term. Results keep collection order.
"""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from .models import MAX_RESULTS, Dataset, EntityKind, SearchHits

T = TypeVar("T")

SEARCH_FIELDS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.ASSEMBLY: ("serial_number", "sales_order", "description"),
    EntityKind.DRIVE: ("enclosure_sn", "drive_sn", "drive_manufacturer", "model", "part_number"),
    EntityKind.TICKET: ("rma", "serial", "drive", "old_diagnosis", "new_diagnosis"),
}


class AmbiguousQueryError(ValueError):
    """Raised when one entity kind matches more records than can be shown."""

    def __init__(self, kind: EntityKind, count: int) -> None:
        super().__init__(f"Too many {kind.value} matches ({count})")
        self.kind = kind
        self.count = count


def normalize_term(term: str) -> str:
    return term.strip().upper()


def _field_text(record: object, name: str) -> str:
    value = getattr(record, name)
    # Integer fields (rma) are compared through their decimal string; 0 is absent.
    if isinstance(value, int):
        return str(value) if value else ""
    return value.upper()


def _matches(record: object, fields: Iterable[str], needle: str) -> bool:
    return any(needle in _field_text(record, name) for name in fields)


def search(records: Sequence[T], term: str, fields: Iterable[str]) -> tuple[T, ...]:
    """Return every record with a field containing term, in collection order.

    An empty (or all-whitespace) term matches every record; callers that do
    not want that must check for a blank term first.
    """
    needle = normalize_term(term)
    fields = tuple(fields)
    return tuple(r for r in records if _matches(r, fields, needle))


def _capped(records: Sequence[T], term: str, kind: EntityKind, limit: int) -> tuple[T, ...]:
    found = search(records, term, SEARCH_FIELDS[kind])
    if len(found) > limit:
        raise AmbiguousQueryError(kind, len(found))
    return found


def search_all(dataset: Dataset, term: str, limit: int = MAX_RESULTS) -> SearchHits:
    """Search assemblies, then drives, then tickets.

    Raises AmbiguousQueryError for the first kind whose match count exceeds
    limit; later kinds are not searched.
    """
    assemblies = _capped(dataset.assemblies, term, EntityKind.ASSEMBLY, limit)
    drives = _capped(dataset.drives, term, EntityKind.DRIVE, limit)
    tickets = _capped(dataset.tickets, term, EntityKind.TICKET, limit)
    return SearchHits(assemblies=assemblies, drives=drives, tickets=tickets)
