"""
correlator.py -- Expands anchor records into a nested, deduplicated report.

Links are followed by predicate on every call, never cached:
  Assembly.serial_number <- Drive.enclosure_sn
  Drive.drive_sn         <- Ticket.drive
  Assembly.serial_number <- Ticket.serial

Traversal order is fixed: matched assemblies (with their drives, each
drive's tickets, then the assembly's remaining tickets), then matched drives
not already shown (with their tickets), then matched tickets not already
shown. A PrintedKeys instance lives for exactly one query cycle.
"""

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Optional

from .models import Assembly, Dataset, Drive, EntityKind, ReportLine, SearchHits, Ticket


def _identity(key, record) -> Hashable:
    # Unpopulated keys ("" / 0) would collapse unrelated records together;
    # fall back to the record value itself.
    return key if key else record


@dataclass
class PrintedKeys:
    assemblies: set = field(default_factory=set)
    drives: set = field(default_factory=set)
    tickets: set = field(default_factory=set)

    def claim_assembly(self, assembly: Assembly) -> bool:
        """Mark the assembly as shown. Returns False if it already was."""
        return _claim(self.assemblies, _identity(assembly.serial_number, assembly))

    def claim_drive(self, drive: Drive) -> bool:
        return _claim(self.drives, _identity(drive.drive_sn, drive))

    def claim_ticket(self, ticket: Ticket) -> bool:
        return _claim(self.tickets, _identity(ticket.rma, ticket))


def _claim(seen: set, key: Hashable) -> bool:
    if key in seen:
        return False
    seen.add(key)
    return True


# ---------------------------------------------------------------------------
# Relationship predicates -- an empty key never joins
# ---------------------------------------------------------------------------


def drives_in(assembly: Assembly, drives: tuple[Drive, ...]) -> list[Drive]:
    serial = assembly.serial_number
    if not serial:
        return []
    return [d for d in drives if d.enclosure_sn == serial]


def tickets_for_drive(drive: Drive, tickets: tuple[Ticket, ...]) -> list[Ticket]:
    drive_sn = drive.drive_sn
    if not drive_sn:
        return []
    return [t for t in tickets if t.drive == drive_sn]


def tickets_for_assembly(assembly: Assembly, tickets: tuple[Ticket, ...]) -> list[Ticket]:
    serial = assembly.serial_number
    if not serial:
        return []
    return [t for t in tickets if t.serial == serial]


# ---------------------------------------------------------------------------
# Expansion
# ---------------------------------------------------------------------------


def expand(hits: SearchHits, dataset: Dataset, printed: Optional[PrintedKeys] = None) -> tuple[ReportLine, ...]:
    """Return the report lines for one query cycle in display order."""
    printed = printed if printed is not None else PrintedKeys()
    lines: list[ReportLine] = []

    def emit_tickets(tickets: list[Ticket], depth: int) -> None:
        for ticket in tickets:
            if printed.claim_ticket(ticket):
                lines.append(ReportLine(EntityKind.TICKET, ticket, depth))

    def emit_drive(drive: Drive, depth: int) -> None:
        if printed.claim_drive(drive):
            lines.append(ReportLine(EntityKind.DRIVE, drive, depth))
            emit_tickets(tickets_for_drive(drive, dataset.tickets), depth + 1)

    for assembly in hits.assemblies:
        if not printed.claim_assembly(assembly):
            continue
        lines.append(ReportLine(EntityKind.ASSEMBLY, assembly, 0))
        for drive in drives_in(assembly, dataset.drives):
            emit_drive(drive, 1)
        emit_tickets(tickets_for_assembly(assembly, dataset.tickets), 1)

    for drive in hits.drives:
        emit_drive(drive, 0)

    emit_tickets(list(hits.tickets), 0)

    return tuple(lines)
