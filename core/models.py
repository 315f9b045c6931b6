from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union

# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

# A single entity kind returning more rows than this is too vague to expand.
MAX_RESULTS = 25

# Warranty window measured from the decoded build date.
WARRANTY_DAYS = 3 * 365


class EntityKind(str, Enum):
    ASSEMBLY = "assembly"
    DRIVE = "drive"
    TICKET = "ticket"


class WarrantyStatus(str, Enum):
    UNKNOWN = "unknown"
    IN_WARRANTY = "in_warranty"
    OUT_OF_WARRANTY = "out_of_warranty"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Assembly:
    serial_number: str = ""
    built_date: int = 0  # legacy serial date in ms, 0 = not recorded
    built_by: str = ""
    description: str = ""
    sales_order: str = ""


@dataclass(frozen=True)
class Drive:
    enclosure_sn: str = ""  # -> Assembly.serial_number
    drive_sn: str = ""
    drive_manufacturer: str = ""
    model: str = ""
    part_number: str = ""


@dataclass(frozen=True)
class Ticket:
    rma: int = 0  # 0 = no RMA number
    serial: str = ""  # -> Assembly.serial_number
    drive: str = ""  # -> Drive.drive_sn
    old_diagnosis: str = ""
    new_diagnosis: str = ""


Record = Union[Assembly, Drive, Ticket]


@dataclass(frozen=True)
class Dataset:
    """The three record sets, loaded once and never mutated afterwards."""

    assemblies: tuple[Assembly, ...] = ()
    drives: tuple[Drive, ...] = ()
    tickets: tuple[Ticket, ...] = ()


# ---------------------------------------------------------------------------
# Search and report values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SearchHits:
    """Anchor records matched directly by a search term, per entity kind."""

    assemblies: tuple[Assembly, ...] = ()
    drives: tuple[Drive, ...] = ()
    tickets: tuple[Ticket, ...] = ()

    def is_empty(self) -> bool:
        return not (self.assemblies or self.drives or self.tickets)


@dataclass(frozen=True)
class ReportLine:
    kind: EntityKind
    record: Record
    depth: int = 0


# ---------------------------------------------------------------------------
# Startup summary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ManufacturerEntry:
    name: str
    count: int
    parent: str  # canonical name used for color grouping


@dataclass(frozen=True)
class Summary:
    """Unique counts and ranked tables shown once after loading.

    reference_names holds the top manufacturers that act as candidate
    parents, in rank order; colors are assigned against that order.
    """

    unique_manufacturers: int
    unique_builders: int
    unique_enclosures: int
    top_manufacturers: tuple[ManufacturerEntry, ...] = ()
    top_builders: tuple[tuple[str, int], ...] = ()
    reference_names: tuple[str, ...] = ()
    parents: dict[str, str] = field(default_factory=dict)

    def rows(self) -> list[tuple[Optional[ManufacturerEntry], Optional[tuple[str, int]]]]:
        """Pair the two top lists positionally for side-by-side display."""
        size = max(len(self.top_manufacturers), len(self.top_builders))
        rows = []
        for i in range(size):
            manufacturer = self.top_manufacturers[i] if i < len(self.top_manufacturers) else None
            builder = self.top_builders[i] if i < len(self.top_builders) else None
            rows.append((manufacturer, builder))
        return rows


# ---------------------------------------------------------------------------
# Query outcomes -- one per input class, produced by core/pipeline
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Blank:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class FilterUnsupported:
    text: str


@dataclass(frozen=True)
class DateDecoded:
    raw: int
    value: date


@dataclass(frozen=True)
class InvalidDate:
    text: str


@dataclass(frozen=True)
class Ambiguous:
    kind: EntityKind
    count: int


@dataclass(frozen=True)
class NoResults:
    term: str


@dataclass(frozen=True)
class Report:
    term: str
    lines: tuple[ReportLine, ...]


Outcome = Union[Blank, Quit, FilterUnsupported, DateDecoded, InvalidDate, Ambiguous, NoResults, Report]
