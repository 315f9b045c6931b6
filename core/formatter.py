"""
formatter.py — Renders query outcomes and the startup summary for the terminal,
or as JSON.

render_* functions return strings; print_* wrappers write them to stdout.
"""

import json
import os
import re
import sys
from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from .dates import build_date, warranty_status
from .models import (
    Ambiguous,
    Assembly,
    Blank,
    DateDecoded,
    Drive,
    EntityKind,
    FilterUnsupported,
    InvalidDate,
    NoResults,
    Outcome,
    Quit,
    Report,
    ReportLine,
    Summary,
    Ticket,
    WarrantyStatus,
)

INDENT = "    "
COLUMN_WIDTH = 50  # visible width of the manufacturer column in the summary
SEPARATOR = "-" * 105

# ---------------------------------------------------------------------------
# ANSI color control
# ---------------------------------------------------------------------------

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from a string."""
    return _ANSI_RE.sub("", text)


def _use_color() -> bool:
    """Return True if stdout is a TTY and color has not been disabled.

    Respects NO_COLOR env var (https://no-color.org) and checks sys.stdout.isatty().
    Can be overridden by calling disable_color() / enable_color().
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


_color_enabled: Optional[bool] = None  # None = auto-detect


def disable_color() -> None:
    """Force-disable color output (called when --no-color flag is set)."""
    global _color_enabled
    _color_enabled = False


def enable_color() -> None:
    global _color_enabled
    _color_enabled = True


def reset_color() -> None:
    """Return to auto-detection."""
    global _color_enabled
    _color_enabled = None


def _color_active() -> bool:
    if _color_enabled is not None:
        return _color_enabled
    return _use_color()


# ---------------------------------------------------------------------------
# ANSI code helpers — return text unchanged when color is off
# ---------------------------------------------------------------------------

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
BRIGHT_RED = "\033[91m"
BRIGHT_GREEN = "\033[92m"
BRIGHT_YELLOW = "\033[93m"
BRIGHT_BLUE = "\033[94m"
BRIGHT_MAGENTA = "\033[95m"
BRIGHT_CYAN = "\033[96m"
BOLD = "\033[1m"
RESET = "\033[0m"

# Parent manufacturer palette, cycled in rank order.
MANUFACTURER_PALETTE = (
    RED,
    GREEN,
    YELLOW,
    BLUE,
    MAGENTA,
    CYAN,
    BRIGHT_RED,
    BRIGHT_GREEN,
    BRIGHT_YELLOW,
    BRIGHT_BLUE,
    BRIGHT_MAGENTA,
    BRIGHT_CYAN,
)


def _rgb(r: int, g: int, b: int) -> str:
    return f"\033[38;2;{r};{g};{b}m"


# Builder palette (24-bit pastels).
BUILDER_PALETTE = (
    _rgb(255, 179, 186),  # pink
    _rgb(255, 223, 186),  # peach
    _rgb(255, 255, 186),  # yellow
    _rgb(186, 255, 201),  # green
    _rgb(186, 225, 255),  # blue
    _rgb(201, 186, 255),  # purple
)


def paint(text: str, *codes: str) -> str:
    """Wrap text in the given ANSI codes if color is active."""
    codes = tuple(c for c in codes if c)
    if not codes or not _color_active():
        return text
    return f"{''.join(codes)}{text}{RESET}"


def _label(text: str) -> str:
    return paint(text, CYAN)


def _header(text: str) -> str:
    return paint(text, GREEN, BOLD)


# ---------------------------------------------------------------------------
# Legend — color assignment, computed once after the summary
# ---------------------------------------------------------------------------


def assign_colors(names, palette: tuple[str, ...]) -> dict[str, str]:
    """Give each name a palette slot in order, wrapping around."""
    return {name: palette[i % len(palette)] for i, name in enumerate(names)}


@dataclass(frozen=True)
class Legend:
    parent_colors: dict[str, str] = field(default_factory=dict)
    builder_colors: dict[str, str] = field(default_factory=dict)
    parents: dict[str, str] = field(default_factory=dict)

    def manufacturer_color(self, name: str) -> str:
        name = name.strip()
        return self.parent_colors.get(self.parents.get(name, name), "")

    def builder_color(self, name: str) -> str:
        return self.builder_colors.get(name.strip(), "")


def build_legend(summary: Summary) -> Legend:
    return Legend(
        parent_colors=assign_colors(summary.reference_names, MANUFACTURER_PALETTE),
        builder_colors=assign_colors([name for name, _ in summary.top_builders], BUILDER_PALETTE),
        parents=dict(summary.parents),
    )


# ---------------------------------------------------------------------------
# Record blocks
# ---------------------------------------------------------------------------


def _field(indent: str, label: str, value: str, color: str = "") -> str:
    return f"{indent}{_label(label)} {paint(value, color)}"


def render_assembly(
    assembly: Assembly,
    depth: int = 0,
    legend: Optional[Legend] = None,
    today: Optional[date] = None,
) -> list[str]:
    legend = legend or Legend()
    pad = INDENT * depth
    inner = INDENT * (depth + 1)
    lines = [f"{pad}{_header('Assembly:')}"]

    if assembly.serial_number:
        lines.append(_field(inner, "Serial Number:", assembly.serial_number))

    built = build_date(assembly)
    if built is not None:
        lines.append(_field(inner, "Built Date:", built.isoformat()))
        if warranty_status(assembly.built_date, today) is WarrantyStatus.IN_WARRANTY:
            lines.append(f"{inner}{paint('Drive is under warranty', GREEN, BOLD)}")
        else:
            lines.append(f"{inner}{paint('Drive is out of warranty', RED, BOLD)}")

    if assembly.built_by:
        lines.append(_field(inner, "Built by:", assembly.built_by, legend.builder_color(assembly.built_by)))
    if assembly.description:
        lines.append(_field(inner, "Description:", assembly.description))
    if assembly.sales_order:
        lines.append(_field(inner, "Sales Order:", assembly.sales_order))
    return lines


def render_drive(drive: Drive, depth: int = 0, legend: Optional[Legend] = None) -> list[str]:
    legend = legend or Legend()
    pad = INDENT * depth
    inner = INDENT * (depth + 1)
    lines = [f"{pad}{_header('Drive:')}"]

    if drive.enclosure_sn:
        lines.append(_field(inner, "Enclosure SN:", drive.enclosure_sn))
    if drive.drive_sn:
        lines.append(_field(inner, "Drive SN:", drive.drive_sn))
    if drive.drive_manufacturer:
        color = legend.manufacturer_color(drive.drive_manufacturer)
        lines.append(_field(inner, "Drive Manufacturer:", drive.drive_manufacturer, color))
    if drive.model:
        lines.append(_field(inner, "Model:", drive.model))
    if drive.part_number:
        lines.append(_field(inner, "Part Number:", drive.part_number))
    return lines


def render_ticket(ticket: Ticket, depth: int = 0) -> list[str]:
    pad = INDENT * depth
    inner = INDENT * (depth + 1)
    lines = [f"{pad}{_header('Zendesk Ticket:')}"]

    if ticket.rma != 0:
        lines.append(_field(inner, "RMA:", str(ticket.rma)))
    if ticket.serial:
        lines.append(_field(inner, "Serial:", ticket.serial))
    if ticket.drive:
        lines.append(_field(inner, "Drive:", ticket.drive))
    if ticket.old_diagnosis:
        lines.append(_field(inner, "Old Diagnosis:", ticket.old_diagnosis))
    if ticket.new_diagnosis:
        lines.append(_field(inner, "New Diagnosis:", ticket.new_diagnosis))
    return lines


def render_line(line: ReportLine, legend: Optional[Legend] = None, today: Optional[date] = None) -> list[str]:
    if line.kind is EntityKind.ASSEMBLY:
        return render_assembly(line.record, line.depth, legend, today)
    if line.kind is EntityKind.DRIVE:
        return render_drive(line.record, line.depth, legend)
    return render_ticket(line.record, line.depth)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

_KIND_PLURAL = {
    EntityKind.ASSEMBLY: "assemblies",
    EntityKind.DRIVE: "drives",
    EntityKind.TICKET: "Zendesk tickets",
}


def render_outcome(outcome: Outcome, legend: Optional[Legend] = None, today: Optional[date] = None) -> str:
    """Return the terminal text for an outcome ("" for a blank line of input)."""
    if isinstance(outcome, Report):
        rendered: list[str] = []
        for line in outcome.lines:
            rendered.extend(render_line(line, legend, today))
        return "\n".join(rendered)
    if isinstance(outcome, Ambiguous):
        plural = _KIND_PLURAL[outcome.kind]
        return paint(f"Too many results found in {plural} ({outcome.count}). Please refine your search.", RED, BOLD)
    if isinstance(outcome, NoResults):
        return paint("No matching results found.", RED, BOLD)
    if isinstance(outcome, DateDecoded):
        return f"{_label('Parsed Date')}: {outcome.value.isoformat()}"
    if isinstance(outcome, InvalidDate):
        return paint("Invalid date format", RED)
    if isinstance(outcome, FilterUnsupported):
        return paint("Filtering previous results is not supported.", YELLOW)
    if isinstance(outcome, Quit):
        return paint("Exiting Glyph Database. Goodbye!", GREEN, BOLD)
    if isinstance(outcome, Blank):
        return ""
    raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")


def print_outcome(outcome: Outcome, legend: Optional[Legend] = None) -> None:
    text = render_outcome(outcome, legend)
    if text:
        print(text)


# ---------------------------------------------------------------------------
# Startup summary
# ---------------------------------------------------------------------------


def _pad_visible(text: str, width: int) -> str:
    """Left-justify text to width, ignoring ANSI codes in the length."""
    return text + " " * max(0, width - len(strip_ansi(text)))


def render_summary(summary: Summary, legend: Optional[Legend] = None, top: int = 15) -> str:
    legend = legend or build_legend(summary)
    lines = [
        "",
        paint("Counts of unique items:", CYAN, BOLD),
        f"Unique Drive Manufacturers: {summary.unique_manufacturers}",
        f"Unique Builders: {summary.unique_builders}",
        f"Unique Enclosure S/N's: {summary.unique_enclosures}",
        "",
        paint(f"Top {top} Manufacturers and Builders:", CYAN, BOLD),
    ]

    for manufacturer, builder in summary.rows():
        left = ""
        if manufacturer is not None:
            color = legend.parent_colors.get(manufacturer.parent, "")
            left = f"{paint(manufacturer.name, color)} ({manufacturer.count})"
        right = ""
        if builder is not None:
            name, count = builder
            right = f"{paint(name, legend.builder_color(name))} ({count})"
        lines.append(f"{_pad_visible(left, COLUMN_WIDTH)} {right}".rstrip())

    lines.append(paint(SEPARATOR, BLUE))
    return "\n".join(lines)


def print_summary(summary: Summary, legend: Optional[Legend] = None, top: int = 15) -> None:
    print(render_summary(summary, legend, top))
    print()


# ---------------------------------------------------------------------------
# JSON export
# ---------------------------------------------------------------------------


def _jsonable(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def outcome_to_dict(outcome: Outcome) -> dict:
    """Return a JSON-serializable dict tagged with the outcome type."""
    return {"outcome": type(outcome).__name__, **_jsonable(asdict(outcome))}


def to_json(outcome: Outcome) -> str:
    return json.dumps(outcome_to_dict(outcome), indent=2)
