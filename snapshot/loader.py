"""
snapshot/loader.py -- Reads the ASM / DWE / ZEN JSON exports into a Dataset.

A load failure (missing file, unreadable file, invalid JSON, schema
mismatch) is never fatal: it is logged and that record set comes back
empty, so the rest of the tool keeps working with whatever did load.

Usage:
    dataset = load_dataset(settings)
    assemblies = load_assemblies(Path("ASM.json"))
"""

import json
import logging
from pathlib import Path
from typing import Optional, TypeVar

from pydantic import BaseModel, ValidationError

from core.config import Settings, get_settings
from core.models import Assembly, Dataset, Drive, Ticket
from snapshot.schema import AssembliesFile, DrivesFile, TicketsFile

logger = logging.getLogger("glyph.loader")

M = TypeVar("M", bound=BaseModel)


class LoadFailure(Exception):
    """A snapshot file could not be turned into records."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def _read_json(path: Path) -> object:
    """Read and decode a JSON file. Raises LoadFailure on any problem."""
    file_path = Path(path).resolve()
    if not file_path.is_file():
        raise LoadFailure(file_path, "not a readable file")
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoadFailure(file_path, f"could not read file: {e}") from e
    except UnicodeDecodeError as e:
        raise LoadFailure(file_path, f"not valid UTF-8: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadFailure(file_path, f"invalid JSON: {e}") from e


def _parse(path: Path, model: type[M]) -> M:
    data = _read_json(path)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise LoadFailure(Path(path), f"unexpected structure ({e.error_count()} error(s))") from e


def _load_rows(path: Path, model: type[BaseModel]) -> Optional[list]:
    """Return the parsed rows, or None after logging a load failure."""
    try:
        root = _parse(path, model)
    except LoadFailure as e:
        logger.error("Error loading %s: %s", e.path, e.reason)
        if e.__cause__ is not None:
            logger.debug("Load failure detail for %s", e.path, exc_info=e.__cause__)
        return None
    return root.rows


def load_assemblies(path: Path) -> tuple[Assembly, ...]:
    rows = _load_rows(path, AssembliesFile)
    return tuple(row.to_domain() for row in rows) if rows else ()


def load_drives(path: Path) -> tuple[Drive, ...]:
    rows = _load_rows(path, DrivesFile)
    return tuple(row.to_domain() for row in rows) if rows else ()


def load_tickets(path: Path) -> tuple[Ticket, ...]:
    rows = _load_rows(path, TicketsFile)
    return tuple(row.to_domain() for row in rows) if rows else ()


def load_dataset(settings: Optional[Settings] = None) -> Dataset:
    """Load all three snapshots from settings.data_dir."""
    settings = settings or get_settings()
    return Dataset(
        assemblies=load_assemblies(settings.snapshot_path(settings.assemblies_file)),
        drives=load_drives(settings.snapshot_path(settings.drives_file)),
        tickets=load_tickets(settings.snapshot_path(settings.tickets_file)),
    )
