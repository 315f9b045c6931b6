"""
tests/conftest.py -- Shared fixtures for Glyph DB tests.

This module provides:
  - sample_dataset: a small Dataset with one fully linked assembly
    (SN100 -> drive D1 -> ticket 55), loose drives/tickets, and unkeyed rows
  - write_snapshots: writes ASM/DWE/ZEN JSON files into tmp_path
  - an autouse fixture that resets the formatter color toggle and the
    settings singleton so tests never leak state into each other

Color is forced off by default: assertions compare plain text.
"""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path

import pytest

from core import formatter
from core.config import get_settings
from core.models import Assembly, Dataset, Drive, Ticket

# 2021-01-01T00:00:00Z in milliseconds; decodes to 2021-01-03.
BUILT_2021 = 1_609_459_200_000


@pytest.fixture(autouse=True)
def _isolate_state(monkeypatch) -> Generator[None, None, None]:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    formatter.disable_color()
    get_settings.cache_clear()
    yield
    formatter.reset_color()
    get_settings.cache_clear()


@pytest.fixture
def sample_dataset() -> Dataset:
    assemblies = (
        Assembly(
            serial_number="SN100",
            built_date=BUILT_2021,
            built_by="ACME",
            description="Storage node 4U",
            sales_order="SO-7001",
        ),
        Assembly(serial_number="SN200", built_by="ACME", description="Compute node", sales_order="SO-7002"),
        Assembly(serial_number="SN300", built_by="Globex", description="Storage node 2U", sales_order="SO-7003"),
    )
    drives = (
        Drive(
            enclosure_sn="SN100",
            drive_sn="D1",
            drive_manufacturer="Seagate",
            model="ST4000",
            part_number="P-1",
        ),
        Drive(
            enclosure_sn="SN100",
            drive_sn="D2",
            drive_manufacturer="Seagate-OEM",
            model="ST4000",
            part_number="P-1",
        ),
        Drive(enclosure_sn="SN300", drive_sn="D3", drive_manufacturer="WD", model="WD40", part_number="P-2"),
        Drive(enclosure_sn="LOOSE9", drive_sn="D9", drive_manufacturer="WD", model="WD80", part_number="P-3"),
    )
    tickets = (
        Ticket(rma=55, serial="SN100", drive="D1", old_diagnosis="Clicking", new_diagnosis="Head crash"),
        Ticket(rma=56, serial="SN100", drive="", old_diagnosis="PSU fault", new_diagnosis="Replaced PSU"),
        Ticket(rma=77, serial="", drive="D9", old_diagnosis="SMART errors", new_diagnosis="Reallocated sectors"),
        Ticket(rma=88, serial="ELSEWHERE", drive="", old_diagnosis="Fan noise", new_diagnosis="No fault found"),
    )
    return Dataset(assemblies=assemblies, drives=drives, tickets=tickets)


@pytest.fixture
def write_snapshots(tmp_path: Path):
    """Return a writer: write_snapshots(asm=[...], dwe=[...], zen=[...]) -> tmp_path.

    asm_text / dwe_text / zen_text write their content verbatim, for malformed files.
    """

    def _write(asm=None, dwe=None, zen=None, asm_text=None, dwe_text=None, zen_text=None) -> Path:
        for name, key, rows, text in (
            ("ASM.json", "ASM", asm, asm_text),
            ("DWE.json", "DWE", dwe, dwe_text),
            ("ZEN.json", "ZEN", zen, zen_text),
        ):
            if text is not None:
                (tmp_path / name).write_text(text, encoding="utf-8")
            elif rows is not None:
                (tmp_path / name).write_text(json.dumps({key: rows}), encoding="utf-8")
        return tmp_path

    return _write
