"""
Pydantic models for the ASM / DWE / ZEN JSON snapshot files.

These Pydantic v2 models define the on-disk wire contract. They are
intentionally separate from the dataclasses in core/models.py, which own the
internal domain representation. snapshot/loader.py maps between the two.

Field aliases are the exact keys the spreadsheet exports use, spaces
included ("Enclosure SN"). Missing keys default to the "not populated"
values ("" / 0) and null is treated the same way.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models import Assembly, Drive, Ticket

# Spreadsheet exports sometimes emit purely numeric serials as JSON numbers.
_CONFIG = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


def _none_to_zero(value: Any) -> Any:
    return 0 if value is None else value


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class AssemblyIn(BaseModel):
    model_config = _CONFIG

    serial_number: str = Field(default="", alias="SerialNumber")
    built_date: int = Field(default=0, alias="BuiltDate")
    built_by: str = Field(default="", alias="BuiltBy")
    description: str = Field(default="", alias="Description")
    sales_order: str = Field(default="", alias="SalesOrder")

    null_strings = field_validator("serial_number", "built_by", "description", "sales_order", mode="before")(
        _none_to_empty
    )
    null_ints = field_validator("built_date", mode="before")(_none_to_zero)

    def to_domain(self) -> Assembly:
        return Assembly(
            serial_number=self.serial_number,
            built_date=self.built_date,
            built_by=self.built_by,
            description=self.description,
            sales_order=self.sales_order,
        )


class DriveIn(BaseModel):
    model_config = _CONFIG

    enclosure_sn: str = Field(default="", alias="Enclosure SN")
    drive_sn: str = Field(default="", alias="Drive SN")
    drive_manufacturer: str = Field(default="", alias="Drive Manufacturer")
    model: str = Field(default="", alias="Model")
    part_number: str = Field(default="", alias="Part Number")

    null_strings = field_validator(
        "enclosure_sn", "drive_sn", "drive_manufacturer", "model", "part_number", mode="before"
    )(_none_to_empty)

    def to_domain(self) -> Drive:
        return Drive(
            enclosure_sn=self.enclosure_sn,
            drive_sn=self.drive_sn,
            drive_manufacturer=self.drive_manufacturer,
            model=self.model,
            part_number=self.part_number,
        )


class TicketIn(BaseModel):
    model_config = _CONFIG

    rma: int = Field(default=0, alias="RMA")
    serial: str = Field(default="", alias="Serial")
    drive: str = Field(default="", alias="Drive")
    old_diagnosis: str = Field(default="", alias="OldDiagnosis")
    new_diagnosis: str = Field(default="", alias="NewDiagnosis")

    null_strings = field_validator("serial", "drive", "old_diagnosis", "new_diagnosis", mode="before")(_none_to_empty)
    null_ints = field_validator("rma", mode="before")(_none_to_zero)

    def to_domain(self) -> Ticket:
        return Ticket(
            rma=self.rma,
            serial=self.serial,
            drive=self.drive,
            old_diagnosis=self.old_diagnosis,
            new_diagnosis=self.new_diagnosis,
        )


# ---------------------------------------------------------------------------
# File roots -- each export wraps its rows in a single top-level key
# ---------------------------------------------------------------------------


class AssembliesFile(BaseModel):
    model_config = _CONFIG

    rows: list[AssemblyIn] = Field(alias="ASM")


class DrivesFile(BaseModel):
    model_config = _CONFIG

    rows: list[DriveIn] = Field(alias="DWE")


class TicketsFile(BaseModel):
    model_config = _CONFIG

    rows: list[TicketIn] = Field(alias="ZEN")
