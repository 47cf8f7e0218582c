"""Daily pump-duty domain models and enums."""

import logging
from enum import StrEnum
from itertools import zip_longest
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from dutydesk.core.calendar_math import shift_duration_hours
from dutydesk.core.errors import MalformedDateError


logger = logging.getLogger(__name__)


class DutyStatus(StrEnum):
    """Daily duty lifecycle state."""

    SCHEDULED = "SCHEDULED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def from_label(cls, value: object) -> "DutyStatus | None":
        """Case-insensitive lookup; None when blank or unrecognized."""
        text = str(value or "").strip().upper()
        return next((member for member in cls if member.value == text), None)

    @classmethod
    def coerce(cls, value: object) -> "DutyStatus":
        """Absent or blank status means SCHEDULED."""
        text = str(value or "").strip().upper()
        return cls(text) if text else cls.SCHEDULED


class PumpAssignment(BaseModel):
    """One product dispensed through one gun during a duty."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    product_id: str | None = Field(default=None, description="Product reference")
    gun_id: str | None = Field(default=None, description="Gun used for this product")


def _as_id_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list | tuple):
        return list(value)
    return [value]


class DailyDuty(BaseModel):
    """Recurring pump-duty assignment for one employee on one day."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(..., description="Duty ID assigned by the backend")
    employee_id: str = Field(
        default="",
        validation_alias=AliasChoices("employee_id", "empId", "employeeId"),
        description="Employee on duty",
    )
    organization_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("organization_id", "organizationId"),
        description="Owning organization",
    )
    duty_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("duty_date", "dutyDate"),
        description="Duty day as delivered by the backend (YYYY-MM-DD or ISO)",
    )
    assignments: list[PumpAssignment] = Field(default_factory=list, description="Product/gun pairs")
    shift_start: str | None = Field(
        default=None,
        validation_alias=AliasChoices("shift_start", "shiftStart"),
        description="Shift start, HH:mm",
    )
    shift_end: str | None = Field(
        default=None,
        validation_alias=AliasChoices("shift_end", "shiftEnd"),
        description="Shift end, HH:mm (may be past midnight)",
    )
    total_hours: str | None = Field(
        default=None,
        validation_alias=AliasChoices("total_hours", "totalHours"),
        description="Hours supplied by the backend, if any",
    )
    status: DutyStatus = Field(default=DutyStatus.SCHEDULED, description="Current lifecycle state")
    updated_at: str | None = Field(
        default=None,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        description="Backend version stamp, if supplied",
    )

    @model_validator(mode="before")
    @classmethod
    def _pair_products_with_guns(cls, data: Any) -> Any:
        """Fold the backend's parallel productIds/gunIds arrays into pairs."""
        if not isinstance(data, dict) or "assignments" in data:
            return data

        data = dict(data)
        products = _as_id_list(data.pop("productIds", None) or data.pop("products", None) or data.pop("productId", None))
        guns = _as_id_list(data.pop("gunIds", None) or data.pop("guns", None))
        for leftover in ("productIds", "products", "productId", "gunIds", "guns"):
            data.pop(leftover, None)

        if len(products) != len(guns):
            logger.warning(
                "Duty %s has %d products but %d guns; unmatched entries left empty",
                data.get("id"),
                len(products),
                len(guns),
            )
        data["assignments"] = [
            {"product_id": product_id, "gun_id": gun_id} for product_id, gun_id in zip_longest(products, guns)
        ]
        return data

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> DutyStatus:
        return DutyStatus.coerce(value)

    @field_validator("employee_id", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("duty_date", "shift_start", "shift_end", "total_hours", "updated_at", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if info.field_name == "total_hours" and isinstance(value, int | float) and not isinstance(value, bool):
            return f"{value:.1f}"
        return str(value)

    @property
    def product_ids(self) -> list[str]:
        return [a.product_id for a in self.assignments if a.product_id]

    @property
    def gun_ids(self) -> list[str]:
        return [a.gun_id for a in self.assignments if a.gun_id]

    @property
    def schedule_date(self) -> str | None:
        """Date the filters and sorting work against."""
        return self.duty_date

    @property
    def hours(self) -> str:
        """Backend-supplied hours, else the length of the shift."""
        if self.total_hours:
            return self.total_hours
        try:
            return shift_duration_hours(self.shift_start, self.shift_end)
        except MalformedDateError:
            logger.warning("Duty %s has malformed shift %r-%r", self.id, self.shift_start, self.shift_end)
            return shift_duration_hours(None, None)

    def search_text(self) -> str:
        """Lower-cased concatenation of every user-visible field."""
        parts = [
            self.duty_date,
            " ".join(self.product_ids),
            " ".join(self.gun_ids),
            self.employee_id,
            self.status,
            self.shift_start,
            self.shift_end,
        ]
        return " ".join(str(part) for part in parts if part).lower()
