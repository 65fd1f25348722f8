"""Add-production-data wizard with existing-record collision handling.

The wizard walks the user through picking a month, entering the unit
matrix, entering the charge matrix and reviewing the values. Whenever the
month changes, and again when the last data-entry step is completed, the
store is probed for a record at the target ``(pk, sk)``. A hit diverts the
flow into a confirmation step and, if accepted, into an edit of the
existing record, so the wizard never creates a second record for a month.

The probe and the final write are separate store calls with no lock in
between. A create that loses that race is rejected by the store's
conditional write and the wizard falls back to the confirmation step.
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import structlog

from sitetracker.core.exceptions import (
    ConflictException,
    NotFoundException,
    StoreException,
    ValidationException,
)
from sitetracker.core.matrices import CHARGE_FIELDS, UNIT_FIELDS
from sitetracker.core.month_key import format_month_label, normalize_sort_key
from sitetracker.dal.production import ProductionDAL

logger = structlog.get_logger()


class EntryState(str, enum.Enum):
    SELECTING_DATE = "selecting_date"
    ENTERING_UNIT_MATRIX = "entering_unit_matrix"
    ENTERING_CHARGE_MATRIX = "entering_charge_matrix"
    REVIEW = "review"
    CONFIRMING_OVERWRITE = "confirming_overwrite"
    REVIEWING_EXISTING_FOR_EDIT = "reviewing_existing_for_edit"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


TERMINAL_STATES = (EntryState.SUBMITTED, EntryState.CANCELLED)
DATA_ENTRY_STATES = (
    EntryState.SELECTING_DATE,
    EntryState.ENTERING_UNIT_MATRIX,
    EntryState.ENTERING_CHARGE_MATRIX,
    EntryState.REVIEW,
)
_PREVIOUS_STEP = {
    EntryState.ENTERING_UNIT_MATRIX: EntryState.SELECTING_DATE,
    EntryState.ENTERING_CHARGE_MATRIX: EntryState.ENTERING_UNIT_MATRIX,
    EntryState.REVIEW: EntryState.ENTERING_CHARGE_MATRIX,
}


class WorkflowError(Exception):
    """An action was attempted from a state that does not allow it."""


@dataclass
class Notification:
    level: str
    message: str


def coerce_matrix(values: Mapping[str, Any], fields: Sequence[str]) -> Dict[str, float]:
    """Validate user-entered matrix values; blanks are skipped."""
    result = {}
    for name, value in values.items():
        if name not in fields:
            raise ValidationException(f"Unknown matrix field: {name}")
        if value is None or value == "":
            continue
        try:
            result[name] = float(value)
        except (TypeError, ValueError):
            raise ValidationException(f"{name} must be a valid number")
    return result


class ProductionEntryWorkflow:
    """State machine behind the "add production data" wizard for one site."""

    def __init__(self, productions: ProductionDAL, company_id: int, production_site_id: int):
        self.productions = productions
        self.company_id = company_id
        self.production_site_id = production_site_id
        self.state = EntryState.SELECTING_DATE
        self.sk: Optional[str] = None
        self.values: Dict[str, float] = {}
        self.existing: Optional[Dict[str, Any]] = None
        self.result: Optional[Dict[str, Any]] = None
        self.notifications: List[Notification] = []

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def is_edit(self) -> bool:
        return self.state == EntryState.REVIEWING_EXISTING_FOR_EDIT

    def _require(self, *states: EntryState) -> None:
        if self.state not in states:
            raise WorkflowError(f"Action not allowed in state '{self.state.value}'")

    def _notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level, message))

    def _transition(self, state: EntryState) -> EntryState:
        logger.debug(
            "Production entry transition",
            company_id=self.company_id,
            production_site_id=self.production_site_id,
            sk=self.sk,
            from_state=self.state.value,
            to_state=state.value,
        )
        self.state = state
        return state

    async def _probe(self) -> Optional[bool]:
        """Look for a record at the selected month.

        Returns ``None`` after a store failure, having already moved the
        wizard back to month selection.
        """
        try:
            self.existing = await self.productions.check_existing(
                self.company_id, self.production_site_id, self.sk
            )
        except StoreException as e:
            logger.warning("Existing-record check failed", sk=self.sk, error=e.message)
            self._notify("error", "Could not check for existing data. Please try again.")
            self.existing = None
            self._transition(EntryState.SELECTING_DATE)
            return None
        return self.existing is not None

    def _confirm_overwrite(self) -> EntryState:
        self._notify("warning", f"Data already exists for {format_month_label(self.sk)}")
        return self._transition(EntryState.CONFIRMING_OVERWRITE)

    async def select_month(self, sk: str) -> EntryState:
        """Pick (or change) the month being recorded."""
        self._require(*DATA_ENTRY_STATES)
        try:
            self.sk = normalize_sort_key(sk)
        except ValueError as e:
            self._notify("error", str(e))
            self.sk = None
            return self._transition(EntryState.SELECTING_DATE)

        found = await self._probe()
        if found is None:
            return self.state
        if found:
            return self._confirm_overwrite()
        if self.state == EntryState.SELECTING_DATE:
            return self._transition(EntryState.ENTERING_UNIT_MATRIX)
        return self.state

    def enter_unit_matrix(self, values: Mapping[str, Any]) -> EntryState:
        self._require(EntryState.ENTERING_UNIT_MATRIX)
        self.values.update(coerce_matrix(values, UNIT_FIELDS))
        return self._transition(EntryState.ENTERING_CHARGE_MATRIX)

    async def enter_charge_matrix(self, values: Mapping[str, Any]) -> EntryState:
        """Last data-entry step; re-checks the store before review."""
        self._require(EntryState.ENTERING_CHARGE_MATRIX)
        self.values.update(coerce_matrix(values, CHARGE_FIELDS))

        found = await self._probe()
        if found is None:
            return self.state
        if found:
            return self._confirm_overwrite()
        return self._transition(EntryState.REVIEW)

    def back(self) -> EntryState:
        self._require(*_PREVIOUS_STEP)
        return self._transition(_PREVIOUS_STEP[self.state])

    def accept_overwrite(self) -> EntryState:
        """Switch to editing the existing record, keeping any values typed so far."""
        self._require(EntryState.CONFIRMING_OVERWRITE)
        if self.existing is None:
            raise WorkflowError("No existing record to overwrite")
        merged = {
            name: self.existing[name]
            for name in UNIT_FIELDS + CHARGE_FIELDS
            if self.existing.get(name) is not None
        }
        merged.update(self.values)
        self.values = merged
        return self._transition(EntryState.REVIEWING_EXISTING_FOR_EDIT)

    def decline_overwrite(self) -> EntryState:
        self._require(EntryState.CONFIRMING_OVERWRITE)
        self.sk = None
        self.existing = None
        return self._transition(EntryState.SELECTING_DATE)

    def edit_values(self, values: Mapping[str, Any]) -> EntryState:
        """Adjust values while reviewing."""
        self._require(EntryState.REVIEW, EntryState.REVIEWING_EXISTING_FOR_EDIT)
        self.values.update(coerce_matrix(values, UNIT_FIELDS + CHARGE_FIELDS))
        return self.state

    async def submit(self) -> EntryState:
        """Create the record (new month) or update it (existing month)."""
        self._require(EntryState.REVIEW, EntryState.REVIEWING_EXISTING_FOR_EDIT)

        if self.state == EntryState.REVIEW:
            try:
                self.result = await self.productions.create(
                    self.company_id, self.production_site_id, self.sk, self.values
                )
            except ConflictException:
                # Someone else recorded this month after our last check.
                found = await self._probe()
                if found is None:
                    return self.state
                if found:
                    return self._confirm_overwrite()
                self._notify("warning", "The conflicting record is gone; submit again to save.")
                return self.state
            except StoreException as e:
                self._notify("error", f"Failed to save production data: {e.message}")
                return self.state
        else:
            try:
                self.result = await self.productions.update(
                    self.company_id, self.production_site_id, self.sk, self.values
                )
            except NotFoundException:
                self._notify("warning", "The existing record was removed; it will be created instead.")
                self.existing = None
                return self._transition(EntryState.REVIEW)
            except StoreException as e:
                self._notify("error", f"Failed to update production data: {e.message}")
                return self.state

        self._notify("info", f"Production data saved for {format_month_label(self.sk)}")
        return self._transition(EntryState.SUBMITTED)

    def cancel(self) -> EntryState:
        """Leave the wizard without touching the store."""
        if self.is_finished:
            raise WorkflowError(f"Action not allowed in state '{self.state.value}'")
        return self._transition(EntryState.CANCELLED)
