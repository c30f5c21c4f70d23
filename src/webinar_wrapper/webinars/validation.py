from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from webinar_wrapper.shared.logging import get_logger
from webinar_wrapper.webinars.models import (
    BatchPartition,
    ValidationOutcome,
    ValidationProfile,
    WebinarRecord,
)

logger = get_logger(__name__)

# local@domain.tld: one '@', no whitespace, a dot in the domain part
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Which presenter contact field each profile requires in addition to the
# webinar name and presenter name.
_REQUIRES_SCHEDULE_SLOT = {ValidationProfile.SCHEDULE}
_REQUIRES_PRESENTER_EMAIL = {ValidationProfile.SCHEDULE, ValidationProfile.EMAIL}
_REQUIRES_PRESENTER_PHONE = {ValidationProfile.MESSAGING}


@dataclass
class ValidationResult:
    """Mutable accumulator used while checking one row.

    - add_error() flips is_valid=False and appends a "Row N: ..." message
    - freeze() returns the immutable ValidationOutcome
    """

    row_number: int
    is_valid: bool = True
    _errors: List[str] = field(default_factory=list, repr=False)

    def add_error(self, message: str) -> None:
        self.is_valid = False
        self._errors.append(f"Row {self.row_number}: {message}")

    @property
    def errors(self) -> List[str]:
        return list(self._errors)

    def freeze(self) -> ValidationOutcome:
        return ValidationOutcome(is_valid=self.is_valid, errors=tuple(self._errors))


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value.strip()))


class RecordValidator:
    """Checks webinar records for one operation profile.

    Every rule runs independently so a row reports all of its violations.
    """

    def __init__(self, profile: ValidationProfile = ValidationProfile.SCHEDULE) -> None:
        self._profile = profile

    @property
    def profile(self) -> ValidationProfile:
        return self._profile

    def validate(self, record: WebinarRecord, row_index: int) -> ValidationOutcome:
        """Validate one record.

        Args:
            record: Record to check.
            row_index: 0-based position in the batch; messages use row_index + 1.
        """
        result = ValidationResult(row_number=row_index + 1)

        self._validate_required(record, result)
        self._validate_email_format(record, result)

        return result.freeze()

    def partition(self, records: Sequence[WebinarRecord]) -> BatchPartition:
        """Split a batch into valid records and flattened per-row errors."""
        valid: list[WebinarRecord] = []
        errors: list[str] = []
        invalid_rows: list[int] = []

        for index, record in enumerate(records):
            outcome = self.validate(record, index)
            if outcome.is_valid:
                valid.append(record)
            else:
                invalid_rows.append(index + 1)
                errors.extend(outcome.errors)

        if errors:
            logger.warning(
                "Validation warnings",
                extra={
                    "profile": self._profile.value,
                    "total": len(records),
                    "invalid_rows": invalid_rows,
                    "validation_errors": errors,
                },
            )

        return BatchPartition(valid=tuple(valid), errors=tuple(errors), invalid_rows=tuple(invalid_rows))

    @staticmethod
    def _is_blank(value: Optional[str]) -> bool:
        return value is None or str(value).strip() == ""

    def _validate_required(self, record: WebinarRecord, result: ValidationResult) -> None:
        if self._is_blank(record.name):
            result.add_error("Missing webinar name")

        if self._profile in _REQUIRES_SCHEDULE_SLOT:
            if self._is_blank(record.date):
                result.add_error("Missing date")
            if self._is_blank(record.time):
                result.add_error("Missing time")

        if self._is_blank(record.presenter.name):
            result.add_error("Missing presenter name")

        if self._profile in _REQUIRES_PRESENTER_EMAIL and self._is_blank(record.presenter.email):
            result.add_error("Missing presenter email")

        if self._profile in _REQUIRES_PRESENTER_PHONE and self._is_blank(record.presenter.phone):
            result.add_error("Missing presenter phone")

    def _validate_email_format(self, record: WebinarRecord, result: ValidationResult) -> None:
        presenter_email = record.presenter.email
        if not self._is_blank(presenter_email) and not is_valid_email(presenter_email):
            result.add_error("Invalid presenter email format")

        attendee_email = record.attendee_email
        if not self._is_blank(attendee_email) and not is_valid_email(attendee_email):
            result.add_error("Invalid attendee email format")
