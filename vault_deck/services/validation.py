"""validation.py

Field-level validation for the *Create* form.

``validate_draft`` takes the raw widget values (camelCase keys, numbers
possibly still strings) and returns either a :class:`VaultDraft` or a
``{field: message}`` mapping that the page renders under each input.
Only the first failing rule per field is reported.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Mapping

from .model import DURATION_UNITS, VaultDraft

MIN_EXECUTIONS = 1
MAX_EXECUTIONS = 100


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _to_number(value: Any) -> float | None:
    """Coerce widget input to a finite float; ``None`` if it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _check_amount(value: Any) -> tuple[float | None, str | None]:
    if _blank(value):
        return None, "Please enter an amount"
    number = _to_number(value)
    if number is None:
        return None, "Please enter a valid number"
    if number <= 0:
        return None, "Amount must be positive"
    return number, None


def _check_duration(value: Any) -> tuple[int | None, str | None]:
    if _blank(value):
        return None, "Please enter a duration"
    number = _to_number(value)
    if number is None:
        return None, "Please enter a valid number"
    if not number.is_integer():
        return None, "Duration must be a whole number"
    if number <= 0:
        return None, "Duration must be positive"
    return int(number), None


def _check_executions(value: Any) -> tuple[int | None, str | None]:
    if _blank(value):
        return None, "Please enter number of executions"
    number = _to_number(value)
    if number is None:
        return None, "Please enter a valid number"
    if not number.is_integer():
        return None, "Number of executions must be a whole number"
    if number < MIN_EXECUTIONS:
        return None, "Must have at least 1 execution"
    if number > MAX_EXECUTIONS:
        return None, "Maximum 100 executions allowed"
    return int(number), None


def validate_draft(
    raw: Mapping[str, Any], now: datetime | None = None
) -> tuple[VaultDraft | None, dict[str, str]]:
    """Validate raw form values.

    Parameters
    ----------
    raw : Mapping[str, Any]
        Keys ``sourceToken``, ``sourceAmount``, ``target``,
        ``durationValue``, ``durationUnit``, ``executions``.
    now : datetime | None
        Submission time to stamp on the draft; defaults to *now* in UTC.

    Returns
    -------
    tuple[VaultDraft | None, dict[str, str]]
        ``(draft, {})`` on success, ``(None, errors)`` otherwise.
    """
    errors: dict[str, str] = {}

    source_token = raw.get("sourceToken")
    if _blank(source_token):
        errors["sourceToken"] = "Please select a source token"

    amount, msg = _check_amount(raw.get("sourceAmount"))
    if msg:
        errors["sourceAmount"] = msg

    target = raw.get("target")
    if _blank(target):
        errors["target"] = "Please select a target"

    duration_value, msg = _check_duration(raw.get("durationValue"))
    if msg:
        errors["durationValue"] = msg

    duration_unit = raw.get("durationUnit")
    if duration_unit not in DURATION_UNITS:
        errors["durationUnit"] = "Please select a duration unit"

    executions, msg = _check_executions(raw.get("executions"))
    if msg:
        errors["executions"] = msg

    if errors:
        return None, errors

    draft = VaultDraft(
        source_token=str(source_token).strip(),
        source_amount=amount,
        target=str(target).strip(),
        duration_value=duration_value,
        duration_unit=duration_unit,
        executions=executions,
        submission_datetime=now or datetime.now(timezone.utc),
    )
    return draft, {}
