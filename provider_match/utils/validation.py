"""Validation utilities for booking requests, matching options and pricing input.

Small, self-contained helpers used by the engines and tests. The ``validate_*``
helpers return ``(is_valid, message)``; the ``collect_*_issues`` helpers walk a
whole record and return a ``{field: message}`` mapping that is empty when the
record is valid.
"""

import math
import re
from datetime import date
from numbers import Real
from typing import Any, Dict, Tuple

from ..models import (
    BookingFrequency,
    BookingRequest,
    HomeSize,
    MatchingOptions,
    PricingParams,
    PricingTimeSlot,
    SkillLevel,
)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_finite_number(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)


def validate_coordinates(lat: float, lon: float) -> Tuple[bool, str]:
    """
    Validate latitude and longitude coordinates.

    Args:
        lat: Latitude value
        lon: Longitude value

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not _is_number(lat) or not _is_number(lon):
        return False, "Coordinates must be numeric"

    if not (-90 <= lat <= 90):
        return False, "Latitude must be between -90 and 90"

    if not (-180 <= lon <= 180):
        return False, "Longitude must be between -180 and 180"

    return True, "Valid coordinates"


def validate_time_string(value: str) -> Tuple[bool, str]:
    """
    Validate a 24-hour ``HH:MM`` time string (00:00 through 23:59).

    Args:
        value: Time string

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, "Time must be a string"

    if not TIME_PATTERN.match(value):
        return False, "Time must be in HH:MM 24-hour format"

    return True, "Valid time"


def collect_booking_request_issues(request: BookingRequest) -> Dict[str, str]:
    """Return every shape/range problem found in a booking request."""
    issues: Dict[str, str] = {}

    if not isinstance(request, BookingRequest):
        return {"request": "Booking request is required"}

    if not isinstance(request.service_id, str) or not request.service_id.strip():
        issues["service_id"] = "Service ID is required"

    if not isinstance(request.date, date):
        issues["date"] = "Date must be a calendar date"

    time_slot = request.time_slot
    if time_slot is None:
        issues["time_slot"] = "Time slot is required"
    else:
        for name in ("start_time", "end_time"):
            valid, msg = validate_time_string(getattr(time_slot, name, None))
            if not valid:
                issues[f"time_slot.{name}"] = msg

    location = request.location
    if location is None:
        issues["location"] = "Location is required"
    else:
        valid, msg = validate_coordinates(location.latitude, location.longitude)
        if not valid:
            issues["location"] = msg

    for name in ("preferred_providers", "excluded_providers"):
        ids = getattr(request, name)
        if ids is None:
            continue
        if isinstance(ids, str) or not all(isinstance(i, str) for i in ids):
            issues[name] = "Provider IDs must be a list of strings"

    return issues


def collect_matching_options_issues(options: MatchingOptions) -> Dict[str, str]:
    """Return every range problem found in matching options."""
    issues: Dict[str, str] = {}

    if not isinstance(options, MatchingOptions):
        return {"options": "Matching options must be a MatchingOptions instance"}

    if options.min_rating is not None:
        if not _is_finite_number(options.min_rating) or not (1 <= options.min_rating <= 5):
            issues["min_rating"] = "Minimum rating must be between 1 and 5"

    if options.max_distance is not None:
        if not _is_finite_number(options.max_distance) or options.max_distance <= 0:
            issues["max_distance"] = "Maximum distance must be a finite positive number"

    if options.min_completed_jobs is not None:
        jobs = options.min_completed_jobs
        if not isinstance(jobs, int) or isinstance(jobs, bool) or jobs < 0:
            issues["min_completed_jobs"] = "Minimum completed jobs must be a non-negative integer"

    if options.required_skill_level is not None and not isinstance(options.required_skill_level, SkillLevel):
        issues["required_skill_level"] = "Required skill level must be a SkillLevel"

    for name in ("prioritize_rating", "prioritize_experience"):
        if not isinstance(getattr(options, name), bool):
            issues[name] = "Priority flags must be booleans"

    return issues


def collect_pricing_params_issues(params: PricingParams) -> Dict[str, str]:
    """Return every problem found in pricing parameters."""
    issues: Dict[str, str] = {}

    if not isinstance(params, PricingParams):
        return {"params": "Pricing parameters are required"}

    if not isinstance(params.home_size, HomeSize):
        issues["home_size"] = f"Unknown home size: {params.home_size!r}"

    if not isinstance(params.time_slot, PricingTimeSlot):
        issues["time_slot"] = f"Unknown time slot: {params.time_slot!r}"

    if not isinstance(params.frequency, BookingFrequency):
        issues["frequency"] = f"Unknown booking frequency: {params.frequency!r}"

    for i, addon in enumerate(params.addons or []):
        if not isinstance(getattr(addon, "id", None), str) or not addon.id:
            issues[f"addons[{i}].id"] = "Add-on ID is required"
        if not isinstance(getattr(addon, "name", None), str) or not addon.name:
            issues[f"addons[{i}].name"] = "Add-on name is required"
        price = getattr(addon, "price", None)
        if not _is_finite_number(price) or price < 0:
            issues[f"addons[{i}].price"] = "Add-on price must be a finite non-negative number"

    return issues
