"""Deterministic price quotes for cleaning bookings.

The quote is base price (by home size) plus add-ons plus a time-slot
adjustment. The adjustment is a percentage of the base price only: peak slots
add 25%, off-peak slots take off 15%.
"""

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from numbers import Real
from typing import Dict, Iterable, List, Mapping, Optional

from ..models import (
    BookingFrequency,
    HomeSize,
    PricingConfig,
    PricingParams,
    PricingResult,
    PricingTimeSlot,
    ServiceAddon,
)
from .config import DEFAULT_BASE_PRICES, DEFAULT_TIME_SLOT_MULTIPLIERS
from .errors import PricingError, PricingErrorType
from .validation import collect_pricing_params_issues

logger = logging.getLogger(__name__)

DEFAULT_PRICING_CONFIG = PricingConfig(
    base_pricing=dict(DEFAULT_BASE_PRICES),
    time_slot_multipliers=dict(DEFAULT_TIME_SLOT_MULTIPLIERS),
)

TIME_SLOT_ADJUSTMENT_RATES: Dict[PricingTimeSlot, float] = {
    PricingTimeSlot.STANDARD: 0.0,
    PricingTimeSlot.PEAK: 0.25,
    PricingTimeSlot.OFF_PEAK: -0.15,
}

DEFAULT_ADDON_CATALOG: Dict[str, ServiceAddon] = {
    "DEEP_CLEAN": ServiceAddon(id="DEEP_CLEAN", name="Deep Clean", price=50),
    "WINDOW_CLEANING": ServiceAddon(id="WINDOW_CLEANING", name="Window Cleaning", price=30),
    "LAUNDRY": ServiceAddon(id="LAUNDRY", name="Laundry", price=25),
    "FRIDGE_CLEANING": ServiceAddon(id="FRIDGE_CLEANING", name="Fridge Cleaning", price=20),
    "OVEN_CLEANING": ServiceAddon(id="OVEN_CLEANING", name="Oven Cleaning", price=25),
}


def _is_positive_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value) and value > 0


def build_addons(addon_ids: Iterable[str], catalog: Optional[Mapping[str, ServiceAddon]] = None) -> List[ServiceAddon]:
    """Resolve catalog IDs to add-ons, preserving the requested order."""
    catalog = DEFAULT_ADDON_CATALOG if catalog is None else catalog
    addons = []
    for addon_id in addon_ids:
        if addon_id not in catalog:
            raise PricingError(f"Unknown add-on: {addon_id}", PricingErrorType.INVALID_INPUT, {"addon_id": addon_id})
        entry = catalog[addon_id]
        addons.append(ServiceAddon(id=entry.id, name=entry.name, price=entry.price))
    return addons


def calculate_price(params: PricingParams, config: Optional[PricingConfig] = None) -> PricingResult:
    """
    Calculate an itemized price for a booking.

    Args:
        params: Home size, pricing time slot and add-ons
        config: Pricing table; DEFAULT_PRICING_CONFIG when omitted

    Returns:
        PricingResult with base, add-on, adjustment and total amounts plus a breakdown

    Raises:
        PricingError: INVALID_INPUT for bad parameters or a config lacking the
            requested entry, UNSUPPORTED_FEATURE for recurring frequencies and
            CALCULATION_ERROR for anything else that goes wrong.
    """
    try:
        issues = collect_pricing_params_issues(params)
        if issues:
            raise PricingError("Invalid pricing parameters", PricingErrorType.INVALID_INPUT, {"errors": issues})

        if params.frequency is not BookingFrequency.ONE_TIME:
            raise PricingError(
                f"Recurring pricing is not supported: {params.frequency.value}",
                PricingErrorType.UNSUPPORTED_FEATURE,
                {"frequency": params.frequency.value},
            )

        config = DEFAULT_PRICING_CONFIG if config is None else config

        if not config.base_pricing or not _is_positive_number(config.base_pricing.get(params.home_size)):
            raise PricingError(
                f"Invalid home size: {params.home_size.value}",
                PricingErrorType.INVALID_INPUT,
                {"home_size": params.home_size.value},
            )

        if not config.time_slot_multipliers or not _is_positive_number(
            config.time_slot_multipliers.get(params.time_slot)
        ):
            raise PricingError(
                f"Invalid time slot: {params.time_slot.value}",
                PricingErrorType.INVALID_INPUT,
                {"time_slot": params.time_slot.value},
            )

        base_price = config.base_pricing[params.home_size]
        addons = list(params.addons or [])
        addon_price = sum(addon.price for addon in addons)
        multiplier = config.time_slot_multipliers[params.time_slot]
        time_slot_adjustment = base_price * TIME_SLOT_ADJUSTMENT_RATES[params.time_slot]
        total_price = base_price + addon_price + time_slot_adjustment

        return PricingResult(
            base_price=base_price,
            addon_price=addon_price,
            time_slot_adjustment=time_slot_adjustment,
            total_price=total_price,
            breakdown={
                "base_price_details": {"home_size": params.home_size.value, "price": base_price},
                "addons": [{"id": a.id, "name": a.name, "price": a.price} for a in addons],
                "time_slot_details": {
                    "time_slot": params.time_slot.value,
                    "multiplier": multiplier,
                    "adjustment": time_slot_adjustment,
                },
            },
        )
    except PricingError:
        raise
    except Exception as e:
        logger.error(f"Pricing calculation failed: {type(e).__name__}: {e}")
        raise PricingError(
            f"Pricing calculation failed: {e}",
            PricingErrorType.CALCULATION_ERROR,
            {"original_error": str(e)},
        ) from e


def to_cents(amount: float) -> int:
    """Convert a dollar amount to integer cents, rounding half up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_price(amount: float) -> str:
    """Format a dollar amount as ``$1,234.50`` (negative amounts as ``-$30.00``)."""
    cents = to_cents(amount)
    sign = "-" if cents < 0 else ""
    return f"{sign}${abs(cents) / 100:,.2f}"
