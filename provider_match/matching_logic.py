import logging
from typing import List, Optional, Sequence

from provider_match.models import BookingRequest, MatchingOptions, Provider, ProviderMatch
from provider_match.utils.errors import ProviderMatchingError, ProviderMatchingErrorType
from provider_match.utils.scoring import (
    MatchingDefaults,
    build_candidate_frame,
    filter_candidates,
    frame_to_matches,
    rank_candidates,
    score_candidates,
)
from provider_match.utils.validation import collect_booking_request_issues, collect_matching_options_issues

__all__ = [
    "validate_matching_input",
    "run_matching",
    "find_matches",
]

logger = logging.getLogger(__name__)


def validate_matching_input(request: BookingRequest, options: MatchingOptions) -> None:
    """Raise INVALID_INPUT when the request or options are malformed.

    Runs before any scoring work. The collected ``{field: message}`` issues are
    attached to the error as ``details["errors"]``.
    """
    request_issues = collect_booking_request_issues(request)
    if request_issues:
        raise ProviderMatchingError(
            "Invalid booking request", ProviderMatchingErrorType.INVALID_INPUT, {"errors": request_issues}
        )

    options_issues = collect_matching_options_issues(options)
    if options_issues:
        raise ProviderMatchingError(
            "Invalid matching options", ProviderMatchingErrorType.INVALID_INPUT, {"errors": options_issues}
        )


def run_matching(
    providers: Sequence[Provider],
    request: BookingRequest,
    options: MatchingOptions,
    *,
    distances: Optional[Sequence[Optional[float]]] = None,
    defaults: Optional[MatchingDefaults] = None,
) -> List[ProviderMatch]:
    """Filter, score and rank an already validated query.

    This is the scoring path shared by the in-memory and the remote entry
    points. ``distances`` (miles, one per provider) is supplied when the data
    tier already computed them; otherwise they are computed from coordinates.

    Steps:
    1. Tabulate the roster for the requested service
    2. Drop excluded, unqualified, out-of-range and unavailable providers
    3. Score survivors with the selected weight preset
    4. Sort by score, then move preferred providers to the front

    Raises:
        ProviderMatchingError: NO_PROVIDERS_AVAILABLE when nothing survives,
            MATCHING_ERROR wrapping any unexpected failure
    """
    defaults = defaults or MatchingDefaults()
    try:
        candidates = build_candidate_frame(providers, request, distances)
        eligible = filter_candidates(candidates, providers, request, options, defaults)
        if eligible.empty:
            raise ProviderMatchingError(
                "No matching providers found",
                ProviderMatchingErrorType.NO_PROVIDERS_AVAILABLE,
                {"service_id": request.service_id, "candidates": len(providers)},
            )

        scored = score_candidates(eligible, options, defaults.experience_saturation_jobs)
        ranked = rank_candidates(scored, request.preferred_providers)
        matches = frame_to_matches(ranked, providers)
    except ProviderMatchingError:
        raise
    except Exception as e:
        logger.error(f"Provider matching failed: {type(e).__name__}: {e}")
        raise ProviderMatchingError(
            f"Provider matching failed: {e}",
            ProviderMatchingErrorType.MATCHING_ERROR,
            {"original_error": str(e)},
        ) from e

    logger.info(f"Matched {len(matches)} of {len(providers)} providers for service '{request.service_id}'")
    return matches


def find_matches(
    providers: Sequence[Provider],
    request: BookingRequest,
    options: Optional[MatchingOptions] = None,
    defaults: Optional[MatchingDefaults] = None,
) -> List[ProviderMatch]:
    """Find and rank providers from an in-memory roster.

    Args:
        providers: Candidate providers; treated as read-only
        request: The customer's booking request
        options: Optional constraints and weight preset
        defaults: Fallbacks for unset options (built-in constants when omitted)

    Returns:
        List[ProviderMatch]: Matches ordered best first, preferred providers leading

    Raises:
        ProviderMatchingError: INVALID_INPUT, NO_PROVIDERS_AVAILABLE or MATCHING_ERROR
    """
    options = MatchingOptions() if options is None else options
    try:
        validate_matching_input(request, options)
        roster = list(providers)
    except ProviderMatchingError:
        raise
    except Exception as e:
        raise ProviderMatchingError(
            f"Provider matching failed: {e}",
            ProviderMatchingErrorType.MATCHING_ERROR,
            {"original_error": str(e)},
        ) from e
    return run_matching(roster, request, options, defaults=defaults)
