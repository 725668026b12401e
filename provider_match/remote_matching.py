"""Provider matching backed by the data tier's radius search.

Large rosters are not loaded into memory: the geo-radius pre-filter runs in
the database and only providers already within range are scored here, with
the same filter and scoring path as ``find_matches``.
"""

import logging
from typing import List, Optional

from provider_match.data.radius_search import RADIUS_SEARCH_FUNCTION, RadiusSearchDataSource, adapt_provider_rows
from provider_match.matching_logic import run_matching, validate_matching_input
from provider_match.models import BookingRequest, MatchingOptions, ProviderMatch
from provider_match.utils.errors import ProviderMatchingError, ProviderMatchingErrorType
from provider_match.utils.scoring import METERS_PER_MILE, MatchingDefaults

logger = logging.getLogger(__name__)


def radius_search_params(request: BookingRequest, max_distance_miles: float) -> dict:
    return {
        "lat": request.location.latitude,
        "long": request.location.longitude,
        "radius_meters": max_distance_miles * METERS_PER_MILE,
    }


async def find_and_rank_providers(
    data_source: RadiusSearchDataSource,
    request: BookingRequest,
    options: Optional[MatchingOptions] = None,
    *,
    defaults: Optional[MatchingDefaults] = None,
    function_name: Optional[str] = None,
) -> List[ProviderMatch]:
    """Find and rank providers using the radius-search RPC.

    Performs exactly one outbound call. No retries and no internal timeout;
    both are the caller's concern.

    Args:
        data_source: Anything with an async ``rpc(function_name, params)``
        request: The customer's booking request
        options: Optional constraints and weight preset
        defaults: Fallbacks for unset options (built-in constants when omitted)
        function_name: Name of the radius-search function in the data tier;
            defaults to the data source's own ``function_name`` (set from
            ``radius_search.function_name`` by ``RadiusSearchClient.from_config``),
            then to ``find_providers_in_radius``

    Returns:
        List[ProviderMatch]: Matches ordered best first, preferred providers leading

    Raises:
        ProviderMatchingError: INVALID_INPUT for malformed input, MATCHING_ERROR
            when the data source reports an error, NO_PROVIDERS_AVAILABLE when
            the radius search or the filters leave nothing
    """
    options = MatchingOptions() if options is None else options
    defaults = defaults or MatchingDefaults()
    validate_matching_input(request, options)

    function_name = function_name or getattr(data_source, "function_name", None) or RADIUS_SEARCH_FUNCTION
    max_distance = defaults.effective_max_distance(options)
    params = radius_search_params(request, max_distance)
    try:
        response = await data_source.rpc(function_name, params)
    except Exception as e:
        logger.error(f"Radius search call failed: {type(e).__name__}: {e}")
        raise ProviderMatchingError(
            f"Database error: {e}", ProviderMatchingErrorType.MATCHING_ERROR, {"original_error": str(e)}
        ) from e

    if response.error is not None:
        raise ProviderMatchingError(
            f"Database error: {response.error.message}",
            ProviderMatchingErrorType.MATCHING_ERROR,
            {"code": response.error.code},
        )

    rows = response.data or []
    logger.info(f"Radius search returned {len(rows)} providers within {max_distance} miles")
    if not rows:
        raise ProviderMatchingError(
            "No providers found within the search radius",
            ProviderMatchingErrorType.NO_PROVIDERS_AVAILABLE,
            {"radius_meters": params["radius_meters"]},
        )

    try:
        providers, distances = adapt_provider_rows(rows, default_max_travel_distance=max_distance)
    except Exception as e:
        logger.error(f"Could not adapt radius search rows: {type(e).__name__}: {e}")
        raise ProviderMatchingError(
            f"Provider matching failed: {e}", ProviderMatchingErrorType.MATCHING_ERROR, {"original_error": str(e)}
        ) from e

    return run_matching(providers, request, options, distances=distances, defaults=defaults)
