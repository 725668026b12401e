"""
Radius-search RPC access for the remote matching path.

The data tier exposes a geo-radius function (PostgREST RPC) that returns only
providers within a meter radius of a point, each row annotated with the
server-computed ``distance_meters`` and the provider's ``latitude`` /
``longitude``. Responses follow the ``{data, error}`` envelope: transport and
HTTP failures are reported in ``error`` rather than raised.

Usage:
    from provider_match.data.radius_search import RadiusSearchClient

    client = RadiusSearchClient.from_config()
    response = await client.rpc("find_providers_in_radius", {"lat": 37.77, "long": -122.42, "radius_meters": 16093.4})
    if response.error is None:
        rows = response.data
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

import httpx
import pandas as pd

from provider_match.models import AvailabilitySlot, Location, Provider, ServiceCapability, SkillLevel
from provider_match.utils.scoring import METERS_PER_MILE

logger = logging.getLogger(__name__)

RADIUS_SEARCH_FUNCTION = "find_providers_in_radius"


@dataclass(slots=True)
class RpcError:
    message: str
    code: Optional[str] = None


@dataclass(slots=True)
class RpcResponse:
    data: Optional[List[Dict[str, Any]]]
    error: Optional[RpcError] = None


class RadiusSearchDataSource(Protocol):
    async def rpc(self, function_name: str, params: Dict[str, Any]) -> RpcResponse: ...


class RadiusSearchClient:
    """PostgREST RPC client built on httpx."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        function_name: str = RADIUS_SEARCH_FUNCTION,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.function_name = function_name
        self._transport = transport

    @classmethod
    def from_config(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "RadiusSearchClient":
        from provider_match.utils.config import get_api_config, is_api_enabled

        config = get_api_config("radius_search")
        if not is_api_enabled("radius_search"):
            logger.warning("Radius search is not configured; requests will fail until supabase_url/key are set")
        return cls(
            config["supabase_url"],
            config["supabase_key"],
            timeout=float(config["request_timeout"]),
            function_name=config["function_name"] or RADIUS_SEARCH_FUNCTION,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def rpc(self, function_name: str, params: Dict[str, Any]) -> RpcResponse:
        url = f"{self.base_url}/rest/v1/rpc/{function_name}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(url, json=params, headers=self._headers())
                resp.raise_for_status()
                data = resp.json() if resp.content else []
        except httpx.HTTPStatusError as e:
            message, code = _error_from_response(e.response)
            logger.error(f"Radius search RPC '{function_name}' returned HTTP {e.response.status_code}: {message}")
            return RpcResponse(data=None, error=RpcError(message=message, code=code))
        except httpx.HTTPError as e:
            logger.error(f"Radius search RPC '{function_name}' failed: {type(e).__name__}: {e}")
            return RpcResponse(data=None, error=RpcError(message=str(e) or type(e).__name__, code=type(e).__name__))
        except ValueError as e:
            logger.error(f"Radius search RPC '{function_name}' returned invalid JSON: {e}")
            return RpcResponse(data=None, error=RpcError(message=f"Invalid JSON response: {e}", code="invalid_json"))

        if not isinstance(data, list):
            return RpcResponse(data=None, error=RpcError(message="Expected a list of rows", code="invalid_payload"))
        return RpcResponse(data=data)


def _error_from_response(response: httpx.Response) -> Tuple[str, str]:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase, str(response.status_code)
    if isinstance(body, dict):
        return str(body.get("message") or body), str(body.get("code") or response.status_code)
    return str(body), str(response.status_code)


def _first(row: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return default


def parse_skill_level(value: Any) -> SkillLevel:
    """Accept a SkillLevel, its integer value or its (case-insensitive) name."""
    if isinstance(value, SkillLevel):
        return value
    if isinstance(value, str) and not value.strip().isdigit():
        return SkillLevel[value.strip().upper()]
    return SkillLevel(int(value))


def _parse_capabilities(row: Mapping[str, Any]) -> List[ServiceCapability]:
    entries = row.get("capabilities")
    if entries:
        return [
            ServiceCapability(
                service_id=str(_first(entry, "serviceId", "service_id")),
                skill_level=parse_skill_level(_first(entry, "skillLevel", "skill_level")),
            )
            for entry in entries
        ]
    # storage rows list bare service names without a declared tier
    return [ServiceCapability(service_id=str(s), skill_level=SkillLevel.BEGINNER) for s in row.get("services") or []]


def _parse_availability(row: Mapping[str, Any]) -> List[AvailabilitySlot]:
    return [
        AvailabilitySlot(
            date=pd.Timestamp(entry["date"]).date(),
            start_time=str(_first(entry, "startTime", "start_time")),
            end_time=str(_first(entry, "endTime", "end_time")),
        )
        for entry in row.get("availability") or []
    ]


def adapt_provider_row(row: Mapping[str, Any], default_max_travel_distance: float) -> Provider:
    """
    Convert one radius-search row into a Provider.

    Accepts both domain field names (``completedJobs``, ``maxTravelDistance``)
    and storage names (``total_jobs``, ``max_travel_distance``). Missing
    ratings and job counts become 0; a missing travel radius falls back to
    ``default_max_travel_distance``.
    """
    return Provider(
        id=str(row["id"]),
        name=str(_first(row, "name", "business_name", default="Unnamed Provider")),
        rating=float(_first(row, "rating", default=0)),
        completed_jobs=int(_first(row, "completedJobs", "completed_jobs", "total_jobs", default=0)),
        max_travel_distance=float(
            _first(row, "maxTravelDistance", "max_travel_distance", default=default_max_travel_distance)
        ),
        location=Location(latitude=float(row["latitude"]), longitude=float(row["longitude"])),
        capabilities=_parse_capabilities(row),
        availability=_parse_availability(row),
    )


def adapt_provider_rows(
    rows: List[Mapping[str, Any]], default_max_travel_distance: float
) -> Tuple[List[Provider], List[float]]:
    """
    Adapt RPC rows, skipping rows without an id, coordinates or distance.

    Returns:
        Tuple of (providers, distances_in_miles) in matching order
    """
    providers: List[Provider] = []
    distances: List[float] = []
    skipped = 0
    for row in rows:
        if any(row.get(key) is None for key in ("id", "distance_meters", "latitude", "longitude")):
            skipped += 1
            continue
        providers.append(adapt_provider_row(row, default_max_travel_distance))
        distances.append(float(row["distance_meters"]) / METERS_PER_MILE)

    if skipped:
        logger.warning(f"Skipped {skipped} radius-search rows missing id, distance or coordinates")
    return providers, distances
