"""Test suite for the radius-search RPC client and row adaptation.

HTTP traffic goes through ``httpx.MockTransport``; no network access is needed.
"""
import json
from datetime import date

import httpx
import pytest

from provider_match.data.radius_search import (
    RadiusSearchClient,
    adapt_provider_row,
    adapt_provider_rows,
    parse_skill_level,
)
from provider_match.models import SkillLevel
from provider_match.remote_matching import find_and_rank_providers


def _client(handler):
    return RadiusSearchClient("https://db.example.test/", "anon-key", transport=httpx.MockTransport(handler))


class TestRadiusSearchClient:
    @pytest.mark.asyncio
    async def test_posts_params_to_rpc_endpoint(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=[{"id": "a"}])

        response = await _client(handler).rpc(
            "find_providers_in_radius", {"lat": 1.0, "long": 2.0, "radius_meters": 1609.34}
        )

        assert seen["url"] == "https://db.example.test/rest/v1/rpc/find_providers_in_radius"
        assert seen["headers"]["apikey"] == "anon-key"
        assert seen["headers"]["authorization"] == "Bearer anon-key"
        assert seen["body"] == {"lat": 1.0, "long": 2.0, "radius_meters": 1609.34}
        assert response.error is None
        assert response.data == [{"id": "a"}]

    @pytest.mark.asyncio
    async def test_http_error_reported_in_envelope(self):
        def handler(request):
            return httpx.Response(404, json={"message": "function not found", "code": "PGRST202"})

        response = await _client(handler).rpc("missing_fn", {})

        assert response.data is None
        assert response.error.message == "function not found"
        assert response.error.code == "PGRST202"

    @pytest.mark.asyncio
    async def test_http_error_without_json_body(self):
        def handler(request):
            return httpx.Response(503, text="upstream unavailable")

        response = await _client(handler).rpc("find_providers_in_radius", {})

        assert response.error.message == "upstream unavailable"
        assert response.error.code == "503"

    @pytest.mark.asyncio
    async def test_transport_error_reported_in_envelope(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        response = await _client(handler).rpc("find_providers_in_radius", {})

        assert response.data is None
        assert response.error.code == "ConnectError"
        assert "connection refused" in response.error.message

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>", headers={"Content-Type": "application/json"})

        response = await _client(handler).rpc("find_providers_in_radius", {})

        assert response.error.code == "invalid_json"

    @pytest.mark.asyncio
    async def test_non_list_payload(self):
        def handler(request):
            return httpx.Response(200, json={"id": "a"})

        response = await _client(handler).rpc("find_providers_in_radius", {})

        assert response.error.code == "invalid_payload"

    @pytest.mark.asyncio
    async def test_empty_body_is_empty_list(self):
        def handler(request):
            return httpx.Response(200, content=b"")

        response = await _client(handler).rpc("find_providers_in_radius", {})

        assert response.error is None
        assert response.data == []

    def test_from_config(self, mock_secrets):
        mock_secrets["radius_search"] = {
            "supabase_url": "https://proj.supabase.co",
            "supabase_key": "service-key",
            "request_timeout": 3,
        }

        client = RadiusSearchClient.from_config()

        assert client.base_url == "https://proj.supabase.co"
        assert client.api_key == "service-key"
        assert client.timeout == 3.0
        assert client.function_name == "find_providers_in_radius"

    def test_from_config_function_name(self, mock_secrets):
        mock_secrets["radius_search"] = {
            "supabase_url": "https://proj.supabase.co",
            "supabase_key": "service-key",
            "function_name": "providers_near_point",
        }

        assert RadiusSearchClient.from_config().function_name == "providers_near_point"

    @pytest.mark.asyncio
    async def test_configured_function_name_reaches_endpoint(self, mock_secrets, make_request):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(
                200,
                json=[
                    {
                        "id": "a",
                        "rating": 4.5,
                        "completedJobs": 40,
                        "latitude": 37.78,
                        "longitude": -122.41,
                        "distance_meters": 1000,
                        "capabilities": [{"serviceId": "cleaning", "skillLevel": 3}],
                        "availability": [{"date": "2025-06-23", "startTime": "08:00", "endTime": "18:00"}],
                    }
                ],
            )

        mock_secrets["radius_search"] = {
            "supabase_url": "https://proj.supabase.co",
            "supabase_key": "service-key",
            "function_name": "providers_near_point",
        }
        client = RadiusSearchClient.from_config(transport=httpx.MockTransport(handler))

        matches = await find_and_rank_providers(client, make_request())

        assert seen == ["/rest/v1/rpc/providers_near_point"]
        assert [m.provider.id for m in matches] == ["a"]


class TestParseSkillLevel:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (SkillLevel.ADVANCED, SkillLevel.ADVANCED),
            (2, SkillLevel.INTERMEDIATE),
            ("4", SkillLevel.EXPERT),
            ("beginner", SkillLevel.BEGINNER),
            ("EXPERT", SkillLevel.EXPERT),
        ],
    )
    def test_accepted_forms(self, value, expected):
        assert parse_skill_level(value) is expected

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            parse_skill_level(9)


class TestAdaptProviderRow:
    def test_domain_field_names(self):
        row = {
            "id": "p1",
            "name": "Ana Cleaning Co",
            "rating": 4.8,
            "completedJobs": 75,
            "maxTravelDistance": 12,
            "latitude": 37.77,
            "longitude": -122.42,
            "capabilities": [{"serviceId": "cleaning", "skillLevel": "ADVANCED"}],
            "availability": [{"date": "2025-06-23", "startTime": "09:00", "endTime": "17:00"}],
        }

        provider = adapt_provider_row(row, default_max_travel_distance=50)

        assert provider.id == "p1"
        assert provider.completed_jobs == 75
        assert provider.max_travel_distance == 12.0
        assert provider.capability_for("cleaning").skill_level is SkillLevel.ADVANCED
        assert provider.availability[0].date == date(2025, 6, 23)
        assert provider.availability[0].start_time == "09:00"

    def test_storage_field_names_and_defaults(self):
        row = {
            "id": 17,
            "business_name": "Sparkle",
            "total_jobs": 30,
            "latitude": "37.7",
            "longitude": "-122.4",
            "services": ["cleaning", "laundry"],
        }

        provider = adapt_provider_row(row, default_max_travel_distance=50)

        assert provider.id == "17"
        assert provider.name == "Sparkle"
        assert provider.rating == 0.0
        assert provider.completed_jobs == 30
        assert provider.max_travel_distance == 50.0
        assert [c.skill_level for c in provider.capabilities] == [SkillLevel.BEGINNER, SkillLevel.BEGINNER]
        assert provider.availability == []

    def test_unnamed_provider(self):
        provider = adapt_provider_row({"id": "x", "latitude": 0, "longitude": 0}, default_max_travel_distance=10)

        assert provider.name == "Unnamed Provider"


class TestAdaptProviderRows:
    def test_distances_converted_to_miles(self):
        rows = [
            {"id": "a", "latitude": 1, "longitude": 1, "distance_meters": 1609.34},
            {"id": "b", "latitude": 1, "longitude": 1, "distance_meters": 0},
        ]

        providers, distances = adapt_provider_rows(rows, default_max_travel_distance=50)

        assert [p.id for p in providers] == ["a", "b"]
        assert distances == [pytest.approx(1.0), 0.0]

    def test_incomplete_rows_skipped(self, caplog):
        rows = [
            {"id": "a", "latitude": 1, "longitude": 1, "distance_meters": 100},
            {"id": "b", "latitude": None, "longitude": 1, "distance_meters": 100},
            {"id": "c", "latitude": 1, "longitude": 1},
            {"latitude": 1, "longitude": 1, "distance_meters": 100},
        ]

        with caplog.at_level("WARNING", logger="provider_match.data.radius_search"):
            providers, distances = adapt_provider_rows(rows, default_max_travel_distance=50)

        assert [p.id for p in providers] == ["a"]
        assert len(distances) == 1
        assert "Skipped 3" in caplog.text
