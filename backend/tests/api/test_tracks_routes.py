"""Functional tests for the track API routes."""

import httpx
import pytest
from fastapi.testclient import TestClient

from hikeroute.api.deps import get_elevation_service
from hikeroute.config import settings
from hikeroute.db.session import get_async_db
from hikeroute.features.tracks import ElevationBackfillService
from hikeroute.main import app
from hikeroute.shared.storage import get_object_store

from factories import (
    ALPINE_GPX,
    FLAT_NO_ELEVATION_GPX,
    GUIDE_TOKEN,
    OTHER_TOKEN,
    TOUR_ID,
    StubElevationService,
)

AUTH = {"Authorization": f"Bearer {GUIDE_TOKEN}"}
UPLOAD_URL = f"/api/v1/tracks/{TOUR_ID}/upload"


@pytest.fixture
def elevation_service() -> StubElevationService:
    return StubElevationService(elevation=800.0)


@pytest.fixture
def client(session_factory, store, elevation_service):
    """TestClient wired to the temporary database, store and stub lookup."""

    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_db
    app.dependency_overrides[get_object_store] = lambda: store
    app.dependency_overrides[get_elevation_service] = lambda: elevation_service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def upload(client: TestClient, content: bytes, filename: str = "track.gpx", headers=AUTH, **params):
    return client.post(
        UPLOAD_URL,
        files={"file": (filename, content, "application/gpx+xml")},
        headers=headers,
        params=params,
    )


def points_payload(raw):
    return [
        {"lat": p[0], "lng": p[1], "elevation": p[2] if len(p) > 2 else None}
        for p in raw
    ]


# =============================================================================
# Upload
# =============================================================================

class TestUploadEndpoint:

    def test_upload_returns_points_and_analysis(self, client, store):
        response = upload(client, ALPINE_GPX)

        assert response.status_code == 200
        body = response.json()
        assert len(body["trackpoints"]) == 4
        assert body["trackpoints"][0] == {"lat": 46.5, "lng": 8.0, "elevation": 1500.0}
        assert body["waypoints"][0]["name"] == "Hut"
        assert body["hasElevationData"] is True
        assert body["needsElevationFetch"] is False
        assert body["analysis"]["elevation_gain_m"] == 150
        assert len(store.objects) == 1

    def test_upload_backfills_elevation(self, client, elevation_service):
        response = upload(client, FLAT_NO_ELEVATION_GPX)

        body = response.json()
        assert response.status_code == 200
        assert elevation_service.calls == 1
        assert [p["elevation"] for p in body["trackpoints"]] == [800.0, 810.0, 820.0]
        assert body["hasElevationData"] is True

    def test_upload_without_backfill(self, client, elevation_service):
        response = upload(client, FLAT_NO_ELEVATION_GPX, fetch_elevation="false")

        body = response.json()
        assert elevation_service.calls == 0
        assert body["hasElevationData"] is False
        assert body["needsElevationFetch"] is True

    def test_missing_token(self, client):
        response = upload(client, ALPINE_GPX, headers={})

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"

    def test_unknown_token(self, client):
        response = upload(client, ALPINE_GPX, headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_not_tour_owner(self, client, store):
        response = upload(
            client, ALPINE_GPX, headers={"Authorization": f"Bearer {OTHER_TOKEN}"},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "UNAUTHORIZED"
        assert store.objects == {}

    def test_wrong_extension(self, client):
        response = upload(client, ALPINE_GPX, filename="track.kml")
        assert response.status_code == 400

    def test_empty_file(self, client):
        response = upload(client, b"")
        assert response.status_code == 400

    def test_malformed_gpx(self, client):
        response = upload(client, b"<gpx><trk><trkseg>")

        assert response.status_code == 400
        assert response.json()["code"] == "PARSE_ERROR"

    def test_no_trackpoints(self, client):
        content = (
            b'<?xml version="1.0"?>'
            b'<gpx version="1.1" creator="t" xmlns="http://www.topografix.com/GPX/1/1"></gpx>'
        )

        response = upload(client, content)

        assert response.status_code == 400
        assert response.json()["code"] == "EMPTY_TRACK"

    def test_file_too_large(self, client, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 100)

        response = upload(client, ALPINE_GPX)

        assert response.status_code == 413
        assert response.json()["code"] == "FILE_TOO_LARGE"

    def test_rate_limit(self, client, monkeypatch, store):
        monkeypatch.setattr(settings, "upload_rate_limit", 2)

        assert upload(client, ALPINE_GPX).status_code == 200
        assert upload(client, ALPINE_GPX).status_code == 200
        response = upload(client, ALPINE_GPX)

        assert response.status_code == 429
        assert response.json()["code"] == "RATE_LIMITED"
        assert 0 < int(response.headers["Retry-After"]) <= 3600
        assert len(store.objects) == 1


class TestUploadQuotaEndpoint:

    def test_counts_accepted_uploads(self, client):
        upload(client, ALPINE_GPX)
        upload(client, b"<gpx><trk>")

        response = client.get("/api/v1/tracks/uploads/quota", headers=AUTH)

        assert response.status_code == 200
        # The rejected upload does not count
        assert response.json() == {
            "used": 1,
            "remaining": settings.upload_rate_limit - 1,
            "limit": settings.upload_rate_limit,
            "window_minutes": settings.upload_rate_window_minutes,
        }

    def test_requires_token(self, client):
        assert client.get("/api/v1/tracks/uploads/quota").status_code == 401


class TestGetTrackEndpoint:

    def test_not_found_before_upload(self, client):
        response = client.get(f"/api/v1/tracks/{TOUR_ID}", headers=AUTH)
        assert response.status_code == 404

    def test_returns_stored_record(self, client):
        upload(client, ALPINE_GPX, filename="haute-route.gpx")

        response = client.get(f"/api/v1/tracks/{TOUR_ID}", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["owner_id"] == TOUR_ID
        assert body["original_filename"] == "haute-route.gpx"
        assert body["total_points"] == 4
        assert body["total_elevation_gain_m"] == 150


# =============================================================================
# Analysis tools
# =============================================================================

class TestAnalysisEndpoints:

    def test_analyze(self, client):
        payload = {"points": points_payload([(0, 0, 100), (0, 1, 150), (1, 1, 120)])}

        response = client.post("/api/v1/tracks/analyze", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["total_distance_km"] == pytest.approx(222.4, rel=0.01)
        assert body["elevation_gain_m"] == 50
        assert body["elevation_loss_m"] == 30
        assert body["bounding_box"]["north"] == 1

    def test_analyze_single_point(self, client):
        response = client.post(
            "/api/v1/tracks/analyze", json={"points": points_payload([(46.0, 8.0)])},
        )

        assert response.status_code == 422
        assert response.json()["code"] == "INSUFFICIENT_POINTS"

    def test_analyze_rejects_out_of_range_coordinates(self, client):
        response = client.post(
            "/api/v1/tracks/analyze", json={"points": points_payload([(91, 0), (0, 0)])},
        )
        assert response.status_code == 422

    def test_profile(self, client):
        payload = {"points": points_payload([(46.0, 8.0, 1000), (46.01, 8.0), (46.02, 8.0, 1100)])}

        response = client.post("/api/v1/tracks/profile", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert [p["elevation_m"] for p in body] == [1000.0, 0.0, 1100.0]
        assert body[0]["cumulative_distance_km"] == 0.0

    def test_simplify(self, client):
        payload = {"points": points_payload([(46.0, 8.0 + i * 0.001) for i in range(20)])}

        response = client.post("/api/v1/tracks/simplify", json=payload)

        assert response.status_code == 200
        assert [p["lng"] for p in response.json()] == [8.0, pytest.approx(8.019)]

    def test_simplify_rejects_non_positive_tolerance(self, client):
        payload = {"points": points_payload([(46.0, 8.0), (46.1, 8.1)]), "tolerance": 0}
        response = client.post("/api/v1/tracks/simplify", json=payload)
        assert response.status_code == 422

    def test_day_splits(self, client):
        payload = {
            "points": points_payload([(0.0, i * 0.1, 100 + 10 * i) for i in range(10)]),
            "target_days": 3,
        }

        response = client.post("/api/v1/tracks/day-splits", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert [s["split_index"] for s in body] == [3, 6]
        assert body[0]["reason"] == "Day 1 → Day 2"

    def test_day_splits_single_day(self, client):
        payload = {"points": points_payload([(0.0, 0.0), (0.0, 0.1)]), "target_days": 1}

        response = client.post("/api/v1/tracks/day-splits", json=payload)

        assert response.status_code == 200
        assert response.json() == []


class TestElevationEndpoint:

    def test_fills_missing_elevation(self, client):
        payload = {"points": points_payload([(46.0, 8.0), (46.1, 8.1, 2000)])}

        response = client.post("/api/v1/tracks/elevation", json=payload)

        assert response.status_code == 200
        assert [p["elevation"] for p in response.json()] == [800.0, 2000.0]

    def test_lookup_failure_returns_input(self, client):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        app.dependency_overrides[get_elevation_service] = lambda: ElevationBackfillService(
            api_url="http://elevation.invalid",
            transport=httpx.MockTransport(unreachable),
        )
        payload = {"points": points_payload([(46.0, 8.0), (46.1, 8.1)])}

        response = client.post("/api/v1/tracks/elevation", json=payload)

        assert response.status_code == 200
        assert [p["elevation"] for p in response.json()] == [None, None]


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
