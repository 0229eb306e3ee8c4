"""Tests for health metrics API endpoints."""

from datetime import datetime

import pytest

from storage import SessionLog

# Far enough in the past to be a settled day
DAY = "2025-12-01"


def put_sample(client, day=DAY, **readings):
    response = client.put(f"/api/v1/health/samples/{day}", json=readings)
    assert response.status_code == 200
    return response.json()


class TestRawSamples:
    def test_put_sample(self, client):
        data = put_sample(client, sleep_hours=7.5, hrv=60)

        assert data == {
            "sleep_hours": 7.5,
            "hrv": 60,
            "resting_heart_rate": None,
            "calories_burned": None,
            "calories_consumed": None,
        }

    @pytest.mark.parametrize(
        "body",
        [
            '{"sleep_hours": 1e999}',
            '{"hrv": -1e999}',
            '{"calories_burned": NaN}',
            '{"resting_heart_rate": -60}',
        ],
    )
    def test_rejects_unusable_readings(self, client, body):
        response = client.put(
            f"/api/v1/health/samples/{DAY}",
            content=body,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        # Nothing was stored, so the day still scores from defaults
        metrics = client.get(f"/api/v1/health/metrics/{DAY}")
        assert metrics.status_code == 200
        assert metrics.json()["hrv"] == 50
        summary = client.get(f"/api/v1/health/summary/{DAY}")
        assert summary.status_code == 200

    def test_invalid_date(self, client):
        response = client.put("/api/v1/health/samples/yesterday", json={})

        assert response.status_code == 422


class TestMetrics:
    def test_metrics_from_sample(self, client):
        put_sample(
            client,
            sleep_hours=8,
            hrv=50,
            resting_heart_rate=65,
            calories_burned=2400,
            calories_consumed=2600,
        )

        response = client.get(f"/api/v1/health/metrics/{DAY}")

        assert response.status_code == 200
        data = response.json()
        assert data["date"] == DAY
        assert data["sleep_percentage"] == 100
        assert data["stress_score"] == 71
        assert data["recovery_score"] == 54
        assert data["energy_balance"] == 200
        assert data["exertion_score"] == 0

    def test_metrics_without_sample_use_defaults(self, client):
        data = client.get(f"/api/v1/health/metrics/{DAY}").json()

        assert data["hrv"] == 50
        assert data["resting_heart_rate"] == 65
        assert data["sleep_hours"] == 0

    def test_workouts_count_towards_exertion(self, client, db_session, session_factory):
        SessionLog(db_session).append_session(
            session_factory(
                {"Squat": [(100, 10)] * 5},
                start_time=datetime(2025, 12, 1, 7, 0),
                duration=3600,
            )
        )

        data = client.get(f"/api/v1/health/metrics/{DAY}").json()

        assert data["exertion_score"] == 5.0

    def test_settled_day_is_not_recomputed_unless_forced(self, client):
        put_sample(client, sleep_hours=6)
        first = client.get(f"/api/v1/health/metrics/{DAY}").json()

        put_sample(client, sleep_hours=9)
        cached = client.get(f"/api/v1/health/metrics/{DAY}").json()
        forced = client.get(
            f"/api/v1/health/metrics/{DAY}", params={"force": True}
        ).json()

        assert first["sleep_hours"] == 6
        assert cached == first
        assert forced["sleep_hours"] == 9

    def test_metrics_range(self, client):
        client.get("/api/v1/health/metrics/2025-12-01")
        client.get("/api/v1/health/metrics/2025-12-03")
        client.get("/api/v1/health/metrics/2025-12-10")

        response = client.get(
            "/api/v1/health/metrics",
            params={"start": "2025-12-01", "end": "2025-12-05"},
        )

        assert response.status_code == 200
        assert [m["date"] for m in response.json()] == ["2025-12-01", "2025-12-03"]

    def test_metrics_range_rejects_reversed_dates(self, client):
        response = client.get(
            "/api/v1/health/metrics",
            params={"start": "2025-12-05", "end": "2025-12-01"},
        )

        assert response.status_code == 400


class TestSummary:
    def test_summary(self, client, db_session, session_factory):
        put_sample(client, sleep_hours=7, calories_burned=2100)
        SessionLog(db_session).append_session(
            session_factory(
                {"Bench Press": [(100, 5)]}, start_time=datetime(2025, 12, 1, 18, 0)
            )
        )

        response = client.get(f"/api/v1/health/summary/{DAY}")

        assert response.status_code == 200
        data = response.json()
        assert data["metrics"]["date"] == DAY
        assert [m["date"] for m in data["last_7_days"]] == [
            "2025-11-25",
            "2025-11-26",
            "2025-11-27",
            "2025-11-28",
            "2025-11-29",
            "2025-11-30",
            "2025-12-01",
        ]
        assert data["weekly_averages"]["avg_sleep_hours"] == 1
        assert data["weekly_averages"]["avg_calories_burned"] == 300
        assert data["workout_volume"] == 500

        # Every day in the window is now cached
        cached = client.get(
            "/api/v1/health/metrics",
            params={"start": "2025-11-25", "end": "2025-12-01"},
        ).json()
        assert len(cached) == 7

    def test_summary_without_workouts(self, client):
        data = client.get(f"/api/v1/health/summary/{DAY}").json()

        assert data["workout_volume"] is None
