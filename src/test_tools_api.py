"""Tests for plate, unit, personal record and exercise history endpoints."""

from datetime import datetime

import pytest

from storage import SessionLog


class TestPlates:
    def test_plates_kg(self, client):
        response = client.get("/api/v1/plates", params={"target": 100, "unit": "kg"})

        assert response.status_code == 200
        assert response.json() == {
            "target_weight": 100,
            "unit": "kg",
            "is_valid": True,
            "plates": [{"weight": 20, "count": 2}],
            "total_per_side": 40,
            "error_message": None,
            "description": "Each side: 2×20kg",
            "compact": "2×20",
        }

    def test_default_unit_from_environment(self, client, monkeypatch):
        monkeypatch.setenv("DEFAULT_WEIGHT_UNIT", "lbs")

        data = client.get("/api/v1/plates", params={"target": 135}).json()

        assert data["unit"] == "lbs"
        assert data["description"] == "Each side: 1×45lbs"

    def test_unreachable_target(self, client):
        data = client.get(
            "/api/v1/plates", params={"target": 143.5, "unit": "kg"}
        ).json()

        assert data["is_valid"] is False
        assert data["error_message"] == "Cannot load exactly 143.5kg. Closest: 142.5kg"
        assert data["description"] == data["error_message"]
        assert data["compact"] == ""

    def test_invalid_unit(self, client):
        response = client.get("/api/v1/plates", params={"target": 100, "unit": "st"})

        assert response.status_code == 422

    @pytest.mark.parametrize("target", ["inf", "-inf", "nan", "Infinity"])
    def test_non_finite_target(self, client, target):
        response = client.get("/api/v1/plates", params={"target": target})

        assert response.status_code == 422


class TestConvert:
    def test_convert(self, client):
        data = client.get(
            "/api/v1/units/convert",
            params={"weight": 100, "from_unit": "kg", "to_unit": "lbs"},
        ).json()

        assert data["converted"] == pytest.approx(220.462)

    def test_convert_rounded(self, client):
        data = client.get(
            "/api/v1/units/convert",
            params={
                "weight": 100,
                "from_unit": "lbs",
                "to_unit": "kg",
                "rounded": True,
            },
        ).json()

        # 45.3592 -> 45.5
        assert data["converted"] == 45.5

    def test_non_finite_weight(self, client):
        response = client.get(
            "/api/v1/units/convert",
            params={"weight": "inf", "from_unit": "kg", "to_unit": "lbs"},
        )

        assert response.status_code == 422


class TestPersonalRecordCheck:
    def test_first_set(self, client):
        response = client.post(
            "/api/v1/personal-records/check",
            json={"exercise_name": "Bench Press", "weight": 60, "reps": 10},
        )

        assert response.status_code == 200
        assert response.json() == {
            "is_pr": True,
            "types": ["max_weight", "max_reps", "max_volume"],
            "description": "Heaviest Weight • Most Reps • Best Volume",
        }

    def test_against_logged_sessions(self, client, db_session, session_factory):
        SessionLog(db_session).append_session(
            session_factory({"Bench Press": [(100, 5)]})
        )

        not_pr = client.post(
            "/api/v1/personal-records/check",
            json={"exercise_name": "bench press", "weight": 95, "reps": 5},
        ).json()
        heavier = client.post(
            "/api/v1/personal-records/check",
            json={"exercise_name": "Bench Press", "weight": 102.5, "reps": 5},
        ).json()

        # First set at 95kg
        assert not_pr["types"] == ["max_reps"]
        assert heavier == {
            "is_pr": True,
            "types": ["max_weight", "max_reps", "max_volume"],
            "description": "Heaviest Weight • Most Reps • Best Volume",
        }

    def test_rejects_empty_set(self, client):
        response = client.post(
            "/api/v1/personal-records/check",
            json={"exercise_name": "Bench Press", "weight": 0, "reps": 5},
        )

        assert response.status_code == 422

    def test_rejects_non_finite_weight(self, client):
        response = client.post(
            "/api/v1/personal-records/check",
            content='{"exercise_name": "Bench Press", "weight": 1e999, "reps": 5}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        error = response.json()["detail"][0]
        assert error["loc"] == ["body", "weight"]
        assert error["input"] == "inf"


class TestExerciseHistory:
    def test_history(self, client, db_session, session_factory):
        log = SessionLog(db_session)
        log.append_session(
            session_factory(
                {"Bench Press": [(100, 5)]}, start_time=datetime(2025, 12, 3, 9, 0)
            )
        )
        log.append_session(
            session_factory(
                {"Bench Press": [(95, 5), (95, 5)]},
                start_time=datetime(2025, 12, 1, 9, 0),
                routine_id="other",
            )
        )

        data = client.get("/api/v1/exercises/bench press/history").json()

        assert data["exercise_name"] == "bench press"
        assert [p["max_weight"] for p in data["data"]] == [95, 100]
        assert data["total_workouts"] == 2
        assert data["total_volume"] == 1450
        assert data["max_weight"] == 100
        assert data["total_sets"] == 3

        filtered = client.get(
            "/api/v1/exercises/Bench Press/history", params={"routine_id": "other"}
        ).json()
        assert filtered["total_workouts"] == 1
