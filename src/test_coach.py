"""Tests for AI routine generation and workout feedback."""

import json

import pytest

from ai_utils import AIRequestError, AIResponseParseError, clean_json_response
from coach import (
    build_feedback_prompt,
    build_routine_prompt,
    generate_routine,
    generate_workout_feedback,
)
from typedefs import WorkoutPR


def test_clean_json_response():
    assert clean_json_response('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_json_response('```\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_json_response('  {"a": 1} ') == '{"a": 1}'


def test_build_routine_prompt():
    assert build_routine_prompt("strength") == (
        "Create a workout routine based on: strength"
    )
    assert build_routine_prompt("strength", 4).endswith("Training Days Per Week: 4")


class TestGenerateRoutine:
    def test_converts_reply_to_routine(self, ai_reply):
        client = ai_reply(
            json.dumps(
                {
                    "routine_name": "Upper Lower",
                    "days": [
                        {
                            "day_name": "Upper",
                            "exercises": [{"name": "Bench Press", "sets": 4}],
                        },
                        {
                            "day_name": "Lower",
                            "exercises": [{"name": "Squat", "sets": 5}],
                        },
                    ],
                }
            )
        )

        routine = generate_routine(client, "upper lower split")

        assert routine.name == "Upper Lower"
        assert routine.current_day_index == 0
        assert [(d.day_number, d.name) for d in routine.days] == [
            (1, "Upper"),
            (2, "Lower"),
        ]
        assert routine.days[1].exercises[0].sets == 5
        assert routine.days[0].id != routine.days[1].id

    def test_invalid_json(self, ai_reply):
        with pytest.raises(AIResponseParseError):
            generate_routine(ai_reply("{not json"), "anything")

    def test_request_error(self, ai_reply):
        client = ai_reply("")
        client.messages.create.side_effect = RuntimeError("connection reset")

        with pytest.raises(AIRequestError, match="connection reset"):
            generate_routine(client, "anything")

    def test_model_from_environment(self, ai_reply, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_MODEL", "claude-test-model")
        client = ai_reply("{}")

        with pytest.raises(AIResponseParseError):
            generate_routine(client, "anything")

        assert client.messages.create.call_args.kwargs["model"] == "claude-test-model"


def test_feedback_prompt(session_factory):
    session = session_factory({"Squat": [(100, 5), (100, 5)]}, duration=2700)
    prs = [WorkoutPR(exercise_name="Squat", set_number=1, pr_types=["max_weight"])]

    prompt = build_feedback_prompt(session, prs)

    assert "Day: Day 1 - Push" in prompt
    assert "Duration: 45 minutes" in prompt
    assert "Completed sets: 2" in prompt
    assert "Total volume: 1000 kg" in prompt
    assert "- Squat: 2/2 sets" in prompt
    assert "- Squat (set 1): Heaviest Weight" in prompt


def test_feedback_prompt_without_records(session_factory):
    prompt = build_feedback_prompt(session_factory({"Squat": [(100, 5)]}), [])

    assert "Personal records" not in prompt


def test_generate_workout_feedback(ai_reply, session_factory):
    client = ai_reply("\nNice work today.\n")

    feedback = generate_workout_feedback(
        client, session_factory({"Squat": [(100, 5)]}), []
    )

    assert feedback == "Nice work today."
    assert client.messages.create.call_args.kwargs["max_tokens"] == 512
