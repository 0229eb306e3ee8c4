"""AI routine generation and workout feedback."""

import json
from typing import List, Sequence

from anthropic import Anthropic

from ai_utils import call_ai_agent, call_ai_text
from personal_records import get_pr_description
from typedefs import (
    AIGeneratedRoutine,
    Exercise,
    Routine,
    RoutineDay,
    WorkoutPR,
    WorkoutSession,
)


def get_routine_schema_prompt() -> str:
    """Generate schema description from the AIGeneratedRoutine model"""
    schema = AIGeneratedRoutine.model_json_schema()
    return f"""You are a strength coach designing multi-day gym routines.

Generate a routine in valid JSON format matching this exact schema:

{json.dumps(schema, indent=2)}

A routine contains:
- routine_name: short descriptive name (e.g., "Push Pull Legs")
- days: the training days in the order they are performed, each with
  * day_name: e.g. "Day 1 - Push"
  * exercises: list of exercises, each with
    - name: exercise name in singular form (e.g., "Bench Press")
    - sets: number of working sets (typically 3-5)
    - rest_time: rest between sets in seconds (e.g., 90)

CRITICAL: Return ONLY valid JSON matching this schema. No markdown,
no explanation, no code blocks."""


def build_routine_prompt(prompt: str, days_per_week: int | None = None) -> str:
    prompt_parts = [f"Create a workout routine based on: {prompt}"]
    if days_per_week:
        prompt_parts.append(f"Training Days Per Week: {days_per_week}")
    return "\n".join(prompt_parts)


def routine_from_generated(generated: AIGeneratedRoutine) -> Routine:
    """Convert the AI response into a new Routine starting at its first day."""
    days = [
        RoutineDay(
            day_number=number,
            name=day.day_name,
            exercises=[
                Exercise(name=ex.name, sets=ex.sets, rest_time=ex.rest_time)
                for ex in day.exercises
            ],
        )
        for number, day in enumerate(generated.days, start=1)
    ]
    return Routine(name=generated.routine_name, days=days, current_day_index=0)


def generate_routine(
    client: Anthropic, prompt: str, days_per_week: int | None = None
) -> Routine:
    """Generate a routine using AI.

    Raises:
        AIResponseParseError: If the reply is not a usable routine
        AIRequestError: If the AI request fails
    """
    generated = call_ai_agent(
        client=client,
        system_prompt=get_routine_schema_prompt(),
        messages=[
            {"role": "user", "content": build_routine_prompt(prompt, days_per_week)}
        ],
        response_model=AIGeneratedRoutine,
        max_tokens=4096,
        error_prefix="Routine generation",
    )
    return routine_from_generated(generated)


FEEDBACK_SYSTEM_PROMPT = """You are an encouraging strength coach. Given a \
summary of a finished gym session, write 2-4 sentences of feedback: \
acknowledge what went well, call out any personal records, and give one \
concrete suggestion for next time. Plain text only, no markdown."""


def build_feedback_prompt(session: WorkoutSession, prs: Sequence[WorkoutPR]) -> str:
    minutes = session.duration // 60
    lines = [
        f"Routine: {session.routine_name}",
        f"Day: {session.day_name}",
        f"Duration: {minutes} minutes",
        f"Completed sets: {session.total_sets}",
        f"Total volume: {round(session.total_volume)} {session.weight_unit}",
        "",
        "Exercises:",
    ]
    for exercise in session.exercises:
        completed = sum(1 for s in exercise.sets if s.completed)
        lines.append(f"- {exercise.name}: {completed}/{len(exercise.sets)} sets")

    if prs:
        lines.extend(["", "Personal records:"])
        for pr in prs:
            lines.append(
                f"- {pr.exercise_name} (set {pr.set_number}): "
                f"{get_pr_description(pr.pr_types)}"
            )

    return "\n".join(lines)


def generate_workout_feedback(
    client: Anthropic, session: WorkoutSession, prs: List[WorkoutPR]
) -> str:
    feedback = call_ai_text(
        client=client,
        system_prompt=FEEDBACK_SYSTEM_PROMPT,
        messages=[{"role": "user", "content": build_feedback_prompt(session, prs)}],
        max_tokens=512,
        error_prefix="Workout feedback",
    )
    return feedback.strip()
