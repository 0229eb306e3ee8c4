"""Shared utilities for AI agent interactions."""

import json
import logging
import os
from typing import List, Type, TypeVar

from anthropic import Anthropic
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AIRequestError(Exception):
    """The AI service could not be reached or returned an error."""


class AIResponseParseError(Exception):
    """The AI replied, but not with the JSON structure that was asked for.

    Kept separate from AIRequestError so callers can ask the user to try
    again instead of reporting a connection problem.
    """


def clean_json_response(response_text: str) -> str:
    """Remove markdown code blocks from AI response if present.

    Args:
        response_text: Raw text response from AI

    Returns:
        Cleaned JSON string
    """
    text = response_text.strip()

    # Remove markdown code blocks if present
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
        text = text.strip()

    return text


def call_ai_text(
    client: Anthropic,
    system_prompt: str,
    messages: List[dict],
    max_tokens: int = 1024,
    model: str | None = None,
    error_prefix: str = "AI agent",
) -> str:
    """Make a request to the AI agent and return the reply text.

    Raises:
        AIRequestError: If the request fails
    """
    if model is None:
        model = os.environ.get("ANTHROPIC_MODEL", DEFAULT_MODEL)

    try:
        response = client.messages.create(
            model=model,
            max_tokens=max_tokens,
            system=system_prompt,
            messages=messages,
        )
        return response.content[0].text
    except Exception as e:
        logger.warning("%s request failed: %s", error_prefix, e)
        raise AIRequestError(f"{error_prefix} request failed: {str(e)}") from e


def call_ai_agent(
    client: Anthropic,
    system_prompt: str,
    messages: List[dict],
    response_model: Type[T],
    max_tokens: int = 4096,
    model: str | None = None,
    error_prefix: str = "AI agent",
) -> T:
    """Make a request to the AI agent and parse the response.

    Args:
        client: Anthropic client instance
        system_prompt: System prompt for the AI
        messages: List of message dicts with 'role' and 'content'
        response_model: Pydantic model class to parse response into
        max_tokens: Maximum tokens for response (default: 4096)
        model: Model to use (default: ANTHROPIC_MODEL or claude-sonnet-4-20250514)
        error_prefix: Prefix for error messages (default: "AI agent")

    Returns:
        Instance of response_model parsed from AI response

    Raises:
        AIRequestError: If the AI request fails
        AIResponseParseError: If the reply is not valid JSON for response_model
    """
    response_text = call_ai_text(
        client,
        system_prompt,
        messages,
        max_tokens=max_tokens,
        model=model,
        error_prefix=error_prefix,
    )
    cleaned_text = clean_json_response(response_text)

    try:
        data = json.loads(cleaned_text)
        return response_model.model_validate(data)
    except json.JSONDecodeError as e:
        logger.warning("%s returned invalid JSON: %s", error_prefix, e)
        raise AIResponseParseError(
            f"{error_prefix} returned invalid JSON: {str(e)}"
        ) from e
    except ValidationError as e:
        logger.warning("%s returned an incomplete response: %s", error_prefix, e)
        raise AIResponseParseError(
            f"{error_prefix} returned an incomplete response: {str(e)}"
        ) from e
