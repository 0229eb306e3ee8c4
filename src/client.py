"""Anthropic client configuration for dependency injection."""

import os

from anthropic import Anthropic
from fastapi import HTTPException


def get_anthropic_client() -> Anthropic:
    """Dependency function that returns the Anthropic client.

    Only the AI endpoints depend on it, so the rest of the API works
    without an API key.
    """
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        raise HTTPException(status_code=503, detail="AI features are not configured")
    return Anthropic(api_key=api_key)
