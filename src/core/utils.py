"""Shared utility functions for Voxnote."""

import re
import uuid


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping JSON from LLM responses."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```\w*\n?", "", text)
        text = re.sub(r"\n?```$", "", text)
    return text.strip()


def new_record_id() -> str:
    """Return a fresh random (UUID4) identifier for a persisted record."""
    return str(uuid.uuid4())
