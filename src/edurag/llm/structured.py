"""Parsing of structured (JSON) language-model responses.

Models asked for "JSON only" still wrap answers in markdown fences or add a
sentence of preamble now and then. Those cases are tolerated; anything that
does not validate against the target pydantic model raises
``MalformedResponseError`` so callers can degrade gracefully.
"""

from __future__ import annotations

import json
import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from edurag.errors import MalformedResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if present."""
    text = text.strip()
    match = _FENCE.match(text)
    return match.group(1).strip() if match else text


def _extract_object(text: str) -> str:
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        raise MalformedResponseError("No JSON object found in model response")
    return text[start : end + 1]


def parse_json_response(text: str, model: type[ModelT]) -> ModelT:
    """Parse ``text`` into ``model``.

    Raises:
        MalformedResponseError: If no JSON object can be decoded or it does
            not validate.
    """
    if not text or not text.strip():
        raise MalformedResponseError("Empty model response")

    body = strip_code_fence(text)
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        try:
            data = json.loads(_extract_object(body))
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(f"Invalid JSON in model response: {exc}") from exc

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"Model response does not match {model.__name__}: {exc.error_count()} error(s)"
        ) from exc
