"""
Decoding of free-text model output into typed results.

Model responses are untrusted text. decode_json never raises: it returns
Ok(parsed) when the text is a JSON object matching the schema, otherwise
Err(fallback) carrying the placeholder the caller supplied and the reason.
"""

from dataclasses import dataclass
from typing import Generic, Type, TypeVar, Union
import json
import logging

from pydantic import BaseModel, ValidationError as SchemaError


T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[T]):
    fallback: T
    reason: str

    @property
    def value(self) -> T:
        return self.fallback


DecodeResult = Union[Ok[T], Err[T]]


def strip_code_fences(text_response: str) -> str:
    """Remove the ```json fences models like to wrap JSON in."""
    text_response = text_response.strip()
    if text_response.startswith("```json"):
        text_response = text_response[7:]
    elif text_response.startswith("```"):
        text_response = text_response[3:]
    if text_response.endswith("```"):
        text_response = text_response[:-3]
    return text_response.strip()


def decode_json(text_response: str, schema: Type[T], fallback: T, context: str = "model output") -> DecodeResult:
    if not text_response:
        logging.error(f"Empty response while parsing {context}")
        return Err(fallback, "empty response")

    try:
        payload = json.loads(strip_code_fences(text_response))
    except json.JSONDecodeError as e:
        logging.error(f"Error parsing {context}: {e}")
        return Err(fallback, f"invalid JSON: {e}")

    if not isinstance(payload, dict):
        logging.error(f"Error parsing {context}: expected a JSON object, got {type(payload).__name__}")
        return Err(fallback, "not a JSON object")

    try:
        return Ok(schema.model_validate(payload))
    except SchemaError as e:
        logging.error(f"Error parsing {context}: {e.error_count()} schema errors")
        return Err(fallback, f"schema mismatch: {e.error_count()} errors")


def request_structured(text_generator, prompt: str, schema: Type[T], fallback: T, context: str, max_tokens: int = 800) -> DecodeResult:
    """Ask the text generator for a JSON object; generator failures decode to Err like bad output."""
    if text_generator is None:
        logging.warning(f"No text generator configured for {context}")
        return Err(fallback, "no text generator")

    try:
        response = text_generator.generate(
            prompt,
            max_tokens=max_tokens,
            temperature=0.3,
            response_format="json_object",
        )
    except Exception as e:
        logging.error(f"Text generation failed for {context}: {e}")
        return Err(fallback, str(e))

    return decode_json(response, schema, fallback, context=context)
