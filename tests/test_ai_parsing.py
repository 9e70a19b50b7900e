"""Tests for decoding free-text model output."""

import pytest

from core.ai_parsing import Err, Ok, decode_json, request_structured, strip_code_fences
from core.errors import ExternalServiceError
from core.generator import TextGenerator
from schemas.analytics import CampaignInsights, ContentThemes

VALID = '{"themes": ["travel"], "style": "dreamy", "recurring_elements": [], "high_engagement_content": ["sunsets"]}'


class TestDecodeJson:

    def test_valid_object(self):
        result = decode_json(VALID, ContentThemes, ContentThemes.placeholder())

        assert isinstance(result, Ok)
        assert result.value.style == "dreamy"

    def test_code_fences_are_stripped(self):
        assert strip_code_fences("```json\n{}\n```") == "{}"
        assert isinstance(decode_json(f"```\n{VALID}\n```", ContentThemes, ContentThemes.placeholder()), Ok)

    def test_invalid_json_returns_placeholder(self):
        placeholder = ContentThemes.placeholder()

        result = decode_json("{themes: travel", ContentThemes, placeholder)

        assert isinstance(result, Err)
        assert result.value == placeholder
        assert "invalid JSON" in result.reason

    def test_non_object_payload(self):
        result = decode_json('["travel"]', ContentThemes, ContentThemes.placeholder())

        assert isinstance(result, Err)
        assert result.reason == "not a JSON object"

    def test_schema_mismatch(self):
        result = decode_json('{"themes": "travel"}', ContentThemes, ContentThemes.placeholder())

        assert isinstance(result, Err)
        assert result.value.themes == ["Unable to analyze themes"]

    def test_empty_response(self):
        assert decode_json("", ContentThemes, ContentThemes.placeholder()).reason == "empty response"


class TestRequestStructured:

    def test_without_generator(self):
        result = request_structured(None, "prompt", CampaignInsights, CampaignInsights.placeholder(), "report")

        assert isinstance(result, Err)
        assert result.value.recommendations == ["Unable to generate recommendations"]

    def test_generator_failure_is_contained(self, make_generator):
        generator = make_generator(error="timeout")

        result = request_structured(generator, "prompt", ContentThemes, ContentThemes.placeholder(), "themes")

        assert isinstance(result, Err)
        assert result.reason == "timeout"

    def test_unexpected_client_error_is_contained(self):
        class BrokenClient:
            def generate(self, prompt, **kwargs):
                raise ConnectionError("connection reset")

        result = request_structured(BrokenClient(), "prompt", ContentThemes, ContentThemes.placeholder(), "themes")

        assert isinstance(result, Err)
        assert result.reason == "connection reset"
        assert result.value.themes == ["Unable to analyze themes"]

    def test_passes_generation_settings(self, make_generator):
        generator = make_generator([VALID])

        result = request_structured(generator, "prompt", ContentThemes, ContentThemes.placeholder(), "themes", max_tokens=1000)

        assert isinstance(result, Ok)
        assert generator.calls[0]["max_tokens"] == 1000
        assert generator.calls[0]["temperature"] == 0.3


class TestTextGenerator:

    def test_unconfigured_generator_raises(self, monkeypatch):
        monkeypatch.setattr("core.generator.GEMINI_API_KEY", None)
        monkeypatch.setattr("core.generator.OPENAI_API_KEY", None)

        text_generator = TextGenerator()

        assert not text_generator.available
        with pytest.raises(ExternalServiceError):
            text_generator.generate("prompt")
