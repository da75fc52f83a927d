from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from src.application.schemas.markov import GeneratePayload, InputPayload, MarkovClientConfig
from src.domain.content_string import ContentString


def test_input_payload():
    payload = InputPayload(input=ContentString("qweasd123"))
    assert payload.model_dump_json() == '{"input":"qweasd123"}'


def test_input_payload_accepts_plain_str():
    payload = InputPayload(input="qweasd123")
    assert isinstance(payload.input, ContentString)
    assert json.loads(payload.model_dump_json()) == {"input": "qweasd123"}


def test_generate_payload():
    payload = GeneratePayload()
    assert payload.model_dump_json() == '{"start":null,"max_length":null}'

    payload = GeneratePayload(start=ContentString("qweasd123"))
    assert json.loads(payload.model_dump_json()) == {"start": "qweasd123", "max_length": None}

    payload = GeneratePayload(start=ContentString("qweasd123"), max_length=42)
    assert payload.model_dump_json() == '{"start":"qweasd123","max_length":42}'


def test_generate_payload_rejects_negative_max_length():
    with pytest.raises(ValidationError):
        GeneratePayload(max_length=-1)


@pytest.mark.parametrize(
    "raw, error_type",
    [
        ("", "content_string_empty"),
        ("x" * 2001, "content_string_too_long"),
    ],
)
def test_payload_rejects_invalid_text(raw: str, error_type: str):
    with pytest.raises(ValidationError) as exc_info:
        InputPayload(input=raw)
    assert exc_info.value.errors()[0]["type"] == error_type


def test_payloads_are_immutable():
    payload = InputPayload(input="abc")
    with pytest.raises(ValidationError):
        payload.input = ContentString("other")  # type: ignore[misc]


def test_client_config_from_settings(monkeypatch: pytest.MonkeyPatch):
    from src.shared.config import reset_settings_for_tests

    monkeypatch.setenv("MARKOV_BASE_URL", "http://markov.internal:9000")
    monkeypatch.setenv("MARKOV_TIMEOUT", "5")
    reset_settings_for_tests()

    config = MarkovClientConfig.from_settings()
    assert config.base_url == "http://markov.internal:9000"
    assert config.timeout == 5.0
