"""Tests for the OpenAI estimation adapter."""

import asyncio
import json

import httpx
import pytest
from openai import APIConnectionError

from nutrisnap.adapters.openai_estimation_client import OpenAIEstimationClient
from nutrisnap.domain.errors import EstimationError, NoResponseError, ParseError


class _FakeResponses:
    def __init__(self, output_text: str = "", error: Exception | None = None) -> None:
        self.output_text = output_text
        self.error = error
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        if self.error is not None:
            raise self.error
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, responses: _FakeResponses) -> None:
        self.responses = responses


def _estimate(client: OpenAIEstimationClient) -> dict[str, object]:
    return asyncio.run(
        client.estimate(
            model="gpt-5.2",
            reasoning_effort="low",
            store=False,
            system_prompt="You are a nutritionist.",
            prompt="2 eggs",
            schema={"type": "object"},
            schema_name="meal_estimate",
        )
    )


def test_openai_estimation_client_parses_output() -> None:
    responses = _FakeResponses(output_text=json.dumps({"totalCalories": 150}))
    client = OpenAIEstimationClient(client=_FakeOpenAI(responses))

    result = _estimate(client)

    assert result == {"totalCalories": 150}
    payload = responses.last_payload
    assert payload is not None
    assert payload["instructions"] == "You are a nutritionist."
    assert payload["reasoning"] == {"effort": "low"}
    assert payload["text"]["format"]["name"] == "meal_estimate"
    assert payload["text"]["format"]["strict"] is True


def test_openai_estimation_client_empty_output() -> None:
    client = OpenAIEstimationClient(client=_FakeOpenAI(_FakeResponses("")))

    with pytest.raises(NoResponseError):
        _estimate(client)


@pytest.mark.parametrize("output_text", ["{not json", "[1, 2]"])
def test_openai_estimation_client_bad_json(output_text: str) -> None:
    client = OpenAIEstimationClient(client=_FakeOpenAI(_FakeResponses(output_text)))

    with pytest.raises(ParseError):
        _estimate(client)


def test_openai_estimation_client_wraps_api_errors() -> None:
    request = httpx.Request("POST", "https://api.openai.com/v1/responses")
    responses = _FakeResponses(error=APIConnectionError(request=request))
    client = OpenAIEstimationClient(client=_FakeOpenAI(responses))

    with pytest.raises(EstimationError):
        _estimate(client)
