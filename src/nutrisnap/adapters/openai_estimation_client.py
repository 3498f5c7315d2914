"""OpenAI Responses API client for nutrition estimates."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from nutrisnap.domain.errors import EstimationError, NoResponseError, ParseError
from nutrisnap.services.estimation import EstimationClient


@dataclass
class OpenAIEstimationClient(EstimationClient):
    """Estimation client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIEstimationClient":
        """Create an OpenAI estimation client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def estimate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": system_prompt,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise EstimationError("Failed to analyze meal. Please try again.") from exc
        output_text = response.output_text
        if not output_text:
            raise NoResponseError
        try:
            payload = json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise ParseError from exc
        if not isinstance(payload, dict):
            raise ParseError
        return payload
