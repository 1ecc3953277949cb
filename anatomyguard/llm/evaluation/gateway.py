"""Generation gateways: the structured-completion capability behind the pipeline.

A gateway is given instruction text, the two encoded documents and the output
schema, and returns the raw text of the generated payload. It guarantees
nothing about that text; validation happens downstream.
"""

from __future__ import annotations

import base64
import logging
import typing as t

import pydantic as p
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

import anatomyguard.lib.json
from anatomyguard.model import EncodedDocument

from .errors import EmptyResponse, GatewayUnavailable

if t.TYPE_CHECKING:
    from google import genai

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert academic evaluator. Respond only with valid JSON, no markdown formatting."


@t.runtime_checkable
class GenerationGateway(t.Protocol):
    async def generate(
        self, instructions: t.Sequence[str], documents: t.Sequence[EncodedDocument], schema: dict[str, t.Any]
    ) -> str: ...


def _get_content_str(content: t.Any) -> str:
    """Extract string content from a LangChain message content field."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for item in t.cast(list[t.Any], content):
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and item.get("type") == "text":
                parts.append(str(item.get("text", "")))
        return "".join(parts)
    return str(content)


class ChatModelGateway(object):
    """Gateway backed by a LangChain chat model (OpenAI, Anthropic).

    Documents are attached as base64 file content blocks and the schema is
    appended to the prompt, since not every chat model accepts a response
    schema for multimodal input.
    """

    def __init__(self, model: BaseChatModel):
        self._model = model

    def _file_block(self, document: EncodedDocument) -> dict[str, t.Any]:
        return {
            "type": "file",
            "source_type": "base64",
            "data": document.content,
            "mime_type": document.media_type,
            "filename": document.name,
        }

    async def generate(
        self, instructions: t.Sequence[str], documents: t.Sequence[EncodedDocument], schema: dict[str, t.Any]
    ) -> str:
        content: list[str | dict[str, t.Any]] = [{"type": "text", "text": text} for text in instructions]
        content.append({
            "type": "text",
            "text": "JSON schema of the required output:\n" + anatomyguard.lib.json.dumps(schema, indent=2),
        })
        content.extend(self._file_block(d) for d in documents)

        try:
            response = await self._model.ainvoke([SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=content)])
        except Exception as e:
            logger.error("chat model invocation failed", extra={"error": repr(e)})
            raise GatewayUnavailable(repr(e)) from e

        text = _get_content_str(response.content)
        if not text.strip():
            raise EmptyResponse()
        return text


class GeminiGateway(object):
    """Gateway backed by the Gemini API, using its native JSON response schema."""

    def __init__(
        self,
        api_key: p.Secret[str],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        thinking_budget: int | None = None,
        timeout: float | None = None,
    ):
        self._api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.thinking_budget = thinking_budget
        self.timeout = timeout
        self._client: genai.Client | None = None

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            from google import genai
            from google.genai import types

            http_options = None
            if self.timeout is not None:
                # milliseconds
                http_options = types.HttpOptions(timeout=int(self.timeout * 1000))
            self._client = genai.Client(api_key=self._api_key.get_secret_value(), http_options=http_options)
        return self._client

    async def generate(
        self, instructions: t.Sequence[str], documents: t.Sequence[EncodedDocument], schema: dict[str, t.Any]
    ) -> str:
        from google.genai import types

        parts = [types.Part.from_text(text=text) for text in instructions]
        parts.extend(
            types.Part.from_bytes(data=base64.b64decode(d.content), mime_type=d.media_type) for d in documents
        )
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_json_schema=schema,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            thinking_config=(
                types.ThinkingConfig(thinking_budget=self.thinking_budget) if self.thinking_budget is not None else None
            ),
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[types.Content(role="user", parts=parts)],
                config=config,
            )
        except Exception as e:
            logger.error("gemini generation failed", extra={"model": self.model, "error": repr(e)})
            raise GatewayUnavailable(repr(e)) from e

        text = response.text
        if not text or not text.strip():
            raise EmptyResponse()
        return text
