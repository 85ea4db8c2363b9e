"""
OpenAI-compatible inference provider.

Uses native function calling (``tools=``) of any endpoint that speaks the
OpenAI chat completions API: OpenAI itself, vLLM, SGLang, Ollama's
OpenAI shim and so on.
"""

import json
import logging
import uuid
from typing import Any, Optional

import openai
from openai import OpenAI

from ..models.config import InferenceConfig
from ..models.conversation import (
    AssistantTurn,
    ToolCall,
    ToolResultsTurn,
    Turn,
    UserTurn,
)
from ..protocol.errors import RequestTimeoutError
from .base import FinalAnswer, InferenceError, InferenceResponse, ToolCallsRequested

logger = logging.getLogger(__name__)


def turns_to_messages(history: list[Turn], system_prompt: str) -> list[dict]:
    """
    Convert conversation turns into OpenAI chat messages.

    A ``ToolResultsTurn`` expands to one ``role: tool`` message per result,
    which is how the chat completions API pairs results with calls.
    """
    messages: list[dict] = [{"role": "system", "content": system_prompt}]
    for turn in history:
        if isinstance(turn, UserTurn):
            messages.append({"role": "user", "content": turn.text})
        elif isinstance(turn, AssistantTurn):
            msg: dict[str, Any] = {"role": "assistant", "content": turn.text or None}
            if turn.tool_calls:
                msg["tool_calls"] = [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {
                            "name": call.name,
                            "arguments": json.dumps(call.arguments, ensure_ascii=False),
                        },
                    }
                    for call in turn.tool_calls
                ]
            messages.append(msg)
        elif isinstance(turn, ToolResultsTurn):
            for result in turn.results:
                messages.append(
                    {
                        "role": "tool",
                        "tool_call_id": result.call_id,
                        "content": result.content,
                    }
                )
    return messages


def _parse_arguments(name: str, raw: Any) -> dict:
    """Decode tool call arguments, which arrive as a JSON string."""
    if isinstance(raw, dict):
        return raw
    try:
        arguments = json.loads(raw or "{}")
    except (json.JSONDecodeError, TypeError):
        logger.warning("Malformed JSON in tool call arguments for %s", name)
        return {}
    if not isinstance(arguments, dict):
        logger.warning("Tool call arguments for %s are not an object", name)
        return {}
    return arguments


class OpenAIProvider:
    """Inference provider backed by the OpenAI SDK."""

    def __init__(
        self,
        config: Optional[InferenceConfig] = None,
        client: Optional[OpenAI] = None,
    ):
        self.config = config or InferenceConfig()
        self.model = self.config.model
        self._client = client or OpenAI(
            base_url=self.config.base_url,
            api_key=self.config.api_key or "not-needed",
            timeout=self.config.timeout,
            max_retries=0,
        )

    def __call__(
        self, history: list[Turn], tools: list[dict], system_prompt: str
    ) -> InferenceResponse:
        messages = turns_to_messages(history, system_prompt)
        create_kwargs: dict = {
            "model": self.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        if tools:
            create_kwargs["tools"] = tools

        try:
            logger.debug("Calling %s with %d messages", self.model, len(messages))
            response = self._client.chat.completions.create(**create_kwargs)
        except openai.APITimeoutError as e:
            raise RequestTimeoutError(
                self.config.timeout, f"Inference call timed out: {e}"
            ) from e
        except openai.OpenAIError as e:
            logger.error("Inference call to %s failed: %s", self.model, e)
            raise InferenceError(f"Inference call failed: {e}") from e

        if not response.choices:
            raise InferenceError("Inference response contained no choices")

        choice = response.choices[0]
        message = choice.message
        text = message.content or ""
        raw_calls = message.tool_calls or []

        if not raw_calls:
            logger.debug("Final answer (finish_reason=%s)", choice.finish_reason)
            return FinalAnswer(text=text)

        calls = tuple(
            ToolCall(
                id=raw.id or f"call_{uuid.uuid4().hex[:8]}",
                name=raw.function.name,
                arguments=_parse_arguments(raw.function.name, raw.function.arguments),
            )
            for raw in raw_calls
        )
        logger.debug("Model requested %d tool call(s)", len(calls))
        return ToolCallsRequested(calls=calls, text=text)
