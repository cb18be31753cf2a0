from __future__ import annotations

import asyncio
import logging
from typing import Any

import aisuite as ai  # type: ignore
import httpx

from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class LLMProvider:
    """
    Chat-completion client for an OpenAI-compatible AI gateway.

    The gateway is reached through aisuite's ``openai`` provider with a custom
    ``base_url``, so ``model`` is the gateway's own identifier
    (e.g. ``google/gemini-2.5-flash``).
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.model = model
        # A failed AI call fails the request once; the openai client retries twice by default
        config: dict[str, Any] = {"api_key": api_key, "base_url": base_url, "max_retries": 0}
        if http_client is not None:
            config["http_client"] = http_client
        try:
            self._client = ai.Client({"openai": config})
        except Exception as exc:  # fail fast if aisuite cannot initialize
            raise RuntimeError("Failed to initialize aisuite client") from exc

    def chat(self, messages: list[dict[str, Any]], **kwargs: Any) -> str:
        """Send a chat completion request and return the first choice's content.

        ``messages`` may carry multimodal content (lists of text / image_url parts).
        Extra keyword arguments such as ``response_format`` go to the gateway as-is.
        """
        try:
            resp = self._client.chat.completions.create(
                model=f"openai:{self.model}",
                messages=messages,
                **kwargs,
            )
        except Exception as exc:
            # status codes and bodies stay in the server log
            logger.error(f"AI API error for model {self.model}: {exc}")
            raise UpstreamError(f"AI API error: {exc}") from exc

        if not resp.choices:
            raise UpstreamError("AI API returned no choices")
        return resp.choices[0].message.content or ""

    async def chat_async(self, messages: list[dict[str, Any]], **kwargs: Any) -> str:
        """Async version of chat. Runs the sync client in a worker thread."""

        def _sync_chat():
            return self.chat(messages, **kwargs)

        return await asyncio.to_thread(_sync_chat)
