from __future__ import annotations

import asyncio
import logging
from typing import Protocol, Sequence

from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from src.app.errors import ConfigError, UpstreamError
from src.app.settings import Settings
from src.db.schemas import PromptMessage
from src.llms.providers.cerebras_client import CerebrasLLM

logger = logging.getLogger(__name__)


class Generator(Protocol):
    async def generate(
        self,
        messages: Sequence[PromptMessage],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str: ...


class CerebrasGenerator:
    """
    Async adapter over the synchronous Cerebras client.

    Each attempt runs in a worker thread and is bounded by `timeout_s`.
    Failed attempts are retried `max_retries` times with exponential backoff;
    the last failure is raised as UpstreamError.
    """

    def __init__(
        self,
        llm: CerebrasLLM,
        *,
        model: str,
        timeout_s: float = 30.0,
        max_retries: int = 0,
        backoff_s: float = 0.5,
    ):
        self.llm = llm
        self.model = model
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.backoff_s = backoff_s

    async def _attempt(self, payload, temperature: float, max_tokens: int) -> str:
        return await asyncio.wait_for(
            asyncio.to_thread(
                self.llm.chat,
                model=self.model,
                messages=payload,
                temperature=temperature,
                max_completion_tokens=max_tokens,
            ),
            timeout=self.timeout_s,
        )

    async def generate(
        self,
        messages: Sequence[PromptMessage],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        payload = [m.model_dump() for m in messages]
        text = ""
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries + 1),
                wait=wait_exponential(multiplier=self.backoff_s, max=8),
                reraise=True,
            ):
                with attempt:
                    text = await self._attempt(payload, temperature, max_tokens)
        except asyncio.TimeoutError as e:
            raise UpstreamError(f"generator timed out after {self.timeout_s}s") from e
        except Exception as e:
            raise UpstreamError(f"generator call failed: {e}") from e
        return text


def build_generator(settings: Settings) -> CerebrasGenerator:
    if not settings.cerebras_api_key:
        raise ConfigError("Missing required env var: CEREBRAS_API_KEY")
    llm = CerebrasLLM(api_key=settings.cerebras_api_key, timeout_s=settings.generator_timeout_s)
    logger.info(
        "generator configured",
        extra={"fields": {"model": settings.cerebras_model, "max_retries": settings.generator_max_retries}},
    )
    return CerebrasGenerator(
        llm,
        model=settings.cerebras_model,
        timeout_s=settings.generator_timeout_s,
        max_retries=settings.generator_max_retries,
    )
