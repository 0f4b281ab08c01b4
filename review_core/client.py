"""Thin adapter that turns provider calls into ``Result`` values."""

import logging

from review_core.models import GenerationParams
from review_core.providers.base import AIProvider, ProviderError
from review_core.result import ErrorKind, Result

logger = logging.getLogger(__name__)


class TextGenerationClient:
    """Wraps an optional provider. Never raises for provider failures."""

    def __init__(self, provider: AIProvider | None) -> None:
        self._provider = provider

    @property
    def is_configured(self) -> bool:
        return self._provider is not None

    @property
    def provider(self) -> AIProvider | None:
        return self._provider

    async def generate(self, prompt: str, params: GenerationParams | None = None) -> Result[str]:
        if self._provider is None:
            return Result.failure(ErrorKind.SERVICE_UNAVAILABLE, "No text generation provider configured")

        params = params or GenerationParams()
        logger.debug("Generating with %s (%d prompt chars)", self._provider.name(), len(prompt))
        try:
            response = await self._provider.generate(prompt, params)
        except ProviderError as exc:
            kind = ErrorKind.TIMEOUT if exc.timed_out else ErrorKind.SERVICE_ERROR
            return Result.failure(kind, str(exc))
        except TimeoutError as exc:
            return Result.failure(ErrorKind.TIMEOUT, f"[{self._provider.name()}] {exc}")
        except Exception as exc:
            return Result.failure(ErrorKind.SERVICE_ERROR, f"[{self._provider.name()}] Unexpected error: {exc}")

        if not response.content or not response.content.strip():
            return Result.failure(ErrorKind.PARSE_ERROR, f"[{self._provider.name()}] Blank generation")
        return Result.success(response.content)
