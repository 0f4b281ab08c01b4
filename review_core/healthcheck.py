"""Provider health: static configuration status and a live ping."""

import asyncio
import logging
from dataclasses import dataclass

from review_core.models import GenerationParams
from review_core.providers.base import AIProvider

logger = logging.getLogger(__name__)

_PING_PROMPT = "Reply with the word OK only."
_PING_PARAMS = GenerationParams(max_tokens=5, temperature=0.0)
_TIMEOUT_SEC = 15.0


@dataclass
class HealthStatus:
    available: bool
    fallback_mode: bool
    provider: str | None = None
    error: str = ""


async def ping(provider: AIProvider) -> tuple[bool, str]:
    """Ping a single provider. Returns (ok, error_message)."""
    try:
        await asyncio.wait_for(provider.generate(_PING_PROMPT, _PING_PARAMS), timeout=_TIMEOUT_SEC)
        return True, ""
    except Exception as exc:
        logger.warning("Health check failed for %s: %s", provider.name(), exc)
        return False, str(exc)
