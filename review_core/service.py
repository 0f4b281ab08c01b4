"""ReviewService: the surface controllers call, wired by explicit injection."""

import logging

from config.config_loader import AppConfig
from review_core.client import TextGenerationClient
from review_core.debate import DebateEngine
from review_core.guard import RetryTimeoutGuard
from review_core.healthcheck import HealthStatus, ping
from review_core.models import (
    AISuggestion,
    AnalysisResult,
    CodeChange,
    CodeSnippet,
    DebateArguments,
    DebateContext,
    DebateResponse,
    EnhancedAnalysisResult,
)
from review_core.orchestrator import AnalysisOrchestrator
from review_core.providers.anthropic import AnthropicProvider
from review_core.providers.base import AIProvider, ProviderError
from review_core.providers.gemini import GeminiProvider
from review_core.providers.openai_provider import HuggingFaceProvider, OpenAIProvider
from review_core.store import (
    CodeSnippetStore,
    DebateStore,
    InMemoryDebateStore,
    InMemorySessionStore,
    InMemorySnippetStore,
    SessionStore,
)
from review_core.suggestions import generate_suggestions

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[AIProvider]] = {
    "huggingface": HuggingFaceProvider,
    "claude": AnthropicProvider,
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
}


def build_provider(config: AppConfig) -> AIProvider | None:
    """Instantiate the selected provider, or None when running in fallback mode."""
    name = config.defaults.provider
    if config.fallback_mode:
        return None
    if name not in PROVIDER_CLASSES or name not in config.models:
        logger.warning("Provider '%s' unknown, AI features disabled", name)
        return None
    try:
        return PROVIDER_CLASSES[name](config.models[name])
    except ProviderError as exc:
        logger.warning("Failed to instantiate provider '%s': %s", name, exc)
        return None


class ReviewService:
    def __init__(
        self,
        config: AppConfig,
        client: TextGenerationClient,
        snippets: CodeSnippetStore,
        sessions: SessionStore,
        debates: DebateStore,
    ) -> None:
        self._config = config
        self._client = client
        self._snippets = snippets
        self._sessions = sessions
        guard = RetryTimeoutGuard(base_delay_ms=config.pipeline.base_delay_ms)
        self.orchestrator = AnalysisOrchestrator(client, guard, config.prompts, config.pipeline)
        self.debates = DebateEngine(client, guard, debates, config.prompts, config.pipeline, config.debate)

    @property
    def fallback_mode(self) -> bool:
        return self._config.fallback_mode or not self._client.is_configured

    async def analyze(self, snippet: CodeSnippet) -> EnhancedAnalysisResult:
        return await self.orchestrator.analyze(snippet)

    async def analyze_snippet(self, snippet_id: str) -> EnhancedAnalysisResult:
        """Look up a stored snippet and analyse it. Raises NotFound."""
        return await self.orchestrator.analyze(self._snippets.get(snippet_id))

    def generate_suggestions(self, analysis: AnalysisResult, session_id: str = "") -> list[AISuggestion]:
        return generate_suggestions(analysis, session_id)

    def suggest_for_session(self, session_id: str, analysis: AnalysisResult) -> list[AISuggestion]:
        """Generate suggestions and store them on the session. Raises NotFound."""
        self._sessions.get(session_id)
        suggestions = generate_suggestions(analysis, session_id)
        self._sessions.set_suggestions(session_id, suggestions)
        return suggestions

    async def simulate_debate_start(self, code_change: CodeChange, session_id: str = "") -> DebateArguments:
        return await self.debates.start(code_change, session_id=session_id)

    async def continue_debate(self, context: DebateContext, user_input: str) -> DebateResponse:
        return await self.debates.continue_debate(context, user_input)

    def health_status(self) -> HealthStatus:
        provider = self._client.provider
        return HealthStatus(
            available=self._client.is_configured,
            fallback_mode=self.fallback_mode,
            provider=provider.name() if provider else None,
        )

    async def check_health(self) -> HealthStatus:
        """Like health_status, but pings the provider to confirm it answers."""
        status = self.health_status()
        provider = self._client.provider
        if provider is None:
            return status
        ok, err = await ping(provider)
        status.available = ok
        status.error = err
        return status


def create_review_service(
    config: AppConfig,
    snippets: CodeSnippetStore | None = None,
    sessions: SessionStore | None = None,
    debates: DebateStore | None = None,
) -> ReviewService:
    return ReviewService(
        config=config,
        client=TextGenerationClient(build_provider(config)),
        snippets=snippets if snippets is not None else InMemorySnippetStore(),
        sessions=sessions if sessions is not None else InMemorySessionStore(),
        debates=debates if debates is not None else InMemoryDebateStore(),
    )
