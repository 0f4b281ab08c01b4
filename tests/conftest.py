"""Shared pytest fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from config.config_loader import (
    AppConfig,
    DebateConfig,
    DefaultsConfig,
    ModelConfig,
    PipelineConfig,
    PromptsConfig,
)
from review_core.client import TextGenerationClient
from review_core.debate import DebateEngine
from review_core.guard import RetryTimeoutGuard
from review_core.models import CodeChange, CodeSnippet, GenerationParams, ModelResponse
from review_core.orchestrator import AnalysisOrchestrator
from review_core.providers.base import AIProvider
from review_core.store import InMemoryDebateStore


@pytest.fixture
def sample_model_config() -> ModelConfig:
    return ModelConfig(
        name="test_model",
        sdk="test",
        model="test-model-1",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        max_tokens=1024,
        base_url=None,
    )


@pytest.fixture
def sample_prompts_config() -> PromptsConfig:
    return PromptsConfig(
        code_quality="QUALITY {language}\n{code}",
        security="SECURITY {language}\n{code}",
        performance="PERFORMANCE {language}\n{code}",
        style="STYLE {language}\n{code}",
        debate_base="Lines {line_start}-{line_end}: {original_code} -> {proposed_code} ({reason})",
        debate_for="FOR {debate}",
        debate_against="AGAINST {debate}",
        debate_continue="CONTINUE {debate}\nSo far: {previous_arguments}\nUser: {user_input}",
        debate_follow_up="FOLLOW-UP {debate}",
        debate_counter="COUNTER {position}: {argument} [{evidence}] in {topic}\n{code_context}",
    )


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    """Fast pipeline: one retry, no backoff, short deadline."""
    return PipelineConfig(max_retries=1, timeout_ms=200, base_delay_ms=0)


@pytest.fixture
def debate_config() -> DebateConfig:
    return DebateConfig()


@pytest.fixture
def sample_defaults_config(tmp_path: Path) -> DefaultsConfig:
    return DefaultsConfig(provider="claude", output_dir=tmp_path / "reports")


@pytest.fixture
def sample_app_config(
    sample_defaults_config: DefaultsConfig,
    sample_prompts_config: PromptsConfig,
    pipeline_config: PipelineConfig,
    debate_config: DebateConfig,
) -> AppConfig:
    model_cfg = ModelConfig(
        name="claude",
        sdk="anthropic",
        model="claude-sonnet-4-20250514",
        api_key_env="ANTHROPIC_API_KEY",
        timeout_sec=60,
        max_tokens=1024,
    )
    return AppConfig(
        defaults=sample_defaults_config,
        models={"claude": model_cfg},
        prompts=sample_prompts_config,
        pipeline=pipeline_config,
        debate=debate_config,
        available_providers={"claude"},
    )


@pytest.fixture
def sample_snippet() -> CodeSnippet:
    return CodeSnippet(
        id="snippet-1",
        content="function add(a, b) {\n  console.log(a);\n  return a + b;\n}\n",
        language="javascript",
        filename="add.js",
    )


@pytest.fixture
def sample_change() -> CodeChange:
    return CodeChange(
        line_start=3,
        line_end=3,
        original_code="var total = 0;",
        proposed_code="let total = 0;",
        reason="Block scoping",
        id="change-1",
    )


def make_response(content: str, provider: str = "mock") -> ModelResponse:
    return ModelResponse(
        provider=provider,
        model="mock-model",
        content=content,
        latency_sec=0.1,
        token_count=10,
    )


class MockProvider(AIProvider):
    """Test double AIProvider."""

    def __init__(self, provider_name: str = "mock", response_content: str = "Mock response") -> None:
        self._name = provider_name
        self._response_content = response_content
        # Shadow the class method with an AsyncMock at the instance level.
        # ABC check passes because generate is defined in the class body below.
        self.generate = AsyncMock(  # type: ignore[assignment]
            return_value=make_response(response_content, provider_name)
        )

    def name(self) -> str:
        return self._name

    def model_string(self) -> str:
        return "mock-model"

    async def generate(self, prompt: str, params: GenerationParams) -> ModelResponse:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return make_response(self._response_content, self._name)


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def make_orchestrator(sample_prompts_config: PromptsConfig, pipeline_config: PipelineConfig):
    """Build an AnalysisOrchestrator around a provider (or None for fallback)."""

    def _make(provider: AIProvider | None) -> AnalysisOrchestrator:
        return AnalysisOrchestrator(
            TextGenerationClient(provider),
            RetryTimeoutGuard(base_delay_ms=0),
            sample_prompts_config,
            pipeline_config,
        )

    return _make


@pytest.fixture
def debate_store() -> InMemoryDebateStore:
    return InMemoryDebateStore()


@pytest.fixture
def make_engine(
    sample_prompts_config: PromptsConfig,
    pipeline_config: PipelineConfig,
    debate_config: DebateConfig,
    debate_store: InMemoryDebateStore,
):
    """Build a DebateEngine sharing the ``debate_store`` fixture."""

    def _make(provider: AIProvider | None) -> DebateEngine:
        return DebateEngine(
            TextGenerationClient(provider),
            RetryTimeoutGuard(base_delay_ms=0),
            debate_store,
            sample_prompts_config,
            pipeline_config,
            debate_config,
        )

    return _make
