"""Analysis orchestration: one concurrent task per enabled dimension."""

import asyncio
import logging
import time

from config.config_loader import PipelineConfig, PromptsConfig
from review_core import fallback
from review_core.categorizer import categorize, deduplicate_suggestions, prioritize_issues, prioritize_suggestions
from review_core.client import TextGenerationClient
from review_core.guard import RetryTimeoutGuard
from review_core.models import CodeIssue, CodeSnippet, Dimension, EnhancedAnalysisResult, GenerationParams
from review_core.parser import parse_issues
from review_core.result import Result, degrade
from review_core.scoring import calculate_metrics, overall_confidence
from review_core.suggestions import from_issues

logger = logging.getLogger(__name__)

ANALYSIS_PARAMS = GenerationParams(max_tokens=500, temperature=0.3)


def _elapsed_ms(start: float) -> float:
    return (time.monotonic() - start) * 1000


class AnalysisOrchestrator:
    """Runs every enabled dimension through the guard and merges what comes back.

    A dimension that fails or times out contributes no issues; the request as
    a whole always produces an EnhancedAnalysisResult.
    """

    def __init__(
        self,
        client: TextGenerationClient,
        guard: RetryTimeoutGuard,
        prompts: PromptsConfig,
        config: PipelineConfig,
        params: GenerationParams = ANALYSIS_PARAMS,
    ) -> None:
        self._client = client
        self._guard = guard
        self._prompts = prompts
        self._config = config
        self._params = params

    @property
    def fallback_mode(self) -> bool:
        return self._config.fallback_mode or not self._client.is_configured

    def enabled_dimensions(self) -> list[Dimension]:
        flags = {
            Dimension.CODE_QUALITY: self._config.enable_code_quality,
            Dimension.SECURITY: self._config.enable_security,
            Dimension.PERFORMANCE: self._config.enable_performance,
            Dimension.STYLE: self._config.enable_style,
        }
        return [d for d in Dimension if flags[d]]

    def build_prompt(self, dimension: Dimension, snippet: CodeSnippet) -> str:
        template: str = getattr(self._prompts, dimension.value)
        return template.format(language=snippet.language, code=snippet.content)

    async def _run_dimension(self, dimension: Dimension, snippet: CodeSnippet) -> Result[list[CodeIssue]]:
        prompt = self.build_prompt(dimension, snippet)
        generated = await self._guard.run(
            lambda: self._client.generate(prompt, self._params),
            max_retries=self._config.max_retries,
            timeout_ms=self._config.timeout_ms,
            label=f"{dimension.value} analysis",
        )
        return generated.map(lambda text: parse_issues(text, dimension))

    async def analyze(self, snippet: CodeSnippet) -> EnhancedAnalysisResult:
        start = time.monotonic()

        if self.fallback_mode:
            logger.info("Fallback mode: static analysis for snippet %s", snippet.id)
            return fallback.analysis(snippet, _elapsed_ms(start))

        dimensions = self.enabled_dimensions()
        logger.info("Analysing snippet %s across %d dimensions", snippet.id, len(dimensions))

        results = await asyncio.gather(*(self._run_dimension(d, snippet) for d in dimensions))

        issues: list[CodeIssue] = []
        for dimension, result in zip(dimensions, results):
            issues.extend(degrade(result, [], f"{dimension.value} issues"))

        succeeded = sum(1 for r in results if r.ok)
        if succeeded < len(dimensions):
            logger.warning(
                "Only %d/%d analysis dimensions succeeded for snippet %s",
                succeeded, len(dimensions), snippet.id,
            )

        ordered = prioritize_issues(issues)
        metrics = calculate_metrics(snippet, ordered)
        prioritized = prioritize_suggestions(from_issues(ordered, metrics))
        processing_time = _elapsed_ms(start)

        logger.info(
            "Snippet %s: %d issues in %.0fms",
            snippet.id, len(ordered), processing_time,
        )

        return EnhancedAnalysisResult(
            code_snippet_id=snippet.id,
            language=snippet.language,
            issues=ordered,
            metrics=metrics,
            suggestions=deduplicate_suggestions([s.description for s in prioritized]),
            categories=categorize(ordered),
            prioritized_suggestions=prioritized,
            confidence=overall_confidence([s.confidence for s in prioritized], processing_time),
            processing_time=processing_time,
        )
