"""Heuristic metrics and confidence scores."""

from review_core.models import CodeIssue, CodeMetrics, CodeSnippet, IssueType, Severity

MIN_SUGGESTION_CONFIDENCE = 0.1
MAX_SUGGESTION_CONFIDENCE = 1.0

_BASE_CONFIDENCE = 0.7
_LONG_SNIPPET_LINES = 100


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def calculate_metrics(snippet: CodeSnippet, issues: list[CodeIssue]) -> CodeMetrics:
    total_lines = len(snippet.content.split("\n"))
    bug_count = sum(1 for i in issues if i.type is IssueType.BUG)
    style_count = sum(1 for i in issues if i.type is IssueType.STYLE)

    return CodeMetrics(
        complexity=_clamp(100 - bug_count * 10, 0, 100),
        maintainability=_clamp(100 - style_count * 5, 0, 100),
        readability=_clamp(100 - (20 if total_lines > _LONG_SNIPPET_LINES else 0) - bug_count * 5, 0, 100),
    )


def calculate_confidence(issue: CodeIssue, metrics: CodeMetrics) -> float:
    confidence = _BASE_CONFIDENCE
    if issue.severity is Severity.HIGH:
        confidence += 0.2
    if issue.type is IssueType.BUG:
        confidence += 0.1
    if metrics.complexity < 50:
        confidence -= 0.1
    return _clamp(confidence, MIN_SUGGESTION_CONFIDENCE, MAX_SUGGESTION_CONFIDENCE)


def overall_confidence(issue_confidences: list[float], elapsed_ms: float) -> float:
    """Blend mean issue confidence with elapsed-time and issue-count factors.

    With no issues the mean term is zero, so only the other two factors count.
    """
    count = len(issue_confidences)
    avg = sum(issue_confidences) / count if count else 0.0
    time_factor = min(1.0, elapsed_ms / 10000)
    issue_factor = min(1.0, count / 20)
    return _clamp(avg * 0.7 + time_factor * 0.2 + issue_factor * 0.1, 0.0, 1.0)
