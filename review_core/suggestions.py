"""Turn analysed issues into user-facing suggestions."""

import logging

from review_core import fallback
from review_core.categorizer import prioritize_suggestions
from review_core.models import AISuggestion, AnalysisResult, CodeIssue, CodeMetrics, IssueType, Severity
from review_core.scoring import calculate_confidence

logger = logging.getLogger(__name__)

# Metric scores below this threshold earn a general suggestion
_METRIC_THRESHOLD = 70

TYPE_LABELS: dict[IssueType, str] = {
    IssueType.BUG: "Potential Bug",
    IssueType.OPTIMIZATION: "Performance Optimization",
    IssueType.STYLE: "Style Improvement",
    IssueType.SECURITY: "Security Vulnerability",
    IssueType.PERFORMANCE: "Performance Issue",
    IssueType.MAINTAINABILITY: "Maintainability Concern",
}


def suggestion_title(issue: CodeIssue) -> str:
    return f"{TYPE_LABELS[issue.type]} on line {issue.line}"


def from_issues(issues: list[CodeIssue], metrics: CodeMetrics, session_id: str = "") -> list[AISuggestion]:
    """One suggestion per issue, in issue order."""
    return [
        AISuggestion(
            type=issue.type,
            severity=issue.severity,
            line_start=issue.line,
            line_end=issue.line,
            title=suggestion_title(issue),
            description=issue.message,
            suggested_fix=issue.suggested_fix,
            confidence=calculate_confidence(issue, metrics),
            session_id=session_id,
        )
        for issue in issues
    ]


def general_suggestions(metrics: CodeMetrics, session_id: str = "") -> list[AISuggestion]:
    suggestions: list[AISuggestion] = []

    if metrics.complexity < _METRIC_THRESHOLD:
        suggestions.append(AISuggestion(
            type=IssueType.OPTIMIZATION,
            severity=Severity.MEDIUM,
            line_start=1,
            line_end=1,
            title="Code Complexity",
            description="Consider refactoring to reduce complexity and improve maintainability.",
            confidence=0.6,
            session_id=session_id,
        ))

    if metrics.readability < _METRIC_THRESHOLD:
        suggestions.append(AISuggestion(
            type=IssueType.STYLE,
            severity=Severity.LOW,
            line_start=1,
            line_end=1,
            title="Code Readability",
            description="Consider adding comments and improving variable names for better readability.",
            confidence=0.5,
            session_id=session_id,
        ))

    return suggestions


def generate_suggestions(analysis: AnalysisResult, session_id: str = "") -> list[AISuggestion]:
    """Build prioritized suggestions for an analysis. Never returns an empty list."""
    suggestions = from_issues(analysis.issues, analysis.metrics, session_id)
    suggestions.extend(general_suggestions(analysis.metrics, session_id))

    if not suggestions:
        logger.info("No suggestions for snippet %s, using fallback", analysis.code_snippet_id)
        return fallback.suggestions(session_id)

    return prioritize_suggestions(suggestions)
