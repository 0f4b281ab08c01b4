"""Tests for review_core/suggestions.py."""

import pytest

from review_core import fallback
from review_core.models import AnalysisResult, CodeIssue, CodeMetrics, IssueType, Severity
from review_core.suggestions import TYPE_LABELS, from_issues, generate_suggestions, suggestion_title


def _analysis(issues: list[CodeIssue], metrics: CodeMetrics) -> AnalysisResult:
    return AnalysisResult(
        code_snippet_id="s", language="python", issues=issues, metrics=metrics, suggestions=[],
    )


def test_every_issue_type_has_a_label():
    assert set(TYPE_LABELS) == set(IssueType)


def test_title_names_the_line():
    issue = CodeIssue(IssueType.SECURITY, Severity.HIGH, 14, 1, "XSS")
    assert suggestion_title(issue) == "Security Vulnerability on line 14"


def test_from_issues_carries_fix_and_session():
    issue = CodeIssue(IssueType.BUG, Severity.HIGH, 3, 1, "Null deref", suggested_fix="Check for null")
    [suggestion] = from_issues([issue], CodeMetrics(100, 100, 100), session_id="sess")
    assert suggestion.line_start == suggestion.line_end == 3
    assert suggestion.suggested_fix == "Check for null"
    assert suggestion.session_id == "sess"
    assert suggestion.confidence == pytest.approx(1.0)


def test_clean_analysis_falls_back_to_single_suggestion():
    suggestions = generate_suggestions(_analysis([], CodeMetrics(100, 100, 100)), "sess")
    assert len(suggestions) == 1
    assert suggestions[0].title == "AI Analysis Unavailable"
    assert suggestions[0].confidence == fallback.UNAVAILABLE_SUGGESTION_CONFIDENCE


def test_low_metrics_add_general_suggestions():
    suggestions = generate_suggestions(_analysis([], CodeMetrics(60, 100, 65)))
    assert [s.title for s in suggestions] == ["Code Complexity", "Code Readability"]


def test_suggestions_are_prioritized():
    issues = [
        CodeIssue(IssueType.STYLE, Severity.LOW, 1, 1, "nit"),
        CodeIssue(IssueType.BUG, Severity.HIGH, 2, 1, "crash"),
    ]
    suggestions = generate_suggestions(_analysis(issues, CodeMetrics(100, 100, 100)))
    assert suggestions[0].description == "crash"
    assert suggestions[-1].description == "nit"
