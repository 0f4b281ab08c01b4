"""Static, well-formed output for when text generation cannot be used."""

from review_core.categorizer import categorize
from review_core.models import (
    AISuggestion,
    ArgumentSource,
    CodeChange,
    CodeIssue,
    CodeSnippet,
    DebateArgument,
    DebateArguments,
    DebateContext,
    DebateResponse,
    EnhancedAnalysisResult,
    IssueType,
    Severity,
)
from review_core.scoring import calculate_metrics

FALLBACK_CONFIDENCE = 0.3
UNAVAILABLE_SUGGESTION_CONFIDENCE = 0.1

ANALYSIS_SUGGESTIONS = (
    "AI analysis is currently unavailable. Manual review recommended.",
    "Consider running local linting tools for basic code quality checks.",
    "Review code for common security vulnerabilities and performance issues.",
)

PRO_ARGUMENTS = (
    "The proposed change improves code readability.",
    "This modification follows established best practices.",
    "The change reduces potential for future bugs.",
)

CON_ARGUMENTS = (
    "The original code is more familiar to the team.",
    "This change might introduce unexpected side effects.",
    "The performance impact needs to be considered.",
)

DEBATE_REPLY = (
    "AI debate simulation is currently unavailable. "
    "Please continue with manual code review and discussion."
)

FOLLOW_UP_QUESTIONS = (
    "What are your main concerns about this code change?",
    "Have you considered alternative approaches?",
)

COUNTER_ARGUMENT = "Unable to generate counter-argument"


def basic_code_issues(snippet: CodeSnippet) -> list[CodeIssue]:
    """Line-based checks that need no model: console.log and TODO/FIXME markers."""
    issues: list[CodeIssue] = []
    for index, line in enumerate(snippet.content.split("\n")):
        line_number = index + 1
        stripped = line.strip()

        if "console.log" in stripped and snippet.language == "javascript":
            issues.append(CodeIssue(
                type=IssueType.STYLE,
                severity=Severity.LOW,
                line=line_number,
                column=line.index("console.log") + 1,
                message="Remove console.log statements before production",
                suggested_fix="Use proper logging library instead",
            ))

        if "TODO" in stripped or "FIXME" in stripped:
            issues.append(CodeIssue(
                type=IssueType.OPTIMIZATION,
                severity=Severity.MEDIUM,
                line=line_number,
                column=1,
                message="Unfinished implementation found",
                suggested_fix="Complete the implementation or remove the TODO comment",
            ))
    return issues


def analysis(snippet: CodeSnippet, processing_time_ms: float = 0.0) -> EnhancedAnalysisResult:
    issues = basic_code_issues(snippet)
    return EnhancedAnalysisResult(
        code_snippet_id=snippet.id,
        language=snippet.language,
        issues=issues,
        metrics=calculate_metrics(snippet, issues),
        suggestions=list(ANALYSIS_SUGGESTIONS),
        categories=categorize(issues),
        prioritized_suggestions=[],
        confidence=FALLBACK_CONFIDENCE,
        processing_time=processing_time_ms,
    )


def suggestions(session_id: str = "") -> list[AISuggestion]:
    return [AISuggestion(
        type=IssueType.OPTIMIZATION,
        severity=Severity.LOW,
        line_start=1,
        line_end=1,
        title="AI Analysis Unavailable",
        description="AI-powered suggestions are currently unavailable. Please review the code manually.",
        confidence=UNAVAILABLE_SUGGESTION_CONFIDENCE,
        session_id=session_id,
    )]


def debate_arguments(code_change: CodeChange, debate_id: str | None = None) -> DebateArguments:
    return DebateArguments(
        arguments=list(PRO_ARGUMENTS),
        counter_arguments=list(CON_ARGUMENTS),
        context=DebateContext(code_change=code_change, debate_id=debate_id),
    )


def debate_response(context: DebateContext, user_input: str) -> DebateResponse:
    return DebateResponse(
        response=DEBATE_REPLY,
        follow_up_questions=list(FOLLOW_UP_QUESTIONS),
        context=context.extended(DEBATE_REPLY, user_input),
    )


def counter_argument(target: DebateArgument) -> DebateArgument:
    return DebateArgument(
        content=COUNTER_ARGUMENT,
        type=target.type.opposite(),
        confidence=FALLBACK_CONFIDENCE,
        source=ArgumentSource.AI,
    )
