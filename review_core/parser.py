"""Turn free-form model output into CodeIssue records.

Parsing happens in two steps. ``classify_line`` reads one line of model
text and yields a ``ParsedLine`` tagged with a closed ``IssueType``;
``to_issue`` turns that into a ``CodeIssue``. Everything downstream works
on the enum, never on the raw text.
"""

import logging
import re
from dataclasses import dataclass

from review_core.models import CodeIssue, Dimension, IssueType, Severity

logger = logging.getLogger(__name__)

_LINE_NUMBER = re.compile(r"line\s*(\d+)", re.IGNORECASE)

# A response line is only considered when it mentions one of these
_DIMENSION_TRIGGERS: dict[Dimension, tuple[str, ...]] = {
    Dimension.CODE_QUALITY: ("line",),
    Dimension.SECURITY: ("security", "vulnerability"),
    Dimension.PERFORMANCE: ("performance", "slow", "optimization"),
    Dimension.STYLE: ("style", "naming", "format"),
}

_DIMENSION_DEFAULT_TYPE: dict[Dimension, IssueType] = {
    Dimension.CODE_QUALITY: IssueType.BUG,
    Dimension.SECURITY: IssueType.SECURITY,
    Dimension.PERFORMANCE: IssueType.PERFORMANCE,
    Dimension.STYLE: IssueType.STYLE,
}

# First match wins
_TYPE_KEYWORDS: tuple[tuple[str, IssueType], ...] = (
    ("security", IssueType.SECURITY),
    ("performance", IssueType.PERFORMANCE),
    ("style", IssueType.STYLE),
    ("maintainability", IssueType.MAINTAINABILITY),
    ("optimiz", IssueType.OPTIMIZATION),
)

_HIGH_SEVERITY_WORDS = ("error", "critical")
_LOW_SEVERITY_WORDS = ("info", "suggestion")

FIXES_BY_TYPE: dict[IssueType, str] = {
    IssueType.BUG: "Review the logic and add proper error handling",
    IssueType.OPTIMIZATION: "Consider optimizing the algorithm or data structure",
    IssueType.STYLE: "Follow language-specific style guidelines and naming conventions",
    IssueType.SECURITY: "Review security best practices and implement proper validation",
    IssueType.PERFORMANCE: "Consider optimizing the algorithm or data structure",
    IssueType.MAINTAINABILITY: "Refactor to improve code organization and readability",
}

_KEYWORD_FIXES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("injection",), "Use parameterized queries or input sanitization"),
    (("xss",), "Escape user input before rendering"),
    (("null", "undefined"), "Add null/undefined checks before accessing properties"),
    (("memory",), "Review memory usage and consider object pooling or cleanup"),
    (("loop",), "Consider optimizing loop logic or using more efficient algorithms"),
)


@dataclass(frozen=True)
class ParsedLine:
    kind: IssueType
    severity: Severity
    line: int
    message: str


def _severity_of(lowered: str) -> Severity:
    if any(w in lowered for w in _HIGH_SEVERITY_WORDS):
        return Severity.HIGH
    if any(w in lowered for w in _LOW_SEVERITY_WORDS):
        return Severity.LOW
    return Severity.MEDIUM


def _kind_of(lowered: str, default: IssueType) -> IssueType:
    for keyword, kind in _TYPE_KEYWORDS:
        if keyword in lowered:
            return kind
    return default


def classify_line(text: str, dimension: Dimension) -> ParsedLine | None:
    """Classify one line of model output, or return None if it is not a finding."""
    stripped = text.strip()
    lowered = stripped.lower()
    if not stripped or not any(t in lowered for t in _DIMENSION_TRIGGERS[dimension]):
        return None

    match = _LINE_NUMBER.search(stripped)
    line_number = int(match.group(1)) if match else 1
    message = _LINE_NUMBER.sub("", stripped, count=1).strip().lstrip(":-").strip()

    return ParsedLine(
        kind=_kind_of(lowered, _DIMENSION_DEFAULT_TYPE[dimension]),
        severity=_severity_of(lowered),
        line=max(1, line_number),
        message=message or "Code issue detected",
    )


def suggested_fix(message: str, kind: IssueType) -> str:
    lowered = message.lower()
    for keywords, fix in _KEYWORD_FIXES:
        if any(k in lowered for k in keywords):
            return fix
    return FIXES_BY_TYPE[kind]


def to_issue(parsed: ParsedLine) -> CodeIssue:
    return CodeIssue(
        type=parsed.kind,
        severity=parsed.severity,
        line=parsed.line,
        column=1,
        message=parsed.message,
        suggested_fix=suggested_fix(parsed.message, parsed.kind),
    )


def parse_issues(text: str, dimension: Dimension) -> list[CodeIssue]:
    """Parse a whole model response for one dimension.

    Unparsable text yields an empty list, never an error.
    """
    issues = [
        to_issue(parsed)
        for parsed in (classify_line(line, dimension) for line in text.splitlines())
        if parsed is not None
    ]
    if text.strip() and not issues:
        logger.debug("No %s findings recognised in %d chars of output", dimension.value, len(text))
    return issues
