"""Bucket, order and deduplicate issues and suggestions."""

from dataclasses import dataclass

from review_core.models import AISuggestion, Category, CodeIssue, IssueCategories, IssueType, Severity

SEVERITY_RANK: dict[Severity, int] = {
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}

# bug > optimization > style; the remaining kinds sit beside their closest peer
TYPE_RANK: dict[IssueType, int] = {
    IssueType.BUG: 3,
    IssueType.SECURITY: 3,
    IssueType.OPTIMIZATION: 2,
    IssueType.PERFORMANCE: 2,
    IssueType.STYLE: 1,
    IssueType.MAINTAINABILITY: 1,
}

# Checked in order; first match wins, BUGS when nothing matches
_CATEGORY_KEYWORDS: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.SECURITY, ("security", "vulnerability", "injection")),
    (Category.PERFORMANCE, ("performance", "slow", "optimization")),
    (Category.MAINTAINABILITY, ("maintainability", "complexity", "refactor")),
    (Category.STYLE, ("style", "naming", "format")),
)


@dataclass(frozen=True)
class CategoryInfo:
    name: str
    priority: Severity
    color: str
    icon: str


CATEGORY_INFO: dict[Category, CategoryInfo] = {
    Category.SECURITY: CategoryInfo("Security", Severity.HIGH, "red", "🔒"),
    Category.PERFORMANCE: CategoryInfo("Performance", Severity.HIGH, "yellow", "⚡"),
    Category.BUGS: CategoryInfo("Bugs", Severity.HIGH, "bright_red", "🐛"),
    Category.MAINTAINABILITY: CategoryInfo("Maintainability", Severity.MEDIUM, "blue", "🔧"),
    Category.STYLE: CategoryInfo("Code Style", Severity.LOW, "green", "✨"),
}


def category_of(issue: CodeIssue) -> Category:
    content = issue.message.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(k in content for k in keywords):
            return category
    return Category.BUGS


def categorize(issues: list[CodeIssue]) -> IssueCategories:
    """Place every issue in exactly one bucket, preserving arrival order."""
    categories = IssueCategories()
    for issue in issues:
        categories.bucket(category_of(issue)).append(issue)
    return categories


def prioritize_issues(issues: list[CodeIssue]) -> list[CodeIssue]:
    """Stable sort by severity, then type rank, both descending."""
    return sorted(issues, key=lambda i: (-SEVERITY_RANK[i.severity], -TYPE_RANK[i.type]))


def prioritize_suggestions(suggestions: list[AISuggestion]) -> list[AISuggestion]:
    """Stable sort by severity-derived priority, then confidence, both descending."""
    return sorted(suggestions, key=lambda s: (-SEVERITY_RANK[s.severity], -s.confidence))


def deduplicate_suggestions(suggestions: list[str]) -> list[str]:
    """Drop exact duplicate lines, keeping the first occurrence."""
    return list(dict.fromkeys(suggestions))
