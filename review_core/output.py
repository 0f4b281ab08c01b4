"""Rich console output and markdown file save for review results."""

import logging
import re
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from review_core.categorizer import CATEGORY_INFO
from review_core.models import AISuggestion, DebateArguments, DebateResponse, EnhancedAnalysisResult

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_SEVERITY_STYLE = {"high": "bold red", "medium": "yellow", "low": "dim"}


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len]


def print_analysis(result: EnhancedAnalysisResult, title: str = "Code Review") -> None:
    """Print issues grouped by category, then the metrics line."""
    console.print(Rule(f"[bold cyan]{escape(title)}[/bold cyan]"))
    console.print(
        Text(
            f"Language: {result.language} | "
            f"Issues: {len(result.issues)} | "
            f"Confidence: {result.confidence:.2f} | "
            f"Time: {result.processing_time:.0f}ms",
            style="dim",
        )
    )

    for category, issues in result.categories.items():
        if not issues:
            continue
        info = CATEGORY_INFO[category]
        body = "\n".join(
            f"[{_SEVERITY_STYLE[i.severity.value]}]{i.severity.value.upper():<6}[/] "
            f"line {i.line}: {escape(i.message)}"
            for i in issues
        )
        console.print(
            Panel(
                body,
                title=f"{info.icon} [bold]{info.name}[/bold] ({len(issues)})",
                border_style=info.color,
            )
        )

    metrics = result.metrics
    table = Table(title="Metrics", show_edge=False)
    for column in ("Complexity", "Maintainability", "Readability"):
        table.add_column(column, justify="right")
    table.add_row(f"{metrics.complexity:.0f}", f"{metrics.maintainability:.0f}", f"{metrics.readability:.0f}")
    console.print(table)

    if result.suggestions:
        console.print(Markdown("\n".join(f"- {s}" for s in result.suggestions)))


def print_suggestions(suggestions: list[AISuggestion]) -> None:
    console.print(Rule("[bold green]Suggestions[/bold green]"))
    for s in suggestions:
        subtitle = f"{s.severity.value} | confidence {s.confidence:.2f}"
        body = escape(s.description)
        if s.suggested_fix:
            body += f"\n\n[italic]Fix:[/italic] {escape(s.suggested_fix)}"
        console.print(Panel(body, title=f"[bold]{escape(s.title)}[/bold]", subtitle=subtitle, border_style="dim"))


def print_debate_arguments(result: DebateArguments) -> None:
    console.print(Rule("[bold magenta]Debate[/bold magenta]"))
    console.print(Panel("\n".join(f"+ {escape(a)}" for a in result.arguments), title="[green]For[/green]",
                        border_style="green"))
    console.print(Panel("\n".join(f"- {escape(a)}" for a in result.counter_arguments), title="[red]Against[/red]",
                        border_style="red"))


def print_debate_response(response: DebateResponse) -> None:
    console.print(Panel(Markdown(response.response), title="[bold]Reply[/bold]", border_style="magenta"))
    for question in response.follow_up_questions:
        console.print(f"  [cyan]?[/cyan] {escape(question)}")


def save_report(result: EnhancedAnalysisResult, output_dir: Path, source: str = "snippet") -> Path:
    """Save an analysis as a markdown report.

    Args:
        result: The completed analysis.
        output_dir: Directory to save the file in.
        source: Where the code came from, usually the file path. Its file
            name becomes the filename slug.

    Returns:
        Path to the saved file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    slug = _slug(Path(source).name)
    filepath = output_dir / f"{timestamp}_{slug}.md"

    metrics = result.metrics
    lines: list[str] = [
        f"# Code Review: {source}",
        "",
        f"**Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Language:** {result.language}",
        f"**Issues:** {len(result.issues)}",
        f"**Confidence:** {result.confidence:.2f}",
        f"**Processing time:** {result.processing_time:.0f}ms",
        "",
        "| Complexity | Maintainability | Readability |",
        "|---|---|---|",
        f"| {metrics.complexity:.0f} | {metrics.maintainability:.0f} | {metrics.readability:.0f} |",
        "",
        "---",
        "",
    ]

    for category, issues in result.categories.items():
        if not issues:
            continue
        lines.append(f"## {CATEGORY_INFO[category].name}")
        lines.append("")
        for issue in issues:
            lines.append(f"- **{issue.severity.value}** line {issue.line}: {issue.message}")
            if issue.suggested_fix:
                lines.append(f"  - *Fix:* {issue.suggested_fix}")
        lines.append("")

    if result.prioritized_suggestions:
        lines += ["## Suggestions", ""]
        for s in result.prioritized_suggestions:
            lines.append(f"### {s.title}")
            lines.append("")
            lines.append(s.description)
            lines.append("")
            lines.append(f"*Severity: {s.severity.value} | Confidence: {s.confidence:.2f}*")
            lines.append("")
    elif result.suggestions:
        lines += ["## Suggestions", ""]
        lines += [f"- {s}" for s in result.suggestions]
        lines.append("")

    filepath.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Report saved to: %s", filepath)
    return filepath
