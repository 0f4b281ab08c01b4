"""Click CLI: loads config, wires the review service and renders results."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import load_config
from review_core.models import CodeChange, CodeSnippet, DebateContext, new_id
from review_core.output import (
    print_analysis,
    print_debate_arguments,
    print_debate_response,
    print_suggestions,
    save_report,
)
from review_core.service import ReviewService, create_review_service

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".py": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".java": "java",
    ".go": "go",
    ".rb": "ruby",
    ".rs": "rust",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".php": "php",
    ".kt": "kotlin",
    ".swift": "swift",
}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def detect_language(path: Path) -> str:
    return LANGUAGE_BY_EXTENSION.get(path.suffix.lower(), "plaintext")


def _spinner() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


@click.group()
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
              help="Path to settings.yaml (default: bundled config)")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None) -> None:
    """AI-assisted code review: analysis, suggestions and change debates.

    \b
    Examples:
      review analyze app.js
      review analyze app.py --save
      review debate --original "var x" --proposed "const x" --reason "immutability"
      review health
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config(Path(config_path)) if config_path else load_config()
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    ctx.obj = create_review_service(config)
    ctx.meta["config"] = config


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--language", default=None, help="Override language detection")
@click.option("--save", is_flag=True, help="Save a markdown report to the output directory")
@click.option("--output", "output_path", default=None, help="Output directory (default: from config)")
@click.pass_context
def analyze(ctx: click.Context, file: str, language: str | None, save: bool, output_path: str | None) -> None:
    """Analyse FILE and print issues, metrics and suggestions."""
    service: ReviewService = ctx.obj
    path = Path(file)
    content = path.read_text(encoding="utf-8")
    snippet = CodeSnippet(
        id=new_id(),
        content=content,
        language=language or detect_language(path),
        filename=path.name,
        size=len(content.encode("utf-8")),
    )

    if service.fallback_mode:
        console.print("[yellow]AI provider not configured, running basic checks only.[/yellow]")

    with _spinner() as progress:
        progress.add_task(f"Analysing {path.name}...", total=None)
        result = asyncio.run(service.analyze(snippet))

    print_analysis(result, title=path.name)
    print_suggestions(service.generate_suggestions(result))

    if save:
        output_dir = Path(output_path) if output_path else ctx.meta["config"].defaults.output_dir
        saved = save_report(result, output_dir, source=str(path))
        console.print(f"\n[dim]Saved to: {saved}[/dim]")


@main.command()
@click.option("--original", required=True, help="Original code")
@click.option("--proposed", required=True, help="Proposed replacement")
@click.option("--reason", required=True, help="Why the change is proposed")
@click.option("--line-start", default=1, type=int, show_default=True)
@click.option("--line-end", default=None, type=int, help="Defaults to --line-start")
@click.option("--reply", "replies", multiple=True, help="Your reply; repeat for several turns")
@click.pass_context
def debate(
    ctx: click.Context,
    original: str,
    proposed: str,
    reason: str,
    line_start: int,
    line_end: int | None,
    replies: tuple[str, ...],
) -> None:
    """Debate a proposed code change, optionally continuing with your replies."""
    service: ReviewService = ctx.obj
    change = CodeChange(
        line_start=line_start,
        line_end=line_end if line_end is not None else line_start,
        original_code=original,
        proposed_code=proposed,
        reason=reason,
    )

    async def _run() -> None:
        opened = await service.simulate_debate_start(change, session_id="cli")
        print_debate_arguments(opened)
        context: DebateContext = opened.context
        for reply in replies:
            console.print(f"\n[bold]You:[/bold] {reply}")
            response = await service.continue_debate(context, reply)
            print_debate_response(response)
            context = response.context

    asyncio.run(_run())


@main.command()
@click.option("--ping", is_flag=True, help="Send a short prompt to confirm the provider answers")
@click.pass_context
def health(ctx: click.Context, ping: bool) -> None:
    """Show whether the AI provider is configured and reachable."""
    service: ReviewService = ctx.obj
    status = asyncio.run(service.check_health()) if ping else service.health_status()

    label = status.provider or "none"
    if status.available:
        console.print(f"  [green]OK  [/green] {label}")
    else:
        short_err = status.error.splitlines()[0][:120] if status.error else "not configured"
        console.print(f"  [red]FAIL[/red] {label}: {short_err}")
    console.print(f"  Fallback mode: {'on' if status.fallback_mode else 'off'}")

    if not status.available:
        sys.exit(1)


if __name__ == "__main__":
    main()
