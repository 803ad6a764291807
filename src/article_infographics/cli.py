"""Command-line entry points for the article infographics pipeline."""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich import print as rprint

from .config import get_settings
from .errors import ArticleProcessingError, ScrapeError
from .logging_config import setup_logging
from .schema import validate_processed_content
from .social import character_limit, formatted_posts, is_over_limit, write_post_files
from .workflow import ArticlePipeline, PipelineResult

app = typer.Typer(
    help="Turn an article URL or pasted text into infographic slides and social posts."
)


def _read_text(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _load_processed(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path} must contain a single JSON object.")
    try:
        return validate_processed_content(data)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _write_output(out_path: Path, payload: Dict[str, Any]) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def _print_summary(result: PipelineResult) -> None:
    source = "fallback heuristics" if result.used_fallback else "model output"
    rprint(f"[green]Processed '{result.article.title}' from {source}[/green]")
    for idx, slide in enumerate(result.content.get("slides", []), start=1):
        headline = slide.get("headline", "") if isinstance(slide, dict) else str(slide)
        rprint(f"  {idx}. {headline}")


@app.callback(invoke_without_command=True)
def run(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Article URL to scrape."),
    text_file: Optional[Path] = typer.Option(
        None,
        "--text-file",
        "-t",
        help="File with pasted article text ('-' reads stdin). Takes precedence over --url.",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Optional path to write the ProcessedContent JSON. Defaults to stdout.",
    ),
):
    """
    Default command: run one article through scrape -> generate -> annotate.

    When a subcommand (e.g., posts) is invoked, this callback exits early.
    """
    if ctx.invoked_subcommand:
        return

    settings = get_settings()
    setup_logging(settings.log_level)

    text = _read_text(text_file) if text_file else None
    if not url and not text:
        raise typer.BadParameter("Provide --url or --text-file.")

    try:
        result = ArticlePipeline(settings).run({"url": url, "text": text})
    except ScrapeError as exc:
        rprint(f"[red]Failed to scrape article: {exc}[/red]")
        raise typer.Exit(code=1)
    except ArticleProcessingError as exc:
        rprint(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    _print_summary(result)
    if out:
        _write_output(out, result.content)
        rprint(f"[cyan]Wrote output to {out}[/cyan]")
    else:
        typer.echo(json.dumps(result.content, ensure_ascii=False, indent=2))


@app.command("posts")
def posts_command(
    path: Path = typer.Argument(..., help="ProcessedContent JSON written by --out."),
    outdir: Optional[Path] = typer.Option(
        None,
        "--outdir",
        "-o",
        help="Optional directory to write <platform>-post.txt files.",
    ),
):
    """Show each social post with its character count against the platform limit."""
    content = _load_processed(path)
    social_posts = content.get("socialPosts") or {}
    if not social_posts:
        raise typer.BadParameter("No socialPosts found in the file.")

    for platform, text in formatted_posts(social_posts).items():
        limit = character_limit(platform)
        colour = "red" if is_over_limit(platform, text) else "green"
        rprint(f"[cyan]--- {platform} ---[/cyan] [{colour}]{len(text)} / {limit} characters[/{colour}]")
        typer.echo(text)

    if outdir:
        written = write_post_files(social_posts, outdir)
        rprint(f"[cyan]Wrote {len(written)} post file(s) to {outdir}[/cyan]")


@app.command("serve")
def serve_command(
    host: str = typer.Option("0.0.0.0", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes (development)."),
):
    """Run the HTTP API under uvicorn."""
    import uvicorn

    setup_logging(get_settings().log_level)
    uvicorn.run("article_infographics.server:app", host=host, port=port, reload=reload)


def main():
    app()


if __name__ == "__main__":
    main()
