"""Typer CLI — ``compintel analyze`` and ``compintel validate`` commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown

from compintel.config import clean_urls, load_config
from compintel.schemas.config import AnalysisConfig

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="compintel",
    help="Competitive intelligence reports — compare a company against up to four competitors.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _resolve_config(
    config: Path | None, primary: str | None, competitors: list[str] | None, output: Path | None,
) -> AnalysisConfig:
    cfg = load_config(config) if config else AnalysisConfig()
    updates: dict[str, object] = {}
    if primary:
        updates["primary_url"] = primary.strip()
    if competitors:
        updates["competitor_urls"] = clean_urls(competitors)
    if output:
        updates["output_directory"] = str(output)
    # re-validate so CLI overrides go through the same checks as the file
    return AnalysisConfig(**{**cfg.model_dump(), **updates})


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to analysis-config.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file without running the analysis."""
    _setup_logging(verbose)

    try:
        cfg = load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Primary URL:  {cfg.primary_url or '(none)'}")
    console.print(f"  Competitors:  {len(cfg.competitor_urls)}")
    for url in cfg.competitor_urls:
        console.print(f"    - {url}")
    console.print(f"  Model:        {cfg.model} (temperature {cfg.temperature})")
    console.print(f"  Timeout:      {cfg.timeout_seconds:g}s")
    console.print(f"  Output dir:   {cfg.output_directory or '(none)'}")


@app.command()
def analyze(
    primary: str = typer.Option(None, "--primary", "-p", help="Primary company URL (your site)."),
    competitor: list[str] = typer.Option(None, "--competitor", "-k", help="Competitor URL (repeatable, max 4)."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to analysis-config.yml"),
    output: Path = typer.Option(None, "--output", "-o", help="Directory to export report.md and report.json to."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Run the full pipeline with mock data (no API calls)."),
) -> None:
    """Run one competitive analysis and print the report.

    Example:

        compintel analyze --primary https://stripe.com -k https://adyen.com -k https://paypal.com
    """
    _setup_logging(verbose)

    try:
        cfg = _resolve_config(config, primary, competitor, output)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)

    if not cfg.primary_url:
        console.print("[red]Error:[/] a primary URL is required (--primary or primary_url in config).")
        raise typer.Exit(code=1)

    if dry_run:
        console.print("[yellow]DRY-RUN mode — no API calls will be made.[/]\n")

    console.print(f"[bold]Starting analysis for:[/] {cfg.primary_url}")
    if cfg.competitor_urls:
        console.print(f"[bold]Competitors:[/] {', '.join(cfg.competitor_urls)}")
    console.print("")

    ok = asyncio.run(_run_analysis(cfg, dry_run=dry_run))
    if not ok:
        raise typer.Exit(code=1)


async def _run_analysis(cfg: AnalysisConfig, *, dry_run: bool = False) -> bool:
    """Run the orchestrator and write outputs. Returns False on failure."""
    from compintel.agents.competitor_analysis.agent import CompetitorAnalysisAgent
    from compintel.agents.orchestrator.agent import AnalysisOrchestrator
    from compintel.errors import InvalidRequest
    from compintel.output.markdown import render_markdown_report
    from compintel.output.view_model import share_summary
    from compintel.shared.progress import JobProgress

    if dry_run:
        from compintel.shared.openai_client import DryRunClient
        client = DryRunClient()
    else:
        from compintel.shared.openai_client import GenerationClient
        client = GenerationClient(model=cfg.model, temperature=cfg.temperature)

    orchestrator = AnalysisOrchestrator(
        CompetitorAnalysisAgent(client),
        timeout=cfg.timeout_seconds,
        reset_delay=cfg.reset_delay_seconds,
    )

    with JobProgress() as progress:
        orchestrator.store.subscribe(progress.on_state)
        try:
            report = await orchestrator.start_analysis(cfg.primary_url, cfg.competitor_urls)
        except InvalidRequest as exc:
            console.print(f"[red]Invalid request:[/] {exc}")
            return False

    if report is None:
        console.print(f"[red]{orchestrator.state.message}[/] ({orchestrator.state.error})")
        return False

    markdown = render_markdown_report(report)
    console.print(Markdown(markdown))
    console.print(f"\n[dim]{share_summary(report)}[/]")

    if cfg.output_directory:
        out_dir = Path(cfg.output_directory)
        out_dir.mkdir(parents=True, exist_ok=True)

        md_path = out_dir / "report.md"
        md_path.write_text(markdown)
        console.print(f"[green]Markdown report written to:[/] {md_path}")

        json_path = out_dir / "report.json"
        json_path.write_text(report.model_dump_json(indent=2))
        console.print(f"[green]JSON report written to:[/] {json_path}")

    return True
