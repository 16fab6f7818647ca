"""Command-line interface for webpage-analyzer.

This is the main CLI entry point. All analyses are auto-discovered via the
registry.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated
from urllib.parse import urlparse

import rich.panel
import typer
from rich import box
from rich.console import Console

# Remove borders from CLI help output by monkey-patching Panel
_original_panel_init = rich.panel.Panel.__init__


def _no_border_panel_init(self, *args, **kwargs) -> None:
    kwargs["box"] = box.HORIZONTALS
    return _original_panel_init(self, *args, **kwargs)


rich.panel.Panel.__init__ = _no_border_panel_init

from . import analyses  # noqa: F401, E402  # Triggers analysis registration
from .analyses.protocol import VerbosityLevel  # noqa: E402
from .core.analyzer import run_page_analysis  # noqa: E402
from .core.config_manager import ConfigManager, ServerSettings  # noqa: E402
from .core.registry import registry  # noqa: E402
from .emitters import ConsoleEmitter, JSONLinesEmitter, ResultEmitter  # noqa: E402
from .fetchers import create_fetcher  # noqa: E402
from .utils.logger import setup_logger  # noqa: E402

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="webpage-analyzer",
    help="Analyze web pages and stream findings as they complete",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


# ============================================================================
# Validation Functions
# ============================================================================


def validate_url(url: str) -> str:
    """
    Validate a page URL.

    Args:
        url: URL to validate; "https://" is assumed when no scheme is given

    Returns:
        Validated URL

    Raises:
        typer.BadParameter: If the URL has no host or an unsupported scheme
    """
    url = url.strip()
    if "://" not in url:
        url = f"https://{url}"

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise typer.BadParameter(f"Invalid URL: {url}. Expected format: https://example.com")

    return url


def validate_verbosity(value: str) -> str:
    """
    Validate verbosity level.

    Args:
        value: Verbosity level string

    Returns:
        Validated verbosity level

    Raises:
        typer.BadParameter: If verbosity is invalid
    """
    valid_levels = [level.value for level in VerbosityLevel]
    if value.lower() not in valid_levels:
        raise typer.BadParameter(
            f"Invalid verbosity: {value}. Must be one of: {', '.join(valid_levels)}"
        )
    return value.lower()


# ============================================================================
# Helper Functions
# ============================================================================


def _load_config(config_file: Path | None) -> ConfigManager:
    config_manager = ConfigManager()
    try:
        if config_file:
            config_manager.load_from_files(extra_paths=[config_file])
        else:
            config_manager.load_from_files()
    except Exception as e:
        logger.warning(f"Failed to load configuration: {e}")
    return config_manager


def _read_urls(url_file: str) -> list[str]:
    """
    Read URLs from file or stdin, one per line.

    Args:
        url_file: Path to file or '-' for stdin

    Returns:
        Valid URLs in input order
    """
    try:
        if url_file == "-":
            lines = [line.strip() for line in sys.stdin if line.strip()]
        else:
            with open(url_file) as f:
                lines = [line.strip() for line in f if line.strip()]
    except OSError as e:
        console.print(f"[red]Error reading URL file: {e}[/red]")
        raise typer.Exit(1)

    urls = []
    for line in lines:
        try:
            urls.append(validate_url(line))
        except typer.BadParameter as e:
            logger.warning(f"Skipping invalid URL: {line} - {e}")
    return urls


# ============================================================================
# CLI Commands
# ============================================================================


@app.command()
def analyze(
    url: Annotated[
        str | None,
        typer.Argument(
            help="Page to analyze (e.g., https://example.com). Optional if --url-file is used.",
        ),
    ] = None,
    url_file: Annotated[
        str | None,
        typer.Option(
            "--url-file",
            help="File with list of URLs (one per line). Use '-' for stdin.",
        ),
    ] = None,
    skip: Annotated[
        list[str] | None,
        typer.Option(help="Analyses to skip (e.g., --skip links --skip h6)"),
    ] = None,
    only: Annotated[
        str | None,
        typer.Option(help="Run only these analyses (e.g., --only title or --only h1,h2,links)."),
    ] = None,
    verbosity: Annotated[
        str,
        typer.Option(
            "--verbosity",
            "-v",
            help="Output verbosity: quiet, normal, verbose, debug",
            callback=validate_verbosity,
        ),
    ] = "normal",
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: cli, jsonlines"),
    ] = "cli",
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    fetcher: Annotated[
        str | None,
        typer.Option("--fetcher", help="How to obtain pages: http, browser"),
    ] = None,
    wait_timeout: Annotated[
        float | None,
        typer.Option("--wait-timeout", help="Max seconds to wait for all analyses of a page"),
    ] = None,
):
    """
    Analyze a page or multiple pages from a file.

    Results are printed as each analysis finishes, followed by a completion
    line with the total processing time.

    Single page:
        webpage-analyzer analyze https://example.com
        webpage-analyzer analyze https://example.com --only title,links
        webpage-analyzer analyze https://example.com --format jsonlines

    Multiple pages:
        webpage-analyzer analyze --url-file urls.txt --format jsonlines
        cat urls.txt | webpage-analyzer analyze --url-file -
    """
    if not url and not url_file:
        console.print("[red]Error: Either URL or --url-file must be provided[/red]")
        raise typer.Exit(1)

    if url and url_file:
        console.print("[red]Error: Cannot use both URL and --url-file together[/red]")
        raise typer.Exit(1)

    if only and skip:
        console.print("[red]Error: Cannot use --only and --skip together[/red]")
        raise typer.Exit(1)

    if output_format not in ("cli", "jsonlines"):
        console.print(f"[red]Error: Unknown output format: {output_format}[/red]")
        console.print("Available formats: cli, jsonlines")
        raise typer.Exit(1)

    if fetcher is not None and fetcher not in ("http", "browser"):
        console.print(f"[red]Error: Unknown fetcher: {fetcher}[/red]")
        raise typer.Exit(1)

    verbosity_level = VerbosityLevel[verbosity.upper()]
    setup_logger(level=verbosity_level)

    only_list = [a.strip() for a in only.split(",") if a.strip()] if only else None
    try:
        selected = registry.select(only=only_list, skip=skip)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print(f"\nAvailable analyses: {', '.join(registry.get_all_ids())}")
        raise typer.Exit(1)

    config_manager = _load_config(config_file)
    config_manager.merge_cli_overrides("global", {"wait_timeout": wait_timeout})
    config_manager.merge_cli_overrides("fetch", {"fetcher": fetcher})

    if not registry.create_analyses(config_manager, selected):
        console.print("[yellow]No analyses to run![/yellow]")
        raise typer.Exit(0)

    if url_file:
        urls = _read_urls(url_file)
        if not urls:
            console.print("[yellow]No URLs found in input[/yellow]")
            raise typer.Exit(0)
    else:
        assert url is not None
        urls = [validate_url(url)]

    emitter: ResultEmitter
    if output_format == "jsonlines":
        emitter = JSONLinesEmitter(verbosity=verbosity_level)
    else:
        emitter = ConsoleEmitter(
            verbosity=verbosity_level,
            color=config_manager.global_config.color,
        )

    page_fetcher = create_fetcher(config_manager.fetch_config)
    try:
        page_fetcher.start()
    except Exception as e:
        console.print(f"[red]Failed to start {config_manager.fetch_config.fetcher} fetcher: {e}[/red]")
        raise typer.Exit(1)

    try:
        for page_url in urls:
            if output_format == "cli" and verbosity != "quiet":
                console.print(f"[bold blue]Analyzing page: {page_url}[/bold blue]")

            run_page_analysis(
                page_url,
                page_fetcher,
                emitter,
                config_manager,
                analyses=registry.create_analyses(config_manager, selected),
            )
    finally:
        page_fetcher.stop()

    if emitter.failures:
        raise typer.Exit(1)


@app.command()
def serve(
    host: Annotated[
        str,
        typer.Option("--host", help="Address to bind"),
    ] = "0.0.0.0",
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to bind (default: ANALYZER_WEBSOCKET_PORT or 8080)"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    fetcher: Annotated[
        str | None,
        typer.Option("--fetcher", help="How to obtain pages: http, browser"),
    ] = None,
    verbosity: Annotated[
        str,
        typer.Option(
            "--verbosity",
            "-v",
            help="Log verbosity: quiet, normal, verbose, debug",
            callback=validate_verbosity,
        ),
    ] = "verbose",
):
    """
    Run the websocket server.

    Browsers open the index page at http://HOST:PORT/ and send URLs over
    the /webSocket endpoint.

    Example:
        webpage-analyzer serve --port 8080
        ANALYZER_WEBSOCKET_HOST=analyzer.local webpage-analyzer serve --fetcher browser
    """
    from .server import serve as run_server

    setup_logger(level=VerbosityLevel[verbosity.upper()])

    settings = ServerSettings()
    if port is not None:
        settings.websocket_port = port

    config_manager = _load_config(config_file)
    config_manager.merge_cli_overrides("fetch", {"fetcher": fetcher})

    run_server(host, settings.websocket_port, config_manager=config_manager, settings=settings)


@app.command()
def list_analyses() -> None:
    """
    List all available analyses.

    Shows analysis ID, name and category in launch order.
    """
    console.print("[bold blue]Available Analyses[/bold blue]\n")

    by_category: dict[str, list] = {}
    for analysis_id, metadata in registry.get_all().items():
        by_category.setdefault(metadata.category, []).append((analysis_id, metadata))

    for category in sorted(by_category.keys()):
        console.print(f"[cyan]{category.upper()}[/cyan]")
        for analysis_id, metadata in by_category[category]:
            console.print(f"  • {analysis_id:12} - {metadata.name}: {metadata.description}")
        console.print()


@app.command()
def create_config(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file path"),
    ] = Path(".webpage-analyzer.toml"),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing file"),
    ] = False,
):
    """
    Create a default configuration file.

    Example:
        webpage-analyzer create-config
        webpage-analyzer create-config --output ~/.config/webpage-analyzer/config.toml
    """
    if output.exists() and not force:
        console.print(f"[yellow]File already exists: {output}[/yellow]")
        console.print("Use --force to overwrite")
        raise typer.Exit(1)

    config_manager = ConfigManager()

    try:
        config_manager.create_default_config_file(output)
        console.print(f"[green]✓ Created configuration file: {output}[/green]")
    except OSError as e:
        console.print(f"[red]✗ Failed to create config: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    try:
        import importlib.metadata

        version = importlib.metadata.version("webpage-analyzer")
        console.print(f"webpage-analyzer version {version}")
    except importlib.metadata.PackageNotFoundError:
        console.print("webpage-analyzer (version unknown)")


# ============================================================================
# Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        console.print(f"[red]Unexpected error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
