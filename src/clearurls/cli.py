"""
clearurls CLI - Command Line Interface

Entry point for cleaning URLs and text from the command line, and for
inspecting the loaded rules.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from clearurls import __version__
from clearurls.cleaner import UrlCleaner
from clearurls.core.config import load_cleaner_config
from clearurls.core.exceptions import ClearUrlsError, TextCleaningError

logger = logging.getLogger(__name__)

# Create CLI app
app = typer.Typer(
    name="clearurls",
    help="Remove tracking parameters from URLs using ClearURLs rules",
    add_completion=False,
    no_args_is_help=True,
)

# Rich consoles; cleaned output goes to stdout, everything else to stderr
console = Console()
err_console = Console(stderr=True)


# ============================================================================
# Shared Options
# ============================================================================

RulesOption = typer.Option(
    None,
    "--rules",
    "-r",
    help="ClearURLs rules JSON file (defaults to the embedded rules)",
    exists=True,
    dir_okay=False,
)
ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="YAML configuration file",
    exists=True,
    dir_okay=False,
)
ReferralOption = typer.Option(
    None,
    "--strip-referral-marketing/--keep-referral-marketing",
    help="Also remove referral marketing parameters",
)
MaxRedirectionsOption = typer.Option(
    None,
    "--max-redirections",
    min=0,
    help="Maximum number of nested redirections to follow",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]clearurls[/bold cyan] version [yellow]{__version__}[/yellow]")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version information",
    ),
) -> None:
    """Remove tracking parameters from URLs using ClearURLs rules."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build_cleaner(
    rules: Optional[Path],
    config: Optional[Path],
    strip_referral_marketing: Optional[bool],
    max_redirections: Optional[int],
) -> UrlCleaner:
    """Build a cleaner from the config file, overridden by command line flags."""
    try:
        cleaner_config = load_cleaner_config(config)
        if cleaner_config.source is not None:
            logger.debug(f"Using config file {cleaner_config.source}")
        if rules is not None:
            cleaner_config.rules_path = rules
        if strip_referral_marketing is not None:
            cleaner_config.strip_referral_marketing = strip_referral_marketing
        if max_redirections is not None:
            cleaner_config.max_redirections = max_redirections
        return UrlCleaner.from_config(cleaner_config)
    except ClearUrlsError as e:
        err_console.print(f"[red]Error loading rules:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)


# ============================================================================
# Main Commands
# ============================================================================

@app.command()
def clean(
    urls: Optional[List[str]] = typer.Argument(
        None,
        help="URLs to clean. Read from stdin, one per line, if omitted.",
    ),
    rules: Optional[Path] = RulesOption,
    config: Optional[Path] = ConfigOption,
    strip_referral_marketing: Optional[bool] = ReferralOption,
    max_redirections: Optional[int] = MaxRedirectionsOption,
) -> None:
    """
    Clean URLs and print one cleaned URL per line.

    URLs that cannot be cleaned are reported on stderr and make the
    command exit with code 1.
    """
    cleaner = _build_cleaner(rules, config, strip_referral_marketing, max_redirections)

    if not urls:
        urls = [line.strip() for line in sys.stdin if line.strip()]

    failed = 0
    for result in cleaner.clear_urls(urls):
        if result.ok:
            typer.echo(result.cleaned)
        else:
            failed += 1
            err_console.print(
                f"[red]Error:[/red] {escape(result.url)}: {escape(str(result.error))}"
            )

    if failed:
        raise typer.Exit(code=1)


@app.command()
def text(
    file: Optional[Path] = typer.Argument(
        None,
        help="Text file to clean. Read from stdin if omitted.",
        exists=True,
        dir_okay=False,
    ),
    rules: Optional[Path] = RulesOption,
    config: Optional[Path] = ConfigOption,
    strip_referral_marketing: Optional[bool] = ReferralOption,
    max_redirections: Optional[int] = MaxRedirectionsOption,
) -> None:
    """
    Clean every link inside a text and print the text.
    """
    cleaner = _build_cleaner(rules, config, strip_referral_marketing, max_redirections)

    if file is not None:
        content = file.read_text(encoding="utf-8")
    else:
        content = sys.stdin.read()

    try:
        typer.echo(cleaner.clear_text(content), nl=False)
    except TextCleaningError as e:
        for error in e.errors:
            err_console.print(f"[red]Error:[/red] {escape(str(error))}")
        raise typer.Exit(code=1)


@app.command("rules")
def rules_list(
    rules: Optional[Path] = RulesOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """List the providers of the loaded rules."""
    cleaner = _build_cleaner(rules, config, None, None)

    table = Table(title="Providers")
    table.add_column("Provider", style="cyan", no_wrap=True)
    table.add_column("Rules", style="green", justify="right")
    table.add_column("Raw", style="green", justify="right")
    table.add_column("Referral", style="green", justify="right")
    table.add_column("Exceptions", style="yellow", justify="right")
    table.add_column("Redirections", style="blue", justify="right")
    table.add_column("Complete", style="magenta")

    for provider in cleaner.rules:
        table.add_row(
            escape(provider.name),
            str(len(provider.rules)),
            str(len(provider.raw_rules)),
            str(len(provider.referral_marketing)),
            str(len(provider.exceptions)),
            str(len(provider.redirections)),
            "Yes" if provider.complete_provider else "No",
        )

    console.print(table)
    console.print(f"[blue]{len(cleaner.rules)} providers loaded[/blue]")


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
