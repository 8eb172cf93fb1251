"""CLI entry point - command definitions using Click.

Commands:
    init     Generate a template config file
    draft    Print the changelog draft for a calendar month
"""

import functools
import sys
from datetime import date

import click

from linear_changelog import __version__
from linear_changelog.config import DEFAULT_CONFIG_PATH


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_config(ctx: click.Context):
    """Load config from the --config path. Exits on error."""
    from linear_changelog.config import ConfigError, load

    obj = ctx.obj
    try:
        return load(obj["config_path"], required=obj["config_explicit"])
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)


def _verbose(ctx: click.Context, message: str) -> None:
    if ctx.obj["verbose"]:
        click.echo(f"[verbose] {message}", err=True)


def _emit_text(text: str, ctx: click.Context) -> None:
    """Write the document to stdout or to the file specified by --output."""
    output_path: str | None = ctx.obj["output_path"]
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        click.echo(f"Changelog written to '{output_path}'", err=True)
    else:
        click.echo(text)


def _handle_client_errors(func):
    """Decorator that catches client and payload exceptions and exits cleanly."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from linear_changelog.client import (
            AuthenticationError,
            LinearClientError,
            NetworkError,
            QueryError,
        )
        from linear_changelog.models import MalformedDataError

        try:
            return func(*args, **kwargs)
        except AuthenticationError as exc:
            click.echo(f"Authentication error: {exc}", err=True)
            sys.exit(1)
        except QueryError as exc:
            click.echo(f"Query error: {exc}", err=True)
            sys.exit(1)
        except NetworkError as exc:
            click.echo(f"Network error: {exc}", err=True)
            sys.exit(1)
        except LinearClientError as exc:
            click.echo(f"Linear error: {exc}", err=True)
            sys.exit(1)
        except MalformedDataError as exc:
            click.echo(f"Malformed response: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None,
              help=f"Path to the configuration file.  [default: {DEFAULT_CONFIG_PATH}]")
@click.option("--output", "output_path", default=None,
              help="Write the changelog to a file instead of stdout.")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="linear-changelog")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, output_path: str | None,
        verbose: bool) -> None:
    """Linear changelog tool - draft a monthly changelog from completed issues."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path or DEFAULT_CONFIG_PATH
    ctx.obj["config_explicit"] = config_path is not None
    ctx.obj["output_path"] = output_path
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default=DEFAULT_CONFIG_PATH, show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template linear-config.yaml file."""
    from linear_changelog.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
        click.echo("Edit it with your Linear API key and filter settings.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# draft
# ---------------------------------------------------------------------------

@cli.command("draft")
@click.option("--year", type=int, default=lambda: date.today().year,
              show_default="current year", help="Changelog year.")
@click.option("--month", type=click.IntRange(1, 12), default=lambda: date.today().month,
              show_default="current month", help="Changelog month (1-12).")
@click.option("--api-key", default=None,
              help="Linear API key. Falls back to LINEAR_API_KEY, the config file, "
                   "then an interactive prompt.")
@click.pass_context
@_handle_client_errors
def draft_command(ctx: click.Context, year: int, month: int, api_key: str | None) -> None:
    """Print the changelog draft for issues completed in YEAR/MONTH."""
    from linear_changelog.client import LinearClient
    from linear_changelog.reports.changelog import get_changelog, title_line

    config = _load_config(ctx)
    api_key = api_key or config.api_key
    if not api_key:
        api_key = click.prompt("Linear API key", hide_input=True)

    _verbose(ctx, f"Connecting to {config.url}")
    _verbose(ctx, f"Fetching issues completed in {year}-{month:02d}")

    client = LinearClient(url=config.url, api_key=api_key)
    body = get_changelog(
        client, year, month,
        source_type=config.source_type,
        state=config.state,
    )
    _emit_text(f"{title_line(year, month)}\n{body}", ctx)
