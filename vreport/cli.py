"""vreport CLI - run the mod in a headless browser and report what broke.

Requires DISCORD_TOKEN and CHROMIUM_BIN in the environment. The report is
written to stdout; diagnostics go to stderr. The exit status is non-zero if
the mod logged any patch or plugin failure.
"""

import json
from functools import partial
from pathlib import Path

import click

from vreport.config import load_settings, setup_logging
from vreport.exceptions import ConfigError, VReportError
from vreport.report import render_markdown
from vreport.runner import run as run_session
from vreport.version import __version__

_stderr = partial(click.echo, err=True)


@click.group()
@click.version_option(version=__version__, prog_name="vreport")
def cli() -> None:
    """vreport - end-to-end patch and plugin checks for Vencord.

    Injects a Vencord build into the Discord web client, force-enables every
    plugin and patch, loads every lazy chunk and reports failures.
    """
    setup_logging()


@cli.command()
@click.option(
    "--bundle",
    "-b",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the built browser bundle (default: $VREPORT_BUNDLE or dist/browser.js)",
)
@click.option(
    "--login-url",
    default=None,
    help="Page to open (default: $VREPORT_LOGIN_URL or https://discord.com/login)",
)
@click.option(
    "--headed",
    is_flag=True,
    help="Show the browser window instead of running headless",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output the report as JSON instead of Markdown",
)
def run(bundle: Path | None, login_url: str | None, headed: bool, json_output: bool) -> None:
    """Run the end-to-end check and print the report."""
    try:
        settings = load_settings(bundle_path=bundle, login_url=login_url, headless=not headed)
    except ConfigError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)

    try:
        collector = run_session(settings, echo=_stderr)
    except VReportError as e:
        click.echo(f"Error: {e.message}", err=True)
        if e.detail:
            click.echo(e.detail, err=True)
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps(collector.report.to_dict(), indent=2))
    else:
        click.echo(render_markdown(collector.report), nl=False)

    raise SystemExit(collector.exit_code)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
