#!/usr/bin/env python3
"""Main CLI entry point for the Schedule Planner session extractor using Typer.

Credentials come from MY_UH_PEOPLESOFT_ID and MY_UH_PASSWORD, either in the
environment or in a ``.env`` file. Without ``--outfile`` the session is
printed to stdout as a ``Cookie`` header string; with it, a jar document is
written to the file.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from .. import __version__
from ..capture.session_extractor import probe_jar
from ..config import load_configuration, load_credentials_from_env
from ..cookies import cookie_tuples, load_jar_document
from ..exceptions import ConfigurationError, SessionExtractionError
from ..formatting import format_jar
from ..models.cookies import ExtractionOptions, OutputFormat
from ..service import harvest_cookie_jar
from .runner import ExitCode, configure_logging, exit_code_for


app = typer.Typer(
    name="scheduler-session",
    help="Extract an authenticated UH Schedule Planner session",
    add_completion=False,
)

_FORMAT_CHOICES = ("header-string", "jar-document", "set-cookie", "jar")


@app.callback()
def main():
    """
    Schedule Planner session extractor.

    Logs into my.uh.edu with a headless browser, follows the portal into the
    Schedule Planner and hands back the scheduler's session cookies.
    """
    pass


@app.command(name="version")
def show_version():
    """Show version information."""
    typer.echo(f"scheduler-session v{__version__}")


def _load_config_or_exit(config_file: Optional[Path], cli_overrides: dict):
    try:
        return load_configuration(config_file=config_file, cli_overrides=cli_overrides)
    except ConfigurationError as e:
        typer.echo(f"❌ Configuration error: {e.message}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)


@app.command()
def extract(
    outfile: Annotated[
        Optional[Path],
        typer.Option("--outfile", "-o", help="File the JSON CookieJar is saved to. Leave empty to print the cookie string to stdout.")
    ] = None,

    output_format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: header-string or jar-document")
    ] = None,

    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML or JSON configuration file")
    ] = None,

    env_file: Annotated[
        Optional[Path],
        typer.Option("--env-file", help="dotenv file holding the credentials")
    ] = None,

    headful: Annotated[
        bool,
        typer.Option("--headful", help="Run browser with GUI (for debugging)")
    ] = False,

    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,

    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Quiet mode (errors only)")
    ] = False,
):
    """
    Log into the portal and extract the Schedule Planner session.

    Examples:

        # Print a Cookie header value
        scheduler-session extract

        # Save a re-loadable cookie jar
        scheduler-session extract -o cookies.json
    """
    configure_logging(verbose=verbose, quiet=quiet)

    if output_format is not None and output_format.strip().lower() not in _FORMAT_CHOICES:
        typer.echo(f"❌ Invalid format '{output_format}'. Valid values: header-string, jar-document", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    if output_format is None:
        output_format = OutputFormat.JAR_DOCUMENT.value if outfile else OutputFormat.HEADER_STRING.value

    cli_overrides = {}
    if headful:
        cli_overrides["browser"] = {"headless": False}

    config = _load_config_or_exit(config_file, cli_overrides)

    try:
        credentials = load_credentials_from_env(env_file)
    except ConfigurationError as e:
        typer.echo(f"⛔ {e.message}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    options = ExtractionOptions(logging=not quiet, format=output_format)

    try:
        jar = asyncio.run(harvest_cookie_jar(credentials, options, config=config))
    except SessionExtractionError as e:
        typer.echo(f"🚫 {e.message}", err=True)
        raise typer.Exit(code=exit_code_for(e).value)
    except Exception as e:
        typer.echo(f"🚫 A fatal exception occurred: {e}", err=True)
        raise typer.Exit(code=ExitCode.RUNTIME_ERROR.value)

    data = format_jar(jar, options.format, config.target_origin)

    if outfile:
        outfile.write_text(data, encoding="utf-8")
        typer.echo(f"🍪 CookieJar written to {outfile}")
    else:
        typer.echo(data)


@app.command()
def check(
    jar_file: Annotated[
        Path,
        typer.Argument(help="Jar document written by 'extract --outfile'")
    ],

    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML or JSON configuration file")
    ] = None,

    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,
):
    """
    Check whether a saved cookie jar still grants access to the scheduler API.
    """
    configure_logging(verbose=verbose)

    if not jar_file.exists():
        typer.echo(f"❌ Jar file not found: {jar_file}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    config = _load_config_or_exit(config_file, {})

    try:
        jar = load_jar_document(jar_file.read_text(encoding="utf-8"))
    except ValidationError as e:
        typer.echo(f"❌ {jar_file} is not a valid jar document: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    if verbose:
        for domain, path, name, _ in cookie_tuples(jar):
            typer.echo(f"   {domain}{path} {name}")

    try:
        status = asyncio.run(probe_jar(jar, config))
    except SessionExtractionError as e:
        typer.echo(f"❌ Session is no longer valid: {e.message}", err=True)
        raise typer.Exit(code=exit_code_for(e).value)

    typer.echo(f"✅ Session is valid ({config.probe_url} returned {status})")


def cli_main():
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    app()
