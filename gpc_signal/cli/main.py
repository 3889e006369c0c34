#!/usr/bin/env python3
"""Main CLI entry point for GPC Signal using Typer.

Resolves Global Privacy Control and Do Not Track signals from explicit
values, request headers or a live page, and shows the body class the
resolver would apply.
"""

import asyncio
import json
import logging
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
import yaml
from typing_extensions import Annotated

from .. import __version__
from ..signals.config import (
    BOOLEAN_FIELDS,
    OPTION_KEYS,
    SignalConfig,
    format_configuration,
    load_signal_config,
    unknown_option_keys,
    validate_config_file,
)
from ..signals.models import BodyClassList, SignalResolution, UserAgentEnvironment
from ..signals.resolver import GlobalPrivacyControl


class ExitCode(IntEnum):
    """CLI exit codes."""
    SUCCESS = 0
    CONFIG_ERROR = 3      # Configuration or argument error
    RUNTIME_ERROR = 4     # Browser or page failure


app = typer.Typer(
    name="gpc-signal",
    help="GPC Signal - resolve Global Privacy Control and Do Not Track signals",
    add_completion=False,
    rich_markup_mode="rich"
)


@app.callback()
def main():
    """
    GPC Signal - resolve Global Privacy Control and Do Not Track signals.

    Determines whether a user agent asks not to be tracked and which
    signal class the document body should carry.
    """
    pass


@app.command(name="version")
def show_version():
    """Show version information."""
    typer.echo(f"GPC Signal CLI v{__version__}")


def parse_option_pairs(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """Parse ``KEY=VALUE`` pairs.

    Boolean options are read as YAML scalars (true, false, 1, 0), every
    other value is kept as the raw string.
    """
    options = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Option must be KEY=VALUE: {pair}")
        key, value = pair.split("=", 1)
        key = key.strip()
        if OPTION_KEYS.get(key) in BOOLEAN_FIELDS and value.strip():
            options[key] = yaml.safe_load(value)
        else:
            options[key] = value
    return options


def parse_headers(header_lines: Optional[List[str]]) -> Dict[str, str]:
    """Parse ``Name: value`` header lines."""
    headers = {}
    for line in header_lines or []:
        if ":" not in line:
            raise ValueError(f"Header must be 'Name: value': {line}")
        name, value = line.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


def _load_config(config_file: Optional[Path], options: Optional[List[str]]) -> SignalConfig:
    """Load configuration, exiting with CONFIG_ERROR on failure."""
    try:
        overrides = parse_option_pairs(options)
        for key in unknown_option_keys(overrides):
            typer.echo(f"⚠️  Ignoring unknown option: {key}", err=True)
        return load_signal_config(config_file=config_file, cli_overrides=overrides)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def _render_result(
    resolution: SignalResolution,
    body_classes: BodyClassList,
    applied: Optional[str],
    output_format: str,
    url: Optional[str] = None
) -> str:
    result = {
        "signal": resolution.signal,
        "source": resolution.source.value,
        "applied_class": applied,
        "body_class": body_classes.class_name,
    }
    if url is not None:
        result = {"url": url, **result}

    if output_format == "json":
        return json.dumps(result, indent=2)

    lines = []
    if url is not None:
        lines.append(f"URL:          {url}")
    lines.extend([
        f"Signal:       {'true' if resolution.signal else 'false'}",
        f"Source:       {resolution.source.value}",
        f"Applied:      {applied or '(unchanged)'}",
        f"Body class:   {body_classes.class_name}",
    ])
    return "\n".join(lines)


@app.command()
def resolve(
    gpc: Annotated[
        Optional[bool],
        typer.Option("--gpc/--no-gpc", help="Native Global Privacy Control value (absent if omitted)")
    ] = None,

    dnt: Annotated[
        Optional[str],
        typer.Option("--dnt", help="Native Do Not Track value, e.g. 1 or unspecified")
    ] = None,

    cookie: Annotated[
        Optional[str],
        typer.Option("--cookie", help="Cookie string, e.g. '_globalPrivacyControl=1; a=b'")
    ] = None,

    header: Annotated[
        Optional[List[str]],
        typer.Option("--header", "-H", help="Request header 'Name: value' (repeatable)")
    ] = None,

    body_class: Annotated[
        str,
        typer.Option("--body-class", help="Initial body class attribute")
    ] = "",

    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to configuration file")
    ] = None,

    option: Annotated[
        Optional[List[str]],
        typer.Option("--option", "-o", help="Option override KEY=VALUE (repeatable)")
    ] = None,

    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format (text, json)")
    ] = "text",

    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
):
    """
    Resolve the opt-out signal for the given user agent values.

    Request headers (Sec-GPC, DNT, Cookie) seed the values; explicit
    --gpc, --dnt and --cookie flags take precedence over them.
    """
    _configure_logging(verbose)
    config = _load_config(config_file, option)

    try:
        environment = UserAgentEnvironment.from_headers(parse_headers(header))
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    if gpc is not None:
        environment.global_privacy_control = gpc
    if dnt is not None:
        environment.do_not_track = dnt
    if cookie is not None:
        environment.cookie = cookie

    resolver = GlobalPrivacyControl(
        config=config,
        environment=environment,
        body_classes=BodyClassList.from_class_name(body_class)
    )
    applied = resolver.refresh_body_class()

    typer.echo(_render_result(resolver.resolve(), resolver.body_classes, applied, output_format))


async def _inspect_page(
    url: str,
    config: SignalConfig,
    simulate_gpc: bool,
    simulate_dnt: bool,
    timeout_ms: int,
    headful: bool
) -> Tuple[SignalResolution, BodyClassList, Optional[str]]:
    """Load a page in Chromium and sync its body class."""
    from playwright.async_api import async_playwright

    from ..signals.browser import PrivacySignalSimulator, sync_page_body_class

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=not headful)
        try:
            context = await browser.new_context()
            simulator = PrivacySignalSimulator(gpc=simulate_gpc, dnt=simulate_dnt)
            await simulator.enable_for_context(context)

            page = await context.new_page()
            await page.goto(url, timeout=timeout_ms)

            resolver = GlobalPrivacyControl(config=config)
            resolution, applied = await sync_page_body_class(page, resolver)
            return resolution, resolver.body_classes, applied
        finally:
            await browser.close()


@app.command()
def inspect(
    url: Annotated[
        str,
        typer.Argument(help="URL of the page to inspect")
    ],

    simulate_gpc: Annotated[
        bool,
        typer.Option("--simulate-gpc/--no-simulate-gpc", help="Send Sec-GPC and set navigator.globalPrivacyControl")
    ] = False,

    simulate_dnt: Annotated[
        bool,
        typer.Option("--simulate-dnt/--no-simulate-dnt", help="Send DNT and set navigator.doNotTrack")
    ] = False,

    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to configuration file")
    ] = None,

    option: Annotated[
        Optional[List[str]],
        typer.Option("--option", "-o", help="Option override KEY=VALUE (repeatable)")
    ] = None,

    timeout: Annotated[
        float,
        typer.Option("--timeout", help="Page load timeout in seconds")
    ] = 30.0,

    headful: Annotated[
        bool,
        typer.Option("--headful", help="Run browser with GUI (for debugging)")
    ] = False,

    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format (text, json)")
    ] = "text",

    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
):
    """
    Resolve the signal seen by a live page and apply its body class.

    Uses Playwright with Chromium; run 'playwright install chromium' first.
    """
    _configure_logging(verbose)
    config = _load_config(config_file, option)

    try:
        resolution, body_classes, applied = asyncio.run(
            _inspect_page(url, config, simulate_gpc, simulate_dnt, int(timeout * 1000), headful)
        )
    except KeyboardInterrupt:
        typer.echo("❌ Operation interrupted by user", err=True)
        raise typer.Exit(code=ExitCode.RUNTIME_ERROR.value)
    except Exception as e:
        typer.echo(f"❌ Runtime error: {e}", err=True)
        raise typer.Exit(code=ExitCode.RUNTIME_ERROR.value)

    typer.echo(_render_result(resolution, body_classes, applied, output_format, url=url))


@app.command(name="show-config")
def show_config(
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to configuration file")
    ] = None,

    option: Annotated[
        Optional[List[str]],
        typer.Option("--option", "-o", help="Option override KEY=VALUE (repeatable)")
    ] = None,

    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format (yaml, json)")
    ] = "yaml",
):
    """Show the effective configuration after merging all sources."""
    config = _load_config(config_file, option)
    typer.echo(format_configuration(config, output_format))


@app.command(name="validate-config")
def validate_config(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to configuration file to validate")
    ],
):
    """Validate a configuration file without resolving anything."""
    if not config_file.exists():
        typer.echo(f"❌ Configuration file not found: {config_file}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    issues = validate_config_file(config_file)
    errors = [issue for issue in issues if issue.startswith("error:")]

    for issue in issues:
        typer.echo(f"{'❌' if issue in errors else '⚠️ '} {issue}", err=True)

    if errors:
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    typer.echo(f"✅ Configuration file {config_file} is valid")


def cli_main():
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    app()
