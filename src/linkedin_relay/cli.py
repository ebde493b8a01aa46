# ABOUTME: Typer CLI that drives the relay core against saved LinkedIn page snapshots.
# ABOUTME: Provides profile, detect, collect, check, probe and endpoints commands.

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from linkedin_relay.config import ConfigError, get_settings, load_relay_config, load_selector_config
from linkedin_relay.delivery import DeliveryResult, build_bidirectional, build_single
from linkedin_relay.display import (
    ConnectionTable,
    ProfilePanel,
    RichNoticeSink,
    display_blocked,
    display_delivery_summary,
    display_error,
    display_session_summary,
    display_timeout,
)
from linkedin_relay.errors import LinkedInRelayError
from linkedin_relay.host import StaticPageHost
from linkedin_relay.logging_setup import init_logging
from linkedin_relay.models import DeliveryMode, ProfileRecord, RelayConfig, SourceProfile
from linkedin_relay.pacing import PacingPolicy
from linkedin_relay.parsing import PageParser, SelectorConfig
from linkedin_relay.service import RelayService
from linkedin_relay.session import BlockedError, SessionAbortedError, SessionTimeoutError

app = typer.Typer(
    name="linkedin-relay",
    help="Extract LinkedIn profiles and mutual connections and relay them to webhooks.",
    add_completion=False,
)

console = Console()

DEFAULT_SEARCH_URL = "https://www.linkedin.com/search/results/people/"

# Snapshots are complete documents, so the next page is either there or not.
SNAPSHOT_PAGE_LOAD_TIMEOUT = 0.5

PageFile = Annotated[
    Path,
    typer.Argument(exists=True, dir_okay=False, readable=True, help="Saved HTML page."),
]


async def _no_sleep(seconds: float) -> None:
    await asyncio.sleep(0)


def _load_config() -> RelayConfig:
    try:
        return load_relay_config(get_settings())
    except ConfigError as e:
        console.print(display_error(e))
        raise typer.Exit(code=1) from None


def _load_selectors() -> SelectorConfig:
    try:
        return load_selector_config(get_settings())
    except ConfigError as e:
        console.print(display_error(e))
        raise typer.Exit(code=1) from None


def _build_service(config: RelayConfig, no_delay: bool = False) -> RelayService:
    """Create a RelayService wired to the console and configured selectors."""
    selectors = _load_selectors()
    parser = PageParser(selectors)
    policy = PacingPolicy(config, selectors, sleep=_no_sleep) if no_delay else None
    return RelayService(config, sink=RichNoticeSink(console), parser=parser, policy=policy)


def _read_pages(paths: list[Path]) -> list[str]:
    return [path.read_text(encoding="utf-8") for path in paths]


async def _flush(service: RelayService) -> list[DeliveryResult]:
    results = await service.queue.wait_idle()
    await service.aclose()
    return results


def _print_delivery(results: list[DeliveryResult]) -> None:
    panel = display_delivery_summary(results)
    if panel is not None:
        console.print(panel)
    if any(not result.ok for result in results):
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr."),
    ] = False,
) -> None:
    """LinkedIn profile and mutual-connection relay.

    Works on saved HTML snapshots of profile and search-result pages and
    delivers the extracted data to the configured webhooks.
    """
    init_logging("DEBUG" if verbose else None)
    if ctx.invoked_subcommand is None:
        console.print("[dim]Use --help to see available commands.[/dim]")


@app.command()
def profile(
    page: PageFile,
    url: Annotated[
        str | None,
        typer.Option("--url", "-u", help="URL the page was saved from."),
    ] = None,
    send: Annotated[
        bool,
        typer.Option("--send", help="Deliver the profile to the configured webhooks."),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the parsed profile as JSON."),
    ] = False,
) -> None:
    """Parse a saved profile page."""
    config = _load_config()
    service = _build_service(config)
    host = StaticPageHost(_read_pages([page]), urls=[url or ""])

    async def run() -> list[DeliveryResult]:
        if not send:
            parsed = await service.parse_profile(host)
            _show_profile(parsed, as_json)
            return []
        parsed = await service.relay_profile(host)
        _show_profile(parsed, as_json)
        return await _flush(service)

    try:
        results = asyncio.run(run())
    except LinkedInRelayError as e:
        console.print(display_error(e))
        raise typer.Exit(code=1) from None

    _print_delivery(results)


def _show_profile(parsed: ProfileRecord, as_json: bool) -> None:
    if as_json:
        console.print_json(json.dumps(parsed.to_wire()))
    else:
        console.print(ProfilePanel().render(parsed))


@app.command()
def detect(
    page: PageFile,
    url: Annotated[
        str | None,
        typer.Option("--url", "-u", help="URL the page was saved from."),
    ] = None,
) -> None:
    """Show the shared-connections link on a saved profile page."""
    parser = PageParser(_load_selectors())
    affordance = parser.detect_connections_affordance(page.read_text(encoding="utf-8"), url)
    if affordance is None:
        console.print("[yellow]No shared-connections link found on this page.[/yellow]")
        raise typer.Exit(code=1)

    count = "unknown" if affordance.approx_count is None else f"~{affordance.approx_count}"
    console.print(f"[bold]Encoded id:[/bold] [cyan]{affordance.encoded_id}[/cyan]")
    console.print(f"[bold]Approx. count:[/bold] {count}")
    console.print(f"[bold]Label:[/bold] {affordance.raw_text or '-'}")
    console.print(f"[bold]Search URL:[/bold] {affordance.search_url}", soft_wrap=True)


@app.command()
def collect(
    pages: Annotated[
        list[Path],
        typer.Argument(
            exists=True,
            dir_okay=False,
            readable=True,
            help="Saved search-result pages, in pagination order.",
        ),
    ],
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Name of the profile whose connections these are."),
    ] = "",
    profile_url: Annotated[
        str,
        typer.Option("--url", "-u", help="URL of that profile."),
    ] = "",
    encoded_id: Annotated[
        str,
        typer.Option("--encoded-id", help="The facetConnectionOf id of that profile."),
    ] = "",
    page_url: Annotated[
        str,
        typer.Option("--page-url", help="URL the result pages were saved from."),
    ] = DEFAULT_SEARCH_URL,
    send: Annotated[
        bool,
        typer.Option("--send", help="Deliver the result to the configured webhooks."),
    ] = False,
    bidirectional: Annotated[
        bool | None,
        typer.Option(
            "--bidirectional/--single",
            help="Also send one payload per connection (default: from config).",
        ),
    ] = None,
    no_delay: Annotated[
        bool,
        typer.Option("--no-delay", help="Skip pacing pauses between items and pages."),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the payload(s) as JSON."),
    ] = False,
) -> None:
    """Collect mutual connections across saved search-result pages."""
    config = _load_config()
    update: dict[str, object] = {
        "page_load_timeout_seconds": SNAPSHOT_PAGE_LOAD_TIMEOUT,
        "max_pages": min(config.max_pages, len(pages)),
    }
    if bidirectional is not None:
        update["bidirectional"] = bidirectional
    config = config.model_copy(update=update)

    service = _build_service(config, no_delay=no_delay)
    host = StaticPageHost(_read_pages(pages), urls=[page_url] * len(pages))
    source = SourceProfile(name=name, profile_url=profile_url, encoded_id=encoded_id)

    async def run():
        if send:
            payloads = await service.relay_connections(host, source)
            return payloads, await _flush(service)
        result = await service.collect_all_connections(host, source)
        return result, []

    try:
        outcome, deliveries = asyncio.run(run())
    except BlockedError as e:
        console.print(display_blocked(e))
        raise typer.Exit(code=2) from None
    except SessionTimeoutError as e:
        console.print(display_timeout(e))
        console.print(display_session_summary(e.partial))
        raise typer.Exit(code=3) from None
    except SessionAbortedError as e:
        console.print(display_error(e))
        console.print(display_session_summary(e.partial))
        raise typer.Exit(code=1) from None
    except LinkedInRelayError as e:
        console.print(display_error(e))
        raise typer.Exit(code=1) from None

    if send:
        if as_json:
            console.print_json(json.dumps(outcome))
        else:
            aggregate = outcome[0]
            console.print(
                f"[green]Queued {len(outcome)} payload(s) with "
                f"{aggregate['totalCount']} connections from {aggregate['pagesScraped']} pages.[/green]"
            )
        _print_delivery(deliveries)
        return

    if as_json:
        payload = build_bidirectional(outcome) if config.bidirectional else build_single(outcome)
        console.print_json(json.dumps(payload))
        return

    if outcome.connections:
        console.print(ConnectionTable().render(outcome.connections, title="Mutual connections"))
    console.print(display_session_summary(outcome))


@app.command()
def check(page: PageFile) -> None:
    """Report whether a saved page shows a block or challenge signal."""
    policy = PacingPolicy(selectors=_load_selectors())
    signal = policy.detect_blocked(page.read_text(encoding="utf-8"))
    if signal is None:
        console.print("[green]No block signals detected.[/green]")
        return
    console.print(f"[red]Blocked:[/red] [bold]{signal.category}[/bold] [dim]({signal.marker})[/dim]")
    raise typer.Exit(code=2)


@app.command()
def probe(
    page: PageFile,
    misses: Annotated[
        bool,
        typer.Option("--misses", help="Only list fields where no candidate matched."),
    ] = False,
) -> None:
    """Show how many elements each configured selector matches on a saved page."""
    parser = PageParser(_load_selectors())
    probes = parser.test_selectors(page.read_text(encoding="utf-8"))

    table = Table(title="Selector probe")
    table.add_column("Field", style="cyan")
    table.add_column("Matching selector", style="white")
    table.add_column("Count", justify="right")

    for key, result in probes.items():
        if misses and result.matched:
            continue
        winner = result.winning_selector
        if winner is None:
            table.add_row(key, "[dim]none[/dim]", "[red]0[/red]")
        else:
            table.add_row(key, winner, f"[green]{result.counts[winner]}[/green]")

    console.print(table)
    matched = sum(1 for result in probes.values() if result.matched)
    console.print(f"[dim]{matched}/{len(probes)} fields matched.[/dim]")


@app.command()
def endpoints() -> None:
    """List configured webhooks and which ones receive LinkedIn data."""
    config = _load_config()
    if not config.endpoints:
        console.print("[yellow]No webhooks configured.[/yellow]")
        console.print(f"[dim]Add them to {get_settings().config_file}[/dim]")
        return

    targets = {endpoint.url for endpoint in config.target_endpoints()}
    table = Table(title=f"Webhooks (send to: {config.send_to.value})")
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", style="cyan")
    table.add_column("URL", style="white")
    table.add_column("Min interval", justify="right")
    table.add_column("Receives", justify="center")

    for index, endpoint in enumerate(config.endpoints):
        interval = f"{endpoint.min_interval_seconds:g}s" if endpoint.min_interval_seconds else "-"
        receives = "[green]yes[/green]" if endpoint.url in targets else "[dim]no[/dim]"
        table.add_row(str(index), endpoint.name, endpoint.url, interval, receives)

    console.print(table)
    if config.send_to is DeliveryMode.SELECTED and not targets:
        console.print("[yellow]Delivery mode is 'selected' but no webhook is selected.[/yellow]")
