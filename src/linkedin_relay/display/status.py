# ABOUTME: Status display functions for collection session summaries and delivery outcomes.
# ABOUTME: Provides Rich panels for reporting what a session collected and where it went.

from rich.panel import Panel
from rich.text import Text

from linkedin_relay.delivery.sender import DeliveryResult
from linkedin_relay.models import SessionResult, SessionStatus

_STATUS_STYLES: dict[SessionStatus, str] = {
    SessionStatus.COMPLETED: "green",
    SessionStatus.ABORTED_TIMEOUT: "yellow",
    SessionStatus.ABORTED_BLOCKED: "red",
    SessionStatus.ABORTED_ERROR: "red",
}


def display_session_summary(result: SessionResult) -> Panel:
    """Display a summary panel for a collection session.

    Args:
        result: Completed or partial session result.

    Returns:
        Rich Panel containing the session summary.
    """
    count = len(result.connections)
    style = _STATUS_STYLES.get(result.status, "white")
    if count == 0:
        result_text = "[yellow]No connections collected[/yellow]"
    elif count == 1:
        result_text = "[green]1 connection collected[/green]"
    else:
        result_text = f"[green]{count} connections collected[/green]"

    content = Text()
    content.append("Profile: ", style="dim")
    content.append(f"{result.source.name or result.source.profile_url or '-'}\n", style="cyan")
    content.append("Status: ", style="dim")
    content.append(f"{result.status.value}\n", style=style)
    content.append("Results: ", style="dim")
    content.append_text(Text.from_markup(result_text))
    content.append("\n")
    if result.source.expected_count is not None:
        content.append("Expected: ", style="dim")
        content.append(f"~{result.source.expected_count}\n", style="blue")
    content.append("Pages: ", style="dim")
    content.append(f"{result.pages_processed}\n", style="blue")
    content.append("Duration: ", style="dim")
    content.append(f"{result.duration_ms / 1000:.2f}s", style="blue")
    if result.error:
        content.append("\nError: ", style="dim")
        content.append(result.error, style="red")

    return Panel(content, title="Session Summary", border_style=style, padding=(1, 2))


def display_delivery_summary(results: list[DeliveryResult]) -> Panel | None:
    """Summarize delivery outcomes, or None when nothing was sent."""
    if not results:
        return None

    content = Text()
    for result in results:
        mark, style = ("OK", "green") if result.ok else ("FAILED", "red")
        content.append(f"{mark:<7}", style=f"bold {style}")
        content.append(f"{result.display_name} ", style="cyan")
        content.append(f"({result.attempts} attempt{'s' if result.attempts != 1 else ''}", style="dim")
        if result.status_code is not None:
            content.append(f", HTTP {result.status_code}", style="dim")
        content.append(")\n", style="dim")

    failed = sum(1 for r in results if not r.ok)
    return Panel(
        content,
        title="Delivery",
        border_style="red" if failed else "green",
        padding=(1, 2),
    )
