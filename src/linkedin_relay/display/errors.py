# ABOUTME: Error display helpers for formatting error messages with Rich.
# ABOUTME: Provides panels for generic errors, blocked sessions and session timeouts.

import traceback

from rich.panel import Panel
from rich.text import Text

from linkedin_relay.session.exceptions import BlockedError, SessionTimeoutError


def display_error(error: Exception, verbose: bool = False) -> Panel:
    """Format an error as a Rich Panel.

    Args:
        error: The exception to display.
        verbose: If True, include full traceback information.

    Returns:
        A Rich Panel containing formatted error information.
    """
    content = Text()
    content.append(f"{type(error).__name__}: ", style="bold red")
    content.append(str(error), style="red")

    if verbose:
        content.append("\n\nTraceback:\n", style="dim")
        tb_text = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        content.append(tb_text, style="dim")

    return Panel(content, title="Error", border_style="red", padding=(1, 2))


def display_blocked(error: BlockedError) -> Panel:
    """Explain that collection stopped because the page showed a block signal.

    Args:
        error: The BlockedError raised by the collector.

    Returns:
        A Rich Panel naming the signal and what was kept.
    """
    partial = error.partial
    message = Text()
    message.append("Aborted: protection triggered\n\n", style="bold red")
    message.append("Signal: ", style="dim")
    message.append(f"{error.signal.category}", style="bold yellow")
    message.append(f" ({error.signal.marker})\n", style="dim")
    message.append("Kept: ", style="dim")
    message.append(
        f"{len(partial.connections)} connections from {partial.pages_processed} pages\n\n",
        style="cyan",
    )
    message.append("Stop automated access and continue manually in the browser.", style="dim")

    return Panel(message, title="Blocked", border_style="red", padding=(1, 2))


def display_timeout(error: SessionTimeoutError) -> Panel:
    """Explain that the session hit its time limit and returned partial results."""
    partial = error.partial
    message = Text()
    message.append("Partial results: timed out\n\n", style="bold yellow")
    message.append(f"{error}\n", style="yellow")
    message.append("Kept: ", style="dim")
    message.append(
        f"{len(partial.connections)} connections from {partial.pages_processed} pages",
        style="cyan",
    )

    return Panel(message, title="Session Timeout", border_style="yellow", padding=(1, 2))
