# ABOUTME: Display module for Rich terminal output formatting.
# ABOUTME: Exports tables, panels and the console notification sink.

from linkedin_relay.display.errors import display_blocked, display_error, display_timeout
from linkedin_relay.display.notices import RichNoticeSink
from linkedin_relay.display.status import display_delivery_summary, display_session_summary
from linkedin_relay.display.tables import ConnectionTable, ProfilePanel

__all__ = [
    "ConnectionTable",
    "ProfilePanel",
    "RichNoticeSink",
    "display_blocked",
    "display_delivery_summary",
    "display_error",
    "display_session_summary",
    "display_timeout",
]
