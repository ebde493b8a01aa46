# ABOUTME: RelayService wires parsing, collection and delivery behind one trigger interface.
# ABOUTME: handle() routes named commands and returns a CommandResult instead of raising.

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel

from linkedin_relay.delivery import (
    DeliveryQueueManager,
    EndpointSelectionError,
    WebhookSender,
    build_bidirectional,
    build_profile_payload,
    build_single,
    enhance_for_delivery,
)
from linkedin_relay.errors import LinkedInRelayError
from linkedin_relay.host import PageHost
from linkedin_relay.models import (
    ConnectionsAffordance,
    EndpointConfig,
    ProfileRecord,
    RelayConfig,
    SessionResult,
    SourceProfile,
)
from linkedin_relay.notifications import Notification, NotificationKind, NotificationSink, NullSink
from linkedin_relay.pacing import PacingPolicy
from linkedin_relay.parsing import PageParser
from linkedin_relay.parsing.fields import parse_html
from linkedin_relay.session import (
    BlockedError,
    SessionAbortedError,
    SessionCollector,
    SessionTimeoutError,
)

logger = logging.getLogger(__name__)

SESSION_CHANNEL = "LinkedIn Parser"

OpenPage = Callable[[str], Awaitable[PageHost]]


class CommandResult(BaseModel):
    """Response to a routed command."""

    success: bool
    data: Any = None
    error: str | None = None
    error_type: str | None = None


class RelayService:
    """Entry point the host environment calls into.

    Owns one PageParser, one SessionCollector and one DeliveryQueueManager.
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        sink: NotificationSink | None = None,
        parser: PageParser | None = None,
        policy: PacingPolicy | None = None,
        collector: SessionCollector | None = None,
        queue: DeliveryQueueManager | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Endpoints, delivery mode and limits.
            sink: Receives delivery and session notifications.
            parser: Page parser; built from the default selectors if omitted.
            policy: Pacing policy handed to the default collector.
            collector: Session collector; built from parser/policy if omitted.
            queue: Delivery queue; built with a WebhookSender if omitted.
        """
        self.config = config or RelayConfig()
        self.sink = sink or NullSink()
        self.parser = parser or PageParser()
        self.collector = collector or SessionCollector(
            parser=self.parser,
            policy=policy or PacingPolicy(self.config, self.parser.selectors),
            config=self.config,
        )
        self.queue = queue or DeliveryQueueManager(
            WebhookSender(self.config, self.sink),
            sink=self.sink,
            config=self.config,
        )

    async def parse_profile(self, host: PageHost) -> ProfileRecord:
        """Parse the profile currently shown by ``host``."""
        url = await host.url()
        return self.parser.parse_profile_page(await host.content(), url or None)

    async def detect_connections_affordance(self, host: PageHost) -> ConnectionsAffordance | None:
        url = await host.url()
        return self.parser.detect_connections_affordance(await host.content(), url or None)

    async def check_blocked(self, host: PageHost) -> dict[str, Any]:
        signal = self.collector.policy.detect_blocked(await host.content())
        return {
            "isBlocked": signal is not None,
            "signal": signal.model_dump() if signal else None,
        }

    async def test_selectors(self, host: PageHost) -> dict[str, Any]:
        probes = self.parser.test_selectors(await host.content())
        return {key: probe.model_dump() for key, probe in probes.items()}

    async def collect_all_connections(self, host: PageHost, source: SourceProfile) -> SessionResult:
        """Run one collection session and report its outcome once.

        Raises:
            SessionInProgressError: If a session is already running.
            SessionAbortedError: If the session stopped early (partial attached).
        """
        try:
            result = await self.collector.collect_all_connections(host, source)
        except BlockedError as e:
            self._session_notice(
                NotificationKind.FAILURE, f"Aborted: protection triggered ({e.signal.category})", e.partial
            )
            raise
        except SessionTimeoutError as e:
            self._session_notice(
                NotificationKind.FAILURE,
                f"Partial results: timed out with {len(e.partial.connections)} connections",
                e.partial,
            )
            raise
        except SessionAbortedError as e:
            self._session_notice(NotificationKind.FAILURE, f"Collection failed: {e}", e.partial)
            raise

        self._session_notice(
            NotificationKind.SUCCESS,
            f"Collected {len(result.connections)} mutual connections",
            result,
        )
        return result

    def _session_notice(self, kind: NotificationKind, message: str, result: SessionResult) -> None:
        self.sink.notify(
            Notification(
                kind=kind,
                channel=SESSION_CHANNEL,
                message=message,
                detail={
                    "status": result.status.value,
                    "connections": len(result.connections),
                    "pages": result.pages_processed,
                    "duration_ms": result.duration_ms,
                },
            )
        )

    def deliver(self, payload: dict[str, Any]) -> int:
        """Queue ``payload`` for every endpoint selected by the delivery mode.

        Returns:
            Number of endpoints the payload was queued for.

        Raises:
            EndpointSelectionError: If the delivery mode selects no endpoint.
        """
        targets = self._require_targets()
        for endpoint in targets:
            self.queue.enqueue(endpoint.url, payload, endpoint.name, endpoint.min_interval_seconds)
        return len(targets)

    def _require_targets(self) -> list[EndpointConfig]:
        targets = self.config.target_endpoints()
        if not targets:
            raise EndpointSelectionError("No webhooks selected for LinkedIn data")
        return targets

    async def relay_profile(
        self,
        host: PageHost,
        open_page: OpenPage | None = None,
    ) -> ProfileRecord:
        """Parse the current profile and queue it for delivery.

        When ``auto_collect_connections`` is enabled and the profile shows a
        shared-connections link, ``open_page`` is used to open the search
        results and the mutual connections are relayed as well.

        Args:
            host: Page showing a profile.
            open_page: Opens a URL and returns a host positioned on it.

        Returns:
            The parsed profile.
        """
        self._require_targets()
        url = await host.url()
        soup = parse_html(await host.content())
        profile = self.parser.parse_profile_page(soup, url or None)

        count = self.deliver(build_profile_payload(profile, url or None))
        self.sink.notify(
            Notification(
                kind=NotificationKind.INFO,
                channel=SESSION_CHANNEL,
                message=f"Profile queued for {count} webhook(s)",
            )
        )

        if self.config.auto_collect_connections and open_page is not None:
            affordance = self.parser.detect_connections_affordance(soup, url or None)
            search_url = affordance.search_url if affordance else profile.mutual_connections_url
            if search_url:
                source = SourceProfile(
                    name=profile.name or "",
                    profile_url=profile.profile_url or "",
                    encoded_id=affordance.encoded_id if affordance else (profile.linkedin_id or ""),
                    expected_count=(
                        affordance.approx_count if affordance else profile.mutual_connections_count
                    ),
                )
                try:
                    await self.relay_connections(await open_page(search_url), source)
                except LinkedInRelayError as e:
                    logger.error("Automatic connection collection failed: %s", e)
            else:
                logger.info("No shared-connections link on profile; skipping collection")
        return profile

    async def relay_connections(self, host: PageHost, source: SourceProfile) -> list[dict[str, Any]]:
        """Collect connections and queue the resulting payload(s).

        Bidirectional mode queues the aggregate payload followed by one
        payload per connection.

        Returns:
            The payloads that were queued.
        """
        self._require_targets()
        result = await self.collect_all_connections(host, source)
        payloads = build_bidirectional(result) if self.config.bidirectional else [build_single(result)]
        queued = [enhance_for_delivery(payload) for payload in payloads]
        for payload in queued:
            self.deliver(payload)
        self.sink.notify(
            Notification(
                kind=NotificationKind.INFO,
                channel=SESSION_CHANNEL,
                message=f"LinkedIn data queued ({len(queued)} payload(s))",
            )
        )
        return queued

    async def handle(self, command: str, **args: Any) -> CommandResult:
        """Route a named command to the matching operation.

        Commands: parseProfile, detectConnections, collectConnections,
        collectConnectionsBidirectional, checkBlocked, testSelectors. All take
        a ``host``; the collect commands also take a ``source``.

        Returns:
            CommandResult; relay errors become ``success=False`` with the
            error type, and aborted sessions carry their partial payload.
        """
        routes: dict[str, Callable[..., Awaitable[Any]]] = {
            "parseProfile": self._cmd_parse_profile,
            "detectConnections": self._cmd_detect_connections,
            "collectConnections": self._cmd_collect,
            "collectConnectionsBidirectional": self._cmd_collect_bidirectional,
            "checkBlocked": self.check_blocked,
            "testSelectors": self.test_selectors,
        }
        handler = routes.get(command)
        if handler is None:
            return CommandResult(success=False, error=f"Unknown command '{command}'", error_type="UnknownCommand")

        try:
            return CommandResult(success=True, data=await handler(**args))
        except SessionAbortedError as e:
            return CommandResult(
                success=False,
                data=build_single(e.partial),
                error=str(e),
                error_type=type(e).__name__,
            )
        except LinkedInRelayError as e:
            return CommandResult(success=False, error=str(e), error_type=type(e).__name__)

    async def _cmd_parse_profile(self, host: PageHost) -> dict[str, Any]:
        return (await self.parse_profile(host)).to_wire()

    async def _cmd_detect_connections(self, host: PageHost) -> dict[str, Any] | None:
        affordance = await self.detect_connections_affordance(host)
        return affordance.to_wire() if affordance else None

    async def _cmd_collect(self, host: PageHost, source: SourceProfile | dict) -> dict[str, Any]:
        result = await self.collect_all_connections(host, SourceProfile.model_validate(source))
        return build_single(result)

    async def _cmd_collect_bidirectional(
        self, host: PageHost, source: SourceProfile | dict
    ) -> list[dict[str, Any]]:
        result = await self.collect_all_connections(host, SourceProfile.model_validate(source))
        return build_bidirectional(result)

    async def aclose(self) -> None:
        """Deliver anything still queued, then release the HTTP client."""
        await self.queue.aclose()
