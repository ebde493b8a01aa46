# ABOUTME: Unit tests for data models (records, relay configuration, session state).
# ABOUTME: Tests validation, defaults, endpoint selection, and camelCase serialization.

from datetime import datetime

import pytest
from pydantic import ValidationError

from linkedin_relay.models import (
    ConnectionRecord,
    DeliveryMode,
    EducationEntry,
    EndpointConfig,
    ExperienceEntry,
    ProfileRecord,
    RelayConfig,
    SessionResult,
    SessionState,
    SessionStatus,
    SourceProfile,
)


class TestConnectionRecord:
    """Tests for ConnectionRecord."""

    def test_create_with_required_fields(self):
        """Test creating a record with only a name and URL."""
        record = ConnectionRecord(name="Alex Kim", profile_url="https://www.linkedin.com/in/alex-kim")

        assert record.headline is None
        assert record.is_premium is False
        assert isinstance(record.extracted_at, datetime)
        assert record.extracted_at.tzinfo is not None

    def test_name_is_required(self):
        with pytest.raises(ValidationError):
            ConnectionRecord(name="", profile_url="https://www.linkedin.com/in/x")

    def test_profile_url_is_required(self):
        with pytest.raises(ValidationError):
            ConnectionRecord(name="Alex Kim", profile_url="")

    def test_wire_format_is_camel_case(self):
        record = ConnectionRecord(
            name="Alex Kim",
            profile_url="https://www.linkedin.com/in/alex-kim",
            connection_degree="2nd",
        )

        wire = record.to_wire()

        assert wire["profileUrl"] == "https://www.linkedin.com/in/alex-kim"
        assert wire["connectionDegree"] == "2nd"
        assert "profile_url" not in wire
        assert isinstance(wire["extractedAt"], str)

    def test_accepts_camel_case_input(self):
        record = ConnectionRecord.model_validate(
            {"name": "Alex Kim", "profileUrl": "https://www.linkedin.com/in/alex-kim"}
        )
        assert record.profile_url == "https://www.linkedin.com/in/alex-kim"


class TestProfileRecord:
    """Tests for ProfileRecord and its entries."""

    def test_everything_is_optional(self):
        profile = ProfileRecord()

        assert profile.name is None
        assert profile.experience == []
        assert profile.education == []
        assert profile.skills == []

    def test_entries_need_their_key_field(self):
        with pytest.raises(ValidationError):
            ExperienceEntry(title="")
        with pytest.raises(ValidationError):
            EducationEntry(school="")

    def test_nested_wire_format(self):
        profile = ProfileRecord(
            name="Jane Doe",
            education=[EducationEntry(school="TU Berlin", field_of_study="Computer Science")],
        )

        wire = profile.to_wire()

        assert wire["education"][0]["fieldOfStudy"] == "Computer Science"
        assert wire["mutualConnectionsCount"] is None


class TestRelayConfig:
    """Tests for RelayConfig defaults and endpoint selection."""

    @pytest.fixture
    def endpoints(self) -> list[EndpointConfig]:
        return [
            EndpointConfig(url="https://hooks.example.test/a", name="A"),
            EndpointConfig(url="https://hooks.example.test/b", name="B", min_interval_seconds=30),
            EndpointConfig(url="https://hooks.example.test/c", name="C"),
        ]

    def test_defaults(self):
        config = RelayConfig()

        assert config.endpoints == []
        assert config.send_to is DeliveryMode.ALL
        assert config.max_pages == 50
        assert config.session_timeout_seconds == 300
        assert config.page_load_timeout_seconds == 10
        assert config.min_page_delay_ms == 2000
        assert config.max_page_delay_ms == 7000
        assert config.min_item_delay_ms == 200
        assert config.max_item_delay_ms == 500
        assert config.max_attempts == 3
        assert config.notification_interval_seconds == 5
        assert config.notification_ceiling_seconds == 60

    def test_send_to_all(self, endpoints):
        config = RelayConfig(endpoints=endpoints)
        assert [e.name for e in config.target_endpoints()] == ["A", "B", "C"]

    def test_send_to_none(self, endpoints):
        config = RelayConfig(endpoints=endpoints, send_to=DeliveryMode.NONE)
        assert config.target_endpoints() == []

    def test_send_to_selected_ignores_bad_indices(self, endpoints):
        config = RelayConfig(endpoints=endpoints, send_to="selected", selected_endpoints=[2, 0, 9])
        assert [e.name for e in config.target_endpoints()] == ["A", "C"]

    def test_negative_interval_rejected(self):
        with pytest.raises(ValidationError):
            EndpointConfig(url="https://hooks.example.test/a", min_interval_seconds=-1)

    def test_empty_url_rejected(self):
        with pytest.raises(ValidationError):
            EndpointConfig(url="")

    def test_max_pages_must_be_positive(self):
        with pytest.raises(ValidationError):
            RelayConfig(max_pages=0)


class TestSessionState:
    """Tests for SessionState and SessionResult."""

    def test_to_result_copies_connections(self):
        state = SessionState(source=SourceProfile(name="Jane"), started_monotonic=100.0)
        state.connections.append(
            ConnectionRecord(name="Alex Kim", profile_url="https://www.linkedin.com/in/alex-kim")
        )
        state.pages_processed = 1

        result = state.to_result(102.5, SessionStatus.COMPLETED)
        state.connections.clear()

        assert len(result.connections) == 1
        assert result.pages_processed == 1
        assert result.duration_ms == 2500
        assert result.status is SessionStatus.COMPLETED
        assert result.is_partial is False

    def test_aborted_result_is_partial(self):
        state = SessionState(source=SourceProfile(), started_monotonic=0.0)

        result = state.to_result(1.0, SessionStatus.ABORTED_TIMEOUT, "timed out")

        assert result.is_partial is True
        assert result.error == "timed out"

    def test_duration_never_negative(self):
        state = SessionState(source=SourceProfile(), started_monotonic=10.0)
        assert state.to_result(5.0, SessionStatus.COMPLETED).duration_ms == 0

    def test_result_defaults(self):
        result = SessionResult(source=SourceProfile())
        assert result.status is SessionStatus.COMPLETED
        assert result.connections == []
