# ABOUTME: Models package for LinkedIn relay data structures.
# ABOUTME: Exports profile, connection, session and configuration models.

from linkedin_relay.models.config import DeliveryMode, EndpointConfig, RelayConfig
from linkedin_relay.models.connection import ConnectionRecord, ConnectionsAffordance, SourceProfile
from linkedin_relay.models.profile import EducationEntry, ExperienceEntry, ProfileRecord, SkillEntry
from linkedin_relay.models.session import SessionResult, SessionState, SessionStatus

__all__ = [
    "ConnectionRecord",
    "ConnectionsAffordance",
    "DeliveryMode",
    "EducationEntry",
    "EndpointConfig",
    "ExperienceEntry",
    "ProfileRecord",
    "RelayConfig",
    "SessionResult",
    "SessionState",
    "SessionStatus",
    "SkillEntry",
    "SourceProfile",
]
