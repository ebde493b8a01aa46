# ABOUTME: Pacing package: randomized delays, human-like scrolling and block detection.
# ABOUTME: Exports PacingPolicy and the BlockSignal it reports.

from linkedin_relay.pacing.policy import BlockSignal, PacingPolicy

__all__ = ["BlockSignal", "PacingPolicy"]
