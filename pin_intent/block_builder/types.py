"""Data types used by the block builder: bids, sessions, outcomes and status."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional

from pin_intent.common.types import Intent

STALE_SESSION_GRACE = timedelta(minutes=5)


class SessionState(str, Enum):
    """Stage an intent session is in."""

    COLLECTING = "collecting"
    MATCHING = "matching"
    COMPLETED = "completed"
    EXPIRED = "expired"

    def __str__(self) -> str:
        return self.value


class MatchStatus(str, Enum):
    """Result of trying to match an intent with its bids."""

    MATCHED = "matched"
    NO_MATCH = "no_match"
    MATCH_FAILED = "match_failed"

    def __str__(self) -> str:
        return self.value


class BuilderState(str, Enum):
    """Operating state of a block builder."""

    ACTIVE = "active"
    BUSY = "busy"
    OFFLINE = "offline"

    def __str__(self) -> str:
        return self.value


@dataclass
class BuilderConfig:
    """Block builder settings.

    matching_algorithm is "highest_bid", "reputation_weighted" or "random";
    settlement_mode is "simulated" or "blockchain".
    """

    builder_id: str = ""
    matching_algorithm: str = "highest_bid"
    settlement_mode: str = "simulated"
    bid_collection_window: timedelta = timedelta(seconds=30)
    max_concurrent_intents: int = 100
    min_bids_required: int = 1


def default_builder_config() -> BuilderConfig:
    """Return a fresh default block builder configuration."""
    return BuilderConfig()


@dataclass
class Bid:
    """A bid submitted by an agent for an intent."""

    intent_id: str = ""
    agent_id: str = ""
    bid_amount: str = ""
    timestamp: int = 0
    agent_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "intent_id": self.intent_id,
            "agent_id": self.agent_id,
            "bid_amount": self.bid_amount,
            "timestamp": self.timestamp,
            "agent_type": self.agent_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bid":
        return cls(
            intent_id=data.get("intent_id", ""),
            agent_id=data.get("agent_id", ""),
            bid_amount=data.get("bid_amount", ""),
            timestamp=int(data.get("timestamp", 0)),
            agent_type=data.get("agent_type", ""),
        )


@dataclass
class MatchOutcome:
    """The winner chosen for an intent, or why none was chosen."""

    intent_id: str = ""
    status: MatchStatus = MatchStatus.NO_MATCH
    winning_agent: str = ""
    winning_bid: str = ""
    total_bids: int = 0
    matched_at: int = 0
    block_builder_id: str = ""
    metadata: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "intent_id": self.intent_id,
            "status": self.status.value,
            "winning_agent": self.winning_agent,
            "winning_bid": self.winning_bid,
            "total_bids": self.total_bids,
            "matched_at": self.matched_at,
            "block_builder_id": self.block_builder_id,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchOutcome":
        return cls(
            intent_id=data.get("intent_id", ""),
            status=MatchStatus(data.get("status", MatchStatus.NO_MATCH.value)),
            winning_agent=data.get("winning_agent", ""),
            winning_bid=data.get("winning_bid", ""),
            total_bids=int(data.get("total_bids", 0)),
            matched_at=int(data.get("matched_at", 0)),
            block_builder_id=data.get("block_builder_id", ""),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass
class IntentSession:
    """An intent together with the bids collected for it."""

    intent: Intent
    start_time: datetime
    end_time: datetime
    bids: list[Bid] = field(default_factory=list)
    status: SessionState = SessionState.COLLECTING
    match_result: Optional[MatchOutcome] = None

    @classmethod
    def open(
        cls, intent: Intent, window: timedelta, now: Optional[datetime] = None
    ) -> "IntentSession":
        """Start collecting bids for intent for the given window."""
        start = datetime.now() if now is None else now
        return cls(intent=intent, start_time=start, end_time=start + window)

    def find_bid(self, agent_id: str) -> Optional[Bid]:
        """Return the bid already placed by agent_id, if any."""
        return next((bid for bid in self.bids if bid.agent_id == agent_id), None)

    def ready_for_matching(self, now: datetime) -> bool:
        """Tell whether collection is over and matching may begin."""
        return self.status is SessionState.COLLECTING and now > self.end_time

    def is_stale(self, now: datetime, grace: timedelta = STALE_SESSION_GRACE) -> bool:
        """Tell whether a collecting session has outlived its window by more than grace."""
        return self.status is SessionState.COLLECTING and now > self.end_time + grace


@dataclass
class BlockBuilderStatus:
    """Current state of a block builder."""

    builder_id: str = ""
    status: BuilderState = BuilderState.OFFLINE
    active_sessions: int = 0
    completed_matches: int = 0
    total_bids_received: int = 0
    last_activity: datetime = field(default_factory=datetime.now)
    connected_peers: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "builder_id": self.builder_id,
            "status": self.status.value,
            "active_sessions": self.active_sessions,
            "completed_matches": self.completed_matches,
            "total_bids_received": self.total_bids_received,
            "last_activity": self.last_activity.isoformat(),
            "connected_peers": self.connected_peers,
        }


@dataclass
class BlockBuilderMetrics:
    """Counters and timings of a block builder."""

    sessions_created: int = 0
    sessions_completed: int = 0
    sessions_expired: int = 0
    bids_received: int = 0
    matches_completed: int = 0
    average_session_time: timedelta = timedelta(0)
    average_response_time: timedelta = timedelta(0)
    last_updated: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessions_created": self.sessions_created,
            "sessions_completed": self.sessions_completed,
            "sessions_expired": self.sessions_expired,
            "bids_received": self.bids_received,
            "matches_completed": self.matches_completed,
            "average_session_time": self.average_session_time.total_seconds(),
            "average_response_time": self.average_response_time.total_seconds(),
            "last_updated": self.last_updated.isoformat(),
        }