"""Block builder: collects bids for broadcast intents and settles the winners."""

from __future__ import annotations

import dataclasses
import logging
import threading
from datetime import datetime
from typing import Any, Callable, Optional, Protocol

from pin_intent.block_builder.matching_engine import MatchingEngine
from pin_intent.block_builder.types import (
    Bid,
    BlockBuilderMetrics,
    BlockBuilderStatus,
    BuilderConfig,
    BuilderState,
    IntentSession,
    MatchOutcome,
    MatchStatus,
    SessionState,
    default_builder_config,
)
from pin_intent.common.constants import TOPIC_INTENT_BROADCAST
from pin_intent.common.types import Intent

_log = logging.getLogger(__name__)

MESSAGE_TYPE_INTENT_BROADCAST = "intent_broadcast"

MATCHING_INTERVAL = 10.0
CLEANUP_INTERVAL = 60.0
METRICS_INTERVAL = 30.0


class BuilderTransport(Protocol):
    """What the block builder needs from the messaging layer."""

    def subscribe(self, topic: str, handler: Callable[[str, bytes], None]) -> Any: ...

    def subscribe_to_bids(self, handler: Callable[[Bid], None]) -> Any: ...

    def publish_match_result(self, outcome: MatchOutcome) -> None: ...

    def connected_peer_count(self) -> int: ...


def _now_ms() -> int:
    return int(datetime.now().timestamp() * 1000)


class BlockBuilder:
    """Opens a bidding session for each broadcast intent, collects bids and
    publishes the winner once the collection window closes."""

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        transport: Optional[BuilderTransport] = None,
        engine: Optional[MatchingEngine] = None,
    ) -> None:
        self.config = config if config is not None else default_builder_config()
        self.transport = transport
        self.engine = engine if engine is not None else MatchingEngine(self.config)
        self._lock = threading.Lock()
        self._running = False
        self._active: dict[str, IntentSession] = {}
        self._completed: dict[str, MatchOutcome] = {}
        self._status = BlockBuilderStatus(builder_id=self.config.builder_id)
        self._metrics = BlockBuilderMetrics()
        self._stop_event: Optional[threading.Event] = None
        self._workers: list[threading.Thread] = []

    def start(self) -> None:
        """Subscribe to intents and bids and start the periodic background tasks.

        Raises RuntimeError if already running or if a subscription fails.
        """
        with self._lock:
            if self._running:
                raise RuntimeError("block builder already running")
            if self.transport is None:
                raise RuntimeError("block builder has no transport")
            try:
                self.transport.subscribe(TOPIC_INTENT_BROADCAST, self.handle_intent_broadcast)
            except Exception as exc:
                raise RuntimeError(f"failed to subscribe to intent broadcasts: {exc}") from exc
            try:
                self.transport.subscribe_to_bids(self.handle_bid_submission)
            except Exception as exc:
                raise RuntimeError(f"failed to subscribe to bid submissions: {exc}") from exc

            stop_event = threading.Event()
            self._stop_event = stop_event
            self._workers = [
                self._spawn(stop_event, MATCHING_INTERVAL, self.process_ready_sessions),
                self._spawn(stop_event, CLEANUP_INTERVAL, self.cleanup_expired),
                self._spawn(stop_event, METRICS_INTERVAL, self.update_metrics),
            ]
            self._running = True
            self._status.status = BuilderState.ACTIVE
            self._status.last_activity = datetime.now()

        _log.info(
            "Block builder %s started with %s matching",
            self.config.builder_id,
            self.config.matching_algorithm,
        )

    @staticmethod
    def _spawn(stop_event: threading.Event, interval: float, task: Callable[[], None]) -> threading.Thread:
        def loop() -> None:
            while not stop_event.wait(interval):
                try:
                    task()
                except Exception:
                    _log.exception("Background task %s failed", task.__name__)

        thread = threading.Thread(target=loop, daemon=True)
        thread.start()
        return thread

    def stop(self) -> None:
        """Stop the builder and its background tasks; RuntimeError if not running."""
        with self._lock:
            if not self._running:
                raise RuntimeError("block builder not running")
            self._running = False
            self._status.status = BuilderState.OFFLINE
            self._status.last_activity = datetime.now()
            stop_event, workers = self._stop_event, self._workers
            self._stop_event, self._workers = None, []
        if stop_event is not None:
            stop_event.set()
        for worker in workers:
            worker.join(timeout=5)
        _log.info("Block builder stopped")

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def status(self) -> BlockBuilderStatus:
        """Return a copy of the current status, with the connected peer count refreshed."""
        peers = self.transport.connected_peer_count() if self.transport is not None else None
        with self._lock:
            if peers is not None:
                self._status.connected_peers = peers
            return dataclasses.replace(self._status)

    def metrics(self) -> BlockBuilderMetrics:
        """Return a copy of the current metrics."""
        with self._lock:
            return dataclasses.replace(self._metrics)

    def handle_intent_broadcast(self, message_type: str, payload: bytes) -> None:
        """Open a bidding session for a broadcast intent.

        Messages of other types are ignored; a payload that is not an intent raises ValueError.
        """
        if message_type != MESSAGE_TYPE_INTENT_BROADCAST:
            return
        try:
            intent = Intent.from_json(payload)
        except (ValueError, TypeError) as exc:
            _log.error("Failed to deserialize intent: %s", exc)
            raise ValueError(f"failed to deserialize intent: {exc}") from exc

        _log.info("Received intent broadcast %s of type %s", intent.id, intent.type)
        with self._lock:
            if intent.id in self._active:
                _log.debug("Intent session %s already exists", intent.id)
                return
            self._active[intent.id] = IntentSession.open(intent, self.config.bid_collection_window)
            self._metrics.sessions_created += 1
            self._status.active_sessions = len(self._active)
            self._status.last_activity = datetime.now()
        _log.info(
            "Intent session %s created, collecting bids for %s",
            intent.id,
            self.config.bid_collection_window,
        )

    def handle_bid_submission(self, bid: Bid) -> None:
        """Add a bid to its intent's session; a repeat bid from an agent replaces its earlier one."""
        _log.info(
            "Received bid from %s for intent %s: %s", bid.agent_id, bid.intent_id, bid.bid_amount
        )
        with self._lock:
            session = self._active.get(bid.intent_id)
            if session is None:
                _log.warning("Bid from %s for unknown intent %s", bid.agent_id, bid.intent_id)
                return
            if session.status is not SessionState.COLLECTING:
                _log.warning(
                    "Bid for intent %s whose session is %s", bid.intent_id, session.status
                )
                return
            existing = session.find_bid(bid.agent_id)
            if existing is not None:
                existing.bid_amount = bid.bid_amount
                existing.timestamp = bid.timestamp
                return
            session.bids.append(bid)
            self._metrics.bids_received += 1
            self._status.total_bids_received += 1
            self._status.last_activity = datetime.now()
            total = len(session.bids)
        _log.info("Bid added to session %s, %d bids in total", bid.intent_id, total)

    def process_ready_sessions(self) -> None:
        """Match every session whose collection window has closed."""
        now = datetime.now()
        with self._lock:
            ready = [s for s in self._active.values() if s.ready_for_matching(now)]
            for session in ready:
                session.status = SessionState.MATCHING
        for session in ready:
            self._match_session(session)

    def _match_session(self, session: IntentSession) -> None:
        intent_id = session.intent.id
        if len(session.bids) < self.config.min_bids_required:
            _log.info(
                "Insufficient bids for intent %s: %d of %d",
                intent_id,
                len(session.bids),
                self.config.min_bids_required,
            )
            self._expire(session, MatchStatus.NO_MATCH, {"reason": "insufficient_bids"})
            return

        try:
            outcome = self.engine.find_best_match(session.intent, session.bids)
        except ValueError as exc:
            _log.error("Matching failed for intent %s: %s", intent_id, exc)
            self._expire(session, MatchStatus.MATCH_FAILED, {"error": str(exc)})
            return

        with self._lock:
            session.status = SessionState.COMPLETED
            session.match_result = outcome
            self._completed[intent_id] = outcome
            self._active.pop(intent_id, None)
            self._status.active_sessions = len(self._active)
            self._status.completed_matches += 1
            self._metrics.sessions_completed += 1
            self._metrics.matches_completed += 1

        self._broadcast(outcome)
        _log.info(
            "Matching completed for intent %s: agent %s won with %s",
            intent_id,
            outcome.winning_agent,
            outcome.winning_bid,
        )

    def _expire(self, session: IntentSession, status: MatchStatus, metadata: dict[str, str]) -> None:
        outcome = MatchOutcome(
            intent_id=session.intent.id,
            status=status,
            total_bids=len(session.bids),
            matched_at=_now_ms(),
            block_builder_id=self.config.builder_id,
            metadata=metadata,
        )
        with self._lock:
            session.status = SessionState.EXPIRED
            session.match_result = outcome
            self._metrics.sessions_expired += 1

    def _broadcast(self, outcome: MatchOutcome) -> None:
        if self.transport is None:
            return
        try:
            self.transport.publish_match_result(outcome)
        except Exception:
            _log.exception("Failed to broadcast match result for intent %s", outcome.intent_id)
        else:
            _log.info("Match result for intent %s broadcast", outcome.intent_id)

    def cleanup_expired(self) -> None:
        """Drop collecting sessions that outlived their window by more than the grace period."""
        now = datetime.now()
        with self._lock:
            stale = [key for key, s in self._active.items() if s.is_stale(now)]
            for key in stale:
                del self._active[key]
            self._status.active_sessions = len(self._active)
        if stale:
            _log.info("Cleaned up %d expired sessions", len(stale))

    def update_metrics(self) -> None:
        """Refresh the metrics timestamp and derive the builder state from its load."""
        with self._lock:
            self._metrics.last_updated = datetime.now()
            if len(self._active) >= self.config.max_concurrent_intents:
                self._status.status = BuilderState.BUSY
            elif self._running:
                self._status.status = BuilderState.ACTIVE
            else:
                self._status.status = BuilderState.OFFLINE

    def active_intents(self) -> dict[str, IntentSession]:
        """Return the open sessions keyed by intent ID."""
        with self._lock:
            return dict(self._active)

    def completed_matches(self) -> dict[str, MatchOutcome]:
        """Return the completed matches keyed by intent ID."""
        with self._lock:
            return dict(self._completed)