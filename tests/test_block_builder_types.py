from datetime import datetime, timedelta

import pytest

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
from pin_intent.common.types import Intent

NOW = datetime(2024, 1, 1, 12, 0, 0)


def test_default_builder_config_values():
    config = default_builder_config()
    assert config.matching_algorithm == "highest_bid"
    assert config.settlement_mode == "simulated"
    assert config.bid_collection_window == timedelta(seconds=30)
    assert config.max_concurrent_intents == 100
    assert config.min_bids_required == 1
    assert config.builder_id == ""


def test_default_builder_config_is_fresh_each_call():
    first = default_builder_config()
    first.min_bids_required = 7
    assert default_builder_config().min_bids_required == 1
    assert default_builder_config() == BuilderConfig()


@pytest.mark.parametrize(
    "member, text",
    [
        (SessionState.COLLECTING, "collecting"),
        (SessionState.EXPIRED, "expired"),
        (MatchStatus.NO_MATCH, "no_match"),
        (MatchStatus.MATCH_FAILED, "match_failed"),
        (BuilderState.BUSY, "busy"),
        (BuilderState.OFFLINE, "offline"),
    ],
)
def test_enum_text(member, text):
    assert str(member) == text
    assert type(member)(text) is member


def test_bid_round_trip():
    bid = Bid(
        intent_id="intent-1",
        agent_id="agent-a",
        bid_amount="12.5",
        timestamp=1700000000000,
        agent_type="trading",
    )
    assert Bid.from_dict(bid.to_dict()) == bid


def test_bid_from_empty_dict_defaults():
    assert Bid.from_dict({}) == Bid()


def test_match_outcome_round_trip():
    outcome = MatchOutcome(
        intent_id="intent-1",
        status=MatchStatus.MATCHED,
        winning_agent="agent-a",
        winning_bid="12.5",
        total_bids=3,
        matched_at=1700000000000,
        block_builder_id="builder-1",
        metadata={"algorithm": "highest_bid"},
    )
    data = outcome.to_dict()
    assert data["status"] == "matched"
    assert MatchOutcome.from_dict(data) == outcome


def test_match_outcome_bad_status_rejected():
    with pytest.raises(ValueError):
        MatchOutcome.from_dict({"status": "bogus"})


def test_session_open_spans_window():
    window = timedelta(seconds=30)
    session = IntentSession.open(Intent(id="intent-1"), window, now=NOW)
    assert session.end_time - session.start_time == window
    assert session.status is SessionState.COLLECTING
    assert session.bids == []
    assert session.match_result is None


def test_session_ready_for_matching():
    session = IntentSession.open(Intent(id="i"), timedelta(seconds=10), now=NOW)
    assert session.ready_for_matching(NOW + timedelta(seconds=10)) is False
    assert session.ready_for_matching(NOW + timedelta(seconds=11)) is True
    session.status = SessionState.MATCHING
    assert session.ready_for_matching(NOW + timedelta(seconds=11)) is False


def test_session_stale_after_grace():
    session = IntentSession.open(Intent(id="i"), timedelta(seconds=10), now=NOW)
    end = session.end_time
    assert session.is_stale(end + timedelta(minutes=5)) is False
    assert session.is_stale(end + timedelta(minutes=5, seconds=1)) is True
    session.status = SessionState.COMPLETED
    assert session.is_stale(end + timedelta(hours=1)) is False


def test_session_find_bid():
    session = IntentSession.open(Intent(id="i"), timedelta(seconds=10), now=NOW)
    bid = Bid(intent_id="i", agent_id="agent-a", bid_amount="1")
    session.bids.append(bid)
    assert session.find_bid("agent-a") is bid
    assert session.find_bid("agent-b") is None


def test_status_defaults_and_dict():
    status = BlockBuilderStatus(builder_id="builder-1", last_activity=NOW)
    assert status.status is BuilderState.OFFLINE
    data = status.to_dict()
    assert data["status"] == "offline"
    assert data["builder_id"] == "builder-1"
    assert datetime.fromisoformat(data["last_activity"]) == NOW


def test_metrics_defaults_and_dict():
    metrics = BlockBuilderMetrics(last_updated=NOW)
    data = metrics.to_dict()
    assert data["sessions_created"] == 0
    assert data["average_session_time"] == 0.0
    assert datetime.fromisoformat(data["last_updated"]) == NOW