import re
from datetime import timedelta

import pytest

from pin_intent.common import constants as c
from pin_intent.common.types import IntentStatus, MatchType
from pin_intent.common.utils import (
    chunk,
    format_duration,
    generate_intent_id,
    generate_peer_id,
    generate_session_id,
    is_expired,
    is_valid_intent_type,
    is_valid_payload_size,
    is_valid_priority,
    is_valid_ttl,
    match_type_from_string,
    merge_maps,
    parse_duration,
    remove_duplicates,
    status_from_string,
    truncate_string,
)


def test_truncate_short_string_unchanged():
    assert truncate_string("hello", 10) == "hello"
    assert truncate_string("hello", 5) == "hello"


def test_truncate_long_string_marked():
    assert truncate_string("hello world", 5) == "hello..."


def test_truncate_negative_length_rejected():
    with pytest.raises(ValueError):
        truncate_string("abc", -1)


def test_remove_duplicates_keeps_first_order():
    assert remove_duplicates(["a", "b", "a", "c", "b"]) == ["a", "b", "c"]
    assert remove_duplicates([]) == []


def test_is_expired_zero_ttl_never_expires():
    assert is_expired(100, 0, now=10**12) is False
    assert is_expired(100, -5, now=10**12) is False


def test_is_expired_boundary():
    assert is_expired(100, 50, now=150) is False
    assert is_expired(100, 50, now=151) is True


def test_is_expired_uses_current_time():
    assert is_expired(0, 1) is True


def test_format_duration_units():
    assert format_duration(timedelta(milliseconds=500)) == "500.00ms"
    assert format_duration(timedelta(seconds=1.5)) == "1.50s"
    assert format_duration(timedelta(hours=2)) == "2.00h"
    assert format_duration(timedelta(seconds=90)).endswith("m")
    assert not format_duration(timedelta(seconds=90)).endswith("ms")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5s", timedelta(seconds=1.5)),
        ("-2m", -timedelta(minutes=2)),
        ("+300ms", timedelta(milliseconds=300)),
        ("250us", timedelta(microseconds=250)),
        ("0", timedelta(0)),
        (".5h", timedelta(minutes=30)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "5", "3d", "abc", "1h-2m", "-", "."])
def test_parse_duration_rejects_bad_input(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_parse_format_round_trip_seconds():
    assert format_duration(parse_duration("1.5s")) == format_duration(
        timedelta(seconds=1.5)
    )


def test_intent_types():
    assert all(is_valid_intent_type(t) for t in c.ALL_INTENT_TYPES)
    assert is_valid_intent_type("unknown") is False
    assert is_valid_intent_type("") is False


def test_priority_bounds():
    assert is_valid_priority(c.PRIORITY_LOW) is True
    assert is_valid_priority(c.PRIORITY_URGENT) is True
    assert is_valid_priority(c.PRIORITY_LOW - 1) is False
    assert is_valid_priority(c.PRIORITY_URGENT + 1) is False


def test_ttl_bounds():
    max_ttl = int(c.DEFAULT_MAX_TTL.total_seconds())
    assert is_valid_ttl(max_ttl) is True
    assert is_valid_ttl(max_ttl + 1) is False
    assert is_valid_ttl(0) is False


def test_payload_size_bounds():
    assert is_valid_payload_size(c.DEFAULT_MAX_PAYLOAD_SIZE) is True
    assert is_valid_payload_size(c.DEFAULT_MAX_PAYLOAD_SIZE + 1) is False
    assert is_valid_payload_size(0) is False


@pytest.mark.parametrize(
    "status", [s for s in IntentStatus if s is not IntentStatus.RECEIVED]
)
def test_status_round_trip(status):
    assert status_from_string(str(status)) is status
    assert status_from_string(str(status).upper()) is status


def test_status_unknown_defaults_to_created():
    assert status_from_string("received") is IntentStatus.CREATED
    assert status_from_string("bogus") is IntentStatus.CREATED


@pytest.mark.parametrize("match_type", list(MatchType))
def test_match_type_round_trip(match_type):
    assert match_type_from_string(str(match_type)) is match_type


def test_match_type_unknown_defaults_to_partial():
    assert match_type_from_string("bogus") is MatchType.PARTIAL


def test_chunk_splits_in_order():
    items = list("abcde")
    chunks = chunk(items, 2)
    assert chunks == [["a", "b"], ["c", "d"], ["e"]]
    assert [x for part in chunks for x in part] == items
    assert all(len(part) <= 2 for part in chunks)


def test_chunk_non_positive_size_gives_one_list():
    assert chunk(["a", "b"], 0) == [["a", "b"]]
    assert chunk(["a", "b"], -3) == [["a", "b"]]


def test_chunk_empty():
    assert chunk([], 3) == []


def test_merge_maps_later_wins():
    first = {"a": "1", "b": "2"}
    second = {"b": "3", "c": "4"}
    merged = merge_maps(first, second)
    assert merged == {"a": "1", "b": "3", "c": "4"}
    assert first == {"a": "1", "b": "2"}
    assert merge_maps() == {}


@pytest.mark.parametrize(
    "generator, prefix",
    [
        (generate_intent_id, "intent"),
        (generate_peer_id, "peer"),
        (generate_session_id, "session"),
    ],
)
def test_generated_ids_have_shape_and_are_unique(generator, prefix):
    ids = {generator() for _ in range(50)}
    assert len(ids) == 50
    pattern = re.compile(rf"{prefix}_\d+_[A-Za-z0-9]{{8}}")
    assert all(pattern.fullmatch(i) for i in ids)