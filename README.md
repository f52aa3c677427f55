# pin_intent

Building blocks for a network in which participants broadcast *intents*
(requests for work such as trades, transfers or data access) and agents bid
to fulfil them. The package is a library; it has no dependencies outside the
standard library.

## What is in it

- `pin_intent.common.types`: the `Intent` dataclass and its companions
  (`Tag`, `IntentManifest`, `IntentStatus`, `MatchType`, `MatchResult`,
  request and response records, `NetworkTopology`, `NetworkEvent`,
  `ProcessingStatus`). `Intent.to_dict` / `Intent.from_dict` and
  `Intent.to_json` / `Intent.from_json` round-trip an intent; byte fields are
  base64-encoded and empty optional fields are left out.
- `pin_intent.common.errors`: `IntentError` and its subclasses
  `ValidationError`, `SecurityError`, `NetworkError` and `ProcessingError`,
  each carrying an `ErrorCode`; `is_intent_error`, `get_error_code` (which
  gives `"UNKNOWN_ERROR"` for any other exception) and `wrap_error`.
- `pin_intent.common.validators`: `ManifestValidator` for manifest length
  and emptiness rules, `TagValidator` for tag names (2 to 64 letters, digits,
  `_` or `-`), non-negative integer fees, duplicate detection and fee totals,
  and `StaticPolicyProvider`, which reports every tag as tradable at a fixed
  fee (`"10000"` by default).
- `pin_intent.common.config`: `BusinessConfig` and its sections, with
  `default_config()`, `validate()` (raises `IntentError` with code
  `INVALID_CONFIGURATION`), `merge()` and `clone()`.
- `pin_intent.common.metrics`: thread-safe `BusinessMetrics` with named
  counters (`increment("intents_created")` and so on), exponential moving
  averages for latencies and matching accuracy, success rates, throughput,
  `snapshot()` and `reset()`; and `PrometheusMetrics`, holding counters,
  gauges and histograms capped at the last 1000 observations, summarised by
  `collect()`.
- `pin_intent.common.utils`: `parse_duration` and `format_duration`,
  `is_expired`, validity checks for intent types, priorities, TTLs and
  payload sizes, `status_from_string`, `match_type_from_string`, `chunk`,
  `merge_maps`, `remove_duplicates`, `truncate_string`, and
  `generate_intent_id` / `generate_peer_id` / `generate_session_id`.
- `pin_intent.common.constants`: intent types, priorities, topic names and
  configuration defaults.
- `pin_intent.business`: `BusinessLogic`, which holds the intent manager,
  validator, signer, processor, matcher and network manager, calls `start()`
  and `stop()` on those that have them, and reports `health_status()`.
- `pin_intent.block_builder.types`: `BuilderConfig`, `Bid`, `MatchOutcome`,
  `IntentSession`, `BlockBuilderStatus`, `BlockBuilderMetrics` and the
  `SessionState`, `MatchStatus` and `BuilderState` enums.
- `pin_intent.block_builder.matching_engine`: `MatchingEngine`, which picks a
  winning bid with the `highest_bid` (default), `reputation_weighted` or
  `random` algorithm. A random generator can be passed in for repeatable
  results.
- `pin_intent.block_builder.builder`: `BlockBuilder`, which opens a
  bid-collection session for each broadcast intent, collects bids (a second
  bid from the same agent replaces the first) and, once the collection window
  has closed, matches the session and publishes the outcome.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from pin_intent.common.types import Intent, Tag
from pin_intent.common.validators import TagValidator, StaticPolicyProvider

intent = Intent(id="intent-1", type="trade", payload=b"buy 10", sender_id="peer-a")
restored = Intent.from_json(intent.to_json())
assert restored == intent

validator = TagValidator(StaticPolicyProvider())
tags = [Tag(tag_name="market_data", tag_fee="10000"), Tag(tag_name="news", tag_fee="500")]
validator.validate_tags(tags)
print(validator.calculate_total_tag_fee(tags))  # "10500"
```

Matching bids directly:

```python
from pin_intent.block_builder.types import Bid, default_builder_config
from pin_intent.block_builder.matching_engine import MatchingEngine

engine = MatchingEngine(default_builder_config())
result = engine.find_best_match(intent, [
    Bid(intent_id="intent-1", agent_id="agent-1", bid_amount="12.5"),
    Bid(intent_id="intent-1", agent_id="agent-2", bid_amount="20"),
])
print(result.winning_agent)  # "agent-2"
```

## Using the block builder

`BlockBuilder(config, transport, engine)` needs a transport object with four
methods: `subscribe(topic, handler)`, `subscribe_to_bids(handler)`,
`publish_match_result(outcome)` and `connected_peer_count()`. On `start()`
it subscribes to the `intent.broadcast` topic and to bids, and starts
background threads that match ready sessions every 10 seconds, drop sessions
left collecting more than five minutes past their window every 60 seconds,
and refresh its metrics every 30 seconds. Intent messages reach
`handle_intent_broadcast(message_type, payload)`; only the type
`"intent_broadcast"` is handled, with a JSON intent as payload. Bids reach
`handle_bid_submission(bid)`. The same steps can be driven by hand through
`process_ready_sessions()`, `cleanup_expired()` and `update_metrics()`.

## What it does not do

The package contains no networking: it has no peer-to-peer host, no
publish/subscribe transport, and no gRPC or HTTP server. The block builder
works only with a transport you supply. There is no command-line program,
no storage of intents, and no intent manager, signer, processor or network
manager implementation; `BusinessLogic` only holds and drives components
you provide.

Errors are raised as exceptions derived from `IntentError`; each carries a
`code` that `get_error_code` returns. The matching engine and the block
builder raise `ValueError` and `RuntimeError` where they cannot proceed.