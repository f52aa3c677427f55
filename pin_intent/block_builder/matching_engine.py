"""Choosing the winning bid for an intent."""

from __future__ import annotations

import logging
import math
import random
import time
from typing import Optional, Sequence

from pin_intent.block_builder.types import (
    Bid,
    BuilderConfig,
    MatchOutcome,
    MatchStatus,
    default_builder_config,
)
from pin_intent.common.types import Intent

_log = logging.getLogger(__name__)

ALGORITHM_HIGHEST_BID = "highest_bid"
ALGORITHM_REPUTATION_WEIGHTED = "reputation_weighted"
ALGORITHM_RANDOM = "random"

_BASE_REPUTATION = {
    "trading": 1.2,
    "data_access": 1.1,
    "computation": 1.0,
}
_DEFAULT_REPUTATION = 0.9
_REPUTATION_SPREAD = 0.2
_MIN_REPUTATION = 0.1
_MAX_REPUTATION = 2.0


def parse_bid_amount(text: str) -> float:
    """Parse a bid amount as a float; raise ValueError if it is malformed."""
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"invalid bid amount: {text!r}")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise ValueError(f"bid amount out of range: {text!r}")
    return value


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class MatchingEngine:
    """Picks a winning bid with the algorithm named in the builder config."""

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config if config is not None else default_builder_config()
        self.rng = rng if rng is not None else random.Random()

    def find_best_match(self, intent: Intent, bids: Sequence[Bid]) -> MatchOutcome:
        """Return the outcome naming the winning bid.

        Raises ValueError when there are no bids or none can be used.
        """
        if not bids:
            raise ValueError("no bids available for matching")

        algorithm = self.config.matching_algorithm
        _log.info(
            "Finding best match for intent %s among %d bids using %s",
            intent.id,
            len(bids),
            algorithm,
        )

        try:
            if algorithm == ALGORITHM_REPUTATION_WEIGHTED:
                winner = self._reputation_weighted(bids)
            elif algorithm == ALGORITHM_RANDOM:
                winner = self._random(bids)
            else:
                winner = self._highest(bids)
        except ValueError as exc:
            raise ValueError(f"matching algorithm failed: {exc}") from exc

        outcome = MatchOutcome(
            intent_id=intent.id,
            status=MatchStatus.MATCHED,
            winning_agent=winner.agent_id,
            winning_bid=winner.bid_amount,
            total_bids=len(bids),
            matched_at=_now_ms(),
            block_builder_id=self.config.builder_id,
            metadata={
                "algorithm": algorithm,
                "agent_type": winner.agent_type,
                "intent_type": intent.type,
            },
        )
        _log.info(
            "Match found for intent %s: agent %s with bid %s",
            intent.id,
            outcome.winning_agent,
            outcome.winning_bid,
        )
        return outcome

    def reputation(self, agent_type: str) -> float:
        """Estimate an agent's reputation from its type, with a little random spread."""
        base = _BASE_REPUTATION.get(agent_type, _DEFAULT_REPUTATION)
        variation = (self.rng.random() - 0.5) * _REPUTATION_SPREAD
        return min(max(base + variation, _MIN_REPUTATION), _MAX_REPUTATION)

    @staticmethod
    def _priced(bids: Sequence[Bid], warn: bool = False) -> list[tuple[Bid, float]]:
        priced = []
        for bid in bids:
            try:
                priced.append((bid, parse_bid_amount(bid.bid_amount)))
            except ValueError:
                if warn:
                    _log.warning(
                        "Invalid bid amount format from agent %s: %r",
                        bid.agent_id,
                        bid.bid_amount,
                    )
        return priced

    def _highest(self, bids: Sequence[Bid]) -> Bid:
        candidates = [(bid, amount) for bid, amount in self._priced(bids, warn=True) if amount > -1]
        if not candidates:
            raise ValueError("no valid bids found")
        return max(candidates, key=lambda pair: pair[1])[0]

    def _reputation_weighted(self, bids: Sequence[Bid]) -> Bid:
        scored = [
            (bid, amount * self.reputation(bid.agent_type))
            for bid, amount in self._priced(bids)
        ]
        if not scored:
            raise ValueError("no valid weighted bids found")
        return max(scored, key=lambda pair: pair[1])[0]

    def _random(self, bids: Sequence[Bid]) -> Bid:
        valid = [bid for bid, _ in self._priced(bids)]
        if not valid:
            raise ValueError("no valid bids found")
        return self.rng.choice(valid)