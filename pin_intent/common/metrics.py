"""Counters, rates and moving averages for the business logic layer."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta
from typing import Any

_ZERO = timedelta(0)
_EMA_KEEP = 0.9
_EMA_NEW = 0.1
_HISTOGRAM_LIMIT = 1000

_COUNTERS = (
    "intents_created",
    "intents_processed",
    "intents_matched",
    "intents_failed",
    "intents_expired",
    "validation_errors",
    "validation_success",
    "signature_failures",
    "signature_success",
    "matching_attempts",
    "matching_success",
    "messages_sent",
    "messages_received",
    "processing_stages",
    "pipeline_executions",
    "handler_executions",
)


@dataclass(frozen=True)
class BusinessMetricsSnapshot:
    """A point-in-time copy of the business metrics."""

    intents_created: int
    intents_processed: int
    intents_matched: int
    intents_failed: int
    intents_expired: int
    processing_latency: timedelta
    validation_errors: int
    validation_success: int
    signature_failures: int
    signature_success: int
    matching_accuracy: float
    matching_attempts: int
    matching_success: int
    network_peers: int
    messages_sent: int
    messages_received: int
    network_latency: timedelta
    processing_stages: int
    pipeline_executions: int
    handler_executions: int
    timestamp: datetime


def _ratio(part: int, total: int) -> float:
    return part / total if total else 0.0


@dataclass
class BusinessMetrics:
    """Thread-safe metrics for intents, validation, signing, matching and networking."""

    intents_created: int = 0
    intents_processed: int = 0
    intents_matched: int = 0
    intents_failed: int = 0
    intents_expired: int = 0
    processing_latency: timedelta = _ZERO
    validation_errors: int = 0
    validation_success: int = 0
    signature_failures: int = 0
    signature_success: int = 0
    matching_accuracy: float = 0.0
    matching_attempts: int = 0
    matching_success: int = 0
    network_peers: int = 0
    messages_sent: int = 0
    messages_received: int = 0
    network_latency: timedelta = _ZERO
    processing_stages: int = 0
    pipeline_executions: int = 0
    handler_executions: int = 0
    _lock: Any = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def increment(self, name: str) -> None:
        """Add one to the named counter, e.g. "intents_created".

        Raises ValueError for a name that is not a counter.
        """
        if name not in _COUNTERS:
            raise ValueError(f"unknown counter: {name!r}")
        with self._lock:
            setattr(self, name, getattr(self, name) + 1)

    def update_processing_latency(self, latency: timedelta) -> None:
        """Fold a latency sample into the processing latency moving average."""
        with self._lock:
            self.processing_latency = self._average(self.processing_latency, latency)

    def update_network_latency(self, latency: timedelta) -> None:
        """Fold a latency sample into the network latency moving average."""
        with self._lock:
            self.network_latency = self._average(self.network_latency, latency)

    def update_matching_accuracy(self, accuracy: float) -> None:
        """Fold an accuracy sample into the matching accuracy moving average."""
        with self._lock:
            if self.matching_accuracy == 0:
                self.matching_accuracy = accuracy
            else:
                self.matching_accuracy = (
                    self.matching_accuracy * _EMA_KEEP + accuracy * _EMA_NEW
                )

    @staticmethod
    def _average(current: timedelta, sample: timedelta) -> timedelta:
        if current == _ZERO:
            return sample
        return current * _EMA_KEEP + sample * _EMA_NEW

    def set_network_peers(self, count: int) -> None:
        """Record the number of connected peers."""
        with self._lock:
            self.network_peers = count

    def validation_success_rate(self) -> float:
        """Share of validations that succeeded; 0.0 when none ran."""
        with self._lock:
            return _ratio(
                self.validation_success,
                self.validation_success + self.validation_errors,
            )

    def signature_success_rate(self) -> float:
        """Share of signature checks that succeeded; 0.0 when none ran."""
        with self._lock:
            return _ratio(
                self.signature_success,
                self.signature_success + self.signature_failures,
            )

    def matching_success_rate(self) -> float:
        """Share of matching attempts that succeeded; 0.0 when none ran."""
        with self._lock:
            return _ratio(self.matching_success, self.matching_attempts)

    def success_rate(self) -> float:
        """Share of finished intents that were processed rather than failed."""
        with self._lock:
            return _ratio(
                self.intents_processed, self.intents_processed + self.intents_failed
            )

    def total_intents(self) -> int:
        """Number of intents created."""
        with self._lock:
            return self.intents_created

    def throughput(self, duration: timedelta) -> float:
        """Processed intents per second over duration; 0.0 for a zero duration."""
        seconds = duration.total_seconds()
        with self._lock:
            if seconds == 0:
                return 0.0
            return self.intents_processed / seconds

    def snapshot(self) -> BusinessMetricsSnapshot:
        """Return a consistent copy of every metric, stamped with the current time."""
        with self._lock:
            values = {
                f.name: getattr(self, f.name)
                for f in fields(BusinessMetricsSnapshot)
                if f.name != "timestamp"
            }
        return BusinessMetricsSnapshot(timestamp=datetime.now(), **values)

    def reset(self) -> None:
        """Set every metric back to zero."""
        with self._lock:
            for name in _COUNTERS:
                setattr(self, name, 0)
            self.processing_latency = _ZERO
            self.network_latency = _ZERO
            self.matching_accuracy = 0.0
            self.network_peers = 0


class PrometheusMetrics:
    """Named counters, gauges and bounded histograms."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.gauges: dict[str, float] = {}
        self.histograms: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def increment_counter(self, name: str) -> None:
        """Add one to a counter, creating it at zero if needed."""
        with self._lock:
            self.counters[name] = self.counters.get(name, 0) + 1

    def set_gauge(self, name: str, value: float) -> None:
        """Set a gauge to value."""
        with self._lock:
            self.gauges[name] = value

    def observe_histogram(self, name: str, value: float) -> None:
        """Record an observation; only the most recent 1000 are kept."""
        with self._lock:
            values = self.histograms.setdefault(name, [])
            values.append(value)
            if len(values) > _HISTOGRAM_LIMIT:
                del values[: len(values) - _HISTOGRAM_LIMIT]

    def collect(self) -> dict[str, Any]:
        """Return counters, gauges and per-histogram _sum, _count and _avg."""
        with self._lock:
            result: dict[str, Any] = dict(self.counters)
            result.update(self.gauges)
            for name, values in self.histograms.items():
                if not values:
                    continue
                total = sum(values)
                result[f"{name}_sum"] = total
                result[f"{name}_count"] = len(values)
                result[f"{name}_avg"] = total / len(values)
            return result