"""Configuration of the business logic layer."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from pin_intent.common import constants as c
from pin_intent.common.errors import ErrorCode, IntentError

_ZERO = timedelta(0)


@dataclass
class IntentConfig:
    """Settings for intent management."""

    max_concurrent_intents: int = 0
    processing_timeout: timedelta = _ZERO
    retry_attempts: int = 0
    default_ttl: timedelta = _ZERO
    enable_matching: bool = False
    enable_lifecycle: bool = False
    cleanup_interval: timedelta = _ZERO


@dataclass
class ValidationConfig:
    """Settings for intent validation."""

    max_payload_size: int = 0
    max_ttl: timedelta = _ZERO
    allowed_types: list[str] = field(default_factory=list)
    enable_strict: bool = False
    enable_cache: bool = False
    cache_ttl: timedelta = _ZERO


@dataclass
class SecurityConfig:
    """Settings for signing, key storage and encryption."""

    signature_algorithm: str = ""
    key_store_type: str = ""
    key_store_dir: str = ""
    key_rotation_period: timedelta = _ZERO
    enable_encryption: bool = False
    encryption_algorithm: str = ""
    hash_algorithm: str = ""
    enable_backup: bool = False


@dataclass
class ProcessingConfig:
    """Settings for the processing pipeline."""

    pipeline_timeout: timedelta = _ZERO
    stage_timeout: timedelta = _ZERO
    max_retries: int = 0
    enable_async: bool = False
    max_concurrent_stages: int = 0
    enable_load_balancing: bool = False


@dataclass
class MatchingConfig:
    """Settings for intent matching."""

    confidence_threshold: float = 0.0
    max_matches_per_intent: int = 0
    matching_timeout: timedelta = _ZERO
    enable_caching: bool = False
    cache_size: int = 0
    enable_content_matching: bool = False
    enable_metadata_matching: bool = False
    content_weight: float = 0.0
    metadata_weight: float = 0.0
    type_weight: float = 0.0


@dataclass
class NetworkConfig:
    """Settings for network management."""

    max_peers: int = 0
    status_update_interval: timedelta = _ZERO
    topology_update_interval: timedelta = _ZERO
    enable_topology_tracking: bool = False
    enable_metrics: bool = False
    connection_timeout: timedelta = _ZERO
    heartbeat_interval: timedelta = _ZERO


@dataclass
class MonitoringConfig:
    """Settings for metrics, profiling, logging and tracing."""

    enable_metrics: bool = False
    metrics_port: int = 0
    metrics_path: str = ""
    enable_profiling: bool = False
    profiling_port: int = 0
    log_level: str = ""
    log_format: str = ""
    enable_tracing: bool = False
    tracing_endpoint: str = ""
    sample_rate: float = 0.0
    metrics_interval: timedelta = _ZERO


def _invalid(message: str) -> IntentError:
    return IntentError(ErrorCode.INVALID_CONFIGURATION, message, "")


@dataclass
class BusinessConfig:
    """Complete configuration of the business logic layer."""

    intent: IntentConfig = field(default_factory=IntentConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def validate(self) -> None:
        """Raise IntentError with code INVALID_CONFIGURATION on the first bad setting."""
        if self.intent.max_concurrent_intents <= 0:
            raise _invalid("MaxConcurrentIntents must be positive")
        if self.intent.processing_timeout <= _ZERO:
            raise _invalid("ProcessingTimeout must be positive")
        if self.intent.retry_attempts < 0:
            raise _invalid("RetryAttempts cannot be negative")

        if self.validation.max_payload_size <= 0:
            raise _invalid("MaxPayloadSize must be positive")
        if self.validation.max_ttl <= _ZERO:
            raise _invalid("MaxTTL must be positive")

        if not self.security.signature_algorithm:
            raise _invalid("SignatureAlgorithm cannot be empty")
        if not self.security.key_store_type:
            raise _invalid("KeyStoreType cannot be empty")

        if self.processing.pipeline_timeout <= _ZERO:
            raise _invalid("PipelineTimeout must be positive")
        if self.processing.stage_timeout <= _ZERO:
            raise _invalid("StageTimeout must be positive")

        if not 0 <= self.matching.confidence_threshold <= 1:
            raise _invalid("ConfidenceThreshold must be between 0 and 1")
        if self.matching.max_matches_per_intent <= 0:
            raise _invalid("MaxMatchesPerIntent must be positive")

        if self.network.max_peers <= 0:
            raise _invalid("MaxPeers must be positive")

        if not 0 < self.monitoring.metrics_port <= 65535:
            raise _invalid("MetricsPort must be between 1 and 65535")
        if not 0 <= self.monitoring.sample_rate <= 1:
            raise _invalid("SampleRate must be between 0 and 1")

    def merge(self, other: Optional["BusinessConfig"]) -> None:
        """Take over the intent, validation and security settings that other sets."""
        if other is None:
            return

        if other.intent.max_concurrent_intents > 0:
            self.intent.max_concurrent_intents = other.intent.max_concurrent_intents
        if other.intent.processing_timeout > _ZERO:
            self.intent.processing_timeout = other.intent.processing_timeout
        if other.intent.retry_attempts >= 0:
            self.intent.retry_attempts = other.intent.retry_attempts
        if other.intent.default_ttl > _ZERO:
            self.intent.default_ttl = other.intent.default_ttl

        if other.validation.max_payload_size > 0:
            self.validation.max_payload_size = other.validation.max_payload_size
        if other.validation.max_ttl > _ZERO:
            self.validation.max_ttl = other.validation.max_ttl
        if other.validation.allowed_types:
            self.validation.allowed_types = list(other.validation.allowed_types)

        if other.security.signature_algorithm:
            self.security.signature_algorithm = other.security.signature_algorithm
        if other.security.key_store_type:
            self.security.key_store_type = other.security.key_store_type
        if other.security.key_store_dir:
            self.security.key_store_dir = other.security.key_store_dir

    def clone(self) -> "BusinessConfig":
        """Return an independent deep copy."""
        return copy.deepcopy(self)


def default_config() -> BusinessConfig:
    """Return the default business configuration."""
    return BusinessConfig(
        intent=IntentConfig(
            max_concurrent_intents=c.DEFAULT_MAX_CONCURRENT_INTENTS,
            processing_timeout=c.DEFAULT_PROCESSING_TIMEOUT,
            retry_attempts=c.DEFAULT_RETRY_ATTEMPTS,
            default_ttl=c.DEFAULT_TTL,
            enable_matching=True,
            enable_lifecycle=True,
            cleanup_interval=timedelta(minutes=5),
        ),
        validation=ValidationConfig(
            max_payload_size=c.DEFAULT_MAX_PAYLOAD_SIZE,
            max_ttl=c.DEFAULT_MAX_TTL,
            allowed_types=[
                c.INTENT_TYPE_TRADE,
                c.INTENT_TYPE_TRANSFER,
                c.INTENT_TYPE_LENDING,
                c.INTENT_TYPE_SWAP,
            ],
            enable_strict=True,
            enable_cache=True,
            cache_ttl=c.DEFAULT_CACHE_TTL,
        ),
        security=SecurityConfig(
            signature_algorithm=c.DEFAULT_SIGNATURE_ALGORITHM,
            key_store_type="file",
            key_store_dir=c.DEFAULT_KEY_STORE_DIR,
            key_rotation_period=c.DEFAULT_KEY_ROTATION_PERIOD,
            enable_encryption=True,
            encryption_algorithm=c.ENCRYPTION_ALGORITHM_AES256,
            hash_algorithm=c.HASH_ALGORITHM_SHA256,
            enable_backup=True,
        ),
        processing=ProcessingConfig(
            pipeline_timeout=c.DEFAULT_PIPELINE_TIMEOUT,
            stage_timeout=c.DEFAULT_STAGE_TIMEOUT,
            max_retries=c.DEFAULT_MAX_RETRIES,
            enable_async=True,
            max_concurrent_stages=10,
            enable_load_balancing=True,
        ),
        matching=MatchingConfig(
            confidence_threshold=c.DEFAULT_CONFIDENCE_THRESHOLD,
            max_matches_per_intent=c.DEFAULT_MAX_MATCHES_PER_INTENT,
            matching_timeout=c.DEFAULT_MATCHING_TIMEOUT,
            enable_caching=True,
            cache_size=c.DEFAULT_CACHE_SIZE,
            enable_content_matching=True,
            enable_metadata_matching=True,
            content_weight=0.4,
            metadata_weight=0.3,
            type_weight=0.3,
        ),
        network=NetworkConfig(
            max_peers=c.DEFAULT_MAX_PEERS,
            status_update_interval=c.DEFAULT_STATUS_UPDATE_INTERVAL,
            topology_update_interval=c.DEFAULT_TOPOLOGY_UPDATE_INTERVAL,
            enable_topology_tracking=True,
            enable_metrics=True,
            connection_timeout=c.DEFAULT_CONNECT_TIMEOUT,
            heartbeat_interval=timedelta(seconds=30),
        ),
        monitoring=MonitoringConfig(
            enable_metrics=True,
            metrics_port=9090,
            metrics_path="/metrics",
            enable_profiling=False,
            profiling_port=6060,
            log_level=c.LOG_LEVEL_INFO,
            log_format="json",
            enable_tracing=False,
            tracing_endpoint="",
            sample_rate=0.1,
            metrics_interval=timedelta(seconds=30),
        ),
    )