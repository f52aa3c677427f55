"""Shared constants for intents, networking, configuration defaults and metrics."""

from datetime import timedelta

# Intent types
INTENT_TYPE_TRADE = "trade"
INTENT_TYPE_SWAP = "swap"
INTENT_TYPE_EXCHANGE = "exchange"

INTENT_TYPE_TRANSFER = "transfer"
INTENT_TYPE_SEND = "send"
INTENT_TYPE_PAYMENT = "payment"

INTENT_TYPE_LENDING = "lending"
INTENT_TYPE_BORROW = "borrow"
INTENT_TYPE_LOAN = "loan"

INTENT_TYPE_INVESTMENT = "investment"
INTENT_TYPE_STAKING = "staking"
INTENT_TYPE_YIELD = "yield"

ALL_INTENT_TYPES = (
    INTENT_TYPE_TRADE,
    INTENT_TYPE_SWAP,
    INTENT_TYPE_EXCHANGE,
    INTENT_TYPE_TRANSFER,
    INTENT_TYPE_SEND,
    INTENT_TYPE_PAYMENT,
    INTENT_TYPE_LENDING,
    INTENT_TYPE_BORROW,
    INTENT_TYPE_LOAN,
    INTENT_TYPE_INVESTMENT,
    INTENT_TYPE_STAKING,
    INTENT_TYPE_YIELD,
)

# Intent status names
STATUS_CREATED = "created"
STATUS_VALIDATED = "validated"
STATUS_BROADCASTED = "broadcasted"
STATUS_PROCESSED = "processed"
STATUS_MATCHED = "matched"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"
STATUS_EXPIRED = "expired"

# Intent priorities
PRIORITY_LOW = 1
PRIORITY_NORMAL = 5
PRIORITY_HIGH = 10
PRIORITY_URGENT = 20

# Network topics
TOPIC_INTENT_BROADCAST = "intent.broadcast"
TOPIC_INTENT_MATCHING = "intent.matching"
TOPIC_INTENT_STATUS = "intent.status"
TOPIC_NETWORK_STATUS = "network.status"
TOPIC_PEER_DISCOVERY = "peer.discovery"

# Intent configuration defaults
DEFAULT_MAX_CONCURRENT_INTENTS = 1000
DEFAULT_PROCESSING_TIMEOUT = timedelta(seconds=30)
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_TTL = timedelta(seconds=3600)
DEFAULT_INTENT_PRIORITY = PRIORITY_NORMAL

# Validation configuration defaults
DEFAULT_MAX_PAYLOAD_SIZE = 1024 * 1024
DEFAULT_MAX_TTL = timedelta(hours=24)

# Security configuration defaults
DEFAULT_SIGNATURE_ALGORITHM = "Ed25519"
DEFAULT_KEY_ROTATION_PERIOD = timedelta(days=30)

# Processing configuration defaults
DEFAULT_PIPELINE_TIMEOUT = timedelta(seconds=60)
DEFAULT_STAGE_TIMEOUT = timedelta(seconds=10)
DEFAULT_MAX_RETRIES = 3

# Matching configuration defaults
DEFAULT_CONFIDENCE_THRESHOLD = 0.8
DEFAULT_MAX_MATCHES_PER_INTENT = 10
DEFAULT_MATCHING_TIMEOUT = timedelta(seconds=5)

# Network configuration defaults
DEFAULT_MAX_PEERS = 100
DEFAULT_STATUS_UPDATE_INTERVAL = timedelta(seconds=30)
DEFAULT_TOPOLOGY_UPDATE_INTERVAL = timedelta(seconds=60)

# Cache configuration defaults
DEFAULT_CACHE_SIZE = 1000
DEFAULT_CACHE_TTL = timedelta(minutes=5)

# Signature algorithms
SIGNATURE_ALGORITHM_ED25519 = "Ed25519"
SIGNATURE_ALGORITHM_ECDSA = "ECDSA"
SIGNATURE_ALGORITHM_RSA = "RSA"
SIGNATURE_ALGORITHM_SECP256K1 = "secp256k1"

# Hash algorithms
HASH_ALGORITHM_SHA256 = "SHA256"
HASH_ALGORITHM_SHA512 = "SHA512"
HASH_ALGORITHM_BLAKE2B = "BLAKE2b"
HASH_ALGORITHM_KECCAK256 = "Keccak256"

# Encryption algorithms
ENCRYPTION_ALGORITHM_AES256 = "AES256"
ENCRYPTION_ALGORITHM_CHACHA20 = "ChaCha20"
ENCRYPTION_ALGORITHM_XSALSA20 = "XSalsa20"

# Network health
NETWORK_HEALTH_UNKNOWN = "unknown"
NETWORK_HEALTH_DISCONNECTED = "disconnected"
NETWORK_HEALTH_POOR = "poor"
NETWORK_HEALTH_GOOD = "good"
NETWORK_HEALTH_EXCELLENT = "excellent"
NETWORK_HEALTH_STALE = "stale"

# Match type names
MATCH_TYPE_EXACT = "exact"
MATCH_TYPE_PARTIAL = "partial"
MATCH_TYPE_SEMANTIC = "semantic"
MATCH_TYPE_PATTERN = "pattern"

# Validation rule priorities
VALIDATION_PRIORITY_HIGH = 100
VALIDATION_PRIORITY_MEDIUM = 50
VALIDATION_PRIORITY_LOW = 10

# Processing stage priorities
PROCESSING_STAGE_PRIORITY_VALIDATION = 100
PROCESSING_STAGE_PRIORITY_SIGNATURE = 90
PROCESSING_STAGE_PRIORITY_MATCHING = 80
PROCESSING_STAGE_PRIORITY_ROUTING = 70
PROCESSING_STAGE_PRIORITY_STORAGE = 60

# Metric names
METRIC_INTENTS_CREATED = "intents_created_total"
METRIC_INTENTS_PROCESSED = "intents_processed_total"
METRIC_INTENTS_MATCHED = "intents_matched_total"
METRIC_INTENTS_FAILED = "intents_failed_total"
METRIC_INTENTS_EXPIRED = "intents_expired_total"
METRIC_PROCESSING_LATENCY = "intent_processing_duration_seconds"
METRIC_VALIDATION_ERRORS = "validation_errors_total"
METRIC_SIGNATURE_FAILURES = "signature_failures_total"
METRIC_MATCHING_ACCURACY = "matching_accuracy_ratio"
METRIC_NETWORK_PEERS = "network_peers_connected"
METRIC_MESSAGES_SENT = "messages_sent_total"
METRIC_MESSAGES_RECEIVED = "messages_received_total"

# Log levels
LOG_LEVEL_DEBUG = "debug"
LOG_LEVEL_INFO = "info"
LOG_LEVEL_WARN = "warn"
LOG_LEVEL_ERROR = "error"
LOG_LEVEL_FATAL = "fatal"

# Environments
ENVIRONMENT_DEVELOPMENT = "development"
ENVIRONMENT_TESTING = "testing"
ENVIRONMENT_STAGING = "staging"
ENVIRONMENT_PRODUCTION = "production"

# Version information
VERSION = "0.1.0"
API_VERSION = "v1"
BUILD_COMMIT = "unknown"
BUILD_TIME = "unknown"

# Files and directories
DEFAULT_CONFIG_DIR = ".kiro"
DEFAULT_KEY_STORE_DIR = "keystore"
DEFAULT_DATA_DIR = "data"
DEFAULT_LOG_DIR = "logs"
DEFAULT_CACHE_DIR = "cache"
DEFAULT_BACKUP_DIR = "backup"

CONFIG_FILE_NAME = "config.yaml"
KEY_STORE_FILE_NAME = "keystore.json"
NETWORK_CONFIG_FILE = "network.yaml"
SECURITY_CONFIG_FILE = "security.yaml"

# Network protocol
PROTOCOL_VERSION = "1.0.0"
PROTOCOL_NAME = "pin-intent-broadcast"
USER_AGENT = "pin-intent-broadcast-network/" + VERSION

# Rate limiting
DEFAULT_RATE_LIMIT = 100  # requests per minute
DEFAULT_BURST_LIMIT = 10
DEFAULT_RATE_LIMIT_WINDOW = timedelta(minutes=1)

# Timeouts
DEFAULT_CONNECT_TIMEOUT = timedelta(seconds=10)
DEFAULT_READ_TIMEOUT = timedelta(seconds=30)
DEFAULT_WRITE_TIMEOUT = timedelta(seconds=30)
DEFAULT_SHUTDOWN_TIMEOUT = timedelta(seconds=30)
DEFAULT_HEALTH_CHECK_TIMEOUT = timedelta(seconds=5)

# Buffer sizes
DEFAULT_CHANNEL_BUFFER_SIZE = 100
DEFAULT_MESSAGE_BUFFER_SIZE = 1024
DEFAULT_EVENT_BUFFER_SIZE = 50