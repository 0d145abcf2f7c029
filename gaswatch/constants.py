"""Constants used throughout the Gas Watch application."""

# Ethereum unit conversions
GWEI_PER_ETH = 1e9

# Window capacities
DEFAULT_SHORT_CAPACITY = 360  # ~1 hour of 10s samples
DEFAULT_LONG_CAPACITY = 148  # one point per hourly flush

# Default timer periods
DEFAULT_POLL_SECS = 10
DEFAULT_COUNTDOWN_SECS = 1
DEFAULT_MINUTE_FLUSH_SECS = 60
DEFAULT_HOUR_FLUSH_SECS = 3600
DEFAULT_LONG_COUNTDOWN_SECS = 600

# Cost and confirmation estimates
DEFAULT_GAS_LIMIT = 21000  # plain ETH transfer
DEFAULT_BLOCK_TIME_SECS = 13
TARGET_BLOCKS = {
    "low": 120,
    "avg": 60,
    "high": 30,
}
TIERS = ("low", "avg", "high")

# Series labels
NA_LABEL = "N/A"
LABEL_TIME_FORMAT = "%H:%M:%S"

# Etherscan
DEFAULT_ETHERSCAN_URL = "https://api.etherscan.io/api"
DEFAULT_HTTP_TIMEOUT_SECS = 10

# Error surfaced when a poll tick fails
FETCH_ERROR_MESSAGE = "Error fetching gas or ETH price data"

# Log rotation defaults
DEFAULT_LOG_MAX_BYTES = 10_485_760  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 30
