"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are response-contract constraints and hard limits on paging and sizing.

For configurable values, see models.py (LimitsConfig, CacheConfig, etc.).
"""

# =============================================================================
# Response Contract
# =============================================================================

CONTRACT_VERSION = "1.0"
"""Version tag stamped on every response envelope, success or error."""

# =============================================================================
# Response Size Governance
# =============================================================================
# Sizes are measured in characters of the compact JSON rendering, which is
# what a consumer with a context budget actually pays for.

MAX_RESPONSE_CHARS = 100_000
"""Absolute ceiling for a rendered envelope. Anything larger fails closed."""

WARNING_THRESHOLD_CHARS = 50_000
"""Target size for a page and threshold for pagination advice."""

MIN_RECOMMENDED_PAGE_SIZE = 10
"""Smallest page size the pagination advice will ever recommend."""

# =============================================================================
# Paging Maximums
# =============================================================================

MAX_PAGE_SIZE = 1000
"""Hard cap on max_items for any paged operation."""

DEFAULT_PAGE_SIZE = 50
"""Default max_items when neither the call nor runtime options set one."""

# =============================================================================
# Tokens and Cache Keys
# =============================================================================

SALT_LENGTH = 16
"""Hex characters of the query-key digest embedded in continuation tokens."""

CACHE_KEY_PREFIX_MAX = 256
"""Readable prefix length kept in cache keys before the content hash."""

MIN_CACHE_TTL_SECONDS = 1
"""Floor applied to the configured cache TTL."""

DEFAULT_CACHE_TTL_SECONDS = 300
"""Default lifetime of a cached response."""
