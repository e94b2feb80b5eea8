"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are index format constraints, API stability limits, and implementation details.

For configurable values, see models.py (SearchConfig, ServerConfig, etc.).
"""

# =============================================================================
# Index Format
# =============================================================================

SCORE_DEFAULT = 1
"""Weight assigned to every indexed key. Placeholder until relevance signals exist."""

SCORE_MAX = 2**64 - 1
"""Scores are unsigned 64-bit values."""

PATH_SEPARATOR = "/"
"""Separator collapsed when doubled in indexed paths."""

# =============================================================================
# REST Pagination Maximums
# =============================================================================
# Hard caps for API stability. Users can configure defaults below these,
# but cannot exceed them.

PAGE_SIZE_MAX = 1000
"""Maximum results per search page."""

QUERY_LENGTH_MAX = 256
"""Maximum search query length in characters."""

CURSOR_LENGTH_MAX = 256
"""Maximum length of an opaque pagination cursor."""

# =============================================================================
# Protocol/Validation Constants
# =============================================================================

PORT_MIN = 0
PORT_MAX = 65535
"""Valid port range."""
