"""Protocol constants.

This module contains values fixed by the ESI/Surrogate protocol or by the
wire contract with the reverse proxy. Deployment-tunable values live in
models.py (EsiConfig).
"""

# =============================================================================
# Surrogate negotiation
# =============================================================================

SURROGATE_CAPABILITY_HEADER = "Surrogate-Capability"
"""Request header a surrogate uses to announce the protocols it processes."""

SURROGATE_CONTROL_HEADER = "Surrogate-Control"
"""Response header telling the surrogate how to process the body."""

ESI_PROTOCOL_TOKEN = "ESI/1.0"
"""Capability token matched anywhere in the Surrogate-Capability value."""

# =============================================================================
# Fragment endpoint
# =============================================================================

FRAGMENT_PATH = "/esi/block/"
"""Route the surrogate calls back to fetch a deferred fragment."""

FRAGMENT_QUERY_PARAM = "id"
"""Query parameter carrying the encoded placeholder identifier."""

FRAGMENT_CACHE_CONTROL = "no-cache, max-age=0"
"""Fragments are always revalidated; no TTL beyond zero."""

DEFAULT_MEDIA_TYPE = "text/html"
"""Content type for fragments that don't declare their own."""

# =============================================================================
# Validation
# =============================================================================

PORT_MIN = 0
PORT_MAX = 65535
"""Valid port range."""
