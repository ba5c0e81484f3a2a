"""
Staleness thresholds, transport timeouts and limits, maintenance periods,
and external service lists.
"""

from settings.keys import REGISTRY

# ── Staleness ────────────────────────────────────────────────────

REGISTRY.define("relay_list_becomes_stale_minutes", int,
    description="Age after which a person's relay list is refetched",
    width="u64",
    default=20,
    category="staleness",
)

REGISTRY.define("metadata_becomes_stale_minutes", int,
    description="Age after which a person's metadata is refetched",
    width="u64",
    default=60 * 8,
    category="staleness",
)

REGISTRY.define("nip05_becomes_stale_if_valid_hours", int,
    description="Age after which a valid NIP-05 result is rechecked",
    width="u64",
    default=8,
    category="staleness",
)

REGISTRY.define("nip05_becomes_stale_if_invalid_minutes", int,
    description="Age after which a failed NIP-05 check is retried",
    width="u64",
    default=30,
    category="staleness",
)

REGISTRY.define("avatar_becomes_stale_hours", int,
    description="Age after which a cached avatar is refetched",
    width="u64",
    default=8,
    category="staleness",
)

REGISTRY.define("media_becomes_stale_hours", int,
    description="Age after which cached media is refetched",
    width="u64",
    default=8,
    category="staleness",
)

# ── Websocket ────────────────────────────────────────────────────

REGISTRY.define("max_websocket_message_size_kb", int,
    description="Largest websocket message accepted from a relay",
    width="usize",
    default=1024,
    category="websocket",
)

REGISTRY.define("max_websocket_frame_size_kb", int,
    description="Largest websocket frame accepted from a relay",
    width="usize",
    default=1024,
    category="websocket",
)

REGISTRY.define("websocket_accept_unmasked_frames", bool,
    description="Accept unmasked websocket frames",
    default=False,
    category="websocket",
)

REGISTRY.define("websocket_connect_timeout_sec", int,
    description="Timeout for establishing a relay connection",
    width="u64",
    default=15,
    category="websocket",
)

REGISTRY.define("websocket_ping_frequency_sec", int,
    description="Interval between keepalive pings to a relay",
    width="u64",
    default=55,
    category="websocket",
)

# ── HTTP ─────────────────────────────────────────────────────────

REGISTRY.define("fetcher_connect_timeout_sec", int,
    description="Timeout for establishing an HTTP connection",
    width="u64",
    default=15,
    category="http",
)

REGISTRY.define("fetcher_timeout_sec", int,
    description="Timeout for a complete HTTP fetch",
    width="u64",
    default=30,
    category="http",
)

REGISTRY.define("fetcher_max_requests_per_host", int,
    description="Concurrent HTTP requests allowed per host",
    width="usize",
    default=3,
    category="http",
)

REGISTRY.define("fetcher_host_exclusion_on_low_error_secs", int,
    description="How long a host is skipped after a minor error",
    width="u64",
    default=30,
    category="http",
)

REGISTRY.define("fetcher_host_exclusion_on_med_error_secs", int,
    description="How long a host is skipped after a moderate error",
    width="u64",
    default=60,
    category="http",
)

REGISTRY.define("fetcher_host_exclusion_on_high_error_secs", int,
    description="How long a host is skipped after a severe error",
    width="u64",
    default=600,
    category="http",
)

# ── Database ─────────────────────────────────────────────────────

REGISTRY.define("prune_period_days", int,
    description="Age after which events are pruned from the database",
    width="u64",
    default=30,
    category="database",
)

# Shares prune_period_days' default rather than carrying its own.
REGISTRY.define("cache_prune_period_days", int,
    description="Age after which cached files are pruned",
    width="u64",
    default_from="prune_period_days",
    category="database",
)

# ── External services ────────────────────────────────────────────

REGISTRY.define("blossom_servers", str,
    description="Space-separated list of blossom media servers",
    default="",
    category="services",
)
