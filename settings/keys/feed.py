"""
Relay selection, feed, event selection and event content settings.
"""

from settings.keys import REGISTRY

# ── Relays ───────────────────────────────────────────────────────

REGISTRY.define("num_relays_per_person", int,
    description="How many of each followed person's relays to read from",
    width="u8",
    default=2,
    category="relays",
)

REGISTRY.define("max_relays", int,
    description="Upper limit on simultaneously connected relays",
    width="u8",
    default=50,
    category="relays",
)

# ── Feed ─────────────────────────────────────────────────────────

REGISTRY.define("load_more_count", int,
    description="Number of events requested when loading more of a feed",
    width="u64",
    default=35,
    category="feed",
)

# ── Event selection ──────────────────────────────────────────────

REGISTRY.define("reposts", bool,
    description="Show reposts in feeds",
    default=True,
    category="events",
)

REGISTRY.define("show_long_form", bool,
    description="Show long-form posts in feeds",
    default=False,
    category="events",
)

REGISTRY.define("show_mentions", bool,
    description="Show events that mention us in the inbox",
    default=True,
    category="events",
)

REGISTRY.define("direct_messages", bool,
    description="Show direct messages in the inbox",
    default=True,
    category="events",
)

REGISTRY.define("future_allowance_secs", int,
    description="How far in the future an event timestamp may be and still be accepted",
    width="u64",
    default=60 * 15,
    category="events",
)

# ── Event content ────────────────────────────────────────────────

REGISTRY.define("hide_mutes_entirely", bool,
    description="Drop events from muted people instead of collapsing them",
    default=True,
    category="content",
)

REGISTRY.define("reactions", bool,
    description="Show and send reactions",
    default=True,
    category="content",
)

REGISTRY.define("enable_zap_receipts", bool,
    description="Process zap receipts",
    default=True,
    category="content",
)

REGISTRY.define("show_media", bool,
    description="Render media inline",
    default=True,
    category="content",
)

REGISTRY.define("approve_content_warning", bool,
    description="Show content behind a content warning without asking",
    default=False,
    category="content",
)

REGISTRY.define("show_deleted_events", bool,
    description="Keep showing events whose author deleted them",
    default=False,
    category="content",
)

REGISTRY.define("avoid_spam_on_unsafe_relays", bool,
    description="Only accept replies and mentions from relays that require auth",
    default=False,
    category="content",
)

REGISTRY.define("apply_spam_filter_on_incoming_events", bool,
    description="Run the spam filter on every incoming event",
    default=True,
    category="content",
)

REGISTRY.define("apply_spam_filter_on_threads", bool,
    description="Run the spam filter when rendering threads",
    default=True,
    category="content",
)

REGISTRY.define("apply_spam_filter_on_inbox", bool,
    description="Run the spam filter when rendering the inbox",
    default=True,
    category="content",
)

REGISTRY.define("apply_spam_filter_on_global", bool,
    description="Run the spam filter when rendering the global feed",
    default=True,
    category="content",
)
