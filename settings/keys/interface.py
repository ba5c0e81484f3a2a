"""
Posting and user interface settings.
"""

from settings.keys import REGISTRY

THEME_VARIANTS = ["Default", "Classic", "Roundy"]

IMAGE_RESIZE_ALGORITHMS = ["Nearest", "Triangle", "CatmullRom", "Gaussian", "Lanczos3"]

# ── Posting ──────────────────────────────────────────────────────

REGISTRY.define("pow", int,
    description="Proof-of-work difficulty (leading zero bits) for new events",
    width="u8",
    default=0,
    category="posting",
    display_name="Proof of work",
)

REGISTRY.define("set_client_tag", bool,
    description="Add a client tag to posted events",
    default=False,
    category="posting",
)

REGISTRY.define("set_user_agent", bool,
    description="Send a User-Agent header identifying this client",
    default=False,
    category="posting",
)

REGISTRY.define("delegatee_tag", str,
    description="Serialized NIP-26 delegation tag, empty when not delegating",
    default="",
    category="posting",
)

# ── UI ───────────────────────────────────────────────────────────

REGISTRY.define("max_fps", int,
    description="Frame rate cap",
    width="u32",
    default=12,
    category="ui",
    display_name="Max FPS",
)

REGISTRY.define("recompute_feed_periodically", bool,
    description="Recompute feeds on a timer instead of only on demand",
    default=True,
    category="ui",
)

REGISTRY.define("feed_recompute_interval_ms", int,
    description="Interval between periodic feed recomputations",
    width="u32",
    default=10000,
    category="ui",
)

REGISTRY.define("feed_thread_scroll_to_main_event", bool,
    description="Scroll a thread to the event it was opened from",
    default=True,
    category="ui",
)

REGISTRY.define("theme_variant", str,
    description="Name of the UI theme",
    enum=THEME_VARIANTS,
    default="Default",
    category="ui",
)

REGISTRY.define("dark_mode", bool,
    description="Use the dark variant of the theme",
    default=False,
    category="ui",
)

REGISTRY.define("follow_os_dark_mode", bool,
    description="Follow the operating system's dark mode preference",
    default=False,
    category="ui",
)

REGISTRY.define("override_dpi", int,
    description="Force a DPI instead of the one reported by the display",
    width="u32",
    nullable=True,
    default=None,
    category="ui",
    display_name="Override DPI",
)

REGISTRY.define("highlight_unread_events", bool,
    description="Highlight events not seen before",
    default=True,
    category="ui",
)

REGISTRY.define("feed_newest_at_bottom", bool,
    description="Order feeds oldest first",
    default=False,
    category="ui",
)

REGISTRY.define("posting_area_at_top", bool,
    description="Place the posting area above the feed",
    default=True,
    category="ui",
)

REGISTRY.define("status_bar", bool,
    description="Show the status bar",
    default=False,
    category="ui",
)

REGISTRY.define("image_resize_algorithm", str,
    description="Filter used when scaling images",
    enum=IMAGE_RESIZE_ALGORITHMS,
    default="CatmullRom",
    category="ui",
)

REGISTRY.define("inertial_scrolling", bool,
    description="Keep scrolling with momentum after a flick",
    default=True,
    category="ui",
)

REGISTRY.define("mouse_acceleration", float,
    description="Scroll wheel speed multiplier",
    default=1.0,
    category="ui",
)

REGISTRY.define("wgpu_renderer", bool,
    description="Render with wgpu instead of OpenGL (takes effect on restart)",
    default=False,
    category="ui",
)
