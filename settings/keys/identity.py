"""
Identity and network settings: who we are and what we fetch.
"""

from settings.keys import REGISTRY
from settings.types import PublicKey

# ── Identity ─────────────────────────────────────────────────────

REGISTRY.define("public_key", PublicKey,
    description="Public key of the signed-in identity",
    nullable=True,
    default=None,
    category="identity",
    display_name="Public key",
)

REGISTRY.define("log_n", int,
    description="scrypt cost exponent used when encrypting the private key",
    width="u8",
    default=18,
    category="identity",
)

REGISTRY.define("login_at_startup", bool,
    description="Prompt for the passphrase at startup",
    default=True,
    category="identity",
)

# ── Network ──────────────────────────────────────────────────────

REGISTRY.define("offline", bool,
    description="Run without connecting to any relay",
    default=False,
    category="network",
    display_name="Offline mode",
)

REGISTRY.define("load_avatars", bool,
    description="Fetch and show avatar images",
    default=True,
    category="network",
)

REGISTRY.define("load_media", bool,
    description="Fetch images and video linked from events",
    default=True,
    category="network",
)

REGISTRY.define("check_nip05", bool,
    description="Verify NIP-05 identifiers of people we see",
    default=True,
    category="network",
)

REGISTRY.define("automatically_fetch_metadata", bool,
    description="Fetch metadata of people who appear in the feed",
    default=True,
    category="network",
)

REGISTRY.define("relay_connection_requires_approval", bool,
    description="Ask before connecting to a relay not yet approved",
    default=False,
    category="network",
)

REGISTRY.define("relay_auth_requires_approval", bool,
    description="Ask before authenticating to a relay",
    default=False,
    category="network",
)
