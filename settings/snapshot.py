"""
Staged settings snapshot.

Settings are stored individually, one key at a time, and most code should
read and write them that way through SettingsCatalog. A settings editor
instead needs to collect many edits and apply them together; it loads an
UnsavedSettings, mutates it freely (nothing touches the store while
staged), then saves it in one transaction or simply drops it.

    staged = UnsavedSettings.load(catalog)
    staged.offline = True
    staged.max_fps = 30
    staged.save(catalog, run_state)
"""

import dataclasses
from dataclasses import dataclass
from typing import Optional

from settings import commit
from settings.keys import REGISTRY
from settings.types import PublicKey


class SettingsMirror:
    """
    Base class for dataclasses that mirror the whole setting key space.

    Subclasses are checked against the registry when they are defined:
    one field per key, same name, same type, nothing extra, nothing missing.
    Fields have no dataclass defaults, so every instance is fully populated.
    """

    # Setting registry; the class is validated against it on definition
    _registry = REGISTRY

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls._registry is not None:
            # __init_subclass__ fires BEFORE @dataclass, so annotations
            # are checked rather than dataclasses.fields().
            own_annotations = {
                k: v for k, v in getattr(cls, '__annotations__', {}).items()
                if not k.startswith('_')
            }
            if own_annotations:
                cls._registry.validate_snapshot_class(cls)

    @classmethod
    def with_defaults(cls):
        """A snapshot holding every key's default. Never touches the store."""
        registry = cls._registry
        return cls(**{name: registry.default(name) for name in registry.names()})

    @classmethod
    def load(cls, catalog):
        """A snapshot of the currently committed value of every key."""
        commit.check_registry(cls, catalog)
        return cls(**{name: catalog.read(name) for name in catalog.registry.names()})

    def save(self, catalog, run_state):
        """Commit every field in one transaction. See settings.commit.save."""
        return commit.save(self, catalog, run_state)

    def as_dict(self) -> dict:
        """{key: value} in registry order."""
        return {name: getattr(self, name) for name in self._registry.names()}

    def changed_keys(self, other) -> list:
        """Keys whose value differs between self and other, in registry order."""
        return [
            name for name in self._registry.names()
            if getattr(self, name) != getattr(other, name)
        ]

    def validate(self) -> list:
        """Constraint violations of the staged values (empty = valid)."""
        return self._registry.validate_instance(self)

    def copy(self):
        return dataclasses.replace(self)


@dataclass
class UnsavedSettings(SettingsMirror):
    """Every persisted setting, staged in memory."""

    # ID settings
    public_key: Optional[PublicKey]
    log_n: int
    login_at_startup: bool

    # Network settings
    offline: bool
    load_avatars: bool
    load_media: bool
    check_nip05: bool
    automatically_fetch_metadata: bool
    relay_connection_requires_approval: bool
    relay_auth_requires_approval: bool

    # Relay settings
    num_relays_per_person: int
    max_relays: int

    # Feed settings
    load_more_count: int

    # Event selection
    reposts: bool
    show_long_form: bool
    show_mentions: bool
    direct_messages: bool
    future_allowance_secs: int

    # Event content settings
    hide_mutes_entirely: bool
    reactions: bool
    enable_zap_receipts: bool
    show_media: bool
    approve_content_warning: bool
    show_deleted_events: bool
    avoid_spam_on_unsafe_relays: bool
    apply_spam_filter_on_incoming_events: bool
    apply_spam_filter_on_threads: bool
    apply_spam_filter_on_inbox: bool
    apply_spam_filter_on_global: bool

    # Posting settings
    pow: int
    set_client_tag: bool
    set_user_agent: bool
    delegatee_tag: str

    # UI settings
    max_fps: int
    recompute_feed_periodically: bool
    feed_recompute_interval_ms: int
    feed_thread_scroll_to_main_event: bool
    theme_variant: str
    dark_mode: bool
    follow_os_dark_mode: bool
    override_dpi: Optional[int]
    highlight_unread_events: bool
    feed_newest_at_bottom: bool
    posting_area_at_top: bool
    status_bar: bool
    image_resize_algorithm: str
    inertial_scrolling: bool
    mouse_acceleration: float
    wgpu_renderer: bool

    # Staletime settings
    relay_list_becomes_stale_minutes: int
    metadata_becomes_stale_minutes: int
    nip05_becomes_stale_if_valid_hours: int
    nip05_becomes_stale_if_invalid_minutes: int
    avatar_becomes_stale_hours: int
    media_becomes_stale_hours: int

    # Websocket settings
    max_websocket_message_size_kb: int
    max_websocket_frame_size_kb: int
    websocket_accept_unmasked_frames: bool
    websocket_connect_timeout_sec: int
    websocket_ping_frequency_sec: int

    # HTTP settings
    fetcher_connect_timeout_sec: int
    fetcher_timeout_sec: int
    fetcher_max_requests_per_host: int
    fetcher_host_exclusion_on_low_error_secs: int
    fetcher_host_exclusion_on_med_error_secs: int
    fetcher_host_exclusion_on_high_error_secs: int

    # Database settings
    prune_period_days: int
    cache_prune_period_days: int

    blossom_servers: str
