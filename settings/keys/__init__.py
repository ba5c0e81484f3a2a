"""
Setting key catalog: the single source of truth for every persisted setting.

Exports REGISTRY, the global SettingRegistry populated with all keys.
Module import order is key order, which is the order a snapshot is saved in.
"""

from settings.registry import SettingRegistry

REGISTRY = SettingRegistry()

# Import domain modules to populate the registry
from settings.keys import identity    # noqa: F401, E402
from settings.keys import feed        # noqa: F401, E402
from settings.keys import interface   # noqa: F401, E402
from settings.keys import limits      # noqa: F401, E402
