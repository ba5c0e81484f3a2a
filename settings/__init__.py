"""
Staged settings mirror.

REGISTRY lists every persisted setting key. SettingsCatalog reads and writes
them one at a time. UnsavedSettings stages a full copy in memory and saves
it back atomically.
"""

from settings.catalog import SettingsCatalog
from settings.commit import SaveReport, save
from settings.keys import REGISTRY
from settings.registry import RegistryError, SettingDef, SettingRegistry
from settings.snapshot import SettingsMirror, UnsavedSettings
from settings.types import PublicKey

__all__ = [
    "REGISTRY", "RegistryError", "SettingDef", "SettingRegistry",
    "SettingsCatalog", "SaveReport", "save",
    "SettingsMirror", "UnsavedSettings", "PublicKey",
]
