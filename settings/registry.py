"""
Setting Registry: the declarative table of every persisted setting key.

Every key the store knows about is defined here exactly once, in a fixed
order. Construct-with-defaults, load, and save all iterate this table, and
the staged snapshot class is checked against it when it is defined.

SettingDef captures:
  A. Core type (name, python_type, nullable, default / default_from)
  B. Constraints (width, enum, min/max)
  C. Display (description, category, display_name)
"""

import dataclasses
import math
from typing import Any, Optional, get_args, get_origin, get_type_hints


# Sentinel for "no default provided"
_MISSING = object()

# Inclusive bounds for the unsigned integer widths settings are declared with
INT_WIDTHS = {
    "u8": (0, 2**8 - 1),
    "u16": (0, 2**16 - 1),
    "u32": (0, 2**32 - 1),
    "u64": (0, 2**64 - 1),
    "usize": (0, 2**64 - 1),
}


class RegistryError(Exception):
    """Raised when a setting definition or snapshot class validation fails."""


@dataclasses.dataclass
class SettingDef:
    """Canonical definition of a single setting key."""

    # ── A. Core Type ──────────────────────────────────────────────
    name: str
    python_type: type
    nullable: bool = False
    default: Any = _MISSING
    default_from: Optional[str] = None

    # ── B. Constraints ────────────────────────────────────────────
    width: Optional[str] = None
    enum: Optional[list] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    # ── C. Display ────────────────────────────────────────────────
    description: str = ""
    category: Optional[str] = None
    display_name: Optional[str] = None


class SettingRegistry:
    """
    Ordered catalog of setting keys.

    Keys are kept in definition order; that order is the order in which a
    snapshot is written back to the store.
    """

    def __init__(self):
        self._settings: dict[str, SettingDef] = {}
        self._snapshots: list = []

    # ── Define keys ───────────────────────────────────────────────

    def define(self, name: str, python_type: type, **kwargs) -> SettingDef:
        """Register a new setting key.

        Raises RegistryError if:
        - the key is already defined
        - description is missing
        - neither default nor default_from is given, or both are
        - default_from names an unknown key or one of a different type
        - width is unknown or used on a non-int key
        - the default violates the key's own constraints
        """
        if name in self._settings:
            raise RegistryError(f"Setting '{name}' is already defined")

        if not kwargs.get("description"):
            raise RegistryError(f"Setting '{name}': 'description' is required")

        has_default = "default" in kwargs
        default_from = kwargs.get("default_from")
        if has_default == (default_from is not None):
            raise RegistryError(
                f"Setting '{name}': exactly one of 'default' or "
                f"'default_from' is required"
            )

        if default_from is not None:
            source = self._settings.get(default_from)
            if source is None:
                raise RegistryError(
                    f"Setting '{name}': default_from '{default_from}' "
                    f"is not defined"
                )
            if (source.python_type is not python_type
                    or source.nullable != kwargs.get("nullable", False)):
                raise RegistryError(
                    f"Setting '{name}': default_from '{default_from}' "
                    f"has a different type"
                )

        width = kwargs.get("width")
        if width is not None:
            if width not in INT_WIDTHS:
                raise RegistryError(
                    f"Setting '{name}': unknown width '{width}'"
                )
            if python_type is not int:
                raise RegistryError(
                    f"Setting '{name}': width only applies to int settings"
                )
            lo, hi = INT_WIDTHS[width]
            kwargs.setdefault("min_value", lo)
            kwargs.setdefault("max_value", hi)

        setting = SettingDef(name=name, python_type=python_type, **kwargs)
        self._settings[name] = setting

        errors = self.validate_value(name, self.default(name))
        if errors:
            del self._settings[name]
            raise RegistryError(
                f"Setting '{name}': invalid default: {'; '.join(errors)}"
            )
        return setting

    # ── Lookup ────────────────────────────────────────────────────

    def get(self, name: str) -> SettingDef:
        """Get a setting definition by name.

        Raises RegistryError if not found.
        """
        if name not in self._settings:
            raise RegistryError(f"Setting '{name}' is not defined in registry")
        return self._settings[name]

    def has(self, name: str) -> bool:
        return name in self._settings

    def names(self) -> list:
        """All key names, in definition order."""
        return list(self._settings)

    def all_settings(self) -> dict:
        """Return a copy of all defined settings."""
        return dict(self._settings)

    def in_category(self, category: str) -> list:
        return [s for s in self._settings.values() if s.category == category]

    def default(self, name: str):
        """The default value of a key, following default_from links."""
        setting = self.get(name)
        if setting.default_from is not None:
            return self.default(setting.default_from)
        return setting.default

    def __len__(self):
        return len(self._settings)

    def __iter__(self):
        return iter(self._settings.values())

    # ── Value validation ──────────────────────────────────────────

    def validate_value(self, name: str, value) -> list:
        """Check a value against a key's type and constraints.

        Returns list of error strings (empty = valid).
        """
        setting = self.get(name)
        errors = []

        if value is None:
            if not setting.nullable:
                errors.append(f"{name}: None not allowed (setting is not nullable)")
            return errors

        if not _is_instance(value, setting.python_type):
            errors.append(
                f"{name}: expected {setting.python_type.__name__}, "
                f"got {type(value).__name__}"
            )
            return errors

        if isinstance(value, float) and not math.isfinite(value):
            errors.append(f"{name}: value {value} is not a finite number")
            return errors

        if setting.enum is not None and value not in setting.enum:
            errors.append(
                f"{name}: value {value!r} not in allowed values {setting.enum}"
            )
        if setting.min_value is not None and value < setting.min_value:
            errors.append(f"{name}: value {value} < min_value {setting.min_value}")
        if setting.max_value is not None and value > setting.max_value:
            errors.append(f"{name}: value {value} > max_value {setting.max_value}")

        return errors

    # ── Snapshot class validation ─────────────────────────────────

    def validate_snapshot_class(self, cls) -> None:
        """Check that cls has exactly one field per key, with matching types.

        Called by SettingsMirror.__init_subclass__ (which fires BEFORE
        @dataclass), so annotations are read rather than dataclass fields.

        Checks:
        - Every field names a defined key
        - Every defined key has a field
        - Field type (Optional unwrapped) matches the key's python_type
        - Optional fields are exactly the nullable keys
        """
        try:
            hints = get_type_hints(cls)
        except Exception:
            hints = getattr(cls, '__annotations__', {})

        fields = {k: v for k, v in hints.items() if not k.startswith('_')}

        for field_name, field_type in fields.items():
            if field_name not in self._settings:
                raise RegistryError(
                    f"{cls.__name__}.{field_name}: no setting key "
                    f"'{field_name}' in the registry"
                )
            setting = self._settings[field_name]

            optional = False
            if get_origin(field_type) is not None:
                args = get_args(field_type)
                non_none = [a for a in args if a is not type(None)]
                optional = len(non_none) != len(args)
                if non_none:
                    field_type = non_none[0]

            if field_type is not setting.python_type:
                raise RegistryError(
                    f"{cls.__name__}.{field_name}: type "
                    f"{getattr(field_type, '__name__', field_type)} does not "
                    f"match registry type {setting.python_type.__name__}"
                )
            if optional != setting.nullable:
                raise RegistryError(
                    f"{cls.__name__}.{field_name}: Optional annotation does "
                    f"not match nullable={setting.nullable}"
                )

        missing = [name for name in self._settings if name not in fields]
        if missing:
            raise RegistryError(
                f"{cls.__name__} has no field for setting keys: "
                f"{', '.join(missing)}"
            )

        self._snapshots.append(cls)

    def validate_instance(self, obj) -> list:
        """Validate every field of a snapshot instance. Returns error strings."""
        errors = []
        for name in self._settings:
            errors.extend(self.validate_value(name, getattr(obj, name)))
        return errors

    def snapshots(self) -> list:
        """Return all validated snapshot classes."""
        return list(self._snapshots)


def _is_instance(value, python_type) -> bool:
    # bool is an int subclass; keep the two apart
    if python_type is bool:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if python_type is float:
        return isinstance(value, (int, float))
    return isinstance(value, python_type)
