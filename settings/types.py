"""
Domain value types used by setting keys.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PublicKey:
    """A 32-byte x-only public key, shown and stored as lowercase hex."""

    data: bytes

    def __post_init__(self):
        if not isinstance(self.data, (bytes, bytearray)):
            raise TypeError(f"PublicKey data must be bytes, got {type(self.data).__name__}")
        if len(self.data) != 32:
            raise ValueError(f"PublicKey must be 32 bytes, got {len(self.data)}")
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def from_hex(cls, text: str) -> "PublicKey":
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            raise ValueError(f"Invalid public key hex: {text!r}")
        return cls(raw)

    def as_hex(self) -> str:
        return self.data.hex()

    def __str__(self):
        return self.as_hex()

    def __repr__(self):
        return f"PublicKey({self.as_hex()!r})"
