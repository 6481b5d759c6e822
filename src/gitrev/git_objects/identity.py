import binascii
import re
from dataclasses import dataclass

from gitrev.errors import InvalidFormat

_HEX_RE = re.compile(r"[0-9a-fA-F]{40}")


def is_full_hex(text: str) -> bool:
    return bool(_HEX_RE.fullmatch(text))


@dataclass(frozen=True)
class ObjectId:
    """SHA-1 of a git object, 20 raw bytes."""

    raw: bytes

    def __post_init__(self):
        if len(self.raw) != 20:
            raise InvalidFormat(f"object id must be 20 bytes, got {len(self.raw)}")

    @classmethod
    def from_hex(cls, text: str) -> "ObjectId":
        if not isinstance(text, str) or not is_full_hex(text):
            raise InvalidFormat(f"Invalid Object ID: {text!r}")
        return cls(binascii.unhexlify(text.lower()))

    def __str__(self) -> str:
        return binascii.hexlify(self.raw).decode()

    def __repr__(self) -> str:
        return f"ObjectId({str(self)!r})"

    def short(self, length: int = 7) -> str:
        return str(self)[:length]

    def matches(self, prefix: str) -> bool:
        """True when ``prefix`` is an abbreviation of this id."""
        prefix = prefix.lower()
        if not prefix or len(prefix) > 40 or not all(c in "0123456789abcdef" for c in prefix):
            return False
        return str(self).startswith(prefix)


def parse_id(text: str) -> ObjectId:
    return ObjectId.from_hex(text)
