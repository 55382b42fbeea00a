"""Classify caller-supplied identifiers as addresses or symbol names."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

_DECIMAL = re.compile(r"[0-9]+")


class IdentifierKind(str, Enum):
    ADDRESS = "address"
    NAME = "name"


@dataclass(frozen=True, slots=True)
class Identifier:
    """An identifier after classification."""

    kind: IdentifierKind
    normalized: str

    @property
    def is_address(self) -> bool:
        return self.kind is IdentifierKind.ADDRESS

    def param(self, name_key: str = "name") -> Tuple[str, str]:
        """Return the ``(query key, value)`` pair for this identifier.

        Addresses always travel as ``address``; names use *name_key*, which
        differs per endpoint (``name``, ``functionName``).
        """

        key = "address" if self.is_address else name_key
        return key, self.normalized


def classify(identifier: str) -> Identifier:
    """Decide whether *identifier* denotes an address or a name.

    Surrounding whitespace is ignored. ``0x``-prefixed text (any case) and
    plain ASCII decimal digits are addresses; everything else is a name.
    """

    text = identifier.strip()
    if text.lower().startswith("0x") or _DECIMAL.fullmatch(text):
        return Identifier(IdentifierKind.ADDRESS, text)
    return Identifier(IdentifierKind.NAME, text)


__all__ = ["Identifier", "IdentifierKind", "classify"]
