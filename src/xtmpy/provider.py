from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .tokens import TokenKind


@dataclass(frozen=True, slots=True)
class Claim:
    """A provider's claim on ``src[offset:end]``."""

    kind: TokenKind  # xtlang_type, typed_name, type_annotation or generic_identifier
    end: int


class TokenProvider(Protocol):
    """Decides context-sensitive tokens before default atom classification.

    ``try_claim`` is offered every position where a datum may start, and the
    end of every accepted ``typed_name`` claim. It must be deterministic and
    free of side effects; returning None declines the position.
    """

    def try_claim(self, src: str, offset: int) -> Claim | None: ...
