"""tilestack/errors.py: the single error type raised by the tile compiler.

Structural failures (a layer stack whose Z-indices are not a dense sequence)
are reported to the world-load boundary. Invariant violations mean the
compiler itself produced inconsistent geometry and always abort.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    INDEXES_NOT_A_SEQUENCE = "indexes_not_a_sequence"
    INVARIANT_VIOLATION = "invariant_violation"


class TileCompileError(ValueError):
    """Compilation failure tagged with an ErrorKind.

    ``index`` is set for INDEXES_NOT_A_SEQUENCE and names the missing or
    duplicated Z-index.
    """

    def __init__(self, kind: ErrorKind, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.index = index

    @property
    def recoverable(self) -> bool:
        return self.kind is ErrorKind.INDEXES_NOT_A_SEQUENCE


def indexes_not_a_sequence(message: str, index: int) -> TileCompileError:
    return TileCompileError(ErrorKind.INDEXES_NOT_A_SEQUENCE, message, index=index)


def invariant_violation(message: str) -> TileCompileError:
    return TileCompileError(ErrorKind.INVARIANT_VIOLATION, message)
