"""Undo/redo log of committed mask states.

Snapshots are stored bit-packed: one bit per pixel per layer, which
keeps a long editing session's history small while unpacking restores
the masks exactly.
"""

from dataclasses import dataclass

import numpy as np

from receiptart.utils.logger import get_logger

from .masks import MaskPair

logger = get_logger(__name__)


def _pack(mask: np.ndarray) -> bytes:
    return np.packbits(mask, axis=None).tobytes()


def _unpack(data: bytes, shape: tuple[int, int]) -> np.ndarray:
    count = shape[0] * shape[1]
    bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8), count=count)
    return bits.reshape(shape).astype(bool)


@dataclass(frozen=True)
class HistorySnapshot:
    """Immutable pair of packed sensitive and price masks."""

    sensitive: bytes
    price: bytes
    shape: tuple[int, int]

    @classmethod
    def capture(cls, masks: MaskPair) -> "HistorySnapshot":
        return cls(
            sensitive=_pack(masks.sensitive),
            price=_pack(masks.price),
            shape=masks.shape,
        )

    def restore(self) -> MaskPair:
        """Unpack the snapshot into a fresh, independently mutable mask pair."""
        return MaskPair(
            sensitive=_unpack(self.sensitive, self.shape),
            price=_unpack(self.price, self.shape),
        )


class MaskHistory:
    """Linear undo/redo history with a cursor.

    The cursor always points at a valid snapshot once the history has
    been reset with an initial state. Committing after an undo discards
    every snapshot past the cursor.
    """

    def __init__(self) -> None:
        self._snapshots: list[HistorySnapshot] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self._cursor < len(self._snapshots) - 1

    def reset(self, masks: MaskPair) -> None:
        """Drop all history and record ``masks`` as the only state."""
        self._snapshots = [HistorySnapshot.capture(masks)]
        self._cursor = 0

    def commit(self, masks: MaskPair) -> None:
        """Append the current state, truncating any redo branch."""
        dropped = len(self._snapshots) - (self._cursor + 1)
        del self._snapshots[self._cursor + 1 :]
        self._snapshots.append(HistorySnapshot.capture(masks))
        self._cursor = len(self._snapshots) - 1
        if dropped:
            logger.debug("Discarded %d redo states", dropped)
        logger.debug("Committed history step %d", self._cursor)

    def undo(self) -> MaskPair | None:
        """Step back one snapshot, or return ``None`` at the oldest state."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._snapshots[self._cursor].restore()

    def redo(self) -> MaskPair | None:
        """Step forward one snapshot, or return ``None`` at the newest state."""
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._snapshots[self._cursor].restore()
