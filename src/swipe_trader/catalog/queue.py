"""Cursor-addressed candidate queue."""

from typing import Iterable, Optional, Tuple

from ..core.models import Candidate


class CandidateQueue:
    """Finite, non-restartable sequence of candidates for one browsing session.

    The cursor only moves forward and never passes ``len(queue)``; once it
    reaches the end the queue stays exhausted.
    """

    def __init__(self, candidates: Iterable[Candidate], source: str = ""):
        self._candidates: Tuple[Candidate, ...] = tuple(candidates)
        ids = [c.id for c in self._candidates]
        if len(set(ids)) != len(ids):
            raise ValueError("Candidate ids must be unique within a queue")
        self.source = source
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self):
        return iter(self._candidates)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def candidates(self) -> Tuple[Candidate, ...]:
        return self._candidates

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._candidates)

    @property
    def remaining(self) -> int:
        return len(self._candidates) - self._cursor

    def current(self) -> Optional[Candidate]:
        """Candidate at the cursor, or None once exhausted."""
        if self.exhausted:
            return None
        return self._candidates[self._cursor]

    def advance(self) -> int:
        """Move past the current candidate. No-op once exhausted."""
        if not self.exhausted:
            self._cursor += 1
        return self._cursor

    def __repr__(self) -> str:
        return f"CandidateQueue(source={self.source!r}, cursor={self._cursor}, length={len(self)})"
