"""Unit tests for CandidateQueue."""

import pytest

from swipe_trader.catalog.queue import CandidateQueue

from conftest import make_candidate


class TestCandidateQueue:
    def test_starts_at_zero(self, queue, three_candidates):
        assert queue.cursor == 0
        assert len(queue) == 3
        assert queue.current() == three_candidates[0]
        assert queue.remaining == 3

    def test_cursor_never_exceeds_length(self, queue):
        seen = []
        for _ in range(10):
            seen.append(queue.advance())

        assert seen == [1, 2, 3, 3, 3, 3, 3, 3, 3, 3]
        assert seen == sorted(seen)
        assert queue.exhausted
        assert queue.current() is None
        assert queue.remaining == 0

    def test_empty_queue_is_exhausted(self):
        queue = CandidateQueue([])
        assert queue.exhausted
        assert queue.current() is None
        assert queue.advance() == 0

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError):
            CandidateQueue([make_candidate(1), make_candidate(2, id="tok-1")])

    def test_candidates_are_a_snapshot(self, three_candidates):
        queue = CandidateQueue(three_candidates)
        three_candidates.clear()
        assert len(queue) == 3
        assert isinstance(queue.candidates, tuple)
