"""Tests for the collapse frontier."""

import random

from mosaic.generation.wfc import Frontier


class TestFrontier:
    def test_starts_with_given_indices(self):
        frontier = Frontier(range(4))
        assert len(frontier) == 4
        assert sorted(frontier) == [0, 1, 2, 3]

    def test_add_ignores_duplicates(self):
        frontier = Frontier([1, 2])
        frontier.add(2)
        assert len(frontier) == 2

    def test_discard(self):
        frontier = Frontier([5, 6, 7])

        assert frontier.discard(5) is True
        assert frontier.discard(5) is False
        assert 5 not in frontier
        assert sorted(frontier) == [6, 7]

    def test_discard_last_member(self):
        frontier = Frontier([3])
        frontier.discard(3)
        assert not frontier
        assert len(frontier) == 0

    def test_iteration_survives_discards(self):
        """Iterating takes a snapshot, so members can be discarded meanwhile."""
        frontier = Frontier(range(6))
        for index in frontier:
            frontier.discard(index)
        assert not frontier

    def test_sample_returns_member(self):
        frontier = Frontier([10, 20, 30])
        rng = random.Random(3)
        for _ in range(50):
            assert frontier.sample(rng) in frontier

    def test_sample_is_deterministic_for_a_seed(self):
        """Same seed and same removals give the same picks."""

        def picks(seed):
            frontier = Frontier(range(25))
            rng = random.Random(seed)
            result = []
            while frontier:
                index = frontier.sample(rng)
                frontier.discard(index)
                result.append(index)
            return result

        first = picks(99)
        assert first == picks(99)
        assert sorted(first) == list(range(25))

    def test_repr_is_sorted(self):
        assert repr(Frontier([3, 1, 2])) == "Frontier([1, 2, 3])"
