"""Tests for reference frame resolution."""
import numpy as np
import pytest

from nbody_view.core.frames import (
    BARYCENTRIC,
    FIXED,
    BodyFrame,
    cycle_frame,
    frame_label,
    frame_position,
    frame_trajectory,
    resolve_frame,
)

from conftest import advance


class TestResolveFrame:
    """Tests for resolve_frame and its halves."""

    def test_fixed_frame(self, three_bodies, barycenter):
        """Fixed frame has a zero basis position and no basis trajectory."""
        advance(three_bodies, barycenter, [(1, 0, 0), (0, 2, 0), (0, 0, 3)])
        basis = resolve_frame(FIXED, three_bodies, barycenter)

        np.testing.assert_array_equal(basis.position, np.zeros(3))
        assert basis.trajectory is None

    def test_barycentric_frame(self, three_bodies, barycenter):
        """Barycentric frame follows the barycenter's position and trajectory."""
        basis = resolve_frame(BARYCENTRIC, three_bodies, barycenter)

        np.testing.assert_array_equal(basis.position, barycenter.position)
        assert basis.trajectory is barycenter.trajectory

    def test_body_frame(self, three_bodies, barycenter):
        """Body frame uses exactly the indexed body's state."""
        basis = resolve_frame(BodyFrame(1), three_bodies, barycenter)

        np.testing.assert_array_equal(basis.position, three_bodies[1].position)
        assert basis.trajectory is three_bodies[1].trajectory

    def test_basis_position_is_a_snapshot(self, three_bodies, barycenter):
        """The basis position does not alias the body's live state."""
        position = frame_position(BodyFrame(0), three_bodies, barycenter)
        position[0] = 123.0

        assert three_bodies[0].position[0] == 1.0

    def test_invalid_body_index(self, three_bodies, barycenter):
        """Out-of-range body indices fail fast."""
        with pytest.raises(IndexError):
            frame_position(BodyFrame(3), three_bodies, barycenter)
        with pytest.raises(IndexError):
            frame_trajectory(BodyFrame(-1), three_bodies, barycenter)

    def test_unknown_frame(self, three_bodies, barycenter):
        """Values that are not frame variants are rejected."""
        with pytest.raises(TypeError):
            resolve_frame("barycenter", three_bodies, barycenter)


class TestFrameLabel:
    """Tests for frame_label."""

    def test_labels(self, three_bodies):
        """Each variant has its display label."""
        assert frame_label(FIXED, three_bodies) == "fixed"
        assert frame_label(BARYCENTRIC, three_bodies) == "barycenter"
        assert frame_label(BodyFrame(2), three_bodies) == "c"


class TestCycleFrame:
    """Tests for cycle_frame."""

    def test_full_cycle(self):
        """Cycling walks fixed, barycenter, each body, then back to fixed."""
        frame = FIXED
        seen = []
        for _ in range(5):
            frame = cycle_frame(frame, 3)
            seen.append(frame)

        assert seen == [BARYCENTRIC, BodyFrame(0), BodyFrame(1), BodyFrame(2), FIXED]

    def test_no_bodies(self):
        """Without bodies the barycenter wraps straight back to fixed."""
        assert cycle_frame(BARYCENTRIC, 0) == FIXED
