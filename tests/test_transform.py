"""Tests for the render-space transform engine."""
import numpy as np
import pytest

from nbody_view.core.frames import BARYCENTRIC, FIXED, BodyFrame
from nbody_view.core.model import Barycenter
from nbody_view.core.settings import Settings
from nbody_view.core.timekeeping import SimTimer
from nbody_view.render.rotation import UP, rotate, shortest_arc
from nbody_view.render.scene import (
    IDENTITY_QUATERNION,
    SceneObject,
    make_ribbons,
    make_spheres,
)
from nbody_view.render.transform import (
    RenderEngine,
    TickRejected,
    marker_orientations,
    update_body_object,
    update_ribbons,
    update_spheres,
)

from conftest import advance, make_body


class StubCamera:
    def __init__(self, zoom=1.0, top=400.0, bottom=-400.0):
        self.zoom = zoom
        self.top = top
        self.bottom = bottom


def _settings(frame=FIXED, scale=1.0):
    return Settings(scale=scale, speed=60.0, samples=1, frame=frame)


def _walk(bodies, barycenter):
    advance(bodies, barycenter, [(1, 0, 0), (0, 1, 0), (0, 0, 1)])
    advance(bodies, barycenter, [(2, 0, 0), (0, -1, 0), (1, 1, 0)])
    advance(bodies, barycenter, [(0, 3, 0), (1, 0, 0), (0, 0, -2)])


class TestShortestArc:
    """Tests for the quaternion helpers."""

    @pytest.mark.parametrize(
        "target",
        [(1.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0), (0.0, -1.0, 0.0), (0.6, -0.8, 0.0)],
    )
    def test_rotates_up_onto_target(self, target):
        """The quaternion maps +Y onto the target, including the opposite direction."""
        q = shortest_arc(UP, np.array(target))

        assert np.linalg.norm(q) == pytest.approx(1.0)
        np.testing.assert_allclose(rotate(q, UP), target, atol=1e-12)

    def test_vectorized(self):
        """A stack of targets yields a stack of quaternions."""
        targets = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        q = shortest_arc(UP, targets)

        assert q.shape == (2, 4)
        np.testing.assert_allclose(rotate(q, UP), targets, atol=1e-12)


class TestBodyProjector:
    """Tests for update_body_object and update_spheres."""

    def test_scaled_offset_from_basis(self, three_bodies, barycenter):
        """Render position is (position - basis) * scale."""
        obj = SceneObject()
        update_body_object(0, three_bodies, barycenter, obj, _settings(BodyFrame(1), scale=2.0))

        expected = (three_bodies[0].position - three_bodies[1].position) * 2.0
        np.testing.assert_allclose(obj.position, expected)

    def test_body_relative_to_itself_is_origin(self, three_bodies, barycenter):
        """A body rendered in its own frame sits at the origin."""
        obj = SceneObject(position=np.ones(3))
        update_body_object(2, three_bodies, barycenter, obj, _settings(BodyFrame(2), scale=1e-3))

        np.testing.assert_array_equal(obj.position, np.zeros(3))

    def test_spheres_put_barycenter_first(self, three_bodies, barycenter):
        """Sphere 0 is the barycenter, then bodies in list order."""
        spheres = make_spheres(three_bodies)
        update_spheres(three_bodies, barycenter, spheres, _settings(scale=0.5))

        np.testing.assert_allclose(spheres[0].position, barycenter.position * 0.5)
        for sphere, body in zip(spheres[1:], three_bodies):
            np.testing.assert_allclose(sphere.position, body.position * 0.5)

    def test_invalid_scale_leaves_object_untouched(self, three_bodies, barycenter):
        """A non-positive scale is refused before writing."""
        obj = SceneObject(position=np.array([9.0, 9.0, 9.0]))

        with pytest.raises(ValueError):
            update_body_object(0, three_bodies, barycenter, obj, _settings(scale=0.0))
        np.testing.assert_array_equal(obj.position, [9.0, 9.0, 9.0])


class TestRibbonUpdater:
    """Tests for update_ribbons and marker_orientations."""

    def test_fixed_frame_uses_raw_samples(self, three_bodies, barycenter):
        """Without a frame trajectory markers are the scaled raw samples."""
        _walk(three_bodies, barycenter)
        ribbons = make_ribbons(three_bodies, barycenter)
        update_ribbons(three_bodies, barycenter, ribbons, _settings(scale=3.0))

        np.testing.assert_allclose(ribbons[0].positions, barycenter.trajectory.as_array() * 3.0)
        for ribbon, body in zip(ribbons[1:], three_bodies):
            np.testing.assert_allclose(ribbon.positions, body.trajectory.as_array() * 3.0)

    @pytest.mark.parametrize("frame", [BARYCENTRIC, BodyFrame(0), BodyFrame(2)])
    def test_frame_samples_are_index_aligned(self, three_bodies, barycenter, frame):
        """Marker k is entity sample k minus frame sample k, for every entity."""
        _walk(three_bodies, barycenter)
        ribbons = make_ribbons(three_bodies, barycenter)
        update_ribbons(three_bodies, barycenter, ribbons, _settings(frame))

        if frame == BARYCENTRIC:
            frame_trajectory = barycenter.trajectory
        else:
            frame_trajectory = three_bodies[frame.index].trajectory
        entities = [barycenter, *three_bodies]
        for entity, ribbon in zip(entities, ribbons):
            for k, marker in enumerate(ribbon):
                expected = entity.trajectory.get(k) - frame_trajectory.get(k)
                np.testing.assert_allclose(marker.position, expected)

    def test_markers_face_backwards_along_path(self):
        """Each marker's up axis points from it towards the previous marker."""
        positions = np.array([[0.0, 2.0, 0.0], [3.0, 2.0, 0.0], [3.0, 2.0, -4.0]])
        previous = np.tile(IDENTITY_QUATERNION, (3, 1))

        orientations = marker_orientations(positions, previous)
        facing = rotate(orientations, UP)

        np.testing.assert_allclose(facing[0], [0.0, -1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(facing[1], [-1.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(facing[2], [0.0, 0.0, 1.0], atol=1e-12)

    def test_zero_length_segment_keeps_previous_orientation(self):
        """Coinciding markers keep whatever orientation they had."""
        positions = np.array([[1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        kept = shortest_arc(UP, np.array([0.0, 0.0, 1.0]))
        previous = np.array([IDENTITY_QUATERNION, kept])

        orientations = marker_orientations(positions, previous)

        np.testing.assert_allclose(orientations[1], kept)
        assert np.all(np.isfinite(orientations))

    def test_marker_is_a_view(self):
        """Markers read and write the ribbon's own arrays."""
        ribbon = make_ribbons([], Barycenter.of([make_body("a", (1.0, 0.0, 0.0))], 3))[0]
        q = shortest_arc(UP, np.array([1.0, 0.0, 0.0]))

        ribbon[2].set_orientation(q)
        ribbon.positions[1] = [4.0, 5.0, 6.0]

        np.testing.assert_allclose(ribbon.orientations[2], q)
        np.testing.assert_array_equal(ribbon[1].position, [4.0, 5.0, 6.0])
        with pytest.raises(IndexError):
            ribbon[3]

    def test_stationary_history_stays_finite(self, three_bodies, barycenter):
        """A freshly created, unmoved trajectory produces no NaN orientations."""
        ribbons = make_ribbons(three_bodies, barycenter)
        update_ribbons(three_bodies, barycenter, ribbons, _settings(BARYCENTRIC))

        for ribbon in ribbons:
            assert np.all(np.isfinite(ribbon.orientations))

    def test_non_finite_sample_rejects_tick(self, three_bodies, barycenter):
        """A NaN in any trajectory aborts the update before any ribbon is written."""
        _walk(three_bodies, barycenter)
        ribbons = make_ribbons(three_bodies, barycenter)
        update_ribbons(three_bodies, barycenter, ribbons, _settings())
        snapshot = [ribbon.positions.copy() for ribbon in ribbons]

        three_bodies[2].trajectory.append(np.array([np.nan, 0.0, 0.0]))
        with pytest.raises(TickRejected):
            update_ribbons(three_bodies, barycenter, ribbons, _settings())

        for ribbon, before in zip(ribbons, snapshot):
            np.testing.assert_array_equal(ribbon.positions, before)


class TestRenderEngine:
    """Tests for the per-tick RenderEngine."""

    def test_barycentric_end_to_end(self):
        """Equal masses in the barycentric frame render at position minus mean."""
        bodies = [
            make_body("a", (3.0, 0.0, 0.0)),
            make_body("b", (0.0, 6.0, 0.0)),
            make_body("c", (0.0, 0.0, -9.0)),
        ]
        barycenter = Barycenter.of(bodies, 4)
        engine = RenderEngine(bodies, barycenter, StubCamera())
        settings = _settings(BARYCENTRIC, scale=1.0)

        telemetry = engine.update(settings, SimTimer())

        mean = np.mean([body.position for body in bodies], axis=0)
        np.testing.assert_allclose(engine.spheres[0].position, np.zeros(3), atol=1e-12)
        for sphere, body in zip(engine.spheres[1:], bodies):
            np.testing.assert_allclose(sphere.position, body.position - mean)
        assert telemetry.frame == "barycenter"

    def test_rejected_tick_keeps_scene(self, three_bodies, barycenter):
        """An invalid frame index rejects the tick without moving anything."""
        engine = RenderEngine(three_bodies, barycenter, StubCamera())
        engine.update(_settings(FIXED), SimTimer())
        before = [sphere.position.copy() for sphere in engine.spheres]
        overlay_before = engine.overlay_scale

        with pytest.raises(TickRejected):
            engine.update(_settings(BodyFrame(7)), SimTimer())

        for sphere, position in zip(engine.spheres, before):
            np.testing.assert_array_equal(sphere.position, position)
        assert engine.overlay_scale == overlay_before

    def test_zero_zoom_rejects_tick(self, three_bodies, barycenter):
        """A degenerate camera zoom is reported as a rejected tick."""
        engine = RenderEngine(three_bodies, barycenter, StubCamera(zoom=0.0))

        with pytest.raises(TickRejected):
            engine.update(_settings(), SimTimer())

    def test_overlay_tracks_zoom(self, three_bodies, barycenter):
        """Zooming in shrinks the axis overlay by the zoom ratio."""
        camera = StubCamera()
        engine = RenderEngine(three_bodies, barycenter, camera)
        engine.update(_settings(), SimTimer())
        length = engine.axes[0].geometry_scale

        camera.zoom = 4.0
        engine.update(_settings(), SimTimer())

        assert engine.axes[0].geometry_scale == pytest.approx(length / 4.0)
        assert engine.overlay_scale == pytest.approx(0.25)

    def test_flat_viewport_rejects_tick(self, three_bodies, barycenter):
        """A camera with no vertical extent rejects the tick and leaves the scene intact."""
        camera = StubCamera()
        engine = RenderEngine(three_bodies, barycenter, camera)
        engine.update(_settings(), SimTimer())
        spheres_before = [sphere.position.copy() for sphere in engine.spheres]
        axes_before = [(axis.geometry_scale, axis.position.copy()) for axis in engine.axes]

        camera.top = camera.bottom = 0.0
        advance(three_bodies, barycenter, [(1, 0, 0), (0, 1, 0), (0, 0, 1)])
        with pytest.raises(TickRejected):
            engine.update(_settings(), SimTimer())

        assert engine.overlay_scale == pytest.approx(1.0)
        for sphere, position in zip(engine.spheres, spheres_before):
            np.testing.assert_array_equal(sphere.position, position)
        for axis, (geometry_scale, position) in zip(engine.axes, axes_before):
            assert axis.geometry_scale == geometry_scale
            np.testing.assert_array_equal(axis.position, position)

    def test_recovers_after_flat_viewport(self, three_bodies, barycenter):
        """Once the viewport is restored the next tick commits normally."""
        camera = StubCamera(top=0.0, bottom=0.0)
        engine = RenderEngine(three_bodies, barycenter, camera)
        with pytest.raises(TickRejected):
            engine.update(_settings(), SimTimer())

        camera.top, camera.bottom = 400.0, -400.0
        camera.zoom = 2.0
        engine.update(_settings(), SimTimer())

        assert engine.overlay_scale == pytest.approx(0.5)
        assert engine.axes[0].geometry_scale == pytest.approx(0.5)
        np.testing.assert_allclose(engine.spheres[1].position, three_bodies[0].position)
