"""Tests for runtime settings."""
import pytest

from nbody_view.core.config import RENDER_CFG, SIMULATION_CFG
from nbody_view.core.frames import FIXED
from nbody_view.core.settings import Settings


class TestSettings:
    """Tests for Settings."""

    def test_from_config(self):
        """Defaults come from the simulation and render configs."""
        settings = Settings.from_config()

        assert settings.scale == RENDER_CFG.default_scale
        assert settings.samples == SIMULATION_CFG.samples_per_frame
        assert settings.frame == FIXED

    def test_step_size(self):
        """The integration step is the per-frame duration split over the samples."""
        assert Settings(scale=1.0, speed=3600.0, samples=64).dt == pytest.approx(56.25)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"scale": 0.0, "speed": 1.0, "samples": 1},
            {"scale": 1.0, "speed": -1.0, "samples": 1},
            {"scale": 1.0, "speed": 1.0, "samples": 0},
            {"scale": float("nan"), "speed": 1.0, "samples": 1},
        ],
    )
    def test_validate_rejects(self, kwargs):
        """Non-positive or NaN values fail validation."""
        with pytest.raises(ValueError):
            Settings(**kwargs).validate()

    def test_halving_never_reaches_zero(self):
        """Repeated halving stops at the smallest positive value."""
        settings = Settings(scale=1e-9, speed=60.0, samples=4)

        for _ in range(2000):
            settings.scale_by(0.5)
            settings.speed_by(0.5)

        assert settings.scale > 0.0
        assert settings.speed > 0.0
        settings.validate()

    def test_refused_change_keeps_value(self):
        """A multiplication that would overflow is refused and reported."""
        settings = Settings(scale=1e300, speed=1e300, samples=4)

        assert settings.scale_by(1e10) is False
        assert settings.speed_by(1e10) is False
        assert settings.scale == 1e300
        assert settings.speed_by(2.0) is True
        assert settings.speed == 2e300
