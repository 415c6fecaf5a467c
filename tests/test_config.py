import itertools

import numpy as np
import pytest

from Dimensions.config import scale_system_from_config, scale_system_to_config
from Dimensions.errors import InvalidScaleValue, MissingBaseScale, PrecisionMismatch
from Dimensions.policy import (
    DEFAULT_POLICY,
    MECHANICAL_MASS_POLICY,
    MECHANICAL_POLICY,
    MassSource,
    ScalePolicy,
    TemperatureSource,
    TimeSource,
)
from Dimensions.providers import BaseScales
from Dimensions.scales import ScaleSystem, mechanical_mass_scale_system


class TestFromConfig:
    def test_minimal(self) -> None:
        system = scale_system_from_config({"length_scale": 6.371e6, "density_scale": 5.514e3})
        assert system.policy == DEFAULT_POLICY
        assert system.dtype == np.float64
        assert system.sources["time_scale"] == "free_fall"

    def test_flags_and_strings(self) -> None:
        system = scale_system_from_config(
            {
                "length_scale": "2.0",
                "mass_scale": 3,
                "time_scale": " 4 ",
                "mechanical": "yes",
                "mass_first": True,
            }
        )
        expected = mechanical_mass_scale_system(BaseScales(length_scale=2.0, mass_scale=3.0, time_scale=4.0))
        assert system == expected
        assert system.policy == MECHANICAL_MASS_POLICY

    def test_mechanical_only(self) -> None:
        system = scale_system_from_config({"length_scale": 1.0, "density_scale": 1.0, "mechanical": "on"})
        assert system.policy == MECHANICAL_POLICY
        assert system.temperature_scale == 1.0

    def test_precision(self) -> None:
        system = scale_system_from_config({"length_scale": 1.0, "density_scale": 1.0, "precision": "single"})
        assert system.dtype == np.float32

    def test_precision_conflict(self) -> None:
        with pytest.raises(PrecisionMismatch):
            scale_system_from_config(
                {"length_scale": np.float32(1.0), "density_scale": 1.0, "precision": "float64"}
            )

    def test_unknown_key(self) -> None:
        with pytest.raises(ValueError, match="length_scael"):
            scale_system_from_config({"length_scael": 1.0, "density_scale": 1.0})

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ValueError):
            scale_system_from_config([("length_scale", 1.0)])

    def test_source_keys(self) -> None:
        system = scale_system_from_config(
            {
                "length_scale": 1.0,
                "density_scale": 1.0,
                "time_scale": 5.0,
                "mass_source": "Density",
                "time_source": "free_fall",
                "temperature_source": "boltzmann",
            }
        )
        assert system.policy == ScalePolicy(
            mass=MassSource.DENSITY, time=TimeSource.FREE_FALL, temperature=TemperatureSource.BOLTZMANN
        )
        assert system.sources["time_scale"] == "free_fall"

    def test_shorthand_agrees_with_source_key(self) -> None:
        system = scale_system_from_config(
            {"length_scale": 1.0, "mass_scale": 1.0, "mass_first": True, "mass_source": "mass"}
        )
        assert system.policy.mass is MassSource.MASS

    @pytest.mark.parametrize(
        "flags",
        [
            {"mechanical": True, "temperature_source": "boltzmann"},
            {"mass_first": True, "mass_source": "density"},
        ],
    )
    def test_shorthand_conflicts_with_source_key(self, flags) -> None:
        with pytest.raises(ValueError, match="conflicts"):
            scale_system_from_config({"length_scale": 1.0, "density_scale": 1.0, "mass_scale": 1.0, **flags})

    def test_invalid_source_value(self) -> None:
        with pytest.raises(ValueError, match="time_source"):
            scale_system_from_config({"length_scale": 1.0, "density_scale": 1.0, "time_source": "hourly"})

    def test_missing_mass_and_density(self) -> None:
        with pytest.raises(MissingBaseScale):
            scale_system_from_config({"length_scale": 1.0, "time_scale": None})

    @pytest.mark.parametrize("value", ["ten", [1.0], True])
    def test_non_numeric(self, value) -> None:
        with pytest.raises(InvalidScaleValue):
            scale_system_from_config({"length_scale": value, "density_scale": 1.0})


class TestToConfig:
    def test_round_trip_defaults_are_frozen(self, earth_units) -> None:
        system = ScaleSystem(earth_units)
        cfg = scale_system_to_config(system)
        assert "mass_scale" not in cfg
        assert cfg["time_scale"] == pytest.approx(float(system.time_scale))
        assert cfg["precision"] == "float64"
        assert scale_system_from_config(cfg) == system

    def test_round_trip_mechanical_mass(self, small_mass_units) -> None:
        system = mechanical_mass_scale_system(small_mass_units, dtype=np.float32)
        cfg = scale_system_to_config(system)
        assert "density_scale" not in cfg
        assert "temperature_scale" not in cfg
        assert cfg["mass_first"] is True
        assert scale_system_from_config(cfg) == system

    def test_round_trip_keeps_mechanical_temperature(self) -> None:
        system = ScaleSystem(
            BaseScales(length_scale=1.0, density_scale=1.0, temperature_scale=300.0),
            policy=MECHANICAL_POLICY,
        )
        cfg = scale_system_to_config(system)
        assert cfg["temperature_scale"] == 300.0
        assert scale_system_from_config(cfg).temperature_scale == 300.0

    @pytest.mark.parametrize(
        "mass,time,temperature",
        list(itertools.product(MassSource, TimeSource, TemperatureSource)),
    )
    def test_round_trip_every_policy(self, mass, time, temperature) -> None:
        provider = BaseScales(
            length_scale=2.0,
            density_scale=1.0,
            mass_scale=8.0,
            time_scale=3.0,
            temperature_scale=300.0,
        )
        policy = ScalePolicy(mass=mass, time=time, temperature=temperature)
        system = ScaleSystem(provider, policy=policy)
        rebuilt = scale_system_from_config(scale_system_to_config(system))
        assert rebuilt.policy == policy
        assert rebuilt == system
        assert rebuilt.to_dict() == system.to_dict()
