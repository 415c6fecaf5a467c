"""Dimensions: characteristic scales for nondimensionalised physical models.

Derives every secondary scale (mass, velocity, acceleration, force, traction,
moment, potential, energy) and the dimensionless G and kB from a handful of
base scales.  Import from here::

    from Dimensions import ScaleSystem, BaseScales, build_scale_system
    from Dimensions.constants import GRAVITATIONAL_CONSTANT, BOLTZMANN_CONSTANT

Sub-modules
-----------
constants
    Physical constants (G, kB); single source of truth.
errors
    :class:`MissingBaseScale`, :class:`InvalidScaleValue`, :class:`PrecisionMismatch`.
providers
    Base-scale capability detection and the :class:`BaseScales` provider.
policy
    :class:`ScalePolicy` flags and the mechanical / mass-first presets.
scales
    :class:`ScaleSystem`, the derivation engine.
transform
    :func:`nondimensionalise` / :func:`dimensionalise` helpers and
    :func:`verify_scale_system` sanity checks.
config
    :func:`scale_system_from_config` for plain option mappings.
"""

from Dimensions.constants import BOLTZMANN_CONSTANT, GRAVITATIONAL_CONSTANT
from Dimensions.errors import (
    DimensionsError,
    InvalidScaleValue,
    MissingBaseScale,
    PrecisionMismatch,
)
from Dimensions.providers import BASE_SCALES, BaseScales, check_capabilities, provided_scales
from Dimensions.policy import (
    DEFAULT_POLICY,
    MECHANICAL_MASS_POLICY,
    MECHANICAL_POLICY,
    MassSource,
    ScalePolicy,
    TemperatureSource,
    TimeSource,
)
from Dimensions.scales import (
    ALL_SCALES,
    DERIVED_SCALES,
    DIMENSIONLESS_CONSTANTS,
    ScaleSystem,
    build_scale_system,
    mechanical_mass_scale_system,
    mechanical_scale_system,
)
from Dimensions.transform import dimensionalise, nondimensionalise, verify_scale_system
from Dimensions.config import scale_system_from_config, scale_system_to_config

__all__ = [
    # constants
    "GRAVITATIONAL_CONSTANT",
    "BOLTZMANN_CONSTANT",
    # errors
    "DimensionsError",
    "MissingBaseScale",
    "InvalidScaleValue",
    "PrecisionMismatch",
    # providers
    "BASE_SCALES",
    "BaseScales",
    "check_capabilities",
    "provided_scales",
    # policy
    "ScalePolicy",
    "MassSource",
    "TimeSource",
    "TemperatureSource",
    "DEFAULT_POLICY",
    "MECHANICAL_POLICY",
    "MECHANICAL_MASS_POLICY",
    # scales
    "ScaleSystem",
    "build_scale_system",
    "mechanical_scale_system",
    "mechanical_mass_scale_system",
    "DERIVED_SCALES",
    "DIMENSIONLESS_CONSTANTS",
    "ALL_SCALES",
    # transform
    "nondimensionalise",
    "dimensionalise",
    "verify_scale_system",
    # config
    "scale_system_from_config",
    "scale_system_to_config",
]
