"""Scale derivation for nondimensionalised physical models.

Given a provider of base scales (length, density or mass, optionally time and
temperature), :class:`ScaleSystem` derives every secondary scale and the two
dimensionless physical constants in one fixed precision.

Typical usage
-------------
>>> scales = build_scale_system(length_scale=6.371e6, density_scale=5.514e3)
>>> print(f"Time scale: {scales.time_scale:.3e} s")      # free-fall default
>>> print(f"G':         {scales.gravitational_constant:.3f}")

Characteristic scales derived
-----------------------------
- M      = rho · L³            (or rho = M / L³ for mass-first systems)
- T      = 1 / sqrt(pi · G · rho)     when no time scale is supplied
- V      = L / T
- A      = V / T
- F      = M · A
- tau    = F / L²               (traction / stress)
- Mo     = F · L                (moment / torque)
- Phi    = A · L                (potential, energy per unit mass)
- E      = M · V²
- Theta  = E / kB               when no temperature scale is supplied
- G'     = G · rho · T²
- kB'    = kB · Theta / E

Every value is computed eagerly at construction; an instance that exists is
fully valid and never changes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np

from Dimensions.constants import (
    BOLTZMANN_CONSTANT,
    CONSISTENCY_RTOL,
    DEFAULT_CONSISTENCY_RTOL,
    DEFAULT_DTYPE,
    GRAVITATIONAL_CONSTANT,
    PI,
)
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
from Dimensions.providers import (
    BASE_SCALES,
    DENSITY,
    LENGTH,
    MASS,
    TEMPERATURE,
    TIME,
    BaseScales,
    check_capabilities,
)

logger = logging.getLogger(__name__)


DERIVED_SCALES: Tuple[str, ...] = (
    "velocity_scale",
    "acceleration_scale",
    "force_scale",
    "traction_scale",
    "moment_scale",
    "potential_scale",
    "energy_scale",
)
DIMENSIONLESS_CONSTANTS: Tuple[str, ...] = (
    "gravitational_constant",
    "boltzmann_constant",
)
ALL_SCALES: Tuple[str, ...] = BASE_SCALES + DERIVED_SCALES + DIMENSIONLESS_CONSTANTS

# Source labels reported by ScaleSystem.sources
PROVIDED = "provided"
DERIVED = "derived"
FREE_FALL = "free_fall"
BOLTZMANN = "boltzmann"
UNIT = "unit"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def as_float_dtype(dtype: Any) -> np.dtype:
    """Normalise a precision setting (dtype, scalar type or name) to a float dtype."""
    try:
        dt = np.dtype(dtype)
    except TypeError as exc:
        raise ValueError(f"Unrecognised precision {dtype!r}.") from exc
    if not np.issubdtype(dt, np.floating):
        raise ValueError(f"Precision must be a floating-point dtype; got {dt}.")
    return dt


def _carried_dtype(value: Any) -> Optional[np.dtype]:
    # Python floats/ints are precision-neutral; numpy floating values are not.
    if isinstance(value, (np.floating, np.ndarray)) and np.issubdtype(value.dtype, np.floating):
        return value.dtype
    return None


def _resolve_dtype(supplied: Dict[str, Any], dtype: Any) -> np.dtype:
    carried = {name: _carried_dtype(v) for name, v in supplied.items()}
    carried = {name: dt for name, dt in carried.items() if dt is not None}
    distinct = sorted(set(carried.values()), key=str)
    if len(distinct) > 1:
        raise PrecisionMismatch(
            distinct,
            ", ".join(f"{name}={dt}" for name, dt in carried.items()),
        )
    if dtype is None:
        return distinct[0] if distinct else np.dtype(DEFAULT_DTYPE)
    requested = as_float_dtype(dtype)
    if distinct and distinct[0] != requested:
        raise PrecisionMismatch(
            (requested, distinct[0]),
            f"requested {requested} but provider supplies {distinct[0]}",
        )
    return requested


def _coerce(name: str, value: Any, dtype: np.dtype) -> np.floating:
    """Cast a provider value to ``dtype`` and check it is finite and > 0."""
    if isinstance(value, (bool, np.bool_, str, bytes)) or np.ndim(value) != 0:
        raise InvalidScaleValue(name, value, "must be a real number")
    try:
        with np.errstate(over="ignore", under="ignore"):
            v = dtype.type(value)
    except OverflowError as exc:
        raise InvalidScaleValue(name, value, f"is not representable as a finite {dtype}") from exc
    except (TypeError, ValueError) as exc:
        raise InvalidScaleValue(name, value, "must be a real number") from exc
    return _check_positive(name, v)


def _check_positive(name: str, v: np.floating) -> np.floating:
    if not np.isfinite(v) or v <= 0:
        raise InvalidScaleValue(name, v)
    return v


def _require(supplied: Dict[str, Any], name: str, why: str) -> None:
    if name not in supplied:
        raise MissingBaseScale(name, why)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class ScaleSystem:
    """A fully resolved, immutable unit system.

    Parameters
    ----------
    provider:
        Any object exposing ``length_scale`` and ``density_scale`` and/or
        ``mass_scale``, optionally ``time_scale`` and ``temperature_scale``
        (see :mod:`Dimensions.providers`).
    dtype:
        Floating-point precision shared by every value (``np.float64``,
        ``np.float32``, ``"single"``, ...).  ``None`` adopts the precision of
        numpy values supplied by the provider, else float64.
    policy:
        :class:`~Dimensions.policy.ScalePolicy` selecting which base scales
        are explicit and which use a default rule.
    warn_inconsistent:
        When the provider defines both density and mass, log a warning if they
        disagree.  Both values are trusted as given either way.

    Raises
    ------
    MissingBaseScale
        Length, or both density and mass, are absent (or a scale the policy
        requires is absent).
    InvalidScaleValue
        A base scale is zero, negative, non-finite or non-numeric, or a derived
        value leaves the representable range of ``dtype``.
    PrecisionMismatch
        Provider values carry different numpy precisions, or differ from an
        explicitly requested ``dtype``.
    """

    __slots__ = ("_values", "_sources", "_dtype", "_policy")

    def __init__(
        self,
        provider: Any,
        *,
        dtype: Any = None,
        policy: ScalePolicy = DEFAULT_POLICY,
        warn_inconsistent: bool = True,
    ) -> None:
        supplied = check_capabilities(provider)
        dt = _resolve_dtype(supplied, dtype)
        values, sources = _derive(supplied, dt, policy, warn_inconsistent)

        object.__setattr__(self, "_dtype", dt)
        object.__setattr__(self, "_policy", policy)
        object.__setattr__(self, "_values", values)
        object.__setattr__(self, "_sources", sources)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def policy(self) -> ScalePolicy:
        return self._policy

    @property
    def sources(self) -> Dict[str, str]:
        """How each base scale was obtained (``provided``, ``derived``, ...)."""
        return dict(self._sources)

    # ------------------------------------------------------------------
    # Base scales (as resolved)
    # ------------------------------------------------------------------

    @property
    def length_scale(self) -> np.floating:
        return self._values[LENGTH]

    @property
    def density_scale(self) -> np.floating:
        return self._values[DENSITY]

    @property
    def mass_scale(self) -> np.floating:
        return self._values[MASS]

    @property
    def time_scale(self) -> np.floating:
        return self._values[TIME]

    @property
    def temperature_scale(self) -> np.floating:
        return self._values[TEMPERATURE]

    # ------------------------------------------------------------------
    # Derived scales
    # ------------------------------------------------------------------

    @property
    def velocity_scale(self) -> np.floating:
        return self._values["velocity_scale"]

    @property
    def acceleration_scale(self) -> np.floating:
        return self._values["acceleration_scale"]

    @property
    def force_scale(self) -> np.floating:
        return self._values["force_scale"]

    @property
    def traction_scale(self) -> np.floating:
        """Pressure/stress scale."""
        return self._values["traction_scale"]

    @property
    def moment_scale(self) -> np.floating:
        """Moment/torque scale."""
        return self._values["moment_scale"]

    @property
    def potential_scale(self) -> np.floating:
        """Gravitational potential (energy per unit mass) scale."""
        return self._values["potential_scale"]

    @property
    def energy_scale(self) -> np.floating:
        return self._values["energy_scale"]

    # ------------------------------------------------------------------
    # Dimensionless constants
    # ------------------------------------------------------------------

    @property
    def gravitational_constant(self) -> np.floating:
        """G expressed in this unit system."""
        return self._values["gravitational_constant"]

    @property
    def boltzmann_constant(self) -> np.floating:
        """kB expressed in this unit system."""
        return self._values["boltzmann_constant"]

    # ------------------------------------------------------------------

    def scale(self, name: str) -> np.floating:
        """Look up any base/derived scale or constant by attribute name."""
        try:
            return self._values[name]
        except KeyError:
            raise ValueError(f"Unknown scale {name!r}; expected one of {ALL_SCALES}.") from None

    def base_scales(self) -> BaseScales:
        """Return the resolved base scales as an explicit provider."""
        return BaseScales(**{name: self._values[name] for name in BASE_SCALES})

    def to_dict(self) -> Dict[str, float]:
        """Return a plain dict (useful for logging / CSV export)."""
        return {name: float(self._values[name]) for name in ALL_SCALES}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScaleSystem):
            return NotImplemented
        return (
            self._dtype == other._dtype
            and self._policy == other._policy
            and all(self._values[n] == other._values[n] for n in BASE_SCALES)
        )

    def __hash__(self) -> int:
        return hash((self._dtype, self._policy, tuple(float(self._values[n]) for n in BASE_SCALES)))

    def __repr__(self) -> str:
        body = ", ".join(f"{n}={float(self._values[n]):.6g}" for n in BASE_SCALES)
        p = self._policy
        return (
            f"ScaleSystem({body}, dtype={self._dtype}, "
            f"policy=(mass={p.mass.value}, time={p.time.value}, temperature={p.temperature.value}))"
        )

    def __reduce__(self):
        return (_restore, (self._values, self._sources, self._dtype, self._policy))


def _restore(
    values: Dict[str, np.floating],
    sources: Dict[str, str],
    dtype: np.dtype,
    policy: ScalePolicy,
) -> ScaleSystem:
    """Rebuild a pickled/copied system without re-deriving its values."""
    system = ScaleSystem.__new__(ScaleSystem)
    object.__setattr__(system, "_dtype", dtype)
    object.__setattr__(system, "_policy", policy)
    object.__setattr__(system, "_values", dict(values))
    object.__setattr__(system, "_sources", dict(sources))
    return system


def _derive(
    supplied: Dict[str, Any],
    dt: np.dtype,
    policy: ScalePolicy,
    warn_inconsistent: bool,
) -> Tuple[Dict[str, np.floating], Dict[str, str]]:
    """Resolve base scales per ``policy`` and compute every derived value."""
    real = dt.type
    G = real(GRAVITATIONAL_CONSTANT)
    kB = real(BOLTZMANN_CONSTANT)
    pi = real(PI)
    one = real(1.0)

    # Policy requirements first so the error names what the policy needs.
    if policy.mass is MassSource.MASS:
        _require(supplied, MASS, "mass-first systems must define mass_scale")
    elif policy.mass is MassSource.DENSITY:
        _require(supplied, DENSITY, "density-first systems must define density_scale")
    if policy.time is TimeSource.PROVIDED:
        _require(supplied, TIME, "policy requires an explicit time_scale")
    if policy.temperature is TemperatureSource.PROVIDED:
        _require(supplied, TEMPERATURE, "policy requires an explicit temperature_scale")

    sources: Dict[str, str] = {}
    v: Dict[str, np.floating] = {}

    with np.errstate(over="ignore", under="ignore", divide="ignore", invalid="ignore"):
        L = _coerce(LENGTH, supplied[LENGTH], dt)
        v[LENGTH] = L
        sources[LENGTH] = PROVIDED
        volume = L * L * L

        # The policy only decides which one is required; supplied values always win.
        if DENSITY in supplied and MASS in supplied:
            density = _coerce(DENSITY, supplied[DENSITY], dt)
            mass = _coerce(MASS, supplied[MASS], dt)
            sources[MASS] = sources[DENSITY] = PROVIDED
            if warn_inconsistent:
                _warn_if_inconsistent(density, mass, volume, dt)
        elif MASS in supplied:
            mass = _coerce(MASS, supplied[MASS], dt)
            density = _check_positive(DENSITY, mass / volume)
            sources[MASS], sources[DENSITY] = PROVIDED, DERIVED
        else:
            density = _coerce(DENSITY, supplied[DENSITY], dt)
            mass = _check_positive(MASS, density * volume)
            sources[DENSITY], sources[MASS] = PROVIDED, DERIVED
        v[DENSITY] = density
        v[MASS] = mass

        if policy.time is not TimeSource.FREE_FALL and TIME in supplied:
            T = _coerce(TIME, supplied[TIME], dt)
            sources[TIME] = PROVIDED
        else:
            T = _check_positive(TIME, one / np.sqrt(pi * G * density))
            sources[TIME] = FREE_FALL
            logger.debug("time_scale defaulted to free-fall time %.6g", float(T))
        v[TIME] = T

        velocity = L / T
        acceleration = velocity / T
        force = mass * acceleration
        v["velocity_scale"] = velocity
        v["acceleration_scale"] = acceleration
        v["force_scale"] = force
        v["traction_scale"] = force / (L * L)
        v["moment_scale"] = force * L
        v["potential_scale"] = acceleration * L
        energy = mass * velocity * velocity
        v["energy_scale"] = energy

        if policy.temperature is not TemperatureSource.BOLTZMANN and TEMPERATURE in supplied:
            theta = _coerce(TEMPERATURE, supplied[TEMPERATURE], dt)
            sources[TEMPERATURE] = PROVIDED
        elif policy.temperature is TemperatureSource.UNIT:
            theta = one
            sources[TEMPERATURE] = UNIT
        else:
            theta = energy / kB
            sources[TEMPERATURE] = BOLTZMANN
            logger.debug("temperature_scale defaulted to E/kB = %.6g", float(theta))
        v[TEMPERATURE] = theta

        v["gravitational_constant"] = G * density * T * T
        v["boltzmann_constant"] = kB * theta / energy

    # Anything non-finite or zero here overflowed/underflowed the precision.
    for name in ALL_SCALES:
        value = v[name]
        if not np.isfinite(value) or value <= 0:
            raise InvalidScaleValue(name, value, f"is not representable as a positive finite {dt}")

    return v, sources


def _warn_if_inconsistent(density, mass, volume, dt: np.dtype) -> None:
    rtol = CONSISTENCY_RTOL.get(dt, DEFAULT_CONSISTENCY_RTOL)
    expected = density * volume
    if not np.isclose(mass, expected, rtol=rtol, atol=0.0):
        logger.warning(
            "mass_scale=%.6g disagrees with density_scale * length_scale**3 = %.6g "
            "(rtol=%.0e); both values are used as given.",
            float(mass),
            float(expected),
            rtol,
        )


def build_scale_system(
    *,
    length_scale: Any,
    density_scale: Any = None,
    mass_scale: Any = None,
    time_scale: Any = None,
    temperature_scale: Any = None,
    dtype: Any = None,
    policy: ScalePolicy = DEFAULT_POLICY,
    warn_inconsistent: bool = True,
) -> ScaleSystem:
    """Build a :class:`ScaleSystem` from keyword base scales.

    ``length_scale`` plus one of ``density_scale``/``mass_scale`` are required;
    omitted (``None``) time and temperature scales use the default rules.
    """
    provider = BaseScales(
        length_scale=length_scale,
        density_scale=density_scale,
        mass_scale=mass_scale,
        time_scale=time_scale,
        temperature_scale=temperature_scale,
    )
    return ScaleSystem(
        provider,
        dtype=dtype,
        policy=policy,
        warn_inconsistent=warn_inconsistent,
    )


def mechanical_scale_system(provider: Any, *, dtype: Any = None, **kwargs: Any) -> ScaleSystem:
    """Unit system whose temperature scale defaults to 1.0 when not supplied."""
    return ScaleSystem(provider, dtype=dtype, policy=MECHANICAL_POLICY, **kwargs)


def mechanical_mass_scale_system(provider: Any, *, dtype: Any = None, **kwargs: Any) -> ScaleSystem:
    """Mechanical unit system whose provider defines mass (not density) directly."""
    return ScaleSystem(provider, dtype=dtype, policy=MECHANICAL_MASS_POLICY, **kwargs)
