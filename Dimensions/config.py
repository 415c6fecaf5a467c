"""Build a :class:`~Dimensions.scales.ScaleSystem` from a plain option mapping.

Option block
------------
All keys live in one flat mapping (for example a parsed JSON/YAML section)::

    {
        "length_scale": 6.371e6,
        "density_scale": 5.514e3,     # or "mass_scale"
        "time_scale": None,           # optional; None -> free-fall default
        "temperature_scale": None,    # optional; None -> E / kB default
        "precision": "float64",       # "float32" | "float64" | "single" | "double"
        "mechanical": False,          # temperature defaults to 1.0 instead of E / kB
        "mass_first": False,          # require mass_scale
        "mass_source": "auto",        # "auto" | "density" | "mass"
        "time_source": "auto",        # "auto" | "provided" | "free_fall"
        "temperature_source": "auto", # "auto" | "provided" | "boltzmann" | "unit"
        "warn_inconsistent": True,
    }

``length_scale`` and one of ``density_scale``/``mass_scale`` are required.
``mechanical`` and ``mass_first`` are shorthands for
``temperature_source="unit"`` and ``mass_source="mass"``; combining a shorthand
with a conflicting ``*_source`` is an error.  Unknown keys are rejected so
typos do not silently fall back to defaults.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

import numpy as np

from Dimensions.errors import InvalidScaleValue
from Dimensions.policy import MassSource, ScalePolicy, TemperatureSource, TimeSource
from Dimensions.providers import BASE_SCALES, BaseScales
from Dimensions.scales import UNIT, ScaleSystem, as_float_dtype


_FLAG_KEYS = (
    "precision",
    "mechanical",
    "mass_first",
    "mass_source",
    "time_source",
    "temperature_source",
    "warn_inconsistent",
)
CONFIG_KEYS = BASE_SCALES + _FLAG_KEYS


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        norm = value.strip().lower()
        if norm in {"1", "true", "yes", "on"}:
            return True
        if norm in {"0", "false", "no", "off"}:
            return False
    return bool(value)


def _real(value: Any, name: str) -> Any:
    """Parse numeric strings; leave numbers (and numpy scalars) untouched."""
    if value is None or (isinstance(value, (int, float, np.number)) and not isinstance(value, bool)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as exc:
            raise InvalidScaleValue(name, value, "must be a real number") from exc
    raise InvalidScaleValue(name, value, "must be a real number")


def _source(cfg: Mapping[str, Any], key: str, enum: type) -> Any:
    raw = cfg.get(key, "auto")
    try:
        return enum(str(raw).strip().lower())
    except ValueError:
        allowed = [m.value for m in enum]
        raise ValueError(f"{key} must be one of {allowed}; got {raw!r}.") from None


def _apply_shorthand(current: Any, forced: Any, flag: str, key: str) -> Any:
    if current not in (forced, type(forced).AUTO):
        raise ValueError(f"{flag}=True conflicts with {key}={current.value!r}.")
    return forced


def _policy_from_cfg(cfg: Mapping[str, Any]) -> ScalePolicy:
    mass = _source(cfg, "mass_source", MassSource)
    time = _source(cfg, "time_source", TimeSource)
    temperature = _source(cfg, "temperature_source", TemperatureSource)
    if _bool(cfg.get("mass_first", False)):
        mass = _apply_shorthand(mass, MassSource.MASS, "mass_first", "mass_source")
    if _bool(cfg.get("mechanical", False)):
        temperature = _apply_shorthand(
            temperature, TemperatureSource.UNIT, "mechanical", "temperature_source"
        )
    return ScalePolicy(mass=mass, time=time, temperature=temperature)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def scale_system_from_config(cfg: Mapping[str, Any]) -> ScaleSystem:
    """Validate an option mapping and construct the corresponding system."""
    if not isinstance(cfg, Mapping):
        raise ValueError(f"Scale configuration must be a mapping; got {type(cfg).__name__}.")
    unknown = sorted(set(cfg) - set(CONFIG_KEYS))
    if unknown:
        raise ValueError(f"Unknown scale configuration keys {unknown}; expected {list(CONFIG_KEYS)}.")

    provider = BaseScales(**{name: _real(cfg.get(name), name) for name in BASE_SCALES})
    precision = cfg.get("precision")
    return ScaleSystem(
        provider,
        dtype=None if precision is None else as_float_dtype(precision),
        policy=_policy_from_cfg(cfg),
        warn_inconsistent=_bool(cfg.get("warn_inconsistent", True)),
    )


def scale_system_to_config(system: ScaleSystem) -> Dict[str, Any]:
    """Return an option mapping that reconstructs ``system``.

    Every base scale is written explicitly as resolved, so defaults are frozen
    into the output.  A mechanical system's unit temperature is left to the
    policy rather than written as an explicit 1.0.
    """
    cfg: Dict[str, Any] = {name: float(system.scale(name)) for name in BASE_SCALES}
    # Derived density/mass is left out so the round trip does not depend on rounding.
    sources = system.sources
    if sources["mass_scale"] != "provided":
        del cfg["mass_scale"]
    elif sources["density_scale"] != "provided":
        del cfg["density_scale"]
    if sources["temperature_scale"] == UNIT:
        del cfg["temperature_scale"]

    policy = system.policy
    cfg["precision"] = system.dtype.name
    cfg["mechanical"] = policy.is_mechanical
    cfg["mass_first"] = policy.mass is MassSource.MASS
    cfg["mass_source"] = policy.mass.value
    cfg["time_source"] = policy.time.value
    cfg["temperature_source"] = policy.temperature.value
    return cfg
