"""Base-scale providers and capability detection.

A *provider* is any object that supplies some subset of the five base scales:

=====================  ==========================================
Accessor               Meaning
=====================  ==========================================
``length_scale``       characteristic length (always required)
``density_scale``      characteristic density
``mass_scale``         characteristic mass
``time_scale``         characteristic time (optional)
``temperature_scale``  characteristic temperature (optional)
=====================  ==========================================

At least one of ``density_scale`` / ``mass_scale`` must be present.  An
accessor may be a zero-argument method, a property or a plain attribute; an
attribute whose value is ``None`` counts as omitted.  Detection is done by
attribute lookup, so any class works without inheriting from anything::

    class Earth:
        def length_scale(self):
            return 6.371e6

        def density_scale(self):
            return 5.514e3

For one-off systems :class:`BaseScales` is a ready-made frozen provider.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from Dimensions.errors import MissingBaseScale


LENGTH = "length_scale"
DENSITY = "density_scale"
MASS = "mass_scale"
TIME = "time_scale"
TEMPERATURE = "temperature_scale"

BASE_SCALES: Tuple[str, ...] = (LENGTH, DENSITY, MASS, TIME, TEMPERATURE)


@dataclass(frozen=True)
class BaseScales:
    """Frozen provider with optional fields; ``None`` marks an omitted scale.

    Only the mandatory combination is required at construction: a length scale
    plus a density *or* a mass scale.  Values are validated later by
    :class:`~Dimensions.scales.ScaleSystem`, not here.
    """

    length_scale: Any = None
    density_scale: Any = None
    mass_scale: Any = None
    time_scale: Any = None
    temperature_scale: Any = None

    def __post_init__(self) -> None:
        check_capabilities(self)

    def to_dict(self) -> Dict[str, Any]:
        """Return only the scales that were supplied."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def _raw_accessor(provider: Any, name: str) -> Any:
    # Bound methods are called, everything else (attribute/property) is read.
    member = getattr(provider, name, None)
    if callable(member):
        return member()
    return member


def read_base_scale(provider: Any, name: str) -> Optional[Any]:
    """Return the raw value the provider defines for ``name`` or ``None``."""
    if name not in BASE_SCALES:
        raise ValueError(f"Unknown base scale {name!r}; expected one of {BASE_SCALES}.")
    return _raw_accessor(provider, name)


def provided_scales(provider: Any) -> Dict[str, Any]:
    """Inspect ``provider`` and return ``{name: raw value}`` for each defined scale."""
    out: Dict[str, Any] = {}
    for name in BASE_SCALES:
        value = read_base_scale(provider, name)
        if value is not None:
            out[name] = value
    return out


def check_capabilities(provider: Any) -> Dict[str, Any]:
    """Inspect ``provider`` and raise :class:`MissingBaseScale` if it is unconfigured.

    Returns the detected ``{name: raw value}`` mapping on success.
    """
    supplied = provided_scales(provider)
    if LENGTH not in supplied:
        raise MissingBaseScale("length_scale", "a length scale is always required")
    if DENSITY not in supplied and MASS not in supplied:
        raise MissingBaseScale(
            "density_scale/mass_scale",
            "supply density_scale or mass_scale",
        )
    return supplied
