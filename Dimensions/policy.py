"""Resolution policy: which base scales are explicit and which are defaulted.

A single derivation engine handles every combination of supplied scales.  The
:class:`ScalePolicy` flag set narrows what the engine accepts and chooses the
default rule for each optional base scale.

``AUTO`` means "use the provider's value if it defines one, otherwise apply the
default rule".  The other members narrow the contract or change the default:

- :attr:`MassSource.MASS` requires the provider to define ``mass_scale``;
  density is derived from it unless the provider also defines one
  (mass-first systems).  :attr:`MassSource.DENSITY` is the mirror image.
- :attr:`TemperatureSource.UNIT` makes 1.0 the default temperature scale
  (mechanical systems); a temperature the provider defines still wins.
- :attr:`TimeSource.FREE_FALL` and :attr:`TemperatureSource.BOLTZMANN` always
  use the default rule, ignoring any provider value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MassSource(str, Enum):
    """Which of density/mass is the source of truth."""

    AUTO = "auto"
    DENSITY = "density"
    MASS = "mass"


class TimeSource(str, Enum):
    """How the time scale is obtained."""

    AUTO = "auto"
    PROVIDED = "provided"
    FREE_FALL = "free_fall"


class TemperatureSource(str, Enum):
    """How the temperature scale is obtained."""

    AUTO = "auto"
    PROVIDED = "provided"
    BOLTZMANN = "boltzmann"
    UNIT = "unit"


@dataclass(frozen=True)
class ScalePolicy:
    """Flags describing which base scales are explicit versus defaulted.

    Attributes
    ----------
    mass:
        Density-first, mass-first, or whichever the provider defines.
    time:
        Provider value, free-fall default ``1/sqrt(pi G rho)``, or either.
    temperature:
        Provider value, ``E / kB`` default, or 1.0 default (provider value first).
    """

    mass: MassSource = MassSource.AUTO
    time: TimeSource = TimeSource.AUTO
    temperature: TemperatureSource = TemperatureSource.AUTO

    def __post_init__(self) -> None:
        # Accept the plain string values too ("mass", "unit", ...).
        object.__setattr__(self, "mass", MassSource(self.mass))
        object.__setattr__(self, "time", TimeSource(self.time))
        object.__setattr__(self, "temperature", TemperatureSource(self.temperature))

    @property
    def is_mechanical(self) -> bool:
        return self.temperature is TemperatureSource.UNIT


DEFAULT_POLICY = ScalePolicy()
MECHANICAL_POLICY = ScalePolicy(temperature=TemperatureSource.UNIT)
MECHANICAL_MASS_POLICY = ScalePolicy(
    mass=MassSource.MASS,
    temperature=TemperatureSource.UNIT,
)
