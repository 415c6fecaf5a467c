"""Convert physical quantities to and from the dimensionless form of a unit system.

For a quantity ``q`` with characteristic scale ``S`` (from a
:class:`~Dimensions.scales.ScaleSystem`)::

    q_hat = q / S        (nondimensionalise)
    q     = q_hat * S    (dimensionalise)

Quantities are named from the fixed list in :data:`QUANTITY_SCALES`; unit
strings are never parsed.  Values may be scalars or array-likes and are
returned in the system's precision.
"""

from __future__ import annotations

import logging
from typing import Any, List

import numpy as np

from Dimensions.scales import ScaleSystem

logger = logging.getLogger(__name__)


QUANTITY_SCALES = {
    "length": "length_scale",
    "density": "density_scale",
    "mass": "mass_scale",
    "time": "time_scale",
    "temperature": "temperature_scale",
    "velocity": "velocity_scale",
    "acceleration": "acceleration_scale",
    "force": "force_scale",
    "traction": "traction_scale",
    "stress": "traction_scale",
    "pressure": "traction_scale",
    "moment": "moment_scale",
    "torque": "moment_scale",
    "potential": "potential_scale",
    "energy": "energy_scale",
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _scale_for(quantity: str, system: ScaleSystem) -> np.floating:
    key = str(quantity).strip().lower()
    try:
        attr = QUANTITY_SCALES[key]
    except KeyError:
        raise ValueError(
            f"Unknown quantity {quantity!r}; expected one of {sorted(QUANTITY_SCALES)}."
        ) from None
    return system.scale(attr)


def _as_real(value: Any, system: ScaleSystem):
    arr = np.asarray(value, dtype=system.dtype)
    return arr[()] if arr.ndim == 0 else arr


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def nondimensionalise(value: Any, quantity: str, system: ScaleSystem):
    """Return ``value / scale(quantity)`` in the system's precision."""
    return _as_real(value, system) / _scale_for(quantity, system)


def dimensionalise(value: Any, quantity: str, system: ScaleSystem):
    """Return ``value * scale(quantity)`` in the system's precision."""
    return _as_real(value, system) * _scale_for(quantity, system)


def verify_scale_system(
    system: ScaleSystem,
    *,
    lower: float = 1.0e-6,
    upper: float = 1.0e6,
) -> List[str]:
    """Warn if the dimensionless constants look badly scaled.

    Checks are heuristic, not exhaustive.  Warnings are logged (not raised) so
    the caller can still use the system.  Returns the warning messages.
    """
    messages: List[str] = []

    g = float(system.gravitational_constant)
    if not (lower <= g <= upper):
        messages.append(
            f"gravitational_constant={g:.3e} is outside [{lower:.0e}, {upper:.0e}]. "
            "Check that time_scale and density_scale describe the same problem."
        )

    kb = float(system.boltzmann_constant)
    if not (lower <= kb <= upper):
        messages.append(
            f"boltzmann_constant={kb:.3e} is outside [{lower:.0e}, {upper:.0e}]. "
            "Check temperature_scale against energy_scale."
        )

    # Derived scales within six decades of the dtype's range limits.
    info = np.finfo(system.dtype)
    for name in ("traction_scale", "moment_scale", "energy_scale"):
        value = float(system.scale(name))
        if value > float(info.max) * 1.0e-6 or value < float(info.tiny) * 1.0e6:
            messages.append(f"{name}={value:.3e} is close to the limits of {system.dtype}.")

    for msg in messages:
        logger.warning(msg)
    return messages
