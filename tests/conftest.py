"""Pytest configuration.

Goal: make `import Dimensions` work when running tests without installing the
package.

This repo uses a flat layout (Dimensions/ at repo root). Some environments run
pytest with a working directory where repo root isn't on sys.path, leading to
`ModuleNotFoundError: Dimensions`.

This conftest ensures repo root is on sys.path and provides shared unit systems.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


EARTH_RADIUS_M = 6.371e6
EARTH_DENSITY_KG_M3 = 5.514e3


class EarthUnits:
    """Length and density only; time and temperature use the default rules."""

    def length_scale(self) -> float:
        return EARTH_RADIUS_M

    def density_scale(self) -> float:
        return EARTH_DENSITY_KG_M3


class SmallMassUnits:
    """Mass-first provider with simple dyadic values (L=2, M=3, T=4)."""

    def length_scale(self) -> float:
        return 2.0

    def mass_scale(self) -> float:
        return 3.0

    def time_scale(self) -> float:
        return 4.0


@pytest.fixture
def earth_units() -> EarthUnits:
    return EarthUnits()


@pytest.fixture
def small_mass_units() -> SmallMassUnits:
    return SmallMassUnits()
