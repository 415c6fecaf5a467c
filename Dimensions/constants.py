"""Physical constants used by the scale derivation.

Single source of truth. Import from here rather than redefining in each module.
"""

import math

import numpy as np

GRAVITATIONAL_CONSTANT = 6.67430e-11    # m³ / (kg · s²)  (CODATA 2018)
BOLTZMANN_CONSTANT = 1.380649e-23       # J / K  (exact, SI 2019)
PI = math.pi

DEFAULT_DTYPE = np.float64

# Relative tolerance for the optional density/mass consistency check, per precision.
# Other floating dtypes fall back to DEFAULT_CONSISTENCY_RTOL.
CONSISTENCY_RTOL = {
    np.dtype(np.float32): 1.0e-4,
    np.dtype(np.float64): 1.0e-6,
}
DEFAULT_CONSISTENCY_RTOL = 1.0e-4
