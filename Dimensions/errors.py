"""Error taxonomy for unit-system construction.

All errors are configuration-time errors raised while a :class:`~Dimensions.scales.ScaleSystem`
is being built.  None of them are recoverable automatically: the caller must
supply a corrected provider and construct a new system.

Every class derives from :class:`ValueError` so existing ``except ValueError``
handlers around scale construction keep working.
"""

from __future__ import annotations

from typing import Any, Sequence


class DimensionsError(ValueError):
    """Base class for all unit-system configuration errors."""


class MissingBaseScale(DimensionsError):
    """A mandatory base scale is neither supplied nor derivable."""

    def __init__(self, quantity: str, detail: str = "") -> None:
        self.quantity = quantity
        msg = f"missing base scale: {quantity}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class InvalidScaleValue(DimensionsError):
    """A resolved base scale is zero, negative, non-finite or non-numeric."""

    def __init__(self, quantity: str, value: Any, detail: str = "must be finite and > 0") -> None:
        self.quantity = quantity
        self.value = value
        super().__init__(f"{quantity} {detail}; got {value!r}.")


class PrecisionMismatch(DimensionsError):
    """Base scales were supplied at inconsistent floating-point precisions."""

    def __init__(self, dtypes: Sequence[Any], detail: str = "") -> None:
        self.dtypes = tuple(dtypes)
        names = ", ".join(str(d) for d in self.dtypes)
        msg = f"base scales must share one precision; got {names}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
