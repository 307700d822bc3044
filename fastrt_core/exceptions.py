"""
Error codes and exceptions raised by the numeric core.

Every failure of a public operation surfaces as a :class:`NumericsError`
subclass carrying a small negative integer ``code``. Layers re-raise the
originating exception unchanged, so the caller always sees the first failure.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Optional

__all__ = [
    "ErrorCode",
    "NumericsError",
    "NoSplinedValuesError",
    "NotAscendingError",
    "SplineNotPossibleError",
    "TooFewDataPointsError",
    "DataNotSortedError",
    "NegativeWeightingFactorsError",
    "NoExtrapolationError",
    "SpecNotEquidistantError",
    "ConvNotEquidistantError",
    "ConvNotCenteredError",
    "SpecConvDifferentError",
    "SingularMatrixError",
    "LimitsOutOfRangeError",
    "FatalIntegrationError",
]


class ErrorCode(IntEnum):
    """Status codes of the numeric core; zero means success."""

    OK = 0
    NO_SPLINED_VALUES = -1
    X_NOT_ASCENDING = -2
    SPLINE_NOT_POSSIBLE = -3
    TOO_FEW_DATA_POINTS = -4
    DATA_NOT_SORTED = -5
    NEGATIVE_WEIGHTING_FACTORS = -6
    NO_EXTRAPOLATION = -7
    SPEC_NOT_EQUIDISTANT = -10
    CONV_NOT_EQUIDISTANT = -11
    CONV_NOT_CENTERED = -12
    SPEC_CONV_DIFFERENT = -13
    GAUSS_SINGULAR = -20
    LIMITS_OUT_OF_RANGE = -30
    FATAL_INTEGRATION_ERROR = -31


class NumericsError(Exception):
    """Base class of all numeric core failures."""

    code: ErrorCode = ErrorCode.OK

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        if code is not None:
            self.code = ErrorCode(code)
        self.message = message

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.message}"


class NoSplinedValuesError(NumericsError):
    """The requested equidistant output grid holds no point inside the data."""

    code = ErrorCode.NO_SPLINED_VALUES


class NotAscendingError(NumericsError):
    """Abscissas are not strictly ascending."""

    code = ErrorCode.X_NOT_ASCENDING

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"{message} (at index {index})"
        super().__init__(message)


class SplineNotPossibleError(NumericsError):
    """The spline system could not be solved."""

    code = ErrorCode.SPLINE_NOT_POSSIBLE


class TooFewDataPointsError(NumericsError):
    code = ErrorCode.TOO_FEW_DATA_POINTS

    def __init__(self, message: str, required: Optional[int] = None, given: Optional[int] = None):
        self.required = required
        self.given = given
        if required is not None and given is not None:
            message = f"{message} (required: {required}, given: {given})"
        super().__init__(message)


class DataNotSortedError(NumericsError):
    code = ErrorCode.DATA_NOT_SORTED


class NegativeWeightingFactorsError(NumericsError):
    code = ErrorCode.NEGATIVE_WEIGHTING_FACTORS


class NoExtrapolationError(NumericsError):
    """Evaluation was requested outside the fitted range."""

    code = ErrorCode.NO_EXTRAPOLATION

    def __init__(self, message: str, value: Optional[float] = None):
        self.value = value
        super().__init__(message)


class SpecNotEquidistantError(NumericsError):
    code = ErrorCode.SPEC_NOT_EQUIDISTANT


class ConvNotEquidistantError(NumericsError):
    code = ErrorCode.CONV_NOT_EQUIDISTANT


class ConvNotCenteredError(NumericsError):
    """No kernel tap sits exactly at abscissa zero."""

    code = ErrorCode.CONV_NOT_CENTERED


class SpecConvDifferentError(NumericsError):
    code = ErrorCode.SPEC_CONV_DIFFERENT


class SingularMatrixError(NumericsError):
    """A zero pivot or zero elimination factor was met."""

    code = ErrorCode.GAUSS_SINGULAR


class LimitsOutOfRangeError(NumericsError):
    code = ErrorCode.LIMITS_OUT_OF_RANGE


class FatalIntegrationError(NumericsError):
    """Resolved interval indices are inconsistent; indicates a defect, not bad input."""

    code = ErrorCode.FATAL_INTEGRATION_ERROR
