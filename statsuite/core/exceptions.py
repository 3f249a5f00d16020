"""
Exception hierarchy for statsuite.

All exceptions inherit from StatSuiteError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class StatSuiteError(Exception):
    """Base exception for all statsuite errors."""
    pass


class ValidationError(StatSuiteError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class InsufficientDataError(ValidationError):
    """
    Not enough observations to compute the requested statistic.

    Attributes:
        required: Minimum number of observations (or groups) needed
        actual: Number actually available after missing-value filtering
    """

    def __init__(
        self,
        message: str,
        required: int | None = None,
        actual: int | None = None,
    ):
        super().__init__(message)
        self.required = required
        self.actual = actual


class NumericalError(StatSuiteError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when Gauss-Jordan elimination meets a pivot whose magnitude
    falls below the singularity threshold.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Column at which elimination broke down
        pivot_magnitude: Largest available pivot magnitude in that column
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        pivot_magnitude: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.pivot_magnitude = pivot_magnitude


class ZeroVarianceError(NumericalError):
    """
    A test statistic's denominator is zero.

    Raised instead of returning NaN when, for example, every value is tied
    or every case falls on one side of a runs-test cut point.

    Attributes:
        quantity: Name of the quantity whose variance vanished
    """

    def __init__(self, message: str, quantity: str | None = None):
        super().__init__(message)
        self.quantity = quantity


class ExecutionError(StatSuiteError):
    """Base class for failures in the compute-unit execution layer."""
    pass


class UnknownModuleError(ExecutionError):
    """No analysis module is registered under the requested name."""

    def __init__(self, module_name: str):
        super().__init__(f"Unknown analysis module: {module_name!r}")
        self.module_name = module_name


class UnknownMethodError(ExecutionError):
    """The resolved module does not expose the requested method."""

    def __init__(self, module_name: str, method_name: str):
        super().__init__(
            f"Module {module_name!r} has no method {method_name!r}"
        )
        self.module_name = module_name
        self.method_name = method_name
