"""
Tests for the statsuite exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via StatSuiteError)
    - Diagnostic attributes on InsufficientDataError, SingularMatrixError,
      ZeroVarianceError and the execution-layer errors
    - Default attribute values (None for optional attributes)
"""

import pytest

from statsuite.core.exceptions import (
    DimensionError,
    ExecutionError,
    InsufficientDataError,
    NumericalError,
    SingularMatrixError,
    StatSuiteError,
    UnknownMethodError,
    UnknownModuleError,
    ValidationError,
    ZeroVarianceError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via StatSuiteError."""

    @pytest.mark.parametrize("exc", [
        ValidationError("bad input"),
        DimensionError("wrong shape"),
        InsufficientDataError("too few"),
        NumericalError("failed"),
        SingularMatrixError("singular"),
        ZeroVarianceError("zero"),
        ExecutionError("broken"),
        UnknownModuleError("nope"),
        UnknownMethodError("mod", "nope"),
    ])
    def test_is_statsuite_error(self, exc):
        with pytest.raises(StatSuiteError):
            raise exc

    def test_dimension_error_is_validation_error(self):
        assert issubclass(DimensionError, ValidationError)

    def test_insufficient_data_is_validation_error(self):
        assert issubclass(InsufficientDataError, ValidationError)

    def test_singular_matrix_error_is_numerical_error(self):
        assert issubclass(SingularMatrixError, NumericalError)

    def test_zero_variance_error_is_numerical_error(self):
        assert issubclass(ZeroVarianceError, NumericalError)

    def test_execution_errors_are_not_validation_errors(self):
        assert not issubclass(UnknownModuleError, ValidationError)
        assert issubclass(UnknownMethodError, ExecutionError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestInsufficientDataError:

    def test_attributes(self):
        err = InsufficientDataError("need more", required=4, actual=2)
        assert err.required == 4
        assert err.actual == 2
        assert str(err) == "need more"

    def test_defaults(self):
        err = InsufficientDataError("need more")
        assert err.required is None
        assert err.actual is None


class TestSingularMatrixError:

    def test_attributes(self):
        err = SingularMatrixError(
            "singular", matrix_name="X'X", pivot_index=2, pivot_magnitude=1e-14,
        )
        assert err.matrix_name == "X'X"
        assert err.pivot_index == 2
        assert err.pivot_magnitude == 1e-14

    def test_defaults(self):
        err = SingularMatrixError("singular")
        assert err.matrix_name is None
        assert err.pivot_index is None
        assert err.pivot_magnitude is None


class TestZeroVarianceError:

    def test_quantity(self):
        err = ZeroVarianceError("all tied", quantity="U")
        assert err.quantity == "U"
        assert "all tied" in str(err)


class TestExecutionErrors:

    def test_unknown_module_message(self):
        err = UnknownModuleError("stats.nothing")
        assert err.module_name == "stats.nothing"
        assert "stats.nothing" in str(err)

    def test_unknown_method_message(self):
        err = UnknownMethodError("nonparametric.runs", "explode")
        assert err.module_name == "nonparametric.runs"
        assert err.method_name == "explode"
        assert "explode" in str(err)
