"""
Core infrastructure for statsuite.

This module provides shared abstractions and utilities used by all
domain-specific submodules (nonparametric, descriptive, regression) and by
the execution layer.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    sample: Missing-value filtering into validated numeric samples
    tables: Tagged table/row types handed to the renderer
    compute: Timing, tolerances, linear algebra kernels
"""

from statsuite.core.result import Result
from statsuite.core.exceptions import (
    StatSuiteError,
    ValidationError,
    DimensionError,
    InsufficientDataError,
    NumericalError,
    SingularMatrixError,
    ZeroVarianceError,
    ExecutionError,
    UnknownModuleError,
    UnknownMethodError,
)
from statsuite.core.sample import MissingSpec, ValidatedSample, GroupedSample
from statsuite.core.tables import Table, ColumnHeader, LeafRow, GroupRow

__all__ = [
    # Result
    "Result",
    # Exceptions
    "StatSuiteError",
    "ValidationError",
    "DimensionError",
    "InsufficientDataError",
    "NumericalError",
    "SingularMatrixError",
    "ZeroVarianceError",
    "ExecutionError",
    "UnknownModuleError",
    "UnknownMethodError",
    # Samples
    "MissingSpec",
    "ValidatedSample",
    "GroupedSample",
    # Tables
    "Table",
    "ColumnHeader",
    "LeafRow",
    "GroupRow",
]
