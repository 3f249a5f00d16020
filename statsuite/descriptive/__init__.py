"""
Weighted frequency analysis.

Public API:
    frequencies(values, weights)  - Frequency table, modes, percentiles, statistics
    percentile(values, p)         - One weighted percentile

Numeric, string and date variables are supported. Dates are handled as
SPSS seconds and displayed as dd-mm-yyyy.
"""

from statsuite.descriptive.design import FrequencyDesign, collation_key
from statsuite.descriptive.solution import (
    FrequencyParams,
    FrequencyRow,
    FrequencySolution,
    statistics_table,
    frequency_table,
)
from statsuite.descriptive.solvers import frequencies, percentile

__all__ = [
    "frequencies",
    "percentile",
    "FrequencyDesign",
    "FrequencyParams",
    "FrequencyRow",
    "FrequencySolution",
    "collation_key",
    "statistics_table",
    "frequency_table",
]
