"""
statsuite: statistical engine for an SPSS-style analysis suite.

Weighted frequencies, nonparametric tests and OLS regression that return
rendered-ready tables, served to a host through cached compute units.

Submodules:
    descriptive: Weighted frequencies, percentiles and summary statistics
    nonparametric: Mann-Whitney U, Kruskal-Wallis H, two-sample KS, runs test
    regression: OLS with ANOVA, coefficient and collinearity diagnostics
    execution: Compute-unit registry with result cache
"""

__version__ = "0.1.0"

from statsuite import descriptive
from statsuite import nonparametric
from statsuite import regression
from statsuite import execution

__all__ = [
    "__version__",
    "descriptive",
    "nonparametric",
    "regression",
    "execution",
]
