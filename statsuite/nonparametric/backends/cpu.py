"""
CPU reference backend for nonparametric tests.

Dispatches to test-specific submodules based on design.test_type.
"""

from __future__ import annotations

from typing import Union

from statsuite.core.result import Result
from statsuite.core.compute.timing import Timer
from statsuite.nonparametric._common import (
    MannWhitneyParams,
    KruskalWallisParams,
    KolmogorovSmirnovParams,
    RunsParams,
)
from statsuite.nonparametric.design import NonparametricDesign

TestParams = Union[MannWhitneyParams, KruskalWallisParams, KolmogorovSmirnovParams, RunsParams]


class CPUNonparametricBackend:
    """CPU reference backend for nonparametric tests."""

    @property
    def name(self) -> str:
        return 'cpu_nonparametric'

    def solve(self, design: NonparametricDesign) -> Result[TestParams]:
        """Dispatch to test-specific implementation based on design.test_type."""
        timer = Timer()
        timer.start()

        test_type = design.test_type

        with timer.section(test_type):
            if test_type == "mann_whitney":
                from statsuite.nonparametric.backends._mann_whitney import mann_whitney
                params, warnings_list = mann_whitney(design)
            elif test_type == "kruskal_wallis":
                from statsuite.nonparametric.backends._kruskal_wallis import kruskal_wallis
                params, warnings_list = kruskal_wallis(design)
            elif test_type == "ks_two_sample":
                from statsuite.nonparametric.backends._ks_two_sample import ks_two_sample
                params, warnings_list = ks_two_sample(design)
            elif test_type == "runs":
                from statsuite.nonparametric.backends._runs import runs
                params, warnings_list = runs(design)
            else:
                raise ValueError(f"Unknown test_type: {test_type!r}")

        timer.stop()

        return Result(
            params=params,
            info={
                'test_type': test_type,
                'n': design.n,
                'n_excluded': design.n_excluded,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
