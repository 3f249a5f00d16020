"""
Tests for the runs test.
"""

import numpy as np
import pytest
from scipy import stats

from statsuite.core.exceptions import InsufficientDataError, ValidationError, ZeroVarianceError
from statsuite.nonparametric import runs_test
from statsuite.nonparametric.backends._runs import count_runs, first_mode, resolve_test_value


class TestHelpers:

    def test_count_runs(self):
        assert count_runs(np.array([True, True, False, True])) == 3
        assert count_runs(np.array([False])) == 1
        assert count_runs(np.array([], dtype=bool)) == 0

    def test_first_mode_prefers_first_seen(self):
        assert first_mode(np.array([3.0, 1.0, 3.0, 1.0, 2.0])) == 3.0
        assert first_mode(np.array([1.0, 2.0, 2.0])) == 2.0

    def test_resolve_test_value(self):
        x = np.array([1.0, 2.0, 3.0, 10.0])
        assert resolve_test_value(x, "median") == 2.5
        assert resolve_test_value(x, "mean") == 4.0
        assert resolve_test_value(x, 7) == 7.0


class TestRunsTest:

    def test_two_runs(self):
        result = runs_test(list(range(1, 11)))
        p = result.params
        assert p.test_value == 5.5
        assert p.n_below == 5 and p.n_above == 5
        assert p.runs == 2
        assert p.expected_runs == pytest.approx(6.0)
        assert p.variance == pytest.approx(2000.0 / 900.0)
        expected_z = (2.5 - 6.0) / np.sqrt(2000.0 / 900.0)
        assert p.z == pytest.approx(expected_z)
        assert p.p_value == pytest.approx(2 * stats.norm.sf(abs(expected_z)))

    def test_alternating(self):
        p = runs_test([1, 10, 1, 10, 1, 10]).params
        assert p.runs == 6
        assert p.expected_runs == pytest.approx(4.0)
        assert p.z == pytest.approx(1.5 / np.sqrt(1.2))

    def test_continuity_correction_toward_expected(self, rng):
        p = runs_test(rng.standard_normal(30)).params
        corrected = p.z * np.sqrt(p.variance) + p.expected_runs
        assert abs(corrected - p.runs) == pytest.approx(0.5) or p.runs == p.expected_runs

    def test_cases_at_cut_point_count_as_above(self):
        p = runs_test([1, 2, 2, 3], cut_point=2).params
        assert p.n_below == 1
        assert p.n_above == 3
        assert p.cut_point == "custom"

    @pytest.mark.parametrize("cut_point", ["median", "mean", "mode"])
    def test_named_cut_points(self, cut_point):
        result = runs_test([3, 1, 4, 1, 5, 9, 2, 6, 5, 3], cut_point=cut_point)
        assert result.params.cut_point == cut_point

    def test_missing_excluded(self):
        result = runs_test([1, None, 5, 2, 6], cut_point=3.5)
        assert result.params.n_total == 4
        assert result.info['n_excluded'] == 1


class TestRunsErrors:

    def test_unknown_cut_point(self):
        with pytest.raises(ValidationError, match="cut_point"):
            runs_test([1, 2, 3], cut_point="quartile")

    def test_too_few_cases(self):
        with pytest.raises(InsufficientDataError):
            runs_test([1, None])

    def test_one_sided(self):
        with pytest.raises(ZeroVarianceError, match="one side"):
            runs_test([5, 5, 5, 5])
