"""
Tests for frequency-weighted summary statistics and the Statistics table.
"""

import datetime as dt

import numpy as np
import pytest
from scipy import stats as sps

from statsuite.descriptive import frequencies, statistics_table, frequency_table
from statsuite.descriptive._statistics import weighted_statistics
from statsuite.descriptive._dates import from_spss_seconds, to_spss_seconds, parse_date_string
from statsuite.core.exceptions import ValidationError

SAMPLE = [2, 4, 4, 4, 5, 5, 7, 9]


class TestWeightedStatistics:

    def test_unweighted_moments(self):
        s = frequencies(SAMPLE).statistics
        x = np.array(SAMPLE, dtype=float)
        assert s["mean"] == pytest.approx(5.0)
        assert s["variance"] == pytest.approx(np.var(x, ddof=1))
        assert s["std"] == pytest.approx(np.std(x, ddof=1))
        assert s["se_mean"] == pytest.approx(np.std(x, ddof=1) / np.sqrt(8))
        assert s["skewness"] == pytest.approx(sps.skew(x, bias=False))
        assert s["kurtosis"] == pytest.approx(sps.kurtosis(x, bias=False))
        assert s["range"] == 7.0
        assert s["minimum"] == 2.0
        assert s["maximum"] == 9.0
        assert s["sum"] == 40.0

    def test_weights_act_as_replication(self):
        weighted = weighted_statistics(np.array([1.0, 2.0, 3.0]), np.array([2.0, 1.0, 1.0]))
        replicated = weighted_statistics(np.array([1.0, 1.0, 2.0, 3.0]), np.ones(4))
        for key, value in replicated.items():
            assert weighted[key] == pytest.approx(value)

    def test_standard_errors_of_shape(self):
        s = weighted_statistics(np.arange(1.0, 11.0), np.ones(10))
        W = 10.0
        se_skew = np.sqrt(6 * W * (W - 1) / ((W - 2) * (W + 1) * (W + 3)))
        assert s["se_skewness"] == pytest.approx(se_skew)
        assert s["se_kurtosis"] == pytest.approx(
            np.sqrt(4 * (W ** 2 - 1) * se_skew ** 2 / ((W - 3) * (W + 5)))
        )

    def test_single_case_has_no_dispersion(self):
        s = weighted_statistics(np.array([3.0]), np.array([1.0]))
        assert s["mean"] == 3.0
        assert s["variance"] is None
        assert s["skewness"] is None
        assert s["kurtosis"] is None

    def test_constant_has_no_shape(self):
        s = weighted_statistics(np.full(5, 2.0), np.ones(5))
        assert s["variance"] == 0.0
        assert s["skewness"] is None
        assert s["kurtosis"] is None

    def test_empty(self):
        s = weighted_statistics(np.empty(0), np.empty(0))
        assert all(v is None for v in s.values())

    def test_statistics_disabled(self):
        assert frequencies(SAMPLE, statistics=False).statistics == {}


class TestStatisticsTable:

    def test_layout(self):
        a = frequencies(SAMPLE, name="a", quartiles=True)
        b = frequencies([1, None, 3], name="b", label="Second")
        table = statistics_table([a, b]).to_dict()
        assert table["title"] == "Statistics"
        assert [h["header"] for h in table["columnHeaders"]][2:] == ["a", "Second"]

        n_group = table["rows"][0]
        assert n_group["rowHeader"] == ["N"]
        assert n_group["children"][0] == {"rowHeader": ["N", "Valid"], "var_0": 8.0, "var_1": 2.0}
        assert n_group["children"][1]["var_1"] == 1.0

        captions = [r["rowHeader"][0] for r in table["rows"]]
        assert captions[1:4] == ["Mean", "Std. Error of Mean", "Median"]
        assert captions[-1] == "Percentiles"
        children = table["rows"][-1]["children"]
        assert [c["rowHeader"][1] for c in children] == ["25", "50", "75"]
        assert children[0]["var_1"] is None

    def test_multiple_modes_footnote(self):
        result = frequencies([10, 20, 10, 30], weights=[1.5, 2, 0.5, 1])
        table = statistics_table([result]).to_dict()
        mode_row = next(r for r in table["rows"] if r["rowHeader"] == ["Mode"])
        assert mode_row["var_0"] == 10.0
        assert table["footnotes"] == ["Multiple modes exist. The smallest value is shown"]


class TestFrequencyTable:

    def test_valid_missing_total_blocks(self):
        result = frequencies([1, 1, 2, None], name="x", label="Item")
        table = frequency_table(result).to_dict()
        assert table["title"] == "Item"
        valid, missing, total = table["rows"]
        assert valid["rowHeader"] == ["Valid"]
        assert valid["children"][-1]["rowHeader"] == ["Valid", "Total"]
        assert valid["children"][-1]["Percent"] == pytest.approx(75.0)
        assert missing["rowHeader"] == ["Missing", "System"]
        assert missing["Frequency"] == 1.0
        assert total == {"rowHeader": ["Total"], "Frequency": 4.0, "Percent": 100.0}

    def test_to_tables(self):
        result = frequencies([1, 2])
        assert [t.title for t in result.to_tables()] == ["Statistics", "x"]
        assert len(result.to_tables(include_statistics=False)) == 1


class TestDates:

    def test_epoch(self):
        assert to_spss_seconds(dt.date(1582, 10, 14)) == 0.0
        assert to_spss_seconds(dt.date(1582, 10, 15)) == 86400.0
        assert from_spss_seconds(86400.0) == "15-10-1582"

    def test_string_formats(self):
        expected = dt.datetime(2020, 2, 1)
        assert parse_date_string("01-02-2020") == expected
        assert parse_date_string("1/2/2020") == expected
        assert parse_date_string("2020-02-01") == expected

    def test_invalid_strings(self):
        with pytest.raises(ValidationError):
            parse_date_string("yesterday")
        with pytest.raises(ValidationError):
            parse_date_string("31-02-2020")

    def test_numbers_pass_through(self):
        assert to_spss_seconds(12345.0) == 12345.0

    def test_date_frequencies(self):
        result = frequencies(
            ["15-03-2021", "01-02-2020", dt.date(2020, 2, 1), None],
            kind="date", quartiles=True,
        )
        assert [r.label for r in result.rows] == ["01-02-2020", "15-03-2021"]
        assert result.modes == (to_spss_seconds("01-02-2020"),)
        assert result.missing == 1.0

        table = statistics_table([result]).to_dict()
        by_caption = {r["rowHeader"][0]: r for r in table["rows"]}
        assert by_caption["Minimum"]["var_0"] == "01-02-2020"
        assert by_caption["Maximum"]["var_0"] == "15-03-2021"
        assert by_caption["Mode"]["var_0"] == "01-02-2020"
        assert isinstance(by_caption["Range"]["var_0"], float)
