# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/16 11:02
    @file  : centrality_test.py
"""

import numpy as np
import pytest
from scipy import stats

from statexpr import centrality_description

SAMPLE = np.array([1, 2, 2, 3, 4, 100], dtype=float)
rng = np.random.default_rng(1)


def test_mean_with_t_interval():
    row = centrality_description(SAMPLE, type="parametric").iloc[0]
    half = stats.t.ppf(0.975, 5) * SAMPLE.std(ddof=1) / np.sqrt(6)
    assert row["estimate"] == pytest.approx(SAMPLE.mean())
    assert row["conf_low"] == pytest.approx(SAMPLE.mean() - half)
    assert row["conf_high"] == pytest.approx(SAMPLE.mean() + half)
    assert row["centrality"] == "mean"
    assert "\\widehat{\\mu}_{\\mathrm{mean}} = 18.67" in row["expression"]


def test_median_order_statistic_interval():
    row = centrality_description(SAMPLE, type="np").iloc[0]
    assert row["estimate"] == 2.5
    # n=6 时 95% 区间落在两端的次序统计量
    assert (row["conf_low"], row["conf_high"]) == (1.0, 100.0)


def test_trimmed_mean():
    row = centrality_description(SAMPLE, type="robust", tr=0.2).iloc[0]
    assert row["estimate"] == pytest.approx(2.75)
    assert row["conf_low"] < 2.75 < row["conf_high"]
    assert row["centrality"] == "trimmed"


def test_map_is_density_mode_without_interval():
    x = rng.normal(5, 1, 500)
    row = centrality_description(x, type="bayes").iloc[0]
    assert row["estimate"] == pytest.approx(5, abs=0.4)
    assert np.isnan(row["conf_low"]) and np.isnan(row["conf_high"])
    assert "CI" not in row["expression"]


def test_map_of_constant_sample():
    assert centrality_description([3.0, 3.0, 3.0], type="bayes")["estimate"].iloc[0] == 3.0


def test_digits_and_missing_values():
    row = centrality_description([1.0, np.nan, 2.0], digits=3).iloc[0]
    assert row["n_obs"] == 2
    assert "1.500" in row["expression"]


def test_invalid_arguments():
    with pytest.raises(ValueError):
        centrality_description(SAMPLE, type="mode")
    with pytest.raises(ValueError):
        centrality_description([np.nan])
