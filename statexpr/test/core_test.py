# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/16 10:15
    @file  : core_test.py
"""

import math
import time

import numpy as np
import pandas as pd
import pytest
from scipy import stats
from scipy.integrate import quad
from scipy.optimize import brentq

from statexpr import one_sample_test, extract_expression, StatsType
from statexpr.classes import winsorize, akp_constant

SAMPLE = [1, 2, 2, 3, 4, 100]
df = pd.DataFrame({"len": SAMPLE})

rng = np.random.default_rng(0)
shifted = pd.DataFrame({"y": rng.normal(0.4, 1, 30)})
# 均值远大于标准差，t 统计量上千
years = pd.DataFrame({"year": rng.integers(1990, 2020, 100).astype(float)})


def test_parametric_matches_scipy():
    res = one_sample_test(df, "len", type="parametric", test_value=0)
    ref = stats.ttest_1samp(SAMPLE, 0)
    row = res.iloc[0]
    assert row["statistic"] == pytest.approx(ref.statistic)
    assert row["p_value"] == pytest.approx(ref.pvalue)
    assert row["df"] == 5
    assert row["n_obs"] == 6
    assert row["method"] == "One Sample t-test"
    assert "t_{\\mathrm{Student}}(5)" in row["expression"]


def test_hedges_g_is_corrected_cohen_d():
    d = np.mean(SAMPLE) / np.std(SAMPLE, ddof=1)
    g = one_sample_test(df, "len", effsize_type="g")["estimate"].iloc[0]
    d_hat = one_sample_test(df, "len", effsize_type="d")["estimate"].iloc[0]
    assert d_hat == pytest.approx(d)
    assert g == pytest.approx(d * (1 - 3 / (4 * 5 - 1)))


def test_effect_size_interval_brackets_estimate():
    row = one_sample_test(shifted, "y", effsize_type="d").iloc[0]
    assert row["conf_low"] < row["estimate"] < row["conf_high"]
    assert row["conf_level"] == 0.95


def test_one_sided_alternative_halves_pvalue():
    two = one_sample_test(shifted, "y")["p_value"].iloc[0]
    greater = one_sample_test(shifted, "y", alternative="greater")
    assert greater["p_value"].iloc[0] == pytest.approx(two / 2)
    assert greater["conf_high"].iloc[0] == np.inf


def test_unknown_effsize_raises():
    with pytest.raises(ValueError):
        one_sample_test(df, "len", effsize_type="eta")


def test_nonparametric_signed_rank():
    row = one_sample_test(df, "len", type="np").iloc[0]
    # 全部差值为正：V = 1+...+6
    assert row["statistic"] == 21
    assert row["estimate"] == pytest.approx(1.0)
    assert row["p_value"] == pytest.approx(stats.wilcoxon(SAMPLE).pvalue)
    # 秩和是整数，不带小数
    assert "V_{\\mathrm{Wilcoxon}} = 21$" in row["expression"]


def test_nonparametric_drops_zero_differences():
    data = pd.DataFrame({"v": [3, 3, 4, 1, 5, 2, 6]})
    row = one_sample_test(data, "v", type="nonparametric", test_value=3).iloc[0]
    # 非零差值 [1, -2, 2, -1, 3]，秩 [1.5, 3.5, 3.5, 1.5, 5]
    assert row["statistic"] == pytest.approx(1.5 + 3.5 + 5)
    assert row["estimate"] == pytest.approx((10 - 5) / 15)


def test_robust_trimmed_mean_t():
    row = one_sample_test(df, "len", type="robust", tr=0.2).iloc[0]
    sw = np.std(winsorize(SAMPLE, 0.2), ddof=1)
    se = sw / (0.6 * math.sqrt(6))
    assert row["df"] == 3
    assert row["statistic"] == pytest.approx(2.75 / se)
    assert row["p_value"] == pytest.approx(2 * stats.t.sf(2.75 / se, 3))
    assert row["estimate"] == pytest.approx(akp_constant(0.2) * 2.75 / sw)


def test_akp_constant_matches_known_value():
    assert akp_constant(0.2) == pytest.approx(0.642, abs=1e-3)
    assert akp_constant(0) == 1.0


def test_winsorize_replaces_tails():
    assert list(winsorize(SAMPLE, 0.2)) == [2, 2, 2, 3, 4, 4]


def test_robust_rejects_bad_trim():
    with pytest.raises(ValueError):
        one_sample_test(df, "len", type="robust", tr=0.5)


def test_bayes_factor_matches_direct_integration():
    row = one_sample_test(shifted, "y", type="bayes", bf_prior=0.707).iloc[0]
    x = shifted["y"].to_numpy()
    n, nu = x.size, x.size - 1
    t = stats.ttest_1samp(x, 0).statistic
    num, _ = quad(lambda d: stats.nct.pdf(t, nu, d * math.sqrt(n)) * stats.cauchy.pdf(d, 0, 0.707),
                  -10, 10, points=[t / math.sqrt(n)], limit=200)
    assert row["bf10"] == pytest.approx(num / stats.t.pdf(t, nu), rel=1e-3)
    assert "\\log_{e}(\\mathrm{BF}_{01})" in row["expression"]
    assert row["conf_low"] < row["estimate"] < row["conf_high"]


def test_bayes_factor_favours_null_for_centred_data():
    centred = pd.DataFrame({"y": [-1.2, -0.4, 0.1, 0.3, -0.2, 0.5, 0.9, -0.1, 0.2, -0.3]})
    assert one_sample_test(centred, "y", type="bayes")["bf10"].iloc[0] < 1


def _quantiles(cdf, lo, hi):
    return [brentq(lambda q: cdf(q) - p, lo, hi) for p in (0.5, 0.025, 0.975)]


def test_bayes_posterior_matches_direct_integration():
    row = one_sample_test(shifted, "y", type="bayes", bf_prior=0.707).iloc[0]
    x = shifted["y"].to_numpy()
    n, nu = x.size, x.size - 1
    t = stats.ttest_1samp(x, 0).statistic

    def dens(d):
        return stats.nct.pdf(t, nu, d * math.sqrt(n)) * stats.cauchy.pdf(d, 0, 0.707)

    total, _ = quad(dens, -3, 4, limit=200)
    median, low, high = _quantiles(lambda q: quad(dens, -3, q, limit=200)[0] / total, -3, 4)
    assert row["estimate"] == pytest.approx(median, abs=1e-2)
    assert row["conf_low"] == pytest.approx(low, abs=1e-2)
    assert row["conf_high"] == pytest.approx(high, abs=1e-2)


def test_bayes_posterior_for_large_t():
    start = time.perf_counter()
    row = one_sample_test(years, "year", type="bayes").iloc[0]
    assert time.perf_counter() - start < 10

    x = years["year"].to_numpy()
    n, nu = x.size, x.size - 1
    t = stats.ttest_1samp(x, 0).statistic
    assert t > 1000

    # p(t | d) = E[S * phi(t*S - d*sqrt(n))]，S = sqrt(chi2_nu / nu)，换元 z = t*S - d*sqrt(n)
    log_c = math.log(2) + nu / 2 * math.log(nu / 2) - math.lgamma(nu / 2)

    def lik(d):
        lam = d * math.sqrt(n)

        def integrand(z):
            s = (z + lam) / t
            log_f = log_c + (nu - 1) * math.log(s) - nu * s ** 2 / 2
            return s * math.exp(-z ** 2 / 2 + log_f) / (math.sqrt(2 * math.pi) * t)

        return quad(integrand, -12, 12)[0]

    d_hat = t / math.sqrt(n)
    se = math.sqrt(1 / n + d_hat ** 2 / (2 * nu))
    grid = np.linspace(d_hat - 10 * se, d_hat + 10 * se, 401)
    dens = np.array([lik(d) for d in grid]) * stats.cauchy.pdf(grid, 0, 0.707)
    cdf = np.concatenate([[0.0], np.cumsum((dens[1:] + dens[:-1]) / 2)])
    cdf /= cdf[-1]
    median, low, high = np.interp([0.5, 0.025, 0.975], cdf, grid)
    assert row["estimate"] == pytest.approx(median, rel=1e-2)
    assert row["conf_low"] == pytest.approx(low, rel=1e-2)
    assert row["conf_high"] == pytest.approx(high, rel=1e-2)
    assert row["log_e_bf10"] > 0


def test_missing_values_are_dropped():
    data = pd.DataFrame({"len": SAMPLE + [None, None]})
    assert one_sample_test(data, "len")["n_obs"].iloc[0] == 6


def test_too_few_observations():
    with pytest.raises(ValueError):
        one_sample_test(pd.DataFrame({"len": [1.0, None]}), "len")


def test_missing_column_propagates_key_error():
    with pytest.raises(KeyError):
        one_sample_test(df, "width")


def test_enum_type_and_extract_expression():
    res = one_sample_test(df, "len", type=StatsType.ROBUST)
    assert extract_expression(res) == res["expression"].iloc[0]
    assert "t_{\\mathrm{trimmed}}(3)" in extract_expression(res)
