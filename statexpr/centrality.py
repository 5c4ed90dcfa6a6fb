# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/13 09:42
    @file  : centrality.py
"""

from __future__ import annotations
import math

import numpy as np
import pandas as pd
from scipy import stats
from scipy.stats import gaussian_kde

from .classes import winsorize, _ci_label, _interval_text
from .formatting import format_value
from .switch import StatsType, stats_type_switch

_LABELS = {
    StatsType.PARAMETRIC: "mean",
    StatsType.NONPARAMETRIC: "median",
    StatsType.ROBUST: "trimmed",
    StatsType.BAYES: "MAP",
}


def _mean(x, tr, conf_level):
    n = x.size
    m = float(np.mean(x))
    if n < 2:
        return m, np.nan, np.nan
    se = float(np.std(x, ddof=1)) / math.sqrt(n)
    q = stats.t.ppf(1 - (1 - conf_level) / 2, n - 1)
    return m, m - q * se, m + q * se


def _median(x, tr, conf_level):
    # 基于二项分布的次序统计量区间，不依赖分布假设
    xs = np.sort(x)
    n = xs.size
    k = int(stats.binom.ppf((1 - conf_level) / 2, n, 0.5))
    lo = xs[max(k - 1, 0)]
    hi = xs[min(n - k, n - 1)]
    return float(np.median(xs)), float(lo), float(hi)


def _trimmed(x, tr, conf_level):
    n = x.size
    tm = float(stats.trim_mean(x, tr))
    df = n - 2 * int(math.floor(tr * n)) - 1
    if df < 1:
        return tm, np.nan, np.nan
    sw = float(np.std(winsorize(x, tr), ddof=1))
    se = sw / ((1 - 2 * tr) * math.sqrt(n))
    q = stats.t.ppf(1 - (1 - conf_level) / 2, df)
    return tm, tm - q * se, tm + q * se


def _map(x, tr, conf_level):
    # 核密度的众数；单点或零方差时直接取该值
    if x.size < 2 or np.ptp(x) == 0:
        return float(x[0]), np.nan, np.nan
    kde = gaussian_kde(x)
    grid = np.linspace(x.min(), x.max(), 1024)
    return float(grid[np.argmax(kde(grid))]), np.nan, np.nan


_ESTIMATORS = {
    StatsType.PARAMETRIC: _mean,
    StatsType.NONPARAMETRIC: _median,
    StatsType.ROBUST: _trimmed,
    StatsType.BAYES: _map,
}


def centrality_description(x, *, type: str | StatsType = "parametric", tr: float = 0.2,
                           digits: int = 2, conf_level: float = 0.95) -> pd.DataFrame:
    """
        计算样本的中心趋势，并生成用于标注的表达式
    Parameters
    ----------
    x: array-like
        数值样本，缺失值会被剔除
    type: str | StatsType
        parametric -> 均值；nonparametric -> 中位数；robust -> 截尾均值；bayes -> MAP
    tr: float
        截尾比例，仅 robust 使用
    digits: int
        保留小数位数
    conf_level: float
        置信水平

    Returns
    -------
    out: pd.DataFrame
        单行表：estimate, conf_low, conf_high, conf_level, n_obs, centrality, expression

    Examples
    --------
    >>> centrality_description([1, 2, 3], type="np")["estimate"].iloc[0]
    2.0
    """
    stats_type = stats_type_switch(type)
    if not 0 <= tr < 0.5:
        raise ValueError("tr must be in [0, 0.5)")
    if not 0 < conf_level < 1:
        raise ValueError("conf_level must be between 0 and 1")
    x = np.asarray(x, dtype=float).ravel()
    x = x[~np.isnan(x)]
    if x.size == 0:
        raise ValueError("at least 1 non-missing observation is required")

    estimate, lo, hi = _ESTIMATORS[stats_type](x, tr, conf_level)
    label = _LABELS[stats_type]
    expression = f"$\\widehat{{\\mu}}_{{\\mathrm{{{label}}}}} = {format_value(estimate, digits)}$"
    if np.isfinite(lo) and np.isfinite(hi):
        expression += f", ${_ci_label(conf_level)}$ {_interval_text(lo, hi, digits)}"

    return pd.DataFrame([{
        "estimate": estimate, "conf_low": lo, "conf_high": hi,
        "conf_level": conf_level, "n_obs": int(x.size),
        "centrality": label, "expression": expression,
    }])
