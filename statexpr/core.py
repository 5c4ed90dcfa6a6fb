# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/12 14:02
    @file  : core.py
"""

from __future__ import annotations

import pandas as pd

from .classes import Parametric, NonParametric, Robust, Bayes
from .switch import StatsType, stats_type_switch


def one_sample_test(data: pd.DataFrame, x: str, *,
                    type: str | StatsType = "parametric",
                    test_value: float = 0,
                    effsize_type: str = "g",
                    conf_level: float = 0.95,
                    tr: float = 0.2,
                    bf_prior: float = 0.707,
                    digits: int = 2,
                    alternative: str = "two-sided") -> pd.DataFrame:
    """
        单样本位置检验的一键接口，返回带表达式的单行结果表
    Parameters
    ----------
    data: pd.DataFrame
        数据表
    x: str
        待检验的数值列名，缺失值会被剔除
    type: str | StatsType
        "parametric"（t 检验）、"nonparametric"（Wilcoxon）、"robust"（截尾均值 t 检验）、
        "bayes"（JZS Bayes 因子），可用缩写
    test_value: float
        原假设下的位置参数
    effsize_type: str
        参数检验的效应量，"g"/"unbiased" 为 Hedges' g，"d"/"biased" 为 Cohen's d
    conf_level: float
        置信水平
    tr: float
        截尾比例，robust 使用
    bf_prior: float
        Cauchy 先验尺度，bayes 使用
    digits: int
        表达式中的小数位数
    alternative: str
        "two-sided"、"less" 或 "greater"；bayes 只做双侧

    Returns
    -------
    out: pd.DataFrame
        列为 statistic, df, p_value, method, alternative, effectsize, estimate, conf_level,
        conf_low, conf_high, n_obs, expression（bayes 另有 bf10, log_e_bf10, prior_scale）

    Examples
    --------
    >>> df = pd.DataFrame({"len": [1, 2, 2, 3, 4, 100]})
    >>> one_sample_test(df, "len")["method"].iloc[0]
    'One Sample t-test'
    """
    values = pd.to_numeric(data[x]).dropna().to_numpy()
    stats_type = stats_type_switch(type)
    common = dict(conf_level=conf_level, digits=digits, alternative=alternative)

    if stats_type is StatsType.PARAMETRIC:
        test = Parametric(values, test_value, effsize_type=effsize_type, **common)
    elif stats_type is StatsType.NONPARAMETRIC:
        test = NonParametric(values, test_value, **common)
    elif stats_type is StatsType.ROBUST:
        test = Robust(values, test_value, tr=tr, **common)
    else:
        test = Bayes(values, test_value, bf_prior=bf_prior, **common)
    return pd.DataFrame([test.compute()])


def extract_expression(result: pd.DataFrame) -> str:
    """取出结果表第一行的表达式"""
    return result["expression"].iloc[0]
