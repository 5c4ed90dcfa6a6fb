# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/12 10:05
    @file  : switch.py
"""

from __future__ import annotations
from enum import Enum


class StatsType(str, Enum):
    """
        统计检验的四个家族
    """
    PARAMETRIC = "parametric"
    NONPARAMETRIC = "nonparametric"
    ROBUST = "robust"
    BAYES = "bayes"


# 按首字母识别，"p"/"np"/"r"/"bf" 等缩写都可以
_PREFIX = {
    "p": StatsType.PARAMETRIC,
    "n": StatsType.NONPARAMETRIC,
    "r": StatsType.ROBUST,
    "b": StatsType.BAYES,
}


def stats_type_switch(type: str | StatsType) -> StatsType:
    """
        将用户传入的检验类型统一成 StatsType
    Parameters
    ----------
    type: str | StatsType
        "parametric"、"nonparametric"、"robust"、"bayes" 或其缩写，大小写不敏感

    Returns
    -------
    out: StatsType

    Examples
    --------
    >>> stats_type_switch("np")
    <StatsType.NONPARAMETRIC: 'nonparametric'>

    >>> stats_type_switch("bf").value
    'bayes'
    """
    if isinstance(type, StatsType):
        return type
    if not isinstance(type, str) or not type.strip():
        raise ValueError(f"type must be a non-empty string, got {type!r}")
    token = type.strip().lower()
    try:
        return _PREFIX[token[0]]
    except KeyError:
        raise ValueError(
            f"unknown type {type!r}; expected one of "
            "'parametric', 'nonparametric', 'robust', 'bayes'"
        ) from None
