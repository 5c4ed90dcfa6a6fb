# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/12 10:31
    @file  : formatting.py
"""

from __future__ import annotations
import math


def _is_missing(x) -> bool:
    return x is None or (isinstance(x, float) and math.isnan(x))


def format_value(x, digits: int = 2) -> str:
    """
        数值格式化；绝对值小于 10^-digits 的非零数改用科学计数（mathtext 写法）
    Examples
    --------
    >>> format_value(3.14159, 2)
    '3.14'

    >>> format_value(1.6e-26, 2)
    '1.60\\\\times10^{-26}'
    """
    if _is_missing(x):
        return "NA"
    x = float(x)
    if math.isinf(x):
        return "\\infty" if x > 0 else "-\\infty"
    if x != 0 and abs(x) < 10 ** (-digits):
        mantissa, exponent = f"{x:.{digits}e}".split("e")
        return f"{mantissa}\\times10^{{{int(exponent)}}}"
    return f"{x:.{digits}f}"


def format_df(df, digits: int = 2) -> str:
    """自由度、秩和一类的量：整数不带小数，非整数才保留 digits 位"""
    if _is_missing(df):
        return "NA"
    df = float(df)
    if df.is_integer():
        return str(int(df))
    return f"{df:.{digits}f}"


def format_pvalue(p, digits: int = 2) -> str:
    if _is_missing(p):
        return "NA"
    return format_value(p, digits)


def format_percent(x, digits: int = 0) -> str:
    """
        将比例转换成百分比字符串，用于坐标轴刻度
    Examples
    --------
    >>> format_percent(0.456)
    '46%'

    >>> format_percent(0.456, digits=1)
    '45.6%'
    """
    if _is_missing(x):
        return ""
    return f"{float(x) * 100:.{digits}f}%"
