# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/14 09:36
    @file  : histostats.py
"""

from __future__ import annotations
import warnings
import numpy as np
import pandas as pd
import matplotlib as mpl
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import seaborn as sns
from matplotlib.figure import Figure
from typing import Optional, List, Dict, Any, Union, Callable, Sequence

from statexpr import (StatsType, stats_type_switch, one_sample_test,
                      extract_expression, format_percent)
from .combine import combine_plots
from .labeller import _histo_labeller
from .settings import theme_histostats

_BIN_ARGS: Dict[str, Any] = dict(color="grey", edgecolor="black", alpha=0.7)

# ---------- utils ----------
def _binwidth(x) -> float:
    """默认箱宽：(max - min) / sqrt(n)，n 为非缺失值个数"""
    x = np.asarray(x, float); x = x[~np.isnan(x)]
    if x.size == 0:
        raise ValueError("没有可用的非缺失数值，无法计算箱宽。")
    return float((np.max(x) - np.min(x)) / np.sqrt(x.size))

def _resolve_binwidth(binwidth: Union[float, Callable, None], x) -> float:
    if binwidth is None:
        bw = _binwidth(x)
    elif callable(binwidth):
        bw = float(binwidth(x))
    else:
        bw = float(binwidth)
    # 零极差或单个取值时默认箱宽为 0，直接报错而不是交给分箱层
    if not np.isfinite(bw) or bw <= 0:
        raise ValueError(f"箱宽必须为正的有限数，当前为 {bw!r}；"
                         "样本可能只有一个取值，请显式指定 binwidth。")
    return bw

def _proportion_axis(n_rows: int):
    """副 y 轴：计数 / 原始行数（含缺失行）"""
    return (lambda y: y / n_rows, lambda p: p * n_rows)

def _clean(data: pd.DataFrame, x: str) -> pd.DataFrame:
    df = data[[x]].copy()
    df[x] = pd.to_numeric(df[x])
    return df.dropna()

# ---------- main ----------
def histostats(
    data: Optional[pd.DataFrame] = None, *,
    x: Optional[str] = None,
    binwidth: Union[float, Callable, None] = None,
    xlab: Optional[str] = None, title: Optional[str] = None,
    subtitle: Optional[str] = None, caption: Optional[str] = None,
    type: Union[str, StatsType] = "parametric",
    test_value: float = 0, bf_prior: float = 0.707, bf_message: bool = True,
    effsize_type: str = "g", conf_level: float = 0.95, tr: float = 0.2,
    digits: int = 2,
    theme: Optional[Dict[str, Any]] = None,
    results_subtitle: bool = True,
    bin_args: Optional[Dict[str, Any]] = None,
    centrality_plotting: bool = True,
    centrality_type: Union[str, StatsType, None] = None,
    centrality_line_args: Optional[Dict[str, Any]] = None,
    component: Union[Callable[[plt.Axes], Any], Sequence[Callable[[plt.Axes], Any]], None] = None,
    ax: Optional[plt.Axes] = None,
    **kwargs: Any
) -> plt.Axes:
    """
    单变量直方图 + 单样本检验结果（副标题）+ Bayes 因子（说明文字）+ 中心趋势线。

    主要参数：
      - type: 'parametric'|'nonparametric'|'robust'|'bayes'（可缩写）
      - binwidth: 数值、可调用对象（作用于清洗后的样本），默认 (max-min)/sqrt(n)
      - bin_args: 传给 seaborn.histplot 的样式，默认灰色填充、黑色边框、alpha=0.7；
                  不给 color 时按计数着色。其中的 binwidth 一律被 binwidth 参数覆盖
      - bf_message: 仅在参数检验时附加 Bayes 因子说明
      - centrality_type: 默认与 type 相同
      - centrality_line_args: 传给 ax.axvline，默认蓝色虚线
      - theme: rc 字典，默认 theme_histostats()
      - component: 最后作用在 Axes 上的可调用对象（或其序列），可覆盖前面的任何设置

    隐藏参数（**kwargs）：
      - fontsize: 10
      - figsize: (8, 5)，仅在未传入 ax 时使用
      - pro_fill_cmap: 'Blues'，按计数着色时的 colormap

    统计细节挂在返回的 Axes 上，用 extract_stats(ax) 取出。
    """
    if data is None:
        raise ValueError("需要传入 DataFrame：data=...")
    if x is None:
        raise ValueError("需要指定数值列：x=...")

    fontsize: float = kwargs.pop("fontsize", 10)
    figsize = kwargs.pop("figsize", (8, 5))
    pro_fill_cmap: str = kwargs.pop("pro_fill_cmap", "Blues")
    if kwargs:
        warnings.warn(f"histostats 忽略了未知参数：{sorted(kwargs)}")

    # ========== 数据 ==========
    n_rows = len(data)
    df = _clean(data, x)
    x_vec = df[x].to_numpy(dtype=float)
    stats_type = stats_type_switch(type)

    # ========== 统计检验 ==========
    subtitle_df, caption_df = None, None
    if results_subtitle:
        f_args = dict(test_value=test_value, effsize_type=effsize_type, conf_level=conf_level,
                      digits=digits, tr=tr, bf_prior=bf_prior)
        subtitle_df = one_sample_test(df, x, type=stats_type, **f_args)
        subtitle = extract_expression(subtitle_df)

        # Bayes 因子只跟在参数检验后面
        if stats_type is StatsType.PARAMETRIC and bf_message:
            caption_df = one_sample_test(df, x, type=StatsType.BAYES, **f_args)
            caption = extract_expression(caption_df)

    # ========== 直方图 ==========
    hist_kws = dict(_BIN_ARGS if bin_args is None else bin_args)
    hist_kws["binwidth"] = _resolve_binwidth(binwidth, x_vec)
    fill_by_count = "color" not in hist_kws and "facecolor" not in hist_kws

    rc = theme_histostats() if theme is None else theme
    with mpl.rc_context(rc=rc):
        if ax is None: fig, ax = plt.subplots(figsize=figsize)
        n_before = len(ax.patches)
        sns.histplot(x=x_vec, stat="count", ax=ax, **hist_kws)
        bars = ax.patches[n_before:]

        # 填充色随计数变化，不画色条/图例
        if fill_by_count and bars:
            counts = np.array([b.get_height() for b in bars])
            norm = mpl.colors.Normalize(vmin=counts.min(), vmax=counts.max())
            cmap = mpl.colormaps[pro_fill_cmap]
            for b, c in zip(bars, counts):
                b.set_facecolor(cmap(norm(c)))
        if ax.get_legend() is not None:
            ax.get_legend().remove()

        forward, inverse = _proportion_axis(n_rows)
        sec = ax.secondary_yaxis("right", functions=(forward, inverse))
        sec.yaxis.set_major_formatter(mticker.FuncFormatter(lambda v, pos: format_percent(v, digits=0)))
        sec.set_ylabel("proportion", fontsize=fontsize)

        # ========== 中心趋势 ==========
        centrality_df = None
        if centrality_plotting:
            _histo_labeller(
                ax, x_vec,
                type=stats_type_switch(centrality_type if centrality_type is not None else stats_type),
                tr=tr, digits=digits, conf_level=conf_level,
                centrality_line_args=centrality_line_args, fontsize=fontsize - 1,
            )
            centrality_df = ax._centrality_df

        # ========== 标注 ==========
        ax.set_xlabel(xlab or x, fontsize=fontsize)
        ax.set_ylabel("count", fontsize=fontsize)
        heading = "\n".join(t for t in (title, subtitle) if t)
        if heading:
            ax.set_title(heading, loc="left", fontsize=fontsize, pad=22)
        if caption:
            ax.annotate(caption, xy=(1.0, 0.0), xycoords="axes fraction",
                        xytext=(0, -3 * fontsize), textcoords="offset points",
                        ha="right", va="top", fontsize=fontsize - 1)

        # 用户组件最后加，可以覆盖上面的设置
        if component is not None:
            for comp in (component if isinstance(component, (list, tuple)) else [component]):
                comp(ax)

    # 统计表挂到 Axes（给调用者取用）
    ax._subtitle_df = subtitle_df
    ax._caption_df = caption_df
    ax._centrality_df = centrality_df
    ax._subtitle = subtitle
    ax._caption = caption
    ax._binwidth = hist_kws["binwidth"]
    ax._proportion_denominator = n_rows
    ax._proportion_axis = sec
    return ax


def grouped_histostats(
    data: Optional[pd.DataFrame] = None, *,
    x: Optional[str] = None,
    grouping_var: Optional[str] = None,
    binwidth: Union[float, Callable, None] = None,
    plotgrid_args: Optional[Dict[str, Any]] = None,
    annotation_args: Optional[Dict[str, Any]] = None,
    **kwargs: Any
) -> Figure:
    """
    按 grouping_var 的各水平分别调用 histostats，并拼成网格图。
      - 水平顺序为数据中首次出现的顺序；grouping_var 缺失的行不成图
      - 未指定 binwidth 时，用全体（未分组、已清洗）数据算一次默认箱宽，各子图共用
      - 子图标题固定为水平名，因此不接受 title
      - 其余参数原样传给 histostats
    """
    if data is None:
        raise ValueError("需要传入 DataFrame：data=...")
    if x is None or grouping_var is None:
        raise ValueError("需要指定 x=... 与 grouping_var=...")
    if "title" in kwargs:
        raise TypeError("grouped_histostats 的子图标题为分组水平，不接受 title 参数")

    levels = list(pd.unique(data[grouping_var].dropna()))
    x_all = _clean(data, x)[x].to_numpy(dtype=float)
    shared_bw = _resolve_binwidth(binwidth, x_all)

    plotlist = [
        (lambda ax, level=level: histostats(
            data[data[grouping_var] == level], x=x, title=str(level),
            binwidth=shared_bw, ax=ax, **kwargs))
        for level in levels
    ]
    fig = combine_plots(plotlist, plotgrid_args, annotation_args)
    fig._levels = levels
    fig._binwidth = shared_bw
    return fig


def extract_stats(obj: Union[plt.Axes, Figure]) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    """
    取出 histostats / grouped_histostats 结果中的统计细节。
    Axes -> dict；Figure -> 各子图 dict 组成的列表（按子图顺序）
    """
    if isinstance(obj, Figure):
        return [extract_stats(ax) for ax in getattr(obj, "_panels", [])]
    if not hasattr(obj, "_binwidth"):
        raise ValueError("该对象不是 histostats 的返回结果")
    return {
        "subtitle_data": obj._subtitle_df,
        "caption_data": obj._caption_df,
        "centrality_data": obj._centrality_df,
        "binwidth": obj._binwidth,
    }
