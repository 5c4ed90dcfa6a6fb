# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/14 16:48
    @file  : labeller.py
"""

from __future__ import annotations
import matplotlib.pyplot as plt
from typing import Optional, Dict, Any

from statexpr import centrality_description

_LINE_ARGS: Dict[str, Any] = dict(color="blue", linewidth=1, linestyle="--")


def _histo_labeller(
    ax: plt.Axes, x, *,
    type: str = "parametric",
    tr: float = 0.2,
    digits: int = 2,
    conf_level: float = 0.95,
    centrality_line_args: Optional[Dict[str, Any]] = None,
    fontsize: float = 9,
) -> plt.Axes:
    """在中心趋势处画竖线，并在顶部复制的 x 轴上标注数值（及置信区间）"""
    centrality_df = centrality_description(x, type=type, tr=tr, digits=digits, conf_level=conf_level)
    estimate = float(centrality_df["estimate"].iloc[0])
    label = centrality_df["expression"].iloc[0]

    line_kws = dict(_LINE_ARGS if centrality_line_args is None else centrality_line_args)
    # 兼容 linetype 写法
    if "linetype" in line_kws:
        line_kws["linestyle"] = line_kws.pop("linetype")
    line = ax.axvline(estimate, **line_kws)

    top = ax.secondary_xaxis("top")
    top.set_ticks([estimate], labels=[label])
    top.tick_params(axis="x", length=0, labelsize=fontsize)

    ax._centrality_df = centrality_df
    ax._centrality_line = line
    return ax
