# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/15 10:21
    @file  : combine.py
"""

from __future__ import annotations
import math
import string
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from typing import Optional, List, Dict, Any, Callable, Sequence, Union

_ROMAN = [(1000, "m"), (900, "cm"), (500, "d"), (400, "cd"), (100, "c"), (90, "xc"),
          (50, "l"), (40, "xl"), (10, "x"), (9, "ix"), (5, "v"), (4, "iv"), (1, "i")]

def _roman(n: int) -> str:
    out = []
    for value, sym in _ROMAN:
        while n >= value:
            out.append(sym); n -= value
    return "".join(out)

def _letters(n: int, alphabet: str) -> str:
    # 26 之后接着 aa, ab, ...
    s = ""
    while n > 0:
        n, r = divmod(n - 1, 26)
        s = alphabet[r] + s
    return s

def _tags(tag_levels: Union[str, Sequence[str]], n: int) -> List[str]:
    if not isinstance(tag_levels, str):
        tags = [str(t) for t in tag_levels]
        if len(tags) < n:
            raise ValueError(f"tag_levels 只给了 {len(tags)} 个标签，但有 {n} 个子图")
        return tags[:n]
    idx = range(1, n + 1)
    if tag_levels == "A": return [_letters(i, string.ascii_uppercase) for i in idx]
    if tag_levels == "a": return [_letters(i, string.ascii_lowercase) for i in idx]
    if tag_levels == "1": return [str(i) for i in idx]
    if tag_levels == "I": return [_roman(i).upper() for i in idx]
    if tag_levels == "i": return [_roman(i) for i in idx]
    raise ValueError("tag_levels 仅支持 'A'|'a'|'1'|'I'|'i' 或标签序列")

def _grid_shape(n: int, nrow: Optional[int], ncol: Optional[int]):
    if nrow is None and ncol is None:
        ncol = math.ceil(math.sqrt(n)); nrow = math.ceil(n / ncol)
    elif nrow is None:
        nrow = math.ceil(n / ncol)
    elif ncol is None:
        ncol = math.ceil(n / nrow)
    if nrow * ncol < n:
        raise ValueError(f"{nrow}x{ncol} 的网格放不下 {n} 个子图")
    return int(nrow), int(ncol)

def combine_plots(
    plotlist: Sequence[Callable[[plt.Axes], Optional[plt.Axes]]],
    plotgrid_args: Optional[Dict[str, Any]] = None,
    annotation_args: Optional[Dict[str, Any]] = None,
) -> Figure:
    """
    把若干子图拼成一张网格图。
      - plotlist: 绘图函数序列，每个接收一个 Axes 并在其上作图（返回该 Axes 或 None）
      - plotgrid_args: nrow, ncol, byrow(True), figsize，其余键透传给 plt.subplots（如 sharex）
      - annotation_args: title, subtitle, caption, tag_levels, tag_prefix(""), tag_suffix("")
    子图顺序即 plotlist 顺序；任一子图出错则整体失败。
    """
    plotlist = list(plotlist)
    if not plotlist:
        raise ValueError("plotlist 不能为空")
    grid = dict(plotgrid_args or {})
    ann = dict(annotation_args or {})
    n = len(plotlist)

    nrow, ncol = _grid_shape(n, grid.pop("nrow", None), grid.pop("ncol", None))
    byrow = bool(grid.pop("byrow", True))
    figsize = grid.pop("figsize", (6.4 * ncol, 4.8 * nrow))
    grid.setdefault("layout", "constrained")

    fig, axes = plt.subplots(nrow, ncol, figsize=figsize, squeeze=False, **grid)
    cells = list(axes.flat) if byrow else list(axes.T.flat)
    panels: List[plt.Axes] = []
    try:
        for draw, ax in zip(plotlist, cells):
            out = draw(ax)
            panels.append(ax if out is None else out)
    except Exception:
        plt.close(fig)
        raise
    for ax in cells[n:]:
        ax.remove()

    # ========== 子图标签 ==========
    tag_levels = ann.get("tag_levels")
    if tag_levels is not None:
        prefix, suffix = ann.get("tag_prefix", ""), ann.get("tag_suffix", "")
        for ax, tag in zip(panels, _tags(tag_levels, n)):
            ax.text(-0.06, 1.02, f"{prefix}{tag}{suffix}", transform=ax.transAxes,
                    ha="right", va="bottom", fontsize=12, fontweight="semibold")

    # ========== 整体标题 / 说明 ==========
    heading = "\n".join(t for t in (ann.get("title"), ann.get("subtitle")) if t)
    if heading:
        fig.suptitle(heading, x=0.01, ha="left")
    if ann.get("caption"):
        fig.supxlabel(ann["caption"], x=0.99, ha="right", fontsize=9)

    fig._panels = panels
    return fig
