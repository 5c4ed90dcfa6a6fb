# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/14 15:10
    @file  : settings.py
"""

from __future__ import annotations
import warnings
import seaborn as sns
from matplotlib import font_manager
from typing import Iterable, List, Tuple, Optional, Dict, Any

CJK_CANDIDATES: Tuple[str, ...] = (
    # Windows:
    "KaiTi", "SimHei", "KaiTi_GB2312", "FangSong",
    # macOS:
    "PingFang SC", "Hiragino Sans GB", "Heiti SC", "STHeiti",
    # Linux / 通用（建议安装）:
    "Noto Sans CJK SC", "Source Han Sans CN", "WenQuanYi Zen Hei"
)

def _registered_font_names() -> List[str]:
    return [f.name for f in font_manager.fontManager.ttflist]

def _choose_font(preferred: Iterable[str]) -> Optional[str]:
    avail = set(_registered_font_names())
    for name in preferred:
        if name in avail:
            return name
    return None

def theme_histostats(
    style: str = "whitegrid",
    context: str = "notebook",
    *,
    preferred: Iterable[str] = CJK_CANDIDATES,
    embed_vector_text: bool = True,               # PDF/SVG 嵌入文字，防止方框
    verbose: bool = False
) -> Dict[str, Any]:
    """
    histostats 的默认主题：seaborn 的 style/context + 中文字体 + 嵌字设置。
    只返回 rc 字典，不修改全局 rcParams；绘图时经 matplotlib.rc_context 生效。
    想换主题，直接把任意 rc 字典传给 histostats(theme=...)。
    """
    preferred = list(preferred)
    rc: Dict[str, Any] = {}
    rc.update(sns.axes_style(style))
    rc.update(sns.plotting_context(context))

    # 1) 选择可用字体
    chosen = _choose_font(preferred)
    if verbose and not chosen:
        warnings.warn("[cn-fonts] 未在系统中找到候选中文字体，可能仍会出现方框。"
                      "可安装 Noto Sans CJK 或通过 preferred 指定已注册字体。")

    # 2) 统一 rc
    if embed_vector_text:
        rc.update({
            "pdf.fonttype": 42,  # 嵌入 TrueType
            "ps.fonttype": 42,
            "svg.fonttype": "none"  # SVG 保留文字（便于后期编辑）
        })
    rc["axes.unicode_minus"] = False
    rc["font.family"] = ["sans-serif"]
    # 将 chosen 放在首位，其后是 seaborn 默认的无衬线字体作为后备
    fallback = [f for f in rc.get("font.sans-serif", []) if f != chosen]
    rc["font.sans-serif"] = ([chosen] if chosen else []) + fallback + ["DejaVu Sans"]

    # 3) 直方图的克制默认
    rc.update({
        "axes.spines.top": False, "axes.spines.right": False,
        "axes.titlelocation": "left",
        "grid.linestyle": "--", "grid.alpha": 0.35,
        "legend.frameon": False,
    })
    return rc
