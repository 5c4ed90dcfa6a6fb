# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/14 09:30
    @file  : __init__.py
"""

from .histostats import histostats, grouped_histostats, extract_stats
from .combine import combine_plots
from .settings import theme_histostats

__all__ = [
    'histostats',
    'grouped_histostats',
    'extract_stats',
    'combine_plots',
    'theme_histostats'
]
