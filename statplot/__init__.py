# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/14 09:28
    @file  : __init__.py
"""

from . import histogram
from .histogram import *

__all__ = [
    'histogram',
    'histostats',
    'grouped_histostats',
    'extract_stats',
    'combine_plots',
    'theme_histostats'
]
