# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/12 10:00
    @file  : __init__.py
"""

from .switch import StatsType, stats_type_switch
from .formatting import format_value, format_pvalue, format_percent
from .core import one_sample_test, extract_expression
from .centrality import centrality_description

__all__ = [
    'StatsType',
    'stats_type_switch',
    'one_sample_test',
    'extract_expression',
    'centrality_description',
    'format_value',
    'format_pvalue',
    'format_percent',
]
