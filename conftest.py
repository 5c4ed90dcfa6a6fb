# -*- coding: utf-8 -*-
"""
    @author: 数模加油站
    @time  : 2026/10/16 10:02
    @file  : conftest.py
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")
