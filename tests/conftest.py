# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest configuration and fixtures for SimStat tests."""

import numpy as np
import pytest

from simstat.parallel import ThreadGroup

# Seconds a rank may wait at a collective before a test fails instead of hanging
COLLECTIVE_TIMEOUT = 30.0


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20251019)


@pytest.fixture
def thread_group():
    """Factory for in-process rank groups with a bounded collective wait."""

    def _make(size: int) -> ThreadGroup:
        return ThreadGroup(size, timeout=COLLECTIVE_TIMEOUT)

    return _make


