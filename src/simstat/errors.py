# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""Project-specific exception hierarchy for statistics and reductions."""

from __future__ import annotations


class StatisticsError(ValueError):
    """Base class for statistics-related errors."""


class EmptySequenceError(StatisticsError):
    """No samples were available where at least one is required."""


class InsufficientSamplesError(StatisticsError):
    """Fewer than two samples were available for a standard error."""


class ShapeMismatchError(StatisticsError):
    """Elements (or processes) do not agree on the element shape or kind."""
