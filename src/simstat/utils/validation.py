"""Common validation helpers shared across simstat modules."""

from __future__ import annotations

from typing import Any, Type

__all__ = ["require", "sized_length"]


def require(
    condition: bool, message: str, error: Type[Exception] = ValueError
) -> None:
    """Raise ``error`` (``ValueError`` by default) when a condition fails."""
    if not condition:
        raise error(message)


def sized_length(data: Any) -> int:
    """Return ``len(data)`` or raise ``TypeError`` for unsized inputs.

    Generators and other one-shot iterables are rejected because the error
    estimate needs a second pass over the same samples.
    """

    try:
        return len(data)
    except TypeError:
        raise TypeError(
            f"expected a sized sequence of samples, got {type(data).__name__}"
        ) from None
