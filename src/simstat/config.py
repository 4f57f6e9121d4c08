from contextlib import contextmanager
from contextvars import ContextVar

# Check every element against the algebra inferred from the first one
VALIDATE_ELEMENTS: ContextVar[bool] = ContextVar("VALIDATE_ELEMENTS", default=True)
# Accumulate single-precision inputs in float64/complex128
PROMOTE_TO_DOUBLE: ContextVar[bool] = ContextVar("PROMOTE_TO_DOUBLE", default=True)


@contextmanager
def override(var: ContextVar, value):
    """Temporarily override a ContextVar within a scope."""
    token = var.set(value)
    try:
        yield
    finally:
        var.reset(token)
