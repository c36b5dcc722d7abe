"""
Timing and logging wrapper for procedures.

``logged_procedure`` is applied explicitly to every procedure of the
API layer.  It logs the start of a call, then either its completion or
its failure together with the elapsed time in milliseconds.  A call
fails when it returns an ``Err`` result or raises; exceptions are
re-raised unchanged.
"""

import functools
import logging
import time
from typing import Any, Callable, TypeVar

from .result import Err


logger = logging.getLogger("user_rpc_api.procedures")

F = TypeVar("F", bound=Callable[..., Any])


def logged_procedure(kind: str, name: str) -> Callable[[F], F]:
    """Wrap a procedure so each call is logged with its duration.

    Parameters
    ----------
    kind : str
        ``"query"`` or ``"mutation"``; printed upper case.
    name : str
        Public procedure name, e.g. ``"getUsers"``.
    """
    label = f"{kind.upper()} {name}"

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            logger.info("%s - Started", label)
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.error("%s - Failed after %dms", label, _elapsed_ms(start))
                raise
            if isinstance(result, Err):
                logger.error("%s - Failed after %dms", label, _elapsed_ms(start))
            else:
                logger.info("%s - Completed in %dms", label, _elapsed_ms(start))
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
