"""Retry-wrapper generator.

``@retry(times=5, timeout=60)`` keeps a renamed copy of the function
(``__new_<name>``, reachable as ``wrapper.original``) and replaces the
function by a wrapper that calls the copy ``times`` times, then ``timeout``
times, then once more and returns that last result.  Every call is made
unconditionally; there is no success or failure detection.

Options may be split over stacked decorators::

    @retry(times=5)
    @retry(timeout=10)
    def fetch(): ...

Giving the same option twice raises :class:`DuplicateAttribute`.
"""

import functools
import logging
import types
from dataclasses import dataclass
from typing import Callable, Optional

from codegen.attrs import merge

logger = logging.getLogger(__name__)

DEFAULT_TIMES = 3
DEFAULT_TIMEOUT = 60


@dataclass(frozen=True)
class RetryOptions:
    times: Optional[int] = None
    timeout: Optional[int] = None

    @property
    def resolved_times(self) -> int:
        return DEFAULT_TIMES if self.times is None else self.times

    @property
    def resolved_timeout(self) -> int:
        return DEFAULT_TIMEOUT if self.timeout is None else self.timeout


def _check_int(key: str, value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"retry option `{key}` expects an integer, got {value!r}")
    return value


def _renamed_copy(fn: Callable, name: str) -> Callable:
    """Copy *fn* under a new name, sharing its globals and closure."""
    code = fn.__code__.replace(co_name=name)
    copy = types.FunctionType(code, fn.__globals__, name,
                              fn.__defaults__, fn.__closure__)
    copy.__kwdefaults__ = fn.__kwdefaults__
    prefix, _, _ = fn.__qualname__.rpartition(".")
    copy.__qualname__ = f"{prefix}.{name}" if prefix else name
    copy.__module__ = fn.__module__
    copy.__doc__ = fn.__doc__
    return copy


def _build(fn: Callable, options: RetryOptions) -> Callable:
    times = options.resolved_times
    timeout = options.resolved_timeout
    original = _renamed_copy(fn, f"__new_{fn.__name__}")

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        for _ in range(times):
            original(*args, **kwargs)
        for _ in range(timeout):
            original(*args, **kwargs)
        return original(*args, **kwargs)

    wrapper.original = original
    wrapper.retry_options = options
    wrapper.__retry_target__ = fn
    logger.debug("%s: retry wrapper with times=%d timeout=%d",
                 fn.__qualname__, times, timeout)
    return wrapper


def retry(times: Optional[int] = None, timeout: Optional[int] = None):
    """Decorator factory; unset options default to ``times=3, timeout=60``."""
    options = RetryOptions(_check_int("times", times),
                           _check_int("timeout", timeout))

    def decorator(fn: Callable) -> Callable:
        target = getattr(fn, "__retry_target__", None)
        if target is not None:
            # Stacked @retry: the inner decorator's options came first.
            merged = merge(fn.retry_options, options, target=target.__qualname__)
            return _build(target, merged)
        return _build(fn, options)

    return decorator
