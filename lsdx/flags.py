"""Resolving a setting from its possible sources in order of precedence."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

T = TypeVar("T")

Source = Callable[[], Optional[T]]


def configure(
    from_args: Source[T] | None,
    from_config: Source[T] | None,
    default: T,
    from_environment: Source[T] | None = None,
) -> T:
    """Return the first value that is set, else ``default``.

    Sources are consulted lazily in this order: command-line arguments,
    the environment, the configuration file. A source that returns
    ``None`` is treated as unset; any other value, including ``False``
    and ``0``, wins. Sources after the winning one are never called.
    """
    for source in (from_args, from_environment, from_config):
        if source is None:
            continue
        value = source()
        if value is not None:
            return value
    return default