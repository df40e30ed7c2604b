from __future__ import annotations

import logging
import typing
import warnings
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .errors import InvalidSpecification
from .registry import Registry

if typing.TYPE_CHECKING:
    from .sequence import Sequence

logger = logging.getLogger(__name__)

_ON_INFINITE = ('error', 'warn')


@dataclass(frozen=True)
class Engine:
    """
    explicit engine value handed to every sequence construction entry point.

    on_infinite: 'error' | 'warn'
    what a buffering combinator (reverse, order_by, group_by, set algebra,
    memoize, materialization) does when its source is marked infinite.
    """
    on_infinite: str = "error"
    log_level: Optional[str] = None
    registry: Registry = field(default_factory=Registry, compare=False)

    def __post_init__(self):
        if self.on_infinite not in _ON_INFINITE:
            raise InvalidSpecification(
                f"on_infinite must be one of {_ON_INFINITE}, got {self.on_infinite!r}")

    def check_finite(self, sequence: 'Sequence', operation: str) -> None:
        if not sequence.is_infinite:
            return
        message = f"{operation}() needs a finite sequence; bound it with take() or take_while() first"
        if self.on_infinite == "error":
            raise InvalidSpecification(message)
        warnings.warn(message, RuntimeWarning, stacklevel=3)

    def configure_logging(self) -> logging.Logger:
        """apply log_level to the package logger, adding a stream handler if it has none"""
        package_logger = logging.getLogger("kinqy")
        if self.log_level is None:
            return package_logger
        package_logger.setLevel(self.log_level.upper())
        if not any(isinstance(h, logging.StreamHandler) for h in package_logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(message)s'))
            package_logger.addHandler(handler)
        return package_logger

    # --- construction entry points ---

    def from_(self, source: Iterable[Any]) -> 'Sequence':
        from .factories import from_
        return from_(source, engine=self)

    def zero(self) -> 'Sequence':
        from .factories import zero
        return zero(engine=self)

    def range(self, start, stop=None, step=1) -> 'Sequence':
        from .factories import range as range_
        return range_(start, stop, step, engine=self)

    def repeat(self, element: Any, count: Optional[int] = None) -> 'Sequence':
        from .factories import repeat
        return repeat(element, count, engine=self)

    def cycle(self, source: Iterable[Any]) -> 'Sequence':
        from .factories import cycle
        return cycle(source, engine=self)


DEFAULT_ENGINE = Engine()
