from __future__ import annotations

import logging
import typing
from typing import Any, Callable, Dict, List

from .errors import InvalidSpecification

if typing.TYPE_CHECKING:
    from .sequence import Sequence

logger = logging.getLogger(__name__)

# an extension receives the sequence it is called on, then the caller's arguments
Extension = Callable[..., Any]


class Registry:
    """explicit name -> extension function table, filled by register() calls at startup"""

    def __init__(self):
        self._extensions: Dict[str, Extension] = {}

    def register(self, name: str, extension: Extension) -> Extension:
        if not isinstance(name, str) or not name.isidentifier():
            raise InvalidSpecification(f"extension name must be an identifier: {name!r}")
        if not callable(extension):
            raise InvalidSpecification(f"extension '{name}' is not callable")
        self._extensions[name] = extension
        logger.debug("registered extension '%s'", name)
        return extension

    def extension(self, name: str) -> Callable[[Extension], Extension]:
        """decorator form of register()"""
        def decorator(func: Extension) -> Extension:
            return self.register(name, func)
        return decorator

    def get(self, name: str) -> Extension:
        try:
            return self._extensions[name]
        except KeyError:
            raise InvalidSpecification(f"no extension registered as '{name}'") from None

    def invoke(self, name: str, sequence: 'Sequence', *args, **kwargs) -> Any:
        return self.get(name)(sequence, *args, **kwargs)

    def names(self) -> List[str]:
        return sorted(self._extensions)

    def __contains__(self, name: str) -> bool:
        return name in self._extensions

    def __repr__(self) -> str:
        return f"Registry(extensions={len(self._extensions)})"
