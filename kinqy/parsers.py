"""
strategy parser: turns whatever the caller passed (None, a key name, an index,
a ready-made strategy or a plain callable) into a canonical strategy object.

specs are classified exactly once by classify_spec; the parse_* functions only
switch on the resulting SpecKind.
"""
from __future__ import annotations

import inspect
import sys
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Optional

from .errors import InvalidSpecification
from .strategies import (
    Selector, Predicate, Comparer, EqualityComparer, JoinSelector, ProjectionComparer,
    VALUE_SELECTOR, VALUE_JOIN_SELECTOR, DEFAULT_COMPARER, DEFAULT_EQUALITY
)
from .types import Spec

_STRATEGY_TYPES = (Selector, Predicate, Comparer, EqualityComparer, JoinSelector)


class SpecKind(Enum):
    DEFAULT = 'default'
    KEY_NAME = 'key_name'
    INDEX = 'index'
    STRATEGY = 'strategy'
    CALLABLE = 'callable'


def classify_spec(spec: Spec) -> SpecKind:
    """the single point where a spec's runtime type is inspected"""
    if spec is None:
        return SpecKind.DEFAULT
    if isinstance(spec, _STRATEGY_TYPES):
        return SpecKind.STRATEGY
    # bool is an int subclass but never a meaningful index
    if isinstance(spec, bool):
        raise InvalidSpecification(f"a bool is not a valid strategy spec: {spec!r}")
    if isinstance(spec, str):
        return SpecKind.KEY_NAME
    if isinstance(spec, int):
        return SpecKind.INDEX
    if callable(spec):
        return SpecKind.CALLABLE
    raise InvalidSpecification(f"unrecognized strategy spec: {spec!r}")


VARIADIC = sys.maxsize


def positional_arity(fn: Callable) -> Optional[int]:
    """number of positional parameters fn accepts, VARIADIC for *args, None when unknown (builtin types)"""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    count = 0
    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return VARIADIC
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def field_accessor(name: Any) -> Callable[[Any], Any]:
    """read a mapping key, a sequence index or an attribute off a value"""
    if isinstance(name, str):
        def access(value):
            if isinstance(value, Mapping):
                return value[name]
            return getattr(value, name)
    else:
        def access(value):
            return value[name]
    access.__name__ = f"field[{name!r}]"
    return access


def _adapt_unary_binary(fn: Callable) -> Callable[[Any, Any], Any]:
    """(value) or (value, key) callables -> (value, key)"""
    arity = positional_arity(fn)
    if arity == 0:
        raise InvalidSpecification(f"callable takes no arguments: {fn!r}")
    # builtin types such as str or int have no signature and are unary
    if arity is None or arity == 1:
        return lambda value, key: fn(value)
    return lambda value, key: fn(value, key)


def _adapt_join(fn: Callable) -> Callable[[Any, Any, Any, Any], Any]:
    """(v0, v1), (v0, v1, k0) or (v0, v1, k0, k1) callables -> 4-arity"""
    arity = positional_arity(fn)
    if arity is None:
        arity = 2
    if arity >= 4:
        return fn
    if arity == 3:
        return lambda v0, v1, k0, k1: fn(v0, v1, k0)
    if arity == 2:
        return lambda v0, v1, k0, k1: fn(v0, v1)
    raise InvalidSpecification(f"join selector must accept 2 to 4 arguments: {fn!r}")


def _wrong_strategy(spec: Any, expected: type) -> InvalidSpecification:
    return InvalidSpecification(f"expected a {expected.__name__}, got {type(spec).__name__}")


def parse_selector(spec: Spec, default: Selector = VALUE_SELECTOR) -> Selector:
    kind = classify_spec(spec)
    if kind is SpecKind.DEFAULT:
        return default
    if kind is SpecKind.STRATEGY:
        if isinstance(spec, Selector):
            return spec
        raise _wrong_strategy(spec, Selector)
    if kind in (SpecKind.KEY_NAME, SpecKind.INDEX):
        access = field_accessor(spec)
        return Selector(lambda value, key: access(value), access.__name__)
    return Selector(_adapt_unary_binary(spec), getattr(spec, '__name__', None))


def parse_predicate(spec: Spec, default: Optional[Predicate] = None) -> Predicate:
    kind = classify_spec(spec)
    if kind is SpecKind.DEFAULT:
        if default is None:
            raise InvalidSpecification("a predicate is required")
        return default
    if kind is SpecKind.STRATEGY:
        if isinstance(spec, Predicate):
            return spec
        raise _wrong_strategy(spec, Predicate)
    if kind in (SpecKind.KEY_NAME, SpecKind.INDEX):
        access = field_accessor(spec)
        return Predicate(lambda value, key: access(value), access.__name__)
    return Predicate(_adapt_unary_binary(spec), getattr(spec, '__name__', None))


def parse_join_selector(spec: Spec, default: JoinSelector = VALUE_JOIN_SELECTOR) -> JoinSelector:
    kind = classify_spec(spec)
    if kind is SpecKind.DEFAULT:
        return default
    if kind is SpecKind.STRATEGY:
        if isinstance(spec, JoinSelector):
            return spec
        raise _wrong_strategy(spec, JoinSelector)
    if kind in (SpecKind.KEY_NAME, SpecKind.INDEX):
        # a field name picks that field off the inner value
        access = field_accessor(spec)
        return JoinSelector(lambda v0, v1, k0, k1: access(v1), access.__name__)
    return JoinSelector(_adapt_join(spec), getattr(spec, '__name__', None))


def parse_comparer(spec: Spec, default: Comparer = DEFAULT_COMPARER) -> Comparer:
    kind = classify_spec(spec)
    if kind is SpecKind.DEFAULT:
        return default
    if kind is SpecKind.STRATEGY:
        if isinstance(spec, Comparer):
            return spec
        raise _wrong_strategy(spec, Comparer)
    if kind in (SpecKind.KEY_NAME, SpecKind.INDEX):
        return ProjectionComparer(parse_selector(spec), DEFAULT_COMPARER)
    arity = positional_arity(spec)
    if arity is not None and arity < 2:
        raise InvalidSpecification(f"comparer must accept 2 arguments: {spec!r}")
    return Comparer(spec)


def parse_equality_comparer(spec: Spec, default: EqualityComparer = DEFAULT_EQUALITY) -> EqualityComparer:
    """
    callables: 1-arity is a key projection compared under the default equality;
    2-arity is an equals function (every value shares one bucket, so lookups degrade to a scan).
    """
    kind = classify_spec(spec)
    if kind is SpecKind.DEFAULT:
        return default
    if kind is SpecKind.STRATEGY:
        if isinstance(spec, EqualityComparer):
            return spec
        raise _wrong_strategy(spec, EqualityComparer)
    if kind in (SpecKind.KEY_NAME, SpecKind.INDEX):
        return EqualityComparer.by_key(field_accessor(spec))
    arity = positional_arity(spec)
    if arity is None or arity == 1:
        return EqualityComparer.by_key(spec)
    if arity >= 2:
        return EqualityComparer(spec, lambda value: 0)
    raise InvalidSpecification(f"equality comparer must accept 1 or 2 arguments: {spec!r}")
