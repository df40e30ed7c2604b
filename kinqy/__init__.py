r"""
'    __  __.___ _______   ________ _____.___.
'   |  |/ _|   |\      \  \_____  \\__  |   |
'   |    < |   |/   |   \  /  / \  \/   |   |
'   |  |  \|   /    |    \/   \_/.  \____   |
'   |__|__ \___\____|__  /\_____\ \_/ ______|
'         \/           \/        \__>/
"""
import logging

# expose the main classes
from .sequence import Sequence, OrderedSequence, Grouping

# expose the factory functions
from .factories import (
    from_,
    from_iterable,
    zero,
    range,
    repeat,
    cycle,
    Q
)

# configuration and extension registry
from .config import Engine, DEFAULT_ENGINE
from .registry import Registry

# strategies and the parser
from .strategies import (
    Selector,
    Predicate,
    Comparer,
    ProjectionComparer,
    ReverseComparer,
    ChainedComparer,
    EqualityComparer,
    JoinSelector,
    default_compare,
    default_equals,
    default_hash
)
from .parsers import (
    SpecKind,
    classify_spec,
    parse_selector,
    parse_predicate,
    parse_comparer,
    parse_equality_comparer,
    parse_join_selector
)

# expose supporting data classes
from .types import Cursor, PairCache
from .lookup import HashLookup

# errors
from .errors import (
    KinqyError,
    EmptySequence,
    NoMatch,
    IndexOutOfRange,
    InvalidSpecification,
    UnreduceableEmptySequence
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

# define what `import *` does
__all__ = [
    "Sequence",
    "OrderedSequence",
    "Grouping",
    "from_",
    "from_iterable",
    "zero",
    "range",
    "repeat",
    "cycle",
    "Q",
    "Engine",
    "DEFAULT_ENGINE",
    "Registry",
    "Selector",
    "Predicate",
    "Comparer",
    "ProjectionComparer",
    "ReverseComparer",
    "ChainedComparer",
    "EqualityComparer",
    "JoinSelector",
    "default_compare",
    "default_equals",
    "default_hash",
    "SpecKind",
    "classify_spec",
    "parse_selector",
    "parse_predicate",
    "parse_comparer",
    "parse_equality_comparer",
    "parse_join_selector",
    "Cursor",
    "PairCache",
    "HashLookup",
    "KinqyError",
    "EmptySequence",
    "NoMatch",
    "IndexOutOfRange",
    "InvalidSpecification",
    "UnreduceableEmptySequence"
]
