"""
schema-driven test data for kinqy.

from_schema(schema, seed) is an infinite sequence of generated records: bound it
with take(). each pass re-seeds, so iterating the same bounded sequence twice
produces the same records.

schema grammar:
    'word'                              faker provider name (anything else is a literal string)
    ('pyint', {'min_value': 1})         faker provider with keyword arguments
    {'_qen_provider': 'choice', 'from': [...]}
    {'_qen_provider': 'ref', 'key': 'id'}   value generated earlier in the same record
    {'_qen_provider': 'literal', 'value': x}
    {'field': <schema>, ...}            nested record
"""
from itertools import count
from typing import Any, Dict, Optional

import numpy as np
from faker import Faker

from kinqy import Sequence


class Generator:
    """schema interpreter."""

    def __init__(self, seed: Optional[int] = None):
        self._fake = Faker()
        if seed is not None:
            self._fake.seed_instance(seed)
        self._rng = np.random.default_rng(seed)

    def _faker(self, method_name: str, kwargs: Optional[Dict] = None) -> Any:
        method = getattr(self._fake, method_name, None)
        if method is None:
            raise ValueError(f"faker has no provider '{method_name}'")
        return method(**(kwargs or {}))

    def _provider(self, config: Dict, context: Dict) -> Any:
        provider = config["_qen_provider"]
        if provider == "choice":
            # convert numpy's choice result to a native python type
            picked = config["from"][int(self._rng.integers(len(config["from"])))]
            return picked.item() if hasattr(picked, 'item') else picked
        if provider == "ref":
            if config["key"] not in context:
                raise ValueError(f"reference to '{config['key']}' not found in current record.")
            return context[config["key"]]
        if provider == "literal":
            return config["value"]
        raise ValueError(f"unknown _qen_provider: '{provider}'")

    def create(self, schema: Any, context: Optional[Dict] = None) -> Any:
        context = context or {}
        if isinstance(schema, dict):
            if "_qen_provider" in schema:
                return self._provider(schema, context)
            record = {}
            for field, field_schema in schema.items():
                record[field] = self.create(field_schema, {**context, **record})
            return record
        if isinstance(schema, tuple) and len(schema) == 2 and isinstance(schema[1], dict):
            return self._faker(schema[0], schema[1])
        if isinstance(schema, str) and hasattr(self._fake, schema):
            return self._faker(schema)
        return schema


def from_schema(schema: Any, seed: Optional[int] = None) -> Sequence:
    def records():
        generator = Generator(seed)
        return ((index, generator.create(schema)) for index in count())
    return Sequence(records, infinite=True)
