"""
# Paste-Transform: identifiers.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Identifier generation for patterns, replacers, and links.
"""

import abc
import itertools
import uuid
from typing import Iterator, Optional


class IdentifierGenerator(abc.ABC):
    """
    Base class for a generator of unique identifiers.

    Identifiers are of the form `«prefix»-«suffix»`.
    If `taken` is supplied, identifiers already in it are never returned.
    """
    def generate(self, prefix: str, taken: Optional[set[str]] = None) -> str:
        while True:
            identifier = f'{prefix}-{self._generate_suffix()}'
            if taken is None or identifier not in taken:
                return identifier

    @abc.abstractmethod
    def _generate_suffix(self) -> str:
        raise NotImplementedError


class RandomIdentifierGenerator(IdentifierGenerator):
    """
    Collision-resistant identifiers from random UUIDs.
    """
    def _generate_suffix(self) -> str:
        return uuid.uuid4().hex


class SequentialIdentifierGenerator(IdentifierGenerator):
    """
    Deterministic identifiers `«prefix»-1`, `«prefix»-2`, and so on (one counter shared by all prefixes).
    """
    _counter: Iterator[int]

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def _generate_suffix(self) -> str:
        return str(next(self._counter))
