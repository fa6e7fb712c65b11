"""Line matchers

A matcher is a per-line predicate. Two strategies share the same
`match_line()` capability:

- LiteralMatcher: case-sensitive substring test
- PatternMatcher: regular expression search anywhere in the line

Matchers are immutable once built, so a clone can be handed to every
workload and used from worker threads without coordination.
"""

import copy
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from zg.exceptions import InvalidPatternError


class Matcher(ABC):
    """Base class for line matchers"""

    @abstractmethod
    def match_line(self, line: str) -> bool:
        """Return True if the line matches."""

    def clone(self) -> 'Matcher':
        """Return an independent copy owned by a single workload."""
        return copy.copy(self)


@dataclass(frozen=True)
class LiteralMatcher(Matcher):
    pattern: str

    def match_line(self, line: str) -> bool:
        return self.pattern in line


@dataclass(frozen=True, init=False)
class PatternMatcher(Matcher):
    compiled: re.Pattern

    def __init__(self, pattern: str):
        """
        Compile the pattern once.

        Raises:
            InvalidPatternError: If the pattern is not a valid regular expression
        """
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e
        object.__setattr__(self, 'compiled', compiled)

    @property
    def pattern(self) -> str:
        return self.compiled.pattern

    def match_line(self, line: str) -> bool:
        return self.compiled.search(line) is not None


def build_matcher(pattern: str, use_regex: bool = False) -> Matcher:
    """Create the matcher for a search.

    Regex compilation happens here, before any file is touched.
    """
    if use_regex:
        return PatternMatcher(pattern)
    return LiteralMatcher(pattern)


__all__ = ['Matcher', 'LiteralMatcher', 'PatternMatcher', 'build_matcher']
