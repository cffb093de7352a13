'''
Infers route patterns (e.g. /users/:param) from a corpus of concrete urls.

    >>> from urlshape import Parser
    >>> parser = Parser(threshold=3, dynamic_features=['numeric'])
    >>> parser.update(['https://example.com/users/1', 'https://example.com/users/2'])
    >>> [str(p) for p in parser.patterns('https://example.com')]
    ['/users/:param']
'''
from .common import MalformedInputError, InvariantViolationError, UrlshapeError, UrlGroup, PatternGroup
from .features import Predicate, ValuePattern, make_feature
from .group import group_urls
from .merge import merge_patterns
from .optimize import optimize_patterns
from .parser import Parser
from .pattern import Pattern
from .segment import Segment, SegmentType

__all__ = [
    'InvariantViolationError',
    'MalformedInputError',
    'Parser',
    'Pattern',
    'PatternGroup',
    'Predicate',
    'Segment',
    'SegmentType',
    'UrlGroup',
    'UrlshapeError',
    'ValuePattern',
    'group_urls',
    'make_feature',
    'merge_patterns',
    'optimize_patterns',
]
