"""
Feature based extraction: catches dynamic segments that structural convergence can't see,
e.g. numeric ids which only show up once each.
"""
from __future__ import annotations

import re
from typing import Callable, Iterable, NamedTuple, Sequence, Union

from more_itertools import unique_everseen

from .pattern import Pattern
from .segment import Segment


class ValuePattern(NamedTuple):
    regex: re.Pattern[str]

    def matches(self, value: str) -> bool:
        return self.regex.search(value) is not None


class Predicate(NamedTuple):
    fn: Callable[[str], bool]

    def matches(self, value: str) -> bool:
        return bool(self.fn(value))


Feature = Union[ValuePattern, Predicate]
# what users can pass in configs: preset name, regex (string or compiled) or predicate
FeatureIsh = Union[Feature, str, re.Pattern[str], Callable[[str], bool]]


PRESETS: dict[str, str] = {
    'numeric'        : r'^\d+$',
    'percent-encoded': r'(%[a-zA-Z\d]{2})+',
    'uuid'           : r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$',
    # mongo object ids, hashes and the like
    'hex-id'         : r'^[0-9a-fA-F]{24,}$',
}


def make_feature(thing: FeatureIsh) -> Feature:
    """
    >>> make_feature('numeric').matches('123')
    True
    >>> make_feature(r'^v\\d+$').matches('v2')
    True
    >>> make_feature(str.isupper).matches('abc')
    False
    """
    if isinstance(thing, (ValuePattern, Predicate)):
        return thing
    if isinstance(thing, str):
        return ValuePattern(re.compile(PRESETS.get(thing, thing)))
    if isinstance(thing, re.Pattern):
        return ValuePattern(thing)
    if callable(thing):
        return Predicate(thing)
    raise TypeError(f'unexpected dynamic feature: {thing!r}')


def make_features(things: Iterable[FeatureIsh]) -> list[Feature]:
    return [make_feature(t) for t in things]


def extract_dynamic_patterns_by_features(patterns: Iterable[Pattern], features: Sequence[FeatureIsh]) -> list[Pattern]:
    '''
    Replaces static segments matching any of the features with dynamic ones.
    Every pattern that changed yields a new dynamic candidate, deduplicated by key.
    '''
    fs = make_features(features)
    if len(fs) == 0:
        return []

    def is_dynamic(segment: Segment) -> bool:
        return any(f.matches(segment.val) for f in fs)

    def candidates() -> Iterable[Pattern]:
        for p in patterns:
            changed = False
            segments: list[Segment] = []
            for s in p.segments:
                if not s.is_dynamic and is_dynamic(s):
                    changed = True
                    s = Segment.dynamic()
                segments.append(s)
            if changed:
                yield Pattern(tuple(segments))

    return list(unique_everseen(candidates(), key=lambda p: p.key))
