from __future__ import annotations

from typing import Callable, Sequence, Union

from .common import logger, measure
from .converge import check_threshold, optimize_tree
from .features import FeatureIsh, extract_dynamic_patterns_by_features
from .merge import merge_patterns
from .pattern import Pattern
from .tree import build_tree, extract_dynamic_patterns


# either a structural threshold, or [structural threshold, frequency cutoff]
Threshold = Union[int, Sequence[int]]
ThresholdGenerator = Callable[[Sequence[Pattern]], Threshold]
ThresholdIsh = Union[Threshold, ThresholdGenerator]


def resolve_threshold(threshold: ThresholdIsh, patterns: Sequence[Pattern]) -> tuple[int, int | None]:
    '''
    Returns the structural threshold and the frequency cutoff (None if there is no cutoff).

    >>> resolve_threshold(10, [])
    (10, None)
    >>> resolve_threshold([30, 1], [])
    (30, 1)
    >>> resolve_threshold((30, 0), [])
    (30, None)
    >>> resolve_threshold(lambda ps: len(ps) + 2, [])
    (2, None)
    '''
    if callable(threshold):
        threshold = threshold(patterns)
    if isinstance(threshold, int):
        return check_threshold(threshold), None
    structural, *rest = threshold
    cutoff = rest[0] if len(rest) > 0 else None
    if cutoff is not None and (isinstance(cutoff, bool) or not isinstance(cutoff, int) or cutoff < 0):
        raise ValueError(f'frequency cutoff should be a non-negative integer, got {cutoff!r}')
    return check_threshold(structural), (cutoff or None)


def optimize_dynamic_patterns(dynamic_patterns: Sequence[Pattern], raw_patterns: Sequence[Pattern], threshold: int) -> list[Pattern]:
    '''
    Tightens dynamic patterns until they are stable.

    Each pattern is checked against its own concrete samples: rebuilding the tree from just them
    should yield the very same pattern. Otherwise whatever came out replaces it and gets refined further.
    '''
    optimal: list[Pattern] = []
    refined: set[str] = set()
    stack = list(dynamic_patterns)
    while len(stack) > 0:
        p = stack.pop()
        if p.key in refined:
            continue
        refined.add(p.key)

        samples = p.sample(raw_patterns)
        if len(samples) == 0:
            continue
        root = build_tree(samples)
        optimize_tree(root, threshold)
        optimized = extract_dynamic_patterns(root)
        if len(optimized) == 1 and p.equals(optimized[0]):
            optimal.append(p)
        else:
            logger.debug('refining %s: %d sample(s) -> %s', p, len(samples), [str(o) for o in optimized])
            stack.extend(optimized)
    return optimal


def optimize_patterns(
        current: Sequence[Pattern],
        raw: Sequence[Pattern],
        threshold: ThresholdIsh,
        dynamic_features: Sequence[FeatureIsh] = (),
) -> list[Pattern]:
    '''
    Computes the new canonical pattern list for a single (origin, length) bucket,
    given the current canonical patterns and the newly observed raw ones.
    '''
    # the current patterns belong to the caller, who keeps them if anything below raises
    raw_patterns = merge_patterns(*(p.copy() for p in current), *raw)
    structural, cutoff = resolve_threshold(threshold, raw_patterns)

    to_optimize = raw_patterns
    if cutoff is not None:
        # frequent paths are most likely distinct routes, keep them out of the tree
        to_optimize = [p for p in raw_patterns if p.freq <= cutoff or p.is_dynamic]

    with measure(f'optimize {len(to_optimize)}/{len(raw_patterns)} patterns, threshold {structural}', logger=logger):
        root = build_tree(to_optimize)
        optimize_tree(root, structural)
        dynamic = extract_dynamic_patterns(root)
        optimal_dynamic = optimize_dynamic_patterns(dynamic, to_optimize, structural)

    optimal = merge_patterns(*raw_patterns, *optimal_dynamic)
    by_features = extract_dynamic_patterns_by_features(optimal, dynamic_features)
    return merge_patterns(*optimal, *by_features)
