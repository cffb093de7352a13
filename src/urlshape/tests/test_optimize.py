from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from ..group import group_urls
from ..optimize import optimize_dynamic_patterns, optimize_patterns, resolve_threshold
from ..pattern import Pattern

from .common import HSETTINGS, ORIGIN, pats, rendered, summary, urls


def bucket(*paths: str, length: int) -> list[Pattern]:
    return group_urls(urls(*paths))[ORIGIN][length]


USERS = ['/users/1', '/users/2', '/users/3', '/users/4']


def test_scenario_generalized() -> None:
    res = optimize_patterns([], bucket(*USERS, length=2), 3)
    [p] = res
    assert str(p) == '/users/:param'
    assert p.freq == 4
    assert rendered(p.samples) == USERS


def test_scenario_below_threshold() -> None:
    res = optimize_patterns([], bucket(*USERS, length=2), 5)
    assert summary(res) == {u: 1 for u in USERS}
    assert not any(p.is_dynamic for p in res)


def test_scenario_features() -> None:
    [p] = optimize_patterns([], bucket('/users/42', length=2), 100, ['numeric'])
    assert str(p) == '/users/:param'
    assert p.freq == 1
    assert rendered(p.samples) == ['/users/42']


def test_scenario_containment() -> None:
    narrow, wide = pats('/a/:param/x', '/a/:param/:param', freq=2)
    narrow.samples.extend(pats('/a/1/x', '/a/2/x'))
    wide.samples.extend(pats('/a/1/y', '/a/2/z'))
    [p] = optimize_patterns([narrow], [wide], 100)
    assert str(p) == '/a/:param/:param'
    assert p.freq == 4
    assert sorted(rendered(p.samples)) == ['/a/1/x', '/a/1/y', '/a/2/x', '/a/2/z']


def test_frequency_cutoff() -> None:
    paths = ['/users/1', '/users/2'] + ['/users/admin', '/users/me', '/users/settings'] * 10

    # all five are considered as children
    res = optimize_patterns([], bucket(*paths, length=2), 3)
    assert summary(res) == {'/users/:param': 32}

    # frequent paths are presumed to be distinct routes and don't participate in the tree
    res = optimize_patterns([], bucket(*paths, length=2), [3, 1])
    assert len(res) == 5
    assert not any(p.is_dynamic for p in res)


def test_threshold_function() -> None:
    seen: list[int] = []
    def threshold(patterns) -> int:
        seen.append(len(patterns))
        return 3
    [p] = optimize_patterns([], bucket(*USERS, length=2), threshold)
    assert str(p) == '/users/:param'
    assert seen == [4]


def test_resolve_threshold() -> None:
    assert resolve_threshold(lambda ps: [5, 2], []) == (5, 2)
    assert resolve_threshold([5], []) == (5, None)
    with pytest.raises(ValueError):
        resolve_threshold(0, [])
    with pytest.raises(ValueError):
        resolve_threshold([0, 10], [])


def test_incremental() -> None:
    first = optimize_patterns([], bucket('/users/1', '/users/2', length=2), 3)
    assert not any(p.is_dynamic for p in first)

    second = optimize_patterns(first, bucket('/users/3', '/users/4', '/users/1', length=2), 3)
    [p] = second
    assert str(p) == '/users/:param'
    assert p.freq == 5

    # previously inferred dynamic patterns absorb new samples
    third = optimize_patterns(second, bucket('/users/5', length=2), 3)
    [p] = third
    assert str(p) == '/users/:param'
    assert p.freq == 6
    assert rendered(p.samples)[-1] == '/users/5'


def test_idempotent() -> None:
    canonical = optimize_patterns([], bucket(*USERS, '/posts/1', '/posts/2', length=2), 3)
    before = summary(canonical)
    again = optimize_patterns(canonical, [], 3)
    assert summary(again) == before


def test_no_double_coverage() -> None:
    paths = [
        *(f'/users/{i}/posts' for i in range(5)),
        *(f'/users/{i}/edit' for i in range(3)),
        '/about/team/x',
        '/about/jobs/y',
    ]
    res = optimize_patterns([], bucket(*paths, length=3), 2)
    for path in paths:
        [concrete] = pats(path)
        matching = [p for p in res if p.match(concrete)]
        assert len(matching) == 1, (path, rendered(matching))


def test_threshold_monotonicity() -> None:
    paths = [
        *(f'/users/{i}' for i in range(5)),
        '/items/a', '/items/b', '/items/c',
    ]
    counts = []
    for threshold in range(2, 7):
        res = optimize_patterns([], bucket(*paths, length=2), threshold)
        counts.append(sum(1 for p in res if p.is_dynamic))
    assert counts == sorted(counts, reverse=True)
    assert counts == [2, 1, 1, 0, 0]


def test_refinement_tightens() -> None:
    [wide] = pats('/:param/:param')
    raw = pats(*USERS)
    res = optimize_dynamic_patterns([wide], raw, 3)
    assert rendered(res) == ['/users/:param']


def test_refinement_drops() -> None:
    [p] = pats('/users/:param')
    # no samples at all
    assert optimize_dynamic_patterns([p], pats('/posts/1'), 3) == []
    # too few samples to support the parameter
    assert optimize_dynamic_patterns([p], pats('/users/1', '/users/2'), 3) == []


def test_refinement_stable() -> None:
    [p] = pats('/users/:param')
    [res] = optimize_dynamic_patterns([p], pats(*USERS), 3)
    assert res is p
    # samples are folded in later by the merge
    assert res.samples == []


segments = st.sampled_from(['a', 'b', 'c', '1', '2', '3', 'x'])
paths = st.lists(segments, min_size=1, max_size=3).map(lambda ss: '/' + '/'.join(ss))


@given(
    raw=st.lists(paths, min_size=1, max_size=60),
    threshold=st.integers(min_value=1, max_value=4),
    with_features=st.booleans(),
)
@settings(**HSETTINGS, max_examples=200)
def test_properties(raw: list[str], threshold: int, with_features: bool) -> None:
    features = ['numeric'] if with_features else []
    group = group_urls(urls(*raw))
    [pgroup] = group.values()
    for length, patterns in pgroup.items():
        total = sum(p.freq for p in patterns)
        res = optimize_patterns([], patterns, threshold, features)

        # frequency is conserved
        assert sum(p.freq for p in res) == total

        # every input path is covered
        for path in raw:
            [concrete] = pats(path)
            if concrete.length != length:
                continue
            assert any(p.match(concrete) for p in res), path

        # canonical: no duplicate statics, no statics dominated by dynamics, no nested dynamics
        statics = [p for p in res if not p.is_dynamic]
        dynamics = [p for p in res if p.is_dynamic]
        assert len({p.key for p in statics}) == len(statics)
        assert not any(d.match(s) for d in dynamics for s in statics)
        assert not any(a is not b and a.contains(b) for a in dynamics for b in dynamics)
        assert all(p.length == length for p in res)
