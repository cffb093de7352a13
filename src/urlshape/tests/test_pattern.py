import pytest

from ..common import MalformedInputError
from ..pattern import Pattern
from ..segment import Segment, SegmentType

from .common import pats


def test_segment() -> None:
    s = Segment.static('users')
    d = Segment.dynamic()
    assert s.key == '0:users'
    assert d.key == '1:'
    assert s.render == 'users'
    assert d.render == ':param'
    assert not s.is_dynamic
    assert d.is_dynamic
    # a literal ':param' segment is still distinct from a placeholder
    assert Segment.static(':param').key != d.key
    assert Segment(SegmentType.STATIC, 'users') == s

    with pytest.raises(AttributeError):
        s.val = 'other'  # type: ignore[misc]


def test_basics() -> None:
    [p] = pats('/users/:param/posts')
    assert p.length == 3
    assert p.key == '0:users/1:/0:posts'
    assert p.is_dynamic
    assert str(p) == '/users/:param/posts'

    root = Pattern.from_path('')
    assert root.length == 0
    assert root.key == ''
    assert not root.is_dynamic


def test_equals() -> None:
    a, b, c = pats('/users/:param', '/users/:param', '/users/1')
    b.freq = 100
    assert a.equals(b)  # frequency doesn't matter
    assert not a.equals(c)
    assert not a.equals(Pattern.from_path('/users'))


def test_match() -> None:
    dyn, one, two, other, short = pats('/users/:param', '/users/1', '/users/2', '/posts/1', '/users')
    assert dyn.match(one)
    assert one.match(dyn)  # symmetric
    assert not one.match(two)
    assert not dyn.match(other)
    assert not dyn.match(short)

    [a, b] = pats('/:param/x', '/a/:param')
    assert a.match(b)


def test_contains() -> None:
    wide, narrow, other = pats('/a/:param/:param', '/a/:param/x', '/b/:param/x')
    assert wide.contains(narrow)
    assert not narrow.contains(wide)
    assert not wide.contains(other)
    assert wide.contains(wide)

    [a, b] = pats('/:param/x', '/a/:param')
    # compatible, but neither dominates the other
    assert not a.contains(b)
    assert not b.contains(a)


def test_sample() -> None:
    [dyn] = pats('/users/:param')
    candidates = pats('/users/1', '/users/:param', '/posts/1', '/users/2', '/users/2/x')
    assert [str(p) for p in dyn.sample(candidates)] == ['/users/1', '/users/2']


def test_dict() -> None:
    [p] = pats('/users/:param', freq=3)
    p.samples.extend(pats('/users/1', '/users/2'))
    d = p.to_dict()
    assert d['segments'] == [[0, 'users'], [1, '']]

    p2 = Pattern.from_dict(d)
    assert p2.equals(p)
    assert p2.freq == 3
    assert [str(s) for s in p2.samples] == ['/users/1', '/users/2']


@pytest.mark.parametrize('data', [
    {},
    {'segments': [[5, 'x']]},
    {'segments': [['x']]},
    {'segments': [[0, 'a']], 'freq': 'lots'},
    {'segments': [[0, 'a']], 'samples': [{'freq': 1}]},
    'whatever',
])
def test_dict_malformed(data) -> None:
    with pytest.raises(MalformedInputError):
        Pattern.from_dict(data)
