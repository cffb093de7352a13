from enum import IntEnum
from typing import NamedTuple


class SegmentType(IntEnum):
    STATIC = 0
    DYNAMIC = 1


PARAM = ':param'


class Segment(NamedTuple):
    '''
    A single path component: either a literal (static) or a placeholder (dynamic).

    >>> Segment.static('users').key
    '0:users'
    >>> Segment.dynamic().render
    ':param'
    '''
    type: SegmentType
    val: str = ''

    @classmethod
    def static(cls, val: str) -> 'Segment':
        return cls(SegmentType.STATIC, val)

    @classmethod
    def dynamic(cls) -> 'Segment':
        return cls(SegmentType.DYNAMIC)

    @property
    def key(self) -> str:
        return f'{int(self.type)}:{self.val}'

    @property
    def render(self) -> str:
        if self.is_dynamic:
            return PARAM
        return self.val

    @property
    def is_dynamic(self) -> bool:
        return self.type == SegmentType.DYNAMIC
