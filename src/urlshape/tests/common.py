from __future__ import annotations

from datetime import timedelta
from typing import Any, Iterable

from ..pattern import Pattern
from ..segment import PARAM, Segment


HSETTINGS: dict[str, Any] = dict(
    derandomize=True,
    deadline=timedelta(seconds=2),
)

ORIGIN = 'https://example.com'


def urls(*paths: str, origin: str = ORIGIN) -> list[str]:
    return [f'{origin}{p}' for p in paths]


def pats(*paths: str, freq: int = 1) -> list[Pattern]:
    '''
    Makes patterns from paths, ':param' components become dynamic segments.
    '''
    res = []
    for path in paths:
        p = Pattern.from_path(path, freq)
        p.segments = tuple(Segment.dynamic() if s.val == PARAM else s for s in p.segments)
        res.append(p)
    return res


def rendered(patterns: Iterable[Pattern]) -> list[str]:
    return [str(p) for p in patterns]


def summary(patterns: Iterable[Pattern]) -> dict[str, int]:
    return {str(p): p.freq for p in patterns}