from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from . import dump
from .common import Origin, PathIsh, Url, UrlGroup, logger
from .features import FeatureIsh, make_features
from .group import group_urls
from .optimize import ThresholdIsh, optimize_patterns, resolve_threshold
from .pattern import Pattern
from .render import render_group


class Parser:
    '''
    Holds the canonical pattern group across updates.

    >>> p = Parser(threshold=3)
    >>> p.update(f'https://example.com/users/{i}' for i in range(4))
    >>> [str(x) for x in p.patterns()]
    ['/users/:param']
    '''

    def __init__(
            self,
            threshold: ThresholdIsh = 100,
            dynamic_features: Sequence[FeatureIsh] = (),
            group: UrlGroup | None = None,
    ) -> None:
        if not callable(threshold):
            # fail early rather than on the first update
            resolve_threshold(threshold, [])
        self.threshold = threshold
        self.dynamic_features = make_features(dynamic_features)
        self.group: UrlGroup = {} if group is None else group

    @classmethod
    def from_json(cls, s: str, **kwargs) -> Parser:
        return cls(group=dump.from_json(s), **kwargs)

    @classmethod
    def load(cls, path: PathIsh, **kwargs) -> Parser:
        return cls(group=dump.load(path), **kwargs)

    def to_json(self) -> str:
        return dump.to_json(self.group)

    def save(self, path: PathIsh) -> None:
        dump.save(self.group, path)

    def update(self, urls: Iterable[Url]) -> None:
        # everything is computed aside and swapped in at the end, so a failure leaves the held group as it was
        new_group = group_urls(urls)
        if len(new_group) == 0:
            logger.debug('no urls to process')
            return

        group: UrlGroup = {origin: dict(pgroup) for origin, pgroup in self.group.items()}
        for origin, new_pgroup in new_group.items():
            pgroup = group.setdefault(origin, {})
            for length, new_patterns in sorted(new_pgroup.items()):
                current = pgroup.get(length, [])
                logger.debug('%s, length %d: %d current + %d new patterns', origin, length, len(current), len(new_patterns))
                pgroup[length] = optimize_patterns(
                    current,
                    new_patterns,
                    self.threshold,
                    self.dynamic_features,
                )
        self.group = group

    @property
    def origins(self) -> list[Origin]:
        return list(self.group)

    def patterns(self, origin: Origin | None=None, *, dynamic_only: bool=False) -> Iterator[Pattern]:
        origins = self.origins if origin is None else [origin]
        for o in origins:
            for _, patterns in sorted(self.group.get(o, {}).items()):
                for p in patterns:
                    if dynamic_only and not p.is_dynamic:
                        continue
                    yield p

    def render(self, **kwargs) -> Iterator[str]:
        return render_group(self.group, **kwargs)

    def print(self, **kwargs) -> None:
        for line in self.render(**kwargs):
            print(line)
