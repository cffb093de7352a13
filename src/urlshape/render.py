from __future__ import annotations

from typing import Iterator

from .common import Origin, UrlGroup


RULE_ORIGIN = '=' * 50
RULE_LENGTH = '-' * 50


def render_origin(group: UrlGroup, origin: Origin, *, dynamic_only: bool=False, max_samples: int=0) -> Iterator[str]:
    pgroup = group.get(origin)
    if pgroup is None:
        return
    yield f'Origin: {origin}'
    yield RULE_ORIGIN
    for length, patterns in sorted(pgroup.items()):
        yield f'Path length: {length}'
        yield RULE_LENGTH
        for p in patterns:
            if dynamic_only and not p.is_dynamic:
                continue
            yield f'{origin}{p} ({p.freq})'
            if p.is_dynamic and max_samples > 0:
                for s in p.samples[:max_samples]:
                    yield f'- {origin}{s}'
                if len(p.samples) > max_samples:
                    yield f'- ... {len(p.samples) - max_samples} more'
                yield ''
        yield ''


def render_group(group: UrlGroup, *, origin: Origin | None=None, dynamic_only: bool=False, max_samples: int=0) -> Iterator[str]:
    origins = list(group) if origin is None else [origin]
    for o in origins:
        yield from render_origin(group, o, dynamic_only=dynamic_only, max_samples=max_samples)
