from __future__ import annotations

from more_itertools import partition

from .pattern import Pattern


def merge_patterns(*patterns: Pattern) -> list[Pattern]:
    '''
    Reconciles a list of patterns (of the same origin and length) into a canonical list:

    - static patterns with the same key are deduplicated, summing up frequencies
    - a dynamic pattern absorbs the dynamic patterns it contains
    - dynamic patterns absorb the static patterns they match

    NOTE: patterns are mutated in place, the first instance of each key is the one that survives.
    Returns static patterns first, then dynamic ones.
    '''
    statics, dynamics = partition(lambda p: p.is_dynamic, patterns)

    sm: dict[str, Pattern] = {}
    for p in statics:
        existing = sm.get(p.key)
        if existing is None:
            sm[p.key] = p
        else:
            existing.freq += p.freq

    dm: dict[str, Pattern] = {}
    for p in dynamics:
        for k, v in list(dm.items()):
            if p.contains(v):
                p.absorb(v)
                del dm[k]
        container = next((v for v in dm.values() if v.contains(p)), None)
        if container is None:
            dm[p.key] = p
        else:
            # only the first container takes it, otherwise frequencies would be counted twice
            container.absorb(p)

    for dv in dm.values():
        for sk, sv in list(sm.items()):
            if dv.match(sv):
                dv.freq += sv.freq
                dv.samples.append(sv)
                del sm[sk]

    return [*sm.values(), *dm.values()]
