from __future__ import annotations

import json
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from .common import MalformedInputError, PathIsh, UrlGroup, get_logger
from .pattern import Pattern


Json = dict[str, Any]


def group_to_dict(group: UrlGroup) -> Json:
    # json only allows string keys, so lengths are stringified
    return {
        origin: {
            str(length): [p.to_dict() for p in patterns]
            for length, patterns in pgroup.items()
        }
        for origin, pgroup in group.items()
    }


def group_from_dict(data: Json) -> UrlGroup:
    if not isinstance(data, dict):
        raise MalformedInputError(repr(data)[:100], 'expected a mapping of origins')
    group: UrlGroup = {}
    for origin, pgroup in data.items():
        if not isinstance(pgroup, dict):
            raise MalformedInputError(origin, 'expected a mapping of path lengths')
        for length, patterns in pgroup.items():
            try:
                ilength = int(length)
            except ValueError as e:
                raise MalformedInputError(f'{origin} {length}', 'path length is not an integer') from e
            if not isinstance(patterns, list):
                raise MalformedInputError(f'{origin} {length}', 'expected a list of patterns')
            pats = [Pattern.from_dict(p) for p in patterns]
            for p in pats:
                if p.length != ilength:
                    raise MalformedInputError(f'{origin}{p}', f'expected pattern of length {ilength}')
            group.setdefault(origin, {})[ilength] = pats
    return group


def to_json(group: UrlGroup, **kwargs) -> str:
    return json.dumps(group_to_dict(group), ensure_ascii=False, **kwargs)


def from_json(s: str) -> UrlGroup:
    try:
        data = json.loads(s)
    except json.JSONDecodeError as e:
        raise MalformedInputError(s[:100], f'invalid json: {e}') from e
    return group_from_dict(data)


def save(group: UrlGroup, path: PathIsh) -> None:
    '''
    Writes the group via a temporary file, so a crash never leaves a half written state behind.
    '''
    logger = get_logger()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile('w', dir=path.parent, prefix=path.name, suffix='.tmp', delete=False, encoding='utf8') as fo:
        fo.write(to_json(group, indent=1))
        tmp = Path(fo.name)
    os.replace(tmp, path)
    total = sum(len(ps) for pgroup in group.values() for ps in pgroup.values())
    logger.info('saved %d patterns (%d origins) to %s', total, len(group), path)


def load(path: PathIsh) -> UrlGroup:
    path = Path(path)
    if not path.exists():
        get_logger().debug("%s doesn't exist, starting from scratch", path)
        return {}
    return from_json(path.read_text(encoding='utf8'))
