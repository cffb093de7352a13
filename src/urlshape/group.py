from __future__ import annotations

from collections import Counter
import posixpath
from typing import Iterable
from urllib.parse import urlsplit

from .common import MalformedInputError, Origin, Url, UrlGroup
from .pattern import Pattern


DEFAULT_PORTS = {
    'http' : 80,
    'https': 443,
    'ws'   : 80,
    'wss'  : 443,
    'ftp'  : 21,
}


def normalize_path(path: str) -> str:
    """
    Resolves dot segments and collapses repeated slashes; drops a trailing slash.
    The root path becomes an empty string.

    >>> normalize_path('/users//1/')
    '/users/1'
    >>> normalize_path('/a/./b/../c')
    '/a/c'
    >>> normalize_path('/')
    ''
    >>> normalize_path('')
    ''
    """
    path = posixpath.normpath('/' + path)
    # normpath keeps exactly two leading slashes (posix quirk)
    path = '/' + path.lstrip('/')
    if path.endswith('/'):
        path = path[:-1]
    return path


def split_url(url: Url, *, index: int | None=None) -> tuple[Origin, str]:
    """
    >>> split_url('https://Example.com:443/users/1/?q=2#frag')
    ('https://example.com', '/users/1')
    >>> split_url('http://localhost:8080')
    ('http://localhost:8080', '')
    """
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError as e:
        raise MalformedInputError(url, str(e), index=index) from e

    scheme = parts.scheme.lower()
    host = parts.hostname
    if not scheme:
        raise MalformedInputError(url, 'missing scheme', index=index)
    if not host:
        raise MalformedInputError(url, 'missing host', index=index)

    if ':' in host:
        host = f'[{host}]' # ipv6
    origin = f'{scheme}://{host}'
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        origin += f':{port}'
    return origin, normalize_path(parts.path)


def group_urls(urls: Iterable[Url]) -> UrlGroup:
    '''
    Groups raw urls by origin and by the number of path segments.

    Each distinct (origin, path) pair becomes one static pattern, with frequency equal to the number of occurrences.
    Blank entries are skipped; a malformed url aborts the whole batch.
    '''
    counts: Counter[tuple[Origin, str]] = Counter()
    for i, url in enumerate(urls):
        if url.strip() == '':
            continue
        counts[split_url(url, index=i)] += 1

    group: UrlGroup = {}
    for (origin, path), freq in counts.items():
        pattern = Pattern.from_path(path, freq)
        group.setdefault(origin, {}).setdefault(pattern.length, []).append(pattern)
    return group
