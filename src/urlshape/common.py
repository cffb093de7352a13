from contextlib import contextmanager
from functools import lru_cache
import logging
import os
from pathlib import Path
from timeit import default_timer as timer
from typing import Dict, Iterable, List, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .pattern import Pattern


PathIsh = Union[str, Path]

Url = str
Origin = str
Syntax = str

# path length -> patterns, within a single origin
PatternGroup = Dict[int, List['Pattern']]
# origin -> pattern group, the state held across updates
UrlGroup = Dict[Origin, PatternGroup]


class UrlshapeError(Exception):
    pass


class MalformedInputError(UrlshapeError, ValueError):
    '''
    Raised when a raw url (or a serialized pattern group) can't be parsed.
    '''
    def __init__(self, entry: str, reason: str, *, index: Union[int, None]=None) -> None:
        where = '' if index is None else f' (entry #{index})'
        super().__init__(f'malformed input{where}: {entry!r}: {reason}')
        self.entry = entry
        self.reason = reason
        self.index = index


class InvariantViolationError(UrlshapeError, AssertionError):
    pass


from .logging import LazyLogger
logger = LazyLogger('urlshape', level='INFO')

def get_logger() -> logging.Logger:
    return logger


@lru_cache(None)
def _get_urlextractor(syntax: Syntax):
    from urlextract import URLExtract # type: ignore
    u = URLExtract()
    # https://github.com/lipoja/URLExtract/issues/13
    if syntax in {'md', 'markdown'}:
        u._stop_chars_right |= {'(', ')', '[', ']'}
        u._stop_chars_left  |= {'(', ')', '[', ']'}
    return u


def _sanitize(url: str) -> str:
    url = url.strip(',.…\\"\'')
    if 'wikipedia' not in url:
        # wikipedia urls might legitimately end with parens, e.g. en.wikipedia.org/wiki/Widget_(beer)
        url = url.strip(')')
    return url


def with_scheme(url: Url) -> Url:
    '''
    Urls extracted from text often lack the scheme, which makes them unparsable.

    >>> with_scheme('example.com/a')
    'http://example.com/a'
    >>> with_scheme('https://example.com/a')
    'https://example.com/a'
    '''
    if '://' in url:
        return url
    return 'http://' + url


def iter_urls(s: str, *, syntax: Syntax='') -> Iterable[Url]:
    urlextractor = _get_urlextractor(syntax=syntax)
    for u in urlextractor.gen_urls(s):
        yield _sanitize(u)


def extract_urls(s: str, *, syntax: Syntax='') -> List[Url]:
    return list(iter_urls(s=s, syntax=syntax))


def appdirs():
    under_test = os.environ.get('PYTEST_CURRENT_TEST') is not None
    name = 'urlshape-test' if under_test else 'urlshape'
    import appdirs as ad # type: ignore[import]
    return ad.AppDirs(appname=name)


def default_output_dir() -> Path:
    return Path(appdirs().user_data_dir)


def default_state_path() -> Path:
    return default_output_dir() / 'urlshape.json'


def user_config_file() -> Path:
    if 'URLSHAPE_CONFIG' in os.environ:
        return Path(os.environ['URLSHAPE_CONFIG'])
    else:
        return Path(appdirs().user_config_dir) / 'config.py'


def default_config_path() -> Path:
    cfg = Path('config.py')
    if 'URLSHAPE_CONFIG' not in os.environ and cfg.exists():
        return cfg.absolute()
    else:
        return user_config_file()


@contextmanager
def measure(tag: str='', *, logger, unit: str='ms'):
    before = timer()
    yield lambda: timer() - before
    after = timer()
    secs = after - before
    mult = {'s': 1, 'ms': 10**3, 'us': 10**6}[unit]
    xx = secs * mult
    logger.debug(f'[{tag}]: {xx:.1f}{unit} elapsed')
