from pathlib import Path
import importlib
import importlib.util
import re
from typing import Callable, List, NamedTuple, Optional, Sequence, Union

from .common import PathIsh, Url, default_state_path
from .features import FeatureIsh, make_features
from .optimize import ThresholdIsh, resolve_threshold


Filter = Callable[[Url], bool]
FilterIsh = Union[str, Filter]


DEFAULT_FILTERS = (
    r'^data:',
    r'^about:',
    r'^blob:',
    r'^javascript:',
)


class Config(NamedTuple):
    # structural threshold, [threshold, frequency cutoff] or a function of the raw patterns
    THRESHOLD: ThresholdIsh = 100

    # preset names (see features.PRESETS), regexes or predicates
    DYNAMIC_FEATURES: List[FeatureIsh] = []

    # urls matching any of these are skipped
    FILTERS: List[FilterIsh] = []

    # if not specified, uses user data dir
    STATE: Optional[PathIsh] = None

    MAX_SAMPLES: int = 3

    @property
    def state(self) -> Path:
        st = self.STATE
        return default_state_path() if st is None else Path(st)

    @property
    def dynamic_features(self):
        return make_features(self.DYNAMIC_FEATURES)

    @property
    def filters(self) -> Sequence[Filter]:
        return tuple(make_filter(f) for f in (*DEFAULT_FILTERS, *self.FILTERS))

    def filtered(self, url: Url) -> bool:
        return any(f(url) for f in self.filters)

    def check(self) -> None:
        '''
        Raises if any of the values is unusable.
        '''
        if not callable(self.THRESHOLD):
            resolve_threshold(self.THRESHOLD, [])
        _ = self.dynamic_features
        _ = self.filters
        if self.MAX_SAMPLES < 0:
            raise ValueError(f'MAX_SAMPLES should be non-negative, got {self.MAX_SAMPLES}')


def make_filter(thing: FilterIsh) -> Filter:
    if isinstance(thing, str):
        rc = re.compile(thing)
        def filter_(u: str) -> bool:
            return rc.search(u) is not None
        return filter_
    else: # must be predicate
        return thing


instance: Optional[Config] = None


def has() -> bool:
    return instance is not None


def get() -> Config:
    assert instance is not None, "Expected config to be set, but it's not"
    return instance


def load_from(config_file: PathIsh) -> None:
    global instance
    instance = import_config(config_file)


def reset() -> None:
    global instance
    assert instance is not None
    instance = None


def import_config(config_file: PathIsh) -> Config:
    p = Path(config_file)

    name = p.stem
    spec = importlib.util.spec_from_file_location(name, p); assert spec is not None
    mod = importlib.util.module_from_spec(spec); assert mod is not None
    loader = spec.loader; assert loader is not None
    loader.exec_module(mod)

    d = {}
    for f in Config._fields:
        if hasattr(mod, f):
            d[f] = getattr(mod, f)
    return Config(**d)
