from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from .common import MalformedInputError
from .segment import Segment, SegmentType


@dataclass(eq=False)
class Pattern:
    """
    An ordered sequence of path segments, e.g. /users/:param/posts

    freq is the number of raw occurrences the pattern accounts for.
    samples are the concrete (fully static) patterns a dynamic pattern has absorbed,
    the core only ever appends to them.

    NOTE: equality is structural (see equals), so eq is disabled to keep patterns hashable by identity.
    """

    segments: tuple[Segment, ...]
    freq: int = 0
    samples: list[Pattern] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.segments = tuple(self.segments)

    @classmethod
    def from_path(cls, path: str, freq: int = 0) -> Pattern:
        """
        >>> Pattern.from_path('/users/1').render
        '/users/1'
        >>> Pattern.from_path('').length
        0
        """
        segments: list[Segment] = []
        if len(path) > 0:
            segments = [Segment.static(s) for s in path[1:].split('/')]
        return cls(tuple(segments), freq)

    @property
    def render(self) -> str:
        return ''.join(f'/{s.render}' for s in self.segments)

    @property
    def length(self) -> int:
        return len(self.segments)

    @property
    def key(self) -> str:
        return '/'.join(s.key for s in self.segments)

    @property
    def is_dynamic(self) -> bool:
        return any(s.is_dynamic for s in self.segments)

    def equals(self, other: Pattern) -> bool:
        return self.segments == other.segments

    def match(self, other: Pattern) -> bool:
        """
        Whether both patterns could describe the same concrete path.
        """
        if self.length != other.length:
            return False
        for a, b in zip(self.segments, other.segments):
            if not a.is_dynamic and not b.is_dynamic and a.val != b.val:
                return False
        return True

    def contains(self, other: Pattern) -> bool:
        """
        Whether every path described by other is also described by this pattern.
        """
        if self.length != other.length:
            return False
        for a, b in zip(self.segments, other.segments):
            if not a.is_dynamic and a.key != b.key:
                return False
        return True

    def sample(self, patterns: Iterable[Pattern]) -> list[Pattern]:
        return [p for p in patterns if not p.is_dynamic and self.match(p)]

    def absorb(self, other: Pattern) -> None:
        self.freq += other.freq
        self.samples.extend(other.samples)

    def copy(self) -> Pattern:
        """
        Merges mutate patterns in place, so work on copies of anything that has to stay intact.
        """
        return Pattern(self.segments, self.freq, list(self.samples))

    def to_dict(self) -> dict[str, Any]:
        return {
            'segments': [[int(s.type), s.val] for s in self.segments],
            'freq'    : self.freq,
            'samples' : [s.to_dict() for s in self.samples],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Pattern:
        try:
            raw_segments: Sequence[Sequence[Any]] = data['segments']
            segments = tuple(Segment(SegmentType(tp), str(val)) for tp, val in raw_segments)
            for s in segments:
                if s.is_dynamic and s.val != '':
                    raise MalformedInputError(repr(data), f'dynamic segment with a value: {s.val!r}')
            freq = int(data.get('freq', 0))
            samples = [cls.from_dict(s) for s in data.get('samples', [])]
        except MalformedInputError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedInputError(repr(data), f'not a serialized pattern ({e!r})') from e
        return cls(segments, freq, samples)

    def __str__(self) -> str:
        return self.render
