"""Caption and configuration dataclasses shared by every deduplication pass.

WHY: Auto-generated caption tracks arrive as flat lists of timed text cues.
Every pass of the deduplication engine consumes and produces the same
shape, so a single well-typed value keeps the passes decoupled from the
parser that produced the cues and from whatever consumes the result.

HOW: Two frozen dataclasses:
  Caption     — one timed caption segment (start, duration, text)
  DedupConfig — the engine options, with defaults, validated on construction

RULES:
- Captions are immutable values; passes build new lists, never mutate input
- All times are float seconds from the start of the video
- Normalized text is never stored on a Caption; it is computed on demand
- DedupConfig accepts camelCase option aliases through from_options()
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Caption:
    """A single timed caption segment.

    RULES:
    - start: seconds from video start (non-negative for well-formed input)
    - duration: seconds; end is derived as start + duration
    - text: the original, human-readable caption text
    """

    start: float
    duration: float
    text: str

    @property
    def end(self) -> float:
        return self.start + self.duration


# Fields that must hold real bools.
_FLAG_FIELDS = ("enabled", "merge_partial_matches", "aggressive_mode")

# camelCase option names used by callers that pass plain option objects.
OPTION_ALIASES: dict[str, str] = {
    "timeThreshold": "time_threshold",
    "similarityThreshold": "similarity_threshold",
    "mergePartialMatches": "merge_partial_matches",
    "aggressiveMode": "aggressive_mode",
}


@dataclass(frozen=True)
class DedupConfig:
    """Options for one deduplication run.

    WHY: The engine holds no state besides its options. Making them an
    explicit frozen value means a run is a pure function of
    (captions, config) and concurrent runs never share anything mutable.

    HOW: Defaults live on the fields. from_options() merges a partial
    mapping over them once; __post_init__ rejects non-boolean flags and
    out-of-range thresholds.

    RULES:
    - enabled=False turns the engine into an identity pass
    - time_threshold: max start gap (seconds) for grouping and look-ahead
    - similarity_threshold: minimum edit-distance similarity, 0.0-1.0
    - merge_partial_matches: accept substring containment as a match
    - aggressive_mode: run the opt-in aggressive collapse pass
    """

    enabled: bool = True
    time_threshold: float = 3.0
    similarity_threshold: float = 0.8
    merge_partial_matches: bool = True
    aggressive_mode: bool = False

    def __post_init__(self) -> None:
        for name in _FLAG_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError("{} must be a boolean, got {!r}".format(name, value))
        if self.time_threshold < 0:
            raise ValueError(
                "time_threshold must be >= 0 seconds, got {}".format(self.time_threshold)
            )
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(
                "similarity_threshold must be between 0.0 and 1.0, got {}".format(
                    self.similarity_threshold
                )
            )

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> DedupConfig:
        """Build a config from a partial option mapping.

        Keys may be the field names or their camelCase aliases
        (``timeThreshold``, ``aggressiveMode``, ...). Missing keys keep the
        defaults.

        Raises:
            ValueError: If a key is not a recognized option, a flag is not a
                boolean, or a threshold is out of range.
        """
        if not options:
            return cls()

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(
                    "Unknown deduplication option '{}'. Available: {}".format(
                        key, ", ".join(sorted(known))
                    )
                )
            kwargs[name] = value
        return cls(**kwargs)
