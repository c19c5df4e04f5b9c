"""Shared test fixtures for the caption_dedup test suite.

WHY: Several test modules need the same realistic rolling-caption track:
a line revealed in two steps, a music marker, and two later lines.
Centralizing it keeps the expected output in one place.

HOW: Pytest fixtures provide the raw captions, the same captions as plain
records, and the expected cleaned output under the default config.

RULES:
- Times are exact binary fractions so merged durations compare exactly.
- The expected output is the default-config result; aggressive mode has
  its own inputs in the tests that need them.
"""

from typing import Any, Dict, List

import pytest

from caption_dedup.core.ir import Caption


ROLLING_CAPTIONS: List[Caption] = [
    Caption(start=0.0,  duration=2.0, text="so today we are going"),
    Caption(start=1.0,  duration=3.0, text="so today we are going to talk"),
    Caption(start=6.0,  duration=2.0, text="about Python decorators"),
    Caption(start=7.0,  duration=2.0, text="[Music]"),
    Caption(start=12.0, duration=3.0, text="and how they wrap functions"),
]

EXPECTED_ROLLING_OUTPUT: List[Caption] = [
    Caption(start=0.0,  duration=4.0, text="so today we are going to talk"),
    Caption(start=6.0,  duration=3.0, text="about Python decorators"),
    Caption(start=12.0, duration=3.0, text="and how they wrap functions"),
]


@pytest.fixture
def rolling_captions():
    """A short auto-caption track with an incremental reveal and a music marker."""
    return list(ROLLING_CAPTIONS)


@pytest.fixture
def rolling_records() -> List[Dict[str, Any]]:
    """The rolling track as parser-style records using the short "dur" key."""
    return [
        {"start": c.start, "dur": c.duration, "text": c.text}
        for c in ROLLING_CAPTIONS
    ]


@pytest.fixture
def expected_rolling_output():
    """Default-config result for the rolling track."""
    return list(EXPECTED_ROLLING_OUTPUT)
