"""Multi-pass caption deduplication engine.

WHY: Auto-generated caption tracks are noisy: a spoken line is revealed
word by word, repeated while it scrolls, and split into fragments that
overlap their neighbours. Consumers want one caption per line of speech
with timing that still covers the speech. This module turns the raw,
overlapping cue list into that minimal sequence.

HOW: deduplicate_captions() sorts the input and runs ordered passes, each
taking the previous pass's list and returning a new one:
  1. group_similar_captions  — cluster close, similar captions
  2. merge_group             — one caption per cluster
  3. remove_continuations    — drop fragments of neighbouring captions
  4. final_cleanup           — drop noise and adjacent exact repeats
  5. collapse_aggressively   — opt-in, merge high word-overlap captions

RULES:
- Pure function of (captions, config); no I/O, no state between calls
- Output is sorted by start time
- No output caption has normalized text shorter than 10 characters
- enabled=False or an empty input returns the input unchanged
- Passes 1-4 repeat until stable, so default-mode output is idempotent
- The aggressive pass is lossy and only runs when aggressive_mode is set
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from caption_dedup.core.grouping import group_similar_captions, merge_group
from caption_dedup.core.ir import Caption, DedupConfig
from caption_dedup.core.text import normalize_text, significant_words, word_overlap_ratio

logger = logging.getLogger(__name__)

# Continuation filter windows and length ratios.
_LOOK_BEHIND = 3
_LOOK_AHEAD = 2
_SUBSUMED_RATIO = 0.9
_PREFIX_RATIO = 0.8
_REPEAT_WORDS = 3

# Captions shorter than this (normalized) are treated as ASR noise.
_MIN_TEXT_LENGTH = 10

# Aggressive collapse tuning.
_AGGRESSIVE_WINDOW = 5
_TAIL_WORDS = 3
_HEAD_WORDS = 5
_MIN_SHARED_EDGE_WORDS = 2
_MEANINGFUL_WORD_LENGTH = 3
_MIN_MEANINGFUL_WORDS = 3
_AGGRESSIVE_OVERLAP_THRESHOLD = 0.7


def _is_partial_repeat(previous: str, current: str) -> bool:
    """True when current starts with the words previous ends with.

    This is the scroll artifact: the tail of one caption line is shown
    again as the head of the next one.
    """
    previous_words = previous.split()
    current_words = current.split()
    if len(previous_words) < _REPEAT_WORDS or len(current_words) < _REPEAT_WORDS:
        return False

    tail = " ".join(previous_words[-_REPEAT_WORDS:])
    head = " ".join(current_words[:_REPEAT_WORDS])
    return head in tail or tail in head


def remove_continuations(captions: List[Caption], config: DedupConfig) -> List[Caption]:
    """Drop captions that are fragments of a neighbouring caption.

    WHY: After merging, incremental reveals that were too far apart (or
    too different) to group still leave stale fragments behind: a piece
    of the line before, the repeated tail of a scrolled line, or a prefix
    of the next line that had not finished rendering.

    HOW: For each caption, check up to 3 preceding and up to 2 following
    captions of the input list. The first matching rule drops it:
      - a preceding caption contains it and it is under 90% of that length
      - a preceding caption's last 3 words overlap its first 3 words
      - a following caption within time_threshold contains it and it is
        under 80% of that length

    RULES:
    - Look-behind reads the input list, not the kept captions
    - Surviving captions keep their relative order
    - Windows are bounded, so the pass is linear in the input size
    """
    normalized = [normalize_text(c.text) for c in captions]
    kept: List[Caption] = []

    for i, current in enumerate(captions):
        text = normalized[i]
        drop = False

        for j in range(max(0, i - _LOOK_BEHIND), i):
            previous = normalized[j]
            if text in previous and len(text) < len(previous) * _SUBSUMED_RATIO:
                drop = True
                break
            if _is_partial_repeat(previous, text):
                drop = True
                break

        if not drop:
            for j in range(i + 1, min(len(captions), i + 1 + _LOOK_AHEAD)):
                following = normalized[j]
                if (
                    text in following
                    and captions[j].start - current.start <= config.time_threshold
                    and len(text) < len(following) * _PREFIX_RATIO
                ):
                    drop = True
                    break

        if not drop:
            kept.append(current)

    return kept


def final_cleanup(captions: List[Caption]) -> List[Caption]:
    """Drop noise captions and collapse adjacent exact repeats.

    RULES:
    - Normalized text under 10 characters is noise
    - A caption equal (normalized) to the last *kept* caption is dropped
    """
    kept: List[Caption] = []
    last_text: Optional[str] = None

    for caption in captions:
        text = normalize_text(caption.text)
        if len(text) < _MIN_TEXT_LENGTH:
            continue
        if text == last_text:
            continue
        kept.append(caption)
        last_text = text

    return kept


def _is_continuation(earlier: str, current: str) -> bool:
    """At least two of earlier's last 3 words appear in current's first 5."""
    earlier_words = earlier.split()
    current_words = current.split()
    if len(earlier_words) < _REPEAT_WORDS or len(current_words) < _REPEAT_WORDS:
        return False

    shared = set(earlier_words[-_TAIL_WORDS:]) & set(current_words[:_HEAD_WORDS])
    return len(shared) >= _MIN_SHARED_EDGE_WORDS


def _has_significant_word_overlap(earlier: str, current: str) -> bool:
    words_a = significant_words(earlier, _MEANINGFUL_WORD_LENGTH)
    words_b = significant_words(current, _MEANINGFUL_WORD_LENGTH)
    if len(words_a) < _MIN_MEANINGFUL_WORDS or len(words_b) < _MIN_MEANINGFUL_WORDS:
        return False

    ratio = word_overlap_ratio(words_a, words_b, min(len(words_a), len(words_b)))
    return ratio >= _AGGRESSIVE_OVERLAP_THRESHOLD


def collapse_aggressively(captions: List[Caption]) -> List[Caption]:
    """Merge captions that continue or largely repeat a recent caption.

    WHY: Some tracks keep re-rendering a line with a shifted window of
    words long after the grouping window closed. Users who prefer a short
    transcript over a faithful one can opt into this stronger pass.

    HOW: Compare each caption against the last 5 captions already kept.
    It is absorbed by the first one it continues (2 of the earlier
    caption's last 3 words among its first 5) or largely overlaps (70% of
    words longer than 3 characters). On absorption the longer normalized
    text wins the slot; otherwise the caption is appended.

    RULES:
    - Lossy: distinct nearby lines that share vocabulary may be merged
    - A replacement takes the absorbed caption's slot with its own timing,
      so the result is re-sorted by start time
    """
    kept: List[Caption] = []
    kept_texts: List[str] = []

    for caption in captions:
        text = normalize_text(caption.text)
        absorbed = False

        for j in range(max(0, len(kept) - _AGGRESSIVE_WINDOW), len(kept)):
            existing = kept_texts[j]
            if _is_continuation(existing, text) or _has_significant_word_overlap(existing, text):
                if len(text) > len(existing):
                    kept[j] = caption
                    kept_texts[j] = text
                absorbed = True
                break

        if not absorbed:
            kept.append(caption)
            kept_texts.append(text)

    return sorted(kept, key=lambda c: c.start)


def _run_cleanup_passes(captions: List[Caption], config: DedupConfig) -> List[Caption]:
    """One round of passes 1-4 over time-sorted captions."""
    groups = group_similar_captions(captions, config)
    logger.debug("Grouped %d captions into %d groups", len(captions), len(groups))

    result = [merge_group(group) for group in groups]

    result = remove_continuations(result, config)
    logger.debug("%d captions after continuation filter", len(result))

    result = final_cleanup(result)
    logger.debug("%d captions after final cleanup", len(result))
    return result


def deduplicate_captions(
    captions: Iterable[Caption],
    config: Optional[DedupConfig] = None,
) -> List[Caption]:
    """Remove redundant captions from a raw caption sequence.

    This is the engine's only public entry point.

    HOW: Passes 1-4 repeat until a round removes nothing. Dropping a
    caption gives its survivors new neighbours inside the continuation
    windows, so a single round is not always stable. A round that keeps
    every caption returns its input unchanged (singleton groups merge to
    themselves and the later passes only drop), so the loop ends after at
    most len(captions) rounds. The aggressive pass runs once, afterwards.

    Args:
        captions: Raw captions in any order.
        config: Engine options. Defaults to DedupConfig().

    Returns:
        A new list of captions sorted by start time. With enabled=False,
        or for an empty input, the captions are returned unchanged.
    """
    config = config or DedupConfig()
    captions = list(captions)

    if not config.enabled or not captions:
        return captions

    result = sorted(captions, key=lambda c: c.start)
    rounds = 0
    while True:
        rounds += 1
        cleaned = _run_cleanup_passes(result, config)
        if len(cleaned) == len(result):
            break
        result = cleaned
    logger.debug("Cleanup passes settled after %d rounds", rounds)

    if config.aggressive_mode:
        result = collapse_aggressively(result)
        logger.debug("%d captions after aggressive collapse", len(result))

    logger.info("Deduplicated %d captions into %d", len(captions), len(result))
    return result
