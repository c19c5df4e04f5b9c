"""Grouping of near-duplicate captions and merging of each group.

WHY: Rolling auto-captions emit the same line several times within a few
seconds, once per word revealed, plus repeats when the line scrolls.
These first two passes collapse each burst into a single caption that
covers the whole time span and carries the most complete text.

HOW: group_similar_captions() seeds a group with each unassigned caption
and scans forward inside the time window, pulling in captions that pass
the similarity test against the seed. merge_group() picks the most
complete member text and widens the timing to cover the whole group.

RULES:
- Input to grouping must be sorted by start time
- The forward scan stops at the first caption past time_threshold
- Membership is greedy and non-transitive: a caption joins a group only
  when it is similar to that group's seed
- Every caption belongs to exactly one group; groups keep start order
- A merged caption never covers less time than any of its sources
"""

from __future__ import annotations

from typing import List

from caption_dedup.core.ir import Caption, DedupConfig
from caption_dedup.core.text import are_similar_captions, normalize_text

# Normalized-length gap below which the completeness tie-break applies.
_LENGTH_TIE_CHARS = 10


def group_similar_captions(
    captions: List[Caption],
    config: DedupConfig,
) -> List[List[Caption]]:
    """Partition time-sorted captions into groups of near-duplicates.

    WHY: Duplicates of one spoken line always sit close together in time,
    so only captions inside the time window of a seed need comparing.

    HOW: Left-to-right scan. Each unassigned caption i opens a group. For
    every later unassigned caption j, stop as soon as
    start[j] - start[i] > time_threshold; otherwise add j when the
    normalized texts of i and j are similar.

    RULES:
    - The time cutoff ends the forward scan (captions are sorted, so no
      later caption can be inside the window either)
    - First match wins; no global clustering
    - Normalized text is computed once per caption

    Args:
        captions: Captions sorted by start time.
        config: Engine options (time_threshold, similarity_threshold,
                merge_partial_matches).

    Returns:
        Groups in seed order, each a non-empty list in start order.
    """
    normalized = [normalize_text(c.text) for c in captions]
    assigned = [False] * len(captions)
    groups: List[List[Caption]] = []

    for i, seed in enumerate(captions):
        if assigned[i]:
            continue
        assigned[i] = True
        group = [seed]

        for j in range(i + 1, len(captions)):
            if assigned[j]:
                continue
            if captions[j].start - seed.start > config.time_threshold:
                break
            if are_similar_captions(
                normalized[i],
                normalized[j],
                config.similarity_threshold,
                accept_containment=config.merge_partial_matches,
            ):
                group.append(captions[j])
                assigned[j] = True

        groups.append(group)

    return groups


def _is_more_complete(candidate: Caption, best: Caption) -> bool:
    """Completeness tie-break between two captions of similar length.

    More whitespace tokens wins. With equal token counts, a candidate
    whose raw text does not end in whitespace beats one that does (a
    trailing space is how a cut-off caption tends to look).
    """
    candidate_words = len(normalize_text(candidate.text).split())
    best_words = len(normalize_text(best.text).split())

    if candidate_words == best_words:
        return not candidate.text[-1:].isspace() and best.text[-1:].isspace()

    return candidate_words > best_words


def merge_group(group: List[Caption]) -> Caption:
    """Collapse one group into a single representative caption.

    HOW: Walk members in start order keeping the current best. A member
    replaces the best when its normalized text is strictly longer, or when
    the lengths differ by fewer than 10 characters and it is more complete
    (see _is_more_complete). The first member wins any remaining tie.

    RULES:
    - start is the earliest start in the group
    - duration reaches the latest end in the group
    - text is the representative's original, un-normalized text
    - A single-caption group is returned as-is
    """
    if len(group) == 1:
        return group[0]

    members = sorted(group, key=lambda c: c.start)

    best = members[0]
    best_length = len(normalize_text(best.text))
    for candidate in members[1:]:
        length = len(normalize_text(candidate.text))
        if length > best_length:
            best, best_length = candidate, length
        elif abs(length - best_length) < _LENGTH_TIE_CHARS and _is_more_complete(candidate, best):
            best, best_length = candidate, length

    start = min(c.start for c in members)
    end = max(c.end for c in members)

    return Caption(start=start, duration=end - start, text=best.text)
