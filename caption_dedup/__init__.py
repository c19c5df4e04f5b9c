"""Caption Dedup — clean up redundant auto-generated caption tracks.

WHY: Auto-generated video captions repeat, overlap and incrementally
reveal the same spoken line, so a naive transcript reads every sentence
three or four times. This package turns the raw cue list from a subtitle
parser into a minimal, correctly-timed caption sequence.

HOW: Records from an upstream parser are validated and converted into
Caption values (adapters), cleaned by the multi-pass engine (core), and
handed back as Captions or plain records.

RULES:
- deduplicate_captions() is the engine's entry point; it never does I/O
- deduplicate_records() is the convenience wrapper for plain mappings
- With no explicit options, deduplicate_records() reads CAPTION_DEDUP_*
  environment settings via load_dedup_config()
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from caption_dedup.adapters.records import (
    CAPTION_RECORD_SCHEMA,
    CaptionRecordError,
    captions_from_records,
    captions_to_records,
)
from caption_dedup.config import load_dedup_config
from caption_dedup.core.deduplicator import deduplicate_captions
from caption_dedup.core.ir import Caption, DedupConfig

__version__ = "0.1.0"

__all__ = [
    "CAPTION_RECORD_SCHEMA",
    "Caption",
    "CaptionRecordError",
    "DedupConfig",
    "captions_from_records",
    "captions_to_records",
    "deduplicate_captions",
    "deduplicate_records",
    "load_dedup_config",
]


def deduplicate_records(
    records: Iterable[Mapping[str, Any]],
    options: Optional[Mapping[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """Deduplicate plain caption records.

    Args:
        records: Mappings with start, text and one of duration/dur/end.
        options: Partial engine options (snake_case or camelCase keys).
                 When None, options come from the environment.

    Returns:
        Cleaned {start, duration, text} dicts sorted by start.

    Raises:
        CaptionRecordError: If a record is malformed.
        ValueError: If an option is unknown or out of range.
    """
    config = DedupConfig.from_options(options) if options is not None else load_dedup_config()
    captions = captions_from_records(records)
    return captions_to_records(deduplicate_captions(captions, config))
