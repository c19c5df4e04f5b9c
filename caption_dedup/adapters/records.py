"""Record adapter — plain caption mappings to and from Caption values.

WHY: Subtitle parsers emit captions as dicts, and not all of them agree on
the field names: some give a duration, some the short "dur" key, cue
parsers usually give an end time. The engine needs Caption values with a
start and duration, and consumers usually want plain dicts back.

HOW: Each record is checked against CAPTION_RECORD_SCHEMA with jsonschema,
then the duration is resolved (duration, then dur, then end - start).
captions_to_records() writes the canonical {start, duration, text} shape.

RULES:
- A record needs "start", "text" and one of "duration", "dur", "end"
- start must be a non-negative number; times must be numbers
- Text is passed through untouched (empty text is allowed; the engine
  drops it as noise)
- Validation failures raise CaptionRecordError with the record index
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

import jsonschema
from jsonschema.exceptions import best_match

from caption_dedup.core.ir import Caption

CAPTION_RECORD_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Caption record",
    "type": "object",
    "properties": {
        "start": {"type": "number", "minimum": 0},
        "duration": {"type": "number"},
        "dur": {"type": "number"},
        "end": {"type": "number"},
        "text": {"type": "string"},
    },
    "required": ["start", "text"],
    "anyOf": [
        {"required": ["duration"]},
        {"required": ["dur"]},
        {"required": ["end"]},
    ],
}

_VALIDATOR = jsonschema.Draft7Validator(CAPTION_RECORD_SCHEMA)


class CaptionRecordError(ValueError):
    """Raised when a caption record does not match CAPTION_RECORD_SCHEMA.

    RULES:
    - index is the position of the offending record in the input
    - message is the first schema validation message
    """

    def __init__(self, index: int, message: str) -> None:
        self.index = index
        self.message = message
        super().__init__("Invalid caption record at index {}: {}".format(index, message))


def caption_from_record(record: Mapping[str, Any], index: int = 0) -> Caption:
    """Validate one record and build a Caption from it."""
    # jsonschema only treats dict instances as objects
    instance = dict(record) if isinstance(record, Mapping) else record
    error = best_match(_VALIDATOR.iter_errors(instance))
    if error is not None:
        raise CaptionRecordError(index, error.message)

    start = float(instance["start"])
    if "duration" in instance:
        duration = float(instance["duration"])
    elif "dur" in instance:
        duration = float(instance["dur"])
    else:
        duration = float(instance["end"]) - start

    return Caption(start=start, duration=duration, text=instance["text"])


def captions_from_records(records: Iterable[Mapping[str, Any]]) -> List[Caption]:
    """Convert raw caption records into Caption values.

    Args:
        records: Mappings shaped like CAPTION_RECORD_SCHEMA, in any order.

    Returns:
        Captions in input order.

    Raises:
        CaptionRecordError: On the first record that fails validation.
    """
    return [caption_from_record(record, index) for index, record in enumerate(records)]


def captions_to_records(captions: Iterable[Caption]) -> List[Dict[str, Any]]:
    """Convert captions to plain {start, duration, text} dicts."""
    return [
        {"start": c.start, "duration": c.duration, "text": c.text}
        for c in captions
    ]
