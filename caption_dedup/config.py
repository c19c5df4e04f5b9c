"""Environment-driven defaults for the deduplication engine.

WHY: Services that embed the engine want to tune it per deployment
(a looser time window for slow-scrolling tracks, aggressive mode for
summaries) without code changes. Keeping the variable names and parsing
in one place makes them easy to find and override.

HOW: python-dotenv loads a .env file on import. load_dedup_config()
reads the CAPTION_DEDUP_* variables at call time and builds a
DedupConfig, falling back to the dataclass defaults for anything unset.

RULES:
- Unset or empty variables keep the DedupConfig default
- Booleans accept true/false, 1/0, yes/no, on/off (case-insensitive)
- Unparsable values raise ValueError naming the variable
- The core engine never reads the environment itself
"""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from caption_dedup.core.ir import DedupConfig

# Load .env from the working directory (where the embedding app runs)
load_dotenv()

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_ENABLED = "CAPTION_DEDUP_ENABLED"
ENV_TIME_THRESHOLD = "CAPTION_DEDUP_TIME_THRESHOLD"
ENV_SIMILARITY_THRESHOLD = "CAPTION_DEDUP_SIMILARITY_THRESHOLD"
ENV_MERGE_PARTIAL_MATCHES = "CAPTION_DEDUP_MERGE_PARTIAL_MATCHES"
ENV_AGGRESSIVE_MODE = "CAPTION_DEDUP_AGGRESSIVE_MODE"

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(
        "{} must be a boolean (true/false, 1/0, yes/no, on/off), got '{}'".format(name, raw)
    )


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        raise ValueError("{} must be a number, got '{}'".format(name, raw)) from None


def load_dedup_config(environ: Optional[Mapping[str, str]] = None) -> DedupConfig:
    """Build a DedupConfig from CAPTION_DEDUP_* environment variables.

    WHY: Lets deployments tune the engine through the environment (or a
    .env file) the same way every other setting is configured.

    HOW: Reads each variable, parses it, and passes only the ones that are
    set to DedupConfig, so the dataclass stays the single source of
    defaults.

    RULES:
    - environ defaults to os.environ (populated by python-dotenv)
    - Out-of-range thresholds raise ValueError from DedupConfig

    Args:
        environ: Mapping to read instead of os.environ (for tests).

    Returns:
        A validated DedupConfig.
    """
    env = os.environ if environ is None else environ
    kwargs: Dict[str, Any] = {}

    for name, field_name in (
        (ENV_ENABLED, "enabled"),
        (ENV_MERGE_PARTIAL_MATCHES, "merge_partial_matches"),
        (ENV_AGGRESSIVE_MODE, "aggressive_mode"),
    ):
        raw = env.get(name, "")
        if raw.strip():
            kwargs[field_name] = _parse_bool(name, raw)

    for name, field_name in (
        (ENV_TIME_THRESHOLD, "time_threshold"),
        (ENV_SIMILARITY_THRESHOLD, "similarity_threshold"),
    ):
        raw = env.get(name, "")
        if raw.strip():
            kwargs[field_name] = _parse_float(name, raw)

    return DedupConfig(**kwargs)
