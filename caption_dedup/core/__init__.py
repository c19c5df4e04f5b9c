"""Core data types and the deduplication engine.

WHY: The core package is the stable heart of the library: the Caption
and DedupConfig values and the passes that clean a caption sequence.
Everything here is pure: no I/O, no network, no global state.

HOW: ir.py defines the values, text.py the normalization and similarity
measures, grouping.py the grouping and merge passes, deduplicator.py the
remaining passes and the deduplicate_captions() pipeline.

RULES:
- Passes take a list and return a new list; inputs are never mutated
- Nothing in core reads the environment; configuration arrives as a value
"""
