"""Adapters between plain caption records and the core Caption type.

WHY: Upstream subtitle parsers and downstream consumers exchange captions
as plain mappings (JSON objects). The engine works on Caption values.
Adapters convert between the two at the boundary.

RULES:
- Adapters validate their input; the core never sees malformed records
- No I/O happens here; callers read and write files themselves
"""
