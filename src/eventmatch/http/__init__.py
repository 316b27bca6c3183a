"""
eventmatch.http

Typed HTTP layer.

Responsibilities:
- Declarative endpoint descriptors and request building.
- Transport boundary over httpx.
- Envelope decoding and the client error taxonomy.
"""

# Package marker; import from submodules directly.
