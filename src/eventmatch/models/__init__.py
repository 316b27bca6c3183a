"""
eventmatch.models

Backend payload and domain models (pydantic).

Responsibilities:
- Decode envelope `data` payloads into typed records.
- Encode request payloads with the backend's field names.
"""

# Package marker; import from submodules directly.
