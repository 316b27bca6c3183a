"""
eventmatch.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Per-call context propagation for consistent log enrichment.
"""

# Package marker.
