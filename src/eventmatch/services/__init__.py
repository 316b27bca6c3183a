"""
eventmatch.services

Feature service layer.

Responsibilities:
- Thin, typed wrappers over `APIClient` per backend feature (auth, events, profile, attendee).
- Coordinate the client with session state and caches where a flow needs both.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services hold no state of their own; everything durable lives in the session manager
# or the caches they are given.
