"""
eventmatch.api

Backend API boundary.

Responsibilities:
- The typed API client (build, send, decode, token handling).
- The catalogue of backend endpoints.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on this boundary, never on httpx directly.
