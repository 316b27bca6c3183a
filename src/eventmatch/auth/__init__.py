"""
eventmatch.auth

Authentication package.

Responsibilities:
- Bearer token persistence in the OS credential store.
- Local inspection of token expiry.
"""

# Package marker.
