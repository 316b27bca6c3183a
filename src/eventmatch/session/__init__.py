"""
eventmatch.session

Session state package.

Responsibilities:
- Hold authentication, role, user and selected-event state for one app process.
- Derive the navigation target and the selected event's activity flag.
"""

# Package marker.
