"""
eventmatch.db

Local persistence package (SQLAlchemy async).

Responsibilities:
- Provide the key/value table, engine/session setup, and the store implementations.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only primitive, individually keyed values are stored, so there is no migration story;
# `init_db` creating the table is the whole schema lifecycle.
