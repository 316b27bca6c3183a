"""
eventmatch.cache

Client-side caches.

Responsibilities:
- Scope-keyed TTL cache for fetched collections, persisted in the local store.
- In-memory image cache with in-flight request de-duplication.
"""

# Package marker.
