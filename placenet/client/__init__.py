"""
Client module - async API client with an optimistic query cache.

Usage:
    async with PlacenetClient("http://localhost:8000", token=token) as client:
        await client.list_recruiter_applications()
        await client.move_candidate(application_id, "interview")
"""

from placenet.client.api import PlacenetClient
from placenet.client.cache import QueryCache
from placenet.client.mutations import OptimisticMutation

__all__ = ["PlacenetClient", "QueryCache", "OptimisticMutation"]
