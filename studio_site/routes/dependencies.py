"""Shared FastAPI dependencies for pack routes."""
from typing import AsyncIterator

from ..services.fitdegree_client import FitDegreeClient


async def get_fitdegree_client() -> AsyncIterator[FitDegreeClient]:
    """Yield an entered FitDegree client for the duration of a request."""
    async with FitDegreeClient() as client:
        yield client
