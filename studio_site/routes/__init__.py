"""Route helpers shared by the host app and gizmo packs."""
from .dependencies import get_fitdegree_client

__all__ = ["get_fitdegree_client"]
