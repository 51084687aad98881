"""Gizmo packs shipped with the site server."""
