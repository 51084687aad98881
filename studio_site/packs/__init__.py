"""Gizmo pack contract and mounter."""
from .contract import GizmoPack, PackKind, pack_from_module
from .loader import (
    MountReport,
    PackMounter,
    find_entry,
    mount_gizmo_packs,
    resolve_pack_dirs,
    scan_for_corruption,
)

__all__ = [
    "GizmoPack",
    "PackKind",
    "pack_from_module",
    "MountReport",
    "PackMounter",
    "find_entry",
    "mount_gizmo_packs",
    "resolve_pack_dirs",
    "scan_for_corruption",
]
