"""Discovery and mounting of gizmo packs.

A pack is a directory `<base>/<id>/` whose entry module is either
`server/__init__.py` or `server.py` and declares a module-level
`pack = GizmoPack(...)`. Base directories are searched in priority order;
when the same id appears under several bases only the first is mounted.
"""
import importlib.util
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, Iterable, List, Optional, Sequence

from fastapi import FastAPI
from pydantic import BaseModel, Field

from ..config import settings
from ..utils.logger import get_logger
from .contract import pack_from_module

logger = get_logger("gizmos")

# Relative to the working directory; covers both the repo root and a
# deployment whose root directory is api/
DEFAULT_RELATIVE_DIRS = (
    ("src", "gizmos"),
    ("gizmos",),
    ("api", "src", "gizmos"),
    ("api", "gizmos"),
)

BUILTIN_PACK_DIR = Path(__file__).resolve().parent.parent / "gizmos"

ENTRY_CANDIDATES = (("server", "__init__.py"), ("server.py",))

MODULE_PREFIX = "studio_site_gizmo_"

_CONFLICT_MARKER = re.compile(r"^(<{7}|={7}|>{7})(\s|$)")


class MountReport(BaseModel):
    """Outcome of a mount pass."""

    mounted: Dict[str, str] = Field(default_factory=dict, description="id -> entry path")
    skipped: List[str] = Field(default_factory=list)
    failed: Dict[str, str] = Field(default_factory=dict, description="id -> error")


def resolve_pack_dirs(
    cwd: Path,
    extra: Iterable[Path] = (),
    builtin: Optional[Path] = BUILTIN_PACK_DIR,
) -> List[Path]:
    """Ordered, deduplicated base directories to search for packs.

    Args:
        cwd: Working directory the conventional locations are relative to
        extra: Explicit directories searched first (relative ones join cwd)
        builtin: Directory of packs shipped with the package, searched last

    Returns:
        Absolute paths; existence is not checked
    """
    candidates = [cwd / Path(p) for p in extra]
    candidates.extend(cwd.joinpath(*parts) for parts in DEFAULT_RELATIVE_DIRS)
    if builtin is not None:
        candidates.append(builtin)

    resolved = (p.resolve() for p in candidates)
    return list(dict.fromkeys(resolved))


def find_entry(pack_dir: Path) -> Optional[Path]:
    for parts in ENTRY_CANDIDATES:
        entry = pack_dir.joinpath(*parts)
        if entry.is_file():
            return entry
    return None


def scan_for_corruption(pack_dir: Path) -> List[str]:
    """Look for merge-conflict markers and stray leading `||` in pack sources.

    Returns:
        "file:line: reason" strings; empty when nothing suspicious is found
    """
    findings = []
    for source in sorted(pack_dir.rglob("*.py")):
        try:
            lines = source.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError:
            continue
        for lineno, line in enumerate(lines, 1):
            if _CONFLICT_MARKER.match(line):
                findings.append(f"{source}:{lineno}: merge conflict marker")
            elif line.lstrip().startswith("||"):
                findings.append(f"{source}:{lineno}: line starts with '||'")
    return findings


def _module_name(pack_id: str) -> str:
    return MODULE_PREFIX + re.sub(r"\W", "_", pack_id)


def _forget_module(name: str) -> None:
    for key in [k for k in sys.modules if k == name or k.startswith(name + ".")]:
        del sys.modules[key]


def load_entry(pack_id: str, entry: Path) -> ModuleType:
    """Import a pack entry file under a private module name.

    Package entries (`server/__init__.py`) can use relative imports for
    their sibling modules.
    """
    name = _module_name(pack_id)
    search = [str(entry.parent)] if entry.name == "__init__.py" else None
    spec = importlib.util.spec_from_file_location(
        name, entry, submodule_search_locations=search
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load {entry}")

    module = importlib.util.module_from_spec(spec)
    _forget_module(name)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        _forget_module(name)
        raise
    return module


class PackMounter:
    """Mounts every discoverable pack onto a FastAPI app."""

    def __init__(self, base_dirs: Optional[Sequence[Path]] = None):
        """Initialize the mounter.

        Args:
            base_dirs: Directories to search, in priority order. Defaults to
                resolve_pack_dirs(cwd, settings.extra_gizmo_dirs)
        """
        if base_dirs is None:
            base_dirs = resolve_pack_dirs(Path.cwd(), settings.extra_gizmo_dirs)
        self.base_dirs = list(base_dirs)

    def mount_all(self, app: FastAPI) -> MountReport:
        """Discover, load and register packs; failures are isolated per pack."""
        report = MountReport()
        logger.info(f"[GIZMOS] base dirs = {[str(d) for d in self.base_dirs]}")

        saw_any_base = False
        for base in self.base_dirs:
            if not base.is_dir():
                logger.info(f"[GIZMOS] No gizmos directory: {base}")
                continue
            saw_any_base = True

            pack_dirs = sorted(
                p for p in base.iterdir()
                if p.is_dir() and not p.name.startswith(("_", "."))
            )
            logger.info(f"[GIZMOS] Found packs in {base}: {[p.name for p in pack_dirs]}")

            for pack_dir in pack_dirs:
                self._mount_one(app, pack_dir, report)

        if not saw_any_base:
            logger.info("[GIZMOS] No base gizmos folders exist at any expected path.")
        if report.mounted:
            logger.info(f"[GIZMOS] Mounted packs: {list(report.mounted)}")
        else:
            logger.info("[GIZMOS] No packs mounted.")
        return report

    def _mount_one(self, app: FastAPI, pack_dir: Path, report: MountReport) -> None:
        pack_id = pack_dir.name
        if pack_id in report.mounted:
            logger.info(f"[GIZMOS] {pack_id}: already mounted, skipping {pack_dir}")
            report.skipped.append(str(pack_dir))
            return

        entry = find_entry(pack_dir)
        if entry is None:
            logger.info(f"[GIZMOS] {pack_id}: no server entry (skipping)")
            report.skipped.append(str(pack_dir))
            return

        try:
            module = load_entry(pack_id, entry)
            pack = pack_from_module(module)
            pack.mount(app)
        except Exception as e:
            logger.error(f"[GIZMOS] Failed to mount {pack_id}: {e!r}")
            for finding in scan_for_corruption(pack_dir):
                logger.error(f"[GIZMOS]   {finding}")
            report.failed[pack_id] = str(e) or type(e).__name__
            return

        report.mounted[pack_id] = str(entry)
        logger.info(f"[GIZMOS] Mounted: {pack_id} ({entry})")


def mount_gizmo_packs(app: FastAPI, base_dirs: Optional[Sequence[Path]] = None) -> MountReport:
    """Convenience function to mount packs from the default locations."""
    return PackMounter(base_dirs).mount_all(app)
