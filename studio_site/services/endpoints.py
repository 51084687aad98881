"""FitDegree endpoint catalog and path-variant generation.

FitDegree's routing is undocumented and differs between deployments, so a
logical resource maps to an ordered list of candidate paths rather than a
single URL. The literal list (environment override, else built-in default)
is always tried first, followed by case/prefix permutations of each entry.
"""
import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlparse

from ..config import Settings, settings

DEFAULT_ENDPOINTS: Dict[str, Tuple[str, ...]] = {
    "instructors": ("/api/v1/TEAM_MEMBERS",),
    "classes": ("/api/v1/UPCOMING_CLASSES",),
    "schedule": ("/schedule/item/",),
    "group_classes": ("/group-class/",),
    "services": ("/one-on-one/service/",),
}

# Environment variable that overrides each resource's literal list
OVERRIDE_ENV: Dict[str, str] = {
    "instructors": "FITDEGREE_ENDPOINT_TEAM_MEMBERS",
    "classes": "FITDEGREE_ENDPOINT_CLASSES",
    "schedule": "FITDEGREE_ENDPOINT_SCHEDULE",
    "group_classes": "FITDEGREE_ENDPOINT_GROUP_CLASSES",
    "services": "FITDEGREE_ENDPOINT_SERVICES",
}

PREFIX_CANDIDATES = ("/v1", "/api/v1", "/api", "")

_MULTI_SLASH = re.compile(r"/{2,}")
_URL_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def _uniq(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _join(prefix: str, name: str) -> str:
    return _MULTI_SLASH.sub("/", f"{prefix}/{name}")


def _name_variants(name: str) -> List[str]:
    snake = name.replace("-", "_")
    kebab = name.replace("_", "-")
    variants = [
        name,
        name.lower(),
        name.upper(),
        snake,
        kebab,
        snake.lower(),
        kebab.lower(),
        snake.upper(),
        kebab.upper(),
    ]
    return _uniq(v for v in variants if v)


def endpoint_variants(original_path: str) -> List[str]:
    """Generate common FitDegree spellings of an endpoint path.

    The original path comes first, then every prefix convention
    (original prefix, /v1, /api/v1, /api, root) crossed with case and
    separator variants of the last segment, then the original prefix with
    each name variant. Trailing slashes on the input are not preserved by
    the permutations.

    Args:
        original_path: Path or full URL (reduced to its path)

    Returns:
        Deduplicated candidate paths, original first
    """
    path_only = str(original_path or "").strip()
    if not path_only:
        return []

    if _URL_SCHEME.match(path_only):
        path_only = urlparse(path_only).path or "/"

    if not path_only.startswith("/"):
        path_only = "/" + path_only

    parts = [p for p in path_only.split("/") if p]
    last = parts[-1] if parts else ""
    prefix = "/" + "/".join(parts[:-1]) if len(parts) > 1 else ""

    names = _name_variants(last)
    prefixes = _uniq([prefix, *PREFIX_CANDIDATES])

    out = [path_only]
    for pref in prefixes:
        out.extend(_join(pref, nm) for nm in names)
    out.extend(_join(prefix, nm) for nm in names)

    return _uniq(out)


def expand_candidates(literal: Sequence[str]) -> Tuple[str, ...]:
    """Literal paths verbatim, then their unseen variants."""
    expanded = list(literal)
    seen = set(expanded)
    for path in literal:
        for variant in endpoint_variants(path):
            if variant not in seen:
                seen.add(variant)
                expanded.append(variant)
    return tuple(expanded)


class EndpointCatalog:
    """Immutable per-resource endpoint candidate sets."""

    def __init__(
        self,
        overrides: Optional[Mapping[str, Sequence[str]]] = None,
        defaults: Mapping[str, Sequence[str]] = DEFAULT_ENDPOINTS,
    ):
        """Initialize the catalog.

        Args:
            overrides: Resource -> override path list; empty lists fall back
            defaults: Resource -> built-in path list
        """
        overrides = overrides or {}
        self._literal: Dict[str, Tuple[str, ...]] = {
            resource: tuple(overrides.get(resource) or paths)
            for resource, paths in defaults.items()
        }
        self._candidates: Dict[str, Tuple[str, ...]] = {
            resource: expand_candidates(paths)
            for resource, paths in self._literal.items()
        }

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "EndpointCatalog":
        cfg = cfg or settings
        return cls(overrides=cfg.endpoint_overrides)

    @property
    def resources(self) -> Tuple[str, ...]:
        return tuple(self._literal)

    def literal(self, resource: str) -> Tuple[str, ...]:
        """Override list if configured, else the defaults.

        Raises:
            KeyError: Unknown resource
        """
        return self._literal[resource]

    def candidates(self, resource: str) -> Tuple[str, ...]:
        """Literal list followed by its path variants.

        Raises:
            KeyError: Unknown resource
        """
        return self._candidates[resource]

    def hint(self, resource: str) -> str:
        env = OVERRIDE_ENV.get(resource, "FITDEGREE_ENDPOINT_*")
        return (
            f"Set {env} to the correct endpoint path(s), comma-separated, if needed."
        )


# Global catalog, computed once per process
catalog = EndpointCatalog.from_settings()
