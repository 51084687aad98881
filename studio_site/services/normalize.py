"""Normalization of FitDegree payloads into display records.

FitDegree answers collections in a cache-and-reference shape: `items` plus
side tables under `cache` (`identities`, `images`, `ooo_durations`) keyed by
id. The same collection may arrive wrapped in `response.data`, in
`data.response.data` when proxied through the pack, or flattened to a bare
`response` list by other deployments. Helpers here accept all of them.
"""
import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ..config import Settings, settings, split_csv
from ..models import GroupClass, Instructor, ScheduleItem, ServiceOffering

PREFERRED_IMAGE_WIDTH = 640

PLACEHOLDER_BIO_MARKERS = ("bio coming soon", "coming soon")

_DELETED_FLAGS = ("is_deleted", "deleted", "archived", "deactivated")
_ACTIVE_FLAGS = ("active", "is_active", "isActive", "enabled", "is_enabled")

_CONTAINER_PATHS: Tuple[Tuple[str, ...], ...] = (
    (),
    ("response", "data"),
    ("data", "response", "data"),
    ("data",),
    ("response",),
    ("data", "response"),
)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _id(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _dig(payload: Any, path: Tuple[str, ...]) -> Any:
    node = payload
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def extract_collection(payload: Any) -> Tuple[List[Any], Mapping[str, Any]]:
    """Find the record list and its side tables in any known shape.

    Returns:
        Tuple of (items, cache); both empty when nothing matches
    """
    for path in _CONTAINER_PATHS:
        node = _dig(payload, path)
        if isinstance(node, list):
            return node, {}
        if isinstance(node, Mapping) and isinstance(node.get("items"), list):
            cache = node.get("cache")
            return node["items"], cache if isinstance(cache, Mapping) else {}
    return [], {}


def extract_list(payload: Any) -> List[Any]:
    """Record list from a payload, ignoring side tables."""
    return extract_collection(payload)[0]


def index_by_id(records: Iterable[Any]) -> Dict[str, Mapping[str, Any]]:
    return {
        str(r.get("id")): r
        for r in records or []
        if isinstance(r, Mapping) and r.get("id") is not None
    }


def is_active_record(record: Any) -> bool:
    """Best-effort activity check across the flags FitDegree uses.

    A record is hidden only on a clear inactive signal (deleted, archived,
    disabled, deactivated, or a status other than "active"). No signal at
    all means active.
    """
    if not isinstance(record, Mapping):
        return True

    if any(record.get(flag) is True for flag in _DELETED_FLAGS):
        return False
    if any(record.get(flag) is False for flag in _ACTIVE_FLAGS):
        return False
    if record.get("deactivated_at"):
        return False

    status = _text(record.get("status") or record.get("state")).lower()
    if status and status != "active":
        return False

    return True


def pick_image_url(image: Any) -> Optional[str]:
    """Pick the image source closest to 640px wide, else the first source."""
    sources = image.get("sources") if isinstance(image, Mapping) else None
    if not isinstance(sources, list):
        return None
    sources = [s for s in sources if isinstance(s, Mapping)]
    if not sources:
        return None

    sized = []
    for source in sources:
        try:
            width = float(source.get("width"))
        except (TypeError, ValueError):
            continue
        if math.isfinite(width):
            sized.append((abs(width - PREFERRED_IMAGE_WIDTH), source))

    if sized:
        best = min(sized, key=lambda pair: pair[0])[1]
        return best.get("url") or None
    return sources[0].get("url") or None


def money_from_cents(value: Any) -> Optional[str]:
    """Format a cent amount as US dollars (7000 -> "$70.00")."""
    try:
        cents = float(value)
    except (TypeError, ValueError):
        return None
    if cents != cents:  # NaN
        return None
    return f"${cents / 100:,.2f}"


def slugify(value: Any) -> str:
    text = _text(value).lower()
    text = re.sub(r"['\"]", "", text)
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-")


def format_pretty_datetime(value: Any) -> str:
    """Render "2026-01-05 09:30:00" as "January 5, 2026 • 9:30 am"."""
    raw = _text(value)
    if not raw:
        return ""
    try:
        moment = datetime.fromisoformat(raw.replace(" ", "T", 1))
    except ValueError:
        return raw

    hour = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    return (
        f"{moment:%B} {moment.day}, {moment.year} • "
        f"{hour}:{moment.minute:02d} {meridiem}"
    )


@dataclass(frozen=True)
class HiddenInstructors:
    """Instructor denylist by id, username or full name."""

    ids: FrozenSet[str] = field(default_factory=frozenset)
    usernames: FrozenSet[str] = field(default_factory=frozenset)
    names: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "HiddenInstructors":
        cfg = cfg or settings
        return cls(
            ids=frozenset(split_csv(cfg.hidden_instructor_ids)),
            usernames=frozenset(u.lower() for u in split_csv(cfg.hidden_instructor_usernames)),
            names=frozenset(n.lower() for n in split_csv(cfg.hidden_instructor_names)),
        )

    def hides(self, instructor: Instructor) -> bool:
        ids = {instructor.id, instructor.identity_id} - {None}
        return bool(
            ids & self.ids
            or (instructor.username and instructor.username.lower() in self.usernames)
            or (instructor.full_name and instructor.full_name.lower() in self.names)
        )


def normalize_instructors(
    payload: Any, hidden: Optional[HiddenInstructors] = None
) -> List[Instructor]:
    """Project team members into instructors, dropping inactive and hidden ones.

    A member is dropped when either the member record or its identity
    carries an inactive signal.
    """
    items, cache = extract_collection(payload)
    identities = index_by_id(cache.get("identities"))
    images = index_by_id(cache.get("images"))
    hidden = hidden or HiddenInstructors()

    instructors = []
    for item in items:
        if not isinstance(item, Mapping):
            continue

        identity = identities.get(str(item.get("identity_id"))) or {}
        if not (is_active_record(item) and is_active_record(identity)):
            continue

        first = _text(identity.get("first_name") or item.get("first_name"))
        last = _text(identity.get("last_name") or item.get("last_name"))
        full_name = (
            f"{first} {last}".strip()
            or _text(item.get("name") or item.get("full_name") or item.get("display_name"))
        )
        username = _text(item.get("username") or identity.get("username"))
        image_id = _id(item.get("profile_picture_image_id") or identity.get("profile_picture_id"))
        image_url = pick_image_url(images.get(image_id)) if image_id else None

        instructor = Instructor(
            id=_id(item.get("id")),
            identity_id=_id(item.get("identity_id")),
            username=username,
            first_name=first,
            last_name=last,
            full_name=full_name,
            bio=_text(identity.get("about_me") or item.get("about_me") or item.get("bio")),
            image_id=image_id,
            image_url=image_url or _id(item.get("image_url")),
            slug=slugify(full_name) or slugify(username) or _text(item.get("id")),
        )

        if hidden.hides(instructor):
            continue
        instructors.append(instructor)

    return instructors


def is_placeholder_bio(bio: str) -> bool:
    lowered = (bio or "").strip().lower()
    return any(marker in lowered for marker in PLACEHOLDER_BIO_MARKERS)


def is_publishable_instructor(instructor: Instructor) -> bool:
    """Instructor has a photo and a real (non-placeholder) bio."""
    if not (instructor.image_id or instructor.image_url):
        return False
    return bool(instructor.bio) and not is_placeholder_bio(instructor.bio)


def normalize_group_classes(items: Iterable[Any]) -> List[GroupClass]:
    classes = []
    for item in items or []:
        if not isinstance(item, Mapping):
            continue
        group = item.get("class_group") if isinstance(item.get("class_group"), Mapping) else {}
        classes.append(
            GroupClass(
                id=_id(item.get("id")),
                title=_text(item.get("title")),
                description=_text(item.get("description")),
                group_name=_text(item.get("group_name") or group.get("name")),
                difficulty=_text(item.get("difficulty_text")),
            )
        )
    return classes


def matches_keyword(group_class: GroupClass, keyword: str) -> bool:
    """Case-insensitive keyword match on title, description and group name."""
    keyword = (keyword or "").strip().lower()
    if not keyword:
        return True
    haystack = " ".join(
        (group_class.title, group_class.description, group_class.group_name)
    ).lower()
    return keyword in haystack


def is_training_class(group_class: GroupClass, keyword: str) -> bool:
    """Keyword in the title or group name; descriptions are not consulted."""
    keyword = (keyword or "").strip().lower()
    if not keyword:
        return False
    return keyword in f"{group_class.group_name} {group_class.title}".lower()


def _price_line(duration: Mapping[str, Any]) -> Optional[str]:
    try:
        minutes = int(float(duration.get("duration")))
    except (TypeError, ValueError):
        minutes = 0
    price = money_from_cents(duration.get("base_price"))
    parts = [p for p in (f"{minutes} min" if minutes else "", price or "") if p]
    return " · ".join(parts) or None


def normalize_services(data: Mapping[str, Any]) -> List[ServiceOffering]:
    """Project one-on-one services with their images and duration prices."""
    items, cache = extract_collection(data)
    images = index_by_id(cache.get("images"))

    durations: Dict[str, List[Mapping[str, Any]]] = {}
    for duration in cache.get("ooo_durations") or []:
        if isinstance(duration, Mapping):
            durations.setdefault(str(duration.get("service_id")), []).append(duration)

    services = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        image_id = _id(item.get("image_id"))
        lines = [_price_line(d) for d in durations.get(str(item.get("id")), [])]
        services.append(
            ServiceOffering(
                id=_id(item.get("id")),
                name=_text(item.get("name")),
                description=_text(item.get("description")),
                image_url=pick_image_url(images.get(image_id)) if image_id else None,
                price_lines=[line for line in lines if line],
                display_on_app=item.get("display_on_app") is not False,
            )
        )
    return services


def start_time(record: Mapping[str, Any]) -> str:
    """Studio-local start time, falling back to end times."""
    for key in ("fs_event_datetime", "event_datetime", "fs_end_datetime", "end_datetime"):
        value = _text(record.get(key))
        if value:
            return value
    return ""


def normalize_schedule_items(items: Iterable[Any]) -> List[ScheduleItem]:
    schedule = []
    for item in items or []:
        if not isinstance(item, Mapping):
            continue
        schedule.append(
            ScheduleItem(
                id=_id(item.get("id")),
                title=_text(item.get("title")),
                instructor_name=_text(item.get("instructor_name")),
                starts_at=start_time(item),
                description=_text(item.get("description")),
                book_url=_id(item.get("share_url")),
                past=bool(item.get("past")),
            )
        )
    return schedule


def upcoming(items: Iterable[ScheduleItem], limit: int) -> List[ScheduleItem]:
    """Non-past items sorted by start time ascending, capped to `limit`."""
    future = sorted((i for i in items if not i.past), key=lambda i: i.starts_at)
    return future[: max(limit, 0)]


def featured_records(records: Iterable[Any], limit: int) -> List[Mapping[str, Any]]:
    """Raw upcoming-class records, soonest first, capped to `limit`."""
    future = [r for r in records if isinstance(r, Mapping) and not r.get("past")]
    future.sort(key=start_time)
    return future[: max(limit, 0)]
