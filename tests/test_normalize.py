"""Tests for payload normalization."""
from studio_site.models import Instructor, ScheduleItem
from studio_site.services.normalize import (
    HiddenInstructors,
    extract_collection,
    format_pretty_datetime,
    is_active_record,
    is_publishable_instructor,
    is_training_class,
    matches_keyword,
    money_from_cents,
    normalize_group_classes,
    normalize_instructors,
    normalize_services,
    pick_image_url,
    slugify,
    upcoming,
)


def team_payload(items, identities=(), images=()):
    return {
        "response": {
            "success": True,
            "data": {
                "items": list(items),
                "cache": {"identities": list(identities), "images": list(images)},
            },
        }
    }


class TestActivity:
    """Tests for is_active_record."""

    def test_no_flags_is_active(self):
        assert is_active_record({"id": 1})

    def test_deleted_flags(self):
        assert not is_active_record({"is_deleted": True})
        assert not is_active_record({"archived": True})
        assert not is_active_record({"deactivated_at": "2025-01-01"})

    def test_disabled_flags(self):
        assert not is_active_record({"active": False})
        assert not is_active_record({"isActive": False})
        assert not is_active_record({"enabled": False})

    def test_status(self):
        assert is_active_record({"status": "Active"})
        assert not is_active_record({"status": "inactive"})

    def test_falsy_non_boolean_flags_ignored(self):
        """Only explicit booleans count as signals."""
        assert is_active_record({"is_deleted": 0, "active": None})


class TestExtractCollection:
    """Tests for shape detection."""

    def test_bare_response_list(self):
        items, cache = extract_collection({"response": [{"id": 1}]})
        assert items == [{"id": 1}]
        assert cache == {}

    def test_envelope_with_cache(self):
        items, cache = extract_collection(team_payload([{"id": 1}], identities=[{"id": 2}]))
        assert items == [{"id": 1}]
        assert cache["identities"] == [{"id": 2}]

    def test_proxied_envelope(self):
        payload = {"data": team_payload([{"id": 3}])}
        assert extract_collection(payload)[0] == [{"id": 3}]

    def test_unknown_shape(self):
        assert extract_collection({"foo": "bar"}) == ([], {})
        assert extract_collection(None) == ([], {})


class TestInstructors:
    """Tests for instructor normalization."""

    def test_identity_and_image_resolution(self):
        payload = team_payload(
            [{"id": 1, "identity_id": 10, "profile_picture_image_id": 100}],
            identities=[
                {"id": 10, "first_name": "Ana", "last_name": "Lopez", "about_me": "Vinyasa."}
            ],
            images=[
                {
                    "id": 100,
                    "sources": [
                        {"url": "small.jpg", "width": 320},
                        {"url": "medium.jpg", "width": 640},
                        {"url": "large.jpg", "width": 1280},
                    ],
                }
            ],
        )

        [ana] = normalize_instructors(payload)
        assert ana.full_name == "Ana Lopez"
        assert ana.bio == "Vinyasa."
        assert ana.image_url == "medium.jpg"
        assert ana.slug == "ana-lopez"
        assert ana.id == "1"

    def test_deleted_member_excluded(self):
        payload = team_payload(
            [{"id": 1, "name": "Gone", "is_deleted": True}, {"id": 2, "name": "Here"}]
        )
        assert [i.full_name for i in normalize_instructors(payload)] == ["Here"]

    def test_inactive_identity_excluded(self):
        payload = team_payload(
            [{"id": 1, "identity_id": 10}],
            identities=[{"id": 10, "first_name": "Old", "status": "inactive"}],
        )
        assert normalize_instructors(payload) == []

    def test_denylist(self):
        payload = team_payload(
            [
                {"id": 1, "name": "Ana Lopez"},
                {"id": 2, "name": "Ben", "username": "ADMIN"},
                {"id": 3, "name": "Cara"},
            ]
        )
        hidden = HiddenInstructors(
            ids=frozenset({"3"}),
            usernames=frozenset({"admin"}),
            names=frozenset({"nobody"}),
        )
        assert [i.full_name for i in normalize_instructors(payload, hidden)] == ["Ana Lopez"]

    def test_denylist_by_name_is_case_insensitive(self):
        payload = team_payload([{"id": 1, "name": "Front Desk"}])
        hidden = HiddenInstructors(names=frozenset({"front desk"}))
        assert normalize_instructors(payload, hidden) == []

    def test_publishable(self):
        base = Instructor(full_name="Ana", image_url="a.jpg", bio="Teaches yin.")
        assert is_publishable_instructor(base)
        assert not is_publishable_instructor(base.model_copy(update={"image_url": None}))
        assert not is_publishable_instructor(base.model_copy(update={"bio": ""}))
        assert not is_publishable_instructor(
            base.model_copy(update={"bio": "Bio coming soon!"})
        )


class TestFormatting:
    """Tests for formatting helpers."""

    def test_money(self):
        assert money_from_cents(7000) == "$70.00"
        assert money_from_cents("12345") == "$123.45"
        assert money_from_cents(None) is None
        assert money_from_cents("abc") is None

    def test_pretty_datetime(self):
        assert format_pretty_datetime("2026-01-05 09:30:00") == "January 5, 2026 • 9:30 am"
        assert format_pretty_datetime("2026-01-05 00:05:00") == "January 5, 2026 • 12:05 am"
        assert format_pretty_datetime("2026-01-05 13:00:00") == "January 5, 2026 • 1:00 pm"
        assert format_pretty_datetime("soon") == "soon"
        assert format_pretty_datetime(None) == ""

    def test_slugify(self):
        assert slugify("Ana María O'Neil") == "ana-mar-a-oneil"
        assert slugify("  ") == ""

    def test_image_without_widths(self):
        assert pick_image_url({"sources": [{"url": "only.jpg"}]}) == "only.jpg"
        assert pick_image_url({}) is None

    def test_image_ignores_non_finite_widths(self):
        image = {
            "sources": [
                {"width": "NaN", "url": "nan.jpg"},
                {"width": "inf", "url": "inf.jpg"},
                {"width": 640, "url": "640.jpg"},
            ]
        }
        assert pick_image_url(image) == "640.jpg"

    def test_image_skips_malformed_sources(self):
        image = {"sources": ["broken", None, {"width": 300, "url": "300.jpg"}]}
        assert pick_image_url(image) == "300.jpg"
        assert pick_image_url({"sources": ["broken"]}) is None


class TestClassesAndServices:
    """Tests for group class and service normalization."""

    def test_keyword_match(self):
        [training, flow] = normalize_group_classes(
            [
                {"id": 1, "title": "200hr", "class_group": {"name": "Teacher Training"}},
                {"id": 2, "title": "Flow", "description": "All levels"},
            ]
        )
        assert training.group_name == "Teacher Training"
        assert matches_keyword(training, "teacher training")
        assert not matches_keyword(flow, "teacher training")

    def test_training_class_ignores_description(self):
        [prep, weekend] = normalize_group_classes(
            [
                {"id": 1, "title": "Vinyasa Flow", "description": "Teacher training prep"},
                {"id": 2, "title": "Teacher Training Weekend"},
            ]
        )
        assert matches_keyword(prep, "teacher training")
        assert not is_training_class(prep, "teacher training")
        assert is_training_class(weekend, "teacher training")
        assert not is_training_class(weekend, "")

    def test_services_with_durations(self):
        data = {
            "items": [
                {"id": 5, "name": "Private", "image_id": 9},
                {"id": 6, "name": "Hidden", "display_on_app": False},
            ],
            "cache": {
                "images": [{"id": 9, "sources": [{"url": "p.jpg", "width": 600}]}],
                "ooo_durations": [
                    {"service_id": 5, "duration": 60, "base_price": 9000},
                    {"service_id": 5, "duration": "90", "base_price": None},
                ],
            },
        }

        [private, hidden] = normalize_services(data)
        assert private.image_url == "p.jpg"
        assert private.price_lines == ["60 min · $90.00", "90 min"]
        assert private.display_on_app
        assert not hidden.display_on_app


class TestUpcoming:
    """Tests for schedule selection."""

    def test_sorted_future_capped(self):
        items = [
            ScheduleItem(id="c", starts_at="2026-01-07 09:00:00"),
            ScheduleItem(id="a", starts_at="2026-01-05 09:00:00"),
            ScheduleItem(id="p", starts_at="2026-01-01 09:00:00", past=True),
            ScheduleItem(id="b", starts_at="2026-01-06 09:00:00"),
        ]
        assert [i.id for i in upcoming(items, 2)] == ["a", "b"]
        assert upcoming(items, 0) == []
