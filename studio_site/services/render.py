"""HTML fragment templates for the static site pages.

Every interpolated value passes through `escape_html`; the surrounding
markup matches the classes used by the site's stylesheet.
"""
import html
from typing import Any, Iterable, List, Optional

from ..models import GroupClass, Instructor, ScheduleItem, ServiceOffering
from .normalize import format_pretty_datetime

BOOK_HREF = "/book.html#book"

EMPTY_CLASSES = "Nothing to show right now. Please check back soon."
EMPTY_SCHEDULE = "No upcoming classes found right now. Please check back soon."
EMPTY_TRAINING = "No teacher training items found right now. Please check back soon."


def escape_html(value: Any) -> str:
    return html.escape("" if value is None else str(value), quote=True)


def _muted(text: str) -> str:
    return f'<p class="muted" style="margin-top:14px;">{escape_html(text)}</p>'


def _meta_line(primary: str, secondary: str = "") -> str:
    line = escape_html(primary)
    if secondary:
        line += f" · {escape_html(secondary)}"
    return line


def _description(text: str) -> str:
    return f'<p style="margin-top:10px;">{escape_html(text)}</p>' if text else ""


def grid(cards: List[str], classes: str = "grid cols-3", empty: str = EMPTY_CLASSES) -> str:
    """Wrap cards in a grid container, or an empty-state message."""
    if not cards:
        return _muted(empty)
    body = "\n".join(cards)
    return f'<div class="{escape_html(classes)}" style="margin-top:18px;">\n{body}\n</div>'


def instructor_card(instructor: Instructor, detail_href: Optional[str] = None) -> str:
    title = escape_html(instructor.full_name or "Instructor")

    if instructor.image_url:
        img = (
            f'<img class="avatar" src="{escape_html(instructor.image_url)}" '
            f'alt="{title}" loading="lazy" decoding="async" />'
        )
    else:
        img = '<div class="avatar avatar-fallback" aria-hidden="true"></div>'

    if detail_href:
        name = f'<h3><a href="{escape_html(detail_href)}">{title}</a></h3>'
    else:
        name = f"<h3>{title}</h3>"

    if instructor.bio:
        bio = f'<p class="bio">{escape_html(instructor.bio)}</p>'
    else:
        bio = '<p class="bio" style="opacity:.75;">Bio coming soon.</p>'

    return f'<article class="card instructor-card">\n  {img}\n  {name}\n  {bio}\n</article>'


def instructor_detail_page(
    instructor: Instructor,
    back_href: str,
    site_name: str,
    canonical: Optional[str] = None,
) -> str:
    """Standalone instructor page written to instructors/<slug>/index.html."""
    title = escape_html(instructor.full_name or "Instructor")
    bio = escape_html(instructor.bio) or "Bio coming soon."
    back = escape_html(back_href)
    site = escape_html(site_name)

    canonical_tag = (
        f'<link rel="canonical" href="{escape_html(canonical)}"/>' if canonical else ""
    )
    img = (
        f'<img class="avatar avatar-lg" src="{escape_html(instructor.image_url)}" '
        f'alt="{title}" loading="lazy" decoding="async" />'
        if instructor.image_url
        else ""
    )

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>{title} | {site}</title>
  {canonical_tag}
  <link rel="stylesheet" href="/assets/styles.css"/>
</head>
<body>
  <a class="skip-link" href="#main">Skip to content</a>
  <main id="main">
    <section class="page-hero">
      <div class="container">
        <div class="breadcrumb"><a href="/">Home</a> / <a href="{back}">Instructor Team</a> / {title}</div>
        <h1>{title}</h1>
      </div>
    </section>
    <section class="section">
      <div class="container">
        <div class="card instructor-detail">
          {img}
          <div>
            <h2 style="margin-top:0;">About {title}</h2>
            <p style="white-space:pre-wrap;">{bio}</p>
            <p style="margin-top:14px;">
              <a class="btn" href="{back}">&larr; Back to Instructor Team</a>
            </p>
          </div>
        </div>
      </div>
    </section>
  </main>
  <footer class="site-footer">
    <div class="container footer-bottom">
      <div>&copy; <span id="year"></span> {site}</div>
      <div><a href="/privacy.html">Privacy</a> · <a href="/terms.html">Terms</a></div>
    </div>
  </footer>
  <script>document.getElementById("year").textContent = new Date().getFullYear();</script>
</body>
</html>
"""


def schedule_card(item: ScheduleItem) -> str:
    when = format_pretty_datetime(item.starts_at) or "Time TBD"
    href = item.book_url or BOOK_HREF
    return (
        '<article class="card">\n'
        f"  <h3>{escape_html(item.title or 'Class')}</h3>\n"
        f'  <p class="muted" style="margin-top:6px;">{_meta_line(when, item.instructor_name)}</p>\n'
        f"  {_description(item.description)}\n"
        '  <p style="margin-top:14px;">\n'
        f'    <a class="btn btn-primary" href="{escape_html(href)}" target="_blank" rel="noopener">Book</a>\n'
        "  </p>\n"
        "</article>"
    )


def class_type_card(
    group_class: GroupClass, fallback_group: str = "", cta: str = "See Schedule"
) -> str:
    title = group_class.title or "Class"
    return (
        '<article class="card">\n'
        f"  <h3>{escape_html(title)}</h3>\n"
        f'  <p class="muted" style="margin-top:6px;">'
        f"{_meta_line(group_class.group_name or fallback_group, group_class.difficulty)}</p>\n"
        f"  {_description(group_class.description)}\n"
        '  <p style="margin-top:14px;">\n'
        f'    <a class="btn btn-primary" href="{BOOK_HREF}">{escape_html(cta)}</a>\n'
        "  </p>\n"
        "</article>"
    )


def training_card(group_class: GroupClass) -> str:
    return class_type_card(
        group_class, fallback_group="Teacher Training", cta="View Schedule / Book"
    )


def service_card(service: ServiceOffering) -> str:
    name = escape_html(service.name or "Service")
    img = (
        f'<img class="avatar" src="{escape_html(service.image_url)}" alt="{name}" '
        'loading="lazy" decoding="async" />'
        if service.image_url
        else ""
    )
    prices = " / ".join(service.price_lines)
    price_line = (
        f'<p class="muted" style="margin-top:6px;">{escape_html(prices)}</p>' if prices else ""
    )
    return (
        '<article class="card">\n'
        f"  {img}\n"
        f"  <h3>{name}</h3>\n"
        f"  {price_line}\n"
        f"  {_description(service.description)}\n"
        '  <p style="margin-top:14px;">\n'
        f'    <a class="btn btn-primary" href="{BOOK_HREF}">Book</a>\n'
        "  </p>\n"
        "</article>"
    )


def cards_only(cards: Iterable[str], empty: str) -> str:
    """Bare cards for pages whose grid wrapper already surrounds the token."""
    cards = list(cards)
    return "\n".join(cards) if cards else _muted(empty)
