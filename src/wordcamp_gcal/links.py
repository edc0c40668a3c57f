"""Google Calendar link construction and insertion.

Provides the :class:`Session` and :class:`CalendarLinkRequest` data
classes, URL building, and the helpers that render and insert the
"Add to Google Calendar" anchor into a parsed document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import quote

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

CALENDAR_URL = "https://calendar.google.com/calendar/render"
"""Google Calendar event template endpoint."""

LINK_TEXT = "Add to Google Calendar"

MARKER_ATTR = "data-gcal-link"
"""Attribute set on every inserted anchor."""

LINK_STYLE = (
    "display: block; margin-top: 10px; padding: 8px 15px; "
    "background-color: #4285F4; color: #ffffff; text-decoration: none; "
    "border-radius: 5px; font-size: 0.9em; text-align: center; "
    "font-weight: bold; "
    "transition: background-color 0.3s ease, transform 0.1s ease; "
    "box-shadow: 0 2px 4px rgba(0,0,0,0.2); max-width: 250px; "
    "margin-right: auto; margin-left: auto;"
)

HOVER_ON = "this.style.backgroundColor='#357ae8';this.style.transform='translateY(-1px)';"
HOVER_OFF = "this.style.backgroundColor='#4285F4';this.style.transform='translateY(0)';"

# Characters encodeURIComponent leaves alone
_SAFE = "-_.!~*'()"


@dataclass
class Session:
    """A single session scraped from a page.

    :param title: Session title.
    :param start: Start of the session.
    :param end: End of the session.
    :param source_url: URL of the page the session was found on.
    :param location: Room or track name, empty if unknown.
    :param speakers: Speaker name(s), empty if unknown.
    """

    title: str
    start: datetime
    end: datetime
    source_url: str
    location: str = ""
    speakers: str = ""


@dataclass(frozen=True)
class CalendarLinkRequest:
    """A session together with the time encoding used in its link.

    :param session: The session to link.
    :param timezone: IANA zone name for local wall-clock encoding, or
        ``None`` for absolute UTC times.
    """

    session: Session
    timezone: str | None = None

    @property
    def dates(self) -> str:
        """The ``dates`` query value, ``START/END``."""
        if self.timezone is None:
            fmt = format_utc
        else:
            fmt = format_local
        return f"{fmt(self.session.start)}/{fmt(self.session.end)}"

    @property
    def details(self) -> str:
        return compose_details(self.session.source_url, self.session.speakers)


@dataclass
class CalendarLink:
    """Record of one link inserted into a document."""

    request: CalendarLinkRequest
    url: str
    tag: Tag

    @property
    def session(self) -> Session:
        return self.request.session


def format_utc(dt: datetime) -> str:
    """Format *dt* as ``YYYYMMDDTHHMMSSZ``. Naive values are taken as UTC."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y%m%dT%H%M%SZ")


def format_local(dt: datetime) -> str:
    """Format the wall-clock time of *dt* as ``YYYYMMDDTHHMMSS``."""
    return dt.strftime("%Y%m%dT%H%M%S")


def compose_details(page_url: str, speakers: str = "") -> str:
    """Build the free-text event description.

    With a speaker the text reads ``"Presented by: <name>"``, a blank
    line, then ``"More info: <page URL>"``; without one only the last line
    is present.
    """
    details = ""
    if speakers:
        details += f"Presented by: {speakers}\n\n"
    return details + f"More info: {page_url}"


def _encode(value: str) -> str:
    return quote(value, safe=_SAFE)


def build_calendar_url(request: CalendarLinkRequest) -> str:
    """Build the Google Calendar template URL for *request*.

    All free-text values are percent-encoded the way
    ``encodeURIComponent`` does it, so that decoding the query string
    returns them unchanged.
    """
    session = request.session
    parts = [
        "action=TEMPLATE",
        f"text={_encode(session.title)}",
        f"dates={request.dates}",
    ]
    if request.timezone is not None:
        parts.append(f"ctz={_encode(request.timezone)}")
    parts.append(f"details={_encode(request.details)}")
    parts.append(f"location={_encode(session.location)}")
    return f"{CALENDAR_URL}?" + "&".join(parts)


def render_link(soup: BeautifulSoup, url: str) -> Tag:
    """Create the styled anchor tag for *url* in *soup*."""
    link = soup.new_tag(
        "a",
        attrs={
            "href": url,
            "target": "_blank",
            "rel": "noopener",
            "style": LINK_STYLE,
            "onmouseover": HOVER_ON,
            "onmouseout": HOVER_OFF,
            MARKER_ATTR: "1",
        },
    )
    link.string = LINK_TEXT
    return link


def has_link_after(target: Tag) -> bool:
    """Return ``True`` if *target* is already followed by an inserted link."""
    sibling = target.find_next_sibling()
    return sibling is not None and sibling.name == "a" and sibling.has_attr(MARKER_ATTR)


def insert_link_after(target: Tag, link: Tag) -> bool:
    """Insert *link* as the next sibling of *target*.

    :returns: ``False`` (and logs an error) if *target* has no parent, in
        which case the document is left untouched.
    """
    if target.parent is None:
        logger.error(
            "Could not append calendar link: target <%s> has no parent", target.name
        )
        return False
    target.insert_after(link)
    return True


def add_calendar_link(
    soup: BeautifulSoup,
    request: CalendarLinkRequest,
    target: Tag,
    skip_existing: bool = False,
) -> CalendarLink | None:
    """Render a link for *request* and insert it after *target*.

    :param skip_existing: Do nothing when *target* is already followed by
        a link inserted earlier.
    :returns: The inserted :class:`CalendarLink`, or ``None`` when nothing
        was inserted.
    """
    if skip_existing and has_link_after(target):
        logger.debug("Calendar link already present for %r", request.session.title)
        return None

    url = build_calendar_url(request)
    link = render_link(soup, url)
    if not insert_link_after(target, link):
        return None
    return CalendarLink(request=request, url=url, tag=link)
