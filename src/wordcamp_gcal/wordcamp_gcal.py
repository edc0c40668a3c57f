"""WordCampGcal class module.

Provides the :class:`WordCampGcal` facade, which fetches a WordCamp page,
adds "Add to Google Calendar" links to it and optionally exports the
sessions it found as an ICS file.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytz
import requests
from bs4 import BeautifulSoup
from icalendar import Calendar, Event

from .extract import annotate_document
from .links import CalendarLink
from .sites import SiteProfile, match_page

logger = logging.getLogger(__name__)


@dataclass
class AnnotatedPage:
    """A parsed page together with the links inserted into it.

    :param url: The page URL.
    :param profile: The site profile that handled the page.
    :param soup: The modified document.
    :param links: The inserted links, in document order.
    """

    url: str
    profile: SiteProfile
    soup: BeautifulSoup
    links: list[CalendarLink] = field(default_factory=list)

    @property
    def html(self) -> str:
        return str(self.soup)


class WordCampGcal:
    """Adds Google Calendar links to a WordCamp schedule or session page.

    The page is fetched with :mod:`requests` unless its HTML is passed to
    :meth:`annotate`. The site profile is looked up from the URL.

    :param url: The URL of the schedule or session page.
    :param profile: Force a site profile instead of matching *url*.
    :param skip_existing: Do not add a second link where one was already
        inserted.
    :raises ValueError: If *url* matches no supported site and no
        *profile* is given.

    Example usage::

        page = WordCampGcal("https://europe.wordcamp.org/2025/schedule/")
        page.write_html("schedule.html")
        page.write_ics("schedule.ics")
    """

    PRODID = "-//WordCamp Gcal//Sessions//EN"

    def __init__(
        self,
        url: str,
        profile: SiteProfile | None = None,
        skip_existing: bool = False,
    ) -> None:
        if profile is None:
            matched = match_page(url)
            if matched is None:
                raise ValueError(f"Unsupported page URL: {url}")
            profile = matched[0]
        self.url = url
        self.profile = profile
        self.skip_existing = skip_existing
        self._page: AnnotatedPage | None = None

    # noinspection PyMethodMayBeStatic
    def _fetch_html(self, url: str) -> str:
        """Fetch and return the HTML content of a URL.

        :param url: The URL to fetch.
        :returns: The response body as a string.
        :raises requests.HTTPError: If the server returns an error status.
        """
        resp = requests.get(url, timeout=30)
        resp.raise_for_status()
        return resp.text

    def annotate(self, html: str | None = None) -> AnnotatedPage:
        """Parse the page and insert calendar links.

        Every call starts from fresh HTML, so repeated calls do not stack
        links on the same document.

        :param html: Page HTML. Fetched from :attr:`url` when omitted.
        :returns: The annotated page.
        """
        if html is None:
            html = self._fetch_html(self.url)
        soup = BeautifulSoup(html, "html.parser")
        links = annotate_document(soup, self.url, self.profile, self.skip_existing)
        logger.info("Added %d calendar link(s) to %s", len(links), self.url)
        self._page = AnnotatedPage(self.url, self.profile, soup, links)
        return self._page

    @property
    def page(self) -> AnnotatedPage:
        """The last annotated page, annotating on first access."""
        if self._page is None:
            return self.annotate()
        return self._page

    def get_links(self) -> list[CalendarLink]:
        """Return the links inserted into the page.

        :returns: A list of :class:`CalendarLink` in document order.
        """
        return self.page.links

    def get_html(self) -> str:
        """Return the annotated page as HTML."""
        return self.page.html

    def write_html(self, path: str | Path) -> None:
        """Write the annotated page to *path*."""
        Path(path).write_text(self.get_html(), encoding="utf-8")

    def _build_calendar(self) -> Calendar:
        """Build an :class:`icalendar.Calendar` from the linked sessions.

        * Sessions linked in UTC keep their UTC start and end.
        * Sessions linked in local time carry the profile's zone as
          ``TZID``.
        * End times that fall on or before the start time are assumed to
          be past midnight and advanced by one day.

        :returns: A fully populated :class:`icalendar.Calendar`.
        """
        cal = Calendar()
        cal.add("prodid", self.PRODID)
        cal.add("version", "2.0")
        cal.add("x-wr-calname", self.profile.event_name)

        for link in self.get_links():
            session = link.session
            tz_name = link.request.timezone

            if tz_name is None:
                start = session.start.astimezone(timezone.utc)
                end = session.end.astimezone(timezone.utc)
                # Handle end time past midnight
                if end <= start:
                    end += timedelta(days=1)
            else:
                zone = pytz.timezone(tz_name)
                naive_start = session.start.replace(tzinfo=None)
                naive_end = session.end.replace(tzinfo=None)
                if naive_end <= naive_start:
                    naive_end += timedelta(days=1)
                start = zone.localize(naive_start)
                end = zone.localize(naive_end)

            uid_string = f"{session.title}-{start.isoformat()}"
            uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()

            event = Event()
            event.add("uid", f"{uid_hash}@{self.profile.key}")
            event.add("summary", session.title)
            event.add("dtstart", start)
            event.add("dtend", end)
            event.add("dtstamp", datetime.now(timezone.utc))
            event.add("description", link.request.details)
            event.add("location", session.location)
            event.add("url", session.source_url)
            cal.add_component(event)

        return cal

    def get_ics(self) -> str:
        """Return the linked sessions in iCalendar (RFC 5545) format."""
        return self._build_calendar().to_ical().decode("utf-8")

    def write_ics(self, path: str | Path) -> None:
        """Write the ICS data to *path*. Parent directories must exist."""
        Path(path).write_text(self.get_ics(), encoding="utf-8")
