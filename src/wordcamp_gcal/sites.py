"""Per-site conventions for the supported WordCamp pages."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class PageKind(enum.Enum):
    """Which pipeline handles a page."""

    SCHEDULE = "schedule"
    SESSION = "session"


@dataclass(frozen=True)
class SiteProfile:
    """Conventions of one WordCamp site.

    :param key: Short identifier, e.g. ``"wceu-2025"``.
    :param event_name: Used as the default calendar location.
    :param schedule_pattern: Regex for the schedule page URL, or ``None``
        if the site's schedule page is not supported.
    :param session_pattern: Regex for session page URLs.
    :param utc_offset_minutes: Fixed offset of the times printed on the
        schedule page, and of naive ``datetime`` attributes.
    :param default_duration: Session length in minutes when the page
        gives no end time.
    :param timezone: IANA zone name. When set, links carry local
        wall-clock times plus ``ctz``; when ``None`` they carry UTC times.
    :param location_selector: CSS selector for the session location on
        session pages, or ``None`` to always use :attr:`event_name`.
    :param speaker_selector: CSS selector for the speaker name on session
        pages, or ``None`` to leave speakers empty.
    :param end_from_text: Read an explicit ``HH:MM - HH:MM`` end from the
        session page's ``<time>`` text. Only valid for sites printing a
        24-hour clock.
    """

    key: str
    event_name: str
    schedule_pattern: str | None
    session_pattern: str
    utc_offset_minutes: int = 0
    default_duration: int = 60
    timezone: str | None = None
    location_selector: str | None = None
    speaker_selector: str | None = None
    end_from_text: bool = True

    def page_kind(self, url: str) -> PageKind | None:
        """Return the kind of page *url* is on this site, if any."""
        if self.schedule_pattern and re.match(self.schedule_pattern, url):
            return PageKind.SCHEDULE
        if re.match(self.session_pattern, url):
            return PageKind.SESSION
        return None


WCEU_2025 = SiteProfile(
    key="wceu-2025",
    event_name="WordCamp Europe 2025",
    schedule_pattern=r"https?://europe\.wordcamp\.org/2025/schedule/?(?:[?#].*)?$",
    session_pattern=r"https?://europe\.wordcamp\.org/2025/session/.+",
    utc_offset_minutes=120,  # CEST
    default_duration=60,
)

WCUS_2025 = SiteProfile(
    key="wcus-2025",
    event_name="WordCamp US 2025",
    schedule_pattern=None,
    session_pattern=r"https?://us\.wordcamp\.org/2025/session/.+",
    utc_offset_minutes=-420,  # PDT
    default_duration=45,
    timezone="America/Los_Angeles",
    location_selector=".taxonomy-wcb_track a",
    speaker_selector=".wp-block-wordcamp-session-speakers__name a",
    end_from_text=False,  # 12-hour clock on the page
)

PROFILES: dict[str, SiteProfile] = {p.key: p for p in (WCEU_2025, WCUS_2025)}
"""All supported sites, keyed by :attr:`SiteProfile.key`."""


def match_page(url: str) -> tuple[SiteProfile, PageKind] | None:
    """Find the site profile and page kind for *url*.

    :returns: ``(profile, kind)`` or ``None`` when no site matches.
    """
    for profile in PROFILES.values():
        kind = profile.page_kind(url)
        if kind is not None:
            return profile, kind
    return None
