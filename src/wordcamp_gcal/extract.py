"""DOM extraction for WordCamp schedule and session pages.

Each pipeline walks a parsed document, hands the text it finds to
:mod:`wordcamp_gcal.dates`, and inserts one calendar link per session.
Missing or malformed content never raises: the affected block or session
is logged and skipped.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from .dates import (
    ParseError,
    parse_day_heading,
    parse_time_text,
    parse_timestamp,
    resolve_session_end,
    to_utc,
)
from .links import CalendarLink, CalendarLinkRequest, Session, add_calendar_link
from .sites import PageKind, SiteProfile, match_page

logger = logging.getLogger(__name__)

DAY_BLOCK_SELECTOR = ".wordcamp-schedule"
DAY_HEADING_SELECTOR = ".wordcamp-schedule__date"
SESSION_ROW_SELECTOR = ".wordcamp-schedule__session"
SESSION_ROW_TITLE_SELECTOR = ".wordcamp-schedule__session-title"
SESSION_ROW_TIME_SELECTOR = "p"

TITLE_SELECTOR = ".wp-block-post-title"
DATE_CONTAINER_SELECTOR = ".wp-block-wordcamp-session-date"


def _text(el: Tag) -> str:
    return el.get_text(" ", True)  # type: ignore[call-overload]


def annotate_schedule(
    soup: BeautifulSoup,
    page_url: str,
    profile: SiteProfile,
    skip_existing: bool = False,
) -> list[CalendarLink]:
    """Insert a calendar link after the time of every session on a
    schedule page.

    Times on the page are read at the profile's fixed UTC offset and
    linked as UTC.

    :param soup: The parsed schedule page. Modified in place.
    :param page_url: URL of the page, used in the event details.
    :param profile: Conventions of the site.
    :param skip_existing: Skip sessions already followed by a link.
    :returns: The links inserted, in document order.
    """
    inserted: list[CalendarLink] = []

    for block in soup.select(DAY_BLOCK_SELECTOR):
        heading = block.select_one(DAY_HEADING_SELECTOR)
        if heading is None:
            logger.warning("Could not find date element for a daily schedule block. Skipping.")
            continue

        try:
            day = parse_day_heading(_text(heading))
        except ParseError as exc:
            logger.error("Skipping schedule block: %s", exc)
            continue

        for row in block.select(SESSION_ROW_SELECTOR):
            title_el = row.select_one(SESSION_ROW_TITLE_SELECTOR)
            time_el = row.select_one(SESSION_ROW_TIME_SELECTOR)
            if title_el is None or time_el is None:
                continue

            title = _text(title_el)
            try:
                span = parse_time_text(_text(time_el), profile.default_duration)
            except ParseError as exc:
                logger.warning("Skipping session %r: %s", title, exc)
                continue

            offset = profile.utc_offset_minutes
            session = Session(
                title=title,
                start=to_utc(day, span.start_hour, span.start_minute, offset),
                end=to_utc(day, span.end_hour, span.end_minute, offset),
                source_url=page_url,
                location=profile.event_name,
            )
            link = add_calendar_link(
                soup, CalendarLinkRequest(session), time_el, skip_existing
            )
            if link is not None:
                inserted.append(link)

    logger.debug("Inserted %d schedule link(s) on %s", len(inserted), page_url)
    return inserted


def _optional_text(soup: BeautifulSoup, selector: str | None) -> str:
    if selector is None:
        return ""
    el = soup.select_one(selector)
    return _text(el) if el is not None else ""


def annotate_session(
    soup: BeautifulSoup,
    page_url: str,
    profile: SiteProfile,
    skip_existing: bool = False,
) -> list[CalendarLink]:
    """Insert a calendar link after the date of a single session page.

    The ``datetime`` attribute of the ``<time>`` tag is the authoritative
    start. The end comes from an explicit range in the tag's text, read at
    the profile's fixed offset, when the profile allows it and one is
    present. Otherwise it comes from the profile's default duration.

    :param soup: The parsed session page. Modified in place.
    :param page_url: URL of the page, used in the event details.
    :param profile: Conventions of the site.
    :param skip_existing: Skip the page if it already has a link.
    :returns: A list with the inserted link, or an empty list.
    """
    title_el = soup.select_one(TITLE_SELECTOR)
    container = soup.select_one(DATE_CONTAINER_SELECTOR)
    time_el = container.find("time") if container is not None else None

    if title_el is None or container is None or time_el is None:
        logger.warning(
            "Could not find title or date/time element for single session page. Skipping."
        )
        return []

    stamp = time_el.get("datetime")
    if not stamp:
        logger.warning(
            "Could not find datetime attribute on time tag for single session. Skipping."
        )
        return []

    title = _text(title_el)
    try:
        start = parse_timestamp(stamp, profile.utc_offset_minutes)
    except ParseError as exc:
        logger.error("Failed to parse date/time for %r: %s", title, exc)
        return []

    time_text = _text(time_el) if profile.end_from_text else ""
    # Local wall-clock links keep the end on the start's date
    end = resolve_session_end(
        start,
        time_text,
        profile.default_duration,
        offset_minutes=profile.utc_offset_minutes,
        wrap=profile.timezone is not None,
    )

    location = _optional_text(soup, profile.location_selector) or profile.event_name
    speakers = _optional_text(soup, profile.speaker_selector)

    session = Session(
        title=title,
        start=start,
        end=end,
        source_url=page_url,
        location=location,
        speakers=speakers,
    )
    request = CalendarLinkRequest(session, timezone=profile.timezone)
    link = add_calendar_link(soup, request, container, skip_existing)
    return [link] if link is not None else []


def annotate_document(
    soup: BeautifulSoup,
    page_url: str,
    profile: SiteProfile | None = None,
    skip_existing: bool = False,
) -> list[CalendarLink]:
    """Run the pipeline that matches *page_url* over *soup*.

    :param profile: Force a site profile. The page kind is still taken
        from *page_url*, falling back to the schedule pipeline when the
        profile has a schedule page and the document has day blocks.
    :returns: The links inserted. Empty when the URL matches no page.
    """
    if profile is None:
        matched = match_page(page_url)
        if matched is None:
            logger.warning("No site profile matches %s", page_url)
            return []
        profile, kind = matched
    else:
        kind = profile.page_kind(page_url)
        if kind is None:
            if profile.schedule_pattern and soup.select_one(DAY_BLOCK_SELECTOR):
                kind = PageKind.SCHEDULE
            else:
                kind = PageKind.SESSION

    if kind is PageKind.SCHEDULE:
        return annotate_schedule(soup, page_url, profile, skip_existing)
    return annotate_session(soup, page_url, profile, skip_existing)
