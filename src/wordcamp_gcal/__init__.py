"""Adds "Add to Google Calendar" links to WordCamp schedule and session pages.

This package exposes:

* :class:`WordCampGcal` — fetches a page, annotates it and exports ICS.
* :func:`annotate_document` — annotates an already parsed document.
* :class:`Session` — data class for a scraped session.
"""

from .extract import annotate_document, annotate_schedule, annotate_session
from .links import CalendarLink, CalendarLinkRequest, Session
from .sites import PROFILES, WCEU_2025, WCUS_2025, PageKind, SiteProfile, match_page
from .wordcamp_gcal import AnnotatedPage, WordCampGcal

__version__ = "0.4.0"

__all__ = [
    "AnnotatedPage",
    "CalendarLink",
    "CalendarLinkRequest",
    "PROFILES",
    "PageKind",
    "Session",
    "SiteProfile",
    "WCEU_2025",
    "WCUS_2025",
    "WordCampGcal",
    "annotate_document",
    "annotate_schedule",
    "annotate_session",
    "match_page",
]
