"""Tests for calendar URL building and link insertion."""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

import pytest
from bs4 import BeautifulSoup

from wordcamp_gcal.links import (
    CALENDAR_URL,
    LINK_TEXT,
    MARKER_ATTR,
    CalendarLinkRequest,
    Session,
    add_calendar_link,
    build_calendar_url,
    compose_details,
    format_local,
    format_utc,
    insert_link_after,
    render_link,
)

PAGE_URL = "https://us.wordcamp.org/2025/session/scaling-wordpress/"


@pytest.fixture()
def utc_session():
    return Session(
        title="Contributor Day Kickoff",
        start=datetime(2025, 6, 4, 8, 0, tzinfo=timezone.utc),
        end=datetime(2025, 6, 4, 8, 45, tzinfo=timezone.utc),
        source_url="https://europe.wordcamp.org/2025/schedule/",
        location="WordCamp Europe 2025",
    )


@pytest.fixture()
def local_session():
    pdt = timezone(timedelta(hours=-7))
    return Session(
        title="Q&A: Blocks, Themes & 100% Fun?",
        start=datetime(2025, 8, 27, 10, 0, tzinfo=pdt),
        end=datetime(2025, 8, 27, 10, 45, tzinfo=pdt),
        source_url=PAGE_URL,
        location="Ballroom A / Level 2",
        speakers="Jane Doe",
    )


def _query(url):
    return parse_qs(urlsplit(url).query)


def test_format_utc_converts_offset():
    cest = timezone(timedelta(hours=2))
    assert format_utc(datetime(2025, 6, 6, 10, 0, tzinfo=cest)) == "20250606T080000Z"


def test_format_utc_naive_is_utc():
    assert format_utc(datetime(2025, 6, 6, 10, 0, 5)) == "20250606T100005Z"


def test_format_local_keeps_wall_clock():
    pdt = timezone(timedelta(hours=-7))
    assert format_local(datetime(2025, 8, 27, 10, 0, tzinfo=pdt)) == "20250827T100000"


def test_details_without_speaker():
    assert compose_details(PAGE_URL) == f"More info: {PAGE_URL}"


def test_details_with_speaker():
    assert compose_details(PAGE_URL, "Jane Doe") == (
        f"Presented by: Jane Doe\n\nMore info: {PAGE_URL}"
    )


def test_utc_url(utc_session):
    url = build_calendar_url(CalendarLinkRequest(utc_session))
    assert url.startswith(CALENDAR_URL + "?action=TEMPLATE&")
    assert "&dates=20250604T080000Z/20250604T084500Z&" in url
    assert "ctz=" not in url
    q = _query(url)
    assert q["action"] == ["TEMPLATE"]
    assert q["text"] == ["Contributor Day Kickoff"]
    assert q["details"] == ["More info: https://europe.wordcamp.org/2025/schedule/"]
    assert q["location"] == ["WordCamp Europe 2025"]


def test_local_url(local_session):
    request = CalendarLinkRequest(local_session, timezone="America/Los_Angeles")
    url = build_calendar_url(request)
    assert "&dates=20250827T100000/20250827T104500&" in url
    assert "&ctz=America%2FLos_Angeles&" in url
    assert _query(url)["ctz"] == ["America/Los_Angeles"]


def test_query_values_round_trip(local_session):
    """Decoding text, details and location recovers the original strings."""
    request = CalendarLinkRequest(local_session, timezone="America/Los_Angeles")
    q = _query(build_calendar_url(request))
    assert q["text"] == [local_session.title]
    assert q["details"] == [compose_details(PAGE_URL, "Jane Doe")]
    assert q["location"] == [local_session.location]


def test_values_are_percent_encoded(local_session):
    url = build_calendar_url(CalendarLinkRequest(local_session))
    assert "text=Q%26A%3A%20Blocks%2C%20Themes%20%26%20100%25%20Fun%3F&" in url
    assert "%0A%0A" in url


def test_request_is_immutable(utc_session):
    request = CalendarLinkRequest(utc_session)
    with pytest.raises(AttributeError):
        request.timezone = "Europe/Madrid"


def test_render_link():
    soup = BeautifulSoup("", "html.parser")
    link = render_link(soup, "https://example.test/?a=1&b=2")
    assert link.name == "a"
    assert link["href"] == "https://example.test/?a=1&b=2"
    assert link["target"] == "_blank"
    assert link.get_text() == LINK_TEXT
    assert "background-color: #4285F4" in link["style"]
    assert "#357ae8" in link["onmouseover"]
    assert "translateY(0)" in link["onmouseout"]
    assert link.has_attr(MARKER_ATTR)


def test_insert_link_after_places_next_sibling():
    soup = BeautifulSoup("<div><p>time</p><span>after</span></div>", "html.parser")
    p = soup.p
    assert insert_link_after(p, render_link(soup, "https://example.test/"))
    assert p.find_next_sibling().name == "a"
    assert soup.a.find_next_sibling().name == "span"


def test_insert_without_parent_is_a_no_op(caplog):
    soup = BeautifulSoup("<p>time</p>", "html.parser")
    detached = soup.p.extract()
    with caplog.at_level("ERROR"):
        assert insert_link_after(detached, render_link(soup, "https://example.test/")) is False
    assert "no parent" in caplog.text
    assert soup.find("a") is None


def test_add_calendar_link_duplicates_by_default(utc_session):
    soup = BeautifulSoup("<div><p>10:00</p></div>", "html.parser")
    request = CalendarLinkRequest(utc_session)
    add_calendar_link(soup, request, soup.p)
    add_calendar_link(soup, request, soup.p)
    assert len(soup.find_all("a")) == 2


def test_add_calendar_link_skip_existing(utc_session):
    soup = BeautifulSoup("<div><p>10:00</p></div>", "html.parser")
    request = CalendarLinkRequest(utc_session)
    first = add_calendar_link(soup, request, soup.p, skip_existing=True)
    second = add_calendar_link(soup, request, soup.p, skip_existing=True)
    assert first is not None
    assert first.session is utc_session
    assert second is None
    assert len(soup.find_all("a")) == 1
