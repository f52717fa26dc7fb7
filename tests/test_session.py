"""Tests for the login handshake."""
import asyncio
from urllib.parse import parse_qs

import pytest

from fakes import AUTH_COOKIE, BASE_URL, FakeJSBin
from jsbin_export.auth.session import (
    AnonymousSession,
    SessionManager,
    get_csrf,
    get_session_cookie,
)
from jsbin_export.errors import AuthenticationError
from jsbin_export.fetch.client import FetchClient


def test_get_csrf():
    """Test token extraction from the login form."""
    html = '<input type="hidden" name="_csrf" value="abc123">'
    assert get_csrf(html) == "abc123"


def test_get_csrf_missing():
    """Test a page without token."""
    assert get_csrf("<html><body>No form here</body></html>") is None


def test_get_csrf_empty_value():
    """Test that an empty value is not a token."""
    assert get_csrf('name="_csrf" value=""') is None


def test_get_session_cookie():
    """Test that only session cookies are kept."""
    cookies = ["session=xyz; Path=/", "other=1; Path=/"]
    assert get_session_cookie(cookies) == "session=xyz"


def test_get_session_cookie_joins_all_session_cookies():
    """Test that every session* cookie is joined with ';'."""
    cookies = ["session=xyz; Path=/; HttpOnly", "_ga=1", "session.sig=abc; Path=/"]
    assert get_session_cookie(cookies) == "session=xyz;session.sig=abc"


def test_get_session_cookie_none_found():
    """Test that no session cookie gives an empty string."""
    assert get_session_cookie(["other=1; Path=/"]) == ""
    assert get_session_cookie([]) == ""


async def _authenticate(service, username="alice", password="s3cret&pw"):
    async with FetchClient(BASE_URL, transport=service.transport) as client:
        return await SessionManager(client).authenticate(username, password)


def test_authenticate_returns_user_cookie():
    """Test the two-step login end to end."""
    service = FakeJSBin()
    assert asyncio.run(_authenticate(service)) == AUTH_COOKIE
    assert [(m, p) for _, m, p in service.events] == [("GET", "/login"), ("POST", "/login")]


def test_login_request_shape():
    """Test the POST body, AJAX headers and anonymous cookie."""
    service = FakeJSBin()
    asyncio.run(_authenticate(service))

    post = service.post_requests()[0]
    assert post.headers["content-type"] == "application/x-www-form-urlencoded; charset=UTF-8"
    assert post.headers["x-requested-with"] == "XMLHttpRequest"
    assert post.headers["cookie"] == "session=anon;session.sig=anonsig"
    body = post.content.decode()
    assert body.startswith("username=alice&key=")
    assert parse_qs(body) == {"username": ["alice"], "key": ["s3cret&pw"], "_csrf": ["tok123"]}


def test_login_page_request_has_no_cookie():
    """Test that the first request is anonymous."""
    service = FakeJSBin()
    asyncio.run(_authenticate(service))
    assert "cookie" not in service.requests[0].headers


def test_missing_csrf_fails_before_post():
    """Test fail-fast on a login page without token."""
    service = FakeJSBin(login_page="<html>Maintenance</html>")
    with pytest.raises(AuthenticationError):
        asyncio.run(_authenticate(service))
    assert service.post_requests() == []


def test_login_requires_csrf():
    """Test login() directly with an anonymous session lacking a token."""

    async def run():
        async with FetchClient(BASE_URL, transport=FakeJSBin().transport) as client:
            await SessionManager(client).login(AnonymousSession(None, "session=anon"), "a", "b")

    with pytest.raises(AuthenticationError):
        asyncio.run(run())
