"""Two-step login: anonymous session + _csrf token, then credentials."""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from jsbin_export.errors import AuthenticationError
from jsbin_export.fetch.client import FetchClient
from jsbin_export.fetch.endpoints import login_url

logger = logging.getLogger(__name__)

CSRF_RE = re.compile(r'"_csrf" value="([^"]+)')
SESSION_COOKIE_PREFIX = "session"

LOGIN_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "X-Requested-With": "XMLHttpRequest",
}


def get_csrf(html: str) -> Optional[str]:
    """Get the _csrf token embedded in the login form, or None."""
    match = CSRF_RE.search(html)
    if match is None:
        return None
    return match.group(1)


def get_session_cookie(set_cookie_headers: Iterable[str]) -> str:
    """Join the name=value part of every session* cookie with ';'."""
    fragments = (header.split(";")[0] for header in set_cookie_headers)
    return ";".join(
        fragment for fragment in fragments if fragment.startswith(SESSION_COOKIE_PREFIX)
    )


@dataclass(frozen=True)
class AnonymousSession:
    """State handed out by the login page, used once to submit credentials."""

    csrf: Optional[str]
    session_cookie: str


class SessionManager:
    """Performs the login handshake and returns the authenticated cookie."""

    def __init__(self, client: FetchClient):
        self.client = client

    async def fetch_login_page(self) -> AnonymousSession:
        """Fetch the login page and get the anonymous _csrf and session cookies."""
        response = await self.client.get(login_url(self.client.base_url))
        csrf = get_csrf(response.text)
        session_cookie = get_session_cookie(response.headers.get_list("set-cookie"))
        logger.debug(f"Login page fetched (csrf found: {csrf is not None})")
        return AnonymousSession(csrf=csrf, session_cookie=session_cookie)

    async def login(self, anonymous: AnonymousSession, username: str, password: str) -> str:
        """Submit the credentials and return the user's session cookies."""
        if not anonymous.csrf:
            raise AuthenticationError("No _csrf token found on the login page")

        logger.info(f"Logging in as {username}...")
        response = await self.client.post(
            login_url(self.client.base_url),
            data={"username": username, "key": password, "_csrf": anonymous.csrf},
            cookie=anonymous.session_cookie,
            headers=LOGIN_HEADERS,
        )
        session_cookie = get_session_cookie(response.headers.get_list("set-cookie"))
        if session_cookie:
            logger.info("Login successful - session cookie obtained")
        else:
            logger.warning("Login response carried no session cookie")
        return session_cookie

    async def authenticate(self, username: str, password: str) -> str:
        """Run the whole handshake."""
        anonymous = await self.fetch_login_page()
        return await self.login(anonymous, username, password)
