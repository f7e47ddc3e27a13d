"""Spotify OAuth authentication handling."""

import enum
import os
import sys
import time
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests
from oauthlib.oauth2 import OAuth2Error
from requests.auth import HTTPBasicAuth
from requests_oauthlib import OAuth2Session

from . import config
from .config import AppCredentials
from .errors import AuthExpiredError, RemoteRequestError
from .logging_config import get_logger
from .token_store import Credential, TokenStore

logger = get_logger(__name__)

# Spotify may grant a subset of the requested scopes, or omit scope on refresh
os.environ.setdefault("OAUTHLIB_RELAX_TOKEN_SCOPE", "1")

# Refresh this many seconds before the access token actually expires
EXPIRY_MARGIN = 60
LOOPBACK_HOSTS = ("127.0.0.1", "localhost")

REAUTHORIZE_HINT = "Delete {path} and run again to re-authorize."

SUCCESS_PAGE = b"""<!DOCTYPE html>
<html>
<head><title>spores</title></head>
<body>
    <h1>Authorization complete</h1>
    <p>You can close this window and return to the terminal.</p>
</body>
</html>"""


class AuthState(enum.Enum):
    """Lifecycle of an AuthSession."""

    UNINITIALIZED = "uninitialized"
    INTERACTIVE = "interactive"
    REFRESHING = "refreshing"
    READY = "ready"
    FAILED = "failed"


def wait_for_callback(redirect_uri: str) -> str:
    """Serve one redirect on the loopback address in `redirect_uri`.

    Args:
        redirect_uri: Registered redirect URI, e.g. http://127.0.0.1:8888/callback

    Returns:
        The full URL the browser was redirected to, including its query string
    """
    parsed = urlparse(redirect_uri)
    path = parsed.path or "/"
    captured = {"url": None}

    class CallbackHandler(BaseHTTPRequestHandler):
        def log_message(self, format, *args):
            pass  # Suppress logs

        def do_GET(self):
            if urlparse(self.path).path != path:
                self.send_response(404)
                self.end_headers()
                return
            captured["url"] = f"{parsed.scheme}://{parsed.netloc}{self.path}"
            self.send_response(200)
            self.send_header("Content-type", "text/html")
            self.end_headers()
            self.wfile.write(SUCCESS_PAGE)

    server = HTTPServer((parsed.hostname, parsed.port), CallbackHandler)
    server.timeout = 1  # 1 second timeout for checking the captured URL
    try:
        while captured["url"] is None:
            server.handle_request()
    finally:
        server.server_close()
    return captured["url"]


def check_token_response(response: requests.Response) -> requests.Response:
    """Reject token endpoint responses that are not OAuth answers.

    OAuth errors come back as JSON with a 4xx status and are left for oauthlib
    to raise. Server errors and non-JSON bodies are service failures.

    Raises:
        RemoteRequestError: If the token endpoint failed
    """
    if response.status_code >= 500 or response.status_code == 429:
        raise RemoteRequestError(
            f"Token endpoint returned HTTP {response.status_code}", response.status_code
        )
    try:
        response.json()
    except ValueError as e:
        raise RemoteRequestError(
            f"Token endpoint returned a non-JSON response (HTTP {response.status_code})",
            response.status_code,
        ) from e
    return response


def _token_session(*args, **kwargs) -> OAuth2Session:
    oauth = OAuth2Session(*args, **kwargs)
    oauth.register_compliance_hook("access_token_response", check_token_response)
    oauth.register_compliance_hook("refresh_token_response", check_token_response)
    return oauth


def prompt_for_callback() -> str:
    """Ask the user to paste the URL they were redirected to."""
    sys.stderr.write("Paste the URL you were redirected to: ")
    sys.stderr.flush()
    try:
        return input().strip()
    except EOFError as e:
        raise AuthExpiredError("No redirect URL was entered; authorization was not completed") from e


class AuthSession:
    """Owns the OAuth grant and hands out an access token that is valid right now."""

    def __init__(
        self,
        app: AppCredentials,
        store: TokenStore,
        scopes: Optional[List[str]] = None,
        open_browser: bool = True,
    ) -> None:
        """Initialize the session.

        Args:
            app: Application credentials
            store: Token cache
            scopes: OAuth scopes to request, defaults to config.SCOPES
            open_browser: Open the authorization URL in a browser
        """
        self.app = app
        self.store = store
        self.scopes = scopes if scopes is not None else config.SCOPES
        self.open_browser = open_browser
        self.state = AuthState.UNINITIALIZED
        self._credential: Optional[Credential] = None

    def credential(self) -> Credential:
        """Return a credential that may be sent immediately.

        Raises:
            AuthExpiredError: If the service rejects the grant
            RemoteRequestError: If the token endpoint cannot be reached
            TokenCacheError: If the token cache cannot be read or written
        """
        if self.state is AuthState.FAILED:
            raise AuthExpiredError(self._reauthorize_message("Authorization failed"))

        if self.state is AuthState.UNINITIALIZED:
            self._credential = self.store.load()
            if self._credential is None:
                self._authorize()
                return self._credential
            self.state = AuthState.READY

        if self._credential.is_expired(EXPIRY_MARGIN):
            self._refresh()
        return self._credential

    def _reauthorize_message(self, reason: str) -> str:
        return f"{reason}. " + REAUTHORIZE_HINT.format(path=self.store.path)

    def _basic_auth(self) -> HTTPBasicAuth:
        return HTTPBasicAuth(self.app.client_id, self.app.client_secret)

    def authorize_url(self, oauth: OAuth2Session) -> Tuple[str, str]:
        """Build the authorization URL and the state value it carries."""
        return oauth.authorization_url(config.AUTHORIZE_URL, show_dialog="false")

    def _authorize(self) -> None:
        """Run the interactive Authorization Code flow."""
        self.state = AuthState.INTERACTIVE
        oauth = _token_session(
            self.app.client_id, redirect_uri=self.app.redirect_uri, scope=self.scopes
        )
        url, state = self.authorize_url(oauth)

        sys.stderr.write(f"Open this URL to authorize spores:\n\n    {url}\n\n")
        sys.stderr.flush()
        if self.open_browser:
            webbrowser.open(url)

        parsed = urlparse(self.app.redirect_uri)
        if parsed.hostname in LOOPBACK_HOSTS and parsed.port:
            logger.info("Waiting for authorization callback on %s", self.app.redirect_uri)
            callback_url = wait_for_callback(self.app.redirect_uri)
        else:
            callback_url = prompt_for_callback()

        code = self._code_from_callback(callback_url, state)
        try:
            token = oauth.fetch_token(
                config.TOKEN_URL,
                code=code,
                auth=self._basic_auth(),
                timeout=config.REQUEST_TIMEOUT,
            )
        except OAuth2Error as e:
            self.state = AuthState.FAILED
            raise AuthExpiredError(
                self._reauthorize_message(f"Authorization was rejected: {e.description or e.error}")
            ) from e
        except RemoteRequestError:
            self.state = AuthState.FAILED
            raise
        except requests.RequestException as e:
            self.state = AuthState.FAILED
            raise RemoteRequestError(f"Token request failed: {e}") from e

        self._credential = self._credential_from_token(token)
        self.store.save(self._credential)
        self.state = AuthState.READY
        logger.info("Authorization complete")

    def _code_from_callback(self, callback_url: str, expected_state: Optional[str]) -> str:
        params = parse_qs(urlparse(callback_url).query)
        if "error" in params:
            self.state = AuthState.FAILED
            raise AuthExpiredError(f"Authorization was denied: {params['error'][0]}")
        if expected_state and params.get("state", [None])[0] != expected_state:
            self.state = AuthState.FAILED
            raise AuthExpiredError("Authorization callback state does not match the request")
        code = params.get("code", [None])[0]
        if not code:
            self.state = AuthState.FAILED
            raise AuthExpiredError("Authorization callback did not include a code")
        return code

    def _refresh(self) -> None:
        """Exchange the refresh token for a new access token."""
        self.state = AuthState.REFRESHING
        old = self._credential
        if not old.refresh_token:
            self.state = AuthState.FAILED
            raise AuthExpiredError(self._reauthorize_message("No refresh token is cached"))

        logger.debug("Access token expired, refreshing")
        oauth = _token_session(self.app.client_id)
        try:
            token = oauth.refresh_token(
                config.TOKEN_URL,
                refresh_token=old.refresh_token,
                auth=self._basic_auth(),
                timeout=config.REQUEST_TIMEOUT,
            )
        except OAuth2Error as e:
            self.state = AuthState.FAILED
            raise AuthExpiredError(
                self._reauthorize_message(f"Token refresh was rejected: {e.description or e.error}")
            ) from e
        except RemoteRequestError:
            self.state = AuthState.FAILED
            raise
        except requests.RequestException as e:
            self.state = AuthState.FAILED
            raise RemoteRequestError(f"Token refresh failed: {e}") from e

        self._credential = self._credential_from_token(token, fallback_refresh=old.refresh_token)
        self.store.save(self._credential)
        self.state = AuthState.READY
        logger.debug("Access token refreshed")

    @staticmethod
    def _credential_from_token(token: dict, fallback_refresh: str = "") -> Credential:
        """Build a Credential from a token endpoint response."""
        expires_at = token.get("expires_at")
        if expires_at is None:
            expires_at = time.time() + float(token.get("expires_in") or 3600)
        scope = token.get("scope") or ""
        if isinstance(scope, (list, tuple)):
            scope = " ".join(scope)
        return Credential(
            access_token=token["access_token"],
            refresh_token=token.get("refresh_token") or fallback_refresh,
            expires_at=float(expires_at),
            token_type=token.get("token_type") or "Bearer",
            scope=scope,
        )
