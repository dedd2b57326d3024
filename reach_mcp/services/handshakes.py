"""Protocol handshakes used as the primary readiness signal.

A handshake is an async callable ``(host, port, timeout) -> detail`` that
returns an optional detail string on success and raises on failure.
"""

import logging
import re
from collections.abc import Awaitable, Callable

import asyncssh
import httpx

logger = logging.getLogger(__name__)

Handshake = Callable[[str, int, float], Awaitable[str | None]]

WINRM_HTTP_PORT = 5985
WINRM_HTTPS_PORT = 5986
SSH_PORT = 22

IDENTIFY_ENVELOPE = (
    '<s:Envelope xmlns:s="http://www.w3.org/2003/05/soap-envelope" '
    'xmlns:wsmid="http://schemas.dmtf.org/wbem/wsman/identity/1/wsmanidentity.xsd">'
    "<s:Header/><s:Body><wsmid:Identify/></s:Body></s:Envelope>"
)

_VENDOR_RE = re.compile(r"<(?:\w+:)?ProductVendor>([^<]*)<")
_VERSION_RE = re.compile(r"<(?:\w+:)?ProductVersion>([^<]*)<")


class HandshakeError(Exception):
    """Protocol handshake did not succeed."""


def _url_host(host: str) -> str:
    """Bracket IPv6 literals for use in a URL."""
    if ":" in host and not host.startswith("["):
        return f"[{host}]"
    return host


class WinRMIdentify:
    """WS-Management Identify request, as sent by Test-WSMan.

    Without credentials the request is anonymous, which WinRM answers
    without authentication. With credentials it is sent using Basic auth.
    """

    def __init__(
        self,
        https: bool = False,
        verify_tls: bool = False,
        credentials: tuple[str, str] | None = None,
        path: str = "/wsman",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the handshake.

        Args:
            https: Use HTTPS instead of plain HTTP.
            verify_tls: Verify the server certificate when using HTTPS.
            credentials: Optional (username, password) for Basic auth.
            path: WS-Management endpoint path.
            transport: Optional httpx transport, mainly for tests.
        """
        self.https = https
        self.verify_tls = verify_tls
        self.credentials = credentials
        self.path = path
        self._transport = transport

    def url(self, host: str, port: int) -> str:
        """Build the endpoint URL for host:port."""
        scheme = "https" if self.https else "http"
        return f"{scheme}://{_url_host(host)}:{port}{self.path}"

    async def __call__(self, host: str, port: int, timeout: float) -> str | None:
        """Send Identify and return "<vendor> <version>" on success."""
        url = self.url(host, port)
        headers = {"Content-Type": "application/soap+xml;charset=UTF-8"}
        auth: httpx.Auth | None = None
        if self.credentials:
            auth = httpx.BasicAuth(*self.credentials)
        else:
            headers["WSMANIDENTIFY"] = "unauthenticated"

        logger.debug("WinRM Identify -> %s", url)
        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                verify=self.verify_tls,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    url,
                    content=IDENTIFY_ENVELOPE,
                    headers=headers,
                    auth=auth,
                )
        except httpx.TimeoutException as e:
            raise HandshakeError("timed out") from e
        except httpx.HTTPError as e:
            raise HandshakeError(str(e) or type(e).__name__) from e

        if response.status_code != 200:
            raise HandshakeError(f"HTTP {response.status_code} from {url}")

        body = response.text
        if "IdentifyResponse" not in body:
            raise HandshakeError("response is not a WS-Management IdentifyResponse")

        parts = []
        for pattern in (_VENDOR_RE, _VERSION_RE):
            match = pattern.search(body)
            if match and match.group(1).strip():
                parts.append(match.group(1).strip())
        return " ".join(parts) or None


async def ssh_host_key(host: str, port: int, timeout: float) -> str | None:
    """Complete SSH key exchange with host and return the key fingerprint.

    No authentication is attempted. The timeout is enforced by the caller.
    """
    try:
        key = await asyncssh.get_server_host_key(host, port)
    except (asyncssh.Error, OSError) as e:
        raise HandshakeError(str(e) or type(e).__name__) from e

    if key is None:
        raise HandshakeError("server presented no host key")
    return key.get_fingerprint()
