"""
HTTP exchanges for autodiscover probing: one request, no redirect
following, per-exchange timeout. Callers decide what a 302 means.
"""

import base64
import http.client
import logging
import socket
import ssl
from typing import Dict, Optional, Tuple
from urllib.parse import urlsplit

from core.config import settings
from core.errors import TransportError

log = logging.getLogger(__name__)

# autodiscover answers are a few KiB; anything past this is refused
MAX_BODY_BYTES = 1024 * 1024


def basic_auth(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _connection(url: str, timeout: float, verify_tls: bool) -> Tuple[http.client.HTTPConnection, str]:
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise TransportError(f"Unsupported URL: {url}") from exc
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise TransportError(f"Unsupported URL: {url}")
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    if parts.scheme == "https":
        context = ssl.create_default_context() if verify_tls else ssl._create_unverified_context()
        conn = http.client.HTTPSConnection(parts.hostname, port, timeout=timeout, context=context)
    else:
        conn = http.client.HTTPConnection(parts.hostname, port, timeout=timeout)
    return conn, path


def _do_request(
    method: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    body: Optional[bytes] = None,
    timeout: Optional[float] = None,
    verify_tls: Optional[bool] = None,
) -> Tuple[Dict, bytes]:
    timeout = settings.http_timeout_s if timeout is None else timeout
    verify_tls = settings.verify_tls if verify_tls is None else verify_tls
    conn, path = _connection(url, timeout, verify_tls)
    req_headers = {"User-Agent": settings.user_agent}
    req_headers.update(headers or {})
    try:
        conn.request(method, path, body=body, headers=req_headers)
        resp = conn.getresponse()
        data = resp.read(MAX_BODY_BYTES + 1)
        headers_out = {k.lower(): v for k, v in resp.getheaders()}
        status = resp.status
    except socket.timeout as exc:
        raise TransportError(f"{method} {url} timed out after {timeout}s") from exc
    except (OSError, http.client.HTTPException, ValueError) as exc:
        raise TransportError(f"{method} {url} failed: {exc}") from exc
    finally:
        conn.close()
    if len(data) > MAX_BODY_BYTES:
        raise TransportError(f"{method} {url} response body exceeds {MAX_BODY_BYTES} bytes")
    log.debug("%s %s -> %s", method, url, status)
    return {"status": status, "reason": resp.reason, "headers": headers_out}, data


def http_post(url: str, body: bytes, headers: Dict[str, str], timeout: Optional[float] = None) -> Tuple[Dict, bytes]:
    return _do_request("POST", url, headers=headers, body=body, timeout=timeout)


def http_get(url: str, timeout: Optional[float] = None) -> Tuple[Dict, bytes]:
    return _do_request("GET", url, timeout=timeout)
