"""
Authenticated autodiscover probe against one candidate URL.

A 302 answer is followed by re-posting the same request to Location,
up to max_redirects hops. Anything else is decoded as a response
document.
"""

import logging
from typing import Optional
from urllib.parse import urljoin

from core.codec import decode_response, encode_request
from core.config import settings
from core.errors import TransportError
from core.models import DiscoveryRequest
from probers import http_probe

log = logging.getLogger(__name__)

CONTENT_TYPE = "text/xml; charset=utf-8"


def resolve_location(base: str, location: str) -> str:
    try:
        return urljoin(base, location)
    except ValueError as exc:
        raise TransportError(f"Unsupported URL: {location}") from exc


def probe(
    url: str,
    request: DiscoveryRequest,
    timeout_s: Optional[float] = None,
    max_redirects: Optional[int] = None,
) -> str:
    timeout_s = settings.http_timeout_s if timeout_s is None else timeout_s
    max_redirects = settings.max_redirects if max_redirects is None else max_redirects
    headers = {
        "Content-Type": CONTENT_TYPE,
        "Authorization": http_probe.basic_auth(request.username, request.password),
    }
    body = encode_request(request.email_address)

    hops = 0
    while True:
        meta, data = http_probe.http_post(url, body, headers, timeout=timeout_s)
        if meta["status"] != 302:
            return decode_response(data)

        location = meta["headers"].get("location")
        if not location:
            raise TransportError(f"Redirect from {url} without Location header")
        if hops >= max_redirects:
            log.warning("giving up on %s after %d redirects", url, hops)
            raise TransportError(f"Too many redirects (>{max_redirects}) starting at {url}")
        hops += 1
        url = resolve_location(url, location)
        log.debug("following redirect %d to %s", hops, url)
