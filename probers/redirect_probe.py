"""
Redirection strategy: ask the plain-HTTP autodiscover host where the
real endpoint lives, then probe that target with credentials.
"""

import logging
from typing import Optional

from core.config import settings
from core.errors import TransportError
from core.models import DiscoveryRequest
from probers import endpoint_prober, http_probe

log = logging.getLogger(__name__)

AUTODISCOVER_PATH = "/autodiscover/autodiscover.xml"


def redirect_url(domain: str) -> str:
    return f"http://autodiscover.{domain}{AUTODISCOVER_PATH}"


def discover_via_redirect(
    request: DiscoveryRequest,
    timeout_s: Optional[float] = None,
    max_redirects: Optional[int] = None,
    domain: Optional[str] = None,
) -> str:
    timeout_s = settings.http_timeout_s if timeout_s is None else timeout_s
    url = redirect_url(domain or request.domain)
    # no credentials here: this hop only has to name the target
    meta, _ = http_probe.http_get(url, timeout=timeout_s)
    if meta["status"] != 302:
        raise TransportError("Not redirect")
    location = meta["headers"].get("location")
    if not location:
        raise TransportError(f"Redirect from {url} without Location header")
    target = endpoint_prober.resolve_location(url, location)
    log.info("autodiscover redirect %s -> %s", url, target)
    return endpoint_prober.probe(target, request, timeout_s=timeout_s, max_redirects=max_redirects)
