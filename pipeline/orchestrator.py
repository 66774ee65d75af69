"""
Discovery orchestrator: linear fallback over the autodiscover candidates.

  1. https://<domain>/autodiscover/autodiscover.xml
  2. https://autodiscover.<domain>/autodiscover/autodiscover.xml
  3. http://autodiscover.<domain>/... redirect, then probe its target

The first URL found wins. No state is kept between resolve calls.
"""

import asyncio
import logging
from typing import List, Optional

from core.config import settings
from core.errors import AutodiscoverError
from core.models import DiscoveryRequest, DiscoveryResult
from core.validation import validate_request
from probers import endpoint_prober, redirect_probe

log = logging.getLogger(__name__)


class Orchestrator:
    def __init__(self, timeout_s: Optional[float] = None, max_redirects: Optional[int] = None) -> None:
        self.timeout_s = settings.http_timeout_s if timeout_s is None else timeout_s
        self.max_redirects = settings.max_redirects if max_redirects is None else max_redirects

    @staticmethod
    def candidate_urls(domain: str) -> List[str]:
        path = redirect_probe.AUTODISCOVER_PATH
        return [f"https://{domain}{path}", f"https://autodiscover.{domain}{path}"]

    def _probe(self, url: str, request: DiscoveryRequest) -> str:
        return endpoint_prober.probe(url, request, timeout_s=self.timeout_s, max_redirects=self.max_redirects)

    def _try_secure_urls(self, request: DiscoveryRequest, domain: str, attempts: List[str]) -> str:
        direct, subdomain = self.candidate_urls(domain)
        attempts.append(direct)
        try:
            return self._probe(direct, request)
        except AutodiscoverError as exc:
            # first candidate's error is dropped; only the last attempt is reported
            log.info("secure-direct candidate failed | url=%s | err=%s", direct, exc)

        attempts.append(subdomain)
        return self._probe(subdomain, request)

    def _discover(self, request: DiscoveryRequest, domain: str, attempts: List[str]) -> str:
        try:
            return self._try_secure_urls(request, domain, attempts)
        except AutodiscoverError as exc:
            # protocol errors fall back too: "unknown account" and "unreachable" are not told apart
            log.info("secure candidates failed | domain=%s | err=%s", domain, exc)

        attempts.append(redirect_probe.redirect_url(domain))
        return redirect_probe.discover_via_redirect(
            request, timeout_s=self.timeout_s, max_redirects=self.max_redirects, domain=domain
        )

    def resolve(self, request: DiscoveryRequest) -> DiscoveryResult:
        domain = request.domain
        attempts: List[str] = []
        try:
            url = self._discover(request, domain, attempts)
        except AutodiscoverError as exc:
            log.info("discovery failed | domain=%s | err=%s", domain, exc)
            return DiscoveryResult(
                email_address=request.email_address,
                domain=domain,
                error=str(exc),
                error_type=type(exc).__name__,
                attempts=attempts,
            )
        log.info("resolved endpoint | domain=%s | url=%s", domain, url)
        return DiscoveryResult(email_address=request.email_address, domain=domain, url=url, attempts=attempts)

    def get_ews_url(self, email_address: str, username: str, password: str) -> str:
        """
        Validate the inputs, run discovery and return the endpoint URL.
        Raises ValidationError before any I/O, or the last attempt's error.
        """
        request = validate_request(email_address, username, password)
        return self._discover(request, request.domain, [])


def resolve_endpoint(email_address: str, username: str, password: str) -> str:
    orch = Orchestrator()
    return orch.get_ews_url(email_address, username, password)


async def resolve_endpoint_async(email_address: str, username: str, password: str) -> str:
    return await asyncio.to_thread(resolve_endpoint, email_address, username, password)
