from typing import Dict, List, Optional, Tuple

import pytest

from core.errors import TransportError
from probers import http_probe

RESPONSE_NS = "http://schemas.microsoft.com/exchange/autodiscover/responseschema/2006"
MOBILESYNC_NS = "http://schemas.microsoft.com/exchange/autodiscover/mobilesync/responseschema/2006"


def autodiscover_response(url: Optional[str] = None, error_code: Optional[str] = None, message: str = "") -> bytes:
    if error_code is not None:
        inner = (
            '<Error Time="10:12:56.2937061" Id="1504144924">'
            f"<ErrorCode>{error_code}</ErrorCode><Message>{message}</Message><DebugData />"
            "</Error>"
        )
    else:
        inner = (
            "<Culture>en:us</Culture>"
            "<User><DisplayName>Alice</DisplayName><EMailAddress>alice@contoso.com</EMailAddress></User>"
            "<Action><Settings><Server>"
            f"<Type>MobileSync</Type><Url>{url}</Url><Name>{url}</Name>"
            "</Server></Settings></Action>"
        )
    doc = (
        '<?xml version="1.0" encoding="utf-8"?>'
        f'<Autodiscover xmlns:xsd="http://www.w3.org/2001/XMLSchema" xmlns="{RESPONSE_NS}">'
        f'<Response xmlns="{MOBILESYNC_NS}">{inner}</Response>'
        "</Autodiscover>"
    )
    return doc.encode("utf-8")


class FakeHTTP:
    """Route table standing in for http_probe.http_post / http_get."""

    def __init__(self, real_post=None, real_get=None):
        self.routes: Dict[Tuple[str, str], object] = {}
        self.calls: List[Dict] = []
        self._real = {"POST": real_post, "GET": real_get}

    def add(self, method: str, url: str, status: int = 200, body: bytes = b"", headers: Optional[Dict] = None):
        self.routes[(method, url)] = (status, {k.lower(): v for k, v in (headers or {}).items()}, body)

    def fail(self, method: str, url: str, exc: Exception):
        self.routes[(method, url)] = exc

    def passthrough(self, method: str, url: str):
        """Send this route through the real transport."""
        self.routes[(method, url)] = self._real[method]

    def _answer(self, method: str, url: str, *args, **kwargs):
        route = self.routes.get((method, url))
        if route is None:
            raise TransportError(f"{method} {url} failed: [Errno 111] Connection refused")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(url, *args, **kwargs)
        status, headers, body = route
        return {"status": status, "reason": "", "headers": headers}, body

    def post(self, url, body, headers, timeout=None):
        self.calls.append({"method": "POST", "url": url, "headers": dict(headers), "body": body, "timeout": timeout})
        return self._answer("POST", url, body, headers, timeout=timeout)

    def get(self, url, timeout=None):
        self.calls.append({"method": "GET", "url": url, "headers": {}, "body": None, "timeout": timeout})
        return self._answer("GET", url, timeout=timeout)

    def urls(self, method: Optional[str] = None) -> List[str]:
        return [c["url"] for c in self.calls if method is None or c["method"] == method]


@pytest.fixture
def fake_http(monkeypatch):
    fake = FakeHTTP(real_post=http_probe.http_post, real_get=http_probe.http_get)
    monkeypatch.setattr(http_probe, "http_post", fake.post)
    monkeypatch.setattr(http_probe, "http_get", fake.get)
    return fake


@pytest.fixture
def make_response():
    return autodiscover_response
