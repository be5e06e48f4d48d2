"""Pytest configuration and shared fixtures."""

from dataclasses import dataclass, field

import httpx
import pytest

FEED_URL = "https://tracker.example.com/rss"
WEBHOOK_URL = "https://discord.example.com/api/webhooks/1/token"


def make_rss(*links: str) -> bytes:
    """Build a minimal RSS document with one item per link."""
    items = "".join(
        f"<item><title>Item {i}</title><link>{link}</link></item>"
        for i, link in enumerate(links)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<rss version=\"2.0\"><channel><title>Test</title>{items}</channel></rss>"
    ).encode()


@dataclass
class FakeHTTP:
    """Routes requests made through httpx.Client to canned responses."""

    routes: dict[str, tuple[int, dict[str, str], bytes]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add(
        self,
        url: str,
        status: int = 200,
        headers: dict[str, str] | None = None,
        content: bytes = b"",
    ) -> None:
        self.routes[url] = (status, headers or {}, content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            raise httpx.ConnectError("connection refused", request=request)
        status, headers, content = route
        return httpx.Response(status, headers=headers, content=content)

    def urls(self, method: str = "GET") -> list[str]:
        return [str(r.url) for r in self.requests if r.method == method]


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHTTP:
    """Replace httpx.Client with a client backed by a FakeHTTP transport."""
    fake = FakeHTTP()
    transport = httpx.MockTransport(fake.handler)
    real_client = httpx.Client

    def client_factory(**kwargs):
        return real_client(transport=transport, **kwargs)

    monkeypatch.setattr(httpx, "Client", client_factory)
    return fake


@pytest.fixture
def sample_rss() -> bytes:
    """A feed with three torrent links."""
    return make_rss(
        "https://tracker.example.com/download/1",
        "https://tracker.example.com/download/2",
        "https://tracker.example.com/files/three.torrent",
    )


@pytest.fixture
def config_data(tmp_path) -> dict:
    """Sample config.yaml contents."""
    return {
        "rss_url": FEED_URL,
        "output_dir": str(tmp_path / "downloads"),
        "discord": {
            "enabled": True,
            "webhook_url": WEBHOOK_URL,
            "username": "feedgrab",
            "avatar_url": "https://example.com/avatar.png",
        },
    }
