"""Shared fixtures: canned websites served through httpx.MockTransport."""
import httpx
import pytest

from bizquiz.services import scraper_service


@pytest.fixture
def fake_site(monkeypatch):
    """Route every scraper request to a handler instead of the network.

    Usage: ``requests = fake_site(handler)``; the returned list collects the
    httpx.Request objects the scraper sent.
    """
    real_client = httpx.AsyncClient

    def install(handler):
        seen = []

        def recording_handler(request):
            seen.append(request)
            return handler(request)

        def client_factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(recording_handler)
            return real_client(*args, **kwargs)

        monkeypatch.setattr(scraper_service.httpx, "AsyncClient", client_factory)
        return seen

    return install


@pytest.fixture
def serve_html(fake_site):
    def install(html, status_code=200):
        return fake_site(lambda request: httpx.Response(status_code, html=html))

    return install
