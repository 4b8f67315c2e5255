"""Shared fixtures: test settings, fake upstream APIs, and an API client."""

import json
from collections.abc import Callable
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.dependencies.services import get_frame_service, get_image_renderer, get_resolver
from app.main import app
from app.services.farcaster import UserDataResolver
from app.services.frame import FrameResponseBuilder, FrameService
from app.services.render import SvgRenderer

APP_URL = "https://frame.example"
AIRSTACK_URL = "https://airstack.example/gql"
REGISTRY_URL = "https://fnames.example"

# 2021-01-15T00:00:00Z and 2024-01-15T00:00:00Z
JAN_15_2021 = 1610668800
FIXED_NOW = datetime(2024, 1, 15, tzinfo=timezone.utc)


def social_payload(
    username: str | None = "alice",
    display_name: str | None = "Alice",
    profile_image: str | None = "https://img.example/alice.png",
) -> dict:
    """Airstack GraphQL response with one matching profile."""
    return {
        "data": {
            "Socials": {
                "Social": [
                    {
                        "userId": "500",
                        "profileName": username,
                        "profileDisplayName": display_name,
                        "profileImage": profile_image,
                    }
                ]
            }
        }
    }


class FakeUpstream:
    """Programmable stand-in for the Airstack and fname registry APIs.

    Each side is either a JSON body (served with 200), an ``httpx.Response``,
    or an exception instance to raise from the transport.
    """

    def __init__(self):
        self.social: object = social_payload()
        self.transfers: object = {"transfers": [{"timestamp": JAN_15_2021, "username": "alice"}]}
        self.requests: list[httpx.Request] = []

    def _serve(self, request: httpx.Request, outcome: object) -> httpx.Response:
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return outcome
        return httpx.Response(200, json=outcome)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "airstack.example":
            return self._serve(request, self.social)
        if request.url.host == "fnames.example" and request.url.path == "/transfers":
            return self._serve(request, self.transfers)
        return httpx.Response(404, json={"error": "unknown route"})

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def graphql_variables(self) -> list[dict]:
        return [json.loads(r.content)["variables"] for r in self.calls_to("airstack.example")]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        AIRSTACK_API_KEY="test-key",
        AIRSTACK_API_URL=AIRSTACK_URL,
        FNAME_REGISTRY_URL=REGISTRY_URL,
        APP_URL=APP_URL,
        HTTP_TIMEOUT_SECONDS=2.0,
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def make_resolver(settings: Settings, upstream: FakeUpstream) -> Callable[..., UserDataResolver]:
    """Factory for resolvers talking to the fake upstream."""

    def factory(cache=None, resolver_settings: Settings | None = None) -> UserDataResolver:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
        return UserDataResolver(http_client, resolver_settings or settings, cache=cache)

    return factory


@pytest.fixture
def builder() -> FrameResponseBuilder:
    return FrameResponseBuilder(APP_URL)


@pytest.fixture
def client(settings: Settings, make_resolver, builder: FrameResponseBuilder):
    """API client wired to the fake upstream, a fixed clock and the SVG renderer."""
    resolver = make_resolver()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_resolver] = lambda: resolver
    app.dependency_overrides[get_frame_service] = lambda: FrameService(
        resolver, builder, clock=lambda: FIXED_NOW
    )
    app.dependency_overrides[get_image_renderer] = lambda: SvgRenderer()
    yield TestClient(app)
    app.dependency_overrides.clear()
