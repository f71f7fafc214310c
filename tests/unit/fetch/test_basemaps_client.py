import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from tiledump.config import BasemapsConfig, ConfigurationError
from tiledump.core.models import TileCoordinate
from tiledump.fetch import BasemapsClient, RequestKind, UpstreamError


class StubResponse:
    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b"",
        reason: str = "OK",
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.reason = reason
        self.headers = headers or {}

    def json(self) -> Any:
        return json.loads(self.content)


class StubSession:
    def __init__(self, responses: Optional[List[Any]] = None) -> None:
        self.responses = list(responses or [])
        self.calls: List[tuple] = []

    def get(self, url: str, timeout: Optional[int] = None) -> StubResponse:
        self.calls.append((url, timeout))
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BASEMAPS_API_KEY", raising=False)


def _client(session: StubSession, **overrides: Any) -> BasemapsClient:
    config = BasemapsConfig(api_key="KEY", **overrides)
    return BasemapsClient(config, session=session)  # type: ignore[arg-type]


def test_missing_api_key_fails_before_any_request() -> None:
    session = StubSession()

    with pytest.raises(ConfigurationError, match="BASEMAPS_API_KEY"):
        BasemapsClient(BasemapsConfig(), session=session)  # type: ignore[arg-type]

    assert session.calls == []


def test_environment_key_takes_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BASEMAPS_API_KEY", "ENVKEY")
    client = _client(StubSession())

    assert client.style_url().endswith("?api=ENVKEY")


def test_urls_follow_service_layout() -> None:
    client = _client(StubSession())

    assert client.tile_url(TileCoordinate(z=12, x=4035, y=2564)) == (
        "https://tiles.basemaps.linz.govt.nz/v1/tiles/topographic/EPSG:3857/12/4035/2564.pbf?api=KEY"
    )
    assert client.style_url() == (
        "https://tiles.basemaps.linz.govt.nz/v1/tiles/topographic/EPSG:3857/style/topographic.json?api=KEY"
    )


def test_fetch_tile_returns_body_and_uses_timeout() -> None:
    session = StubSession([StubResponse(content=b"\x1a\x02pbf")])
    client = _client(session, timeout_seconds=5)

    data = client.fetch_tile(TileCoordinate(z=1, x=1, y=0))

    assert data == b"\x1a\x02pbf"
    assert session.calls == [(client.tile_url(TileCoordinate(z=1, x=1, y=0)), 5)]


def test_fetch_style_decodes_json() -> None:
    style = {"version": 8, "layers": []}
    session = StubSession([StubResponse(content=json.dumps(style).encode())])

    assert _client(session).fetch_style() == style


def test_http_error_is_a_primary_failure_with_redacted_url() -> None:
    session = StubSession([StubResponse(status_code=403, reason="Forbidden")])

    with pytest.raises(UpstreamError) as excinfo:
        _client(session).fetch_style()

    error = excinfo.value
    assert error.kind is RequestKind.PRIMARY
    assert not error.recoverable
    assert error.status == 403
    assert "HTTP status: 403, statusText: Forbidden" in str(error)
    assert "api=***" in error.url
    assert "KEY" not in str(error)


def test_transport_error_is_a_primary_failure() -> None:
    session = StubSession([requests.ConnectionError("boom")])

    with pytest.raises(UpstreamError) as excinfo:
        _client(session).fetch_tile(TileCoordinate(z=0, x=0, y=0))

    assert excinfo.value.kind is RequestKind.PRIMARY
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


@pytest.mark.parametrize("body", [b"not json", b"[1, 2, 3]"])
def test_unusable_style_document_is_rejected(body: bytes) -> None:
    session = StubSession([StubResponse(content=body)])

    with pytest.raises(UpstreamError, match="style|JSON"):
        _client(session).fetch_style()
