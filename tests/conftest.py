from __future__ import annotations

import gc
import json

import pytest
import requests

from lungscan.frontend.controller import SelectedFile


class FakeResponse:
    def __init__(self, status_code: int = 200, body: object = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._body = body
        self._text = text

    def json(self) -> object:
        if self._text is not None:
            # Same failure path as requests' JSONDecodeError, a ValueError subclass
            return json.loads(self._text)
        return self._body


class FakeSession:
    """Stands in for requests.Session and records every call."""

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response if response is not None else FakeResponse()
        self.error = error
        self.calls: list[dict[str, object]] = []
        self.on_post = None
        self.closed = False

    def post(self, url: str, files: object = None, timeout: object = None) -> FakeResponse:
        self.calls.append({"url": url, "files": files, "timeout": timeout})
        if self.on_post is not None:
            self.on_post()
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _collect_leftover_garbage() -> None:
    # Finalize objects left in reference cycles by earlier tests so they don't
    # fire inside a later test's gc.collect()
    gc.collect()


@pytest.fixture
def png_file() -> SelectedFile:
    return SelectedFile(name="scan.png", mime_type="image/png", content=b"\x89PNG\r\n\x1a\nfake")


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def refused_session() -> FakeSession:
    return FakeSession(error=requests.exceptions.ConnectionError("Connection refused"))


@pytest.fixture
def make_session():
    def _make(status_code: int = 200, body: object = None, text: str | None = None) -> FakeSession:
        return FakeSession(FakeResponse(status_code, body, text))

    return _make
