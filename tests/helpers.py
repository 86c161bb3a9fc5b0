"""Test helpers shared across modules: key constants and a recording transport handler."""

import json

import httpx


API_KEY = "api-key-123"
SIGNATURE_KEY = "sig-key-456"


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays one reply."""

    def __init__(self, status_code: int = 200, payload=None, content: bytes | None = None, exc=None) -> None:
        self.status_code = status_code
        self.payload = payload
        self.content = content
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc(f"{self.exc.__name__} raised by mock", request=request)
        if self.payload is not None:
            return httpx.Response(self.status_code, content=json.dumps(self.payload).encode("utf-8"))
        return httpx.Response(self.status_code, content=self.content or b"")

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]
