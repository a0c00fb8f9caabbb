"""Scenario 2: Fingerprint Middleware

This module tests RequestFingerprintMiddleware in a FastAPI application:
- Every request gets a fingerprint on request.state
- The fingerprint can be echoed in a response header
- Forwarded client addresses are only used when trusted
"""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from request_helpers.adapters.asgi import RequestFingerprintMiddleware
from request_helpers.config import FingerprintConfig, HelpersConfig

HEADER = "X-Request-Fingerprint"


def make_app(config: HelpersConfig) -> FastAPI:
    test_app = FastAPI()
    test_app.add_middleware(RequestFingerprintMiddleware, config=config)

    @test_app.get("/whoami")
    async def whoami(request: Request):
        return {"fingerprint": request.state.fingerprint}

    @test_app.get("/other")
    async def other(request: Request):
        return {"fingerprint": request.state.fingerprint}

    return test_app


@pytest.fixture
def client() -> TestClient:
    config = HelpersConfig(
        fingerprint=FingerprintConfig(include_ip=True, include_user_agent=True),
        fingerprint_header=HEADER,
    )
    return TestClient(make_app(config))


@pytest.fixture
def trusting_client() -> TestClient:
    config = HelpersConfig(
        trust_forwarded=True,
        fingerprint=FingerprintConfig(include_ip=True, ip_anonymization_bits=8),
        fingerprint_header=HEADER,
    )
    return TestClient(make_app(config))


class TestFingerprintMiddleware:
    def test_fingerprint_on_request_state(self, client: TestClient) -> None:
        response = client.get("/whoami")

        assert response.status_code == 200
        fingerprint = response.json()["fingerprint"]
        assert len(fingerprint) == 64
        assert response.headers[HEADER] == fingerprint

    def test_same_client_same_fingerprint(self, client: TestClient) -> None:
        first = client.get("/whoami", headers={"User-Agent": "agent-a"})
        second = client.get("/other", headers={"User-Agent": "agent-a"})

        assert first.json()["fingerprint"] == second.json()["fingerprint"]

    def test_user_agent_changes_fingerprint(self, client: TestClient) -> None:
        first = client.get("/whoami", headers={"User-Agent": "agent-a"})
        second = client.get("/whoami", headers={"User-Agent": "agent-b"})

        assert first.json()["fingerprint"] != second.json()["fingerprint"]

    def test_forwarded_for_ignored_when_untrusted(self, client: TestClient) -> None:
        first = client.get("/whoami", headers={"X-Forwarded-For": "203.0.113.7"})
        second = client.get("/whoami", headers={"X-Forwarded-For": "198.51.100.1"})

        assert first.json()["fingerprint"] == second.json()["fingerprint"]

    def test_no_header_without_configuration(self) -> None:
        client = TestClient(make_app(HelpersConfig()))
        response = client.get("/whoami")

        assert HEADER not in response.headers
        assert len(response.json()["fingerprint"]) == 64


class TestTrustedForwarding:
    def test_forwarded_for_used_when_trusted(self, trusting_client: TestClient) -> None:
        first = trusting_client.get("/whoami", headers={"X-Forwarded-For": "203.0.113.7"})
        second = trusting_client.get("/whoami", headers={"X-Forwarded-For": "198.51.100.1"})

        assert first.json()["fingerprint"] != second.json()["fingerprint"]

    def test_same_subnet_shares_fingerprint(self, trusting_client: TestClient) -> None:
        first = trusting_client.get("/whoami", headers={"X-Forwarded-For": "203.0.113.7"})
        second = trusting_client.get(
            "/whoami", headers={"X-Forwarded-For": "203.0.113.99, 10.0.0.1"}
        )

        assert first.json()["fingerprint"] == second.json()["fingerprint"]
