"""
Verification vocabulary for compliance scenarios.

Verification callbacks observe the deployed target service from outside:
HTTP GETs against its probe endpoints and raw UDP datagrams to its capture
port. Every mismatch names the spec section the scenario checks.
"""

from __future__ import annotations

import json
import socket
import time
from typing import Any

import httpx

from compose_conformance.core.logging import get_logger
from compose_conformance.harness.catalogue import Scenario
from compose_conformance.harness.config import ComplianceConfig
from compose_conformance.harness.errors import VerificationError


logger = get_logger("harness.verification")


def json_response(content: str) -> dict[str, str]:
    """The envelope every probe endpoint answers with."""
    return {"response": content}


class Verifier:
    """
    Probe the target service and compare observations with expectations.

    Usage:
        with Verifier(config, scenario) as verifier:
            verifier.wait_until_ready()
            verifier.check_response("/ping", "PONG FROM TARGET")
    """

    def __init__(
        self,
        config: ComplianceConfig,
        scenario: Scenario,
        client: httpx.Client | None = None,
    ):
        self.config = config
        self.scenario = scenario
        self.client = client or httpx.Client(
            base_url=config.http_base_url,
            timeout=config.http_timeout,
        )

    def __enter__(self) -> "Verifier":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    @property
    def spec_reference(self) -> str:
        return self.scenario.spec_reference(self.config.spec_url)

    def check(self, expected: Any, actual: Any) -> None:
        """Fail unless the observed value equals the expected one."""
        if expected != actual:
            raise VerificationError(
                f"\n- expected: {expected!r}\n+ actual: {actual!r}\n"
                f"Please refer to: {self.spec_reference}"
            )

    def get_body(self, path: str, **params: str) -> str:
        """GET a path and return the raw body, whatever the status code."""
        try:
            response = self.client.get(path, params=params or None)
        except httpx.RequestError as e:
            raise VerificationError(
                f"Request to {path} failed: {e}\nPlease refer to: {self.spec_reference}"
            ) from e
        logger.debug(f"GET {response.request.url} -> {response.status_code}")
        return response.text

    def get_json(self, path: str, **params: str) -> Any:
        body = self.get_body(path, **params)
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise VerificationError(
                f"Response from {path} is not JSON: {body!r}\n"
                f"Please refer to: {self.spec_reference}"
            ) from e

    def check_response(self, path: str, expected: str, **params: str) -> None:
        """GET a probe endpoint and compare its envelope with ``expected``."""
        self.check(json_response(expected), self.get_json(path, **params))

    def wait_for_response(
        self,
        path: str,
        expected: str,
        timeout: float | None = None,
        poll_interval: float = 0.2,
        **params: str,
    ) -> None:
        """Poll until the endpoint reports ``expected``, then check once more.

        Covers values that become visible asynchronously, such as a datagram
        still in flight when the first read happens.
        """
        timeout = timeout if timeout is not None else self.config.settle_seconds
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            try:
                if self.get_json(path, **params) == json_response(expected):
                    return
            except VerificationError:
                pass
            time.sleep(poll_interval)
        self.check_response(path, expected, **params)

    def wait_until_ready(
        self,
        timeout: float | None = None,
        poll_interval: float = 0.5,
    ) -> None:
        """Wait for the target service to answer its local ping."""
        timeout = timeout if timeout is not None else self.config.ready_timeout
        start = time.monotonic()

        while (time.monotonic() - start) < timeout:
            try:
                response = self.client.get("/ping")
                if response.status_code == 200:
                    return
            except httpx.RequestError:
                pass
            time.sleep(poll_interval)

        raise VerificationError(
            f"Target service at {self.config.http_base_url} not ready after {timeout}s\n"
            f"Please refer to: {self.spec_reference}"
        )

    def send_udp(self, request: str) -> None:
        """Send one capture datagram ``{"request": ...}`` to the UDP port."""
        payload = json.dumps({"request": request}).encode("utf-8")
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.sendto(payload, (self.config.target_host, self.config.udp_port))
        logger.debug(
            f"Sent {len(payload)} byte datagram to "
            f"{self.config.target_host}:{self.config.udp_port}"
        )
