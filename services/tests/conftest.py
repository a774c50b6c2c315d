"""
Top-level test configuration for Rollcall.
"""

import os
from typing import Any

import pytest

# Ensure test-friendly defaults before rollcall.config builds its settings
os.environ.setdefault("ROLLCALL_JSON_LOGS", "false")
os.environ.setdefault("ROLLCALL_LOG_LEVEL", "DEBUG")
os.environ.setdefault("ROLLCALL_CONFIG_FILE", "/nonexistent/rollcall.yaml")

from rollcall.auth.tokens import ServiceToken  # noqa: E402


class CountingTokenIssuer:
    """Hands out token-1, token-2, ... so tests can see one token per call."""

    def __init__(self) -> None:
        self.calls = 0

    async def get_token(self) -> ServiceToken:
        self.calls += 1
        return ServiceToken(token=f"token-{self.calls}")


@pytest.fixture
def token_issuer() -> CountingTokenIssuer:
    return CountingTokenIssuer()


@pytest.fixture
def make_entity():
    """Factory for catalog entity dicts in the shape the catalog API returns."""

    def _make(
        kind: str,
        name: str,
        namespace: str = "default",
        annotations: dict[str, str] | None = None,
        member_of: list[str] | tuple[str, ...] = (),
        spec: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return {
            "apiVersion": "backstage.io/v1alpha1",
            "kind": kind,
            "metadata": {
                "name": name,
                "namespace": namespace,
                "annotations": annotations or {},
            },
            "spec": spec or {},
            "relations": [{"type": "memberOf", "targetRef": ref} for ref in member_of],
        }

    return _make
