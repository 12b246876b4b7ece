"""Tests for the JSON-backed TokenService."""

from datetime import datetime, timedelta, timezone

from storefront.application.auth import AuthorizationGate
from storefront.domain.model.user import User
from storefront.infrastructure.persistence.json_token_service import JsonTokenService

ALICE = User(id=1, name="Alice", email="alice@example.com")


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 6, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


def test_issue_and_verify(tmp_path):
    service = JsonTokenService(tmp_path / "tokens.json")
    token = service.issue(ALICE)
    assert service.verify(token) == 1
    assert AuthorizationGate(service).authenticate(f"Bearer {token}") == 1


def test_token_not_stored_in_clear(tmp_path):
    path = tmp_path / "tokens.json"
    token = JsonTokenService(path).issue(ALICE)
    assert token not in path.read_text()


def test_unknown_and_malformed_tokens(tmp_path):
    service = JsonTokenService(tmp_path / "tokens.json")
    service.issue(ALICE)
    assert service.verify("nope") is None
    assert service.verify("") is None


def test_expired_token_rejected(tmp_path):
    clock = _Clock()
    service = JsonTokenService(tmp_path / "tokens.json", ttl=timedelta(minutes=5), clock=clock)
    token = service.issue(ALICE)

    clock.now += timedelta(minutes=5)

    assert service.verify(token) is None


def test_tokens_survive_a_new_instance(tmp_path):
    token = JsonTokenService(tmp_path / "tokens.json").issue(ALICE)
    assert JsonTokenService(tmp_path / "tokens.json").verify(token) == 1
