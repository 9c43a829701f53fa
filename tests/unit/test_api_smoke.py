"""
Module 08 - API Smoke Tests

Tests for the FastAPI endpoints:
1. GET /health returns ok
2. GET /snapshot summarizes the configured snapshot
3. GET /claims/{account} returns the claim record
4. POST /verify answers valid / invalid, rejects malformed input
5. Missing snapshot configuration returns 503
"""

import pytest
from fastapi.testclient import TestClient

from api.app import app
from core.balances import save_snapshot


# Create test client
client = TestClient(app)


@pytest.fixture
def served_snapshot(tmp_path, monkeypatch, three_account_snapshot):
    path = save_snapshot(three_account_snapshot, tmp_path / "snapshot.json")
    monkeypatch.setenv("DROPLEDGER_SNAPSHOT_PATH", str(path))
    return three_account_snapshot


class TestHealth:

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["service"] == "dropledger-api"
        assert data["snapshot_loaded"] is False

    def test_root(self):
        assert client.get("/").json()["ok"] is True

    def test_health_with_snapshot(self, served_snapshot):
        assert client.get("/health").json()["snapshot_loaded"] is True


class TestSnapshot:

    def test_not_configured(self):
        response = client.get("/snapshot")
        assert response.status_code == 503
        data = response.json()
        assert data["ok"] is False
        assert data["error"]["code"] == "SNAPSHOT_UNAVAILABLE"

    def test_unreadable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DROPLEDGER_SNAPSHOT_PATH", str(tmp_path / "missing.json"))
        assert client.get("/snapshot").status_code == 503

    def test_summary(self, served_snapshot):
        response = client.get("/snapshot")
        assert response.status_code == 200
        data = response.json()
        assert data["merkle_root"] == served_snapshot.merkle_root
        assert data["token_total"] == "0x2ee"
        assert data["claims"] == 3
        assert data["digest"] == served_snapshot.digest()


class TestClaims:

    def test_get_claim(self, served_snapshot, accounts):
        a = accounts[0]
        response = client.get(f"/claims/{a.lower()}")
        assert response.status_code == 200
        data = response.json()
        record = served_snapshot.claims[a]
        assert data["account"] == a
        assert data["index"] == record.index
        assert data["amount"] == "0xc8"
        assert data["proof"] == record.proof
        assert "flags" not in data

    def test_unknown_account(self, served_snapshot, accounts):
        response = client.get(f"/claims/{accounts[4]}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CLAIM_NOT_FOUND"

    def test_malformed_account(self, served_snapshot):
        response = client.get("/claims/0x1234")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BALANCE_VALIDATION_ERROR"


class TestVerify:

    def _body(self, snapshot, account, **overrides):
        record = snapshot.claims[account]
        body = {
            "account": account,
            "index": record.index,
            "amount": record.amount_int,
            "proof": record.proof,
        }
        body.update(overrides)
        return body

    def test_valid(self, served_snapshot, accounts):
        response = client.post("/verify", json=self._body(served_snapshot, accounts[1]))
        assert response.status_code == 200
        data = response.json()
        assert data == {"ok": True, "valid": True, "merkle_root": served_snapshot.merkle_root}

    def test_hex_amount(self, served_snapshot, accounts):
        body = self._body(served_snapshot, accounts[1], amount="0x12c")
        assert client.post("/verify", json=body).json()["valid"] is True

    def test_wrong_amount(self, served_snapshot, accounts):
        body = self._body(served_snapshot, accounts[1], amount=301)
        response = client.post("/verify", json=body)
        assert response.status_code == 200
        assert response.json()["valid"] is False

    def test_wrong_index(self, served_snapshot, accounts):
        record = served_snapshot.claims[accounts[1]]
        body = self._body(served_snapshot, accounts[1], index=(record.index + 1) % 3)
        assert client.post("/verify", json=body).json()["valid"] is False

    def test_malformed_proof(self, served_snapshot, accounts):
        body = self._body(served_snapshot, accounts[1], proof=["0xdead"])
        response = client.post("/verify", json=body)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "PROOF_SHAPE_INVALID"

    def test_negative_index(self, served_snapshot, accounts):
        body = self._body(served_snapshot, accounts[1], index=-1)
        assert client.post("/verify", json=body).status_code == 422
