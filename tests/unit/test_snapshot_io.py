"""
Module 04 - Snapshot Document & IO Tests
Tests for core/schemas/snapshot.py and core/balances/io.py
"""
import json

import pytest
from pydantic import ValidationError

from core.balances import (
    SnapshotIOError,
    load_balance_input,
    load_snapshot,
    save_balance_input,
    save_snapshot,
)
from core.schemas.snapshot import ClaimRecord, DistributionSnapshot


class TestDocumentShape:

    def test_wire_keys(self, three_account_snapshot):
        doc = three_account_snapshot.to_document()
        assert set(doc) == {"merkleRoot", "tokenTotal", "claims"}
        assert doc["tokenTotal"] == "0x2ee"
        for record in doc["claims"].values():
            assert set(record) == {"index", "amount", "proof"}

    def test_canonical_json_is_compact_and_sorted(self, two_account_snapshot):
        text = two_account_snapshot.to_json()
        assert " " not in text
        assert text.index('"claims"') < text.index('"merkleRoot"') < text.index('"tokenTotal"')

    def test_pretty_json_parses_to_same_document(self, two_account_snapshot):
        pretty = two_account_snapshot.to_json(indent=2)
        assert "\n" in pretty
        assert json.loads(pretty) == json.loads(two_account_snapshot.to_json())

    def test_digest_stable(self, two_account_snapshot):
        copy = DistributionSnapshot.model_validate(two_account_snapshot.to_document())
        assert copy.digest() == two_account_snapshot.digest()

    def test_claim_for_any_casing(self, accounts, two_account_snapshot):
        a = accounts[0]
        assert two_account_snapshot.claim_for(a.lower()) == two_account_snapshot.claims[a]
        assert two_account_snapshot.claim_for(a.upper().replace("0X", "0x")) is not None

    def test_claim_for_unknown(self, accounts, two_account_snapshot):
        assert two_account_snapshot.claim_for(accounts[4]) is None


class TestValidation:

    def test_bad_root(self):
        with pytest.raises(ValidationError):
            DistributionSnapshot(merkleRoot="0x1234", tokenTotal="0x0")

    def test_bad_total(self):
        with pytest.raises(ValidationError):
            DistributionSnapshot(merkleRoot="0x" + "00" * 32, tokenTotal="750")

    def test_bad_proof_element(self):
        with pytest.raises(ValidationError):
            ClaimRecord(index=0, amount="0x1", proof=["0xabcd"])

    def test_extra_field_rejected(self):
        with pytest.raises(ValidationError):
            ClaimRecord(index=0, amount="0x1", proof=[], bonus=True)

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            ClaimRecord(index=-1, amount="0x1")

    def test_hex_normalized_to_lowercase(self):
        record = ClaimRecord(index=0, amount="0x2EE", proof=["0x" + "AB" * 32])
        assert record.amount == "0x2ee"
        assert record.amount_int == 750
        assert record.proof == ["0x" + "ab" * 32]
        assert record.proof_bytes == [bytes([0xAB]) * 32]


class TestSnapshotFiles:

    def test_save_load(self, tmp_path, three_account_snapshot):
        path = save_snapshot(three_account_snapshot, tmp_path / "out" / "snapshot.json")
        assert path.exists()
        assert load_snapshot(path) == three_account_snapshot

    def test_saved_bytes_deterministic(self, tmp_path, three_account_snapshot):
        first = save_snapshot(three_account_snapshot, tmp_path / "a.json").read_bytes()
        second = save_snapshot(three_account_snapshot, tmp_path / "b.json").read_bytes()
        assert first == second

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotIOError, match="not found"):
            load_snapshot(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotIOError, match="Invalid JSON"):
            load_snapshot(path)

    def test_invalid_document(self, tmp_path):
        path = tmp_path / "wrong.json"
        path.write_text(json.dumps({"merkleRoot": "0x00", "tokenTotal": "0x1", "claims": {}}))
        with pytest.raises(SnapshotIOError, match="Invalid snapshot"):
            load_snapshot(path)


class TestBalanceFiles:

    def test_save_load_balances(self, tmp_path, accounts):
        data = {accounts[0]: 1, accounts[1]: 2}
        path = save_balance_input(data, tmp_path / "balances.json")
        assert load_balance_input(path) == data

    def test_scalar_document_rejected(self, tmp_path):
        path = tmp_path / "scalar.json"
        path.write_text("42")
        with pytest.raises(SnapshotIOError, match="object or a list"):
            load_balance_input(path)
