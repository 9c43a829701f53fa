"""
Module 04 - Balance Map Unit Tests
Tests for core/balances/balance_map.py and core/balances/parsing.py

Required tests:
1. Snapshot consistency - total equals the sum, every proof verifies
2. Index assignment by checksummed account order
3. Idempotent re-derivation
4. add / update / remove semantics and atomicity
5. Input validation (zero address, duplicates, zero amounts)
6. Record-list input with flags
"""
import pytest

from core.balances import BalanceMap, derive_flags, parse_balance_input, parse_balance_map
from core.config.runtime import BuilderConfig, DEFAULT_FLAG_REASONS
from core.merkle import EMPTY_TREE_ROOT, BalanceTree
from eth_utils import to_checksum_address

from core.schemas import ZERO_ADDRESS, BalanceValidationException, UINT256_MAX, address_sort_key
from fixtures.common import make_accounts


def assert_consistent(snapshot):
    """Σ amounts == total and every claim verifies against the root."""
    assert sum(r.amount_int for r in snapshot.claims.values()) == snapshot.total_int
    indices = sorted(r.index for r in snapshot.claims.values())
    assert indices == list(range(len(snapshot.claims)))
    for account, record in snapshot.claims.items():
        assert BalanceTree.verify_proof(
            record.index, account, record.amount_int, record.proof, snapshot.merkle_root
        ), account


class TestSnapshot:

    def test_two_accounts(self, accounts):
        a, b = accounts[:2]
        snapshot = BalanceMap({a: 100, b: 101}).snapshot

        assert snapshot.token_total == "0xc9"
        assert set(snapshot.claims) == {a, b}
        assert_consistent(snapshot)

    def test_three_accounts_total(self, three_account_snapshot):
        assert three_account_snapshot.token_total == "0x2ee"
        assert_consistent(three_account_snapshot)

    def test_amounts_are_minimal_hex(self, accounts):
        snapshot = BalanceMap({accounts[0]: 200}).snapshot
        assert snapshot.claims[accounts[0]].amount == "0xc8"

    def test_single_account(self, accounts):
        snapshot = BalanceMap({accounts[0]: 5}).snapshot
        record = snapshot.claims[accounts[0]]
        assert record.index == 0
        assert record.proof == []
        assert_consistent(snapshot)

    @pytest.mark.parametrize("n", [4, 7, 16, 33])
    def test_many_accounts(self, n):
        accts = make_accounts(n, offset=100)
        snapshot = BalanceMap({a: i + 1 for i, a in enumerate(accts)}).snapshot
        assert snapshot.total_int == n * (n + 1) // 2
        assert_consistent(snapshot)

    def test_empty_map(self):
        snapshot = BalanceMap({}).snapshot
        assert snapshot.claims == {}
        assert snapshot.token_total == "0x0"
        assert snapshot.root_bytes == EMPTY_TREE_ROOT

    def test_claims_keyed_by_checksummed_account(self, accounts):
        snapshot = BalanceMap({accounts[0].lower(): 1}).snapshot
        assert list(snapshot.claims) == [accounts[0]]


class TestIndexAssignment:

    def test_indices_follow_checksummed_order(self, accounts):
        snapshot = BalanceMap({a.lower(): 10 for a in accounts}).snapshot
        ordered = sorted(accounts)
        for expected_index, account in enumerate(ordered):
            assert snapshot.claims[account].index == expected_index

    def test_uppercase_digits_sort_first(self):
        # 0x1a00.. checksums with a lowercase "a", 0x1b00.. with an uppercase "B"
        low = to_checksum_address("0x1a" + "0" * 38)
        high = to_checksum_address("0x1b" + "0" * 38)
        assert (low[3], high[3]) == ("a", "B")
        snapshot = BalanceMap({low: 1, high: 1}).snapshot
        assert snapshot.claims[high].index == 0
        assert snapshot.claims[low].index == 1

    def test_matches_string_sort_over_many_accounts(self):
        many = make_accounts(40)
        snapshot = BalanceMap({a: 1 for a in many}).snapshot
        assert list(snapshot.claims) == sorted(many)

    def test_input_order_irrelevant(self, accounts):
        forward = BalanceMap({a: 10 + i for i, a in enumerate(accounts)}).snapshot
        backward = BalanceMap(
            {a: 10 + i for i, a in reversed(list(enumerate(accounts)))}
        ).snapshot
        assert forward == backward


class TestDeterminism:

    def test_rebuild_identical(self, accounts):
        bm = BalanceMap({a: 7 * (i + 1) for i, a in enumerate(accounts)})
        assert bm.rebuild() == bm.snapshot
        assert bm.rebuild().to_json() == bm.snapshot.to_json()

    def test_rederive_from_balances(self, accounts):
        bm = BalanceMap({a: 3 for a in accounts})
        assert BalanceMap(bm.balances).snapshot.merkle_root == bm.snapshot.merkle_root

    def test_parse_balance_map(self, accounts):
        balances = {accounts[0]: 1, accounts[1]: 2}
        assert parse_balance_map(balances) == BalanceMap(balances).snapshot


class TestValidation:

    def test_zero_address(self, accounts):
        with pytest.raises(BalanceValidationException, match="Invalid node"):
            BalanceMap({ZERO_ADDRESS: 1, accounts[0]: 1})

    def test_unprefixed_zero_address(self, accounts):
        with pytest.raises(BalanceValidationException, match="Invalid node"):
            BalanceMap({"0" * 40: 5, accounts[0]: 1})

    def test_bad_checksum_rejected(self):
        # "C" at position 10 lowered, the rest still mixed-case
        with pytest.raises(BalanceValidationException, match="checksum"):
            BalanceMap({"0x70997970c51812dc3A010C7d01b50e0d17dc79C8": 1})

    def test_invalid_address(self):
        with pytest.raises(BalanceValidationException, match="Found invalid address"):
            BalanceMap({"0xnothex": 1})

    def test_duplicate_with_different_casing(self, accounts):
        a = accounts[0]
        with pytest.raises(BalanceValidationException, match="Duplicate address"):
            BalanceMap({a: 1, a.lower(): 2})

    def test_zero_amount(self, accounts):
        with pytest.raises(BalanceValidationException, match="Invalid amount"):
            BalanceMap({accounts[0]: 0})

    def test_negative_amount(self, accounts):
        with pytest.raises(BalanceValidationException):
            BalanceMap({accounts[0]: -5})

    def test_float_amount(self, accounts):
        with pytest.raises(BalanceValidationException, match="Invalid amount"):
            BalanceMap({accounts[0]: 1.5})

    def test_total_overflow(self, accounts):
        with pytest.raises(BalanceValidationException, match="uint256"):
            BalanceMap({accounts[0]: UINT256_MAX, accounts[1]: 1})

    def test_string_amounts(self, accounts):
        snapshot = BalanceMap({accounts[0]: "100", accounts[1]: "0x65"}).snapshot
        assert snapshot.total_int == 201

    def test_non_ascii_digits_rejected(self, accounts):
        with pytest.raises(BalanceValidationException, match="Invalid amount"):
            BalanceMap({accounts[0]: "\u0663"})


class TestAdd:

    def test_add_new_account(self, accounts):
        a, b, c = accounts[:3]
        bm = BalanceMap({a: 100, b: 101})
        snapshot = bm.add({c: 102})

        assert snapshot is bm.snapshot
        assert len(snapshot.claims) == 3
        assert snapshot.total_int == 303
        assert_consistent(snapshot)

    def test_add_increments_existing(self, accounts):
        a, b = accounts[:2]
        bm = BalanceMap({a: 100, b: 101})
        bm.add({a: 50})
        assert bm.amount_of(a) == 150
        assert bm.snapshot.total_int == 251

    def test_add_then_remove_restores_root(self, accounts):
        a, b, c = accounts[:3]
        bm = BalanceMap({a: 100, b: 101})
        original = bm.snapshot.merkle_root

        bm.add({c: 102})
        assert bm.snapshot.merkle_root != original
        bm.remove([c])
        assert bm.snapshot.merkle_root == original

    def test_add_zero_delta_rejected(self, accounts):
        bm = BalanceMap({accounts[0]: 1})
        with pytest.raises(BalanceValidationException):
            bm.add({accounts[1]: 0})

    def test_add_overflow_rejected(self, accounts):
        bm = BalanceMap({accounts[0]: UINT256_MAX - 1})
        with pytest.raises(BalanceValidationException, match="overflow"):
            bm.add({accounts[0]: 2})

    def test_add_unprefixed_zero_address_rejected(self, accounts):
        bm = BalanceMap({accounts[0]: 1})
        before = bm.snapshot
        with pytest.raises(BalanceValidationException, match="Invalid node"):
            bm.add({"0" * 40: 5})
        assert bm.snapshot == before
        assert ZERO_ADDRESS not in bm

    def test_add_is_atomic(self, accounts):
        a, b, c = accounts[:3]
        bm = BalanceMap({a: 100})
        before = bm.snapshot

        with pytest.raises(BalanceValidationException):
            bm.add({b: 5, ZERO_ADDRESS: 1, c: 7})

        assert bm.snapshot == before
        assert bm.balances == {a: 100}


class TestUpdate:

    def test_update_existing(self, accounts):
        a, b = accounts[:2]
        bm = BalanceMap({a: 100, b: 101})
        bm.update({a: 1})
        assert bm.amount_of(a) == 1
        assert bm.snapshot.total_int == 102
        assert_consistent(bm.snapshot)

    def test_update_absent_rejected(self, accounts):
        bm = BalanceMap({accounts[0]: 1})
        with pytest.raises(BalanceValidationException, match="No exist node"):
            bm.update({accounts[1]: 5})

    def test_update_is_atomic(self, accounts):
        a, b = accounts[:2]
        bm = BalanceMap({a: 100, b: 101})
        before = bm.snapshot
        with pytest.raises(BalanceValidationException):
            bm.update({a: 5, accounts[2]: 9})
        assert bm.snapshot == before
        assert bm.amount_of(a) == 100


class TestRemove:

    def test_remove(self, accounts):
        a, b, c = accounts[:3]
        bm = BalanceMap({a: 1, b: 2, c: 3})
        bm.remove([b])
        assert b not in bm
        assert len(bm) == 2
        assert_consistent(bm.snapshot)

    def test_remove_skips_absent_and_malformed(self, accounts):
        a, b = accounts[:2]
        bm = BalanceMap({a: 1, b: 2})
        bm.remove(["not-an-address", accounts[4], a.lower()])
        assert bm.balances == {b: 2}

    def test_remove_all(self, accounts):
        a = accounts[0]
        bm = BalanceMap({a: 1})
        bm.remove([a])
        assert bm.snapshot.claims == {}
        assert bm.snapshot.root_bytes == EMPTY_TREE_ROOT

    def test_remove_reassigns_indices(self, accounts):
        bm = BalanceMap({a: 1 for a in accounts})
        ordered = sorted(accounts, key=address_sort_key)
        bm.remove([ordered[0]])
        assert bm.snapshot.claims[ordered[1]].index == 0


class TestRecordInput:

    def test_record_list_with_flags(self, accounts):
        a, b = accounts[:2]
        rows = [
            {"address": a, "earnings": "0x64", "reasons": "socks,lp"},
            {"address": b, "earnings": 5, "reasons": ""},
        ]
        snapshot = BalanceMap(rows).snapshot

        assert snapshot.claims[a].flags == {"isSOCKS": True, "isLP": True, "isUser": False}
        assert snapshot.claims[b].flags is None
        assert "flags" not in snapshot.to_document()["claims"][b]

    def test_custom_flag_reasons(self, accounts):
        rows = [{"address": accounts[0], "earnings": 1, "reasons": "early"}]
        config = BuilderConfig(flag_reasons={"isEarly": "early"})
        snapshot = BalanceMap(rows, config=config).snapshot
        assert snapshot.claims[accounts[0]].flags == {"isEarly": True}

    def test_row_missing_earnings(self, accounts):
        with pytest.raises(BalanceValidationException, match="earnings"):
            BalanceMap([{"address": accounts[0]}])

    def test_to_input_round_trip(self, accounts):
        a, b = accounts[:2]
        rows = [
            {"address": a, "earnings": 10, "reasons": "user"},
            {"address": b, "earnings": 20},
        ]
        bm = BalanceMap(rows)
        assert BalanceMap(bm.to_input()).snapshot == bm.snapshot

    def test_to_input_plain_mapping(self, accounts):
        a, b = accounts[:2]
        bm = BalanceMap({a: 10, b: 20})
        assert bm.to_input() == {a: 10, b: 20}

    def test_parse_rejects_scalar(self):
        with pytest.raises(BalanceValidationException, match="Invalid JSON"):
            parse_balance_input(42)

    def test_derive_flags(self):
        assert derive_flags("", DEFAULT_FLAG_REASONS) is None
        assert derive_flags("user", DEFAULT_FLAG_REASONS) == {
            "isSOCKS": False,
            "isLP": False,
            "isUser": True,
        }
