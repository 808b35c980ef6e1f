"""
tests/test_session_store.py — SessionStore Unit Tests
======================================================
Dual indexing with shared identity, case-insensitive wallet upserts, and
deletion from both indexes.
"""

from __future__ import annotations

import pytest

from nftgate.core.models import WalletRecord
from nftgate.errors import SessionNotFound


def _wallet(address: str, balance: int = 1, staked: tuple[int, ...] = ()) -> WalletRecord:
    return WalletRecord(address=address, nft_balance=balance, staked_token_ids=staked)


class TestCreateSession:
    def test_initial_state(self, store, clock):
        session = store.create_session("alice", "d1")
        assert session.username == "alice"
        assert session.discord_id == "d1"
        assert session.wallets == []
        assert session.created_at == clock.now
        assert session.last_activity == clock.now

    def test_ids_are_unique_128_bit_tokens(self, store):
        ids = {store.create_session("u").id for _ in range(50)}
        assert len(ids) == 50
        assert all(len(i) == 32 for i in ids)

    def test_username_is_percent_decoded(self, store):
        session = store.create_session("alice%20smith%23001")
        assert session.username == "alice smith#001"

    def test_without_discord_id_only_primary_index(self, store):
        session = store.create_session("alice")
        assert store.get_by_id(session.id) is session
        assert store.discord_count == 0
        assert session.is_discord_connected is False

    def test_explicit_session_id_replaces_existing(self, store):
        first = store.create_session("alice", "d1", session_id="abc")
        second = store.create_session("alice2", "d2", session_id="abc")
        assert store.get_by_id("abc") is second
        assert store.get_by_discord_id("d1") is None
        assert store.get_by_discord_id("d2") is second
        assert first is not second
        assert len(store) == 1

    def test_relinking_discord_id_drops_older_session(self, store):
        old = store.create_session("alice", "d1")
        new = store.create_session("alice", "d1")
        assert store.get_by_discord_id("d1") is new
        assert store.get_by_id(old.id) is None
        assert len(store) == 1


class TestSharedIdentity:
    def test_both_indexes_return_same_instance(self, store):
        session = store.create_session("alice", "d1")
        assert store.get_by_id(session.id) is store.get_by_discord_id("d1")

    def test_mutation_visible_through_other_index(self, store):
        session = store.create_session("alice", "d1")
        store.upsert_wallet(store.get_by_id(session.id), _wallet("0xABC"))
        assert len(store.get_by_discord_id("d1").wallets) == 1


class TestLookups:
    def test_missing_ids_return_none(self, store):
        assert store.get_by_id("nope") is None
        assert store.get_by_discord_id("nope") is None


class TestUpsertWallet:
    def test_append_new_addresses_in_order(self, store):
        session = store.create_session("alice", "d1")
        store.upsert_wallet(session, _wallet("0xA"))
        store.upsert_wallet(session, _wallet("0xB"))
        assert [w.address for w in session.wallets] == ["0xA", "0xB"]

    def test_reverify_replaces_in_place_case_insensitive(self, store):
        session = store.create_session("alice", "d1")
        store.upsert_wallet(session, _wallet("0xABC", balance=1))
        store.upsert_wallet(session, _wallet("0xDEF", balance=4))
        store.upsert_wallet(session, _wallet("0xabc", balance=2))

        assert len(session.wallets) == 2
        assert session.wallets[0].address == "0xabc"
        assert session.wallets[0].nft_balance == 2
        assert session.wallets[1].address == "0xDEF"

    def test_upsert_touches_session(self, store, clock):
        session = store.create_session("alice", "d1")
        clock.advance(5_000)
        store.upsert_wallet(session, _wallet("0xA"))
        assert session.last_activity == clock.now

    def test_upsert_on_replaced_session_raises(self, store):
        stale = store.create_session("alice", "d1", session_id="S")
        live = store.create_session("alice", "d1", session_id="S")
        with pytest.raises(SessionNotFound):
            store.upsert_wallet(stale, _wallet("0xA"))
        assert stale.wallets == []
        assert live.wallets == []

    def test_upsert_on_deleted_session_raises(self, store):
        session = store.create_session("alice", "d1")
        store.delete_session(session.id)
        with pytest.raises(SessionNotFound):
            store.upsert_wallet(session, _wallet("0xA"))
        assert session.wallets == []

    def test_touch(self, store, clock):
        session = store.create_session("alice")
        clock.advance(1_000)
        store.touch(session)
        assert session.last_activity == clock.now


class TestDelete:
    def test_delete_removes_both_indexes(self, store):
        session = store.create_session("alice", "d1")
        assert store.delete_session(session.id) is True
        assert store.get_by_id(session.id) is None
        assert store.get_by_discord_id("d1") is None

    def test_delete_missing_returns_false(self, store):
        assert store.delete_session("nope") is False

    def test_expire_respects_recent_activity(self, store, clock):
        session = store.create_session("alice", "d1")
        cutoff = clock.now - 1
        assert store.expire(session.id, cutoff) is False
        assert store.expire(session.id, clock.now + 1) is True
        assert store.get_by_discord_id("d1") is None
