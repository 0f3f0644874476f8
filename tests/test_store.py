"""Tests for member storage and the producer-side payload helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from qrguard.codec import Codec
from qrguard.errors import NotFoundError
from qrguard.models import Member
from qrguard.payload import build_payload, member_token, qr_filename, render_qr_png
from qrguard.resolver import Resolver
from qrguard.store import InMemoryMemberStore, load_members


def _member(id_number="AB123", full_name="Ana Quispe", **kw) -> Member:
    return Member(id_number=id_number, full_name=full_name, **kw)


class TestInMemoryMemberStore:
    def test_get_missing(self):
        with pytest.raises(NotFoundError) as excinfo:
            InMemoryMemberStore().get_member("AB123")
        assert excinfo.value.id_number == "AB123"

    def test_store_get_delete(self):
        store = InMemoryMemberStore()
        store.store_member(_member())
        assert store.get_member("AB123").full_name == "Ana Quispe"
        assert store.count_members() == 1
        store.delete_member("AB123")
        assert store.count_members() == 0
        with pytest.raises(NotFoundError):
            store.delete_member("AB123")

    def test_replace_keeps_created_at(self):
        store = InMemoryMemberStore()
        original = _member(created_at=datetime(2020, 1, 1, tzinfo=timezone.utc))
        store.store_member(original)
        store.store_member(_member(full_name="Ana Q. Mamani"))
        stored = store.get_member("AB123")
        assert stored.full_name == "Ana Q. Mamani"
        assert stored.created_at == original.created_at

    def test_lookup_is_exact(self):
        store = InMemoryMemberStore()
        store.store_member(_member())
        with pytest.raises(NotFoundError):
            store.get_member("ab123")


class TestLoadMembers:
    def test_seed_file(self, tmp_path):
        path = tmp_path / "members.json"
        path.write_text(json.dumps([
            {"id_number": "A1", "full_name": "One"},
            {"id_number": "A2", "full_name": "Two", "mobile": "555"},
        ]))
        store = InMemoryMemberStore()
        assert load_members(store, path) == 2
        assert store.get_member("A2").mobile == "555"

    def test_seed_file_must_be_array(self, tmp_path):
        path = tmp_path / "members.json"
        path.write_text('{"id_number": "A1"}')
        with pytest.raises(ValueError):
            load_members(InMemoryMemberStore(), path)

    def test_invalid_member_rejected(self, tmp_path):
        path = tmp_path / "members.json"
        path.write_text('[{"id_number": "A1", "full_name": ""}]')
        with pytest.raises(ValidationError):
            load_members(InMemoryMemberStore(), path)


class TestPayload:
    def test_payload_holds_only_id(self):
        assert build_payload("AB123") == '{"id_number":"AB123"}'

    def test_payload_escapes_json(self):
        assert json.loads(build_payload('A"B')) == {"id_number": 'A"B'}

    def test_plain_member_token(self):
        assert member_token(_member(), Codec("")) == '{"id_number":"AB123"}'

    def test_encrypted_member_token_resolves(self):
        token = member_token(_member(), Codec("secret"))
        assert Resolver("secret").resolve(token) == "AB123"

    def test_render_png(self):
        png = render_qr_png('{"id_number":"AB123"}')
        assert png.startswith(b"\x89PNG\r\n\x1a\n")

    def test_filename(self):
        member = _member(full_name="Ana  María\tQuispe")
        assert qr_filename(member) == "Ana_María_Quispe_AB123.png"
