"""Tests for credential stores."""

import os
import stat
import sys

import pytest

from src.core.credential_store import FileCredentialStore, MemoryCredentialStore


class TestMemoryCredentialStore:

    def test_starts_signed_out(self):
        store = MemoryCredentialStore()
        assert store.get_token() is None
        assert not store.is_authenticated

    def test_set_and_clear(self):
        store = MemoryCredentialStore()
        store.set_token("abc")
        assert store.is_authenticated
        store.set_token(None)
        assert store.get_token() is None


class TestFileCredentialStore:

    def test_missing_file_is_no_token(self, tmp_dir):
        assert FileCredentialStore(tmp_dir / "token").get_token() is None

    def test_round_trip_strips_whitespace(self, tmp_dir):
        path = tmp_dir / "config" / "token"
        store = FileCredentialStore(path)
        store.set_token("abc123")
        path.write_text("abc123\n", encoding="utf-8")
        assert store.get_token() == "abc123"

    def test_blank_file_is_no_token(self, tmp_dir):
        path = tmp_dir / "token"
        path.write_text("   \n", encoding="utf-8")
        assert FileCredentialStore(path).get_token() is None

    def test_clear_removes_file(self, tmp_dir):
        path = tmp_dir / "token"
        store = FileCredentialStore(path)
        store.set_token("abc")
        store.set_token(None)
        assert not path.exists()
        store.set_token(None)

    @pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions")
    def test_file_is_owner_only(self, tmp_dir):
        path = tmp_dir / "token"
        FileCredentialStore(path).set_token("abc")
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
