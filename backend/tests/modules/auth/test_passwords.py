import pytest

from modules.auth.passwords import PasswordHasher


class TestPasswordHasher:
    def test_hash_is_not_plaintext(self, hasher):
        password_hash = hasher.hash("Pass1234!")
        assert "Pass1234!" not in password_hash
        assert password_hash.startswith("$argon2id$")

    def test_hash_is_salted(self, hasher):
        assert hasher.hash("Pass1234!") != hasher.hash("Pass1234!")

    def test_verify_round_trip(self, hasher):
        password_hash = hasher.hash("Pass1234!")
        assert hasher.verify("Pass1234!", password_hash) is True
        assert hasher.verify("Pass1234!x", password_hash) is False

    def test_verify_is_case_sensitive(self, hasher):
        password_hash = hasher.hash("Pass1234!")
        assert hasher.verify("pass1234!", password_hash) is False

    def test_verify_garbage_hash_returns_false(self, hasher):
        assert hasher.verify("Pass1234!", "not-a-hash") is False

    def test_blank_password_rejected(self, hasher):
        with pytest.raises(ValueError):
            hasher.hash("")

    def test_dummy_verify_does_not_raise(self, hasher):
        hasher.dummy_verify("anything")
        hasher.dummy_verify("")

    def test_needs_rehash_on_parameter_change(self, hasher):
        password_hash = hasher.hash("Pass1234!")
        assert hasher.needs_rehash(password_hash) is False

        stronger = PasswordHasher(time_cost=2, memory_cost=8, parallelism=1)
        assert stronger.needs_rehash(password_hash) is True
