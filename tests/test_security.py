"""
Tests for password hashing.
"""

from laptopshop.security import dummy_password_hash, hash_password, verify_password


class TestPasswordHashing:
    """Test password hashing and verification."""

    def test_hash_password_returns_string(self):
        """Test that hash_password returns a string."""
        result = hash_password("mypassword")
        assert isinstance(result, str)
        assert len(result) > 0

    def test_hash_password_different_from_original(self):
        """Test that hashed password differs from original."""
        assert hash_password("mypassword") != "mypassword"

    def test_hash_password_different_salts(self):
        """Test that same password produces different hashes (different salts)."""
        assert hash_password("mypassword") != hash_password("mypassword")

    def test_hash_password_bcrypt_format(self):
        """Test that hash is in bcrypt format with the configured cost."""
        hashed = hash_password("mypassword")
        assert hashed.startswith("$2b$04$")

    def test_explicit_rounds(self):
        """Test overriding the cost factor."""
        assert hash_password("mypassword", rounds=5).startswith("$2b$05$")

    def test_verify_password_correct(self):
        """Test verification with correct password."""
        hashed = hash_password("correctpassword")
        assert verify_password("correctpassword", hashed) is True

    def test_verify_password_incorrect(self):
        """Test verification with incorrect password."""
        hashed = hash_password("correctpassword")
        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_malformed_hash(self):
        """Test that a stored value that is not a bcrypt hash never matches."""
        assert verify_password("secret", "secret") is False

    def test_unicode_password(self):
        """Test non-ASCII passwords."""
        hashed = hash_password("pässwörd")
        assert verify_password("pässwörd", hashed) is True
        assert verify_password("passwort", hashed) is False

    def test_dummy_hash_is_stable(self):
        """Test that the unknown-user hash is computed once."""
        assert dummy_password_hash() == dummy_password_hash()
        assert verify_password("anything", dummy_password_hash()) is False
