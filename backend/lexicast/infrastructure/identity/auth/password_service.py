"""Password hashing and verification service."""

from pwdlib import PasswordHash


class PasswordService:
    """
    Argon2 password hashing with an optional application-wide pepper.

    The dummy hash is a real hash of a throwaway value, so verifying against
    it costs as much as verifying a real password.
    """

    def __init__(self, pepper: str = "") -> None:
        self.pepper = pepper
        self.password_hash = PasswordHash.recommended()
        self._dummy_hash = self.password_hash.hash("lexicast-dummy-password" + pepper)

    def hash_password(self, plain_password: str) -> str:
        """Hash a plain password for storage with pepper."""
        return self.password_hash.hash(plain_password + self.pepper)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return self.password_hash.verify(plain_password + self.pepper, hashed_password)

    def get_dummy_hash(self) -> str:
        """Get a dummy hash for timing attack prevention."""
        return self._dummy_hash
