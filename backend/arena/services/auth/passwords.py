"""One-way adaptive password hashing backed by Flask-Bcrypt."""


class BcryptPasswordHasher:
    """Hash and check passwords with bcrypt.

    The cost factor comes from the ``BCRYPT_LOG_ROUNDS`` setting the
    ``Bcrypt`` extension was initialised with.
    """

    def __init__(self, bcrypt):
        self.bcrypt = bcrypt
        self._decoy_hash = None

    def hash(self, password: str) -> str:
        return self.bcrypt.generate_password_hash(password).decode('utf-8')

    def verify(self, password: str, digest: str) -> bool:
        if not password or not digest:
            return False
        try:
            return self.bcrypt.check_password_hash(digest, password)
        except ValueError:
            # Stored digest is not a bcrypt hash
            return False

    def burn(self, password: str) -> None:
        """Spend one hash comparison so unknown accounts take as long as known ones."""
        if self._decoy_hash is None:
            self._decoy_hash = self.hash('arena-decoy-password')
        self.verify(password, self._decoy_hash)
