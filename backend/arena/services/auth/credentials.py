from flask import current_app

from arena.errors import DuplicateError, InvalidCredentials


class CredentialManager:
    """Registration, login and bearer-token handling.

    Collaborators are injected once at startup: a repository, a password
    hasher (``hash``/``verify``) and a token signer (``issue``/``verify``).
    """

    def __init__(self, repository, hasher, signer):
        self.repository = repository
        self.hasher = hasher
        self.signer = signer

    def register(self, username: str, email: str, password: str) -> dict:
        existing = self.repository.find_user_by_email_or_username(email, username)
        if existing is not None:
            # Email wins when both collide
            field = 'email' if existing.email == email else 'username'
            current_app.logger.info(f"[register-duplicate] field={field}")
            raise DuplicateError(field)

        password_hash = self.hasher.hash(password)
        # The pre-check above can race; create_user maps constraint failures
        try:
            user = self.repository.create_user(username, email, password_hash)
        except DuplicateError as exc:
            current_app.logger.info(f"[register-race] field={exc.field}")
            raise

        current_app.logger.info(f"[register] user={user.id} username={user.username}")
        return {'user': user.to_dict(), 'token': self.issue(user.id)}

    def login(self, email: str, password: str) -> dict:
        user = self.repository.find_user_by_email(email)
        if user is None:
            self.hasher.burn(password)
            current_app.logger.info("[login-failed] reason=credentials")
            raise InvalidCredentials()
        if not self.hasher.verify(password, user.password_hash):
            current_app.logger.info("[login-failed] reason=credentials")
            raise InvalidCredentials()

        current_app.logger.info(f"[login] user={user.id}")
        return {'user': user.to_dict(), 'token': self.issue(user.id)}

    def issue(self, user_id: str) -> str:
        return self.signer.issue(user_id)

    def verify(self, token: str) -> str:
        """Return the user id the token was issued for."""
        return self.signer.verify(token)['sub']
