"""Signed claim tokens.

A token is an HS256 JWT carrying ``sub`` (the user id), ``iat`` and ``exp``.
Its validity depends only on the signature and the expiry, so verifying it
needs no database lookup.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Union

from flask_login import UserMixin
from jose import jws, jwt
from jose.exceptions import ExpiredSignatureError, JWSError, JWTError

from arena.errors import Expired, InvalidSignature, Malformed

DEFAULT_TTL = timedelta(days=7)

_TTL_PATTERN = re.compile(r'^\s*(\d+)\s*([smhd]?)\s*$')
_TTL_UNITS = {'': 'seconds', 's': 'seconds', 'm': 'minutes', 'h': 'hours', 'd': 'days'}


def parse_ttl(value: Union[str, int, timedelta, None]) -> timedelta:
    """Turn '7d' / '12h' / '30m' / '45s' / 3600 into a timedelta."""
    if value is None or value == '':
        return DEFAULT_TTL
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _TTL_PATTERN.match(str(value).lower())
    if not match:
        raise ValueError(f'Unrecognised token lifetime: {value!r}')
    amount, unit = match.groups()
    return timedelta(**{_TTL_UNITS[unit]: int(amount)})


class TokenIdentity(UserMixin):
    """The caller a verified bearer token speaks for."""

    def __init__(self, user_id: str):
        self.id = user_id

    def __repr__(self):
        return f'<TokenIdentity {self.id}>'


class JoseTokenSigner:
    """Issue and verify claim tokens with python-jose."""

    def __init__(self, secret: str, algorithm: str = 'HS256', ttl: timedelta = DEFAULT_TTL):
        if not secret:
            raise RuntimeError('Token signing secret is not configured')
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: str, ttl: timedelta = None, now: datetime = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + (self.ttl if ttl is None else ttl)
        claims = {
            'sub': str(user_id),
            'iat': int(issued_at.timestamp()),
            'exp': int(expires_at.timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """Return the token's claims.

        Raises ``InvalidSignature`` when the signature does not match,
        ``Expired`` once ``exp`` has passed and ``Malformed`` when the token
        cannot be parsed, uses another algorithm or lacks ``sub``/``exp``.
        """
        if not isinstance(token, str) or not token:
            raise Malformed('Malformed token')

        # Structure first: anything that parses cleanly but fails jws.verify
        # has a bad signature
        try:
            header = jws.get_unverified_header(token)
            unverified = jwt.get_unverified_claims(token)
        except (JWSError, JWTError):
            raise Malformed('Malformed token')
        if header.get('alg') != self.algorithm:
            raise Malformed('Malformed token')
        if not isinstance(unverified.get('sub'), str) or not unverified['sub'] or 'exp' not in unverified:
            raise Malformed('Malformed token')

        # Signature before expiry, so a tampered token never reports as merely expired
        try:
            jws.verify(token, self.secret, algorithms=[self.algorithm])
        except JWSError:
            raise InvalidSignature('Invalid token signature')

        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise Expired('Token has expired')
        except JWTError:
            raise Malformed('Malformed token')
