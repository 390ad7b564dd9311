"""Credential services: password hashing, claim tokens and the manager tying them together."""

from .credentials import CredentialManager
from .passwords import BcryptPasswordHasher
from .tokens import JoseTokenSigner, TokenIdentity, parse_ttl

__all__ = [
    'BcryptPasswordHasher',
    'CredentialManager',
    'JoseTokenSigner',
    'TokenIdentity',
    'parse_ttl',
]
