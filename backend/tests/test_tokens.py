from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from arena.errors import AuthError, Expired, InvalidSignature, Malformed
from arena.services.auth.tokens import JoseTokenSigner, parse_ttl
from conftest import tamper_signature


@pytest.fixture()
def signer():
    return JoseTokenSigner('unit-secret')


def test_issue_and_verify_round_trip(signer):
    token = signer.issue('user-1')
    claims = signer.verify(token)
    assert claims['sub'] == 'user-1'
    assert claims['exp'] - claims['iat'] == int(timedelta(days=7).total_seconds())


def test_flipped_signature_is_invalid_signature(signer):
    token = tamper_signature(signer.issue('user-1'))
    with pytest.raises(InvalidSignature):
        signer.verify(token)


def test_other_secret_is_invalid_signature(signer):
    token = JoseTokenSigner('someone-else').issue('user-1')
    with pytest.raises(InvalidSignature):
        signer.verify(token)


def test_expired_token(signer):
    token = signer.issue('user-1', ttl=timedelta(seconds=-30))
    with pytest.raises(Expired):
        signer.verify(token)


def test_expired_with_bad_signature_reports_signature(signer):
    token = tamper_signature(signer.issue('user-1', ttl=timedelta(seconds=-30)))
    with pytest.raises(InvalidSignature):
        signer.verify(token)


def test_truncated_signature_is_invalid_signature(signer):
    token = signer.issue('user-1')
    with pytest.raises(InvalidSignature):
        signer.verify(token[:-4])


def test_foreign_algorithm_is_malformed(signer):
    exp = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())
    token = jwt.encode({'sub': 'user-1', 'exp': exp}, 'unit-secret', algorithm='HS512')
    with pytest.raises(Malformed):
        signer.verify(token)


def test_non_json_claims_are_malformed(signer):
    header, _, signature = signer.issue('user-1').split('.')
    with pytest.raises(Malformed):
        signer.verify('.'.join([header, 'bm90LWpzb24', signature]))


@pytest.mark.parametrize('token', ['', 'garbage', 'a.b', None, 12345])
def test_unparseable_tokens_are_malformed(signer, token):
    with pytest.raises(Malformed):
        signer.verify(token)


def test_missing_subject_is_malformed(signer):
    exp = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())
    token = jwt.encode({'exp': exp}, 'unit-secret', algorithm='HS256')
    with pytest.raises(Malformed):
        signer.verify(token)


def test_missing_expiry_is_malformed(signer):
    token = jwt.encode({'sub': 'user-1'}, 'unit-secret', algorithm='HS256')
    with pytest.raises(Malformed):
        signer.verify(token)


def test_error_kinds_share_auth_status():
    for kind in (InvalidSignature, Expired, Malformed):
        assert issubclass(kind, AuthError)
        assert kind().status_code == 401
    assert len({InvalidSignature.code, Expired.code, Malformed.code}) == 3


def test_signer_requires_secret():
    with pytest.raises(RuntimeError):
        JoseTokenSigner('')


@pytest.mark.parametrize('raw,expected', [
    ('7d', timedelta(days=7)),
    ('12h', timedelta(hours=12)),
    ('30m', timedelta(minutes=30)),
    ('45s', timedelta(seconds=45)),
    ('3600', timedelta(seconds=3600)),
    (120, timedelta(seconds=120)),
    (None, timedelta(days=7)),
])
def test_parse_ttl(raw, expected):
    assert parse_ttl(raw) == expected


def test_parse_ttl_rejects_nonsense():
    with pytest.raises(ValueError):
        parse_ttl('a week')
