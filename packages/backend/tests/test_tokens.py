"""Token and password primitive tests.

Learn: These are pure functions, so no database or HTTP client is
needed. The API-level behavior (401 vs 403) is in test_auth_api.py.
"""

import time
import uuid
import warnings
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from teamdesk.auth.dependencies import CurrentIdentity
from teamdesk.auth.jwt import TokenError, create_access_token, verify_token
from teamdesk.auth.password import hash_password, verify_password
from teamdesk.config import DEV_JWT_SECRET, settings

CLAIMS = {
    "id": str(uuid.uuid4()),
    "email": "a@x.com",
    "name": "a",
    "role": "user",
    "teamName": "Sales",
    "teamId": str(uuid.uuid4()),
}


def test_token_round_trip_preserves_claims():
    payload = verify_token(create_access_token(CLAIMS))
    for key, value in CLAIMS.items():
        assert payload[key] == value


def test_token_expires_in_thirty_days():
    payload = verify_token(create_access_token(CLAIMS))
    lifetime = payload["exp"] - payload["iat"]
    assert lifetime == int(timedelta(days=30).total_seconds())


def test_default_secret_is_long_enough_for_hs256():
    """No short-key warnings when signing with the development secret."""
    assert len(DEV_JWT_SECRET.encode()) >= 32
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        verify_token(create_access_token(CLAIMS))
    assert not [w for w in caught if "key" in str(w.message).lower()]


def test_expired_token_rejected():
    token = create_access_token(CLAIMS, expires_days=-1)
    with pytest.raises(TokenError, match="expired"):
        verify_token(token)


def test_forged_signature_rejected():
    forged = jwt.encode(
        {**CLAIMS, "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        "not-the-server-secret-not-the-server-secret",
        algorithm="HS256",
    )
    with pytest.raises(TokenError):
        verify_token(forged)


def test_tampered_payload_rejected():
    """Swapping the team claim invalidates the signature."""
    header, payload, signature = create_access_token(CLAIMS).split(".")
    other = jwt.encode(
        {**CLAIMS, "teamName": "Ops", "exp": int(time.time()) + 3600},
        settings.jwt_secret,
        algorithm="HS256",
    ).split(".")[1]
    with pytest.raises(TokenError):
        verify_token(".".join([header, other, signature]))


def test_malformed_token_rejected():
    with pytest.raises(TokenError):
        verify_token("not.a.jwt")


def test_token_without_expiry_rejected():
    token = jwt.encode(CLAIMS, settings.jwt_secret, algorithm="HS256")
    with pytest.raises(TokenError):
        verify_token(token)


def test_identity_from_claims():
    identity = CurrentIdentity.from_claims(CLAIMS)
    assert identity.user_id == CLAIMS["id"]
    assert identity.team_id == uuid.UUID(CLAIMS["teamId"])
    assert identity.has_team
    assert identity.claims() == CLAIMS


def test_identity_without_team_claim():
    claims = {k: v for k, v in CLAIMS.items() if k not in ("teamId", "teamName")}
    identity = CurrentIdentity.from_claims(claims)
    assert not identity.has_team
    assert identity.team_name is None


def test_identity_with_malformed_team_claim():
    with pytest.raises(TokenError):
        CurrentIdentity.from_claims({**CLAIMS, "teamId": "sales"})


# ═══════════════════════════════════════════════════════════
# Passwords
# ═══════════════════════════════════════════════════════════


def test_password_hash_is_salted_bcrypt():
    h1 = hash_password("pw123456")
    h2 = hash_password("pw123456")
    assert h1.startswith("$2")
    assert h1 != h2
    assert "pw123456" not in h1


def test_verify_password():
    h = hash_password("pw123456")
    assert verify_password("pw123456", h)
    assert not verify_password("pw1234567", h)


def test_verify_password_with_garbage_hash():
    assert not verify_password("pw123456", "not-a-bcrypt-hash")
