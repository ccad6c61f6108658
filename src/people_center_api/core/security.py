"""Citizen credentials: bcrypt password hashes and signed access tokens.

Hashes come from passlib's bcrypt handler; the cost factor follows
``Settings.bcrypt_rounds`` when the caller passes it. Tokens are PyJWT
HS256 by default and carry ``sub`` (citizen id), ``email``, ``role``,
``exp`` and ``type``.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from passlib.context import CryptContext

ACCESS_TOKEN_TYPE = "access"
DEFAULT_TOKEN_MINUTES = 24 * 60

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt hash of ``password``.

    Args:
        password: Plaintext password.
        rounds: Cost factor (4..31); the passlib default applies when None.
    """
    handler = pwd_context if rounds is None else pwd_context.handler("bcrypt").using(rounds=rounds)
    return handler.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    subject: str,
    email: str,
    role: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_minutes: int = DEFAULT_TOKEN_MINUTES,
) -> str:
    """Sign an access token for a citizen.

    Args:
        subject: Citizen id, stored as ``sub``.
        email: Citizen email at issue time.
        role: ``citizen`` or ``admin`` at issue time. Informational only;
            authorization re-reads the role from the database.
        secret_key: Signing key.
        algorithm: JWT algorithm.
        expires_minutes: Lifetime; negative values yield an already
            expired token.
    """
    claims: dict[str, Any] = {
        "sub": subject,
        "email": email,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "exp": datetime.now(UTC) + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(claims, secret_key, algorithm=algorithm)


def decode_token(token: str, secret_key: str, algorithm: str = "HS256") -> dict[str, Any]:
    """Verify signature and expiry and return the claims.

    Raises:
        jwt.ExpiredSignatureError: The token is past ``exp``.
        jwt.InvalidTokenError: Any other signature or format problem.
    """
    return jwt.decode(token, secret_key, algorithms=[algorithm])
