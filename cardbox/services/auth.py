"""
Access tokens and password hashing.

Tokens are signed JWTs whose only application claim is `uid`, the id of the
identity they were issued to. Verification is stateless: a token is valid
while its signature checks out and it has not expired.
"""

import logging
import re
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from cardbox.config import settings
from cardbox.models.failure import InvalidArgumentError, UnauthenticatedError

logger = logging.getLogger(__name__)

UID_CLAIM = "uid"

# Duration units and their aliases, in milliseconds
_UNITS: tuple[tuple[float, tuple[str, ...]], ...] = (
    (1, ("ms", "msec", "msecs", "millisecond", "milliseconds")),
    (1000, ("s", "sec", "secs", "second", "seconds")),
    (60 * 1000, ("m", "min", "mins", "minute", "minutes")),
    (60 * 60 * 1000, ("h", "hr", "hrs", "hour", "hours")),
    (24 * 60 * 60 * 1000, ("d", "day", "days")),
    (7 * 24 * 60 * 60 * 1000, ("w", "week", "weeks")),
    (365.25 * 24 * 60 * 60 * 1000, ("y", "yr", "yrs", "year", "years")),
)

_UNIT_MS = {alias: ms for ms, aliases in _UNITS for alias in aliases}

_DURATION_PATTERN = re.compile(r"^\s*(-?\d*\.?\d+)\s*([a-z]*)\s*$", re.IGNORECASE)


def parse_expiry(value: str | int) -> timedelta:
    """
    Parse a token lifetime.

    An int is a number of seconds. A string is a number followed by an
    optional unit ("10h", "7d", "2 days"); without a unit the number is
    read as milliseconds.

    Raises:
        InvalidArgumentError: If the value cannot be parsed
    """
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid expiry: {value!r}")
    if isinstance(value, int | float):
        return timedelta(seconds=value)
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Invalid expiry: {value!r}")

    match = _DURATION_PATTERN.match(value)
    if not match:
        raise InvalidArgumentError(f"Invalid expiry: {value!r}")

    amount = float(match.group(1))
    unit = match.group(2).lower() or "ms"
    if unit not in _UNIT_MS:
        raise InvalidArgumentError(f"Unknown expiry unit: {unit!r}")

    return timedelta(milliseconds=amount * _UNIT_MS[unit])


def generate_access_token(user_id: str, expires_in: str | int | None = None) -> str:
    """
    Issue a signed access token for the given identity.

    Args:
        user_id: Id stored in the `uid` claim
        expires_in: Lifetime as accepted by parse_expiry(). None, 0 or an
            empty string fall back to `settings.access_token_expiry`

    Raises:
        InvalidArgumentError: If user_id is empty or the expiry is invalid
    """
    if not user_id:
        raise InvalidArgumentError("user_id is required")

    lifetime = parse_expiry(expires_in or settings.access_token_expiry)
    issued_at = datetime.now(UTC)
    payload = {
        UID_CLAIM: str(user_id),
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(payload, settings.jwt_signing_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """
    Verify a token and return the identity id it was issued to.

    Raises:
        UnauthenticatedError: Bad signature, expired, or no `uid` claim
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_signing_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", UID_CLAIM]},
        )
    except jwt.ExpiredSignatureError as e:
        raise UnauthenticatedError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise UnauthenticatedError("Invalid token", detail=type(e).__name__) from e

    uid = payload[UID_CLAIM]
    if not isinstance(uid, str) or not uid:
        raise UnauthenticatedError("Invalid token", detail="uid claim must be a string")
    return uid


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    """Check a password against a bcrypt hash. A missing hash never matches."""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False
