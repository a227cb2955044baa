"""
Password hashing and strength rules.

Hashing goes through passlib's bcrypt scheme; the cost factor comes from
settings so tests can run with a cheap one.
"""
import re
from typing import Any

from passlib.context import CryptContext

from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.settings import settings

logger = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

MIN_PASSWORD_LENGTH = 8

# At least one lowercase letter, one uppercase letter and one digit
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
PASSWORD_RULE_MESSAGE = (
    "Password must contain at least one uppercase letter, "
    "one lowercase letter, and one number"
)
SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False


def validate_password_rules(password: str) -> str:
    """
    Enforce the signup/reset password policy.

    Used as a pydantic field validator body.

    Raises:
        ValueError: If the password is too short or lacks a required
            character class
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not PASSWORD_PATTERN.match(password):
        raise ValueError(PASSWORD_RULE_MESSAGE)
    return password


def check_password_strength(password: str) -> dict[str, Any]:
    """
    Score a password for UI feedback.

    Returns:
        dict with 'score' (0-5), 'strength' (weak/fair/good/strong),
        'checks' (per-rule booleans) and 'is_valid'
    """
    checks = {
        "length": len(password) >= MIN_PASSWORD_LENGTH,
        "lowercase": bool(re.search(r"[a-z]", password)),
        "uppercase": bool(re.search(r"[A-Z]", password)),
        "number": bool(re.search(r"\d", password)),
        "special": bool(SPECIAL_CHARACTERS.search(password)),
    }
    score = sum(checks.values())

    if score >= 4:
        strength = "strong"
    elif score >= 3:
        strength = "good"
    elif score >= 2:
        strength = "fair"
    else:
        strength = "weak"

    return {
        "score": score,
        "strength": strength,
        "checks": checks,
        "is_valid": checks["length"] and checks["lowercase"]
        and checks["uppercase"] and checks["number"],
    }
