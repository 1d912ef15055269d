import hashlib
import secrets

from jose import JWTError, jwt
from finance_tracker.config import settings
from finance_tracker.core.exceptions import UnauthorizedException

INVITATION_TOKEN_BYTES = 32


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (user_id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        # Validate expiration (jose checks this automatically)
        exp = payload.get("exp")
        if exp is None:
            raise UnauthorizedException("Token missing expiration")

        # Extract user_id from 'sub' claim
        user_id: str = payload.get("sub")
        if user_id is None:
            raise UnauthorizedException("Token missing user identifier")

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")


def extract_user_id(token: str) -> int:
    """Extract the internal user id from the JWT 'sub' claim"""
    payload = decode_jwt(token)
    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedException("Token user identifier is malformed")


def hash_invitation_token(token: str) -> str:
    """One-way hash stored in place of the plaintext invitation token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_invitation_token() -> tuple[str, str]:
    """
    Generate a new invitation secret.

    Returns:
        Tuple of (plaintext token for the email link, hash to persist)
    """
    token = secrets.token_hex(INVITATION_TOKEN_BYTES)
    return token, hash_invitation_token(token)
