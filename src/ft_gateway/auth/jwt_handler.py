"""JWT access-token verification.

Tokens are issued by the external auth service; this backend only verifies
them. HS256 with a shared JWT_SECRET; the user id travels in `sub`.
"""

from jose import JWTError, jwt

from config.settings import settings
from src.ft_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate a bearer token.

    Returns:
        Decoded claims with at minimum {"sub": ...}.

    Raises:
        InvalidCredentialsError: Token invalid, expired, or missing `sub`.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if not payload.get("sub"):
        raise InvalidCredentialsError()
    return payload
