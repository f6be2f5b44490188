"""JWT verification.

Tokens are issued by the marketplace auth service and signed with the shared
HS256 secret; this service never issues them. The acting user's id is read
from the `userId` claim, falling back to `sub` for tokens that carry the id
there directly.
"""

from dataclasses import dataclass

from jose import JWTError, jwt

from config.settings import settings
from src.mp_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str | None = None
    role: str | None = None


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate a JWT access token.

    Raises:
        InvalidCredentialsError: signature invalid, token expired or malformed.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None
    return payload


def user_from_claims(payload: dict[str, str]) -> CurrentUser:
    user_id = payload.get("userId") or payload.get("sub")
    if not user_id:
        raise InvalidCredentialsError()
    email = payload.get("email")
    if email is None and payload.get("userId"):
        # Auth service puts the email in `sub` when `userId` is present
        email = payload.get("sub")
    return CurrentUser(id=str(user_id), email=email, role=payload.get("role"))
