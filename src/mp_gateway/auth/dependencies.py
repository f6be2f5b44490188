"""Bearer-token identity for every /api/v1 route.

    @router.post("")
    async def checkout(current_user: Annotated[CurrentUser, Depends(get_current_user)]):
        await _service.checkout(db, current_user.id)

The user id is resolved here and handed to services as a plain argument;
nothing below the router knows about tokens. There is no user table to
consult: a valid signature with a user id claim is sufficient.
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.mp_common.errors import InvalidCredentialsError
from src.mp_gateway.auth.jwt_handler import CurrentUser, decode_token, user_from_claims

logger = logging.getLogger(__name__)

# Tokens are minted by the auth service; tokenUrl only drives Swagger's Authorize button
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_UNAUTHORIZED = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """401 on a bad signature, an expired token or a token without a user id."""
    try:
        user = user_from_claims(decode_token(token))
    except InvalidCredentialsError:
        logger.debug("Rejected bearer token")
        raise _UNAUTHORIZED from None
    return user
