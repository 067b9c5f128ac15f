import logging
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel
from wipshare.core.config import settings
from wipshare.core.errors import IdentityError

logger = logging.getLogger(__name__)

http_bearer = HTTPBearer(auto_error=False)

class Principal(BaseModel):
    # opaque subject id issued by the identity provider (e.g. "user_2f..." or a Firebase uid)
    user_id: str
    email: str | None = None

def _decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            audience=settings.REQUIRED_AUDIENCE,
            options={"verify_aud": settings.REQUIRED_AUDIENCE is not None},
        )
    except JWTError as e:
        logger.warning("Rejected bearer token: %s", e)
        raise IdentityError(f"Invalid token: {e}") from e

async def get_principal(creds: HTTPAuthorizationCredentials | None = Depends(http_bearer)) -> Principal:
    # In local dev, allow missing token and use the dev principal
    if creds is None and settings.ENV == "local":
        return Principal(user_id=settings.DEV_USER_ID)
    if creds is None:
        raise IdentityError("Missing token")

    data = _decode_token(creds.credentials)
    sub = data.get("sub") or data.get("user_id")
    if not sub:
        raise IdentityError("Token has no subject")
    return Principal(user_id=str(sub), email=data.get("email"))
