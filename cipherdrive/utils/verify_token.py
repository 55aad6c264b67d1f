from typing import Optional
from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from cipherdrive.core.exceptions import UnauthorizedError
from cipherdrive.utils.jwt_verification import decode_token

security = HTTPBearer(auto_error=False)

async def verify_token(authorization_credentials: Optional[HTTPAuthorizationCredentials] = Security(security)):
    """Verify the bearer JWT and return its claims"""
    if authorization_credentials is None:
        raise UnauthorizedError("Unauthorized")
    return decode_token(authorization_credentials.credentials)


async def get_current_user_id(current_user: dict = Depends(verify_token)) -> str:
    """Owner id of the caller: the token subject"""
    return current_user["sub"]
