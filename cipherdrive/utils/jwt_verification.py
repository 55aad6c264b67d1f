import jwt
from jwt import PyJWKClient
from functools import lru_cache
from typing import Dict, Any
from cipherdrive.configs.settings import settings
from cipherdrive.core.exceptions import UnauthorizedError


@lru_cache(maxsize=4)
def _jwk_client(jwks_url: str) -> PyJWKClient:
    return PyJWKClient(jwks_url)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and verify a bearer JWT against the identity provider's JWKS"""
    if not settings.AUTH_JWKS_URL:
        raise UnauthorizedError("Token verification is not configured")

    try:
        signing_key = _jwk_client(settings.AUTH_JWKS_URL).get_signing_key_from_jwt(token)

        payload = jwt.decode(
            token,
            signing_key.key,
            algorithms=['RS256'],
            issuer=settings.AUTH_ISSUER or None,
            audience=settings.AUTH_AUDIENCE or None,
            options={"verify_aud": bool(settings.AUTH_AUDIENCE)}
        )

    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.PyJWTError as e:
        raise UnauthorizedError(f"Invalid token: {str(e)}")

    if not payload.get("sub"):
        raise UnauthorizedError("Token has no subject")
    return payload
