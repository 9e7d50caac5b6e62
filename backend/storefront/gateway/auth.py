"""
Storefront Gateway: Auth Gate
=============================

What:  Bearer-token check applied only to routes marked auth_required.
How:   1. Take the token from `Authorization: Bearer <token>`
       2. Missing token           → UnauthenticatedError (401)
       3. Bad signature / expired → ForbiddenError (403)
       4. Valid                   → decoded claims stored on request.state.user

Tokens are HMAC-signed with the shared JWT_SECRET and issued by the user
service. The gateway verifies them and never interprets the claims.
"""

import logging
from typing import Any, Dict, Optional

import jwt
from starlette.requests import Request

from storefront.exceptions import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """
    Return the credential part of an Authorization header.

    The second space-separated part is the token ("Bearer abc" → "abc").
    Returns None for a missing header or one without a credential part.
    """
    if not header:
        return None
    parts = header.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


class TokenVerifier:
    """Verifies signature and expiry of shared-secret JWTs."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode `token` and return its claims.

        `exp` is enforced when present. Audience is not checked; the gateway
        has no audience of its own.

        Raises:
            ForbiddenError: signature mismatch, malformed token or expired token
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_aud": False},
            )
        except jwt.ExpiredSignatureError as e:
            raise ForbiddenError(context={"reason": "expired"}) from e
        except jwt.InvalidTokenError as e:
            raise ForbiddenError(context={"reason": str(e)}) from e


def authenticate(request: Request, verifier: TokenVerifier) -> Dict[str, Any]:
    """
    Run the auth gate for one request.

    On success the claims are attached to `request.state.user` and returned.

    Raises:
        UnauthenticatedError: no bearer token
        ForbiddenError: token failed verification
    """
    token = extract_bearer_token(request.headers.get("authorization"))
    if token is None:
        raise UnauthenticatedError()

    claims = verifier.verify(token)
    request.state.user = claims
    logger.debug("Authenticated subject %s for %s %s", claims.get("sub"), request.method, request.url.path)
    return claims
