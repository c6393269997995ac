"""
Token service implementation.

Issues and verifies HS256 JWTs carrying subject, tier, issued-at and
expiry. Verification is a pure function of the token, the secret and the
injected clock: no storage is consulted, so it runs on every request.

The secret is injected once at construction. Rotating it (restarting
with a new value) invalidates every outstanding token at once; finer
grained revocation is the session registry's job.
"""

import uuid
from typing import Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.clock import Clock, epoch_seconds, utcnow

from .interfaces import ITokenService
from .models import IssuedToken, Principal, TokenClaims
from .exceptions import (
    BadSignatureError,
    ExpiredTokenError,
    MalformedTokenError,
    MissingTokenError,
)

DEFAULT_TTL_SECONDS = 24 * 3600
REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti"]


class TokenService(ITokenService):
    """Stateless bearer token minting and verification."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        default_ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Optional[Clock] = None,
    ):
        if not secret:
            raise ValueError("jwt_secret_blank")
        self._secret = secret
        self._algorithm = algorithm
        self._default_ttl = default_ttl_seconds
        self._clock = clock or utcnow

    def issue(self, principal: Principal, ttl_seconds: Optional[int] = None) -> IssuedToken:
        """
        Sign a token for the principal.

        Returns:
            IssuedToken whose expires_at equals the encoded exp claim
        """
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise ValueError("ttl must be positive")

        now = epoch_seconds(self._clock())
        claims = TokenClaims(
            sub=principal.id,
            email=principal.email,
            tier=principal.tier,
            iat=now,
            exp=now + ttl,
            jti=uuid.uuid4().hex,
        )
        token = jwt.encode(claims.model_dump(mode="json"), self._secret, algorithm=self._algorithm)
        return IssuedToken(token=token, expires_at=claims.exp, claims=claims)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a token and return its claims.

        Time-based checks use the injected clock rather than PyJWT's,
        so they are disabled in the decode call and done here.
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidSignatureError:
            raise BadSignatureError()
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError(str(e))

        try:
            claims = TokenClaims(**payload)
        except PydanticValidationError:
            raise MalformedTokenError("Token claims have the wrong shape")

        if claims.exp <= epoch_seconds(self._clock()):
            raise ExpiredTokenError()
        return claims
