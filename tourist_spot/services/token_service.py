"""
Tourist Spot API — Session Token Service
=========================================

What:  Mints, verifies and transports signed session tokens.
How:   HS256 JWTs (python-jose) signed with the server secret, one hour
       lifetime, carried in a single http-only / secure / SameSite=None cookie.
Who:   POST /jwt and POST /jwt-logout call issue/set_cookie/clear_cookie;
       the require_session dependency calls verify.

Token lifecycle:
    issue → cookie set on the response → presented on every guarded request
    → expires after token_ttl_seconds. Logout only clears the cookie; a copy of
    the token held elsewhere keeps working until it expires, because nothing
    is stored server-side.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from starlette.responses import Response

from tourist_spot.exceptions import IssuanceError
from tourist_spot.schemas.tourist_spot import SessionIdentity

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Registered claims added at issue time and stripped from the identity again.
_TIME_CLAIMS = ("exp", "iat")

# The claim is caller-defined, so aud/iss/sub/jti are data, not constraints.
# Signature and exp are still enforced.
_DECODE_OPTIONS = {
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of token verification: Ok(identity) or Err(reason).

    reason is "expired" or "invalid"; identity is set only when ok is True.
    """

    identity: Optional[SessionIdentity] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.identity is not None

    @classmethod
    def success(cls, identity: SessionIdentity) -> "VerificationResult":
        return cls(identity=identity)

    @classmethod
    def failure(cls, reason: str) -> "VerificationResult":
        return cls(reason=reason)


class TokenIssuer:
    """
    Issues and verifies session tokens bound to a caller-supplied identity.

    Stateless apart from the secret: safe to share across concurrent requests.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 3600,
        cookie_name: str = "token",
    ):
        self.secret = secret
        self.ttl = timedelta(seconds=ttl_seconds)
        self.cookie_name = cookie_name

    def issue(self, identity_claim: Any) -> str:
        """
        Sign a token embedding the identity claim.

        Raises:
            IssuanceError: claim missing, empty, or not a JSON object.
        """
        if not identity_claim or not isinstance(identity_claim, dict):
            raise IssuanceError(context={"claim_type": type(identity_claim).__name__})

        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = dict(identity_claim)
        payload["iat"] = now
        payload["exp"] = now + self.ttl
        token = jwt.encode(payload, self.secret, algorithm=ALGORITHM)
        logger.info("Issued session token (expires in %ds)", int(self.ttl.total_seconds()))
        return token

    def verify(self, token: str) -> VerificationResult:
        """Check signature and expiry; never raises."""
        try:
            claims = jwt.decode(
                token, self.secret, algorithms=[ALGORITHM], options=_DECODE_OPTIONS
            )
        except ExpiredSignatureError:
            return VerificationResult.failure("expired")
        except JWTError:
            return VerificationResult.failure("invalid")

        identity = {k: v for k, v in claims.items() if k not in _TIME_CLAIMS}
        return VerificationResult.success(SessionIdentity(claims=identity))

    # ── Cookie transport ──────────────────────────────────────────────────

    def set_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=int(self.ttl.total_seconds()),
            httponly=True,
            secure=True,
            samesite="none",
        )

    def clear_cookie(self, response: Response) -> None:
        # Same attributes as set_cookie, otherwise browsers keep the existing cookie.
        response.delete_cookie(
            key=self.cookie_name,
            httponly=True,
            secure=True,
            samesite="none",
        )
