"""
Notes API — Bearer Token Service
==================================

What:  Issues and verifies the signed access tokens returned by login.
How:   python-jose HS256 JWTs carrying `user_id`, `email`, `iat` and `exp`.
Who:   AuthService.login() issues; AccessGate decodes on every gated request.

Tokens are stateless: nothing is stored server-side, there is no revocation
list, and expiry is checked only when a token is decoded.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from notes_api.exceptions import AuthenticationError
from notes_api.security import Identity


class TokenService:
    """
    Signs and verifies access tokens with a single shared secret.

    Args:
        secret:    HMAC signing key (must be non-empty)
        algorithm: JWS algorithm, HS256 unless configured otherwise
        ttl:       Lifetime of an issued token
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: UUID | str, email: str, now: datetime | None = None) -> str:
        """Return a signed token for the account, expiring `ttl` after `now`."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "user_id": str(user_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Identity:
        """
        Verify signature and expiry and return the identity the token carries.

        Raises:
            AuthenticationError: expired, malformed or wrongly signed token, or
                                 a token without a UUID `user_id` and an `email`
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise AuthenticationError("Token has expired", context={"reason": "expired"})
        except JWTError:
            raise AuthenticationError("Invalid token", context={"reason": "invalid"})

        raw_user_id = payload.get("user_id")
        email = payload.get("email")
        if not raw_user_id or not email:
            raise AuthenticationError("Invalid token", context={"reason": "missing_claims"})

        try:
            user_id = UUID(str(raw_user_id))
        except ValueError:
            raise AuthenticationError("Invalid token", context={"reason": "bad_user_id"})

        return Identity(user_id=user_id, email=email)
