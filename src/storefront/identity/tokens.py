"""Signed access tokens carrying the caller's identity and role."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from storefront.config import Settings
from storefront.exceptions import AuthenticationFailed
from storefront.identity.user import Role


@dataclass(frozen=True)
class Caller:
    """The authenticated identity behind a request."""

    user_id: str
    role: int = Role.REGULAR.value

    @property
    def is_admin(self) -> bool:
        return self.role != Role.REGULAR.value

    def can_access(self, owner_id) -> bool:
        return self.is_admin or str(owner_id) == self.user_id


class TokenService:
    def __init__(self, secret_key: str, algorithm: str = "HS256", ttl_minutes: int = 60 * 24) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl_minutes = ttl_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.token_algorithm,
            ttl_minutes=settings.token_ttl_minutes,
        )

    def issue(self, user, now: datetime | None = None) -> str:
        now = now or datetime.now(UTC)
        claims = {
            "sub": str(user.id),
            "role": int(user.role),
            "iat": now,
            "exp": now + timedelta(minutes=self.ttl_minutes),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Caller:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            raise AuthenticationFailed("Token is invalid") from exc

        user_id = payload.get("sub")
        role = payload.get("role", Role.REGULAR.value)
        if not user_id or not isinstance(role, int):
            raise AuthenticationFailed("Token is invalid")
        return Caller(user_id=str(user_id), role=role)
