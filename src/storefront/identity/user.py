"""User aggregate: a registered buyer or administrator."""

from enum import IntEnum

import bcrypt
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String

from storefront.domain import storefront
from storefront.utils.clock import utc_now

MIN_PASSWORD_LENGTH = 6
# bcrypt ignores (newer releases reject) anything past 72 bytes
MAX_PASSWORD_BYTES = 72
DEFAULT_BCRYPT_ROUNDS = 12


class Role(IntEnum):
    REGULAR = 0
    ADMIN = 1


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    encoded = password.encode("utf-8")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError({"password": [f"Password must be at most {MAX_PASSWORD_BYTES} bytes"]})
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


@storefront.aggregate
class User:
    email = String(required=True, max_length=254)
    name = String(required=True, max_length=100)
    lastname = String(required=True, max_length=100)
    role = Integer(default=Role.REGULAR.value, min_value=0)
    password_hash = String(required=True, max_length=255)
    registered_at = DateTime(default=utc_now)

    @classmethod
    def register(cls, email, password, name, lastname, role=Role.REGULAR.value, rounds=DEFAULT_BCRYPT_ROUNDS):
        return cls(
            email=email.strip().lower(),
            name=name,
            lastname=lastname,
            role=role,
            password_hash=hash_password(password, rounds),
        )

    @property
    def is_admin(self) -> bool:
        return self.role != Role.REGULAR.value

    def check_password(self, password: str) -> bool:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, self.password_hash.encode("utf-8"))
