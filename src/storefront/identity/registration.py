"""User registration and credential check."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import AuthenticationFailed
from storefront.identity.user import DEFAULT_BCRYPT_ROUNDS, Role, User


@storefront.command(part_of="User")
class RegisterUser:
    email = String(required=True, max_length=254)
    password = String(required=True, max_length=255)
    name = String(required=True, max_length=100)
    lastname = String(required=True, max_length=100)
    role = Integer(default=Role.REGULAR.value, min_value=0)
    hash_rounds = Integer(default=DEFAULT_BCRYPT_ROUNDS, min_value=4, max_value=31)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["Email is already registered"]})

        user = User.register(
            email=command.email,
            password=command.password,
            name=command.name,
            lastname=command.lastname,
            role=command.role or Role.REGULAR.value,
            rounds=command.hash_rounds or DEFAULT_BCRYPT_ROUNDS,
        )
        repo.add(user)
        return str(user.id)


def authenticate(email: str, password: str) -> User:
    """Return the user owning these credentials or raise ``AuthenticationFailed``."""
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None or not user.check_password(password):
        raise AuthenticationFailed("Invalid credentials")
    return user
