"""User repository."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.identity.user import User


@storefront.repository(part_of=User)
class UserRepository:
    def find(self, user_id) -> User | None:
        try:
            return self.get(user_id)
        except ObjectNotFoundError:
            return None

    def find_by_email(self, email: str) -> User | None:
        results = self._dao.query.filter(email=email.strip().lower()).all()
        return results.items[0] if results.items else None
