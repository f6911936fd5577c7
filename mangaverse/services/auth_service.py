import re

from sqlalchemy.exc import IntegrityError

from mangaverse import db
from mangaverse.errors import AuthenticationError, ValidationError
from mangaverse.logger import get_logger
from mangaverse.models.user import User
from mangaverse.repositories.user_repository import UserRepository


logger = get_logger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 8


def validate_email(email):
    email = (email or "").strip()
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email


class AuthService:
    def __init__(self, user_repository=None):
        self.user_repository = user_repository or UserRepository()

    def register(self, username, email, password, first_name=None, last_name=None):
        username = (username or "").strip()
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError("Username must be at least 3 characters")
        email = validate_email(email)
        if not password or len(str(password)) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 8 characters")

        if self.user_repository.get_by_username(username) is not None:
            raise ValidationError("Username already exists")
        if self.user_repository.get_by_email(email) is not None:
            raise ValidationError("Email already exists")

        user = User(
            username=username,
            email=email,
            first_name=(first_name or "").strip() or None,
            last_name=(last_name or "").strip() or None,
        )
        user.set_password(password)
        try:
            self.user_repository.add(user)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError("Username or email already exists")
        logger.info("Registered user %s (%s)", user.username, user.id)
        return user

    def authenticate(self, username, password):
        if not username or not str(username).strip():
            raise ValidationError("Username is required")
        if not password:
            raise ValidationError("Password is required")
        user = self.user_repository.get_by_username(str(username).strip())
        if user is None or not user.check_password(password):
            logger.info("Failed login for %s", username)
            raise AuthenticationError("Invalid username or password")
        return user
