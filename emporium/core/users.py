"""User directory rules: uniqueness, registration and authentication.

Passwords are compared as opaque strings. Self-registered users are never
admins; admin records are only created through ``seed_admin``.
"""

from .errors import DuplicateUsernameError, InvalidCredentialsError, UserNotFoundError
from .models import Directory, RegistrationData, User


class UserDirectory:
    """Owns user records within a loaded directory."""

    @staticmethod
    def register(directory: Directory, registration: RegistrationData) -> User:
        """Insert a new customer record.

        Raises:
            DuplicateUsernameError: If the username is already a key.
        """
        if registration.username in directory:
            raise DuplicateUsernameError(registration.username)

        user = User(
            username=registration.username,
            name=registration.name,
            email=registration.email,
            password=registration.password,
            admin=False,
        )
        directory[user.username] = user
        return user

    @staticmethod
    def seed_admin(directory: Directory, registration: RegistrationData) -> User:
        """Create an admin record. Existing records are never promoted.

        Raises:
            DuplicateUsernameError: If the username is already a key.
        """
        if registration.username in directory:
            raise DuplicateUsernameError(registration.username)

        user = User(
            username=registration.username,
            name=registration.name,
            email=registration.email,
            password=registration.password,
            admin=True,
        )
        directory[user.username] = user
        return user

    @staticmethod
    def authenticate(directory: Directory, username: str, password: str) -> User:
        """Return the user if the password matches.

        Raises:
            InvalidCredentialsError: For unknown users and wrong passwords
                alike.
        """
        user = directory.get(username)
        if user is None or user.password != password:
            raise InvalidCredentialsError()
        return user

    @staticmethod
    def get(directory: Directory, username: str) -> User:
        try:
            return directory[username]
        except KeyError:
            raise UserNotFoundError(username) from None
