"""
Account service: password hashing, JWT issuing and profile management
"""
import functools
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import utcnow
from app.exceptions import AuthenticationError, BadRequestError, NotFoundError
from app.models import User
from app.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Authenticated identity attached to a request"""
    user_id: int
    email: str
    role: str

    def has_role(self, *roles: str) -> bool:
        return self.role in roles


@functools.lru_cache(maxsize=None)
def _password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_password_hash(password: str, rounds: int = 12) -> str:
    """
    Generate the hash value of a password.

    Parameters:
        password (str): The password to be hashed.
        rounds (int): bcrypt cost factor.

    Returns:
        str: The hash value of the password.
    """
    return _password_context(rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify if a plain password matches a hashed password.

    The cost factor is read from the hash itself, so any context verifies it.
    """
    return _password_context(12).verify(plain_password, hashed_password)


def create_access_token(user: User, settings: Settings) -> str:
    """
    Creates an access token carrying the user's id, email and role.

    Returns:
        str: The encoded access token.
    """
    expire = utcnow() + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Decode and verify a bearer token

    Raises:
        AuthenticationError: if the signature, expiry or subject is invalid
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        payload["sub"] = int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError) as e:
        logger.info(f"Rejected token: {str(e)}")
        raise AuthenticationError("Invalid token") from e
    return payload


class AuthService:
    """Registration, login and password changes"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def register(self, data: RegisterRequest) -> Tuple[User, str]:
        """
        Create an account and issue its first token

        Admin accounts require the configured admin passcode.
        """
        existing = self.db.query(User).filter(User.email == data.email).first()
        if existing:
            raise BadRequestError("User already exists with this email")

        role = "user"
        if data.role == "admin":
            if data.admin_passcode != self.settings.ADMIN_PASSCODE:
                raise BadRequestError("Invalid admin passcode")
            role = "admin"

        user = User(
            email=data.email,
            password=get_password_hash(data.password, self.settings.BCRYPT_ROUNDS),
            first_name=data.first_name,
            last_name=data.last_name,
            role=role,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User registered: {user.id} ({role})")

        return user, create_access_token(user, self.settings)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            raise AuthenticationError("Invalid credentials")

        if not user.is_active:
            raise AuthenticationError("Account has been deactivated")

        if not verify_password(password, user.password):
            raise AuthenticationError("Invalid credentials")

        logger.info(f"User logged in: {user.id}")

        return user, create_access_token(user, self.settings)

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.get_user(user_id)

        if not verify_password(current_password, user.password):
            raise BadRequestError("Current password is incorrect")

        user.password = get_password_hash(new_password, self.settings.BCRYPT_ROUNDS)
        self.db.commit()

        logger.info(f"Password changed for user {user_id}")

    def resolve_context(self, token: str) -> RequestContext:
        """
        Turn a bearer token into a request context

        The user must still exist and be active; the role is taken from the
        database rather than the token so demotions apply immediately.
        """
        payload = decode_access_token(token, self.settings)

        user = self.db.query(User).filter(User.id == payload["sub"]).first()
        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        return RequestContext(user_id=user.id, email=user.email, role=user.role)
