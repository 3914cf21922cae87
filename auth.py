from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from config import ACCESS_TOKEN_EXPIRE_MINUTES, ADMIN_PASSCODE, JWT_SECRET
from schemas import User

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class InvalidToken(Exception):
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


class PasscodeAuthenticator:
    """
    Local sign-in gate: any non-empty email/password pair signs in, and the
    admin passcode grants admin rights. There is no account lookup.
    """

    def __init__(self, admin_passcode: str = ADMIN_PASSCODE):
        self._admin_hash = hash_password(admin_passcode)

    def authenticate(self, email: str, password: str) -> Optional[User]:
        if not email or not password:
            return None
        return User(email=email, is_admin=verify_password(password, self._admin_hash))


def create_access_token(user: User, expires_delta: Optional[timedelta] = None, secret: str = JWT_SECRET) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": user.email, "admin": user.is_admin, "exp": expire}
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def decode_token(token: str, secret: str = JWT_SECRET) -> User:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError as e:
        raise InvalidToken(str(e))
    email = payload.get("sub")
    if not email:
        raise InvalidToken("Token has no subject")
    return User(email=email, is_admin=bool(payload.get("admin")))
