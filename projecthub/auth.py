import logging
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.hash import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud, schemas
from .config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, BCRYPT_ROUNDS, SECRET_KEY
from .exceptions import (
    EmailAlreadyInUse,
    InvalidCredentials,
    PasswordsDoNotMatch,
    UserNotFound,
)

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/signin")
password_hasher = bcrypt.using(rounds=BCRYPT_ROUNDS)

# Compared against when the email is unknown so both failure paths cost a hash check
_DUMMY_HASH = password_hasher.hash("projecthub-dummy-password")


def hash_password(password: str) -> str:
    return password_hasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return password_hasher.verify(plain_password, hashed_password)


def create_access_token(user_id: int, expires_delta: timedelta = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> int:
    """Return the user id asserted by ``token`` or raise 401."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        subject = payload.get("sub")
        if subject is None:
            raise credentials_exception
        return int(subject)
    except (JWTError, ValueError):
        raise credentials_exception


def get_current_user_id(token: str = Depends(oauth2_scheme)) -> int:
    return decode_access_token(token)


def sign_up(db: Session, user: schemas.UserCreate):
    if user.password != user.confirm_password:
        raise PasswordsDoNotMatch()
    if crud.get_user_by_email(db, user.email):
        raise EmailAlreadyInUse()

    try:
        db_user = crud.create_user(
            db,
            email=user.email,
            hashed_password=hash_password(user.password),
            first_name=user.first_name,
            last_name=user.last_name,
        )
    except IntegrityError:
        raise EmailAlreadyInUse()
    logger.info("User %s signed up", db_user.id)
    return db_user, create_access_token(db_user.id)


def authenticate_user(db: Session, email: str, password: str):
    user = crud.get_user_by_email(db, email)
    if not user:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def sign_in(db: Session, credentials: schemas.UserLogin):
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise InvalidCredentials()
    return user, create_access_token(user.id)


def update_password(db: Session, user_id: int, passwords: schemas.PasswordUpdate):
    user = crud.get_user(db, user_id)
    if not user:
        raise UserNotFound()
    if not verify_password(passwords.current_password, user.hashed_password):
        raise InvalidCredentials()
    crud.update_user_password(db, user, hash_password(passwords.new_password))
    logger.info("User %s changed password", user_id)
