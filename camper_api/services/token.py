from datetime import datetime, timedelta, timezone
import logging

from jose import JWTError, jwt
from fastapi import HTTPException

from camper_api.config import JWT_SECRET, ALGORITHM, ACCESS_TOKEN_EXPIRE_HOURS

logger = logging.getLogger(__name__)


def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)

    to_encode.update({"exp": expire})

    # 'sub' tiene que ser un string
    if "sub" in to_encode:
        to_encode["sub"] = str(to_encode["sub"])

    return jwt.encode(to_encode, JWT_SECRET, algorithm=ALGORITHM)


def create_user_token(user, role: str = None):
    """Token de sesión con {id, email, role} del usuario."""
    return create_access_token(
        data={
            "sub": user.id,
            "id": user.id,
            "email": user.email,
            "role": role or user.role,
        }
    )


def decode_access_token(token: str):
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning("Token rechazado: %s", e)
        raise HTTPException(status_code=401, detail="Token inválido")
