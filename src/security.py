import datetime
import logging
from typing import Annotated

from fastapi import HTTPException, status, Depends
from fastapi.security import OAuth2PasswordBearer

from src.config import config
from jose import jwt, ExpiredSignatureError, JWTError

from src.domain.model import Identity

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")

def create_credentials_exception(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def access_token_expire_minutes() -> int:
    return config.ACCESS_TOKEN_EXPIRE_MINUTES

def create_access_token(user_id: int, nickname: str) -> str:
    expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
        minutes=access_token_expire_minutes()
    )
    jwt_data = {"sub": str(user_id), "nickname": nickname, "exp": expire, "type": "access"}
    return jwt.encode(jwt_data, config.SECRET_KEY, algorithm=ALGORITHM)

def get_identity_from_token(token: str) -> Identity:
    try:
        payload = jwt.decode(token, key=config.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise create_credentials_exception("Token has expired") from e
    except JWTError as e:
        raise create_credentials_exception("Invalid token") from e

    if payload.get("type") != "access":
        raise create_credentials_exception("Token has incorrect type, expected 'access'")

    subject = payload.get("sub")
    nickname = payload.get("nickname")
    if subject is None or nickname is None:
        raise create_credentials_exception("Token is missing 'sub' or 'nickname' field")

    try:
        user_id = int(subject)
    except ValueError as e:
        raise create_credentials_exception("Token subject is not a user id") from e

    return Identity(user_id=user_id, nickname=nickname)

#Dependency for every mutating endpoint: the core only ever sees a verified Identity
async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]) -> Identity:
    identity = get_identity_from_token(token)
    logger.debug("Authenticated user_id=%s", identity.user_id)
    return identity
