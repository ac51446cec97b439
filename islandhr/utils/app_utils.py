import logging
from fastapi import HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from typing import Dict, Any
import bcrypt
from jose import JWTError, jwt
from islandhr import db
from islandhr.config import settings
from islandhr.exceptions import get_user_exception

from datetime import datetime, timezone, timedelta

UTC = timezone.utc

logger = logging.getLogger(__name__)

oauth2_bearer = OAuth2PasswordBearer(tokenUrl="auth/login")

secret_key = settings.SECRET_KEY
algorithm = settings.ALGORITHM


class Token(BaseModel):
    access_token: str
    token_type: str


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed_password.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if isinstance(hashed_password, str):
        hashed_password = hashed_password.encode('utf-8')

    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password)


def create_access_token(payload: Dict[str, Any], expiry: timedelta):
    data_to_encode = {"data": payload}
    expiry_delta = datetime.now(UTC) + expiry
    data_to_encode.update({"exp": expiry_delta})
    encoded_data: str = jwt.encode(data_to_encode, secret_key, algorithm)

    return encoded_data


async def authenticate_user(pk: str, password: str):
    """
    authenticates user
    args:-
        - pk: email of an admin or an employee
        - password: password
    """
    user = await db.admins_collection.find_one({"email": pk})
    if not user:
        user = await db.employees_collection.find_one({"email": pk})
        if not user:
            return False

    hashed_password = user.get("password")
    if not hashed_password or not verify_password(plain_password=password, hashed_password=hashed_password):
        return False
    return user


async def get_current_user(token: str = Depends(oauth2_bearer)) -> tuple:
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
        data = payload.get("data")

        if data is None:
            raise HTTPException(status_code=401, detail="Invalid token data.")

        pk: str = data.get("sub")

        if pk is None:
            raise HTTPException(status_code=401, detail="Could not validate user.")

        user = await db.admins_collection.find_one({"email": pk})
        user_type = "admin"

        if not user:
            user = await db.employees_collection.find_one({"email": pk})
            user_type = "employee"

            if not user:
                raise get_user_exception()

        return user, user_type

    except JWTError as e:
        logger.warning("JWT Error %s", e)
        raise HTTPException(status_code=401, detail="JWT Error - could not validate user.")


def display_name(user: dict) -> str:
    if user.get("name"):
        return user["name"]
    full_name = f"{user.get('first_name', '')} {user.get('last_name', '')}".strip()
    return full_name or user.get("email", "")
