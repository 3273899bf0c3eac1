# auth.py

import logging
import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from lab_central.data_models import UserRole
from lab_central.utils import new_id

logger = logging.getLogger(__name__)


def load_secret_key(environ=os.environ) -> str:
    """SECRET_KEY from the environment, or a random key for this process only."""
    key = environ.get("SECRET_KEY")
    if key:
        return key
    logger.warning("SECRET_KEY is not set; tokens will not survive a restart.")
    return secrets.token_urlsafe(32)


# Role selection only: there are no passwords, the token just labels who is acting.
load_dotenv()
SECRET_KEY = load_secret_key()
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 480))

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login")

# Display identities handed out by the role picker.
DEFAULT_PROFILES = {
    UserRole.ADMIN: ("System Administrator", "Advanced Materials & Research"),
    UserRole.FACULTY: ("Dhanuprabu J", "Advanced Materials & Research"),
    UserRole.STUDENT: ("Research Student", "Advanced Materials & Research"),
}


# Pydantic Models
class User(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    department: str


class Token(BaseModel):
    access_token: str
    token_type: str
    user: User


class LoginRequest(BaseModel):
    role: UserRole
    name: Optional[str] = None
    department: Optional[str] = None


def login_as(request: LoginRequest) -> User:
    default_name, default_department = DEFAULT_PROFILES[request.role]
    return User(
        id=new_id("u-"),
        name=request.name or default_name,
        email=f"{request.role.value.lower()}@university.edu",
        role=request.role,
        department=request.department or default_department,
    )


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = {
        "sub": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "department": user.department,
    }
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: Optional[str]) -> User:
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return User(
            id=payload["sub"],
            name=payload["name"],
            email=payload["email"],
            role=UserRole(payload["role"]),
            department=payload["department"],
        )
    except (JWTError, KeyError, ValueError):
        raise credentials_exception


# Used for API calls made by JavaScript
async def get_current_user(token: str = Depends(oauth2_scheme)) -> User:
    return decode_token(token)
