from datetime import datetime
from typing import Optional

from beanie import Document, PydanticObjectId
from fastapi_users.schemas import BaseUser, BaseUserCreate, BaseUserUpdate
from fastapi_users_db_beanie import BeanieBaseUser
from pydantic import Field

from .feedback import utc_now


class User(BeanieBaseUser, Document):
    display_name: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

    class Settings(BeanieBaseUser.Settings):
        name = "users"


class UserRead(BaseUser[PydanticObjectId]):
    display_name: Optional[str] = None


class UserCreate(BaseUserCreate):
    display_name: Optional[str] = None


class UserUpdate(BaseUserUpdate):
    display_name: Optional[str] = None
