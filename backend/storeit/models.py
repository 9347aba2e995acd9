from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List
import datetime
from sqlalchemy import Column, JSON


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def as_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    # sqlite hands datetimes back without tzinfo; everything is stored in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


class Account(SQLModel, table=True):
    __tablename__ = "accounts"

    id: Optional[str] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    createdAt: datetime.datetime = Field(default_factory=utcnow)
    updatedAt: datetime.datetime = Field(default_factory=utcnow)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[str] = Field(default=None, primary_key=True)
    fullName: str
    email: str = Field(index=True)
    avatar: Optional[str] = None
    accountId: str = Field(index=True)
    createdAt: datetime.datetime = Field(default_factory=utcnow)
    updatedAt: datetime.datetime = Field(default_factory=utcnow)

    files: List["File"] = Relationship(back_populates="owner")


class File(SQLModel, table=True):
    __tablename__ = "files"

    id: Optional[str] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    url: str
    type: str = Field(index=True)
    bucketFileId: str = Field(index=True)
    accountId: str = Field(index=True)

    extension: Optional[str] = None
    size: int = 0

    # emails of the users the file is shared with
    users: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    createdAt: datetime.datetime = Field(default_factory=utcnow)
    updatedAt: datetime.datetime = Field(default_factory=utcnow)

    owner_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True)
    owner: Optional[User] = Relationship(back_populates="files")


class SessionModel(SQLModel, table=True):
    __tablename__ = "sessions"

    id: Optional[str] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="accounts.id", index=True)
    secret: str = Field(index=True)
    expires_at: datetime.datetime
    created_at: datetime.datetime = Field(default_factory=utcnow)


class OTP(SQLModel, table=True):
    __tablename__ = "otp"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    code: str
    expires_at: datetime.datetime
