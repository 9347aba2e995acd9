from typing import List, Literal, Optional
from pydantic import BaseModel, EmailStr, Field

FileType = Literal["image", "document", "video", "audio", "other"]


# identity
class EmailIn(BaseModel):
    email: EmailStr

class CreateAccountIn(BaseModel):
    fullName: str
    email: EmailStr

class VerifyOTPIn(BaseModel):
    accountId: str
    password: str


# files
class UploadFileIn(BaseModel):
    file: bytes = b""
    fileName: str = ""
    ownerId: str
    accountId: str
    path: str = "/"

class GetFilesIn(BaseModel):
    types: List[FileType] = Field(default_factory=list)
    searchText: str = ""
    sort: str = "$createdAt-desc"
    limit: Optional[int] = Field(default=None, gt=0)

class GetFileIn(BaseModel):
    fileId: str
    ownerOnly: bool = False

class RenameFileIn(BaseModel):
    fileId: str = ""
    name: str = ""
    extension: str = ""
    path: str = "/"

class UpdateFileUsersIn(BaseModel):
    fileId: str = ""
    emails: Optional[List[EmailStr]] = None
    path: str = "/"

class DeleteFileIn(BaseModel):
    fileId: str
    bucketFileId: str
    path: str = "/"


# http bodies
class RenamePayload(BaseModel):
    name: str
    extension: str
    path: str = "/"

class UpdateUsersPayload(BaseModel):
    emails: List[EmailStr]
    path: str = "/"
