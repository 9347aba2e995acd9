from typing import List, Optional
from fastapi import APIRouter, UploadFile, File as FastAPIFile, Form, Query, Depends
from fastapi.responses import FileResponse
from .. import config
from ..deps import get_action_context
from ..errors import UnauthenticatedError
from ..platform import create_admin_client
from ..schemas import (
    DeleteFileIn,
    FileType,
    GetFileIn,
    GetFilesIn,
    RenameFileIn,
    RenamePayload,
    UpdateFileUsersIn,
    UpdateUsersPayload,
    UploadFileIn,
)
from ..services import ActionContext, files, identity
from ..utils.response import success

router = APIRouter()


def _require_user(ctx: ActionContext) -> dict:
    user = identity.get_current_user(ctx)
    if not user:
        raise UnauthenticatedError("Not authenticated")
    return user


# UPLOAD
@router.post("/upload")
def upload_file(
    upload: UploadFile = FastAPIFile(...),
    path: str = Form("/"),
    ctx: ActionContext = Depends(get_action_context),
):
    user = _require_user(ctx)
    new_file = files.upload_file(ctx, UploadFileIn(
        file=upload.file.read(),
        fileName=upload.filename or "",
        ownerId=user["$id"],
        accountId=user["accountId"],
        path=path,
    ))
    return success(data=new_file, message="File uploaded", code=201)

# LIST
@router.get("/")
def list_files(
    types: List[FileType] = Query(default=[]),
    searchText: str = "",
    sort: str = "$createdAt-desc",
    limit: Optional[int] = Query(default=None, gt=0),
    ctx: ActionContext = Depends(get_action_context),
):
    result = files.get_files(ctx, GetFilesIn(types=types, searchText=searchText, sort=sort, limit=limit))
    return success(data=result, message="OK", code=200)

# RENAME
@router.put("/rename/{file_id}")
def rename_file(file_id: str, payload: RenamePayload, ctx: ActionContext = Depends(get_action_context)):
    files.get_file(ctx, GetFileIn(fileId=file_id, ownerOnly=True))
    updated = files.rename_file(ctx, RenameFileIn(
        fileId=file_id,
        name=payload.name.strip(),
        extension=payload.extension.strip(),
        path=payload.path,
    ))
    return success(data={"file": updated}, message="File renamed", code=200)

# SHARE TO USERS (replaces the whole list)
@router.put("/users/{file_id}")
def update_file_users(file_id: str, payload: UpdateUsersPayload, ctx: ActionContext = Depends(get_action_context)):
    files.get_file(ctx, GetFileIn(fileId=file_id, ownerOnly=True))
    updated = files.update_file_users(ctx, UpdateFileUsersIn(
        fileId=file_id,
        emails=payload.emails,
        path=payload.path,
    ))
    return success(data={"file": updated}, message="File share updated", code=200)

# DELETE
@router.delete("/{file_id}")
def delete_file(file_id: str, path: str = "/", ctx: ActionContext = Depends(get_action_context)):
    file_obj = files.get_file(ctx, GetFileIn(fileId=file_id, ownerOnly=True))
    result = files.delete_file(ctx, DeleteFileIn(
        fileId=file_id,
        bucketFileId=file_obj["bucketFileId"],
        path=path,
    ))
    return success(data=result, message="File deleted successfully", code=200)

# USAGE SUMMARY
@router.get("/usage")
def file_usage(ctx: ActionContext = Depends(get_action_context)):
    return success(data=files.get_total_space_used(ctx), message="OK", code=200)

# DOWNLOAD (owner or shared user)
@router.get("/download/{file_id}")
def download_file(file_id: str, ctx: ActionContext = Depends(get_action_context)):
    file_obj = files.get_file(ctx, GetFileIn(fileId=file_id))
    storage = create_admin_client(ctx.db).storage
    object_info = storage.get_file(config.BUCKET_ID, file_obj["bucketFileId"])

    return FileResponse(
        storage.get_file_path(config.BUCKET_ID, file_obj["bucketFileId"]),
        media_type=object_info["mimeType"],
        filename=file_obj["name"],
    )
