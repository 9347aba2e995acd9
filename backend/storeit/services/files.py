# storeit/services/files.py
import datetime
import logging
import uuid
from typing import List, Optional

from .. import config
from ..errors import (
    InvalidInputError,
    PermissionDeniedError,
    UnauthenticatedError,
    handle_error,
)
from ..platform import InputFile, Query, create_admin_client, create_session_client
from ..schemas import (
    DeleteFileIn,
    GetFileIn,
    GetFilesIn,
    RenameFileIn,
    UpdateFileUsersIn,
    UploadFileIn,
)
from ..utils.file_types import FILE_TYPES, get_file_type
from .context import ActionContext
from .identity import get_current_user

logger = logging.getLogger(__name__)


def upload_file(ctx: ActionContext, params: UploadFileIn) -> dict:
    """Store the bytes, then write the file document.

    A failed document write removes the stored object again before the
    error is raised, so a failed upload never leaves an orphaned object.
    """
    try:
        if not params.file or not params.fileName:
            raise InvalidInputError("Invalid file input")

        client = create_admin_client(ctx.db)
        storage, databases = client.storage, client.databases

        bucket_file = storage.create_file(
            config.BUCKET_ID,
            uuid.uuid4().hex,
            InputFile.from_bytes(params.file, params.fileName),
        )

        file_type, extension = get_file_type(bucket_file["name"])
        file_document = {
            "type": file_type,
            "name": bucket_file["name"],
            "url": storage.get_file_view_url(config.BUCKET_ID, bucket_file["$id"]),
            "extension": extension,
            "size": bucket_file["sizeOriginal"],
            "owner": params.ownerId,
            "accountId": params.accountId,
            "users": [],
            "bucketFileId": bucket_file["$id"],
        }

        try:
            new_file = databases.create_document(
                config.FILES_COLLECTION_ID,
                uuid.uuid4().hex,
                file_document,
            )
        except Exception as error:
            logger.warning("Removing object %s after failed document write", bucket_file["$id"])
            try:
                storage.delete_file(config.BUCKET_ID, bucket_file["$id"])
            except Exception as cleanup_error:
                logger.error(
                    "Failed to remove object %s: %s", bucket_file["$id"], cleanup_error,
                    exc_info=cleanup_error,
                )
            handle_error(error, "Failed to create file document")

        ctx.revalidator.revalidate_path(params.path)
        return new_file
    except Exception as error:
        handle_error(error, "Failed to upload file")


def _create_queries(
    current_user: dict,
    types: List[str],
    search_text: str,
    sort: str,
    limit: Optional[int] = None,
) -> List[Query]:
    queries = [
        Query.or_([
            Query.equal("owner", [current_user["$id"]]),
            Query.contains("users", [current_user["email"].lower()]),
        ]),
    ]

    if types:
        queries.append(Query.equal("type", types))
    if search_text:
        queries.append(Query.contains("name", search_text))
    if limit:
        queries.append(Query.limit(limit))

    if sort:
        sort_by, _, order_by = sort.rpartition("-")
        if not sort_by or order_by not in ("asc", "desc"):
            raise InvalidInputError(f"Invalid sort: {sort}")
        queries.append(Query.order_asc(sort_by) if order_by == "asc" else Query.order_desc(sort_by))

    return queries


def get_files(ctx: ActionContext, params: GetFilesIn) -> dict:
    """Files the caller owns or that are shared with the caller's email."""
    try:
        databases = create_admin_client(ctx.db).databases
        current_user = get_current_user(ctx)

        if not current_user:
            raise UnauthenticatedError("User not found")

        queries = _create_queries(
            current_user,
            list(params.types),
            params.searchText,
            params.sort,
            params.limit,
        )
        return databases.list_documents(config.FILES_COLLECTION_ID, queries)
    except Exception as error:
        handle_error(error, "Failed to get files")


def get_file(ctx: ActionContext, params: GetFileIn) -> dict:
    try:
        databases = create_admin_client(ctx.db).databases
        current_user = get_current_user(ctx)

        if not current_user:
            raise UnauthenticatedError("User not found")

        file = databases.get_document(config.FILES_COLLECTION_ID, params.fileId)

        owner = file["owner"]
        owner_id = owner["$id"] if isinstance(owner, dict) else owner
        if owner_id == current_user["$id"]:
            return file

        if not params.ownerOnly and current_user["email"].lower() in file["users"]:
            return file

        raise PermissionDeniedError("Access denied")
    except Exception as error:
        handle_error(error, "Failed to get file")


def rename_file(ctx: ActionContext, params: RenameFileIn) -> dict:
    try:
        databases = create_admin_client(ctx.db).databases

        if not params.fileId or not params.name or not params.extension:
            raise InvalidInputError("Invalid input for renaming file")

        new_name = f"{params.name}.{params.extension}"
        updated_file = databases.update_document(
            config.FILES_COLLECTION_ID,
            params.fileId,
            {"name": new_name},
        )

        ctx.revalidator.revalidate_path(params.path)
        return updated_file
    except Exception as error:
        handle_error(error, "Failed to rename file")


def update_file_users(ctx: ActionContext, params: UpdateFileUsersIn) -> dict:
    """Replace the shared-with list. An empty list revokes all sharing.

    Emails are stored lowercased; lookups lowercase the caller's email too.
    """
    try:
        databases = create_admin_client(ctx.db).databases

        if not params.fileId or not isinstance(params.emails, list):
            raise InvalidInputError("Invalid input for updating file users")

        updated_file = databases.update_document(
            config.FILES_COLLECTION_ID,
            params.fileId,
            {"users": [str(email).lower() for email in params.emails]},
        )

        ctx.revalidator.revalidate_path(params.path)
        return updated_file
    except Exception as error:
        handle_error(error, "Failed to update file users")


def delete_file(ctx: ActionContext, params: DeleteFileIn) -> dict:
    """Delete the document, then the object.

    The document is authoritative: if removing the object fails afterwards
    the document stays deleted and the object is left orphaned.
    """
    client = create_admin_client(ctx.db)
    databases, storage = client.databases, client.storage

    try:
        databases.delete_document(config.FILES_COLLECTION_ID, params.fileId)
        storage.delete_file(config.BUCKET_ID, params.bucketFileId)

        ctx.revalidator.revalidate_path(params.path)
        return {"status": "success"}
    except Exception as error:
        handle_error(error, "Failed to delete file")


def get_total_space_used(ctx: ActionContext) -> dict:
    try:
        databases = create_session_client(ctx.db, ctx.session).databases
        current_user = get_current_user(ctx)

        if not current_user:
            raise UnauthenticatedError("User is not authenticated.")

        files = databases.list_documents(
            config.FILES_COLLECTION_ID,
            [Query.equal("owner", [current_user["$id"]])],
        )

        total_space = {file_type: {"size": 0, "latestDate": ""} for file_type in FILE_TYPES}
        total_space["used"] = 0
        total_space["all"] = config.TOTAL_STORAGE_BYTES

        for file in files["documents"]:
            file_type = file["type"]
            if file_type not in FILE_TYPES:
                continue

            bucket = total_space[file_type]
            bucket["size"] += file["size"] or 0
            total_space["used"] += file["size"] or 0

            updated_at = file["$updatedAt"]
            if not bucket["latestDate"] or (
                datetime.datetime.fromisoformat(updated_at)
                > datetime.datetime.fromisoformat(bucket["latestDate"])
            ):
                bucket["latestDate"] = updated_at

        return total_space
    except Exception as error:
        handle_error(error, "Error calculating total space used")
