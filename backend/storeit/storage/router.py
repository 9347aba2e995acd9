# storeit/storage/router.py
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from ..deps import get_action_context
from ..platform import create_admin_client
from ..services import ActionContext

router = APIRouter()

# PUBLIC OBJECT VIEW (the url stored on every file document)
@router.get("/buckets/{bucket_id}/files/{file_id}/view")
def view_file(bucket_id: str, file_id: str, ctx: ActionContext = Depends(get_action_context)):
    storage = create_admin_client(ctx.db).storage
    object_info = storage.get_file(bucket_id, file_id)
    return FileResponse(
        storage.get_file_path(bucket_id, file_id),
        media_type=object_info["mimeType"],
        content_disposition_type="inline",
        filename=object_info["name"],
    )
