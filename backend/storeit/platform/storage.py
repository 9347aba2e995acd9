# storeit/platform/storage.py
import logging
import mimetypes
import shutil
from dataclasses import dataclass
from pathlib import Path

from .. import config
from ..errors import InvalidInputError, NotFoundError, PlatformError

logger = logging.getLogger(__name__)


@dataclass
class InputFile:
    data: bytes
    filename: str

    @classmethod
    def from_bytes(cls, data: bytes, filename: str) -> "InputFile":
        return cls(data=data, filename=filename)


class Storage:
    """Bucketed object store on the local filesystem.

    Each object lives in its own directory, ``<root>/<bucket>/<object id>/<name>``,
    so the original file name survives without a separate index.
    """

    def __init__(self, root):
        self.root = Path(root)

    @staticmethod
    def _check_part(part: str, label: str) -> None:
        if not part or part in (".", "..") or "/" in part or "\\" in part:
            raise InvalidInputError(f"Invalid {label}: {part!r}")

    def _object_dir(self, bucket_id: str, file_id: str) -> Path:
        # ids are generated by us, but the view route passes them straight through
        self._check_part(bucket_id, "id")
        self._check_part(file_id, "id")
        return self.root / bucket_id / file_id

    def _describe(self, bucket_id: str, file_id: str, path: Path) -> dict:
        mime_type, _ = mimetypes.guess_type(path.name)
        return {
            "$id": file_id,
            "bucketId": bucket_id,
            "name": path.name,
            "sizeOriginal": path.stat().st_size,
            "mimeType": mime_type or "application/octet-stream",
        }

    def create_file(self, bucket_id: str, file_id: str, input_file: InputFile) -> dict:
        name = Path(input_file.filename).name
        self._check_part(name, "file name")

        directory = self._object_dir(bucket_id, file_id)
        try:
            directory.mkdir(parents=True, exist_ok=False)
        except OSError as error:
            raise PlatformError(f"Failed to store object {file_id}: {error}") from error

        path = directory / name
        try:
            path.write_bytes(input_file.data)
        except OSError as error:
            # never leave an empty object directory behind
            shutil.rmtree(directory, ignore_errors=True)
            raise PlatformError(f"Failed to store object {file_id}: {error}") from error

        logger.info("Stored object %s in bucket %s (%d bytes)", file_id, bucket_id, len(input_file.data))
        return self._describe(bucket_id, file_id, path)

    def get_file_path(self, bucket_id: str, file_id: str) -> Path:
        directory = self._object_dir(bucket_id, file_id)
        entries = [p for p in directory.iterdir() if p.is_file()] if directory.is_dir() else []
        if not entries:
            raise NotFoundError("The requested file could not be found.")
        return entries[0]

    def get_file(self, bucket_id: str, file_id: str) -> dict:
        return self._describe(bucket_id, file_id, self.get_file_path(bucket_id, file_id))

    def list_files(self, bucket_id: str) -> dict:
        bucket = self.root / bucket_id
        files = []
        if bucket.is_dir():
            for directory in sorted(bucket.iterdir()):
                # skip directories left without an object
                if directory.is_dir() and any(p.is_file() for p in directory.iterdir()):
                    files.append(self.get_file(bucket_id, directory.name))
        return {"total": len(files), "files": files}

    def delete_file(self, bucket_id: str, file_id: str) -> None:
        directory = self._object_dir(bucket_id, file_id)
        if not directory.is_dir():
            raise NotFoundError("The requested file could not be found.")
        try:
            shutil.rmtree(directory)
        except OSError as error:
            raise PlatformError(f"Failed to delete object {file_id}: {error}") from error
        logger.info("Deleted object %s from bucket %s", file_id, bucket_id)

    def get_file_view_url(self, bucket_id: str, file_id: str) -> str:
        return f"{config.APP_URL}/storage/buckets/{bucket_id}/files/{file_id}/view"
