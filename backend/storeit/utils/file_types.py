# storeit/utils/file_types.py
from typing import Tuple

FILE_TYPES = ("image", "document", "video", "audio", "other")

DOCUMENT_EXTENSIONS = {
    "pdf", "doc", "docx", "txt", "xls", "xlsx", "csv", "rtf", "ods", "ppt",
    "odp", "md", "html", "htm", "epub", "pages", "fig", "psd", "ai", "indd",
    "xd", "sketch", "afdesign", "afphoto",
}
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "bmp", "svg", "webp"}
VIDEO_EXTENSIONS = {"mp4", "avi", "mov", "mkv", "webm"}
AUDIO_EXTENSIONS = {"mp3", "wav", "ogg", "flac"}


def get_file_type(file_name: str) -> Tuple[str, str]:
    """Return ``(type, extension)`` for a file name, e.g. ``("image", "png")``."""
    if "." not in file_name:
        return "other", ""

    extension = file_name.rsplit(".", 1)[1].lower()
    if not extension:
        return "other", ""

    if extension in DOCUMENT_EXTENSIONS:
        return "document", extension
    if extension in IMAGE_EXTENSIONS:
        return "image", extension
    if extension in VIDEO_EXTENSIONS:
        return "video", extension
    if extension in AUDIO_EXTENSIONS:
        return "audio", extension
    return "other", extension
