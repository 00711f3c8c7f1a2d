import os


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def get_file_extension(filename: str) -> str:
    # "photo.JPG" -> "jpg", "archive.tar.gz" -> "gz", "README" -> ""
    return os.path.splitext(filename or "")[1].lstrip(".").lower()


def is_image(mime_type: str) -> bool:
    return (mime_type or "").startswith("image/")


def is_video(mime_type: str) -> bool:
    return (mime_type or "").startswith("video/")
