from __future__ import annotations

from fileintel.models.enums import ContentType

_BY_EXTENSION: dict[str, ContentType] = {
    **dict.fromkeys(("jpg", "jpeg", "png", "gif", "bmp", "tiff", "heic", "webp"), ContentType.IMAGE),
    **dict.fromkeys(("mp4", "avi", "mov", "mkv", "wmv", "m4v"), ContentType.VIDEO),
    **dict.fromkeys(("mp3", "wav", "flac", "aac", "ogg", "m4a"), ContentType.AUDIO),
    **dict.fromkeys(("pdf", "doc", "docx", "txt", "rtf", "md", "pages"), ContentType.DOCUMENT),
    **dict.fromkeys(("zip", "rar", "7z", "tar", "gz", "bz2", "xz"), ContentType.ARCHIVE),
    **dict.fromkeys(("app", "exe", "dmg", "pkg", "msi"), ContentType.APPLICATION),
}


def extension_of(path: str) -> str:
    """Lowercased extension without the dot; ``""`` for none or dotfiles."""
    name = path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return ""
    return ext.lower()


def content_type_for(path: str) -> ContentType:
    return _BY_EXTENSION.get(extension_of(path), ContentType.OTHER)
