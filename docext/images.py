"""Inline local images as base64 data so the rendered page needs no filesystem."""

import base64
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from urllib.parse import unquote

from loguru import logger

from docext.exceptions import ImageNotFoundError, ImageTooLargeError, UnsupportedImageFormatError
from docext.models import EncodedImage, ImageRef

MAX_IMAGE_SIZE = 1024 * 1024  # 1 MiB

IMAGE_MIME_TYPES = {
    "apng": "image/apng",
    "avif": "image/avif",
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "jfif": "image/jpeg",
    "pjpeg": "image/jpeg",
    "pjp": "image/jpeg",
    "png": "image/png",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "ico": "image/x-icon",
    "cur": "image/x-icon",
    "tif": "image/tiff",
    "tiff": "image/tiff",
}


def resolve_image_path(target: str, base_dir: Path) -> Path:
    """Resolve a link target (percent-encoded by the Markdown parser) against ``base_dir``."""
    return base_dir / unquote(target)


def mime_type_for(path: Path) -> str:
    extension = path.suffix.removeprefix(".")
    mime = IMAGE_MIME_TYPES.get(extension.lower())
    if mime is None:
        raise UnsupportedImageFormatError(path, extension or None)
    return mime


def inline_image(target: str, base_dir: Path, max_size: int = MAX_IMAGE_SIZE) -> EncodedImage:
    """Load a local image and encode it.

    Args:
        target: Image link target as it appears in the rendered Markdown.
        base_dir: Directory relative paths are resolved against.
        max_size: Largest accepted file size in bytes.

    Raises:
        UnsupportedImageFormatError: Missing or unknown file extension.
        ImageNotFoundError: The file cannot be statted or read.
        ImageTooLargeError: The file is larger than ``max_size``.
    """
    path = resolve_image_path(target, base_dir)
    mime = mime_type_for(path)

    try:
        size = path.stat().st_size
    except OSError as e:
        raise ImageNotFoundError(path) from e
    if size > max_size:
        raise ImageTooLargeError(path, size, max_size)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageNotFoundError(path) from e
    # The file may have grown between stat and read
    if len(data) > max_size:
        raise ImageTooLargeError(path, len(data), max_size)

    logger.debug(f"Inlined {path} as {mime} ({len(data)} bytes)")
    return EncodedImage(target=target, mime=mime, data_base64=base64.b64encode(data).decode("ascii"))


def inline_images(
    refs: Iterable[ImageRef],
    base_dir: Path,
    max_size: int = MAX_IMAGE_SIZE,
    max_workers: int = 4,
) -> list[EncodedImage]:
    """Inline every distinct image target once, in first-seen order.

    Reads run in a thread pool; the first failure propagates after the pool
    shuts down, so callers never see a partial result.
    """
    targets = list(dict.fromkeys(ref.target for ref in refs))
    if len(targets) <= 1 or max_workers <= 1:
        return [inline_image(target, base_dir, max_size) for target in targets]

    with ThreadPoolExecutor(max_workers=min(max_workers, len(targets)), thread_name_prefix="docext-img") as pool:
        return list(pool.map(lambda target: inline_image(target, base_dir, max_size), targets))
