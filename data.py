import asyncio
import base64
import binascii
from datetime import datetime
import logging
from pathlib import Path
import re
from typing import Any, Callable, TypeVar


logger = logging.getLogger(__name__)


T = TypeVar("T")


SUFFIXES = {"image/png": ".png", "image/jpeg": ".jpg", "image/webp": ".webp"}


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run blocking IO in a thread, yielding to the loop either side."""
    await asyncio.sleep(0)
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    finally:
        await asyncio.sleep(0)


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "untitled"


def image_filename(subject: str, now: datetime, suffix: str = ".png") -> str:
    return f"{slugify(subject)}_{now.strftime('%Y%m%d-%H%M%S')}{suffix}"


def _write(path: Path, data: bytes) -> Path:
    """Write to `path` or, if taken, the first free `<stem>-<n><suffix>`."""
    path.parent.mkdir(parents=True, exist_ok=True)
    candidate, n = path, 0
    while True:
        try:
            # Exclusive create: never replace another run's image.
            with open(candidate, "xb") as f:
                f.write(data)
            return candidate
        except FileExistsError:
            n += 1
            candidate = path.with_name(f"{path.stem}-{n}{path.suffix}")


async def save_image(
    image: bytes | str,
    *,
    subject: str,
    output_dir: Path,
    mime_type: str = "image/png",
    now: datetime | None = None,
) -> Path:
    """Write one image to `output_dir`, creating it if needed.

    `image` is raw bytes or base64 text as returned by the images API.
    """
    if isinstance(image, str):
        try:
            image = base64.b64decode(image, validate=True)
        except binascii.Error as e:
            raise ValueError("Image data is not valid base64.") from e

    now = datetime.now() if now is None else now
    path = output_dir / image_filename(subject, now, SUFFIXES.get(mime_type, ".png"))
    path = await run_blocking(_write, path, image)
    logger.info("Saved image to %s", path)
    return path
