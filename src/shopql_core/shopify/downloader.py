"""Download a bulk operation result file to a local temp file."""
import asyncio
import logging
import os
import tempfile
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiofiles
import aiofiles.os
import aiohttp

from .exceptions import ShopifyTimeoutError
from .graphql_client import error_for_status


logger = logging.getLogger(__name__)

FILE_CHUNK_SIZE_BYTES = 64 * 1024

# No total cap; only connect and per-read stalls time out
DOWNLOAD_TIMEOUT = aiohttp.ClientTimeout(total=None, sock_connect=30, sock_read=300)


@asynccontextmanager
async def download_to_tempfile(
    session: aiohttp.ClientSession,
    url: str,
    chunk_size: int = FILE_CHUNK_SIZE_BYTES,
    logger_instance: Optional[logging.Logger] = None,
) -> AsyncIterator[str]:
    """Stream `url` into a temp JSONL file and yield its path.

    The file is removed when the block exits, whether the download, the
    caller's parsing, or the surrounding task failed. No retries are made
    here; transport failures propagate as ShopifyApiError subclasses.
    """
    log = logger_instance or logger
    temp_path = os.path.join(
        tempfile.gettempdir(), f"shopql_bulk_result_{uuid.uuid4().hex}.jsonl"
    )
    try:
        size = await _download(session, url, temp_path, chunk_size)
        log.info("Downloaded bulk result: bytes=%s, path=%s", size, temp_path)
        yield temp_path
    finally:
        await _remove_file_best_effort(temp_path, log)


async def _download(
    session: aiohttp.ClientSession,
    url: str,
    path: str,
    chunk_size: int,
) -> int:
    size = 0
    try:
        async with session.get(url, timeout=DOWNLOAD_TIMEOUT) as resp:
            if resp.status >= 400:
                body = await resp.text()
                raise error_for_status(
                    resp.status,
                    f"Bulk result download failed: HTTP {resp.status}, body={body[:200]}",
                )

            async with aiofiles.open(path, mode="wb") as f:
                async for chunk in resp.content.iter_chunked(chunk_size):
                    await f.write(chunk)
                    size += len(chunk)
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise ShopifyTimeoutError(f"Bulk result download failed: {exc!r}") from exc
    return size


async def _remove_file_best_effort(path: str, log: logging.Logger) -> None:
    """Remove temporary JSONL file with error suppression."""
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        return
    except Exception as exc:
        log.error(f"Failed to remove temp JSONL file: {exc}")
