"""
本地文件系统存储适配器
文件读写放到线程池执行，避免阻塞事件循环
"""

import asyncio
import mimetypes
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Any, Dict, Optional, Union

from app.core.log_utils import get_logger
from app.core.storage.base_storage import BaseStorage
from app.core.storage.exceptions import (
    DeleteError,
    DownloadError,
    InvalidKeyError,
    UploadError,
)
from app.core.storage.models import DownloadResult, UploadResult

logger = get_logger(__name__)


class LocalStorage(BaseStorage):
    """本地存储适配器，key 为相对于 base_dir 的路径"""

    ADAPTER_NAME = "local"

    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def resolve_path(self, key: str) -> Path:
        """将存储键转换为绝对路径，禁止越出 base_dir"""
        path = (self.base_dir / key).resolve()
        if path == self.base_dir or self.base_dir not in path.parents:
            raise InvalidKeyError(key)
        return path

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args))

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def upload(
        self,
        data: bytes,
        key: str,
        mime_type: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> UploadResult:
        path = self.resolve_path(key)
        try:
            await self._run(self._write, path, data)
        except OSError as e:
            logger.error("本地文件写入失败", storage_key=key, exception=e)
            raise UploadError(f"写入文件失败: {e}", details={"key": key}) from e

        logger.info("本地文件写入成功", storage_key=key, size_bytes=len(data))
        return UploadResult(
            key=key,
            url=path.as_uri(),
            size=len(data),
            mime_type=mime_type,
            uploaded_at=datetime.now(timezone.utc)
        )

    async def download(self, key: str) -> DownloadResult:
        path = self.resolve_path(key)
        try:
            data = await self._run(path.read_bytes)
            stat = await self._run(path.stat)
        except FileNotFoundError as e:
            raise DownloadError(f"文件不存在: {key}", details={"key": key}) from e
        except OSError as e:
            logger.error("本地文件读取失败", storage_key=key, exception=e)
            raise DownloadError(f"读取文件失败: {e}", details={"key": key}) from e

        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return DownloadResult(
            data=data,
            size=len(data),
            mime_type=mime_type,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
        )

    async def delete(self, key: str) -> bool:
        path = self.resolve_path(key)
        if not path.exists():
            return False
        try:
            await self._run(path.unlink)
        except OSError as e:
            logger.error("本地文件删除失败", storage_key=key, exception=e)
            raise DeleteError(f"删除文件失败: {e}", details={"key": key}) from e
        logger.info("本地文件已删除", storage_key=key)
        return True

    async def exists(self, key: str) -> bool:
        return self.resolve_path(key).is_file()
