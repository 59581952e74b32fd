"""
Local filesystem blob store for uploaded documents
"""
import time
import uuid
from pathlib import Path

from fastapi import Request
import structlog

logger = structlog.get_logger()

# Most filesystems cap a single path component at 255 bytes
MAX_FILENAME_BYTES = 255
MAX_EXTENSION_BYTES = 16


def _truncate(text: str, max_bytes: int) -> str:
    return text.encode("utf-8")[: max(max_bytes, 0)].decode("utf-8", "ignore")


class LocalFileStorage:
    """Writes raw bytes under ``root`` and hands back the stored path"""

    def __init__(self, root: str):
        self.root = Path(root)

    @staticmethod
    def build_filename(candidate_id: int, original_name: str) -> str:
        """``{timestamp}-{candidateId}-{randomToken}-{originalBaseName}{extension}``"""
        original = Path(original_name or "").name  # drop any client-side directories
        suffix = Path(original).suffix
        base_name = original[: len(original) - len(suffix)] if suffix else original
        extension = _truncate(suffix, MAX_EXTENSION_BYTES)
        timestamp = int(time.time() * 1000)
        token = uuid.uuid4().hex[:13]
        prefix = f"{timestamp}-{candidate_id}-{token}-"
        base_name = _truncate(
            base_name, MAX_FILENAME_BYTES - len(prefix.encode("utf-8")) - len(extension.encode("utf-8"))
        )
        return f"{prefix}{base_name}{extension}"

    def save(self, filename: str, content: bytes) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.root / filename
        with open(path, "wb") as f:
            f.write(content)
        logger.info("file_stored", path=str(path), size=len(content))
        return str(path)

    def delete(self, path: str) -> bool:
        """Remove a stored file; a file that is already gone is not an error"""
        try:
            Path(path).unlink()
        except FileNotFoundError:
            logger.warning("file_already_removed", path=path)
            return False
        logger.info("file_removed", path=path)
        return True


def get_storage(request: Request) -> LocalFileStorage:
    return request.app.state.storage
