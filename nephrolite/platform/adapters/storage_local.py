import os
from urllib.parse import quote
from nephrolite.platform.ports.object_storage import ObjectStoragePort
from nephrolite.core.config import settings

class LocalFilesystemStorage(ObjectStoragePort):
    def __init__(self, root: str | None = None):
        self.root = os.path.abspath(root or settings.LOCAL_STORAGE_ROOT)
        os.makedirs(self.root, exist_ok=True)

    def _path(self, key: str) -> str:
        safe = key.strip("/").replace("..", "")
        return os.path.join(self.root, safe)

    def presign_download(self, key: str, expires_seconds: int = 900) -> str:
        # local files are not served; hand back a file URL for operators
        return f"file://{quote(self._path(key))}"

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)

    def get_bytes(self, key: str) -> bytes:
        with open(self._path(key), "rb") as f:
            return f.read()

    def location(self) -> str:
        return self.root
