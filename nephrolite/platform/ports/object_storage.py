from typing import Protocol, runtime_checkable

@runtime_checkable
class ObjectStoragePort(Protocol):
    def put_bytes(self, key: str, data: bytes, content_type: str) -> None: ...
    def get_bytes(self, key: str) -> bytes: ...
    def presign_download(self, key: str, expires_seconds: int = 900) -> str: ...
    def location(self) -> str: ...
