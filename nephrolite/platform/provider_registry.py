from nephrolite.core.config import settings
from nephrolite.platform.ports.object_storage import ObjectStoragePort
from nephrolite.platform.adapters.storage_local import LocalFilesystemStorage

class ProviderRegistry:
    _object_storage: ObjectStoragePort | None = None

    @classmethod
    def object_storage(cls) -> ObjectStoragePort:
        if cls._object_storage is None:
            if settings.OBJECT_STORAGE_PROVIDER == "s3":
                from nephrolite.platform.adapters.storage_s3 import S3Storage
                cls._object_storage = S3Storage()
            else:
                cls._object_storage = LocalFilesystemStorage(settings.LOCAL_STORAGE_ROOT)
        return cls._object_storage

    @classmethod
    def use_object_storage(cls, storage: ObjectStoragePort | None) -> None:
        # swap the adapter (tests, one-off scripts); None resets to settings
        cls._object_storage = storage

registry = ProviderRegistry()
