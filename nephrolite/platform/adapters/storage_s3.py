import boto3
from botocore.client import Config
from nephrolite.platform.ports.object_storage import ObjectStoragePort
from nephrolite.core.config import settings

class S3Storage(ObjectStoragePort):
    def __init__(self):
        session = boto3.session.Session(
            aws_access_key_id=settings.S3_ACCESS_KEY,
            aws_secret_access_key=settings.S3_SECRET_KEY,
            region_name=settings.S3_REGION,
        )
        self.s3 = session.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            config=Config(signature_version="s3v4"),
        )
        self.bucket = settings.S3_BUCKET

    def presign_download(self, key: str, expires_seconds: int = 900) -> str:
        return self.s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_seconds,
        )

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        self.s3.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)

    def get_bytes(self, key: str) -> bytes:
        obj = self.s3.get_object(Bucket=self.bucket, Key=key)
        return obj["Body"].read()

    def location(self) -> str:
        return f"s3://{self.bucket}"
