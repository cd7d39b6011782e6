import io

import boto3
import pytest
from botocore.exceptions import ClientError

from upload_gateway.config import StorageConfig
from upload_gateway.infrastructure.media_storage import S3MediaStorage
from upload_gateway.ingest.ingest_errors import StorageWriteError


class RecordingS3Client:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict] = []
        self._error = error

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return {"ETag": '"abc"'}


@pytest.mark.asyncio
async def test_put_object_maps_arguments():
    client = RecordingS3Client()
    storage = S3MediaStorage(StorageConfig(bucket="media", region="us-east-1"), client=client)

    body = io.BytesIO(b"png")

    await storage.put_object(
        key="uploads/images/t-a.png",
        body=body,
        content_type="image/png",
        content_disposition='attachment; filename="a.png"',
        metadata={"originalName": "a.png", "contentType": "image"},
    )

    assert client.calls == [
        {
            "Bucket": "media",
            "Key": "uploads/images/t-a.png",
            "Body": body,
            "ContentType": "image/png",
            "ContentDisposition": 'attachment; filename="a.png"',
            "Metadata": {"originalName": "a.png", "contentType": "image"},
        }
    ]


@pytest.mark.asyncio
async def test_client_error_becomes_storage_write_error():
    error = ClientError({"Error": {"Code": "NoSuchBucket", "Message": "missing"}}, "PutObject")
    storage = S3MediaStorage(
        StorageConfig(bucket="media", region="us-east-1"),
        client=RecordingS3Client(error),
    )

    with pytest.raises(StorageWriteError):
        await storage.put_object(
            key="k",
            body=io.BytesIO(b""),
            content_type="text/plain",
            content_disposition='attachment; filename="k"',
            metadata={},
        )


def test_client_is_created_lazily_with_region_and_endpoint(monkeypatch):
    created: list[tuple[str, dict]] = []

    def fake_client(service_name, **kwargs):
        created.append((service_name, kwargs))
        return RecordingS3Client()

    monkeypatch.setattr(boto3, "client", fake_client)
    storage = S3MediaStorage(
        StorageConfig(bucket="media", region="eu-central-1", endpoint_url="http://minio:9000")
    )

    assert created == []
    storage._get_client()
    storage._get_client()

    assert created == [
        ("s3", {"region_name": "eu-central-1", "endpoint_url": "http://minio:9000"})
    ]
