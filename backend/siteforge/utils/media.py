from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from pathlib import Path

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from werkzeug.utils import secure_filename

from siteforge.errors import StorageError, ValidationError

ALLOWED_EXTENSIONS = {
    'png', 'jpg', 'jpeg', 'gif', 'webp', 'svg',
    'mp4', 'mov', 'avi', 'webm',
    'pdf',
}


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def build_key(tenant_slug: str, filename: str, folder: str | None = None) -> str:
    """
    Object key for an upload: ``<tenant_slug>/<folder>/<uuid>.<ext>``.
    The client-supplied name only contributes its extension.
    """
    if not allowed_file(filename):
        raise ValidationError("File type not allowed")

    ext = secure_filename(filename).rsplit('.', 1)[1].lower()
    parts = [tenant_slug]
    if folder:
        parts.extend(p for p in (secure_filename(s) for s in folder.split('/')) if p)
    parts.append(f"{uuid.uuid4().hex}.{ext}")
    return "/".join(parts)


def key_belongs_to_tenant(key: str, tenant_slug: str) -> bool:
    normalized = key.lstrip('/')
    return normalized.startswith(f"{tenant_slug}/") and '..' not in normalized.split('/')


class Storage:
    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def url_for(self, key: str) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class LocalStorage(Storage):
    root: Path

    def _path(self, key: str) -> Path:
        safe_key = key.lstrip("/").replace("\\", "/")
        return self.root / safe_key

    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        p = self._path(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except OSError as exc:
            current_app.logger.error(f"Failed to delete file {key}: {exc}")
            raise StorageError(f"Failed to delete file: {exc}") from exc

    def url_for(self, key: str) -> str:
        return f"/{self.root.name}/{key.lstrip('/')}"


@dataclass(frozen=True)
class S3Storage(Storage):
    endpoint: str
    region: str
    bucket: str
    access_key_id: str
    secret_access_key: str

    def _client(self):
        return boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
        )

    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        extra: dict[str, object] = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            self._client().put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload file: {exc}") from exc

    def exists(self, key: str) -> bool:
        try:
            self._client().head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError:
            return False

    def delete(self, key: str) -> None:
        try:
            self._client().delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            current_app.logger.error(f"Failed to delete object {key}: {exc}")
            raise StorageError(f"Failed to delete file: {exc}") from exc

    def url_for(self, key: str) -> str:
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"


def storage_from_config(config) -> Storage:
    backend = (config.get("STORAGE_BACKEND") or "local").strip().lower()
    if backend == "s3":
        return S3Storage(
            endpoint=(config.get("S3_ENDPOINT") or "").strip(),
            region=(config.get("S3_REGION") or "us-east-1").strip(),
            bucket=(config.get("S3_BUCKET") or "").strip(),
            access_key_id=(config.get("S3_ACCESS_KEY_ID") or "").strip(),
            secret_access_key=(config.get("S3_SECRET_ACCESS_KEY") or "").strip(),
        )
    # default local
    folder = config.get("UPLOAD_FOLDER") or "uploads"
    root = Path(folder) if os.path.isabs(folder) else Path(os.getcwd()) / folder
    return LocalStorage(root=root)


def get_storage() -> Storage:
    return storage_from_config(current_app.config)
