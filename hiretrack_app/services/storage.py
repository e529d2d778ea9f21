"""
Object storage for resumes, job descriptions and payment receipts.

Talks to any S3-compatible endpoint through boto3. Objects are addressed by
(bucket, path); public URLs are built from STORAGE_PUBLIC_URL so links stay
stable regardless of which endpoint served the upload.
"""
import logging
from urllib.parse import quote, unquote
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from werkzeug.utils import secure_filename
from hiretrack_app.models import utcnow
from hiretrack_app.utils.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)


class StorageClient:
    """Thin wrapper over an S3 client with the upload/get_public_url/remove protocol."""

    def __init__(self, s3_client, public_url=None):
        self.s3 = s3_client
        self.public_url = (public_url or '').rstrip('/')

    @classmethod
    def from_config(cls, config):
        s3 = boto3.client(
            's3',
            endpoint_url=config.get('STORAGE_ENDPOINT_URL'),
            region_name=config.get('STORAGE_REGION'),
            aws_access_key_id=config.get('STORAGE_ACCESS_KEY_ID'),
            aws_secret_access_key=config.get('STORAGE_SECRET_ACCESS_KEY'),
        )
        return cls(s3, config.get('STORAGE_PUBLIC_URL') or config.get('STORAGE_ENDPOINT_URL'))

    def upload(self, bucket, path, data, content_type=None):
        """Store bytes at bucket/path. Refuses to overwrite an existing object."""
        extra = {'CacheControl': 'max-age=3600'}
        if content_type:
            extra['ContentType'] = content_type
        try:
            if self._exists(bucket, path):
                raise StorageError(f"Object already exists: {bucket}/{path}")
            self.s3.put_object(Bucket=bucket, Key=path, Body=data, **extra)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Upload to {bucket}/{path} failed: {e}")
            raise StorageError('Failed to upload file')
        logger.info(f"Uploaded {bucket}/{path} ({len(data)} bytes)")
        return path

    def get_public_url(self, bucket, path):
        return f"{self.public_url}/{bucket}/{quote(path)}"

    def remove(self, bucket, paths):
        paths = [p for p in paths if p]
        if not paths:
            return
        try:
            self.s3.delete_objects(
                Bucket=bucket,
                Delete={'Objects': [{'Key': p} for p in paths], 'Quiet': True},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Removing {len(paths)} object(s) from {bucket} failed: {e}")
            raise StorageError('Failed to remove file')

    def path_from_public_url(self, bucket, url):
        """Inverse of get_public_url; None for URLs this storage did not issue."""
        prefix = f"{self.public_url}/{bucket}/"
        if not url or not url.startswith(prefix):
            return None
        return unquote(url[len(prefix):])

    def _exists(self, bucket, path):
        try:
            self.s3.head_object(Bucket=bucket, Key=path)
            return True
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise


def get_storage():
    """Storage client for the current app; tests may install their own under extensions['storage']."""
    storage = current_app.extensions.get('storage')
    if storage is None:
        storage = StorageClient.from_config(current_app.config)
        current_app.extensions['storage'] = storage
    return storage


def file_extension(filename):
    filename = secure_filename(filename or '')
    if '.' not in filename:
        return None
    return filename.rsplit('.', 1)[1].lower()


def check_upload(file, allowed_extensions, field='file'):
    """Validate an uploaded werkzeug FileStorage and return (bytes, extension, filename)."""
    if not file or not file.filename:
        raise ValidationError({field: 'No file selected'})
    ext = file_extension(file.filename)
    if ext not in allowed_extensions:
        raise ValidationError({field: f"Allowed file types: {', '.join(sorted(allowed_extensions))}"})
    data = file.read()
    if not data:
        raise ValidationError({field: 'File is empty'})
    return data, ext, secure_filename(file.filename)


def timestamp_label(now=None):
    now = now or utcnow()
    return now.strftime('%m-%d-%Y %I:%M:%S.%f %p')


def resume_path(applicant_id, ext, now=None):
    now = now or utcnow()
    return f"{applicant_id}_{now.strftime('%Y%m%d%H%M%S%f')}.{ext}"


def receipt_path(applicant, joborder_id, ext, now=None):
    return f"{applicant.first_name} {applicant.last_name} ({applicant.id})/{joborder_id}/{timestamp_label(now)}.{ext}"


def job_description_path(joborder_id, filename, now=None):
    now = now or utcnow()
    stamp = now.strftime('%Y%m%d%H%M%S')
    return f"{joborder_id}/{stamp}_{filename}"


