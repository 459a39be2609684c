"""
Blob storage client for uploaded images.

The client is built once at startup from ``settings.BLOB_STORAGE`` (see
``CoreBackendConfig.ready``) and handed to the services that need it. Nothing
here touches module-level credentials.
"""
import logging
import uuid
from urllib.parse import urlparse

from django.apps import apps
from django.core.files.base import ContentFile
from django.core.files.storage import FileSystemStorage

logger = logging.getLogger(__name__)


class BlobStorageClient:
    """
    Stores blobs under ``<root>/<folder>/<name>`` and returns durable URLs.

    Args:
        storage: any Django ``Storage`` implementation
        base_url: URL prefix the storage serves files from
    """

    def __init__(self, storage, base_url):
        self.storage = storage
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"

    @classmethod
    def from_settings(cls, config):
        storage = FileSystemStorage(location=config["ROOT"], base_url=config["BASE_URL"])
        return cls(storage=storage, base_url=config["BASE_URL"])

    def upload(self, content, folder, filename=None):
        """
        Upload ``content`` (bytes or a Django File) into ``folder``.

        Returns:
            The public URL of the stored blob.
        """
        name = filename or uuid.uuid4().hex
        if isinstance(content, bytes):
            content = ContentFile(content)
        path = self.storage.save(f"{folder.strip('/')}/{name}", content)
        url = self.storage.url(path)
        logger.info(f"Uploaded blob to {path}")
        return url

    def path_from_url(self, url):
        """Extract the storage path a URL points to, or None if it is foreign."""
        if not url:
            return None
        url_path = urlparse(url).path
        base_path = urlparse(self.base_url).path
        if not url_path.startswith(base_path):
            return None
        return url_path[len(base_path):]

    def delete(self, url):
        """
        Delete the blob behind ``url``.

        Returns:
            True when a blob was removed, False when the URL is not ours or
            the blob was already gone.
        """
        path = self.path_from_url(url)
        if not path or not self.storage.exists(path):
            logger.warning(f"Blob delete skipped, nothing stored for {url}")
            return False
        self.storage.delete(path)
        logger.info(f"Deleted blob {path}")
        return True


def get_blob_storage():
    """Return the client created at startup by the core_backend app config."""
    return apps.get_app_config("core_backend").blob_storage
