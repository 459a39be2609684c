from django.apps import AppConfig
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


class CoreBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core_backend"

    blob_storage = None
    qr_renderer = None

    def ready(self):
        """
        Build process-wide collaborators once Django has loaded settings.
        """
        from core_backend.infrastructure.blob_storage import BlobStorageClient
        from core_backend.infrastructure.qr_codes import load_renderer

        self.blob_storage = BlobStorageClient.from_settings(settings.BLOB_STORAGE)
        logger.debug(f"Blob storage ready at {settings.BLOB_STORAGE['ROOT']}")

        self.qr_renderer = load_renderer(settings.QR_CODE_RENDERER)
        if self.qr_renderer is None:
            logger.info("No QR code renderer configured; self-ordering QR images are disabled")
