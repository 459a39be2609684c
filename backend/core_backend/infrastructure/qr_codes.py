"""
QR code rendering for self-ordering sales points.

Rendering is pluggable: ``settings.QR_CODE_RENDERER`` names a callable that
takes the target URL and returns PNG bytes. With no renderer configured,
sales points are created without a QR image.
"""
from django.apps import apps
from django.utils.module_loading import import_string


def load_renderer(dotted_path):
    if not dotted_path:
        return None
    return import_string(dotted_path)


def get_qr_renderer():
    """Return the renderer loaded at startup by the core_backend app config."""
    return apps.get_app_config("core_backend").qr_renderer
