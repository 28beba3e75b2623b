"""Settings and spec file loading."""

from ucdoc.config.loader import deep_merge, load_document, load_documents
from ucdoc.config.settings import UcdocSettings, load_settings

__all__ = [
    "UcdocSettings",
    "load_settings",
    "deep_merge",
    "load_document",
    "load_documents",
]
