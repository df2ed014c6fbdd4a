"""Application capture – fingerprinting, materialisation, scanning and the change listener."""
from cellex_inbox.application.capture.fingerprint import FingerprintDeduplicator, fingerprint, item_quantity
from cellex_inbox.application.capture.listener import CaptureListener
from cellex_inbox.application.capture.materializer import EntryMaterializer
from cellex_inbox.application.capture.scanner import CartScanner
from cellex_inbox.application.capture.users import StorageUserRegistry

__all__ = [
    "CaptureListener",
    "CartScanner",
    "EntryMaterializer",
    "FingerprintDeduplicator",
    "StorageUserRegistry",
    "fingerprint",
    "item_quantity",
]
