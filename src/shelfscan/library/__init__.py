"""Library discovery: root index, manifests and inventory aggregation."""

from .index_reader import IndexFormatError, IndexReading, read_index
from .manifest_reader import ManifestError, ManifestResult, read_manifest
from .models import Inventory, ItemRecord, LibraryRoot, ScanResult, ScanWarning, WarningKind
from .scanner import LibraryScanError, LibraryScanner, scan

__all__ = [
    "IndexFormatError",
    "IndexReading",
    "Inventory",
    "ItemRecord",
    "LibraryRoot",
    "LibraryScanError",
    "LibraryScanner",
    "ManifestError",
    "ManifestResult",
    "ScanResult",
    "ScanWarning",
    "WarningKind",
    "read_index",
    "read_manifest",
    "scan",
]
