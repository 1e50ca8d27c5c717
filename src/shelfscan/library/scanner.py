"""Inventory aggregation over every library root of a root index."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from pathlib import Path, PurePath
from typing import Callable, Iterable

from shelfscan.keyvalues.parser import ParseError, ParseResult, parse
from shelfscan.library.files import MANIFEST_PATTERN, list_manifest_files, read_document
from shelfscan.library.index_reader import IndexFormatError, read_index
from shelfscan.library.manifest_reader import ManifestError, read_manifest
from shelfscan.library.models import LibraryRoot, ScanResult, ScanWarning, WarningKind
from shelfscan.library.paths import manifest_directory

logger = logging.getLogger(__name__)

ReadFile = Callable[[str | Path], str]
ListFiles = Callable[[PurePath, str], Iterable[str | PurePath]]


@dataclass(slots=True)
class LibraryScanError(Exception):
    """The root index itself could not be read, so there is nothing to scan."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class _LoadedManifest:
    path: str
    parsed: ParseResult | None = None
    error: ScanWarning | None = None


def _parse_warnings(result: ParseResult, path: str) -> list[ScanWarning]:
    return [
        ScanWarning(kind=WarningKind.PARSE_FAULT, message=str(diagnostic), path=path)
        for diagnostic in result.diagnostics
    ]


class LibraryScanner:
    """Walk library roots and fold manifests into one inventory."""

    def __init__(
        self,
        *,
        read_file: ReadFile = read_document,
        list_files: ListFiles = list_manifest_files,
        pattern: str = MANIFEST_PATTERN,
        strict: bool = False,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._read_file = read_file
        self._list_files = list_files
        self._pattern = pattern
        self._strict = strict
        self._max_workers = max_workers

    def scan(self, index_path: str | Path) -> ScanResult:
        source = Path(index_path)
        try:
            text = self._read_file(source)
        except OSError as exc:
            raise LibraryScanError(source, f"Failed to read root index: {exc}") from exc

        result = ScanResult(index_path=str(source))
        parsed = self._parse(text, str(source), result.warnings)
        if parsed is None:
            return result

        try:
            reading = read_index(parsed.root, source=str(source))
        except IndexFormatError as exc:
            self._warn(result, ScanWarning(kind=WarningKind.PARSE_FAULT, message=str(exc), path=str(source)))
            return result

        for warning in reading.warnings:
            self._warn(result, warning)
        result.roots = reading.roots

        for root in reading.roots:
            self._scan_root(root, result)

        logger.info(
            "Scanned %d library root(s): %d item(s), %d warning(s)",
            len(result.roots),
            len(result.inventory),
            len(result.warnings),
        )
        return result

    def _parse(self, text: str, path: str, sink: list[ScanWarning]) -> ParseResult | None:
        try:
            parsed = parse(text, strict=self._strict)
        except ParseError as exc:
            warning = ScanWarning(kind=WarningKind.PARSE_FAULT, message=str(exc), path=path)
            logger.warning("%s", warning.message)
            sink.append(warning)
            return None

        for warning in _parse_warnings(parsed, path):
            logger.warning("Recovered parse fault in %s: %s", path, warning.message)
            sink.append(warning)
        return parsed

    def _warn(self, result: ScanResult, warning: ScanWarning) -> None:
        logger.warning("%s: %s (%s)", warning.kind.value, warning.message, warning.path or "-")
        result.warnings.append(warning)

    def _list_manifests(self, root: LibraryRoot, result: ScanResult) -> list[str]:
        directory = manifest_directory(root.location)
        try:
            return [str(path) for path in self._list_files(directory, self._pattern)]
        except OSError as exc:
            self._warn(
                result,
                ScanWarning(
                    kind=WarningKind.IO_FAULT,
                    message=f"Failed to list manifests: {exc}",
                    path=str(directory),
                ),
            )
            return []

    def _load(self, manifest_path: str) -> _LoadedManifest:
        try:
            text = self._read_file(manifest_path)
        except OSError as exc:
            return _LoadedManifest(
                path=manifest_path,
                error=ScanWarning(
                    kind=WarningKind.IO_FAULT,
                    message=f"Failed to read manifest: {exc}",
                    path=manifest_path,
                ),
            )

        try:
            return _LoadedManifest(path=manifest_path, parsed=parse(text, strict=self._strict))
        except ParseError as exc:
            return _LoadedManifest(
                path=manifest_path,
                error=ScanWarning(kind=WarningKind.PARSE_FAULT, message=str(exc), path=manifest_path),
            )

    def _load_all(self, paths: list[str]) -> list[_LoadedManifest]:
        if self._max_workers == 1 or len(paths) < 2:
            return [self._load(path) for path in paths]
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            return list(pool.map(self._load, paths))

    def _scan_root(self, root: LibraryRoot, result: ScanResult) -> None:
        manifest_paths = self._list_manifests(root, result)
        logger.debug("Found %d manifest(s) under %s", len(manifest_paths), root.path)

        # Reading and parsing may run in parallel; folding stays sequential.
        for loaded in self._load_all(manifest_paths):
            if loaded.error is not None or loaded.parsed is None:
                if loaded.error is not None:
                    self._warn(result, loaded.error)
                continue

            for warning in _parse_warnings(loaded.parsed, loaded.path):
                self._warn(result, warning)

            try:
                manifest = read_manifest(loaded.parsed.root, path=loaded.path, library_path=root.path)
            except ManifestError as exc:
                self._warn(
                    result,
                    ScanWarning(kind=WarningKind.VALIDATION_FAULT, message=str(exc), path=loaded.path),
                )
                continue

            for warning in manifest.warnings:
                self._warn(result, warning)

            record = manifest.record
            previous = result.inventory.get(record.app_id)
            if previous is not None:
                self._warn(
                    result,
                    ScanWarning(
                        kind=WarningKind.COLLISION,
                        message=(
                            f"App {record.app_id} found again under {root.path}; "
                            f"replacing record from {previous.library_path}"
                        ),
                        path=loaded.path,
                        app_id=record.app_id,
                    ),
                )
            result.inventory[record.app_id] = record


def scan(
    index_path: str | Path,
    *,
    list_manifest_files: ListFiles = list_manifest_files,
    read_file: ReadFile = read_document,
    pattern: str = MANIFEST_PATTERN,
    strict: bool = False,
    max_workers: int = 1,
) -> ScanResult:
    """Scan every library root named by the root index at *index_path*.

    Only an unreadable root index raises (:class:`LibraryScanError`); every
    other fault is recorded in ``ScanResult.warnings`` and the scan goes on.
    """

    scanner = LibraryScanner(
        read_file=read_file,
        list_files=list_manifest_files,
        pattern=pattern,
        strict=strict,
        max_workers=max_workers,
    )
    return scanner.scan(index_path)
