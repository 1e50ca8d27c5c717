from __future__ import annotations

from pathlib import Path, PurePath

import pytest

from shelfscan.library.models import WarningKind
from shelfscan.library.scanner import LibraryScanError, scan


def _manifest(app_id: int, name: str, installdir: str | None = None) -> str:
    return (
        '"AppState"\n{\n'
        f'  "appid"  "{app_id}"\n'
        f'  "name"  "{name}"\n'
        f'  "installdir"  "{installdir or name}"\n'
        '  "StateFlags"  "4"\n'
        "}\n"
    )


def _library(root: Path, manifests: dict[int, str]) -> None:
    steamapps = root / "steamapps"
    steamapps.mkdir(parents=True)
    for app_id, text in manifests.items():
        (steamapps / f"appmanifest_{app_id}.acf").write_text(text, encoding="utf-8")


def _index(path: Path, roots: list[Path]) -> Path:
    entries = "".join(
        f'  "{ordinal}"\n  {{\n    "path"  "{root.as_posix()}"\n  }}\n' for ordinal, root in enumerate(roots)
    )
    path.write_text(f'"libraryfolders"\n{{\n{entries}}}\n', encoding="utf-8")
    return path


def test_scan_collects_items_from_every_root(tmp_path: Path) -> None:
    first = tmp_path / "steam"
    second = tmp_path / "library"
    _library(first, {220: _manifest(220, "Half-Life 2")})
    _library(second, {1091500: _manifest(1091500, "Cyberpunk 2077")})
    index = _index(tmp_path / "libraryfolders.vdf", [first, second])

    result = scan(index)

    assert result.warnings == []
    assert sorted(result.inventory) == [220, 1091500]
    assert result.inventory[220].library_path == first.as_posix()
    assert result.inventory[1091500].search_key == "cyberpunk 2077"
    assert [root.path for root in result.roots] == [first.as_posix(), second.as_posix()]


def test_duplicate_app_id_last_root_wins_with_collision_warning(tmp_path: Path) -> None:
    first = tmp_path / "steam"
    second = tmp_path / "library"
    _library(first, {220: _manifest(220, "Half-Life 2", "old")})
    _library(second, {220: _manifest(220, "Half-Life 2", "new")})
    index = _index(tmp_path / "libraryfolders.vdf", [first, second])

    result = scan(index)

    assert list(result.inventory) == [220]
    assert result.inventory[220].install_dir == "new"
    collisions = result.warnings_of(WarningKind.COLLISION)
    assert len(collisions) == 1
    assert collisions[0].app_id == 220
    assert len(result.warnings) == 1


def test_corrupt_manifest_does_not_stop_scan(tmp_path: Path) -> None:
    root = tmp_path / "steam"
    _library(
        root,
        {
            10: '"AppState"\n{\n  "appid" "10"\n  "name" "CounterStrike"\n  "installdir" "Counter\n}\n',
            20: '"AppState"\n{\n  "name" "No Id"\n}\n',
            220: _manifest(220, "Half-Life 2"),
        },
    )
    index = _index(tmp_path / "libraryfolders.vdf", [root])

    result = scan(index)

    assert sorted(result.inventory) == [10, 220]
    assert result.inventory[10].name == "CounterStrike"
    assert len(result.warnings_of(WarningKind.PARSE_FAULT)) == 1
    validation = result.warnings_of(WarningKind.VALIDATION_FAULT)
    assert len(validation) == 1
    assert validation[0].path is not None and validation[0].path.endswith("appmanifest_20.acf")


def test_missing_library_directory_is_an_io_warning(tmp_path: Path) -> None:
    present = tmp_path / "steam"
    _library(present, {220: _manifest(220, "Half-Life 2")})
    index = _index(tmp_path / "libraryfolders.vdf", [tmp_path / "unplugged", present])

    result = scan(index)

    assert list(result.inventory) == [220]
    io_faults = result.warnings_of(WarningKind.IO_FAULT)
    assert len(io_faults) == 1
    assert "unplugged" in (io_faults[0].path or "")


def test_unreadable_root_index_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(LibraryScanError) as excinfo:
        scan(tmp_path / "missing.vdf")

    assert excinfo.value.path == tmp_path / "missing.vdf"


def test_index_without_library_block_returns_empty_inventory(tmp_path: Path) -> None:
    index = tmp_path / "libraryfolders.vdf"
    index.write_text('"libraryfolders" "none"\n', encoding="utf-8")

    result = scan(index)

    assert result.inventory == {}
    assert [warning.kind for warning in result.warnings] == [WarningKind.PARSE_FAULT]


def test_scan_uses_supplied_capabilities() -> None:
    documents = {
        "index.vdf": (
            '"libraryfolders" { "0" { "path" "C:\\\\Steam" "apps" { "220" "1" } } '
            '"1" { "path" "D:\\\\Games" "apps" { "220" "2" } } }'
        ),
        "c/220.acf": _manifest(220, "Half-Life 2", "from-c"),
        "d/220.acf": _manifest(220, "Half-Life 2", "from-d"),
    }
    listings = {"C:\\Steam\\steamapps": ["c/220.acf"], "D:\\Games\\steamapps": ["d/220.acf"]}
    listed: list[tuple[str, str]] = []

    def read_file(path: str | Path) -> str:
        return documents[Path(path).as_posix()]

    def list_files(directory: PurePath, pattern: str) -> list[str]:
        listed.append((str(directory), pattern))
        return listings[str(directory)]

    result = scan("index.vdf", list_manifest_files=list_files, read_file=read_file)

    assert listed == [
        ("C:\\Steam\\steamapps", "appmanifest_*.acf"),
        ("D:\\Games\\steamapps", "appmanifest_*.acf"),
    ]
    assert [root.apps for root in result.roots] == [{"220": "1"}, {"220": "2"}]
    assert result.inventory[220].install_dir == "from-d"
    assert [warning.kind for warning in result.warnings] == [WarningKind.COLLISION]


def test_parallel_scan_matches_sequential_scan(tmp_path: Path) -> None:
    root = tmp_path / "steam"
    _library(root, {app_id: _manifest(app_id, f"Game{app_id}") for app_id in range(1, 13)})
    index = _index(tmp_path / "libraryfolders.vdf", [root])

    sequential = scan(index)
    parallel = scan(index, max_workers=4)

    assert parallel.inventory == sequential.inventory
    assert parallel.warnings == sequential.warnings


def test_strict_scan_drops_malformed_manifest(tmp_path: Path) -> None:
    root = tmp_path / "steam"
    _library(
        root,
        {
            10: '"AppState"\n{\n  "appid" "10"\n  "name" "Broken\n}\n',
            220: _manifest(220, "Half-Life 2"),
        },
    )
    index = _index(tmp_path / "libraryfolders.vdf", [root])

    result = scan(index, strict=True)

    assert list(result.inventory) == [220]
    assert [warning.kind for warning in result.warnings] == [WarningKind.PARSE_FAULT]


def test_invalid_worker_count_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        scan(tmp_path / "libraryfolders.vdf", max_workers=0)


def test_unicode_digit_appid_does_not_abort_scan(tmp_path: Path) -> None:
    root = tmp_path / "steam"
    _library(
        root,
        {
            1: '"AppState"\n{\n  "appid" "²"\n  "name" "Superscript"\n}\n',
            220: _manifest(220, "Half-Life 2"),
        },
    )
    index = _index(tmp_path / "libraryfolders.vdf", [root])

    result = scan(index)

    assert sorted(result.inventory) == [0, 220]
    assert result.inventory[0].name == "Superscript"
    validation = result.warnings_of(WarningKind.VALIDATION_FAULT)
    assert len(validation) == 1
    assert validation[0].path is not None and validation[0].path.endswith("appmanifest_1.acf")


def test_broken_value_line_keeps_item_in_inventory(tmp_path: Path) -> None:
    root = tmp_path / "steam"
    _library(root, {1: '"AppState"\n{\n  "appid" "1"\n  "installdir" "Broken\n  "name" "Good Title"\n}\n'})
    index = _index(tmp_path / "libraryfolders.vdf", [root])

    result = scan(index)

    assert result.inventory[1].name == "Good Title"
    assert result.inventory[1].install_dir is None
    assert [warning.kind for warning in result.warnings] == [WarningKind.PARSE_FAULT]


def test_scan_payload_tolerates_out_of_range_timestamp(tmp_path: Path) -> None:
    root = tmp_path / "steam"
    _library(
        root,
        {220: '"AppState"\n{\n  "appid" "220"\n  "name" "Half-Life 2"\n  "LastUpdated" "99999999999999"\n}\n'},
    )
    index = _index(tmp_path / "libraryfolders.vdf", [root])

    payload = scan(index).to_dict()

    assert payload["items"][0]["last_updated"] == 99999999999999
    assert payload["items"][0]["last_updated_at"] is None
