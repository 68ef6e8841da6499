"""Unit coverage for bracket configuration discovery and parsing utilities."""

from __future__ import annotations

from pathlib import Path
from shutil import copy2

import pytest
import yaml

from salarytax.backend.config import year_config
from salarytax.backend.config.schema import ConfigurationError


@pytest.fixture()
def isolated_config_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Return a temporary configuration directory patched into ``year_config``."""

    original_directory = year_config.CONFIG_DIRECTORY
    for filename in ("2019.yaml", "2020.yaml", "2021.yaml", "2022.yaml"):
        copy2(original_directory / filename, tmp_path / filename)

    manifest_path = tmp_path / "manifest.yaml"
    copy2(original_directory / "manifest.yaml", manifest_path)

    monkeypatch.setattr(year_config, "CONFIG_DIRECTORY", tmp_path)
    monkeypatch.setattr(year_config, "MANIFEST_FILE", manifest_path)
    year_config.load_year_brackets.cache_clear()
    year_config.load_manifest.cache_clear()

    yield tmp_path

    year_config.load_year_brackets.cache_clear()
    year_config.load_manifest.cache_clear()


def _append_manifest_entry(directory: Path, entry: dict[str, object]) -> None:
    manifest_path = directory / "manifest.yaml"
    manifest = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    manifest.setdefault("years", []).append(entry)
    manifest_path.write_text(yaml.safe_dump(manifest, sort_keys=False), encoding="utf-8")
    year_config.load_manifest.cache_clear()


def test_available_years_match_manifest() -> None:
    assert tuple(year_config.available_years()) == (2019, 2020, 2021, 2022)


def test_available_years_discovers_new_manifest_entry(
    isolated_config_directory: Path,
) -> None:
    new_year_path = isolated_config_directory / "2023.yaml"
    new_year_path.write_text(
        (isolated_config_directory / "2022.yaml").read_text(encoding="utf-8").replace(
            "year: 2022", "year: 2023"
        ),
        encoding="utf-8",
    )
    _append_manifest_entry(isolated_config_directory, {"year": 2023})

    assert year_config.available_years() == (2019, 2020, 2021, 2022, 2023)
    assert year_config.load_year_brackets(2023).year == 2023


def test_load_year_brackets_parses_open_ended_top_band() -> None:
    configuration = year_config.load_year_brackets(2021)

    assert configuration.currency == "CAD"
    assert len(configuration.tax_brackets) == 5
    assert configuration.tax_brackets[0].lower_bound == 0
    assert configuration.tax_brackets[0].upper_bound == 49_020
    assert configuration.tax_brackets[-1].upper_bound is None
    assert configuration.tax_brackets[-1].rate == pytest.approx(0.33)


def test_load_year_brackets_rejects_undeclared_year() -> None:
    with pytest.raises(FileNotFoundError, match="not declared"):
        year_config.load_year_brackets(1999)


def test_load_year_brackets_reports_missing_file(isolated_config_directory: Path) -> None:
    _append_manifest_entry(isolated_config_directory, {"year": 2024, "filename": "absent.yaml"})

    with pytest.raises(FileNotFoundError, match="absent.yaml"):
        year_config.load_year_brackets(2024)


def test_load_year_brackets_rejects_year_mismatch(isolated_config_directory: Path) -> None:
    (isolated_config_directory / "2023.yaml").write_text(
        "year: 2021\ntax_brackets:\n  - {min: 0, rate: 0.1}\n", encoding="utf-8"
    )
    _append_manifest_entry(isolated_config_directory, {"year": 2023})

    with pytest.raises(ConfigurationError, match="mismatch"):
        year_config.load_year_brackets(2023)


def test_load_year_brackets_rejects_invalid_schema(isolated_config_directory: Path) -> None:
    (isolated_config_directory / "2023.yaml").write_text(
        "tax_brackets:\n  - {min: 0, rate: 0.1, ceiling: 5}\n", encoding="utf-8"
    )
    _append_manifest_entry(isolated_config_directory, {"year": 2023})

    with pytest.raises(ConfigurationError, match="validation failed"):
        year_config.load_year_brackets(2023)


def test_manifest_rejects_duplicate_years(isolated_config_directory: Path) -> None:
    _append_manifest_entry(isolated_config_directory, {"year": 2022})

    with pytest.raises(ConfigurationError, match="Duplicate year 2022"):
        year_config.load_manifest()


def test_manifest_rejects_inverted_limits(isolated_config_directory: Path) -> None:
    manifest_path = isolated_config_directory / "manifest.yaml"
    manifest = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    manifest["limits"] = {"min_income": 100, "max_income": 10}
    manifest_path.write_text(yaml.safe_dump(manifest), encoding="utf-8")
    year_config.load_manifest.cache_clear()

    with pytest.raises(ConfigurationError, match="Maximum income"):
        year_config.load_manifest()


def test_validation_policy_comes_from_manifest() -> None:
    policy = year_config.load_validation_policy()

    assert policy.min_income == 0
    assert policy.max_income == 10_000_000


def test_manifest_entries_resolve_default_filenames() -> None:
    filenames = [entry.resolved_filename for entry in year_config.manifest_entries()]

    assert filenames == ["2019.yaml", "2020.yaml", "2021.yaml", "2022.yaml"]
