"""Tests for the catalog validation CLI."""
from __future__ import annotations

from pathlib import Path

from drama_engine.tools import validate_catalog


def test_packaged_catalogs_pass_validation() -> None:
    assert validate_catalog.validate_files(validate_catalog.DEFAULT_FILES) == []


def test_main_reports_success(capsys) -> None:
    assert validate_catalog.main([]) == 0
    assert "passed for 5 file(s)" in capsys.readouterr().out


def test_social_category_with_inverted_range() -> None:
    data = {
        "categories": {
            "feud": {
                "severity": "major",
                "headlines": ["Feud!"],
                "bodies": [""],
                "fan_loyalty": {"min": 5, "max": -5},
                "streaming_multiplier": {"min": 1.0, "max": 1.5},
                "chart_boost": {"min": 0, "max": 5},
                "fame_change": {"min": 0, "max": 5},
                "duration_days": 7,
                "viral_chance": 20,
            }
        }
    }

    errors = validate_catalog.validate_social_drama(Path("dummy.yaml"), data)

    assert any("bodies[0]" in message for message in errors)
    assert any("fan_loyalty.min must not exceed max" in message for message in errors)


def test_trigger_referencing_unknown_preset() -> None:
    data = {
        "presets": {"spat": {"severity": "minor", "delta": {"conflict_index": 5}}},
        "triggers": {"rivalry": [{"preset": "ghost", "weight": 10}]},
    }

    errors = validate_catalog.validate_drama_presets(Path("dummy.yaml"), data)

    assert errors == ["dummy.yaml: triggers.rivalry[0] references unknown preset 'ghost'"]


def test_outlet_with_unknown_tone() -> None:
    data = {"outlets": [{"name": "Pirate Radio", "tone": "shouty", "fame_threshold": 0, "controversy_bias": 5}]}

    errors = validate_catalog.validate_media_outlets(Path("dummy.yaml"), data)

    assert len(errors) == 1
    assert "tone" in errors[0]


def test_resolution_with_non_numeric_delta() -> None:
    errors = validate_catalog.validate_resolutions(
        Path("dummy.yaml"), {"resolutions": {"apologized": {"conflict_index": "lots"}}}
    )

    assert errors == ["dummy.yaml: resolutions.apologized.conflict_index must be numeric"]


def test_main_reports_failures(tmp_path, capsys) -> None:
    broken = tmp_path / "media_outlets.yaml"
    broken.write_text("outlets: []\n", encoding="utf-8")

    assert validate_catalog.main([str(broken), str(tmp_path / "resolutions.yaml")]) == 1
    err = capsys.readouterr().err
    assert "non-empty list" in err
    assert "file not found" in err
