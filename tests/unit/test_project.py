"""Tests for project config loading and merging."""

from __future__ import annotations

import json

import pytest

from slidef.core.errors import ValidationError
from slidef.core.project import (
    config_path,
    load_project_config,
    resolve_dir,
    update_project_config,
)


class TestLoadProjectConfig:
    def test_defaults_without_file(self, tmp_dir):
        config = load_project_config(tmp_dir)
        assert config.title == "Slide Presentations"
        assert config.subtitle == "View and manage your slide decks"
        assert config.base_url == "/"
        assert config.publish_dir == "public"
        assert config.slides_dir == "slides"
        assert config.theme is None

    def test_file_values_merge_over_defaults(self, tmp_dir):
        config_path(tmp_dir).write_text(
            json.dumps({"title": "Talks", "theme": {"primaryColor": "#007bff"}})
        )
        config = load_project_config(tmp_dir)
        assert config.title == "Talks"
        assert config.slides_dir == "slides"
        assert config.theme.primary_color == "#007bff"

    def test_unknown_keys_preserved(self, tmp_dir):
        config_path(tmp_dir).write_text(json.dumps({"analytics": {"id": "x"}}))
        assert load_project_config(tmp_dir).to_record()["analytics"] == {"id": "x"}

    def test_invalid_json(self, tmp_dir):
        config_path(tmp_dir).write_text("{oops")
        with pytest.raises(ValidationError):
            load_project_config(tmp_dir)

    def test_non_object(self, tmp_dir):
        config_path(tmp_dir).write_text("[1, 2]")
        with pytest.raises(ValidationError):
            load_project_config(tmp_dir)


class TestUpdateProjectConfig:
    def test_shallow_merge_and_write(self, tmp_dir):
        config_path(tmp_dir).write_text(json.dumps({"title": "Talks", "custom": 1}))
        config = update_project_config(tmp_dir, {"subtitle": "Archive"})

        assert config.title == "Talks"
        assert config.subtitle == "Archive"
        on_disk = json.loads(config_path(tmp_dir).read_text())
        assert on_disk["custom"] == 1
        assert on_disk["subtitle"] == "Archive"
        assert on_disk["slidesDir"] == "slides"

    def test_creates_file(self, tmp_dir):
        update_project_config(tmp_dir, {"baseUrl": "/talks/"})
        assert json.loads(config_path(tmp_dir).read_text())["baseUrl"] == "/talks/"


class TestResolveDir:
    def test_configured_relative_to_root(self, tmp_dir):
        assert resolve_dir(tmp_dir, "slides") == (tmp_dir / "slides").resolve()

    def test_override_wins(self, tmp_dir):
        assert resolve_dir(tmp_dir, "slides", "decks") == (tmp_dir / "decks").resolve()
