"""Unit tests for Options and variable loading (treegen.config).

Tests cover:
- Options defaults and immutability
- with_variables merging
- save/load round trip
- from_env
- load_variables (YAML, JSON, empty, invalid)
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from treegen.config import GeneratorError, Options, load_variables


class TestOptions:
    @pytest.mark.unit
    def test_defaults(self):
        options = Options()
        assert options.keeps is False
        assert options.variables == {}
        assert options.exclude == ()
        assert options.template_suffix == ".j2"
        assert options.show_traceback is False

    @pytest.mark.unit
    def test_frozen(self):
        options = Options()
        with pytest.raises(ValidationError):
            options.keeps = True

    @pytest.mark.unit
    def test_empty_suffix_rejected(self):
        with pytest.raises(ValidationError):
            Options(template_suffix="")

    @pytest.mark.unit
    def test_with_variables_merges(self):
        options = Options(variables={"a": 1, "b": 2})
        merged = options.with_variables({"b": 3, "c": 4})
        assert merged.variables == {"a": 1, "b": 3, "c": 4}
        assert options.variables == {"a": 1, "b": 2}

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        options = Options(keeps=True, variables={"name": "demo"}, exclude=("^docs/",))
        path = options.save(tmp_path / "nested" / "options.json")
        assert path.exists()
        assert Options.load(path) == options


class TestFromEnv:
    @pytest.mark.unit
    def test_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Options.from_env() == Options()

    @pytest.mark.unit
    def test_reads_variables(self):
        env = {
            "TREEGEN_KEEPS": "yes",
            "TREEGEN_EXCLUDE": r"\.pyc$, ^build/ ,",
            "TREEGEN_SHOW_TRACEBACK": "1",
        }
        with patch.dict(os.environ, env, clear=True):
            options = Options.from_env()
        assert options.keeps is True
        assert options.exclude == (r"\.pyc$", "^build/")
        assert options.show_traceback is True

    @pytest.mark.unit
    def test_falsy_values(self):
        with patch.dict(os.environ, {"TREEGEN_KEEPS": "no"}, clear=True):
            assert Options.from_env().keeps is False


class TestLoadVariables:
    @pytest.mark.unit
    def test_yaml(self, tmp_path: Path):
        path = tmp_path / "vars.yml"
        path.write_text("name: demo\nitems:\n  - a\n  - b\n", encoding="utf-8")
        assert load_variables(path) == {"name": "demo", "items": ["a", "b"]}

    @pytest.mark.unit
    def test_json(self, tmp_path: Path):
        path = tmp_path / "vars.json"
        path.write_text('{"count": 3}', encoding="utf-8")
        assert load_variables(path) == {"count": 3}

    @pytest.mark.unit
    def test_empty_document(self, tmp_path: Path):
        path = tmp_path / "vars.yml"
        path.write_text("", encoding="utf-8")
        assert load_variables(path) == {}

    @pytest.mark.unit
    def test_non_mapping_rejected(self, tmp_path: Path):
        path = tmp_path / "vars.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(GeneratorError):
            load_variables(path)

    @pytest.mark.unit
    def test_invalid_yaml_rejected(self, tmp_path: Path):
        path = tmp_path / "vars.yml"
        path.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(GeneratorError):
            load_variables(path)

    @pytest.mark.unit
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_variables(tmp_path / "nope.yml")
