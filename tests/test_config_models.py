"""
Tests for Tweaksmith's pydantic models.
"""

import pytest
from pydantic import ValidationError

from tweaksmith.config.models import EditorSettings, Tweak, TweakCatalog

pytestmark = pytest.mark.config


class TestTweak:

    def test_minimal(self):
        tweak = Tweak(id="a", title="A")
        assert tweak.code == ""
        assert tweak.description == ""
        assert tweak.download_count == 0

    def test_numeric_id_coerced(self):
        assert Tweak(id=42, title="A").id == "42"

    def test_none_text_fields_become_empty(self):
        tweak = Tweak.model_validate(
            {"id": "a", "title": "A", "code": None, "description": None, "tweak_comment": None}
        )
        assert (tweak.code, tweak.description, tweak.tweak_comment) == ("", "", "")

    def test_unknown_keys_ignored(self):
        tweak = Tweak.model_validate({"id": "a", "title": "A", "image": "x.png"})
        assert not hasattr(tweak, "image")

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Tweak(id="", title="A")

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            Tweak(id="a", title="A", report_count=-1)

    def test_frozen(self):
        tweak = Tweak(id="a", title="A")
        with pytest.raises(ValidationError):
            tweak.title = "B"


class TestTweakCatalog:

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate tweak IDs"):
            TweakCatalog(tweaks=[Tweak(id="1", title="A"), Tweak(id="1", title="B")])

    def test_by_id_keeps_order(self):
        catalog = TweakCatalog(tweaks=[Tweak(id="2", title="B"), Tweak(id="1", title="A")])
        assert list(catalog.by_id()) == ["2", "1"]


class TestEditorSettings:

    def test_defaults(self):
        s = EditorSettings()
        assert not s.hide_sensitive
        assert not s.show_comments
        assert not s.download_each_tweak
        assert s.auto_create_restore_point
        assert s.always_show_warning
        assert not s.word_wrap
        assert s.show_line_numbers
        assert s.enable_text_colors
        assert s.encoding_utf8
        assert not s.enable_code_editing

    def test_camel_case_aliases(self):
        s = EditorSettings.model_validate({"hideSensitive": True, "wordWrap": True})
        assert s.hide_sensitive and s.word_wrap

    def test_snake_case_names(self):
        assert EditorSettings(download_each_tweak=True).download_each_tweak

    def test_editing_forces_line_numbers(self):
        s = EditorSettings(enable_code_editing=True, show_line_numbers=False)
        assert s.show_line_numbers

    def test_editing_forces_line_numbers_via_alias(self):
        s = EditorSettings.model_validate({"enableCodeEditing": True, "showLineNumbers": False})
        assert s.show_line_numbers

    def test_line_numbers_can_be_hidden_without_editing(self):
        assert not EditorSettings(show_line_numbers=False).show_line_numbers

    def test_updated_revalidates(self):
        s = EditorSettings(show_line_numbers=False).updated(enable_code_editing=True)
        assert s.enable_code_editing
        assert s.show_line_numbers

    def test_frozen(self):
        with pytest.raises(ValidationError):
            EditorSettings().word_wrap = True

    def test_dump_uses_field_names(self):
        assert "hide_sensitive" in EditorSettings().model_dump()
