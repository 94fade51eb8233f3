"""Tests for ParseOptions."""

import dataclasses

import pytest

from inkpress.config import ParseOptions, coerce_options
from inkpress.postprocess.adapters import CopyAdapterRegistryBuilder
from inkpress.themes import ColorTheme, FontSettings


class TestParseOptionsDataclass:
    """ParseOptions frozen dataclass behavior."""

    def test_default_values(self) -> None:
        options = ParseOptions()
        assert options.theme is None
        assert options.code_theme is None
        assert options.theme_system is None
        assert options.is_preview is False
        assert options.clean_html is False
        assert options.font_settings is None
        assert options.copy_adapters is None

    def test_immutability(self) -> None:
        options = ParseOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.is_preview = True  # type: ignore[misc]


class TestFromDict:
    """ParseOptions.from_dict() accepts snake_case and camelCase keys."""

    def test_camel_case_aliases(self) -> None:
        options = ParseOptions.from_dict(
            {
                "theme": "blue",
                "codeTheme": "github",
                "themeSystem": "breeze",
                "isPreview": True,
                "cleanHtml": True,
                "fontSettings": {"fontSize": 18},
            }
        )
        assert options.theme == "blue"
        assert options.code_theme == "github"
        assert options.theme_system == "breeze"
        assert options.is_preview is True
        assert options.clean_html is True
        assert options.font_settings == {"fontSize": 18}

    def test_snake_case_keys(self) -> None:
        options = ParseOptions.from_dict({"is_preview": True, "code_theme": "mac"})
        assert options.is_preview is True
        assert options.code_theme == "mac"

    def test_unknown_keys_ignored(self) -> None:
        assert ParseOptions.from_dict({"bogus": 1}) == ParseOptions()

    def test_code_style_alias(self) -> None:
        assert ParseOptions.from_dict({"codeStyle": "github"}).code_theme == "github"


class TestMergedAndResolve:
    def test_merged_overrides_only_named_fields(self) -> None:
        base = ParseOptions(theme="blue", is_preview=True)
        merged = base.merged(isPreview=False)
        assert merged.theme == "blue"
        assert merged.is_preview is False

    def test_merged_without_overrides_is_identity(self) -> None:
        base = ParseOptions(theme="blue")
        assert base.merged() is base

    def test_resolve_produces_records(self) -> None:
        resolved = ParseOptions(theme="blue", font_settings={"fontSize": 14}).resolve()
        assert isinstance(resolved.theme, ColorTheme)
        assert isinstance(resolved.font_settings, FontSettings)
        assert resolved.font_settings.font_size == 14
        assert resolved.code_theme.id == "mac"  # type: ignore[union-attr]
        assert resolved.theme_system.id == "default"  # type: ignore[union-attr]

    def test_copy_adapters_carried(self) -> None:
        registry = CopyAdapterRegistryBuilder().build()
        options = ParseOptions.from_dict({"copyAdapters": registry})
        assert options.resolve().copy_adapters is registry


class TestCoerceOptions:
    def test_none(self) -> None:
        assert coerce_options(None) == ParseOptions()

    def test_mapping(self) -> None:
        assert coerce_options({"isPreview": True}).is_preview is True

    def test_instance_passthrough(self) -> None:
        options = ParseOptions()
        assert coerce_options(options) is options

    def test_bad_type(self) -> None:
        with pytest.raises(TypeError, match="options must be"):
            coerce_options(["theme"])  # type: ignore[arg-type]
