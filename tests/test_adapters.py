"""Tests for the copy adapter registry and the breeze adapter."""

from types import MappingProxyType

import pytest

from inkpress import parse
from inkpress.postprocess.adapters import (
    DEFAULT_REGISTRY,
    NULL_ADAPTER,
    BreezeCopyAdapter,
    CopyAdapter,
    CopyAdapterRegistryBuilder,
    CopyContext,
    NullCopyAdapter,
    create_default_registry,
)
from inkpress.postprocess.adapters.breeze import DEFAULT_BARS, heading_bars
from inkpress.themes import THEME_SYSTEMS, ThemeSystem
from inkpress.utils.color import blend_with_white, mix_with_black

PRIMARY = "#00A86B"
BREEZE = THEME_SYSTEMS["breeze"]


def context(theme_system: ThemeSystem = BREEZE, size: int = 16) -> CopyContext:
    return CopyContext(
        primary_color=PRIMARY,
        base_font_size=size,
        primary_rgb="0, 168, 107",
        theme_system=theme_system,
    )


class TestRegistry:
    def test_default_registry(self) -> None:
        assert "breeze" in DEFAULT_REGISTRY
        assert len(DEFAULT_REGISTRY) == 1
        assert DEFAULT_REGISTRY.theme_ids == frozenset({"breeze"})
        assert isinstance(DEFAULT_REGISTRY.get("breeze"), BreezeCopyAdapter)

    def test_lookup_by_record(self) -> None:
        assert isinstance(DEFAULT_REGISTRY.get(BREEZE), BreezeCopyAdapter)
        assert DEFAULT_REGISTRY.get(THEME_SYSTEMS["default"]) is None
        assert DEFAULT_REGISTRY.get(None) is None

    def test_resolve_falls_back_to_null(self) -> None:
        assert DEFAULT_REGISTRY.resolve("unknown") is NULL_ADAPTER
        assert NULL_ADAPTER.transform("<p>x</p>", context()) == "<p>x</p>"

    def test_create_default_registry_is_fresh(self) -> None:
        registry = create_default_registry()
        assert registry is not DEFAULT_REGISTRY
        assert registry.has("breeze")

    def test_builder_chaining(self) -> None:
        class Other:
            theme_ids = ("a", "b")

            def transform(self, html: str, context: CopyContext) -> str:
                return html

        builder = CopyAdapterRegistryBuilder()
        registry = builder.register_all([BreezeCopyAdapter(), Other()]).build()
        assert len(builder) == 2
        assert len(registry) == 3
        assert registry.get("a") is registry.get("b")
        assert len(registry.adapters) == 2

    def test_missing_theme_ids(self) -> None:
        class NoIds:
            def transform(self, html: str, context: CopyContext) -> str:
                return html

        with pytest.raises(TypeError, match="theme_ids"):
            CopyAdapterRegistryBuilder().register(NoIds())  # type: ignore[arg-type]

    def test_missing_transform(self) -> None:
        class NoTransform:
            theme_ids = ("x",)

        with pytest.raises(TypeError, match="transform"):
            CopyAdapterRegistryBuilder().register(NoTransform())  # type: ignore[arg-type]

    def test_duplicate_theme_id(self) -> None:
        builder = CopyAdapterRegistryBuilder().register(BreezeCopyAdapter())
        with pytest.raises(ValueError, match="already registered by BreezeCopyAdapter"):
            builder.register(BreezeCopyAdapter())

    def test_built_registry_is_independent(self) -> None:
        builder = CopyAdapterRegistryBuilder()
        registry = builder.build()
        builder.register(BreezeCopyAdapter())
        assert "breeze" not in registry

    def test_protocol_conformance(self) -> None:
        assert isinstance(BreezeCopyAdapter(), CopyAdapter)
        assert isinstance(NullCopyAdapter(), CopyAdapter)


class TestHeadingBars:
    def test_defaults(self) -> None:
        assert heading_bars({}) == DEFAULT_BARS

    def test_flat_and_deco_overrides(self) -> None:
        bars = heading_bars(
            {"headings": {"h2": {"deco": {"widthPx": 9}}, "h3": {"fontScale": 2.0}}}
        )
        assert bars["h2"].width_px == 9
        assert bars["h3"].font_scale == 2.0
        assert bars["h4"] == DEFAULT_BARS["h4"]


class TestBreezeAdapter:
    adapter = BreezeCopyAdapter()

    def test_h1_pill(self) -> None:
        html = self.adapter.transform(
            '<h1 style="font-size: 35px; background: red;"><span>Title</span>'
            '<span style="width: 60px; height: 3px;"></span></h1>',
            context(),
        )
        assert "data-h1-pill" in html
        assert "<span>Title</span></span></span></h1>" in html
        assert "width: 60px" not in html
        assert "background: red" not in html
        assert f"background: {PRIMARY};" in html

    def test_h2_bar_layout(self) -> None:
        html = self.adapter.transform(
            '<h2 style="font-size: 30px; display: flex; gap: 0.5em;">'
            '<span style="width: 5px; height: 1.1em;"></span><span>Part</span></h2>',
            context(),
        )
        assert "display: table;" in html
        assert html.count("display: table-cell;") == 2
        assert "width: 5px" not in html
        assert "font-size: 24px;" in html
        assert "line-height: 1.35em !important;" in html
        assert "&#8203;" in html

    def test_h3_and_h4_colors(self) -> None:
        html = self.adapter.transform(
            '<h3 style="font-size: 1px;">a</h3><h4 style="font-size: 1px;">b</h4>', context()
        )
        assert f"background: {mix_with_black(PRIMARY, 0.6)};" in html
        assert f"background: {mix_with_black(PRIMARY, 0.35)};" in html

    def test_bare_heading_untouched(self) -> None:
        assert self.adapter.transform("<h3>a</h3>", context()) == "<h3>a</h3>"

    def test_heading_scale_from_config(self) -> None:
        system = ThemeSystem(
            id="breeze",
            copy=MappingProxyType({"headings": {"h3": {"fontScale": 2.0}}}),
        )
        html = self.adapter.transform('<h3 style="font-size: 1px;">a</h3>', context(system))
        assert "font-size: 32px;" in html

    def test_links(self) -> None:
        html = self.adapter.transform('<a href="https://x.io" style="color: red;">x</a>', context())
        assert f"color: {PRIMARY};" in html
        assert "border-bottom: 1px solid rgba(0,0,0,0);" in html

    def test_inner_card_only(self) -> None:
        html = self.adapter.transform(
            '<section data-role="outer" style="margin: 0;">'
            '<section data-role="inner" style="color: #333; padding: 0;">x</section></section>',
            context(),
        )
        assert '<section data-role="outer" style="margin: 0;">' in html
        assert f"background-color: {blend_with_white(PRIMARY, 0.04)};" in html
        assert "padding: 24px 20px;" in html

    def test_inner_card_shade_from_config(self) -> None:
        system = ThemeSystem(id="breeze", copy=MappingProxyType({"innerCard": {"shade": 0.1}}))
        html = self.adapter.transform('<section data-role="inner" style="">x</section>', context(system))
        assert blend_with_white(PRIMARY, 0.1) in html

    def test_table_header_moved_into_body(self) -> None:
        html = self.adapter.transform(
            '<table style=""><thead><tr><th style="">h</th></tr></thead>'
            '<tbody><tr><td style="">c</td></tr></tbody></table>',
            context(),
        )
        assert "<thead>" not in html
        assert "<tbody><tr><th " in html
        assert "border-radius: 12px;" in html
        assert "padding: 10px 12px;" in html

    def test_idempotent_on_full_output(self) -> None:
        markdown = "# Title\n\n## Part\n\n### Sub\n\n| a |\n| - |\n| 1 |\n\n[x](https://x.io)"
        html = parse(markdown, themeSystem="breeze")
        assert self.adapter.transform(html, context()) == html

    def test_full_output(self) -> None:
        html = parse("# Title\n\n## Part", themeSystem="breeze")
        assert html.count("data-h1-pill") == 1
        assert html.count("display: table-cell;") == 2
