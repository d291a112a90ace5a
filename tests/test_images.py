"""Tests for default image size injection, run against every backend."""

from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import image_attrs
from mdrender.config import RenderConfig
from mdrender.document import SoupDocumentAdapter
from mdrender.images import ImageAttributeInjector

CONFIG = RenderConfig(default_height="320", default_width="40")


def inject(adapter, html, config=CONFIG):
    doc = adapter.parse(html)
    count = ImageAttributeInjector(adapter).inject(doc, config)
    return count, adapter.serialize(doc)


class TestInjection:
    def test_defaults_applied(self, adapter) -> None:
        count, html = inject(adapter, '<img src="a.png">')
        assert count == 2
        assert image_attrs(html) == [{"src": "a.png", "height": "320", "width": "40"}]

    def test_authored_sizes_preserved(self, adapter) -> None:
        other = RenderConfig(default_height="1", default_width="2")
        count, html = inject(adapter, '<img src="a.png" width="100" height="50">', other)
        assert count == 0
        assert image_attrs(html) == [{"src": "a.png", "width": "100", "height": "50"}]

    def test_partial_default(self, adapter) -> None:
        count, html = inject(adapter, '<img src="a.png" width="10">')
        assert count == 1
        (attrs,) = image_attrs(html)
        assert attrs["width"] == "10"
        assert attrs["height"] == "320"

    def test_only_height_authored(self, adapter) -> None:
        _, html = inject(adapter, '<img src="a.png" height="7">')
        (attrs,) = image_attrs(html)
        assert attrs["height"] == "7"
        assert attrs["width"] == "40"

    def test_empty_value_counts_as_present(self, adapter) -> None:
        count, html = inject(adapter, '<img src="a.png" width="" height="">')
        assert count == 0
        (attrs,) = image_attrs(html)
        assert attrs["width"] == ""
        assert attrs["height"] == ""

    def test_every_image_processed(self, adapter) -> None:
        count, html = inject(
            adapter,
            '<p><img src="1.png"></p><ul><li><img src="2.png" width="5"></li></ul>'
            '<table><tr><td><img src="3.png" height="6"></td></tr></table>',
        )
        assert count == 4
        assert [(a["src"], a["height"], a["width"]) for a in image_attrs(html)] == [
            ("1.png", "320", "40"),
            ("2.png", "320", "5"),
            ("3.png", "6", "40"),
        ]

    def test_other_elements_untouched(self, adapter) -> None:
        count, html = inject(adapter, '<p><video src="v.mp4"></video><iframe></iframe></p>')
        assert count == 0
        assert "height" not in html
        assert "width" not in html

    def test_idempotent(self, adapter) -> None:
        doc = adapter.parse('<img src="a.png"><img src="b.png" width="3">')
        injector = ImageAttributeInjector(adapter)
        assert injector.inject(doc, CONFIG) == 3
        first = adapter.serialize(doc)
        assert injector.inject(doc, CONFIG) == 0
        assert adapter.serialize(doc) == first

    def test_degraded_document(self, unavailable_adapter) -> None:
        count, html = inject(unavailable_adapter, '<img src="a.png">')
        assert count == 0
        assert html == '<img src="a.png">'


sizes = st.one_of(st.none(), st.just(""), st.integers(min_value=0, max_value=9999).map(str))


@given(images=st.lists(st.tuples(sizes, sizes), max_size=6))
@settings(max_examples=60)
def test_injection_properties(images) -> None:
    """Authored sizes survive, missing ones get defaults, a second pass is a no-op."""
    parts = []
    for height, width in images:
        attrs = ""
        if height is not None:
            attrs += f' height="{height}"'
        if width is not None:
            attrs += f' width="{width}"'
        parts.append(f'<img src="x.png"{attrs}>')
    adapter = SoupDocumentAdapter()
    doc = adapter.parse("<p>" + "".join(parts) + "</p>")
    injector = ImageAttributeInjector(adapter)

    injector.inject(doc, CONFIG)
    once = adapter.serialize(doc)
    assert injector.inject(doc, CONFIG) == 0
    assert adapter.serialize(doc) == once

    result = image_attrs(once)
    assert len(result) == len(images)
    for (height, width), attrs in zip(images, result):
        assert attrs["height"] == (CONFIG.default_height if height is None else height)
        assert attrs["width"] == (CONFIG.default_width if width is None else width)
