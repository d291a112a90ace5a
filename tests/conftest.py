"""Shared fixtures.

The browser is simulated with a small fake ``window`` exposing just the
``document.createElement("template")`` surface NativeDocumentAdapter touches.
Fragments are parsed by html5lib, which follows the HTML standard's tree
construction the way browsers do, and serialized by html5lib too, so its
output differs byte-wise from SoupDocumentAdapter. Equivalence tests compare
attributes and content, not bytes.
"""

import html5lib
import pytest
from bs4 import BeautifulSoup

from mdrender.document import NativeDocumentAdapter, SoupDocumentAdapter


class FakeElement:
    def __init__(self, element):
        self._element = element

    def hasAttribute(self, name):
        return name in self._element.attrib

    def getAttribute(self, name):
        return self._element.attrib.get(name)

    def setAttribute(self, name, value):
        self._element.attrib[name] = str(value)


class FakeNodeList:
    def __init__(self, elements):
        self._items = [FakeElement(element) for element in elements]

    @property
    def length(self):
        return len(self._items)

    def item(self, index):
        return self._items[index]


class FakeDocumentFragment:
    def __init__(self, root):
        self._root = root

    def querySelectorAll(self, selector):
        return FakeNodeList(self._root.iter(selector))


class FakeTemplate:
    def __init__(self):
        self._root = html5lib.parseFragment("", treebuilder="etree", namespaceHTMLElements=False)

    @property
    def innerHTML(self):
        return html5lib.serialize(
            self._root, tree="etree", quote_attr_values="always", omit_optional_tags=False
        )

    @innerHTML.setter
    def innerHTML(self, html):
        self._root = html5lib.parseFragment(html, treebuilder="etree", namespaceHTMLElements=False)

    @property
    def content(self):
        return FakeDocumentFragment(self._root)


class FakeDocument:
    def createElement(self, tag_name):
        assert tag_name == "template"
        return FakeTemplate()


class FakeWindow:
    def __init__(self):
        self.document = FakeDocument()


def image_attrs(html: str) -> list[dict[str, str]]:
    """Attributes of every <img> in ``html``, in document order."""
    soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
    return [dict(img.attrs) for img in soup.find_all("img")]


@pytest.fixture
def fake_window() -> FakeWindow:
    return FakeWindow()


@pytest.fixture(params=["soup", "native"])
def adapter(request):
    """Each document backend in turn."""
    if request.param == "soup":
        return SoupDocumentAdapter()
    return NativeDocumentAdapter(FakeWindow())


@pytest.fixture
def unavailable_adapter() -> SoupDocumentAdapter:
    """Soup backend behaving as if bs4 were not installed."""
    return SoupDocumentAdapter(factory=lambda: None)
