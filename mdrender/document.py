"""
Document Adapters
Turn an HTML fragment into a mutable element tree and back again.

Two backends sit behind one interface:

* NativeDocumentAdapter parses with the browser itself, inside a <template>
  element, when running under Pyodide where the page's ``window`` is
  reachable through the ``js`` module.
* SoupDocumentAdapter uses BeautifulSoup in ordinary Python processes. The
  bs4 import happens lazily, once per process; when it is missing the adapter
  passes HTML through untouched instead of failing.
"""

import logging
import sys
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional

from mdrender.errors import DocumentAdapterError

logger = logging.getLogger(__name__)

IMAGE_TAG = 'img'


@dataclass
class ParsedDocument:
    source: str
    tree: Any
    backend: str

    @property
    def degraded(self) -> bool:
        """True when no element tree could be built for this document"""
        return self.tree is None


class ImageElement(ABC):
    """Attribute view over an <img> node; absence and "" are different things"""

    @abstractmethod
    def has_attribute(self, name: str) -> bool:
        ...

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_attribute(self, name: str, value: str) -> None:
        ...


class DocumentAdapter(ABC):
    backend = 'abstract'

    @abstractmethod
    def parse(self, html: str) -> ParsedDocument:
        ...

    @abstractmethod
    def serialize(self, doc: ParsedDocument) -> str:
        ...

    @abstractmethod
    def query_images(self, doc: ParsedDocument) -> List[ImageElement]:
        ...


# ---------------------------------------------------------------------------
# Native (browser) backend
# ---------------------------------------------------------------------------

class NativeImageElement(ImageElement):
    def __init__(self, element):
        self._element = element

    def has_attribute(self, name: str) -> bool:
        return bool(self._element.hasAttribute(name))

    def get_attribute(self, name: str) -> Optional[str]:
        return self._element.getAttribute(name)

    def set_attribute(self, name: str, value: str) -> None:
        self._element.setAttribute(name, value)


class NativeDocumentAdapter(DocumentAdapter):
    backend = 'native'

    def __init__(self, window):
        document = getattr(window, 'document', None)
        if document is None or getattr(document, 'createElement', None) is None:
            raise DocumentAdapterError("window does not provide a document to parse with")
        self.window = window

    def parse(self, html: str) -> ParsedDocument:
        # A <template> parses in fragment mode: leading <style>, <link>,
        # <meta> etc. stay where they are instead of moving into <head>
        template = self.window.document.createElement('template')
        template.innerHTML = html
        return ParsedDocument(source=html, tree=template, backend=self.backend)

    def serialize(self, doc: ParsedDocument) -> str:
        return doc.tree.innerHTML

    def query_images(self, doc: ParsedDocument) -> List[ImageElement]:
        nodes = doc.tree.content.querySelectorAll(IMAGE_TAG)
        return [NativeImageElement(nodes.item(i)) for i in range(nodes.length)]


# ---------------------------------------------------------------------------
# BeautifulSoup backend
# ---------------------------------------------------------------------------

class SoupBackend(NamedTuple):
    soup_class: Any
    builder_class: Any
    formatter: Any


# Void elements per the HTML standard. bs4 also treats obsolete tags such as
# <image> as void, which breaks SVG's <image> on serialization.
VOID_ELEMENTS = frozenset([
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input', 'link',
    'meta', 'param', 'source', 'track', 'wbr',
])

_soup_lock = threading.Lock()
_soup_loaded = False
_soup_backend: Optional[SoupBackend] = None


def _load_soup_backend() -> Optional[SoupBackend]:
    try:
        import bs4
        from bs4.builder import HTMLParserTreeBuilder
        from bs4.dammit import EntitySubstitution
        from bs4.formatter import HTMLFormatter
    except ImportError as e:
        logger.warning(
            f"BeautifulSoup is not available ({e}); HTML will pass through "
            f"without image size attributes. Install with: pip install beautifulsoup4"
        )
        return None

    class FragmentTreeBuilder(HTMLParserTreeBuilder):
        def can_be_empty_element(self, tag_name):
            return tag_name in VOID_ELEMENTS

    # Serialize the way a browser's innerHTML does: <img ...> without a
    # closing slash, and only &, <, > escaped in text
    formatter = HTMLFormatter(
        entity_substitution=EntitySubstitution.substitute_xml,
        void_element_close_prefix=None,
    )
    logger.debug(f"Loaded BeautifulSoup {getattr(bs4, '__version__', '?')}")
    return SoupBackend(soup_class=bs4.BeautifulSoup, builder_class=FragmentTreeBuilder,
                       formatter=formatter)


def soup_factory() -> Optional[SoupBackend]:
    """
    Return the process-wide BeautifulSoup backend, importing it on first use
    None means bs4 is unavailable; that answer is cached like a success
    """
    global _soup_loaded, _soup_backend
    if _soup_loaded:
        return _soup_backend
    with _soup_lock:
        if not _soup_loaded:
            _soup_backend = _load_soup_backend()
            _soup_loaded = True
    return _soup_backend


class SoupImageElement(ImageElement):
    def __init__(self, tag):
        self._tag = tag

    def has_attribute(self, name: str) -> bool:
        return self._tag.has_attr(name)

    def get_attribute(self, name: str) -> Optional[str]:
        return self._tag.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self._tag[name] = value


class SoupDocumentAdapter(DocumentAdapter):
    backend = 'soup'

    def __init__(self, factory=soup_factory):
        self._factory = factory

    def parse(self, html: str) -> ParsedDocument:
        soup_backend = self._factory()
        if soup_backend is None:
            return ParsedDocument(source=html, tree=None, backend=self.backend)
        # Keep class/rel/etc. as plain strings so they serialize as written
        builder = soup_backend.builder_class(multi_valued_attributes=None)
        tree = soup_backend.soup_class(html, builder=builder)
        return ParsedDocument(source=html, tree=tree, backend=self.backend)

    def serialize(self, doc: ParsedDocument) -> str:
        if doc.degraded:
            return doc.source
        soup_backend = self._factory()
        return doc.tree.decode(formatter=soup_backend.formatter)

    def query_images(self, doc: ParsedDocument) -> List[ImageElement]:
        if doc.degraded:
            return []
        return [SoupImageElement(tag) for tag in doc.tree.find_all(IMAGE_TAG)]


# ---------------------------------------------------------------------------
# Backend selection
# ---------------------------------------------------------------------------

def browser_window():
    """Return the browser's window object under Pyodide, else None"""
    if sys.platform != 'emscripten':
        return None
    try:
        import js
    except ImportError:
        return None
    if getattr(js, 'document', None) is None:
        # Web worker: JavaScript runtime without a document
        return None
    return js


def has_native_document() -> bool:
    return browser_window() is not None


def select_adapter(native: Optional[bool] = None, window=None) -> DocumentAdapter:
    """
    Pick the document backend for a pipeline
    native=None detects the environment; True/False forces the choice
    """
    if native is None:
        if window is None:
            window = browser_window()
        native = window is not None
    if native:
        if window is None:
            window = browser_window()
        if window is None:
            raise DocumentAdapterError("native document backend requested outside a browser")
        adapter = NativeDocumentAdapter(window)
    else:
        adapter = SoupDocumentAdapter()
    logger.debug(f"Selected {adapter.backend} document backend")
    return adapter
