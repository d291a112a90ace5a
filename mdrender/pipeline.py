"""
Render Pipeline
markdown -> HTML -> document -> sized images -> HTML
"""

import logging
import time
from typing import Optional

from mdrender.config import DEFAULT_CONFIG, RenderConfig
from mdrender.document import DocumentAdapter, select_adapter
from mdrender.images import ImageAttributeInjector
from mdrender.markdown_processor import MarkdownProcessor

logger = logging.getLogger(__name__)


class RenderPipeline:
    def __init__(self, native: Optional[bool] = None, window=None,
                 adapter: Optional[DocumentAdapter] = None,
                 processor: Optional[MarkdownProcessor] = None):
        # The backend is fixed here; render() never re-checks the environment
        self.adapter = adapter or select_adapter(native=native, window=window)
        self.processor = processor or MarkdownProcessor()
        self.injector = ImageAttributeInjector(self.adapter)

    def render(self, markdown_text: str, config: Optional[RenderConfig] = None) -> str:
        """Convert markdown to an HTML fragment with sized images"""
        start_time = time.time()

        html = self.processor.convert(markdown_text)
        html = self.update_image_attributes(html, config)

        logger.debug(
            f"Rendered {len(markdown_text)} chars in {time.time() - start_time:.3f}s "
            f"({self.adapter.backend} backend, {len(html)} chars HTML)"
        )
        return html

    def update_image_attributes(self, html: str, config: Optional[RenderConfig] = None) -> str:
        """Add default height/width to images in an existing HTML fragment"""
        if config is None:
            config = DEFAULT_CONFIG
        doc = self.adapter.parse(html)
        injected = self.injector.inject(doc, config)
        if injected:
            logger.debug(f"Injected {injected} image size attributes")
        return self.adapter.serialize(doc)


_default_pipeline = RenderPipeline()


def get_default_pipeline() -> RenderPipeline:
    return _default_pipeline


def render_markdown(markdown_text: str, config: Optional[RenderConfig] = None) -> str:
    return _default_pipeline.render(markdown_text, config)


def update_image_attributes(html: str, config: Optional[RenderConfig] = None) -> str:
    return _default_pipeline.update_image_attributes(html, config)
