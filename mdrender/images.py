"""
Image Attribute Injector
Gives every <img> an explicit height and width so the page can reserve space
before the image loads
"""

import logging

from mdrender.config import RenderConfig
from mdrender.document import DocumentAdapter, ParsedDocument

logger = logging.getLogger(__name__)


class ImageAttributeInjector:
    def __init__(self, adapter: DocumentAdapter):
        self.adapter = adapter

    def inject(self, doc: ParsedDocument, config: RenderConfig) -> int:
        """
        Set height/width on images that lack them, in document order.
        Each attribute is checked on its own; authored values (even "") are kept.
        Returns how many attributes were set.
        """
        injected = 0
        for img in self.adapter.query_images(doc):
            if not img.has_attribute('height'):
                img.set_attribute('height', config.default_height)
                injected += 1
            if not img.has_attribute('width'):
                img.set_attribute('width', config.default_width)
                injected += 1

        if doc.degraded:
            logger.debug("No document tree available, image sizes left as authored")
        return injected
