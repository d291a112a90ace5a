"""
mdrender: markdown to HTML with MathML math blocks and sized images

    >>> from mdrender import render_markdown
    >>> render_markdown("![cat](cat.png)")
    '<p><img src="cat.png" alt="cat" height="320" width="40"></p>'
"""

from mdrender.config import DEFAULT_CONFIG, RenderConfig
from mdrender.errors import ConfigError, DocumentAdapterError, MdRenderError
from mdrender.pipeline import (
    RenderPipeline,
    get_default_pipeline,
    render_markdown,
    update_image_attributes,
)

__version__ = '0.1.0'

__all__ = [
    'ConfigError',
    'DEFAULT_CONFIG',
    'DocumentAdapterError',
    'MdRenderError',
    'RenderConfig',
    'RenderPipeline',
    'get_default_pipeline',
    'render_markdown',
    'update_image_attributes',
]
