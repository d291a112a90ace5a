"""
Math-aware Markdown Processor
Uses Python-Markdown for parsing; fenced ```math blocks are typeset to MathML
and every other fenced block is emitted as plain preformatted code
"""

import logging
import re
from html import escape
from typing import List, Optional

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

from mdrender.latex_processor import LaTeXProcessor

logger = logging.getLogger(__name__)

MATH_LANGUAGE = 'math'

# Opening fence, info string (first word is the language), body, matching fence
FENCED_BLOCK_RE = re.compile(
    r'(?P<fence>^(?:~{3,}|`{3,}))[ ]*(?P<lang>[^\s`~]*)[^\n]*\n'
    r'(?P<code>.*?)(?<=\n)'
    r'(?P=fence)[ ]*$',
    re.MULTILINE | re.DOTALL
)

EXTENSIONS = [
    'markdown.extensions.tables',
    'markdown.extensions.sane_lists',
    'markdown.extensions.toc',
]


class MathFencePreprocessor(Preprocessor):
    """Replace fenced code blocks with stashed HTML before block parsing"""

    def __init__(self, md, latex_processor: LaTeXProcessor):
        super().__init__(md)
        self.latex_processor = latex_processor

    def run(self, lines: List[str]) -> List[str]:
        text = '\n'.join(lines)
        while True:
            m = FENCED_BLOCK_RE.search(text)
            if not m:
                break
            html = self.render_block(m.group('code'), m.group('lang'))
            placeholder = self.md.htmlStash.store(html)
            text = f'{text[:m.start()]}\n{placeholder}\n{text[m.end():]}'
        return text.split('\n')

    def render_block(self, code: str, language: str) -> str:
        # The newline before the closing fence belongs to the fence
        if code.endswith('\n'):
            code = code[:-1]
        if language == MATH_LANGUAGE:
            return self.latex_processor.render(code)
        return f'<pre><code>{escape(code, quote=False)}</code></pre>'


class MathFenceExtension(Extension):
    """Stands in for the stock fenced_code extension"""

    def __init__(self, latex_processor: Optional[LaTeXProcessor] = None, **kwargs):
        self.latex_processor = latex_processor or LaTeXProcessor()
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        md.registerExtension(self)
        # Same priority as fenced_code: after whitespace normalization,
        # before raw HTML blocks are stashed
        md.preprocessors.register(
            MathFencePreprocessor(md, self.latex_processor), 'math_fence', 25
        )


class MarkdownProcessor:
    def __init__(self, latex_processor: Optional[LaTeXProcessor] = None):
        self.latex_processor = latex_processor or LaTeXProcessor()

    def convert(self, markdown_text: str) -> str:
        """
        Convert markdown to an HTML fragment
        Malformed markdown yields best-effort output, never an error
        """
        # Markdown instances keep per-document state, so each call gets its own
        md = markdown.Markdown(
            extensions=[MathFenceExtension(self.latex_processor)] + EXTENSIONS,
            output_format='html',
        )
        html = md.convert(markdown_text)
        logger.debug(f"Converted {len(markdown_text)} chars of markdown to {len(html)} chars of HTML")
        return html
