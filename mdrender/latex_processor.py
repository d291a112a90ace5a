"""
LaTeX Formula Processor
Typesets LaTeX from ```math blocks into MathML with latex2mathml
"""

import logging
from html import escape

from latex2mathml.converter import convert as latex2mathml_convert

logger = logging.getLogger(__name__)

DISPLAY_MODES = ('inline', 'block')


class LaTeXProcessor:
    def __init__(self, display: str = 'inline'):
        if display not in DISPLAY_MODES:
            raise ValueError(f"display must be one of {DISPLAY_MODES}, got {display!r}")
        self.display = display

    def render(self, source: str) -> str:
        """
        Render LaTeX source to a MathML fragment
        Typesetting errors never propagate: the literal source is emitted instead
        """
        latex = source.strip()
        if not latex:
            return ''

        try:
            return latex2mathml_convert(latex, display=self.display)
        except Exception as e:
            # latex2mathml has no common error base; parser failures surface
            # as assorted exception types
            logger.warning(f"Math typesetting failed, emitting source: {e!r}")
            return self.format_error(latex, e)

    def format_error(self, source: str, error: Exception) -> str:
        """Wrap untypesettable source so it stays readable and the text is unchanged"""
        message = f"{type(error).__name__}: {error}"
        return (
            f'<span class="math-error" title="{escape(message, quote=True)}">'
            f'{escape(source, quote=False)}</span>'
        )
