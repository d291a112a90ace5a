"""
Exception types raised by mdrender

Content problems (bad markdown, bad math, a missing document backend) are
absorbed inside the pipeline and never show up here.
"""


class MdRenderError(Exception):
    """Base class for mdrender errors"""


class ConfigError(MdRenderError, ValueError):
    """A render setting could not be understood"""

    def __init__(self, key: str, value, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {key}={value!r}: {reason}")


class DocumentAdapterError(MdRenderError):
    """A document backend was used outside of its contract"""
