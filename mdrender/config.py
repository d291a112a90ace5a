"""
Render configuration
Default image sizes applied to <img> elements that do not declare their own
"""

import re
from dataclasses import dataclass, replace as _replace
from typing import Any, Mapping, Optional

from mdrender.errors import ConfigError

DEFAULT_HEIGHT = '320'
DEFAULT_WIDTH = '40'

_SIZE_RE = re.compile(r'^\d+$')

# Accept both the Python field names and the camelCase keys used by JSON callers
_KEY_ALIASES = {
    'default_height': 'default_height',
    'defaultHeight': 'default_height',
    'default_width': 'default_width',
    'defaultWidth': 'default_width',
}


def normalize_size(key: str, value: Any) -> str:
    """Return a size as a decimal string, raising ConfigError if it is not one"""
    if isinstance(value, bool):
        raise ConfigError(key, value, "expected a decimal pixel value")
    if isinstance(value, int):
        if value < 0:
            raise ConfigError(key, value, "must not be negative")
        return str(value)
    if not isinstance(value, str):
        raise ConfigError(key, value, "expected a decimal pixel value")
    value = value.strip()
    if not _SIZE_RE.match(value):
        raise ConfigError(key, value, "expected digits only, with no unit")
    return value


@dataclass(frozen=True)
class RenderConfig:
    """
    Sizes injected into images missing a height or width attribute.

    The 320/40 defaults are kept as the original site shipped them.
    """
    default_height: str = DEFAULT_HEIGHT
    default_width: str = DEFAULT_WIDTH

    def __post_init__(self):
        object.__setattr__(self, 'default_height',
                           normalize_size('default_height', self.default_height))
        object.__setattr__(self, 'default_width',
                           normalize_size('default_width', self.default_width))

    def replace(self, **changes) -> 'RenderConfig':
        return _replace(self, **changes)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> 'RenderConfig':
        """
        Build a config from a JSON-style mapping
        Unknown keys are rejected so typos do not silently fall back to defaults
        """
        if not mapping:
            return cls()
        if not isinstance(mapping, Mapping):
            raise ConfigError('config', mapping, "expected an object")

        values = {}
        for key, value in mapping.items():
            field = _KEY_ALIASES.get(key)
            if field is None:
                raise ConfigError(key, value, "unknown setting")
            values[field] = normalize_size(key, value)
        return cls(**values)


DEFAULT_CONFIG = RenderConfig()
