"""Core registry logic for the short-link service."""

from .shortcode import ShortCodeGenerator
from .errors import ErrorKind, RegistryError
from .registry import LinkRegistry, Resolution

__all__ = ["ShortCodeGenerator", "ErrorKind", "RegistryError", "LinkRegistry", "Resolution"]
