from .errors import InputError
from .extractor import extract, require_identifier
from .normalizer import normalize
from .resolver import build_fallback, resolve

__all__ = [
    "InputError",
    "build_fallback",
    "extract",
    "normalize",
    "require_identifier",
    "resolve",
]
