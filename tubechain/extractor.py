import re

from .errors import InputError

_ID = r'([A-Za-z0-9_-]+)'

# Route words that are never identifiers in the generic path form
_RESERVED = r'(?!(?:watch|embed|v|shorts|live|results|playlist|channel|user|feed|c)(?:[/?#]|$))'

# Evaluated in order, first match wins
PATTERNS = [
    ('watch', re.compile(r'/watch/?\?(?:[^#]*?&)?v=' + _ID)),
    ('short', re.compile(r'youtu\.be/' + _ID)),
    ('embed', re.compile(r'/(?:embed|v|shorts|live)/' + _ID)),
    ('path', re.compile(r'^(?:https?://)?(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,}(?::\d+)?/' + _RESERVED + _ID + r'/?(?:[?#].*)?$')),
    ('bare', re.compile(r'^([A-Za-z0-9_-]{11})$')),
]


def extract(text):
    """
    Pull the video identifier out of a free-form URL or string.

    Returns None when the input is empty or no pattern matches.
    """
    if not text or not isinstance(text, str):
        return None
    text = text.strip()
    for _, pattern in PATTERNS:
        match = pattern.search(text)
        if match and match.group(1):
            return match.group(1)
    return None


def require_identifier(text):
    if text is not None and not isinstance(text, str):
        raise InputError('Invalid YouTube URL')
    if not text or not text.strip():
        raise InputError('YouTube URL parameter is required')
    identifier = extract(text)
    if identifier is None:
        raise InputError('Invalid YouTube URL')
    return identifier
