from tubechain import config
from tubechain.errors import InputError
from tubechain.extractor import require_identifier
from tubechain.web import JsonHandler
from tubechain.metadata import fetch_oembed
from tubechain.resolver import build_fallback


class Handler(JsonHandler):
    """
    /api/simple?url=... returns title/author/thumbnail plus the alternative
    links, without running the provider chain.
    """

    def respond(self, source):
        try:
            identifier = require_identifier(source)
        except InputError as e:
            return 400, e.to_payload()

        payload = build_fallback(identifier, message='Video information extracted')
        payload.update(fetch_oembed(identifier, timeout=config.PROVIDER_TIMEOUT))
        return 200, payload


handler = Handler
