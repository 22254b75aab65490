from tubechain.errors import InputError
from tubechain.extractor import require_identifier
from tubechain.web import JsonHandler
from tubechain.providers import default_providers
from tubechain.resolver import resolve


class Handler(JsonHandler):
    """
    /api/download?url=... resolves a video URL to playable media links.
    """

    providers = None
    timeout = None
    deadline = None
    events = None

    def respond(self, source):
        try:
            identifier = require_identifier(source)
        except InputError as e:
            return 400, e.to_payload()

        providers = self.providers if self.providers is not None else default_providers()
        result = resolve(
            identifier,
            providers,
            timeout=self.timeout,
            deadline=self.deadline,
            events=self.events,
        )
        return 200, result


# Vercel serverless function handler
handler = Handler
