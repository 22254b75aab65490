import os


def _split_env(name, default):
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(',') if item.strip()]


def _float_env(name, default):
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        print(f"Ignoring invalid {name}, using {default}")
        return float(default)


PROVIDER_TIMEOUT = _float_env('TUBECHAIN_PROVIDER_TIMEOUT', 15)
TOTAL_DEADLINE = _float_env('TUBECHAIN_TOTAL_DEADLINE', 40)

DEFAULT_PROVIDER_ORDER = [
    'youtube-direct',
    'youtube-player',
    'youtube-embed',
    'invidious',
    'piped',
]
PROVIDER_ORDER = _split_env('TUBECHAIN_PROVIDERS', DEFAULT_PROVIDER_ORDER)

INVIDIOUS_INSTANCES = _split_env('TUBECHAIN_INVIDIOUS_INSTANCES', [
    'https://inv.nadeko.net',
    'https://yewtu.be',
    'https://invidious.nerdvpn.de',
])

PIPED_INSTANCES = _split_env('TUBECHAIN_PIPED_INSTANCES', [
    'https://pipedapi.kavin.rocks',
    'https://pipedapi.leptons.xyz',
])

# {id} is replaced with the extracted identifier
DEFAULT_ALTERNATIVE_LINKS = [
    'https://y2mate.com/youtube/{id}',
    'https://en.y2mate.net/youtube/{id}',
    'https://yt5s.com/en?q=https://youtube.com/watch?v={id}',
]
ALTERNATIVE_LINKS = _split_env('TUBECHAIN_ALTERNATIVE_LINKS', DEFAULT_ALTERNATIVE_LINKS)
FALLBACK_MESSAGE = 'Use these direct tools for download'

USER_AGENT = os.getenv(
    'TUBECHAIN_USER_AGENT',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
)

HTML_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
}

JSON_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'application/json, text/plain, */*',
}

WATCH_URL = 'https://www.youtube.com/watch'
EMBED_URL = 'https://www.youtube.com/embed/{id}'
OEMBED_URL = 'https://www.youtube.com/oembed'
THUMBNAIL_URL = 'https://i.ytimg.com/vi/{id}/maxresdefault.jpg'

PLAYER_ENDPOINT = 'https://www.youtube.com/youtubei/v1/player'
PLAYER_CLIENT = {
    'clientName': os.getenv('TUBECHAIN_PLAYER_CLIENT_NAME', 'ANDROID'),
    'clientVersion': os.getenv('TUBECHAIN_PLAYER_CLIENT_VERSION', '19.09.37'),
    'androidSdkVersion': 30,
    'hl': 'en',
    'gl': 'US',
}
