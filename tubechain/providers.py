import json
import re
import urllib.parse

import requests
from bs4 import BeautifulSoup

from . import config
from .normalizer import normalize

_PLAYER_MARKERS = [
    re.compile(r'ytInitialPlayerResponse\s*=\s*'),
    re.compile(r'window\["ytInitialPlayerResponse"\]\s*=\s*'),
]
_SET_CONFIG = re.compile(r'yt\.setConfig\(\s*')

_decoder = json.JSONDecoder()


def _decode_after(pattern, text):
    """Decode the JSON object that starts right after `pattern` in `text`."""
    for match in pattern.finditer(text):
        start = match.end()
        if start >= len(text) or text[start] != '{':
            continue
        try:
            value, _ = _decoder.raw_decode(text, start)
        except ValueError:
            continue
        if isinstance(value, dict):
            return value
    return None


def find_player_response(html):
    """
    Locate the player response blob inside a watch or embed page.
    """
    soup = BeautifulSoup(html, 'html.parser')
    for script in soup.find_all('script'):
        text = script.string
        if not text:
            continue
        for marker in _PLAYER_MARKERS:
            player = _decode_after(marker, text)
            if player:
                return player

        # Embed pages carry it inside yt.setConfig(...) instead
        setting = _decode_after(_SET_CONFIG, text)
        if setting:
            player = _player_from_config(setting)
            if player:
                return player
    return None


def _player_from_config(setting):
    embedded = (setting.get('PLAYER_VARS') or {}).get('embedded_player_response')
    if embedded:
        try:
            return json.loads(embedded)
        except ValueError:
            pass

    video_info = setting.get('VIDEO_INFO')
    if video_info:
        info = urllib.parse.parse_qs(video_info)
        blob = info.get('player_response', [None])[0]
        if blob:
            try:
                return json.loads(blob)
            except ValueError:
                pass
        if info.get('title'):
            return {'videoDetails': {'title': info['title'][0]}}
    return None


def page_title(html):
    soup = BeautifulSoup(html, 'html.parser')
    if soup.title and soup.title.string:
        title = soup.title.string.replace(' - YouTube', '').strip()
        return title or None
    return None


class Provider:
    """
    One way of turning an identifier into media links.

    Subclasses implement `fetch`, returning the raw payload for the
    normalizer, or None when the source has nothing for this identifier.
    Any exception raised is treated by the resolver as a decline.
    """

    name = None

    def fetch(self, identifier, timeout):
        raise NotImplementedError

    def invoke(self, identifier, timeout):
        raw = self.fetch(identifier, timeout)
        if raw is None:
            return None
        return normalize(raw, self.name)

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class WatchPageProvider(Provider):
    """
    Scrape the player response straight out of the watch page HTML.
    """

    name = 'youtube-direct'

    def fetch(self, identifier, timeout):
        response = requests.get(
            config.WATCH_URL,
            params={'v': identifier},
            headers=config.HTML_HEADERS,
            timeout=timeout,
        )
        response.raise_for_status()

        player = find_player_response(response.text)
        if not player:
            return None
        return {
            "identifier": identifier,
            "title": page_title(response.text),
            "player_response": player,
        }


class PlayerApiProvider(Provider):
    """
    Ask the player endpoint directly, posing as a mobile client.
    """

    name = 'youtube-player'

    def fetch(self, identifier, timeout):
        payload = {
            'context': {'client': dict(config.PLAYER_CLIENT)},
            'videoId': identifier,
            'contentCheckOk': True,
            'racyCheckOk': True,
        }
        headers = dict(config.JSON_HEADERS)
        headers['Content-Type'] = 'application/json'

        response = requests.post(config.PLAYER_ENDPOINT, json=payload, headers=headers, timeout=timeout)
        response.raise_for_status()

        player = response.json()
        status = (player.get('playabilityStatus') or {}).get('status')
        if status and status != 'OK':
            print(f"Player endpoint reports {status} for {identifier}")
            return None
        return {
            "identifier": identifier,
            "player_response": player,
        }


class EmbedPageProvider(Provider):
    """Embed page; only some videos still ship streaming data here."""

    name = 'youtube-embed'

    def fetch(self, identifier, timeout):
        response = requests.get(
            config.EMBED_URL.format(id=identifier),
            headers=config.HTML_HEADERS,
            timeout=timeout,
        )
        response.raise_for_status()

        player = find_player_response(response.text)
        if not player:
            return None
        return {
            "identifier": identifier,
            "title": page_title(response.text),
            "player_response": player,
        }


class MirrorProvider(Provider):
    """
    Walk a list of mirror instances until one answers with JSON.

    A failing instance only moves on to the next one; the provider as a
    whole returns None when none of them answered.
    """

    path = None

    def __init__(self, instances=None):
        self.instances = list(instances if instances is not None else self.default_instances())

    def default_instances(self):
        return []

    def fetch(self, identifier, timeout):
        for instance in self.instances:
            base = instance if '://' in instance else f"https://{instance}"
            api_url = f"{base.rstrip('/')}{self.path.format(id=identifier)}"
            try:
                response = requests.get(api_url, headers=config.JSON_HEADERS, timeout=timeout)
                if response.status_code != 200:
                    print(f"{self.name} {base} returned status {response.status_code}")
                    continue
                data = response.json()
            except (requests.RequestException, ValueError) as e:
                print(f"{self.name} fetch failed for {base}: {e}")
                continue

            if not isinstance(data, dict) or not data or data.get('error'):
                continue
            return {
                "identifier": identifier,
                "instance": base,
                "data": data,
            }
        return None


class InvidiousProvider(MirrorProvider):
    name = 'invidious'
    path = '/api/v1/videos/{id}'

    def default_instances(self):
        return config.INVIDIOUS_INSTANCES


class PipedProvider(MirrorProvider):
    name = 'piped'
    path = '/streams/{id}'

    def default_instances(self):
        return config.PIPED_INSTANCES


PROVIDERS = {
    WatchPageProvider.name: WatchPageProvider,
    PlayerApiProvider.name: PlayerApiProvider,
    EmbedPageProvider.name: EmbedPageProvider,
    InvidiousProvider.name: InvidiousProvider,
    PipedProvider.name: PipedProvider,
}


def default_providers(order=None):
    """
    Build the provider chain in the configured order.
    """
    order = order if order is not None else config.PROVIDER_ORDER
    providers = []
    for name in order:
        factory = PROVIDERS.get(name)
        if factory is None:
            print(f"Unknown provider {name!r}, skipping")
            continue
        providers.append(factory())
    if not providers:
        providers = [PROVIDERS[name]() for name in config.DEFAULT_PROVIDER_ORDER]
    return providers
