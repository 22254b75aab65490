import requests

from . import config


def fetch_oembed(identifier, timeout=None):
    """
    Title, author and thumbnail from the oEmbed endpoint.

    Keys are always present; values are None when the lookup failed.
    """
    info = {
        "title": None,
        "author": None,
        "thumbnail": config.THUMBNAIL_URL.format(id=identifier),
    }
    try:
        response = requests.get(
            config.OEMBED_URL,
            params={'url': f"{config.WATCH_URL}?v={identifier}", 'format': 'json'},
            headers=config.JSON_HEADERS,
            timeout=timeout or config.PROVIDER_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        print(f"oEmbed lookup failed for {identifier}: {e}")
        return info

    if isinstance(data, dict):
        info['title'] = data.get('title') or None
        info['author'] = data.get('author_name') or None
        info['thumbnail'] = data.get('thumbnail_url') or info['thumbnail']
    return info
