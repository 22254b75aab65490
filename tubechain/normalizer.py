"""
Maps every provider's raw payload into the one response shape the API returns.

Readers are keyed by provider name; providers without a dedicated reader are
expected to hand over the generic shape:

    {"identifier": ..., "title": ..., "thumbnail": ..., "variants": [
        {"quality": ..., "url": ..., "mime": ..., "width": ..., "height": ...,
         "fps": ..., "audio": ...},
    ]}
"""
import urllib.parse

from . import config


def _as_int(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return None


def format_duration(seconds):
    seconds = _as_int(seconds)
    if not seconds:
        return None
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


def quality_label(quality=None, height=None):
    """
    Explicit label wins, then a height-derived "{height}p", then "unknown".
    """
    if quality:
        return str(quality)
    height = _as_int(height)
    if height:
        return f"{height}p"
    return 'unknown'


def build_variant(url, quality=None, mime=None, width=None, height=None, fps=None, audio=False):
    is_audio = bool(audio)
    if not is_audio and mime and 'audio' in mime.lower():
        is_audio = True
    if not mime:
        mime = 'audio/mp4' if is_audio else 'video/mp4'

    return {
        "quality": quality_label(quality, height),
        "url": url,
        "mime_type": mime,
        "width": _as_int(width),
        "height": _as_int(height),
        "fps": _as_int(fps),
        "is_audio_only": is_audio,
    }


def _dedupe(variants):
    seen = set()
    unique = []
    for variant in variants:
        if not variant['url'] or variant['url'] in seen:
            continue
        seen.add(variant['url'])
        unique.append(variant)
    return unique


def _result(identifier, provider_name, variants, title=None, author=None, duration=None, thumbnail=None):
    return {
        "status": "success",
        "identifier": identifier,
        "title": title or None,
        "author": author or None,
        "duration": duration,
        "thumbnail": thumbnail,
        "media_variants": _dedupe(variants),
        "source": provider_name,
    }


def _default_thumbnail(identifier):
    return config.THUMBNAIL_URL.format(id=identifier) if identifier else None


def _format_url(fmt):
    url = fmt.get('url')
    if not url and fmt.get('signatureCipher'):
        url = urllib.parse.parse_qs(fmt['signatureCipher']).get('url', [None])[0]
    return url


def _read_player_response(raw, provider_name):
    """
    YouTube player response, as embedded in the watch/embed pages or
    returned by the player endpoint.
    """
    player = raw.get('player_response') or {}
    streaming = player.get('streamingData') or {}
    details = player.get('videoDetails') or {}

    variants = []
    for fmt in streaming.get('formats') or []:
        url = _format_url(fmt)
        if url:
            variants.append(build_variant(
                url,
                quality=fmt.get('qualityLabel'),
                mime=fmt.get('mimeType'),
                width=fmt.get('width'),
                height=fmt.get('height'),
                fps=fmt.get('fps'),
            ))

    for fmt in streaming.get('adaptiveFormats') or []:
        url = _format_url(fmt)
        if not url:
            continue
        audio = bool(fmt.get('audioQuality')) and not fmt.get('height')
        variants.append(build_variant(
            url,
            quality=fmt.get('qualityLabel') or ('audio' if audio else None),
            mime=fmt.get('mimeType'),
            width=fmt.get('width'),
            height=fmt.get('height'),
            fps=fmt.get('fps'),
            audio=audio,
        ))

    thumbnails = (details.get('thumbnail') or {}).get('thumbnails') or []
    identifier = raw.get('identifier') or details.get('videoId')
    return _result(
        identifier,
        provider_name,
        variants,
        title=details.get('title') or raw.get('title'),
        author=details.get('author'),
        duration=format_duration(details.get('lengthSeconds')),
        thumbnail=thumbnails[-1].get('url') if thumbnails else _default_thumbnail(identifier),
    )


def _split_size(size):
    if not size or 'x' not in str(size):
        return None, None
    width, _, height = str(size).partition('x')
    return _as_int(width), _as_int(height)


def _read_invidious(raw, provider_name):
    """Invidious /api/v1/videos/{id} payload."""
    data = raw.get('data') or {}
    variants = []

    for stream in data.get('formatStreams') or []:
        if not stream.get('url'):
            continue
        width, height = _split_size(stream.get('size'))
        variants.append(build_variant(
            stream['url'],
            quality=stream.get('qualityLabel') or stream.get('quality'),
            mime=stream.get('type'),
            width=width,
            height=height,
            fps=stream.get('fps'),
        ))

    for stream in data.get('adaptiveFormats') or []:
        if not stream.get('url'):
            continue
        width, height = _split_size(stream.get('size'))
        variants.append(build_variant(
            stream['url'],
            quality=stream.get('qualityLabel'),
            mime=stream.get('type'),
            width=width,
            height=height,
            fps=stream.get('fps'),
        ))

    thumbnails = data.get('videoThumbnails') or []
    identifier = raw.get('identifier') or data.get('videoId')
    return _result(
        identifier,
        provider_name,
        variants,
        title=data.get('title'),
        author=data.get('author'),
        duration=format_duration(data.get('lengthSeconds')),
        thumbnail=thumbnails[0].get('url') if thumbnails else _default_thumbnail(identifier),
    )


def _read_piped(raw, provider_name):
    """Piped /streams/{id} payload."""
    data = raw.get('data') or {}
    variants = []

    for stream in data.get('videoStreams') or []:
        if not stream.get('url'):
            continue
        variants.append(build_variant(
            stream['url'],
            quality=stream.get('quality'),
            mime=stream.get('mimeType'),
            width=stream.get('width'),
            height=stream.get('height'),
            fps=stream.get('fps'),
        ))

    for stream in data.get('audioStreams') or []:
        if not stream.get('url'):
            continue
        variants.append(build_variant(
            stream['url'],
            quality=stream.get('quality'),
            mime=stream.get('mimeType'),
            audio=True,
        ))

    return _result(
        raw.get('identifier'),
        provider_name,
        variants,
        title=data.get('title'),
        author=data.get('uploader'),
        duration=format_duration(data.get('duration')),
        thumbnail=data.get('thumbnailUrl') or _default_thumbnail(raw.get('identifier')),
    )


def _read_generic(raw, provider_name):
    variants = []
    for item in raw.get('variants') or []:
        url = item.get('url')
        if not url:
            continue
        variants.append(build_variant(
            url,
            quality=item.get('quality'),
            mime=item.get('mime') or item.get('mime_type') or item.get('type'),
            width=item.get('width'),
            height=item.get('height'),
            fps=item.get('fps'),
            audio=item.get('audio') or item.get('is_audio_only'),
        ))

    duration = raw.get('duration')
    if isinstance(duration, (int, float)):
        duration = format_duration(duration)

    return _result(
        raw.get('identifier'),
        provider_name,
        variants,
        title=raw.get('title'),
        author=raw.get('author'),
        duration=duration or None,
        thumbnail=raw.get('thumbnail'),
    )


READERS = {
    'youtube-direct': _read_player_response,
    'youtube-player': _read_player_response,
    'youtube-embed': _read_player_response,
    'invidious': _read_invidious,
    'piped': _read_piped,
}


def normalize(raw, provider_name):
    reader = READERS.get(provider_name, _read_generic)
    return reader(raw or {}, provider_name)
