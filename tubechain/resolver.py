import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from . import config
from .events import print_sink


def build_fallback(identifier, alternative_links=None, message=None):
    """
    Terminal non-error payload returned when no provider produced media.
    """
    templates = alternative_links or config.ALTERNATIVE_LINKS or config.DEFAULT_ALTERNATIVE_LINKS
    links = [template.replace('{id}', identifier) for template in templates]
    return {
        "status": "info",
        "message": message or config.FALLBACK_MESSAGE,
        "identifier": identifier,
        "alternative_links": links,
        "example": links[0],
    }


def _invoke(provider, identifier, budget):
    # One-shot worker so a stuck provider can be abandoned at the timeout
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"provider-{provider.name}")
    try:
        future = executor.submit(provider.invoke, identifier, budget)
        return future.result(timeout=budget)
    finally:
        executor.shutdown(wait=False)


def resolve(identifier, providers, timeout=None, deadline=None, events=None, alternative_links=None):
    """
    Try each provider in order and return the first successful result.

    A provider declines by raising, returning None or a result without
    media variants, or by running past its timeout. Declines are reported to
    `events` and never propagate. When every provider declines, or the total
    deadline runs out first, the fallback payload is returned instead.
    """
    timeout = config.PROVIDER_TIMEOUT if timeout is None else timeout
    deadline = config.TOTAL_DEADLINE if deadline is None else deadline
    events = events or print_sink

    started = time.monotonic()
    for provider in providers:
        remaining = deadline - (time.monotonic() - started)
        if remaining <= 0:
            events('deadline', {'provider': provider.name, 'identifier': identifier})
            break

        budget = min(timeout, remaining)
        events('attempt', {'provider': provider.name, 'identifier': identifier, 'timeout': budget})
        try:
            result = _invoke(provider, identifier, budget)
        except FutureTimeout:
            events('decline', {
                'provider': provider.name,
                'identifier': identifier,
                'reason': 'timeout',
                'detail': f"no answer within {budget:.1f}s",
            })
            continue
        except Exception as e:
            events('decline', {
                'provider': provider.name,
                'identifier': identifier,
                'reason': 'error',
                'detail': f"{type(e).__name__}: {e}",
            })
            continue

        if not isinstance(result, dict) or not result.get('media_variants'):
            events('decline', {
                'provider': provider.name,
                'identifier': identifier,
                'reason': 'empty',
                'detail': 'no usable media variants',
            })
            continue

        events('success', {'provider': provider.name, 'identifier': identifier})
        return result

    events('exhausted', {'identifier': identifier})
    return build_fallback(identifier, alternative_links)
