"""
Source Lookup — backend factory.
"""

from theeye.cache import LookupCache
from theeye.lookup import NullLookup, SourceLookup


def get_lookup(
    backend_name: str = "null",
    fixture_path: str = "",
    cache_ttl: int = 0,
    cache_size: int = 500,
) -> SourceLookup:
    """Return the named lookup backend, wrapped in a TTL cache when cache_ttl > 0.

    The null backend is returned bare since it has nothing to cache.
    """
    if backend_name == "null":
        backend: SourceLookup = NullLookup()
    elif backend_name == "fixture":
        from theeye.lookup.fixture import FixtureLookup
        backend = FixtureLookup.from_json(fixture_path) if fixture_path else FixtureLookup()
    else:
        raise ValueError(f"Unknown lookup backend: {backend_name}")

    if cache_ttl > 0 and not isinstance(backend, NullLookup):
        from theeye.lookup.cached import CachedLookup
        return CachedLookup(backend, LookupCache(ttl_seconds=cache_ttl, max_entries=cache_size))
    return backend
