"""
Cache keys over request locales.
"""

__all__ = [
    "I18nCacheKeyGenerator",
]


from . import CacheKeyGenerator


class I18nCacheKeyGenerator(CacheKeyGenerator):
    """
    Keys on the request locales that select a distinct resource bundle.
    Until the available locales are known the generator is provisional
    and keys on all request locales.
    """
    __slots__ = '_available',

    def __init__(self, available=None):
        super(I18nCacheKeyGenerator, self).__init__()
        self._available = (frozenset(locale.lower() for locale in available)
                           if available is not None else None)

    available = property(lambda self: self._available)

    def is_provisional(self):
        return self._available is None

    def with_locales(self, available):
        return type(self)(available)

    def _best_match(self, locale):
        locale = locale.lower()
        while locale:
            if locale in self._available:
                return locale
            locale = locale.rpartition('-')[0]
        return None

    def generate_key(self, request):
        if self._available is None:
            locales = set(locale.lower() for locale in request.locales)
        else:
            locales = set(filter(None, map(self._best_match,
                                           request.locales)))
        return 'i18n{%s}' % ','.join(sorted(locales))

    def combine(self, other):
        self._check_combinable(other)
        if self._available is None:
            return self
        if other._available is None:
            return other
        return type(self)(self._available | other._available)

    def _key(self):
        return self._available

    def __str__(self):
        if self._available is None:
            return 'i18n:provisional'
        return 'i18n:[%s]' % ', '.join(sorted(self._available))
