"""
Cache key over whether module names are exported into define() calls.
"""

__all__ = [
    "ExportNamesCacheKeyGenerator",
]


from . import CacheKeyGenerator


class ExportNamesCacheKeyGenerator(CacheKeyGenerator):
    __slots__ = ()

    def generate_key(self, request):
        return 'expn:1' if request.export_module_names else 'expn:0'

    def combine(self, other):
        self._check_combinable(other)
        return self

    def is_provisional(self):
        return False

    def _key(self):
        return ()

    def __str__(self):
        return 'expn'
