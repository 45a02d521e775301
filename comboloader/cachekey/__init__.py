"""
Cache key generators.

Every cacheable build stage contributes a generator. A generator may start
provisional, when the request dimensions its output depends on are not
known yet, and be replaced by a concrete one once a build has discovered
them. Generators for the same cache slot are merged with combine(), which
is commutative, associative and idempotent.
"""

__all__ = [
    "CacheKeyGenerator",
    "generate_key",
    "is_provisional",
    "combine",
    "to_string",
]


import abc


class CacheKeyGenerator(abc.ABC):

    @abc.abstractmethod
    def generate_key(self, request):
        """Key fragment for the request; '' means no contribution."""

    @abc.abstractmethod
    def combine(self, other):
        """Returns a generator covering what both generators depend on."""

    @abc.abstractmethod
    def is_provisional(self):
        pass

    @abc.abstractmethod
    def _key(self):
        """Value that equality and hashing are defined over."""

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((type(self), self._key()))

    def _check_combinable(self, other):
        if type(self) is not type(other):
            raise TypeError("Can't combine %s with %s"
                            % (type(self).__name__, type(other).__name__))


def generate_key(request, generators):
    keys = (generator.generate_key(request) for generator in generators)
    return ';'.join(key for key in keys if key)


def is_provisional(generators):
    return any(generator.is_provisional() for generator in generators)


def combine(generators_a, generators_b):
    """Element-wise combine of two generator lists (None stands for none)."""
    if generators_a is None:
        return generators_b
    if generators_b is None:
        return generators_a
    if len(generators_a) != len(generators_b):
        raise ValueError('Generator lists differ in length: %d != %d'
                         % (len(generators_a), len(generators_b)))
    return tuple(a.combine(b) for a, b in zip(generators_a, generators_b))


def to_string(generators):
    return ';'.join(map(str, generators))


from .features import FeatureSetCacheKeyGenerator
from .i18n import I18nCacheKeyGenerator
from .export_names import ExportNamesCacheKeyGenerator
from .slot import CacheKeySlot
