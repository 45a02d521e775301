"""
Cache keys over the has-features a build depends on.
"""

__all__ = [
    "FeatureSetCacheKeyGenerator",
]


import logging

from . import CacheKeyGenerator


logger = logging.getLogger(__name__)


class FeatureSetCacheKeyGenerator(CacheKeyGenerator):
    """
    Without known feature names the generator is provisional and keys on
    the whole feature assignment of the request. Once the names a build
    depends on are known, keys only carry those features, so requests that
    differ in other features share the key.
    """
    __slots__ = '_names',

    def __init__(self, names=None):
        super(FeatureSetCacheKeyGenerator, self).__init__()
        self._names = frozenset(names) if names is not None else None

    names = property(lambda self: self._names)

    def is_provisional(self):
        return self._names is None

    def with_features(self, discovered):
        """The concrete generator for the features a build consulted."""
        return type(self)(discovered)

    def generate_key(self, request):
        features = request.features

        if self._names is None:
            return 'has:provisional{%s}' % ','.join(
                _feature_str(name, value)
                for name, value in sorted(features.items()))

        coerce = request.coerce_undefined_to_false
        key = []
        for name in sorted(self._names):
            if name in features:
                key.append(_feature_str(name, features[name]))
            elif coerce:
                key.append(_feature_str(name, False))
        return 'has{%s}' % ','.join(key)

    def combine(self, other):
        self._check_combinable(other)
        if self._names is None:
            return self
        if other._names is None:
            return other
        if self._names >= other._names:
            return self
        combined = type(self)(self._names | other._names)
        logger.debug('combined %s and %s', self, other)
        return combined

    def _key(self):
        return self._names

    def __str__(self):
        if self._names is None:
            return 'has:provisional'
        return 'has:[%s]' % ', '.join(sorted(self._names))

    def __repr__(self):
        return '%s(%r)' % (type(self).__name__,
                           sorted(self._names)
                           if self._names is not None else None)


def _feature_str(name, value):
    return name if value else '!' + name


FeatureSetCacheKeyGenerator.PROVISIONAL = FeatureSetCacheKeyGenerator()
