"""
Holder of the generators currently representing one cache slot.
"""

__all__ = [
    "CacheKeySlot",
]


import logging
import threading

from . import generate_key
from . import is_provisional
from . import to_string


logger = logging.getLogger(__name__)


class CacheKeySlot(object):
    """
    Starts with provisional generators. A concrete generator from a finished
    build replaces its provisional counterpart, and later ones are merged
    in with combine(), so concurrent builds converge on the same generators
    whatever order they finish in.
    """

    def __init__(self, generators):
        super(CacheKeySlot, self).__init__()
        self._lock = threading.Lock()
        self._generators = tuple(generators)

    @property
    def generators(self):
        with self._lock:
            return self._generators

    def is_provisional(self):
        return is_provisional(self.generators)

    def generate_key(self, request):
        return generate_key(request, self.generators)

    def update(self, generators):
        """Folds in the generators produced by a finished build."""
        generators = tuple(generators)
        with self._lock:
            current = self._generators
            if len(current) != len(generators):
                raise ValueError('Generator lists differ in length: %d != %d'
                                 % (len(current), len(generators)))

            updated = tuple(map(_merge, current, generators))
            if updated != current:
                logger.debug('cache key slot: %s --> %s',
                             to_string(current), to_string(updated))
            self._generators = updated
            return updated

    def __repr__(self):
        return '%s(%s)' % (type(self).__name__, to_string(self.generators))


def _merge(current, new):
    if current.is_provisional():
        return new
    if new.is_provisional():
        return current
    return current.combine(new)
