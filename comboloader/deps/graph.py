"""
Dependency graph providers.
"""

__all__ = [
    "DependencyGraphProvider",
    "DependencyGraph",
]


import abc
import logging
import threading

from .deplist import DependencyList
from ..errors import DependencyVerificationError


logger = logging.getLogger(__name__)


class DependencyGraphProvider(abc.ABC):
    """Source of the dependencies modules declare."""

    @property
    @abc.abstractmethod
    def last_modified(self):
        """Stamp that changes whenever any declared dependency changes."""

    @abc.abstractmethod
    def declared_dependencies(self, name):
        """Ids listed in define() of the module, or None if unknown."""

    def require_dependencies(self, name):
        """Ids passed to require() calls inside the module."""
        return ()

    @abc.abstractmethod
    def expanded_dependencies(self, name, features, dependent_features=None,
                              include_details=False,
                              perform_has_branching=None):
        """ModuleDeps of everything 'name' transitively depends on."""

    def verify_declared_dependencies(self, name, declared):
        current = self.declared_dependencies(name)
        if current is None or list(current) != list(declared):
            raise DependencyVerificationError('Declared dependencies of %r '
                                              'changed: %r (expected %r)',
                                              name, list(declared), current)


class DependencyGraph(DependencyGraphProvider):
    """In-memory graph built from add_module() calls."""

    def __init__(self, config):
        super(DependencyGraph, self).__init__()
        self.config = config
        self._lock = threading.Lock()
        self._modules = {}
        self._last_modified = 0

    @property
    def last_modified(self):
        return self._last_modified

    def add_module(self, name, declared=(), require=()):
        with self._lock:
            self._modules[name] = (tuple(declared), tuple(require))
            self._last_modified += 1
        logger.debug('module %s: define %r, require %r', name,
                     list(declared), list(require))

    def remove_module(self, name):
        with self._lock:
            if self._modules.pop(name, None) is not None:
                self._last_modified += 1

    def __contains__(self, name):
        return name in self._modules

    def declared_dependencies(self, name):
        entry = self._modules.get(name)
        return list(entry[0]) if entry is not None else None

    def require_dependencies(self, name):
        entry = self._modules.get(name)
        return list(entry[1]) if entry is not None else ()

    def expanded_dependencies(self, name, features, dependent_features=None,
                              include_details=False,
                              perform_has_branching=None):
        deplist = DependencyList([name], self.config, self, features,
                                 include_details, perform_has_branching)
        if dependent_features is not None:
            dependent_features.update(deplist.dependent_features)
        return deplist.expanded_deps.copy()
