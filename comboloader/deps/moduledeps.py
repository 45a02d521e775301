"""
Ordered maps from module ids to the conditions requiring them.
"""

__all__ = [
    "ModuleDeps",
]


from collections.abc import Mapping

from ..logic import Term


class ModuleDeps(Mapping):
    """
    Module id -> ModuleDepInfo, in insertion order.

    Adding an id twice ORs the conditions. Entries whose condition becomes
    false are dropped.
    """

    def __init__(self, deps=None):
        super(ModuleDeps, self).__init__()
        self._deps = {}
        if deps is not None:
            self.add_all(deps)

    def __getitem__(self, module_id):
        return self._deps[module_id]

    def __iter__(self):
        return iter(self._deps)

    def __len__(self):
        return len(self._deps)

    def copy(self):
        return type(self)(self)

    def add(self, module_id, info):
        """Merges a copy of 'info' in. Returns True if anything changed."""
        if info.formula.is_false():
            return False
        existing = self._deps.get(module_id)
        if existing is None:
            self._deps[module_id] = info.copy()
            return True
        return existing.add(info)

    def add_all(self, other):
        modified = False
        for module_id, info in other.items():
            modified |= self.add(module_id, info)
        return modified

    def remove(self, module_id):
        self._deps.pop(module_id, None)

    def contains_dep(self, module_id, term=Term.TRUE):
        """True if the module is required whenever 'term' holds."""
        info = self._deps.get(module_id)
        return info is not None and info.contains_term(term)

    def and_with(self, term):
        for info in self._deps.values():
            info.and_with(term)
        self._prune()

    def subtract(self, module_id, info):
        existing = self._deps.get(module_id)
        if existing is None:
            return False
        modified = existing.subtract(info)
        self._prune()
        return modified

    def subtract_all(self, other):
        """
        Removes what 'other' already guarantees: ids it requires
        unconditionally go away, and for conditional ones only the terms
        implied by its terms are filtered out. This is not a logical
        difference of the conditions.
        """
        modified = False
        for module_id, info in other.items():
            existing = self._deps.get(module_id)
            if existing is not None:
                modified |= existing.subtract(info)
        self._prune()
        return modified

    def resolve_with(self, features, coerce=False):
        modified = False
        for info in self._deps.values():
            modified |= info.resolve_with(features, coerce)
        self._prune()
        return modified

    def simplify(self):
        for info in self._deps.values():
            info.simplify()
        self._prune()
        return self

    def _prune(self):
        for module_id in [module_id for module_id, info in self._deps.items()
                          if info.formula.is_false()]:
            del self._deps[module_id]

    def module_ids(self):
        """Module ids, each conditional one prefixed by its has! prefixes."""
        ret = []
        for module_id, info in self._deps.items():
            prefixes = info.has_plugin_prefixes()
            if prefixes is None:
                ret.append(module_id)
            else:
                ret.extend(prefix + module_id for prefix in prefixes)
        return ret

    def module_ids_with_comments(self):
        ret = {}
        for module_id, info in self._deps.items():
            prefixes = info.has_plugin_prefixes()
            for prefixed in ([module_id] if prefixes is None else
                             [prefix + module_id for prefix in prefixes]):
                ret[prefixed] = info.comment
        return ret

    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, self._deps)
