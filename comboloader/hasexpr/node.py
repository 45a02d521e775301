"""
Immutable trees of has! plugin expressions.
"""

__all__ = [
    "HasNode",
]


import functools
import logging

from collections import namedtuple

from .. import paths
from ..deps.info import ModuleDepInfo
from ..deps.moduledeps import ModuleDeps
from ..logic import Literal
from ..logic import Term


logger = logging.getLogger(__name__)


class HasNode(namedtuple('HasNode', 'feature name if_true if_false')):
    """
    Either a leaf naming a module (possibly empty, meaning no module) or a
    conditional node testing a single feature.
    """
    __slots__ = ()

    def __new__(cls, feature=None, name='', if_true=None, if_false=None):
        if feature is not None and (if_true is None or if_false is None):
            raise ValueError('Conditional node needs both branches')
        return super(HasNode, cls).__new__(cls, feature, name,
                                           if_true, if_false)

    @classmethod
    def leaf(cls, name):
        return cls(name=name)

    @classmethod
    def conditional(cls, feature, if_true, if_false):
        return cls(feature, if_true=if_true, if_false=if_false)

    @staticmethod
    def parse(expression):
        """Parses an expression like 'feature?ifTrue:ifFalse'."""
        return _parse(expression)

    def is_leaf(self):
        return self.feature is None

    def evaluate(self, features, discovered=None, coerce=False):
        """
        Returns the module name selected by the features, '' when no module
        is selected, or None if a tested feature is unspecified and
        'coerce' is not set. Tested feature names go into 'discovered'.
        """
        node = self
        while not node.is_leaf():
            if discovered is not None:
                discovered.add(node.feature)
            if node.feature not in features and not coerce:
                return None
            node = node.if_true if features.get(node.feature) else node.if_false
        return node.name

    def evaluate_all(self, plugin_name, features, discovered=None,
                     term=None, comment=None, coerce=False):
        """
        Splits on every unspecified feature and returns ModuleDeps of all
        reachable module names, each conditioned on the branch that leads
        to it (ANDed with 'term', when given). With 'coerce' set,
        unspecified features select the false branch instead.
        """
        deps = ModuleDeps()
        self._evaluate_all(deps, plugin_name, features, discovered,
                           term if term is not None else Term.TRUE, comment,
                           coerce)
        return deps

    def _evaluate_all(self, deps, plugin_name, features, discovered,
                      term, comment, coerce):
        if self.is_leaf():
            if self.name:
                deps.add(self.name, ModuleDepInfo(plugin_name, term, comment,
                                                  from_has_branching=True))
            return

        if discovered is not None:
            discovered.add(self.feature)

        if self.feature in features or coerce:
            branch = self.if_true if features.get(self.feature) else self.if_false
            branch._evaluate_all(deps, plugin_name, features, discovered,
                                 term, comment, coerce)
            return

        logger.debug('branching on unspecified feature %r', self.feature)
        for value, branch in ((True, self.if_true), (False, self.if_false)):
            branch_term = term.and_with(Literal(self.feature, value))
            if branch_term is not None:
                branch._evaluate_all(deps, plugin_name, features, discovered,
                                     branch_term, comment, coerce)

    def resolve(self, features, discovered=None, coerce=False):
        """
        Returns a node with every decidable condition replaced by the
        branch it selects.
        """
        if self.is_leaf():
            return self

        if discovered is not None:
            discovered.add(self.feature)

        if self.feature in features or coerce:
            branch = self.if_true if features.get(self.feature) else self.if_false
            return branch.resolve(features, discovered, coerce)

        return self.conditional(self.feature,
                                self.if_true.resolve(features, discovered),
                                self.if_false.resolve(features, discovered))

    def endpoints(self):
        """Non-empty leaf names, in order of appearance."""
        result = []
        self._collect_endpoints(result)
        return result

    def _collect_endpoints(self, result):
        if self.is_leaf():
            if self.name and self.name not in result:
                result.append(self.name)
        else:
            self.if_true._collect_endpoints(result)
            self.if_false._collect_endpoints(result)

    def map_endpoints(self, func):
        """Returns a node with each non-empty leaf name replaced by func()."""
        if self.is_leaf():
            return self.leaf(func(self.name)) if self.name else self
        return self.conditional(self.feature,
                                self.if_true.map_endpoints(func),
                                self.if_false.map_endpoints(func))

    def normalize(self, ref):
        """Rewrites relative module names against the module id 'ref'."""
        return self.map_endpoints(lambda name: paths.normalize_path(ref, name))

    def _to_string(self, closed):
        # A closed node is followed by ':' of an enclosing node, so its own
        # else-part must be spelled out to keep that ':' from binding here.
        if self.is_leaf():
            return self.name

        if_false = self.if_false._to_string(closed)
        has_colon = closed or bool(if_false)
        if_true = self.if_true._to_string(has_colon)
        if not if_true and not if_false:
            return ''

        ret = self.feature + '?' + if_true
        if has_colon:
            ret += ':' + if_false
        return ret

    def __str__(self):
        return self._to_string(False)

    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, str(self))


HasNode.EMPTY = HasNode()


@functools.lru_cache(maxsize=256)
def _parse(expression):
    from .parse import parse
    return parse(expression)
