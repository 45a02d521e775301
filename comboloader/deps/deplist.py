"""
Explicit and transitively expanded dependencies of a set of module ids.
"""

__all__ = [
    "DependencyList",
    "EXCLUDED_MODULES",
]


import logging
import threading

from .info import ModuleDepInfo
from .moduledeps import ModuleDeps
from ..errors import AliasResolutionError
from ..errors import ConfigurationError
from ..errors import DependencyVerificationError
from ..features import Features
from ..features import is_has_plugin
from ..hasexpr import HasNode
from ..logic import Formula
from ..paths import normalize_path
from ..util import logger_dump


logger = logging.getLogger(__name__)

# AMD pseudo-modules provided by the loader itself.
EXCLUDED_MODULES = frozenset(['require', 'exports', 'module'])


class DependencyList(object):
    """
    Lazily computed dependencies of 'names' under a feature assignment.

    Nothing is computed until one of the properties is first read; errors
    are raised from there, and a failed computation is retried on the next
    access.
    """

    _dump_attrs = ('names', 'features', 'explicit_deps', 'expanded_deps',
                   'dependent_features')

    def __init__(self, names, config, graph, features,
                 include_details=False, perform_has_branching=None,
                 resolve_aliases=True):
        super(DependencyList, self).__init__()

        if perform_has_branching is None:
            perform_has_branching = not config.disable_has_plugin_branching

        self.names = list(names)
        self.config = config
        self.graph = graph
        self.features = features
        self.include_details = include_details
        self.perform_has_branching = perform_has_branching
        self.resolve_aliases = resolve_aliases

        self._lock = threading.Lock()
        self._initialized = False
        self._explicit_deps = None
        self._expanded_deps = None
        self._dependent_features = None

    @property
    def explicit_deps(self):
        self._initialize()
        return self._explicit_deps

    @property
    def expanded_deps(self):
        self._initialize()
        return self._expanded_deps

    @property
    def dependent_features(self):
        self._initialize()
        return self._dependent_features

    def _initialize(self):
        with self._lock:
            if self._initialized:
                return

            last_modified = self.graph.last_modified

            explicit = ModuleDeps()
            expanded = ModuleDeps()
            dependent = set()

            for name in self.names:
                self._process_dep(name, explicit, Formula.TRUE, set(),
                                  dependent, None)

            for name, info in list(explicit.items()):
                self._expand(name, info.formula, expanded, dependent)

            for deps in explicit, expanded:
                for name in EXCLUDED_MODULES:
                    deps.remove(name)
                coerce = self.config.coerce_undefined_to_false
                deps.resolve_with(self.features, coerce)

            if self.graph.last_modified != last_modified:
                raise DependencyVerificationError('Dependency graph changed '
                                                  'while expanding %s',
                                                  ', '.join(self.names))

            self._explicit_deps = explicit
            self._expanded_deps = expanded
            self._dependent_features = frozenset(dependent)
            self._initialized = True

        logger_dump(logger, self)

    def _resolve_name(self, name, dependent, details):
        try:
            return self.config.resolve(name, self.features, dependent,
                                       details, self.resolve_aliases,
                                       not self.perform_has_branching)
        except AliasResolutionError:
            raise
        except ConfigurationError as e:
            raise AliasResolutionError('Failed to resolve %r: %s', name, e)

    def _process_dep(self, name, deps, condition, recursion, dependent,
                     comment, has_plugin=None):
        if name in recursion:
            return
        recursion.add(name)

        details = [] if self.include_details else None
        resolved = self._resolve_name(name, dependent, details)
        if not resolved:
            return
        if details:
            comment = '; '.join(filter(None, [comment] + details))

        plugin = resolved.split('!', 1)[0] if '!' in resolved else None
        plugin_comment = 'plugin' if self.include_details else None

        if plugin and self.perform_has_branching and is_has_plugin(plugin):
            node = HasNode.parse(resolved[len(plugin)+1:])
            # Branch on every tested feature regardless of the request so
            # the discovered features do not vary with it. The request
            # features are applied once expansion is done.
            branches = node.evaluate_all(plugin, Features.EMPTY, dependent,
                                         comment=comment)
            if any(self._left_conditional(info.formula)
                   for info in branches.values()):
                self._process_dep(plugin, deps, condition, set(recursion),
                                  dependent, plugin_comment)
            for branch_name, info in branches.items():
                branch_condition = condition.and_with(info.formula)
                if branch_condition.is_false():
                    continue
                self._process_dep(branch_name, deps, branch_condition,
                                  set(recursion), dependent, info.comment,
                                  plugin)
            return

        if plugin:
            self._process_dep(plugin, deps, condition, set(recursion),
                              dependent, plugin_comment)

        if has_plugin is not None:
            # reached through has! branching: loaded via the has! plugin
            info = ModuleDepInfo(has_plugin, condition, comment,
                                 from_has_branching=True)
        else:
            info = ModuleDepInfo(plugin, condition, comment)
        deps.add(resolved, info)

    def _left_conditional(self, formula):
        # The plugin is only loaded to evaluate ids left conditional.
        formula = formula.resolve_with(self.features,
                                       self.config.coerce_undefined_to_false)
        return not (formula.is_true() or formula.is_false())

    def _expand(self, name, condition, out, dependent):
        declared = list(self.graph.declared_dependencies(name) or ())
        if self.config.include_require_deps:
            declared += self.graph.require_dependencies(name) or ()

        comment = ('dependency of %s' % name
                   if self.include_details else None)

        for dep in declared:
            deps = ModuleDeps()
            self._process_dep(normalize_path(name, dep), deps, condition,
                              set(), dependent, comment)
            for dep_name, info in deps.items():
                if out.add(dep_name, info):
                    self._expand(dep_name, info.formula, out, dependent)

    def __repr__(self):
        return '%s(%r, %s)' % (type(self).__name__, self.names,
                               self.features)
