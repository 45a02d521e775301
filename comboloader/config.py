"""
Aggregator configuration: module id aliases, packages and has! plugin
options. Implements the alias resolver used by dependency lists.
"""

__all__ = [
    "AliasResolver",
    "AggregatorConfig",
    "MAX_RECURSION_COUNT",
]


import abc
import logging
import re

import yaml

from .errors import ConfigurationError
from .hasexpr import HasNode
from .features import is_has_plugin


logger = logging.getLogger(__name__)

MAX_RECURSION_COUNT = 25


class AliasResolver(abc.ABC):
    """Maps requested module ids to the ids that are actually loaded."""

    coerce_undefined_to_false = False
    disable_has_plugin_branching = False
    include_require_deps = False

    @abc.abstractmethod
    def resolve(self, name, features, dependent_features=None, details=None,
                resolve_aliases=True, evaluate_has_plugin=False):
        """
        Returns the resolved id of 'name'. Names of the features consulted
        are added to 'dependent_features', trace lines to 'details' (both
        may be None).
        """


class Alias(object):
    """
    A string pattern matches an id exactly, a compiled regex is searched
    in it. The replacement is a string (with group references for regex
    patterns) or a callable taking the match and a has() function.
    """
    __slots__ = 'pattern', 'replacement'

    def __init__(self, pattern, replacement):
        super(Alias, self).__init__()
        self.pattern = pattern
        self.replacement = replacement

    def apply(self, name, has):
        """Returns the aliased name, or None if the alias does not match."""
        if isinstance(self.pattern, str):
            if name != self.pattern:
                return None
            if callable(self.replacement):
                return self.replacement(name, has)
            return self.replacement

        match = self.pattern.search(name)
        if match is None:
            return None
        if callable(self.replacement):
            replaced = self.replacement(match, has)
        else:
            replaced = match.expand(self.replacement)
        return name[:match.start()] + replaced + name[match.end():]

    def __repr__(self):
        pattern = self.pattern
        if not isinstance(pattern, str):
            pattern = '/%s/' % pattern.pattern
        return '%s(%r, %r)' % (type(self).__name__, pattern, self.replacement)


class Package(object):
    __slots__ = 'name', 'location', 'main'

    def __init__(self, name, location=None, main=None):
        super(Package, self).__init__()
        self.name = name
        self.location = location or name
        main = main or 'main'
        if main.startswith('./'):
            main = main[2:]
        if main.endswith('.js'):
            main = main[:-3]
        self.main = main


class AggregatorConfig(AliasResolver):

    def __init__(self, aliases=(), packages=(),
                 coerce_undefined_to_false=False,
                 disable_has_plugin_branching=False,
                 include_require_deps=False):
        super(AggregatorConfig, self).__init__()

        self.aliases = [alias if isinstance(alias, Alias) else Alias(*alias)
                        for alias in aliases]
        self.packages = {}
        for package in packages:
            if isinstance(package, str):
                package = Package(package)
            elif not isinstance(package, Package):
                package = Package(**package)
            self.packages[package.name] = package

        self.coerce_undefined_to_false = coerce_undefined_to_false
        self.disable_has_plugin_branching = disable_has_plugin_branching
        self.include_require_deps = include_require_deps

    _options = {
        'coerceUndefinedToFalse':    'coerce_undefined_to_false',
        'disableHasPluginBranching': 'disable_has_plugin_branching',
        'includeRequireDeps':        'include_require_deps',
    }

    @classmethod
    def from_dict(cls, data):
        unknown = set(data) - set(cls._options) - {'aliases', 'packages'}
        if unknown:
            raise ConfigurationError('Unknown config properties: %s',
                                     ', '.join(sorted(unknown)))

        aliases = []
        for entry in data.get('aliases') or ():
            try:
                pattern, replacement = entry
            except (TypeError, ValueError):
                raise ConfigurationError('Alias must be a [pattern, '
                                         'replacement] pair, got %r', entry)
            if not isinstance(pattern, str) or not isinstance(replacement, str):
                raise ConfigurationError('Alias pattern and replacement must '
                                         'be strings, got %r', entry)
            if len(pattern) > 1 and pattern[0] == pattern[-1] == '/':
                try:
                    pattern = re.compile(pattern[1:-1])
                except re.error as e:
                    raise ConfigurationError('Bad alias regex %r: %s',
                                             pattern, e)
            aliases.append(Alias(pattern, replacement))

        packages = []
        for entry in data.get('packages') or ():
            if isinstance(entry, dict):
                if 'name' not in entry:
                    raise ConfigurationError('Package without a name: %r',
                                             entry)
                try:
                    packages.append(Package(**entry))
                except TypeError:
                    raise ConfigurationError('Bad package entry: %r', entry)
            else:
                packages.append(Package(str(entry)))

        options = dict((attr, bool(data[key]))
                       for key, attr in cls._options.items() if key in data)

        return cls(aliases, packages, **options)

    @classmethod
    def load(cls, stream_or_path):
        """Reads a YAML config document from a stream or a file path."""
        try:
            if isinstance(stream_or_path, str):
                with open(stream_or_path) as stream:
                    data = yaml.safe_load(stream)
            else:
                data = yaml.safe_load(stream_or_path)
        except yaml.YAMLError as e:
            raise ConfigurationError('Malformed config: %s', e)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError('Config must be a mapping, got %s',
                                     type(data).__name__)
        return cls.from_dict(data)

    def resolve(self, name, features, dependent_features=None, details=None,
                resolve_aliases=True, evaluate_has_plugin=False):
        if dependent_features is None:
            dependent_features = set()

        if '!' not in name:
            return self._resolve(name, features, dependent_features, details,
                                 resolve_aliases)

        plugin, resource = name.split('!', 1)
        plugin = self._resolve(plugin, features, dependent_features, details,
                               resolve_aliases)

        if not is_has_plugin(plugin):
            resource = self._resolve(resource, features, dependent_features,
                                     details, resolve_aliases)
            return plugin + '!' + resource

        node = HasNode.parse(resource)
        if evaluate_has_plugin:
            node = node.resolve(features, dependent_features,
                                self.coerce_undefined_to_false)
        node = node.map_endpoints(
            lambda endpoint: self.resolve(endpoint, features,
                                          dependent_features, details,
                                          resolve_aliases,
                                          evaluate_has_plugin))
        if node.is_leaf():
            if details is not None and node.name != name:
                details.append('%s --> %s' % (name, node.name))
            return node.name
        return plugin + '!' + str(node)

    def _resolve(self, name, features, dependent_features, details,
                 resolve_aliases):
        def has(feature):
            dependent_features.add(feature)
            return bool(features.get(feature, False))

        if resolve_aliases:
            for _ in range(MAX_RECURSION_COUNT + 1):
                for alias in reversed(self.aliases):
                    aliased = alias.apply(name, has)
                    if aliased is not None:
                        break
                else:
                    break

                if aliased == name:
                    break
                logger.debug('alias %r: %s --> %s', alias, name, aliased)
                if details is not None:
                    details.append('%s --> %s' % (name, aliased))
                name = aliased
            else:
                raise ConfigurationError('Alias recursion limit (%d) exceeded '
                                         'resolving %r', MAX_RECURSION_COUNT,
                                         name)

        package = self.packages.get(name)
        if package is not None:
            name = package.name + '/' + package.main

        return name
