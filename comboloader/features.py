"""
Feature assignments: partial mappings from has-feature names to booleans.
"""

__all__ = [
    "Features",
    "is_has_plugin",
]


import re

from collections.abc import Mapping


has_plugin_re = re.compile(r'(^|/)has$')


def is_has_plugin(plugin):
    """Whether the plugin id names a has! feature-test plugin."""
    return bool(has_plugin_re.search(plugin))


class Features(Mapping):
    """
    Immutable partial assignment of feature flags.

    A name absent from the mapping is unspecified, which is distinct from
    being explicitly false.
    """
    __slots__ = '_values', '_hash'

    def __init__(self, values=()):
        super(Features, self).__init__()
        self._values = dict((str(name), bool(value))
                            for name, value in dict(values).items())
        self._hash = None

    @classmethod
    def from_string(cls, string):
        """Parses 'a,!b,c' into {a: True, b: False, c: True}."""
        values = {}
        for name in string.split(','):
            name = name.strip()
            if not name:
                continue
            if name.startswith('!'):
                values[name[1:]] = False
            else:
                values[name] = True
        return cls(values)

    def __getitem__(self, name):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __hash__(self):
        if self._hash is None:
            self._hash = hash(frozenset(self._values.items()))
        return self._hash

    def __eq__(self, other):
        if isinstance(other, Features):
            return self._values == other._values
        return super(Features, self).__eq__(other)

    def __ne__(self, other):
        return not self == other

    def is_feature(self, name):
        """True only for features explicitly set to true."""
        return self._values.get(name, False)

    def with_feature(self, name, value):
        values = dict(self._values)
        values[name] = bool(value)
        return type(self)(values)

    def __str__(self):
        return ','.join(name if value else '!' + name
                        for name, value in sorted(self._values.items()))

    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, self._values)


Features.EMPTY = Features()
