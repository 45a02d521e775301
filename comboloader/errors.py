"""
Error hierarchy shared by the aggregator core.
"""

__all__ = [
    "ComboError",
    "ConfigurationError",
    "HasExpressionError",
    "DependencyVerificationError",
    "AliasResolutionError",
    "CapacityError",
]


class ComboError(Exception):
    """Base class for errors providing a logging-like constructor."""

    def __init__(self, msg='', *args, **kwargs):
        if not isinstance(msg, str):
            raise TypeError("'msg' argument must be a string")
        if args and kwargs:
            raise TypeError('At most one of args or kwargs can be specified '
                            'at once, not both of them')

        super(ComboError, self).__init__(msg, args or kwargs or None)

    def __str__(self):
        msg, fmt_args = self.args
        return msg % fmt_args if fmt_args else msg

    def __repr__(self):
        msg, fmt_args = self.args
        type_name = type(self).__name__

        if not fmt_args:
            return '%s(%r)' % (type_name, msg)

        return '%s(%r, %s%r)' % (type_name, msg,
                                 '**' if isinstance(fmt_args, dict) else '*',
                                 fmt_args)


class ConfigurationError(ComboError):
    """Bad aliases, packages or other aggregator configuration data."""


class HasExpressionError(ConfigurationError):
    """Malformed 'has!' plugin expression."""


class DependencyVerificationError(ComboError):
    """
    Declared dependencies of a module disagree with the dependency graph
    snapshot. Callers are expected to rebuild the graph and retry.
    """


class AliasResolutionError(ConfigurationError, DependencyVerificationError):
    """Alias resolver failed while a dependency list was being expanded."""


class CapacityError(ComboError):
    """Too many distinct variables for the DNF minimizer."""
