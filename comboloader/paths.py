"""
Normalization of relative AMD module ids.
"""

__all__ = [
    "normalize_path",
    "normalize_paths",
]


import re

from . import hasexpr
from .errors import ConfigurationError
from .features import is_has_plugin


def normalize_path(ref, name):
    """
    Resolves './' and '../' segments of 'name' against the directory of the
    module id 'ref'. Plugin prefixes and has! expressions are normalized
    part by part.
    """
    if '!' in name:
        plugin, resource = name.split('!', 1)
        plugin = normalize_path(ref, plugin)
        if is_has_plugin(plugin):
            resource = str(hasexpr.HasNode.parse(resource).normalize(ref))
        else:
            resource = normalize_path(ref, resource)
        return plugin + '!' + resource

    if not name.startswith('.'):
        return name

    ref_dir = ref.split('/')[:-1] if ref else []
    segments = []
    for segment in ref_dir + name.split('/'):
        if segment in ('', '.'):
            continue
        if segment == '..':
            if not segments:
                raise ConfigurationError('Module id %r climbs above the '
                                         'root relative to %r', name, ref)
            segments.pop()
        else:
            segments.append(segment)

    return '/'.join(segments)


def normalize_paths(ref, names):
    return [normalize_path(ref, name) for name in names]
