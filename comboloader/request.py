"""
Request dimensions that cache keys are computed from.
"""

__all__ = [
    "BuildRequest",
]


from .features import Features


class BuildRequest(object):
    __slots__ = 'features', 'locales', 'export_module_names', 'config'

    def __init__(self, features=Features.EMPTY, locales=(),
                 export_module_names=False, config=None):
        super(BuildRequest, self).__init__()
        if not isinstance(features, Features):
            features = Features(features)
        self.features = features
        self.locales = tuple(locales)
        self.export_module_names = export_module_names
        self.config = config

    @property
    def coerce_undefined_to_false(self):
        return self.config is not None and \
            self.config.coerce_undefined_to_false

    def __repr__(self):
        return '%s(%s, locales=%r, export_module_names=%r)' % (
            type(self).__name__, self.features, self.locales,
            self.export_module_names)
