"""
Utils module.
"""

import logging as _logging
import pprint

from collections.abc import Mapping
from collections.abc import Set


logging_defaults = dict(
    level=_logging.DEBUG,
    format='%(levelname)-8s%(name)s:\t%(message)s',
)

def init_logging(filename_or_stream, **kwargs):
    init_dict = dict(logging_defaults, **kwargs)

    is_string = isinstance(filename_or_stream, str)
    init_dict['filename' if is_string else 'stream'] = filename_or_stream
    if is_string:
        init_dict.setdefault('filemode', 'w')

    _logging.basicConfig(**init_dict)


def logger_dump(logger, target, attrs=None):
    if not logger.isEnabledFor(_logging.DEBUG):
        return

    if isinstance(attrs, str):
        attrs = attrs.split()
    if attrs is None:
        try:
            attrs = target._dump_attrs
        except AttributeError:
            attrs = [attr for attr in dir(target) if not attr.startswith('_')]

    logger.debug('%r', target)
    for attr in attrs:
        try:
            obj = getattr(target, attr)
        except AttributeError as e:
            obj = e
        else:
            obj = _log_dump_normalize(obj)

        try:
            obj_len = len(obj)
        except TypeError:
            msg = '.{0}:'.format(attr)
        else:
            msg = '.{0}: (len={1})'.format(attr, obj_len)

        logger.debug('\t||%s', msg)
        for line in pprint.pformat(obj).splitlines():
            logger.debug('\t||\t\t%s', line)


def _log_dump_normalize(obj):
    if isinstance(obj, Mapping):
        obj = dict((str(k), _log_dump_normalize(v)) for k, v in obj.items())
    elif isinstance(obj, Set):
        obj = sorted(obj, key=repr)
    elif not isinstance(obj, (str, int, float, type(None), Exception)):
        obj = str(obj)
    return obj
