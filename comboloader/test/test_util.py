import logging
import unittest

from comboloader.errors import ComboError
from comboloader.errors import ConfigurationError
from comboloader.util import logger_dump


class ComboErrorTestCase(unittest.TestCase):

    def test_positional_args(self):
        error = ConfigurationError('bad alias %r at %d', 'x', 3)
        self.assertEqual(str(error), "bad alias 'x' at 3")
        self.assertEqual(repr(error),
                         "ConfigurationError('bad alias %r at %d', *('x', 3))")

    def test_keyword_args(self):
        error = ComboError('%(name)s failed', name='m')
        self.assertEqual(str(error), 'm failed')

    def test_plain(self):
        self.assertEqual(str(ComboError('100%')), '100%')
        self.assertEqual(repr(ComboError('oops')), "ComboError('oops')")

    def test_bad_arguments(self):
        with self.assertRaises(TypeError):
            ComboError(42)
        with self.assertRaises(TypeError):
            ComboError('%s', 1, x=2)


class LoggerDumpTestCase(unittest.TestCase):

    class Target(object):
        _dump_attrs = ('names', 'missing')
        names = {'b', 'a'}

    def test_dump(self):
        logger = logging.getLogger('comboloader.test.dump')
        with self.assertLogs(logger, logging.DEBUG) as cm:
            logger_dump(logger, self.Target())

        output = '\n'.join(cm.output)
        self.assertIn('.names: (len=2)', output)
        self.assertIn("['a', 'b']", output)
        self.assertIn('.missing:', output)
