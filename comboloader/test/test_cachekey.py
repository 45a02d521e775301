import threading
import unittest

from comboloader import cachekey
from comboloader.cachekey import CacheKeySlot
from comboloader.cachekey import ExportNamesCacheKeyGenerator
from comboloader.cachekey import FeatureSetCacheKeyGenerator
from comboloader.cachekey import I18nCacheKeyGenerator
from comboloader.config import AggregatorConfig
from comboloader.request import BuildRequest


class FeatureSetTestCase(unittest.TestCase):

    def test_key_stability(self):
        gen = FeatureSetCacheKeyGenerator(['a', 'b'])
        request1 = BuildRequest({'a': True, 'b': False, 'x': True, 'y': True})
        request2 = BuildRequest({'b': False, 'a': True, 'x': False, 'z': True})
        self.assertEqual(gen.generate_key(request1), 'has{a,!b}')
        self.assertEqual(gen.generate_key(request1),
                         gen.generate_key(request2))

    def test_missing_features(self):
        gen = FeatureSetCacheKeyGenerator(['a', 'b'])
        self.assertEqual(gen.generate_key(BuildRequest({'b': True})),
                         'has{b}')

        config = AggregatorConfig(coerce_undefined_to_false=True)
        request = BuildRequest({'b': True}, config=config)
        self.assertEqual(gen.generate_key(request), 'has{!a,b}')

    def test_empty_relevant_set(self):
        gen = FeatureSetCacheKeyGenerator([])
        self.assertFalse(gen.is_provisional())
        self.assertEqual(gen.generate_key(BuildRequest({'a': True})),
                         'has{}')

    def test_provisional(self):
        gen = FeatureSetCacheKeyGenerator.PROVISIONAL
        self.assertTrue(gen.is_provisional())
        self.assertIsNone(gen.names)

        key = gen.generate_key(BuildRequest({'b': True, 'a': False}))
        self.assertEqual(key, 'has:provisional{!a,b}')
        self.assertNotEqual(
            key, FeatureSetCacheKeyGenerator(['a', 'b']).generate_key(
                BuildRequest({'b': True, 'a': False})))

    def test_transition(self):
        gen = FeatureSetCacheKeyGenerator.PROVISIONAL.with_features({'a'})
        self.assertFalse(gen.is_provisional())
        self.assertEqual(gen.names, {'a'})

    def test_combine(self):
        g1 = FeatureSetCacheKeyGenerator(['a'])
        g2 = FeatureSetCacheKeyGenerator(['b'])

        self.assertEqual(g1.combine(g2).names, {'a', 'b'})
        self.assertEqual(g1.combine(g2), g2.combine(g1))
        self.assertEqual(g1.combine(g1), g1)

        g3 = FeatureSetCacheKeyGenerator(['c', 'a'])
        self.assertEqual(g1.combine(g2).combine(g3),
                         g1.combine(g2.combine(g3)))

    def test_combine_with_provisional(self):
        g1 = FeatureSetCacheKeyGenerator(['a'])
        provisional = FeatureSetCacheKeyGenerator()
        self.assertTrue(g1.combine(provisional).is_provisional())
        self.assertTrue(provisional.combine(g1).is_provisional())

    def test_combine_different_types(self):
        with self.assertRaises(TypeError):
            FeatureSetCacheKeyGenerator(['a']).combine(
                ExportNamesCacheKeyGenerator())

    def test_equality(self):
        g1 = FeatureSetCacheKeyGenerator(['a', 'b'])
        g2 = FeatureSetCacheKeyGenerator(('b', 'a'))
        self.assertEqual(g1, g2)
        self.assertEqual(hash(g1), hash(g2))
        self.assertEqual(len({g1, g2}), 1)
        self.assertNotEqual(g1, FeatureSetCacheKeyGenerator(['a']))
        self.assertNotEqual(g1, FeatureSetCacheKeyGenerator())
        self.assertEqual(FeatureSetCacheKeyGenerator(),
                         FeatureSetCacheKeyGenerator.PROVISIONAL)

    def test_str(self):
        self.assertEqual(str(FeatureSetCacheKeyGenerator(['b', 'a'])),
                         'has:[a, b]')
        self.assertEqual(str(FeatureSetCacheKeyGenerator()),
                         'has:provisional')


class I18nTestCase(unittest.TestCase):

    def test_best_match(self):
        gen = I18nCacheKeyGenerator(['en', 'fr-ca'])
        request = BuildRequest(locales=['en-US', 'fr-CA', 'de'])
        self.assertEqual(gen.generate_key(request), 'i18n{en,fr-ca}')
        self.assertEqual(gen.generate_key(BuildRequest(locales=['de'])),
                         'i18n{}')

    def test_provisional(self):
        gen = I18nCacheKeyGenerator()
        self.assertTrue(gen.is_provisional())
        self.assertEqual(gen.generate_key(BuildRequest(locales=['en-US'])),
                         'i18n{en-us}')

    def test_combine(self):
        g1 = I18nCacheKeyGenerator(['en'])
        g2 = I18nCacheKeyGenerator(['fr'])
        self.assertEqual(g1.combine(g2).available, {'en', 'fr'})
        self.assertEqual(g1.combine(g2), g2.combine(g1))
        self.assertTrue(g1.combine(I18nCacheKeyGenerator()).is_provisional())


class ExportNamesTestCase(unittest.TestCase):

    def test_key(self):
        gen = ExportNamesCacheKeyGenerator()
        self.assertEqual(gen.generate_key(
            BuildRequest(export_module_names=True)), 'expn:1')
        self.assertEqual(gen.generate_key(BuildRequest()), 'expn:0')
        self.assertFalse(gen.is_provisional())
        self.assertEqual(gen.combine(ExportNamesCacheKeyGenerator()), gen)


class HelpersTestCase(unittest.TestCase):

    def setUp(self):
        self.generators = (FeatureSetCacheKeyGenerator(['a']),
                           ExportNamesCacheKeyGenerator())

    def test_generate_key(self):
        request = BuildRequest({'a': True, 'b': True})
        self.assertEqual(cachekey.generate_key(request, self.generators),
                         'has{a};expn:0')
        self.assertEqual(cachekey.generate_key(request, []), '')

    def test_is_provisional(self):
        self.assertFalse(cachekey.is_provisional(self.generators))
        self.assertTrue(cachekey.is_provisional(
            (FeatureSetCacheKeyGenerator(),) + self.generators[1:]))

    def test_combine(self):
        other = (FeatureSetCacheKeyGenerator(['b']),
                 ExportNamesCacheKeyGenerator())
        combined = cachekey.combine(self.generators, other)
        self.assertEqual(combined[0].names, {'a', 'b'})
        self.assertIs(cachekey.combine(None, other), other)
        self.assertIs(cachekey.combine(other, None), other)
        with self.assertRaises(ValueError):
            cachekey.combine(self.generators, other[:1])

    def test_to_string(self):
        self.assertEqual(cachekey.to_string(self.generators), 'has:[a];expn')


class CacheKeySlotTestCase(unittest.TestCase):

    def new_slot(self):
        return CacheKeySlot([FeatureSetCacheKeyGenerator(),
                             ExportNamesCacheKeyGenerator()])

    def built(self, *names):
        return [FeatureSetCacheKeyGenerator(names),
                ExportNamesCacheKeyGenerator()]

    def test_provisional_until_built(self):
        slot = self.new_slot()
        self.assertTrue(slot.is_provisional())

        request = BuildRequest({'a': True, 'x': False})
        self.assertEqual(slot.generate_key(request),
                         'has:provisional{a,!x};expn:0')

        slot.update(self.built('a'))
        self.assertFalse(slot.is_provisional())
        self.assertEqual(slot.generate_key(request), 'has{a};expn:0')

    def test_updates_converge(self):
        slot1 = self.new_slot()
        slot1.update(self.built('a'))
        slot1.update(self.built('b'))

        slot2 = self.new_slot()
        slot2.update(self.built('b'))
        slot2.update(self.built('a'))

        self.assertEqual(slot1.generators, slot2.generators)
        self.assertEqual(slot1.generators[0].names, {'a', 'b'})

    def test_provisional_update_ignored_once_concrete(self):
        slot = self.new_slot()
        slot.update(self.built('a'))
        slot.update([FeatureSetCacheKeyGenerator(),
                     ExportNamesCacheKeyGenerator()])
        self.assertEqual(slot.generators[0].names, {'a'})

    def test_length_mismatch(self):
        with self.assertRaises(ValueError):
            self.new_slot().update(self.built('a')[:1])

    def test_concurrent_updates(self):
        slot = self.new_slot()
        names = ['f%d' % i for i in range(16)]
        threads = [threading.Thread(target=slot.update,
                                    args=(self.built(name),))
                   for name in names]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(slot.generators[0].names, set(names))
