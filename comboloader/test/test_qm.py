import itertools
import random
import unittest

from comboloader.errors import CapacityError
from comboloader.logic import Formula
from comboloader.logic import Literal
from comboloader.logic import MAX_VARIABLES
from comboloader.logic import Term
from comboloader.logic import qm


def truth_table(formula, names):
    table = []
    for values in itertools.product((False, True), repeat=len(names)):
        resolved = formula.resolve_with(dict(zip(names, values)))
        assert resolved.is_true() or resolved.is_false(), resolved
        table.append(resolved.is_true())
    return table


def random_formula(rng, names):
    terms = []
    for _ in range(rng.randint(0, 6)):
        chosen = rng.sample(names, rng.randint(1, len(names)))
        terms.append(Term(Literal(name, rng.random() < 0.5)
                          for name in chosen))
    return Formula(terms)


class ImplicantsTestCase(unittest.TestCase):

    def test_expand_minterms(self):
        # x1x over 3 variables
        self.assertEqual(qm.expand_minterms([(2, 5)]), [2, 3, 6, 7])
        self.assertEqual(qm.expand_minterms([(1, 0), (1, 0), (0, 1)]),
                         [0, 1])

    def test_prime_implicants(self):
        primes = qm.reduce_to_prime_implicants([0, 1, 2, 3, 5])
        self.assertEqual(sorted(primes), [(0, 3), (1, 4)])

    def test_greedy_cover_of_cyclic_function(self):
        # Every minterm is covered by exactly two primes: no essentials, so
        # ties go to the first implicant in order.
        minterms = [0, 1, 2, 5, 6, 7]
        primes = qm.reduce_to_prime_implicants(minterms)
        self.assertEqual(len(primes), 6)
        self.assertEqual(qm.reduce_prime_implicants_to_subset(primes,
                                                              minterms),
                         [(0, 1), (2, 4), (5, 2)])

    def test_minimize_constants(self):
        self.assertEqual(qm.minimize([], 2), [])
        self.assertEqual(qm.minimize([(0, 1), (2, 1)], 2), [(0, 3)])
        self.assertEqual(qm.minimize([(3, 0), (1, 0), (1, 2)], 2),
                         [(1, 2)])

    def test_capacity(self):
        names = ['f%02d' % i for i in range(MAX_VARIABLES + 1)]
        formula = Formula(Term([Literal(name)]) for name in names)
        with self.assertRaises(CapacityError):
            formula.simplify()
        with self.assertRaises(CapacityError):
            qm.minimize([(0, 0)], MAX_VARIABLES + 1)


class SimplifyEquivalenceTestCase(unittest.TestCase):

    def test_exhaustive_equivalence(self):
        rng = random.Random(20121028)
        for nr_names in range(1, 6):
            names = ['ABCDE'[i] for i in range(nr_names)]
            for _ in range(40):
                formula = random_formula(rng, names)
                simplified = formula.simplify()
                self.assertEqual(truth_table(simplified, names),
                                 truth_table(formula, names),
                                 '%s --> %s' % (formula, simplified))
                self.assertEqual(simplified.simplify(), simplified)

    def test_known_minimal_forms(self):
        formula = Formula.from_string('(!A*!B*!C)+(!A*!B*C)+(!A*B*D)'
                                      '+(A*!B*!D)+(A*B*!C)+(A*B*C*D)')
        simplified = formula.simplify()
        names = 'ABCD'
        self.assertEqual(truth_table(simplified, names),
                         truth_table(formula, names))
        self.assertEqual(len(simplified), 4)
