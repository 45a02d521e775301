"""
Boolean literals, terms and DNF formulas over feature names.
"""

__all__ = [
    "Literal",
    "Term",
    "FormulaKind",
    "Formula",
]


import enum
import functools
import logging

from collections import namedtuple

from . import qm


logger = logging.getLogger(__name__)


class Literal(namedtuple('Literal', 'name polarity')):
    """A single feature assignment. Ordered by name, then false < true."""
    __slots__ = ()

    def __new__(cls, name, polarity=True):
        return super(Literal, cls).__new__(cls, name, bool(polarity))

    @classmethod
    def from_string(cls, string):
        string = string.strip()
        if string.startswith('!'):
            return cls(string[1:], False)
        return cls(string, True)

    def __invert__(self):
        return type(self)(self.name, not self.polarity)

    def resolve_with(self, features, coerce=False):
        """Returns True/False when decided by the features, None otherwise."""
        if self.name in features:
            return features[self.name] == self.polarity
        if coerce:
            return not self.polarity
        return None

    def __str__(self):
        return self.name if self.polarity else '!' + self.name


class Term(frozenset):
    """
    Conjunction of literals, at most one per feature name.

    An empty term is true. Conflicting literals never make it into a term:
    the constructor rejects them and and_with() reports them with None.
    """
    __slots__ = ()

    def __new__(cls, literals=()):
        self = super(Term, cls).__new__(cls, literals)
        if len(self.names) != len(self):
            raise ValueError('Conflicting literals in term: %s'
                             % ', '.join(map(str, sorted(self))))
        return self

    @classmethod
    def from_string(cls, string):
        """Parses '(A*!B)' or 'A*!B'."""
        return cls(_parse_literals(string))

    @property
    def names(self):
        return frozenset(literal.name for literal in self)

    def is_true(self):
        return not self

    def and_with(self, other):
        """Conjunction with a term or a literal, None if unsatisfiable."""
        if isinstance(other, Literal):
            other = (other,)
        literals = frozenset(self).union(other)
        if len(set(literal.name for literal in literals)) != len(literals):
            return None
        return type(self)(literals)

    def resolve_with(self, features, coerce=False):
        """
        Partially evaluates the term. Returns None if some literal is
        contradicted, otherwise a term of the literals left undecided (an
        empty term when all are satisfied).
        """
        unresolved = []
        for literal in self:
            value = literal.resolve_with(features, coerce)
            if value is None:
                unresolved.append(literal)
            elif not value:
                return None
        return type(self)(unresolved)

    def __str__(self):
        if not self:
            return 'TRUE'
        literals = '*'.join(map(str, sorted(self)))
        return literals if len(self) == 1 else '(%s)' % literals

    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, str(self))


Term.TRUE = Term()


class FormulaKind(enum.Enum):
    TRUE = 'true'
    FALSE = 'false'
    TERMS = 'terms'


def _add_term(terms, term):
    """Adds to a set of terms keeping it minimal by subsumption."""
    for existing in terms:
        if term >= existing:
            return False
    for existing in [t for t in terms if t >= term]:
        terms.remove(existing)
    terms.add(term)
    return True


class Formula(object):
    """
    Disjunction of terms. Immutable: every operation returns a formula.

    Formula(True) and Formula(False) are the canonical constants; any other
    argument is an iterable of terms. The constant true formula still
    iterates over a single empty term.
    """
    __slots__ = '_kind', '_terms'

    def __init__(self, value=False):
        super(Formula, self).__init__()

        if isinstance(value, Formula):
            kind, terms = value._kind, value._terms

        elif value is True or value is False:
            kind = FormulaKind.TRUE if value else FormulaKind.FALSE
            terms = frozenset((Term.TRUE,)) if value else frozenset()

        else:
            if isinstance(value, (Term, Literal)):
                value = (value,)
            acc = set()
            for term in value:
                if isinstance(term, Literal):
                    term = Term((term,))
                elif not isinstance(term, Term):
                    term = Term(term)
                _add_term(acc, term)
            if Term.TRUE in acc:
                kind, terms = FormulaKind.TRUE, frozenset((Term.TRUE,))
            elif acc:
                kind, terms = FormulaKind.TERMS, frozenset(acc)
            else:
                kind, terms = FormulaKind.FALSE, frozenset()

        self._kind = kind
        self._terms = terms

    @classmethod
    def from_string(cls, string):
        """Parses '(A*B)+!C' (or with '|' separators), 'TRUE' or 'FALSE'."""
        string = string.strip()
        if string.upper() == 'TRUE':
            return cls.TRUE
        if string.upper() == 'FALSE' or not string:
            return cls.FALSE
        terms = []
        for s in string.replace('|', '+').split('+'):
            literals = _parse_literals(s)
            # unsatisfiable terms like (A*!A) are dropped
            if len(set(literal.name for literal in literals)) == len(literals):
                terms.append(Term(literals))
        return cls(terms)

    kind  = property(lambda self: self._kind)
    terms = property(lambda self: self._terms)

    def is_true(self):
        return self._kind is FormulaKind.TRUE

    def is_false(self):
        return self._kind is FormulaKind.FALSE

    @property
    def names(self):
        return frozenset(name for term in self._terms for name in term.names)

    def __iter__(self):
        return iter(sorted(self._terms, key=_term_sort_key))

    def __len__(self):
        return len(self._terms)

    def __contains__(self, term):
        return term in self._terms

    def __eq__(self, other):
        if not isinstance(other, Formula):
            return NotImplemented
        return self._kind is other._kind and self._terms == other._terms

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self._kind, self._terms))

    def add(self, term):
        """Returns this formula ORed with a single term."""
        if self.is_true():
            return self
        if isinstance(term, Literal):
            term = Term((term,))
        elif not isinstance(term, Term):
            term = Term(term)
        terms = set(self._terms)
        if not _add_term(terms, term):
            return self
        return type(self)(terms)

    def or_with(self, other):
        if self.is_true() or other.is_false():
            return self
        if other.is_true() or self.is_false():
            return other
        return type(self)(list(self._terms) + list(other._terms))

    def and_with(self, other):
        """Distributes AND over OR. Accepts a formula, a term or a literal."""
        if isinstance(other, Literal):
            other = Term((other,))
        if isinstance(other, Term):
            other = type(self)(other)

        if self.is_false() or other.is_true():
            return self
        if other.is_false() or self.is_true():
            return other

        products = (t1.and_with(t2)
                    for t1 in self._terms for t2 in other._terms)
        return type(self)(term for term in products if term is not None)

    def resolve_with(self, features, coerce=False):
        """
        Partially evaluates the formula against a feature assignment. With
        'coerce' set, unspecified features are taken as false.
        """
        if self._kind is not FormulaKind.TERMS:
            return self

        terms = []
        for term in self._terms:
            resolved = term.resolve_with(features, coerce)
            if resolved is None:
                continue
            if resolved.is_true():
                return type(self).TRUE
            terms.append(resolved)

        return type(self)(terms)

    def simplify(self):
        """Returns a DNF-minimal equivalent. Results are memoized by value."""
        if self._kind is not FormulaKind.TERMS:
            return self
        return _simplify(self._terms)

    def __str__(self):
        if self.is_true():
            return 'TRUE'
        if self.is_false():
            return 'FALSE'
        return '|'.join(map(str, self))

    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, str(self))


Formula.TRUE = Formula(True)
Formula.FALSE = Formula(False)


def _term_sort_key(term):
    return len(term), sorted(term)


@functools.lru_cache(maxsize=1024)
def _simplify(terms):
    names = sorted(set(name for term in terms for name in term.names))
    bits = dict((name, 1 << i) for i, name in enumerate(names))
    full_mask = (1 << len(names)) - 1

    implicants = []
    for term in terms:
        value = mask = 0
        for literal in term:
            mask |= bits[literal.name]
            if literal.polarity:
                value |= bits[literal.name]
        implicants.append((value, full_mask & ~mask))

    result = []
    for value, mask in qm.minimize(implicants, len(names)):
        if mask == full_mask:
            return Formula.TRUE
        result.append(Term(Literal(name, value & bit)
                           for name, bit in bits.items() if not mask & bit))

    simplified = Formula(result)
    logger.debug('simplified %d terms to %d: %s',
                 len(terms), len(simplified), simplified)
    return simplified


def _parse_literals(string):
    string = string.strip()
    if string.startswith('(') and string.endswith(')'):
        string = string[1:-1]
    return sorted(set(Literal.from_string(s)
                      for s in string.split('*') if s.strip()))
