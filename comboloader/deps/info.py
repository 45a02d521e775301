"""
Provenance record of a single dependency edge.
"""

__all__ = [
    "ModuleDepInfo",
]


from ..features import is_has_plugin
from ..logic import Formula


class ModuleDepInfo(object):
    """
    Condition under which a module is required, together with the plugin
    that loads it and diagnostic comments.

    'term' may be None (unconditional), a Term or a Formula. Instances are
    mutable and owned by a single ModuleDeps.
    """
    __slots__ = ('plugin_name', 'formula', 'from_has_branching',
                 '_comments')

    _dump_attrs = ('plugin_name', 'formula', 'comment', 'from_has_branching')

    def __init__(self, plugin_name=None, term=None, comment=None,
                 from_has_branching=False):
        super(ModuleDepInfo, self).__init__()
        self.plugin_name = plugin_name
        self.formula = Formula.TRUE if term is None else Formula(term)
        self.from_has_branching = from_has_branching
        # (term size, comment) pairs, the shortest term first
        self._comments = []
        if comment:
            self._comments.append((self._term_size(), comment))

    def _term_size(self):
        if self.formula.is_false():
            return 0
        return min(len(term) for term in self.formula.terms)

    @property
    def comment(self):
        if not self._comments:
            return None
        return '; '.join(comment for _, comment in self._comments)

    def is_unconditional(self):
        return self.formula.is_true()

    def copy(self):
        ret = type(self)(self.plugin_name, self.formula, None,
                         self.from_has_branching)
        ret._comments = list(self._comments)
        return ret

    def add(self, other):
        """
        ORs the other condition into this one. A plugin name that came from
        has! branching wins over one that did not. Returns True if the
        condition changed.
        """
        if other.from_has_branching and not self.from_has_branching:
            self.plugin_name = other.plugin_name
            self.from_has_branching = True
        elif self.plugin_name is None:
            self.plugin_name = other.plugin_name

        for entry in other._comments:
            if entry[1] not in (comment for _, comment in self._comments):
                self._comments.append(entry)
        self._comments.sort(key=lambda entry: entry[0])

        formula = self.formula.or_with(other.formula)
        if formula == self.formula:
            return False
        self.formula = formula
        return True

    def subtract(self, other):
        """
        Drops the terms already implied by the other condition: everything
        if it is unconditional, otherwise each term that is a superset of
        one of its terms. Returns True if the condition changed.
        """
        if other.formula.is_true():
            formula = Formula.FALSE
        else:
            formula = Formula(t1 for t1 in self.formula.terms
                              if not any(t1 >= t2
                                         for t2 in other.formula.terms))
        if formula == self.formula:
            return False
        self.formula = formula
        return True

    def and_with(self, term):
        formula = self.formula.and_with(term)
        if formula == self.formula:
            return False
        self.formula = formula
        return True

    def contains_term(self, term):
        """True if 'term' implies the condition."""
        if self.formula.is_true():
            return True
        return any(term >= t for t in self.formula.terms)

    def resolve_with(self, features, coerce=False):
        formula = self.formula.resolve_with(features, coerce)
        if formula == self.formula:
            return False
        self.formula = formula
        return True

    def simplify(self):
        formula = self.formula.simplify()
        if formula == self.formula:
            return False
        self.formula = formula
        return True

    def has_plugin_prefixes(self):
        """
        'has!' prefixes that make a module id conditional on this formula,
        one per term: (A*!B) gives 'has!A?B?:'. None if unconditional.
        The has! plugin the condition was branched on is kept.
        """
        if self.formula.is_true():
            return None
        plugin = 'has'
        if self.from_has_branching and self.plugin_name and \
                is_has_plugin(self.plugin_name):
            plugin = self.plugin_name
        return [plugin + '!' + ''.join(_literal_prefix(literal)
                                       for literal in sorted(term))
                for term in self.formula]

    def __repr__(self):
        return '%s(%r, %s, %r%s)' % (type(self).__name__, self.plugin_name,
                                     self.formula, self.comment,
                                     ', from_has_branching=True'
                                     if self.from_has_branching else '')


def _literal_prefix(literal):
    return literal.name + ('?' if literal.polarity else '?:')
