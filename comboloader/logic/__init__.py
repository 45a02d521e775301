"""
Boolean model of has-conditions in disjunctive normal form.
"""

from .boolean import Literal
from .boolean import Term
from .boolean import Formula
from .boolean import FormulaKind

from .qm import MAX_VARIABLES
