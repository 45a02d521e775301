"""
PLY-based parser for has! plugin expressions:

    feature?ifTrue:ifFalse
    feature?ifTrue
    moduleId

A dangling ':' binds to the nearest '?', so 'a?b?c:d' reads as
'a?(b?c:d)'.
"""

import threading

import ply.yacc

from . import lex
from .lex import tokens
from .node import HasNode
from ..errors import HasExpressionError


precedence = (
    ('right', 'QUESTION'),
    ('right', 'COLON'),
)


def p_expression_leaf(p):
    """expression : NAME
       expression : empty"""
    p[0] = HasNode.leaf((p[1] or '').strip())

def p_expression_then(p):
    """expression : NAME QUESTION expression %prec QUESTION"""
    p[0] = HasNode.conditional(p[1].strip(), p[3], HasNode.EMPTY)

def p_expression_then_else(p):
    """expression : NAME QUESTION expression COLON expression"""
    p[0] = HasNode.conditional(p[1].strip(), p[3], p[5])


def p_empty(p):
    """empty : """
    pass

def p_error(t):
    if t is None:
        raise HasExpressionError('Unexpected end of has! expression')
    raise HasExpressionError('Unexpected %r at position %d in has! '
                             'expression', t.value, t.lexpos)


parser = ply.yacc.yacc(method='LALR', write_tables=False, debug=False)
_parser_lock = threading.Lock()

# The main entry point.

def parse(source):
    """
    Parses a has! expression (without the plugin prefix) into a HasNode.

    PLY parsers keep their state in the parser object, so calls are
    serialized.
    """
    if '?' not in source:
        return HasNode.leaf(source.strip())

    with _parser_lock:
        return parser.parse(source, lexer=lex.lexer)
