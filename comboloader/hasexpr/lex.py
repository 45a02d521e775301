"""
Lexer definitions for has! plugin expressions.
"""

import ply.lex

from ..errors import HasExpressionError


tokens = (
    'NAME',
    'QUESTION', 'COLON',
)

t_QUESTION         = r'\?'
t_COLON            = r':'

# Feature names and module ids: anything up to the next delimiter
t_NAME             = r'[^?:]+'

def t_error(t):
    raise HasExpressionError('Illegal character %r at position %d',
                             t.value[0], t.lexpos)


lexer = ply.lex.lex()
