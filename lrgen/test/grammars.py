"""
Descriptions shared by the tests.
"""
from collections import namedtuple

from ..syntax import Syntax

Int = namedtuple('Int', 'value')
Var = namedtuple('Var', 'name')
Bool = namedtuple('Bool', 'value')
Binop = namedtuple('Binop', 'op left right')
Let = namedtuple('Let', 'name bound body')
If = namedtuple('If', 'cond then else_')


def arithmetic():
    """
    An ambiguous expression grammar made unambiguous by precedence
    declarations. The semantic values are prefix tuples.
    """
    syn = Syntax()
    syn.token('INT', int)

    syn.skip(r'\s+')
    syn.emit(r'[0-9]+', 'INT')
    syn.keyword('+', 'PLUS')
    syn.keyword('-', 'MINUS')
    syn.keyword('*', 'TIMES')
    syn.keyword('^', 'POW')
    syn.keyword('(', 'LPAREN')
    syn.keyword(')', 'RPAREN')

    syn.left('PLUS', 'MINUS')
    syn.left('TIMES')
    syn.right('POW')

    syn.production('expr', 'expr PLUS expr', lambda a, op, b: ('+', a, b))
    syn.production('expr', 'expr MINUS expr', lambda a, op, b: ('-', a, b))
    syn.production('expr', 'expr TIMES expr', lambda a, op, b: ('*', a, b))
    syn.production('expr', 'expr POW expr', lambda a, op, b: ('^', a, b))
    syn.production('expr', 'LPAREN expr RPAREN', lambda l, e, r: e)
    syn.production('expr', 'INT')
    return syn


def parens():
    """
    Balanced parentheses, each group is a list of its children.
    """
    syn = Syntax()
    syn.skip(r'[ \n]+')
    syn.keyword('(', 'LPAREN')
    syn.keyword(')', 'RPAREN')

    syn.production('S', '', lambda: [])
    syn.production('S', 'S LPAREN S RPAREN',
                   lambda outer, l, inner, r: outer + [inner])
    return syn


KEYWORDS = [
    ('let', 'LET'),
    ('in', 'IN'),
    ('if', 'IF'),
    ('then', 'THEN'),
    ('else', 'ELSE'),
    ('true', 'TRUE'),
    ('false', 'FALSE'),
    ]

def simpl():
    """
    A small expression language with let bindings and conditionals.
    """
    syn = Syntax()
    syn.token('INT', int)

    syn.pattern('ident', r'[a-zA-Z][a-zA-Z0-9_]*')
    syn.skip(r'\s+')
    for text, name in KEYWORDS:
        syn.keyword(text, name)
    syn.emit(r'{ident}', 'ID')
    syn.emit(r'[0-9]+', 'INT')
    syn.keyword('<=', 'LEQ')
    syn.keyword('*', 'TIMES')
    syn.keyword('+', 'PLUS')
    syn.keyword('(', 'LPAREN')
    syn.keyword(')', 'RPAREN')
    syn.keyword('=', 'EQUALS')

    syn.nonassoc('IN')
    syn.nonassoc('ELSE')
    syn.left('LEQ')
    syn.left('PLUS')
    syn.left('TIMES')

    syn.production('prog', 'expr')
    syn.production('expr', 'INT', Int)
    syn.production('expr', 'ID', Var)
    syn.production('expr', 'TRUE', lambda t: Bool(True))
    syn.production('expr', 'FALSE', lambda f: Bool(False))
    syn.production('expr', 'expr LEQ expr',
                   lambda a, op, b: Binop('<=', a, b))
    syn.production('expr', 'expr TIMES expr',
                   lambda a, op, b: Binop('*', a, b))
    syn.production('expr', 'expr PLUS expr',
                   lambda a, op, b: Binop('+', a, b))
    syn.production('expr', 'LPAREN expr RPAREN', lambda l, e, r: e)
    syn.production('expr', 'LET ID EQUALS expr IN expr',
                   lambda let, name, eq, bound, in_, body:
                   Let(name, bound, body))
    syn.production('expr', 'IF expr THEN expr ELSE expr',
                   lambda if_, cond, then, a, else_, b: If(cond, a, b))
    return syn
