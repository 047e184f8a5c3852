"""
The generation pipeline: from a `Syntax` description to the lextable
and the parse table, bundled as a `Compiled` object.
"""
import sys
import logging

from .core import DefinitionError
from .lr import LALR1StateTransitionGraph, LR1StateTransitionGraph
from .lexer import LexerConstructor
from .runtime.lexer import Lexer
from .runtime.parser import Parser


class Compiled(object):

    def __init__(self, syntax, lextable, parse_table, empty_matches=()):
        """
        The generated tables of `syntax`. Both tables are read only,
        any number of lexers and parsers may use them at the same time.
        """
        self.syntax = syntax
        self.lextable = lextable
        self.parse_table = parse_table
        self.empty_matches = list(empty_matches)

    def lexer(self, source, filename='<string>'):
        if self.lextable is None:
            raise DefinitionError("the description has no lexer")
        return Lexer(self.lextable, source, filename)

    def parser(self, tokens, logger=None, trace=False):
        """
        Return a parser reading from `tokens`, a `Lexer` or an iterable
        of tokens.
        """
        if self.parse_table is None:
            raise DefinitionError("the description has no grammar")
        return Parser(self.parse_table, tokens, logger=logger, trace=trace)

    def parse(self, source, filename='<string>', logger=None, trace=False):
        """
        Lex and parse `source` and return the value of the start
        symbol.
        """
        return self.parser(self.lexer(source, filename),
                           logger=logger, trace=trace).parse()


def build_parse_table(syntax, logger, lalr=False, print_graph=False,
                      file=None):
    symtable = syntax.grammar.build_symtable(syntax.token_kinds)

    if lalr:
        graph = LALR1StateTransitionGraph(symtable, logger)
    else:
        graph = LR1StateTransitionGraph(symtable, logger)

    graph.construct()

    if print_graph:
        for state in graph.states:
            print(str(state), file=file or sys.stdout)

    return graph.create_parse_table()


def build_lexer(syntax, logger, alphabet='bytes', optimize=True):
    lexer = LexerConstructor(syntax.lexer, logger, alphabet,
                             syntax.token_kinds)

    lexer.construct_DFA()
    lexer.drop_NFA()

    if optimize:
        lexer.optimize()

    lexer.create_lex_table()
    lexer.drop_DFA()

    return lexer


def compile(syntax, logger=None, lalr=False, alphabet='bytes',
            optimize=True, print_graph=False, file=None):
    """
    Generate the lextable and the parse table of `syntax`.

    `lalr` selects LALR(1) instead of canonical LR(1) tables,
    `alphabet` is ``'bytes'`` or ``'unicode'`` and `optimize` enables
    the minimization of the lexer DFA.

    A description without productions gets no parse table, one
    without lexing rules or named patterns gets no lextable.
    """
    if logger is None:
        logger = logging.getLogger('lrgen')

    has_lexer = len(syntax.lexer) > 0 or bool(syntax.lexer.named_patterns())
    has_grammar = len(syntax.grammar) > 0

    if not has_lexer and not has_grammar:
        raise DefinitionError("the description is empty")

    parse_table = None
    if has_grammar:
        parse_table = build_parse_table(syntax, logger, lalr=lalr,
                                        print_graph=print_graph, file=file)

    lextable = None
    empty_matches = []
    if has_lexer:
        lexer = build_lexer(syntax, logger, alphabet, optimize)
        lextable = lexer.lextable
        empty_matches = lexer.empty_matches

    return Compiled(syntax, lextable, parse_table, empty_matches)
