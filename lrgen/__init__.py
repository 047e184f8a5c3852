"""
A pure python lexer generator and LR(1)/LALR(1) parser generator.

Lexers and parsers are described in memory with `Syntax`, `compile`
turns the description into a DFA based lextable and a LR parse table,
which drive `Lexer` and `Parser`.
"""

__version__ = '0.3.0'

from .core import GeneratorError, DefinitionError
from .regex import Regex, RegexSyntaxError
from .lr import GrammarConflictError
from .syntax import Syntax, TokenKind
from .compiler import compile, Compiled
from .runtime.lexer import Lexer, Token, LexError, LexerExhausted
from .runtime.parser import Parser, ParseError
