"""
Representation of a lexer and parser description.

The description is built in memory through the `Syntax` class. It
stores names only, symbols are resolved each time tables are generated
(see `Grammar.build_symtable`), so a description can be compiled any
number of times.
"""
from .core import DefinitionError
from .symbol import Terminal, Meta, EOF
from .regex import as_regex, literal
from .lexer import LexingRule
from .lr import Production
from . import lexactions


class TokenKind(object):

    def __init__(self, name, payload=None):
        """
        A token kind. `payload` is a callable deriving the token value
        from the matched text, without one the value is the text.
        """
        self._name = name
        self._payload = payload

    def __repr__(self):
        if self._payload is None:
            return "TokenKind({!r})".format(self._name)
        return "TokenKind({!r}, {!r})".format(self._name, self._payload)

    def __eq__(self, other):
        return isinstance(other, TokenKind) and \
            self._name == other._name and self._payload == other._payload

    def __hash__(self):
        return hash(self._name)

    @property
    def name(self):
        return self._name

    @property
    def payload(self):
        return self._payload

    def value(self, text):
        if self._payload is None:
            return text
        return self._payload(text)


class Symtable:

    TERMINAL = 0
    META = 1
    EOF = 2

    class SymbolTableEntry(object):

        def __init__(self, symbol, symbol_number, symtype):
            self._symbol = symbol
            self._number = symbol_number
            self._symtype = symtype

        @property
        def symtype(self):
            return self._symtype

        @property
        def symbol(self):
            return self._symbol

        @property
        def number(self):
            return self._number

    def __init__(self):
        self._meta_counter = 0
        self._term_counter = 0

        self._symbols = {}
        self.start_symbol = None

        self.require_EOF()
        self.define_meta("$START")

    def __iter__(self):
        return iter(self._symbols)

    def __contains__(self, name):
        return name in self._symbols

    def __getitem__(self, index):
        return self._symbols[index]

    def metas(self):
        return {value.symbol: value.number for value in self._symbols.values()
                                           if value.symtype == Symtable.META}

    def terminals(self):
        termsyms = frozenset([Symtable.TERMINAL, Symtable.EOF])
        return {value.symbol: value.number for value in self._symbols.values()
                                           if value.symtype in termsyms}

    def require_EOF(self):
        if "$EOF" not in self._symbols:
            self._symbols['$EOF'] = \
                Symtable.SymbolTableEntry(EOF(), self._term_counter, self.EOF)

            self._term_counter += 1

        return self._symbols["$EOF"].symbol

    def define_terminal(self, name, kind=None):
        """
        Define and return a terminal symbol.
        """
        if name not in self._symbols:
            self._symbols[name] = \
                Symtable.SymbolTableEntry(Terminal(name, kind),
                                          self._term_counter, self.TERMINAL)
            self._term_counter += 1

        entry = self._symbols[name]
        if entry.symtype != Symtable.TERMINAL:
            raise DefinitionError("{} is not a token kind".format(name))

        return entry.symbol

    def define_meta(self, name):
        """
        Define and return a meta symbol.

        If the symbol does not exist create a new meta symbol with
        that name.
        """
        if name not in self._symbols:
            self._symbols[name] = \
                Symtable.SymbolTableEntry(Meta(name), self._meta_counter, self.META)
            self._meta_counter += 1

        entry = self._symbols[name]
        if entry.symtype != Symtable.META:
            raise DefinitionError("token kind {} cannot be derived by "
                                  "productions".format(name))

        return entry.symbol


class Grammar:

    # these map the names used in the declarations to the
    # associativity constants
    ASSOCIATIVITY = {
        'left': Production.LEFT,
        'right': Production.RIGHT,
        'nonassoc': Production.NONASSOC,
        }

    def __init__(self):
        self.start_symbol = None
        self._productions = []
        self._precedence = {}
        self._assoc_power = 0

    def __iter__(self):
        return iter(self._productions)

    def __len__(self):
        return len(self._productions)

    @property
    def precedence(self):
        return self._precedence

    def add_production(self, left, right, action=None, prec=None):
        """
        Add the production `left` -> `right`. `right` is a sequence of
        symbol names or a string of whitespace separated names,
        `action` is called with the values of the right side symbols
        on reduction and `prec` optionally names the precedence of the
        production.
        """
        if isinstance(right, str):
            right = right.split()

        self._productions.append((left, tuple(right), action, prec))

    def declare_precedence(self, assoc, names):
        """
        Declare a precedence group. Groups declared later bind tighter.
        """
        try:
            assoc = self.ASSOCIATIVITY[assoc]
        except KeyError:
            raise DefinitionError("unknown associativity {}".format(assoc))

        self._assoc_power += 1
        for name in names:
            if name in self._precedence:
                raise DefinitionError("precedence of {} declared twice"
                                      .format(name))
            self._precedence[name] = assoc, self._assoc_power

    def build_symtable(self, token_kinds):
        """
        Resolve the grammar against the declared `token_kinds` and
        return a fresh `Symtable` holding the `Production` objects.

        Raise `DefinitionError` on undefined symbols and precedences.
        """
        if not self._productions:
            raise DefinitionError("the grammar has no productions")

        symtable = Symtable()
        for kind in token_kinds.values():
            symtable.define_terminal(kind.name, kind)

        for left, right, action, prec in self._productions:
            if left.startswith('$'):
                raise DefinitionError("nonterminal names starting with $ are "
                                      "reserved: {}".format(left))
            symtable.define_meta(left)

        start = self.start_symbol or self._productions[0][0]
        if start not in symtable or \
                symtable[start].symtype != Symtable.META:
            raise DefinitionError("start symbol {} has no productions"
                                  .format(start))
        symtable.start_symbol = symtable[start].symbol

        for name, precedence in self._precedence.items():
            if name in symtable and \
                    symtable[name].symtype == Symtable.TERMINAL:
                symtable[name].symbol.precedence = precedence

        undefined = {}
        for number, (left, right, action, prec) in enumerate(self._productions):
            meta = symtable[left].symbol
            syms = []
            for name in right:
                if name in symtable and not name.startswith("$"):
                    syms.append(symtable[name].symbol)
                else:
                    undefined.setdefault(name, []).append(
                        "{} <- {}".format(left, " ".join(right)))

            prod = Production(meta, syms, number)
            prod.action = action

            if prec is not None:
                try:
                    prod.precedence = self._precedence[prec]
                except KeyError:
                    raise DefinitionError("precedence {} used in {} undefined"
                                          .format(prec, str(prod)))
            else:
                terminals = [sym for sym in syms if sym.is_terminal]
                if terminals:
                    prod.precedence = terminals[-1].precedence

            meta.add_prod(prod)

        if undefined:
            raise DefinitionError("\n".join(
                "Undefined symbol {} used in {}".format(name, "; ".join(uses))
                for name, uses in undefined.items()))

        return symtable


class Lexer:
    def __init__(self):
        self._lexer = []
        self._lexer_defs = {}

    def __iter__(self):
        return iter(self._lexer)

    def __len__(self):
        return len(self._lexer)

    def add_lexing_rule(self, lexingrule):
        self._lexer.append(lexingrule)

    def add_named_pattern(self, name, regex):
        if name in self._lexer_defs:
            raise DefinitionError("redefinition of pattern name {}".format(name))
        self._lexer_defs[name] = regex

    def named_patterns(self):
        return self._lexer_defs


class Syntax(object):

    def __init__(self):
        self._tokens = {}
        self._grammar = Grammar()
        self._lexer = Lexer()

    @property
    def token_kinds(self):
        return self._tokens

    @property
    def lexer(self):
        return self._lexer

    @property
    def grammar(self):
        return self._grammar

    @property
    def start(self):
        return self._grammar.start_symbol

    @start.setter
    def start(self, name):
        self._grammar.start_symbol = name

    def token(self, name, payload=None):
        """
        Declare the token kind `name` and return its `TokenKind`.

        Declaring a kind again is allowed as long as the payload is the
        same.
        """
        if name.startswith('$'):
            raise DefinitionError("token kind names starting with $ are "
                                  "reserved: {}".format(name))

        kind = TokenKind(name, payload)
        if name in self._tokens:
            if self._tokens[name] != kind:
                raise DefinitionError("token kind {} redeclared with a "
                                      "different payload".format(name))
            return self._tokens[name]

        self._tokens[name] = kind
        return kind

    def pattern(self, name, regex):
        """
        Define the named pattern `name`, usable as ``{name}`` in other
        patterns.
        """
        self._lexer.add_named_pattern(name, as_regex(regex))

    def rule(self, regex, action):
        """
        Append a lexing rule. Rules declared earlier win when two rules
        match the same longest text.
        """
        source = regex if isinstance(regex, str) else None
        if isinstance(action, lexactions.Token) and \
                action.name not in self._tokens:
            self.token(action.name)

        self._lexer.add_lexing_rule(LexingRule(as_regex(regex), action, source))

    def emit(self, regex, name):
        self.rule(regex, lexactions.Token(name))

    def keyword(self, text, name):
        """
        Emit `name` on the literal `text`.
        """
        self._lexer.add_lexing_rule(
            LexingRule(literal(text), lexactions.Token(name), repr(text)))
        if name not in self._tokens:
            self.token(name)

    def skip(self, regex):
        self.rule(regex, lexactions.Restart())

    def end(self, regex):
        self.rule(regex, lexactions.EndOfInput())

    def production(self, left, right, action=None, prec=None):
        self._grammar.add_production(left, right, action, prec)

    def left(self, *names):
        self._grammar.declare_precedence('left', names)

    def right(self, *names):
        self._grammar.declare_precedence('right', names)

    def nonassoc(self, *names):
        self._grammar.declare_precedence('nonassoc', names)
