
class Symbol(object):
    """Base class for all types of symbols in the grammar (terminal,
    meta and EOF)."""

    def __init__(self, name):
        self._name = name

    def __str__(self):
        # use self.name to allow overiding by subclasses
        return self.name

    def __repr__(self):
        return "{}({!r})".format(type(self).__name__, self.name)

    @property
    def name(self):
        return self._name

    @property
    def is_terminal(self):
        return True

    def productions(self):
        """Return an iterator over the list of productions"""
        return iter([])


class Terminal(Symbol):
    """
    The Terminal symbol class.

    `precedence` is None or the pair (associativity, level) declared
    for the terminal.
    """

    def __init__(self, name, kind=None):
        super().__init__(name)
        self.kind = kind
        self.precedence = None


class EOF(Terminal):
    """
    The EOF symbol, the lookahead at the end of the token stream.
    """

    def __init__(self):
        super().__init__("$EOF")


class Meta(Symbol):
    """
    The Metasymbol class. This stores the grammar for the symbol.

    `first` and `nullable` are only valid after `compute_first_sets`
    ran on the grammar.
    """

    def __init__(self, name):
        super().__init__(name)
        self._prod = []
        self.first = frozenset()
        self.nullable = False

    @property
    def is_terminal(self):
        return False

    def productions(self):
        return iter(self._prod)

    def add_prod(self, prod):
        prod.left = self
        self._prod.append(prod)


def first_of(symbols):
    """
    Return the FIRST set of the symbol string `symbols` and whether the
    string derives the empty string.
    """
    result = set()
    for symbol in symbols:
        if symbol.is_terminal:
            result.add(symbol)
            return result, False

        result |= symbol.first
        if not symbol.nullable:
            return result, False

    return result, True


def compute_first_sets(metas):
    """
    Compute the FIRST sets and the nullability of all `metas` by
    iterating to the fixed point.
    """
    first = {meta: set() for meta in metas}
    for meta in metas:
        meta.nullable = False
        meta.first = frozenset()

    changed = True
    while changed:
        changed = False
        for meta in metas:
            for prod in meta.productions():
                prod_first, nullable = first_of(prod)

                if nullable and not meta.nullable:
                    meta.nullable = True
                    changed = True

                if not prod_first <= first[meta]:
                    first[meta] |= prod_first
                    meta.first = frozenset(first[meta])
                    changed = True
