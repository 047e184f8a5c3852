import sys

class Lextable(object):
    """
    The table representation of the lexer DFA. It is never modified
    after construction and can be shared between any number of lexers.

    Rows are DFA states, columns are symbol classes. The table is total:
    each row has an entry for every symbol class, symbols outside the
    alphabet lead to the dead state.
    """

    def __init__(self, table, start, dead, accepting, rules, classes,
                 token_kinds=None):
        self._table = table
        self._start = start
        self._dead = dead
        self._accepting = accepting
        self._rules = rules
        self._classes = classes
        self._token_kinds = token_kinds or {}

    def __len__(self):
        return len(self._table)

    @property
    def table(self):
        return self._table

    @property
    def accepting(self):
        return self._accepting

    @property
    def token_kinds(self):
        """
        The mapping of token kind names to `TokenKind` objects.
        """
        return self._token_kinds

    @property
    def start(self):
        return self._start

    @property
    def dead(self):
        return self._dead

    @property
    def classes(self):
        return self._classes

    @property
    def alphabet(self):
        return self._classes.alphabet

    @property
    def rules(self):
        return self._rules

    def transition(self, state, symbol):
        """
        Return the state reached from `state` on `symbol`, a character
        or code point.
        """
        if isinstance(symbol, str):
            symbol = ord(symbol)

        cls = self._classes.classify(symbol)
        if cls is None:
            return self._dead
        return self._table[state][cls]

    def is_accepting(self, state):
        """
        Return the number of the lexing rule accepted in `state` or
        None if the state does not accept.
        """
        return self._accepting[state]

    def print(self, file=sys.stdout):
        print("start: {}  dead: {}".format(self._start, self._dead), file=file)

        for num, rule in enumerate(self._rules):
            print("rule {}: {}".format(num, str(rule)), file=file)

        for cls in range(len(self._classes)):
            print("class {}: {}".format(cls, str(self._classes.charset(cls))),
                  file=file)

        print("     ", end=' ', file=file)
        for cls in range(len(self._classes)):
            print(str(cls).center(3), end=' ', file=file)
        print("| rule", file=file)

        for i, row in enumerate(self._table):
            print(str(i).center(3), "-", end=' ', file=file)
            for target in row:
                print(str(target).center(3), end=' ', file=file)
            rule = self._accepting[i]
            print("|", '' if rule is None else rule, file=file)
