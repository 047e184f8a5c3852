import sys

class LRAction(object):
    """
    An entry of the action table. The entries are tagged by `kind`, so
    the parser driver can dispatch on an integer.
    """

    SHIFT = 0
    REDUCE = 1
    ACCEPT = 2
    ERROR = 3

    kind = None

    @property
    def is_shift(self):
        return self.kind == LRAction.SHIFT

    @property
    def is_reduce(self):
        return self.kind == LRAction.REDUCE

    @property
    def is_accept(self):
        return self.kind == LRAction.ACCEPT

    @property
    def is_error(self):
        return self.kind == LRAction.ERROR

    def __eq__(self, other):
        return isinstance(other, LRAction) and \
            self.kind == other.kind and self.argument == other.argument

    def __hash__(self):
        return hash((self.kind, self.argument))

    @property
    def argument(self):
        return None


class Shift(LRAction):

    kind = LRAction.SHIFT

    def __init__(self, newstate):
        self._newstate = newstate

    def __str__(self):
        return "s%d" % self._newstate

    @property
    def next(self):
        return self._newstate

    argument = next


class Reduce(LRAction):

    kind = LRAction.REDUCE

    def __init__(self, reduction, production):
        self._reduction = reduction
        self._production = production

    def __str__(self):
        return "r%d" % self._reduction

    @property
    def red(self):
        return self._reduction

    @property
    def production(self):
        return self._production

    argument = red


class Accept(LRAction):

    kind = LRAction.ACCEPT

    def __str__(self):
        return "acc"


class Error(LRAction):

    kind = LRAction.ERROR

    def __str__(self):
        return "."


ERROR = Error()


class ParseTable(object):
    """
    A LR parse table.

    It is never modified after construction and can be shared between
    any number of parsers.
    """

    def __init__(self, actiontable, gototable, start, rules,
                 terminals, metas):
        self._start = start
        self._actiontable = actiontable
        self._gototable = gototable
        self._rules = rules
        self._terminals = terminals
        self._metas = metas
        self._terminal_names = sorted(terminals, key=terminals.get)
        self._reductions = [(len(rule), metas[rule.left.name], rule)
                            for rule in rules]

    def __len__(self):
        return len(self._actiontable)

    def actiontable(self):
        return self._actiontable

    def gototable(self):
        return self._gototable

    @property
    def reductions(self):
        """
        The vector of (size, meta number, production) by reduction
        number.
        """
        return self._reductions

    @property
    def start(self):
        return self._start

    def terminal_number(self, name):
        """
        The column of terminal `name` in the action table or None if
        the grammar does not know `name`.
        """
        return self._terminals.get(name)

    def terminal_names(self):
        return list(self._terminal_names)

    def action(self, state, terminal):
        """
        The `LRAction` for `state` and lookahead `terminal` (a name).
        """
        number = self._terminals.get(str(terminal))
        if number is None:
            return ERROR
        return self._actiontable[state][number]

    def goto(self, state, nonterminal):
        """
        The state reached after reducing to `nonterminal` (a name) in
        `state` or None, also for unknown names.
        """
        number = self._metas.get(str(nonterminal))
        if number is None:
            return None
        return self._gototable[state][number]

    def expected(self, state):
        """
        The names of the terminals acceptable in `state`.
        """
        return [name for name, action
                in zip(self._terminal_names, self._actiontable[state])
                if not action.is_error]

    def print(self, file=sys.stdout):
        for i, rule in enumerate(self._rules):
            print("(%d) %s" % (i, str(rule)), file=file)

        metas = sorted(self._metas, key=self._metas.get)
        print("     ", end=' ', file=file)
        for name in self._terminal_names + metas:
            print(name[:5].center(5), end=' ', file=file)
        print("", file=file)

        for i, (aline, gline) in enumerate(zip(self._actiontable,
                                               self._gototable)):
            print(str(i).center(5), end=' ', file=file)
            for entry in aline:
                print(str(entry).center(5), end=' ', file=file)

            for entry in gline:
                print(('.' if entry is None else str(entry)).center(5),
                      end=' ', file=file)
            print("", file=file)
