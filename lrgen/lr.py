import abc

from .core import CantHappen, GeneratorError
from .symbol import compute_first_sets, first_of
from .parsetable import Shift, Reduce, Accept, ERROR, ParseTable

class Production(object):
    """A production in a grammar.

    Public attributes:
    * ``left`` the symbol which is derived, only write this if
               you are a grammar or ``Meta``
    * ``precedence`` None or the pair (associativity, level) assigned
                     to this rule
    * ``number`` the number of this production in the reduction vector
    * ``action`` the semantic action associated with the reduction
    * ``number_in_file`` readonly, the number of the production
                         in the description
    """

    # these constants define the possible types of associativity
    LEFT = 1
    RIGHT = 2
    NONASSOC = 3

    def __init__(self, left, syms, number=-1):
        self.left = left
        self._syms = list(syms)
        self._number_in_file = number
        self.precedence = None
        self.action = None

        # number in the reduction rules vector
        self.number = None

    def __iter__(self):
        return iter(self._syms)

    def __str__(self):
        text = str(self.left) + " <-"

        for sub in self:
            text += " " + str(sub)

        return text

    def __len__(self):
        return len(self._syms)

    def __getitem__(self, index):
        return self._syms[index]

    # important note: this number is completely independent of the
    # number used to represent the production in the parse table!
    @property
    def number_in_file(self):
        return self._number_in_file

    def reduce(self, values):
        """
        Apply the semantic action to the `values` of the right side
        symbols. Without an action the value of the first symbol is
        passed on.
        """
        if self.action is None:
            return values[0] if values else None
        return self.action(*values)


class LRItem(object):
    """A LR(0) item (production, position). The lookahead sets are kept
    by the states, mapping their items to sets of terminals.

    The public accessors are:
    * prod (readonly), the production from the grammar
    * pos (readonly), the position of the mark in the production
    """

    def __init__(self, prod, pos):
        self._prod = prod
        self._pos = pos

    def __str__(self):
        return self.format()

    def format(self, lookahead=None):
        text = str(self._prod.left) + " <-"
        for count, sub in enumerate(self._prod):
            if count == self._pos:
                text += " ."
            text += " " + str(sub)

        if self.is_reduce():
            text += " ."

        if lookahead is not None:
            text += " { " + " ".join(sorted(str(la) for la in lookahead)) + " }"

        return text

    def __hash__(self):
        return hash(self._prod) ^ hash(self._pos)

    def __eq__(self, other):
        return self._prod is other._prod and self._pos == other._pos

    def sort_key(self):
        return self._prod.number_in_file, self._pos

    def after_dot(self):
        """
        Return the symbol that immediately follows the mark. If the
        mark is behind the last symbol of the production return None.
        """
        if self._pos < len(self._prod):
            return self._prod[self._pos]
        return None

    def is_reduce(self):
        """
        Return wheter this is a reduce item (the mark is after the
        last symbol).
        """
        return self._pos == len(self._prod)

    def advance(self):
        """
        Return the item with the mark moved over the next symbol.
        """
        return LRItem(self._prod, self._pos + 1)

    @property
    def prod(self):
        return self._prod

    @property
    def pos(self):
        return self._pos


class LRState(object):

    def __init__(self, number, kernel):
        """
        A state of the LR automaton. `kernel` maps the kernel items to
        their lookahead sets, `elements` is the closure of the kernel
        and `transitions` maps symbols to the successor states, both
        are filled when the state is expanded.
        """
        self._number = number
        self.kernel = kernel
        self.elements = {}
        self.transitions = {}

    def __str__(self):
        lines = []
        lines.append("state: " + str(self._number))

        lines.append("elements:")
        for item in sorted(self.elements, key=LRItem.sort_key):
            lines.append("  " + item.format(self.elements[item]))

        lines.append("transitions:")
        for symbol, state in self.transitions.items():
            lines.append("  " + str(symbol) + " -> " + str(state.number))

        return '\n'.join(lines)

    @property
    def number(self):
        return self._number

    def reductions(self):
        """
        Iterate over the reduction items and their lookahead sets.
        """
        for item in sorted(self.elements, key=LRItem.sort_key):
            if item.is_reduce():
                yield item, self.elements[item]

    def items_before(self, symbol):
        """
        The items in this state with the mark in front of `symbol`.
        """
        return [item for item in sorted(self.elements, key=LRItem.sort_key)
                if item.after_dot() is symbol]


class Conflict(object):

    def __init__(self, kind, state, terminal, items):
        """
        An unresolved conflict in `state` on the lookahead `terminal`.
        `items` are the competing (action, item) pairs.
        """
        self.kind = kind
        self.state = state
        self.terminal = terminal
        self.items = items

    def __str__(self):
        lines = ["{} conflict in state {} on {}:".format(
            self.kind, self.state.number, self.terminal)]
        for action, item in self.items:
            lines.append("  {}: {}".format(action, str(item)))
        return '\n'.join(lines)


class GrammarConflictError(GeneratorError):

    def __init__(self, conflicts):
        self.conflicts = conflicts
        super().__init__("{} unresolved conflict(s)\n{}".format(
            len(conflicts), '\n'.join(str(conflict) for conflict in conflicts)))


class StateTransitionGraph(object, metaclass=abc.ABCMeta):

    def __init__(self, symtable, logger):
        """
        An *LR(1) state transition graph, this has the behaviour
        common to LALR(1) and LR(1) transition graphs.

        `symtable` is the `Symtable` of a resolved grammar, see
        `Grammar.build_symtable`.
        """

        self.logger = logger
        self.symtable = symtable
        self.states = []
        self.conflicts = []
        self.start = None

        self._index = {}
        self._todo = []

    @abc.abstractmethod
    def state_key(self, kernel):
        """
        Return the key identifying the state with `kernel`.
        """
        pass

    @abc.abstractmethod
    def merge(self, state, kernel):
        """
        Merge the lookaheads of `kernel` into the existing `state`
        with the same key. Return whether the state changed.
        """
        pass

    def construct(self):
        """
        Construct the *LR(1) automaton of the grammar augmented by the
        production ``$START <- start $EOF``.
        """
        start_meta = self.symtable["$START"].symbol
        eof = self.symtable.require_EOF()

        prod = Production(start_meta, [self.symtable.start_symbol, eof], -1)
        start_meta.add_prod(prod)

        compute_first_sets(list(self.symtable.metas()))

        # the lookahead of the $START item is never used, it is
        # accepted on $EOF
        self.start = self.require_state({LRItem(prod, 0): set()})

        while self._todo:
            self.expand(self._todo.pop())

        self.logger.info("{} LR states".format(len(self.states)))

    def closure(self, kernel):
        """
        Calculate the CLOSURE of the item set `kernel`. Returns a dict
        mapping all items to their lookahead sets.
        """
        items = {item: set(lookahead) for item, lookahead in kernel.items()}
        todo = list(items)

        while todo:
            item = todo.pop()
            after_dot = item.after_dot()
            if after_dot is None or after_dot.is_terminal:
                continue

            rest = [item.prod[i] for i in range(item.pos + 1, len(item.prod))]
            lookahead, nullable = first_of(rest)
            if nullable:
                lookahead |= items[item]

            for prod in after_dot.productions():
                new = LRItem(prod, 0)
                if new not in items:
                    items[new] = set()
                elif lookahead <= items[new]:
                    continue

                items[new] |= lookahead
                todo.append(new)

        return items

    def require_state(self, kernel):
        """
        Return the state having the kernel `kernel`, create it if it
        does not exist already. New or changed states are queued for
        expansion.
        """
        key = self.state_key(kernel)
        state = self._index.get(key)

        if state is None:
            state = LRState(len(self.states), kernel)
            self.states.append(state)
            self._index[key] = state
            self._todo.append(state)
        elif self.merge(state, kernel):
            self._todo.append(state)

        return state

    def expand(self, state):
        """
        Compute the closure of the state and its successor states.

        Items are visited by order in the description for predictable
        results.
        """
        eof = self.symtable.require_EOF()
        state.elements = self.closure(state.kernel)

        gotos = {}
        for item in sorted(state.elements, key=LRItem.sort_key):
            symbol = item.after_dot()
            # the $EOF transition is the accept action
            if symbol is None or symbol is eof:
                continue

            kernel = gotos.setdefault(symbol, {})
            kernel.setdefault(item.advance(), set()).update(state.elements[item])

        state.transitions = {}
        for symbol, kernel in gotos.items():
            state.transitions[symbol] = self.require_state(kernel)

    def resolve_conflict(self, state, terminal, old, new):
        """
        Resolve a parse table conflict.

        The `state` argument is the LR(1) graph state causing the
        conflict, `terminal` the lookahead and `old` and `new` are the
        action already in the table respective the proposed reduction.

        A shift (or accept) has the precedence of the lookahead
        terminal, a reduction the precedence of its production. The
        higher precedence wins, for equal precedence the associativity
        decides: left reduces, right shifts. Everything else is
        recorded as a conflict.

        Returns the preceding action.
        """
        if old.is_error:
            return new

        if old.is_reduce:
            prec = old.production.precedence
            preci = new.production.precedence

            if prec is not None and preci is not None and prec[1] != preci[1]:
                return new if preci[1] > prec[1] else old

            self.record_conflict("reduce/reduce", state, terminal, old, new)
            return old

        elif old.is_shift or old.is_accept:
            prec = terminal.precedence
            preci = new.production.precedence

            if prec is None or preci is None:
                self.record_conflict("shift/reduce", state, terminal, old, new)
                return old

            assoc, level = preci
            if level > prec[1]:
                return new
            elif level < prec[1]:
                return old
            elif assoc == Production.LEFT:
                return new
            elif assoc == Production.RIGHT:
                return old
            elif assoc == Production.NONASSOC:
                self.record_conflict("nonassociative", state, terminal, old, new)
                return old
            else:
                raise CantHappen()

        raise CantHappen()

    def record_conflict(self, kind, state, terminal, old, new):
        items = []
        for action in (old, new):
            if action.is_reduce:
                items.append(("reduce", LRItem(action.production,
                                               len(action.production))))
            else:
                for item in state.items_before(terminal):
                    items.append(("shift", item))

        conflict = Conflict(kind, state, terminal, items)
        self.logger.error(str(conflict))
        self.conflicts.append(conflict)

    def create_parse_table(self):
        """
        Create the parse table from the LR graph.

        Raise `GrammarConflictError` if there are unresolved
        conflicts.
        """
        terminals = self.symtable.terminals()
        metas = self.symtable.metas()
        eof = self.symtable.require_EOF()

        rules = []

        # populate the rules vector
        for meta in sorted(metas, key=lambda meta: metas[meta]):
            for rule in meta.productions():
                rule.number = len(rules)
                rules.append(rule)

        atable = []
        jtable = []

        for state in self.states:
            # append the current row to the action- and jumptables
            acur = [ERROR] * len(terminals)
            jcur = [None] * len(metas)

            atable.append(acur)
            jtable.append(jcur)

            # fill goto table and write shifts to the action table
            for symb, tstate in state.transitions.items():
                if symb in metas:
                    jcur[metas[symb]] = tstate.number
                elif symb in terminals:
                    acur[terminals[symb]] = Shift(tstate.number)
                else:
                    raise CantHappen()

            if state.items_before(eof):
                acur[terminals[eof]] = Accept()

            # write reductions to the action table
            for item, lookahead in state.reductions():
                prod = item.prod
                reduce_action = Reduce(prod.number, prod)

                for la in sorted(lookahead, key=terminals.get):
                    acur[terminals[la]] = \
                        self.resolve_conflict(state, la,
                                              acur[terminals[la]],
                                              reduce_action)

        if self.conflicts:
            raise GrammarConflictError(self.conflicts)

        return ParseTable(atable, jtable, self.start.number, rules,
                          {symb.name: num for symb, num in terminals.items()},
                          {symb.name: num for symb, num in metas.items()})


class LALR1StateTransitionGraph(StateTransitionGraph):
    """
    The LALR(1) State Transition Graph.

    States with equal cores are merged while the automaton is built,
    lookaheads are propagated by expanding changed states again.
    """

    def state_key(self, kernel):
        return frozenset(kernel)

    def merge(self, state, kernel):
        changed = False
        for item, lookahead in kernel.items():
            if not lookahead <= state.kernel[item]:
                state.kernel[item] |= lookahead
                changed = True
        return changed


class LR1StateTransitionGraph(StateTransitionGraph):
    """
    The LR(1) State Transition Graph.
    """

    def state_key(self, kernel):
        return frozenset((item, frozenset(lookahead))
                         for item, lookahead in kernel.items())

    def merge(self, state, kernel):
        # the key contains the lookaheads, there is nothing to merge
        return False
