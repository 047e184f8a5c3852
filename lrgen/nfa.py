from .dfa import DFAState, LexingDFA
from .alphabet import Epsilon, SymbolClasses

class NFAState(object):

    def __init__(self):
        self._transitions = {}
        self.priority = None

    def __iter__(self):
        return iter(self._transitions.items())

    def add_epsilon_transition(self, state):
        self.add_transition(Epsilon(), state)

    def add_transition(self, label, state):
        """
        Add a transition on `label` (a `CharacterSet` or `Epsilon()`)
        to `state`.
        """
        if label not in self._transitions:
            self._transitions[label] = set()

        self._transitions[label].add(state)

    def epsilon_targets(self):
        return self._transitions.get(Epsilon(), ())


class LexingNFA(object):

    def __init__(self, lexing_rules, alphabet, logger):
        """
        The union of the NFAs of all `lexing_rules`. The accepting
        state of each rule is tagged with the index of the rule as its
        priority, lower numbers take precedence.
        """
        self._logger = logger
        self._start = NFAState()

        charsets = []
        for priority, lexing_rule in enumerate(lexing_rules):
            start, end = lexing_rule.regex.NFA()

            self._start.add_epsilon_transition(start)
            end.priority = priority
            charsets.extend(lexing_rule.regex.charsets())

        self._classes = SymbolClasses(alphabet, charsets)
        self._moves = self._alphabetize()
        self._closures = {}

    def _alphabetize(self):
        """
        Map the character set labels of all reachable states to the
        symbol classes. Returns a dict mapping each state to a dict of
        symbol class to target states.
        """
        class_cache = {}
        moves = {}
        visited = set([self._start])
        todo = [self._start]

        while todo:
            state = todo.pop()
            table = {}
            for label, targets in state:
                for target in targets:
                    if target not in visited:
                        visited.add(target)
                        todo.append(target)

                if label is Epsilon():
                    continue

                if label not in class_cache:
                    class_cache[label] = self._classes.classes_of(label)

                for cls in class_cache[label]:
                    table.setdefault(cls, set()).update(targets)

            moves[state] = table

        return moves

    def epsilon_closure(self, state):
        """
        Return the epsilon closure of `state`.
        """
        try:
            return self._closures[state]
        except KeyError:
            pass

        closure = set([state])
        todo = [state]
        while todo:
            for target in todo.pop().epsilon_targets():
                if target not in closure:
                    closure.add(target)
                    todo.append(target)

        closure = frozenset(closure)
        self._closures[state] = closure
        return closure

    def create_DFA(self):
        """
        Create a DFA from the NFA by subset construction. The DFA has a
        transition for every symbol class in every state, the empty
        subset is the dead state.
        """

        def select_rule(nfa_states):
            priorities = [state.priority for state in nfa_states
                          if state.priority is not None]
            return min(priorities) if priorities else None

        si = self.epsilon_closure(self._start)
        dead = frozenset()

        # the start state never accepts: taking a match of length zero
        # would not advance the input
        dfa_states = {si: DFAState(), dead: DFAState()}
        todo = [si, dead]

        while todo:
            cur = todo.pop()
            moves = {}
            for nfa_state in cur:
                for cls, targets in self._moves[nfa_state].items():
                    moves.setdefault(cls, set()).update(targets)

            for cls in range(len(self._classes)):
                move = set()
                for target in moves.get(cls, ()):
                    move |= self.epsilon_closure(target)
                new_state = frozenset(move)

                if new_state not in dfa_states:
                    todo.append(new_state)
                    dfa_states[new_state] = DFAState()
                    dfa_states[new_state].rule = select_rule(new_state)

                dfa_states[cur].add_transition(dfa_states[new_state])

        self._logger.info("lexer DFA: {} states over {} symbol classes"
                          .format(len(dfa_states), len(self._classes)))

        return LexingDFA(dfa_states[si], dfa_states[dead],
                         dfa_states.values(), self._classes)
