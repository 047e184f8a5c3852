from collections import deque

from .lextable import Lextable

class DFAState(object):

    def __init__(self):
        self._transitions = []
        self.rule = None
        self.number = None

    def __iter__(self):
        return iter(self._transitions)

    def add_transition(self, state):
        self._transitions.append(state)


class OptimizerPartition(object):
    def __init__(self):
        self._groups = []
        self._forward = {}

    def __len__(self):
        return len(self._groups)

    def new_group(self):
        num = len(self._groups)
        self._groups.append([])
        return num

    def group_of_state(self, state):
        return self._forward[state]

    def add(self, group, state):
        self._forward[state] = group
        self._groups[group].append(state)

    def generate_partition_transition_table(self, state):
        # efficiency hack for:
        # return tuple(self.group_of_state(target) for target in state)
        return tuple(map(self._forward.__getitem__, state))

    def partition(self):
        partition = self
        while True:
            refined = OptimizerPartition()
            for group in partition._groups:
                patterns = {}
                for entry in group:
                    pattern = partition.generate_partition_transition_table(entry)

                    if pattern not in patterns:
                        patterns[pattern] = refined.new_group()

                    refined.add(patterns[pattern], entry)

            if len(refined) == len(partition):
                return partition
            partition = refined

    def reconstruct(self, *states):
        """
        Build the reduced DFA. Returns the list of new states followed
        by the new states of each of `states`.
        """
        newstates = [DFAState() for group in self._groups]

        # link the new states
        for newstate, group in zip(newstates, self._groups):
            representative = group[0]
            newstate.rule = representative.rule
            for target in representative:
                newstate.add_transition(newstates[self.group_of_state(target)])

        return [newstates] + [newstates[self.group_of_state(state)]
                              for state in states]


class LexingDFA(object):

    def __init__(self, start, dead, states, classes):
        self.start = start
        self.dead = dead
        self.states = list(states)
        self._classes = classes

    def optimize(self, logger):
        """
        Minimize the DFA by merging states, which cannot be
        distinguished by any input.
        """
        # construct the initial partition, the start state gets a
        # group of its own as it must never be merged with an
        # accepting state
        partition = OptimizerPartition()
        rules = {}

        for state in self.states:
            key = 'start' if state is self.start else state.rule
            if key not in rules:
                rules[key] = partition.new_group()

            partition.add(rules[key], state)

        # run the optimizing algorithm
        partition = partition.partition()

        # construct a new DFA from the partition
        before = len(self.states)
        self.states, self.start, self.dead = \
            partition.reconstruct(self.start, self.dead)

        logger.info("lexer DFA minimized from {} to {} states"
                    .format(before, len(self.states)))

    def create_lex_table(self, rules, token_kinds=None):
        """
        Create a numeric table representation of the DFA.
        """
        lextable = []
        accepting = []

        queue = deque([self.start])
        self.start.number = 0
        cnt = 1

        while queue:
            cur = queue.pop()
            assert cur.number == len(lextable)
            newline = []
            for target in cur:
                if target.number is None:
                    queue.appendleft(target)
                    target.number = cnt
                    cnt += 1
                newline.append(target.number)
            accepting.append(cur.rule)
            lextable.append(tuple(newline))

        # the dead state is the target for symbols outside the alphabet
        # even if no transition leads there
        if self.dead.number is None:
            self.dead.number = len(lextable)
            lextable.append(tuple(self.dead.number for cls in self.dead))
            accepting.append(None)

        return Lextable(lextable, self.start.number, self.dead.number,
                        accepting, rules, self._classes, token_kinds)
