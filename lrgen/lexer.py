from .core import DefinitionError
from .alphabet import get_alphabet
from .nfa import LexingNFA

class LexingRule(object):

    def __init__(self, regex, action, source=None):
        """
        A lexing rule: a regex AST and the `LexingAction` executed
        when it matches. `source` is the textual pattern if there is
        one, it is used in messages only.
        """
        self._regex = regex
        self._action = action
        self._source = source

    def __str__(self):
        return "{} {!r}".format(self._source or str(self._regex), self._action)

    @property
    def regex(self):
        return self._regex

    @property
    def action(self):
        return self._action

    def resolve(self, bindings):
        return LexingRule(self._regex.resolve(bindings), self._action,
                          self._source)


def resolve_named_patterns(definitions):
    """
    Substitute the named references in the pattern `definitions`
    (a dict mapping names to regex ASTs). Returns a dict of the same
    names mapped to reference free ASTs.

    Raise `DefinitionError` on undefined or cyclic references.
    """
    resolved = {}

    def resolve(name, path):
        if name in resolved:
            return resolved[name]

        if name in path:
            cycle = path[path.index(name):] + [name]
            raise DefinitionError("cyclic named pattern definition: {}"
                                  .format(" -> ".join(cycle)))

        if name not in definitions:
            raise DefinitionError("undefined named pattern {{{}}}"
                                  .format(name))

        path.append(name)
        bindings = {ref: resolve(ref, path)
                    for ref in definitions[name].references()}
        path.pop()

        resolved[name] = definitions[name].resolve(bindings)
        return resolved[name]

    for name in definitions:
        resolve(name, [])

    return resolved


class LexerConstructor(object):
    """
    Manages the steps of constructing the lexer: resolving the named
    patterns, building the combined NFA, the DFA and finally the
    lextable.
    """

    def __init__(self, lexer_spec, logger, alphabet='bytes', token_kinds=None):
        self.logger = logger

        self._alphabet = get_alphabet(alphabet)
        self._token_kinds = token_kinds or {}
        self._dfa = None
        self._lextable = None

        bindings = resolve_named_patterns(lexer_spec.named_patterns())
        self._rules = [rule.resolve(bindings) for rule in lexer_spec]

        if not self._rules:
            raise DefinitionError("the lexer has no rules")

        self.empty_matches = []
        for number, rule in enumerate(self._rules):
            if rule.regex.matches_empty():
                self.logger.warning("lexing rule {} ({}) matches the empty "
                                    "string, empty matches are never taken"
                                    .format(number, str(rule)))
                self.empty_matches.append(rule)

        self._nfa = LexingNFA(self._rules, self._alphabet, logger)

    def construct_DFA(self):
        self._dfa = self._nfa.create_DFA()

    def drop_NFA(self):
        """
        Drop the nfa if it is no longer needed to spare memory
        """
        self._nfa = None

    def optimize(self):
        self._dfa.optimize(self.logger)

    def create_lex_table(self):
        self._lextable = self._dfa.create_lex_table(self._rules,
                                                    self._token_kinds)

    def drop_DFA(self):
        """
        Drop the dfa if it is no longer needed to spare memory
        """
        self._dfa = None

    @property
    def lextable(self):
        return self._lextable

