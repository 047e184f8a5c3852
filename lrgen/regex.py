
from .core import CantHappen, DefinitionError
from .alphabet import CharacterSet
from .nfa import NFAState

class RegexAST(object):
    """An AST representing a regular expression."""

    def NFA(self):
        """
        Construct a Thompson NFA for the expression. Returns the pair
        of start and end state.
        """
        raise NotImplementedError()

    def matches_empty(self):
        """Return whether the expression accepts the empty string."""
        raise NotImplementedError()

    def references(self):
        """Iterate over the names of the named patterns referenced."""
        return iter([])

    def resolve(self, bindings):
        """
        Return the expression with all named references replaced by
        their binding in `bindings`.
        """
        return self

    def charsets(self):
        """Iterate over the character sets labelling the transitions."""
        return iter([])


class EmptyRegex(RegexAST):

    def __str__(self):
        return "EmptyRegex()"

    def NFA(self):
        start = NFAState()
        end = NFAState()
        start.add_epsilon_transition(end)
        return start, end

    def matches_empty(self):
        return True


class CharacterRegex(RegexAST):

    def __init__(self, chars):
        self._chars = chars

    def __str__(self):
        return "CharacterRegex({})".format(str(self._chars))

    @property
    def chars(self):
        return self._chars

    def NFA(self):
        start = NFAState()
        end = NFAState()

        start.add_transition(self._chars, end)

        return start, end

    def matches_empty(self):
        return False

    def charsets(self):
        yield self._chars


class ReferenceRegex(RegexAST):

    def __init__(self, name):
        self._name = name

    def __str__(self):
        return "ReferenceRegex({})".format(self._name)

    @property
    def name(self):
        return self._name

    def NFA(self):
        # references are substituted before NFA construction
        raise CantHappen()

    def matches_empty(self):
        raise CantHappen()

    def references(self):
        yield self._name

    def resolve(self, bindings):
        try:
            return bindings[self._name]
        except KeyError:
            raise DefinitionError(
                "undefined named pattern {{{}}}".format(self._name))


class BinaryRegex(RegexAST):

    def __init__(self, regex1, regex2):
        self._regex1, self._regex2 = regex1, regex2

    def __str__(self):
        return "%s(%s, %s)" % (type(self).__name__,
                               str(self._regex1), str(self._regex2))

    def references(self):
        yield from self._regex1.references()
        yield from self._regex2.references()

    def resolve(self, bindings):
        return type(self)(self._regex1.resolve(bindings),
                          self._regex2.resolve(bindings))

    def charsets(self):
        yield from self._regex1.charsets()
        yield from self._regex2.charsets()


class SequenceRegex(BinaryRegex):

    def NFA(self):
        nfa1s, nfa1e = self._regex1.NFA()
        nfa2s, nfa2e = self._regex2.NFA()

        # chain the end of the first automaton to the start of the
        # second one with an epsilon transition
        nfa1e.add_epsilon_transition(nfa2s)

        return nfa1s, nfa2e

    def matches_empty(self):
        return self._regex1.matches_empty() and self._regex2.matches_empty()


class OrRegex(BinaryRegex):

    def NFA(self):
        nfa1s, nfa1e = self._regex1.NFA()
        nfa2s, nfa2e = self._regex2.NFA()
        start, end = NFAState(), NFAState()

        start.add_epsilon_transition(nfa1s)
        start.add_epsilon_transition(nfa2s)

        nfa1e.add_epsilon_transition(end)
        nfa2e.add_epsilon_transition(end)

        return start, end

    def matches_empty(self):
        return self._regex1.matches_empty() or self._regex2.matches_empty()


class UnaryRegex(RegexAST):

    def __init__(self, regex):
        self._regex = regex

    def __str__(self):
        return "%s(%s)" % (type(self).__name__, str(self._regex))

    def matches_empty(self):
        return True

    def references(self):
        return self._regex.references()

    def resolve(self, bindings):
        return type(self)(self._regex.resolve(bindings))

    def charsets(self):
        return self._regex.charsets()


class OptionRegex(UnaryRegex):

    def NFA(self):
        nfas, nfae = NFAState(), NFAState()
        nfars, nfare = self._regex.NFA()

        nfas.add_epsilon_transition(nfars)
        nfas.add_epsilon_transition(nfae)
        nfare.add_epsilon_transition(nfae)

        return nfas, nfae


class RepeatorRegex(UnaryRegex):

    def NFA(self):
        nfas, nfae = NFAState(), NFAState()
        nfars, nfare = self._regex.NFA()

        nfas.add_epsilon_transition(nfae)
        nfas.add_epsilon_transition(nfars)
        nfare.add_epsilon_transition(nfars)
        nfare.add_epsilon_transition(nfae)

        return nfas, nfae


def balanced(combine, items):
    """
    Join the non-empty list `items` with the binary node class
    `combine` into a tree of logarithmic depth.
    """
    items = list(items)
    while len(items) > 1:
        paired = [combine(items[i], items[i + 1])
                  for i in range(0, len(items) - 1, 2)]
        if len(items) % 2:
            paired.append(items[-1])
        items = paired
    return items[0]


def literal(text):
    """
    Return the regex AST matching exactly `text`.
    """
    if not text:
        return EmptyRegex()
    return balanced(SequenceRegex,
                    [CharacterRegex(CharacterSet.from_string(char))
                     for char in text])


def as_regex(regex):
    """
    Accept either a regex AST or the text of a regular expression and
    return the AST.
    """
    if isinstance(regex, RegexAST):
        return regex
    return Regex(regex).ast


class RegexSyntaxError(DefinitionError):
    pass


# token types of the regex lexer
CHARS, OP, OPEN, OR, CLOSE, END, NAME, REPEAT = range(8)

class Regex(object):
    """A regular expression parsed to a `RegexAST`."""

    ESCAPES = {
        'n' : '\n',
        't' : '\t',
        'f' : '\f',
        'v' : '\v',
        'r' : '\r',
        's' : ' \n\t\v\r\f',
        'd' : '0123456789',
        'w' : 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_'
        }

    DOT = ~CharacterSet.from_string('\n')

    def parse_escape(self, iterator):
        try:
            char = next(iterator)

            if char == 'x':
                string = next(iterator) + next(iterator)
                return CharacterSet.from_string(chr(int(string, base=16)))
        except StopIteration:
            raise RegexSyntaxError("incomplete escape sequence")
        except ValueError:
            raise RegexSyntaxError("invalid hex escape")

        return CharacterSet.from_string(self.ESCAPES.get(char, char))

    def parse_char_class(self, iterator):
        chars = CharacterSet()
        prev = None
        group = False
        negate = False
        first = True

        for char in iterator:
            if first:
                first = False
                if char == '^':
                    negate = True
                    continue

            if char == ']':
                if group:
                    raise RegexSyntaxError("incomplete range in character class")
                return ~chars if negate else chars

            elif char == '-':
                if prev is None:
                    raise RegexSyntaxError("incomplete range in character class")
                group = True
                continue

            if char == '\\':
                cset = self.parse_escape(iterator)
            else:
                cset = CharacterSet.from_string(char)

            if group:
                if cset.single is None or prev.single is None:
                    raise RegexSyntaxError("range bounds must be single characters")

                if prev.single > cset.single:
                    raise RegexSyntaxError("reversed range in character class")

                cset = CharacterSet.range(prev.single, cset.single)
                group = False
                prev = None
            else:
                prev = cset

            chars = chars | cset

        raise RegexSyntaxError("unclosed character class")

    def parse_brace(self, iterator):
        res = ['']
        # we rely on the fact, that (iter(iterator) is iterator)
        # which is specified in the python stdlib docs
        for char in iterator:
            if char == '}':
                res[-1] = res[-1].strip()
                try:
                    res = [int(entry) if entry else None for entry in res]
                except ValueError:
                    if len(res) != 1:
                        raise RegexSyntaxError("comma in named regex reference")
                    return (NAME, res[0])
                else:
                    return (REPEAT, res)
            elif char == ',':
                res[-1] = res[-1].strip()
                res.append('')
            else:
                res[-1] += char

        raise RegexSyntaxError("unclosed brace expression")

    def lex(self):
        tokens = []

        iterator = iter(self._regex)
        for char in iterator:
            if char == '\\':
                tokens.append((CHARS, self.parse_escape(iterator)))
            elif char == '[':
                tokens.append((CHARS, self.parse_char_class(iterator)))
            elif char == ']':
                raise RegexSyntaxError("single closing bracket")
            elif char in ('+', '?', '*'):
                tokens.append((OP, char))
            elif char == '|':
                tokens.append((OR, '|'))
            elif char == '(':
                tokens.append((OPEN, '('))
            elif char == ')':
                tokens.append((CLOSE, ')'))
            elif char == '.':
                tokens.append((CHARS, self.DOT))
            elif char == '{':
                tokens.append(self.parse_brace(iterator))
            elif char == '}':
                raise RegexSyntaxError("single closing brace")
            else:
                tokens.append((CHARS, CharacterSet.from_string(char)))

        tokens.append((END, ''))
        return tokens

    @staticmethod
    def repeat(basic, counts):
        if len(counts) > 2:
            raise RegexSyntaxError("too many numbers in repetition operator")

        start = counts[0]
        stop = counts[1] if len(counts) == 2 else start

        if start is None or start < 0 or (stop is not None and stop < 0):
            raise RegexSyntaxError("item in brace repetition operator "
                                   "not a non-negative integer")

        if stop is not None and stop < start:
            raise RegexSyntaxError(
                "n greater than m in {n,m}-style repetition")

        parts = [basic] * start
        if stop is None:
            parts.append(RepeatorRegex(basic))
        else:
            parts.extend(OptionRegex(basic) for i in range(start, stop))

        if not parts:
            return EmptyRegex()
        return balanced(SequenceRegex, parts)

    def parse(self):

        tokens = iter(self.lex())
        current_token = next(tokens)

        def parse_or():
            nonlocal current_token

            alternatives = [parse_chain()]
            while current_token[0] == OR:
                current_token = next(tokens)
                alternatives.append(parse_chain())

            return balanced(OrRegex, [EmptyRegex() if alternative is None
                                      else alternative
                                      for alternative in alternatives])

        def parse_chain():
            items = []
            item = parse_op()
            while item is not None:
                items.append(item)
                item = parse_op()

            if not items:
                return None
            return balanced(SequenceRegex, items)

        def parse_op():
            nonlocal current_token

            res = parse_basic()
            if res is None:
                return None

            while current_token[0] in (OP, REPEAT):
                token, lexeme = current_token
                if token == REPEAT:
                    res = self.repeat(res, lexeme)
                elif lexeme == '+':
                    res = SequenceRegex(res, RepeatorRegex(res))
                elif lexeme == '*':
                    res = RepeatorRegex(res)
                elif lexeme == '?':
                    res = OptionRegex(res)
                else:
                    # this is a bug in the implementation!
                    raise CantHappen()
                current_token = next(tokens)

            return res

        def parse_basic():
            nonlocal current_token
            token, lexeme = current_token

            if token == CHARS:
                res = CharacterRegex(lexeme)
                current_token = next(tokens)
                return res

            elif token == OPEN:
                current_token = next(tokens)
                res = parse_or()
                if current_token[0] != CLOSE:
                    raise RegexSyntaxError("missing closing paren")

                current_token = next(tokens)
                return res

            elif token == NAME:
                current_token = next(tokens)
                return ReferenceRegex(lexeme)

            else:
                return None

        res = parse_or()

        token, lexeme = current_token
        if token == OP:
            raise RegexSyntaxError(
                "missing argument for '{}' operator".format(lexeme))
        elif token == REPEAT:
            raise RegexSyntaxError("missing argument for repetition operator")
        elif token == CLOSE:
            raise RegexSyntaxError("superfluous closing paren")
        elif token == END: # parsed up to EOF, we are happy
            return res
        else:
            raise CantHappen()

    def __init__(self, regex):
        self._regex = regex
        self._ast = self.parse()

    def __str__(self):
        return self._regex

    @property
    def ast(self):
        return self._ast
