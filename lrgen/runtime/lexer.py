from collections import namedtuple

from .input import InputBuffer, EndOfFile, Position

EOF = "$EOF"

class Token(namedtuple('Token', 'kind value text position')):
    """
    A token: the name of its kind, the value derived from the matched
    text, the text and its position.
    """
    __slots__ = ()

    def __str__(self):
        return "{}({!r})".format(self.kind, self.value)


class LexError(Exception):
    def __init__(self, message='', position=None, char=None):
        super().__init__(message)
        self.message = message
        self.position = position
        self.char = char

    def __str__(self):
        return '{}:{}'.format(str(self.position), self.message)


class LexerExhausted(Exception):
    pass


def decode_error(error, filename):
    """
    Convert the `UnicodeDecodeError` `error` into a `LexError` at the
    position of the first undecodable byte.
    """
    # the input up to error.start is valid
    prefix = error.object[:error.start].decode(error.encoding)
    line = prefix.count('\n') + 1
    col = len(prefix) - (prefix.rfind('\n') + 1)
    char = bytes(error.object[error.start:error.end])
    return LexError("invalid {} input {!r}".format(error.encoding, char),
                    Position(filename, line, col, line, col + 1), char)


class Lexer(object):

    def __init__(self, lextable, source, filename='<string>', encoding=None):
        """
        A DFA-based Lexer over `source` (a string, bytes, a file object
        or an `InputBuffer`). Byte input is decoded with `encoding`,
        by default the encoding of the alphabet of `lextable`.

        The `lex` method returns the tokens from `source`.
        """
        if isinstance(source, InputBuffer):
            input_buffer = source
        else:
            try:
                input_buffer = InputBuffer(source, filename,
                                           encoding or lextable.alphabet.encoding)
            except UnicodeDecodeError as e:
                raise decode_error(e, filename)

        self.lextable = lextable
        self.input_buffer = input_buffer
        self.input_buffer.set_mapping(lextable.classes.classify)
        self._finished = False

    def __iter__(self):
        """
        Iterate over the remaining tokens, including the final $EOF
        token. An exhausted lexer raises `LexerExhausted`.
        """
        while True:
            token = self.lex()
            yield token
            if token.kind == EOF:
                return

    def reset(self):
        """
        Restart scanning at the beginning of the input.
        """
        self.input_buffer.reset()
        self._finished = False

    def lex_all(self):
        tokens = []
        while True:
            token = self.lex()
            if token.kind == EOF:
                return tokens
            tokens.append(token)

    def make_token(self, name, text, position):
        kind = self.lextable.token_kinds.get(name)
        value = text if kind is None else kind.value(text)
        return Token(name, value, text, position)

    def finish(self, position):
        """
        Return the $EOF token, after this the lexer is exhausted.
        """
        self._finished = True
        return Token(EOF, None, '', position)

    def lex(self):
        if self._finished:
            raise LexerExhausted("the token stream is exhausted, "
                                 "reset the lexer to scan again")

        lextable = self.lextable
        table, accepting = lextable.table, lextable.accepting
        start, dead = lextable.start, lextable.dead
        rules = lextable.rules
        input_buffer = self.input_buffer

        while True:
            if input_buffer.not_stepped():
                return self.finish(input_buffer.pos())

            state = start
            rule = None

            try:
                while True:
                    symbol = input_buffer.step()
                    if symbol is None:
                        break

                    state = table[state][symbol]
                    if state == dead:
                        break
                    elif accepting[state] is not None:
                        input_buffer.mark()
                        rule = accepting[state]
            except EndOfFile:
                pass

            if rule is None:
                char = input_buffer.current()
                raise LexError("no lexing rule matches {!r}".format(char),
                               input_buffer.pos(), char)

            text, position = input_buffer.extract()

            token = rules[rule].action(self, text, position)
            if token is not None:
                return token
