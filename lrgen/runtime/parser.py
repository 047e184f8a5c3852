import logging

from ..parsetable import LRAction
from .input import Position
from .lexer import Token, EOF

class StackObject(object):
    def __init__(self, state):
        self.state = state
        self.pos = None
        self.sem = None

class ParseError(Exception):
    def __init__(self, message='', position=None, token=None, expected=()):
        super().__init__(message)
        self.message = message
        self.position = position
        self.token = token
        self.expected = list(expected)

    def __str__(self):
        return '{}:{}'.format(str(self.position), self.message)


class Parser(object):
    def __init__(self, parse_table, tokens, logger=None, trace=False):
        """
        A LR parser driving `parse_table` over `tokens`, a `Lexer` or
        any iterable of `Token` objects. Running out of tokens counts
        as $EOF.

        With `trace` every step is logged to `logger` at debug level.
        """
        self.parse_table = parse_table
        self.tokens = tokens
        self.logger = logger or logging.getLogger('lrgen')
        self.trace = trace

    @staticmethod
    def next_token(tokens, last):
        try:
            return next(tokens)
        except StopIteration:
            position = last.position if last is not None else \
                Position('', 1, 0, 1, 0)
            return Token(EOF, None, '', position)

    def print_trace(self, stack, action, token):
        self.logger.debug("%s # %s %s %r",
                          ' '.join(str(entry.state) for entry in stack),
                          action, token.kind, token.text)

    def parse(self):
        """
        Parse the token stream and return the value of the start
        symbol. Raises `ParseError` on the first token without an
        action.
        """
        parse_table = self.parse_table
        atable = parse_table.actiontable()
        gtable = parse_table.gototable()
        reductions = parse_table.reductions
        trace = self.trace

        stack = [StackObject(parse_table.start)]
        stack[-1].pos = Position('', 1, 0, 1, 0)

        tokens = iter(self.tokens)
        token = self.next_token(tokens, None)

        while True:
            terminal = parse_table.terminal_number(token.kind)
            if terminal is None:
                raise ParseError("unknown token kind {}".format(token.kind),
                                 token.position, token)

            action = atable[stack[-1].state][terminal]
            kind = action.kind

            if kind == LRAction.REDUCE:
                size, meta, production = reductions[action.red]
                if size > 0:
                    values = [entry.sem for entry in stack[-size:]]
                    pos = stack[-size].pos.add(stack[-1].pos)
                else:
                    values = []
                    pos = token.position

                new = StackObject(gtable[stack[-size-1].state][meta])
                new.pos = pos
                new.sem = production.reduce(values)
                if size > 0:
                    del stack[-size:]
                stack.append(new)

                if trace:
                    self.print_trace(stack, 'reduce', token)

            elif kind == LRAction.SHIFT:
                new = StackObject(action.next)
                new.sem = token.value
                new.pos = token.position
                stack.append(new)

                if trace:
                    self.print_trace(stack, 'shift', token)

                token = self.next_token(tokens, token)

            elif kind == LRAction.ACCEPT:
                if trace:
                    self.print_trace(stack, 'accept', token)
                return stack[-1].sem

            else:
                expected = parse_table.expected(stack[-1].state)
                if token.kind == EOF:
                    message = "unexpected end of input"
                else:
                    message = "unexpected {} {!r}".format(token.kind,
                                                          token.text)
                raise ParseError(message, token.position, token, expected)
