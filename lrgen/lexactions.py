"""
Lexing actions, executed by the lexer on a completed match.

An action is called with the lexer, the matched text and its position.
It returns the token to hand to the caller, or None to discard the
match and continue scanning.
"""

class LexingAction(object):

    def __call__(self, lexer, text, position):
        raise NotImplementedError()

    def __eq__(self, other):
        return self.__class__ == other.__class__ \
            and self.__dict__ == other.__dict__

    def __hash__(self):
        return hash((self.__class__, tuple(sorted(self.__dict__.items()))))


class Token(LexingAction):
    """
    Emit a token of kind `name`, its value is derived from the text by
    the payload of the token kind.
    """

    def __init__(self, name):
        super().__init__()
        self._name = name

    def __repr__(self):
        return "Token('%s')" % self.name

    @property
    def name(self):
        return self._name

    def __call__(self, lexer, text, position):
        return lexer.make_token(self._name, text, position)


class Restart(LexingAction):
    """
    Discard the match and continue scanning (whitespace, comments).
    """

    def __repr__(self):
        return "Restart()"

    def __call__(self, lexer, text, position):
        return None


class EndOfInput(LexingAction):
    """
    Treat the match as the end of the input.
    """

    def __repr__(self):
        return "EndOfInput()"

    def __call__(self, lexer, text, position):
        return lexer.finish(position)
