import logging
import unittest

from ..compiler import compile as compile_syntax

# perhaps I should just use logging.shutdown
# and reinitialize afterwards, I am afraid
# they don't die this way
def counted_make_logger(name):
    LOGGER_COUNTER = 0
    def get_logger():
        nonlocal LOGGER_COUNTER
        res = logging.getLogger('{}{}'.format(name, LOGGER_COUNTER))
        LOGGER_COUNTER += 1
        return res
    return get_logger

unique_logger = counted_make_logger('lrgentest')

class CheckingHandler(logging.Handler):

    def __init__(self, logmessages):
        """
        A handler to check the emitted messages with a coroutine
        `logmessages`.  `next` is once applied to `logmessages`,
        afterwards the logging records are passed to it via `.send()`.

        This is used to verify logmessages generated on the logger the
        `CheckingHandler` is added to.

        If `logmessages` raises *StopIteration* an assertion will
        fail. For more specific error messages add something like:

            def logchecker():
                while True:
                    yield
                    self.fail("unexpected log entry")

        where `logchecker` is a closure in a method of your test case.
        """
        super().__init__()
        self.checker = logmessages
        next(self.checker)

    def emit(self, record):
        try:
            self.checker.send(record)
        except StopIteration:
            assert False

class FailOnLogHandler(logging.Handler):

    def __init__(self, test_case):
        """
        A handler designed to fail, whenever anything is logged at
        warning level or above. `test_case` is the instance of a
        `TestCase` to which the failure shall be reported.
        """
        super().__init__(logging.WARNING)
        self.test_case = test_case

    def emit(self, record):
        """
        Fail if warnings are logged
        """
        self.test_case.fail("unexpected log message during build: {}"
                            .format(record.getMessage()))

class ParseResultTestCase(unittest.TestCase):
    """
    A test case should inherit from this class, if it verfies the
    results of lexing or parsing.
    """

    def verify_parse_result(self, compiled, source, result):
        """
        Verify the result of parsing `source` with the `Compiled`
        tables `compiled` produces `result`
        """
        self.assertEqual(compiled.parse(source), result)

    def verify_syntax_error(self, compiled, source):
        """
        Verify parsing `source` with `compiled` raises a `ParseError`
        and return it.
        """
        from ..runtime.parser import ParseError
        with self.assertRaises(ParseError) as cm:
            compiled.parse(source)
        return cm.exception

    def verify_tokens(self, compiled, source, tokens):
        """
        Verify lexing `source` yields the (kind, value) pairs
        `tokens`, the final $EOF excluded.
        """
        lexed = compiled.lexer(source).lex_all()
        self.assertEqual([(token.kind, token.value) for token in lexed],
                         tokens)


class FailOnLogTestCase(ParseResultTestCase):

    def compile(self, syntax, **kwargs):
        self.logger = unique_logger()
        self.logger.propagate = False
        self.logger.addHandler(FailOnLogHandler(self))
        return compile_syntax(syntax, self.logger, **kwargs)


def compile_checked(syntax, logcheck, **kwargs):
    """
    Compile `syntax` with a logger checking the messages at warning
    level and above with the coroutine `logcheck`.
    """
    logger = unique_logger()
    logger.setLevel(logging.WARNING)
    logger.addHandler(CheckingHandler(logcheck))
    logger.propagate = False
    return compile_syntax(syntax, logger, **kwargs)
