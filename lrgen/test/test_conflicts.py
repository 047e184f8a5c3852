import logging

from ..syntax import Syntax
from ..compiler import compile
from ..core import DefinitionError
from ..lr import GrammarConflictError
from . import utils
from . import grammars

def if_else(*precedence):
    syn = Syntax()
    syn.skip(r'\s+')
    syn.keyword('if', 'IF')
    syn.keyword('else', 'ELSE')
    syn.keyword('body', 'BODY')

    for name in precedence:
        syn.nonassoc(name)

    syn.production('x', 'BODY', lambda body: 'body')
    syn.production('x', 'IF x ELSE x', lambda i, a, e, b: ('if', a, 'else', b))
    syn.production('x', 'IF x', lambda i, a: ('if', a))
    return syn


class CompilationMessagesTestCase(utils.ParseResultTestCase):

    def only_messages(self, pattern, description):
        def logmessages():
            msg = yield
            self.assertRegex(msg.getMessage(), pattern, description)
            while True:
                msg = yield
                self.assertRegex(msg.getMessage(), pattern,
                                 "superfluous log message")
        return logmessages()

    def test_shift_reduce(self):
        with self.assertRaises(GrammarConflictError) as cm:
            utils.compile_checked(if_else(),
                                  self.only_messages(
                                      r'shift/reduce',
                                      'did not recognize shift/reduce-conflict'))

        conflicts = cm.exception.conflicts
        self.assertGreaterEqual(len(conflicts), 1)
        for conflict in conflicts:
            self.assertEqual(conflict.kind, 'shift/reduce')
            self.assertEqual(conflict.terminal.name, 'ELSE')
            self.assertEqual(sorted(action for action, item in conflict.items),
                             ['reduce', 'shift'])

    def test_reduce_reduce(self):
        syn = Syntax()
        syn.skip(r'\s+')
        syn.keyword('a', 'A')

        syn.production('x', '', lambda: ())
        syn.production('x', 'y', lambda y: ('x', y))
        syn.production('x', 'A x', lambda a, x: ('x', x))
        syn.production('y', 'A x', lambda a, x: ('y', x))

        with self.assertRaises(GrammarConflictError) as cm:
            utils.compile_checked(syn,
                                  self.only_messages(
                                      r'reduce/reduce',
                                      'did not recognize reduce/reduce-conflict'))

        for conflict in cm.exception.conflicts:
            self.assertEqual(conflict.kind, 'reduce/reduce')
        self.assertRegex(str(cm.exception), r'unresolved conflict')

    def test_nonassoc(self):
        syn = Syntax()
        syn.skip(r'\s+')
        syn.emit(r'[0-9]+', 'INT')
        syn.keyword('<', 'LT')
        syn.nonassoc('LT')
        syn.production('expr', 'expr LT expr')
        syn.production('expr', 'INT')

        with self.assertRaises(GrammarConflictError) as cm:
            utils.compile_checked(syn,
                                  self.only_messages(
                                      r'nonassociative',
                                      'did not report the nonassociative use'))

        self.assertTrue(all(conflict.kind == 'nonassociative'
                            for conflict in cm.exception.conflicts))


class PrecedenceTestCase(utils.FailOnLogTestCase):

    def test_dangling_else(self):
        compiled = self.compile(if_else('IF', 'ELSE'))
        self.verify_parse_result(compiled, b"if if body else body ",
                                 ('if', ('if', 'body', 'else', 'body')))
        self.verify_parse_result(compiled, "if body else if body",
                                 ('if', 'body', 'else', ('if', 'body')))

    def test_precedence_and_associativity(self):
        for lalr in (False, True):
            compiled = self.compile(grammars.arithmetic(), lalr=lalr)
            self.verify_parse_result(compiled, "1+2*3",
                                     ('+', 1, ('*', 2, 3)))
            self.verify_parse_result(compiled, "1*2+3",
                                     ('+', ('*', 1, 2), 3))
            self.verify_parse_result(compiled, "1-2-3",
                                     ('-', ('-', 1, 2), 3))
            self.verify_parse_result(compiled, "2^3^2",
                                     ('^', 2, ('^', 3, 2)))
            self.verify_parse_result(compiled, "2*3^2",
                                     ('*', 2, ('^', 3, 2)))

    def test_explicit_precedence(self):
        syn = grammars.arithmetic()
        syn.right('UMINUS')
        syn.production('expr', 'MINUS expr', lambda m, e: ('neg', e),
                       prec='UMINUS')
        compiled = self.compile(syn)

        self.verify_parse_result(compiled, "-1*2", ('*', ('neg', 1), 2))
        self.verify_parse_result(compiled, "1--2", ('-', 1, ('neg', 2)))
        self.verify_parse_result(compiled, "-2^2", ('^', ('neg', 2), 2))

    def test_undefined_precedence(self):
        syn = grammars.arithmetic()
        syn.production('expr', 'MINUS expr', prec='UMINUS')
        with self.assertRaisesRegex(DefinitionError,
                                    r'precedence UMINUS used in .* undefined'):
            self.compile(syn)

    def test_duplicate_precedence(self):
        syn = Syntax()
        syn.left('PLUS')
        with self.assertRaises(DefinitionError):
            syn.right('PLUS')


def lr1_not_lalr1():
    syn = Syntax()
    for name in 'abcde':
        syn.keyword(name, name)

    syn.production('S', 'a A d', lambda *args: 'aAd')
    syn.production('S', 'b B d', lambda *args: 'bBd')
    syn.production('S', 'a B e', lambda *args: 'aBe')
    syn.production('S', 'b A e', lambda *args: 'bAe')
    syn.production('A', 'c')
    syn.production('B', 'c')
    return syn


class ConstructionTestCase(utils.FailOnLogTestCase):

    def test_lr1_only_grammar(self):
        compiled = self.compile(lr1_not_lalr1())
        for source, result in [("acd", 'aAd'), ("bcd", 'bBd'),
                               ("ace", 'aBe'), ("bce", 'bAe')]:
            self.verify_parse_result(compiled, source, result)

        logger = utils.unique_logger()
        logger.propagate = False
        logger.addHandler(logging.NullHandler())
        with self.assertRaises(GrammarConflictError) as cm:
            compile(lr1_not_lalr1(), logger, lalr=True)

        self.assertTrue(all(conflict.kind == 'reduce/reduce'
                            for conflict in cm.exception.conflicts))

    def test_lalr_is_smaller(self):
        lr1 = self.compile(grammars.simpl())
        lalr = self.compile(grammars.simpl(), lalr=True)
        self.assertLess(len(lalr.parse_table), len(lr1.parse_table))

        source = "let x = 1 in if x <= 2 then x * 3 else 4"
        self.assertEqual(lalr.parse(source), lr1.parse(source))
