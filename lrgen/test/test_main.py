import io
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr

from ..__main__ import main, load_description
from ..core import GeneratorError
from ..syntax import Syntax

AMBIGUOUS = """
from lrgen import Syntax

syntax = Syntax()
syntax.emit(r'[0-9]+', 'INT')
syntax.keyword('+', 'PLUS')
syntax.production('expr', 'expr PLUS expr')
syntax.production('expr', 'INT')
"""

class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.directory)

    def write(self, name, text):
        path = os.path.join(self.directory, name)
        with open(path, 'w') as outfile:
            outfile.write(text)
        return path

    def run_main(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = main(list(argv))
        return status, out.getvalue(), err.getvalue()

    def test_parse_file(self):
        source = self.write('input.txt', "1 + 2 * 3\n")
        status, out, err = self.run_main('-q', '--parse', source,
                                         'lrgen.test.grammars:arithmetic')
        self.assertEqual(status, 0)
        self.assertEqual(out.strip(), "('+', 1, ('*', 2, 3))")

    def test_lex_file(self):
        source = self.write('input.txt', "let x = 1 in x")
        status, out, err = self.run_main('-q', '-L', '--lex', source,
                                         'lrgen.test.grammars:simpl')
        self.assertEqual(status, 0)
        lines = out.splitlines()
        self.assertEqual(len(lines), 6)
        self.assertRegex(lines[0], r'LET')
        self.assertRegex(lines[3], r"INT 1$")

    def test_print_tables(self):
        status, out, err = self.run_main('-q', '-g', '--print-parsetable',
                                         '--print-lextable',
                                         'lrgen.test.grammars:parens')
        self.assertEqual(status, 0)
        self.assertIn("state: 0", out)
        self.assertIn("(0) $START <- S $EOF", out)
        self.assertIn("start: 0", out)

    def test_parse_error(self):
        source = self.write('input.txt', "1 +")
        status, out, err = self.run_main('-q', '--parse', source,
                                         'lrgen.test.grammars:arithmetic')
        self.assertEqual(status, 1)
        self.assertRegex(err, r'unexpected end of input')

    def test_undecodable_input(self):
        source = os.path.join(self.directory, 'input.txt')
        with open(source, 'wb') as outfile:
            outfile.write(b"1 + \xff")
        status, out, err = self.run_main('-q', '-m', 'unicode',
                                         '--parse', source,
                                         'lrgen.test.grammars:arithmetic')
        self.assertEqual(status, 1)
        self.assertRegex(err, r'invalid utf-8 input')

    def test_conflicts(self):
        path = self.write('ambiguous.py', AMBIGUOUS)
        status, out, err = self.run_main('-q', path + ':syntax')
        self.assertEqual(status, 1)
        self.assertRegex(err, r'shift/reduce')

    def test_bad_description(self):
        status, out, err = self.run_main('-q', 'lrgen.test.grammars:nothing')
        self.assertEqual(status, 1)
        self.assertRegex(err, r'has no attribute nothing')

        status, out, err = self.run_main('-q', 'lrgen.test.grammars')
        self.assertEqual(status, 1)

    def test_load_description(self):
        self.assertIsInstance(load_description('lrgen.test.grammars:simpl'),
                              Syntax)
        path = self.write('ambiguous.py', AMBIGUOUS)
        self.assertIsInstance(load_description(path + ':syntax'), Syntax)

        with self.assertRaises(GeneratorError):
            load_description('lrgen.test.grammars:KEYWORDS')
