import sys
import logging
import argparse
import importlib
import runpy

from . import __version__
from .core import GeneratorError
from .syntax import Syntax
from .compiler import compile
from .runtime.lexer import LexError, EOF
from .runtime.parser import ParseError

class CountingLogger(logging.getLoggerClass()):

    def __init__(self, name):
        """
        A logger that counts errors.

        `name` is passed on.
        """
        super().__init__(name)
        self.errors = 0

    def loggedErrors(self):
        """
        Return true if there were errors.
        """
        return bool(self.errors)

    def error(self, msg, *args, **kwargs):
        self.errors += 1
        super().error(msg, *args, **kwargs)


arg_parser = argparse.ArgumentParser(
    prog="lrgen",
    formatter_class=argparse.RawDescriptionHelpFormatter,
    description="A pure python LALR(1)/LR(1) parser generator and lexer generator.",
    epilog="""The description is given as MODULE:ATTR or PATH.py:ATTR, ATTR
names a Syntax object or a callable without arguments returning one.""")

arg_parser.add_argument('--version', action='version',
                        version='%(prog)s ' + __version__)

arg_parser.add_argument("-m", '--input-mode',
                        dest="alphabet",
                        choices=["bytes", "unicode"],
                        default="bytes",
                        help="Choose the alphabet of the lexer")

arg_parser.add_argument("-L", "--lalr",
                        dest="lalr",
                        action='store_true',
                        default=False,
                        help="Generate a LALR(1) parser instead of a LR(1) parser")

arg_parser.add_argument("-g", "--print-graph",
                        dest="graph",
                        action='store_true',
                        default=False,
                        help="Print the LR state graph to stdout")

arg_parser.add_argument("--print-lextable",
                        action='store_true',
                        default=False,
                        help="Print the lextable to stdout")

arg_parser.add_argument("--print-parsetable",
                        action='store_true',
                        default=False,
                        help="Print the parsetable to stdout")

arg_parser.add_argument("-f", "--fast",
                        dest="fast",
                        action='store_true',
                        default=False,
                        help="Fast run, omits the minimization of the lexer")

arg_parser.add_argument("-q", "--quiet",
                        dest="quiet",
                        action='store_true',
                        default=False,
                        help="Print less info")

arg_parser.add_argument("-T", "--trace",
                        dest="trace",
                        action='store_true',
                        default=False,
                        help="Log a trace of the parser states while parsing")

action = arg_parser.add_mutually_exclusive_group()

action.add_argument("--lex",
                    metavar="FILE",
                    default=None,
                    help="Print the tokens of FILE")

action.add_argument("--parse",
                    metavar="FILE",
                    default=None,
                    help="Parse FILE and print the result")

arg_parser.add_argument("description",
                        help="The lexer and parser description to process")


def load_description(reference):
    """
    Load the `Syntax` named by `reference`, MODULE:ATTR or
    PATH.py:ATTR.
    """
    location, sep, attr = reference.rpartition(':')
    if not sep or not location or not attr:
        raise GeneratorError("description must be given as MODULE:ATTR "
                             "or PATH.py:ATTR, not {}".format(reference))

    try:
        if location.endswith('.py'):
            namespace = runpy.run_path(location)
        else:
            namespace = vars(importlib.import_module(location))
    except (ImportError, OSError) as e:
        raise GeneratorError("cannot load {}: {}".format(location, e))

    try:
        syntax = namespace[attr]
    except KeyError:
        raise GeneratorError("{} has no attribute {}".format(location, attr))

    if not isinstance(syntax, Syntax) and callable(syntax):
        syntax = syntax()

    if not isinstance(syntax, Syntax):
        raise GeneratorError("{} is not a Syntax".format(reference))

    return syntax


def main(argv=None):
    args = arg_parser.parse_args(argv)

    # setup logging for error reporting
    logging.basicConfig(format="{msg}", style="{")
    logging.setLoggerClass(CountingLogger)
    logger = logging.getLogger('lrgen.main')
    # main may run more than once in a process
    logger.errors = 0
    logger.setLevel(logging.WARNING if args.quiet else logging.INFO)
    if args.trace:
        logger.setLevel(logging.DEBUG)

    try:
        syntax = load_description(args.description)

        compiled = compile(syntax, logger,
                           lalr=args.lalr,
                           alphabet=args.alphabet,
                           optimize=not args.fast,
                           print_graph=args.graph,
                           file=sys.stdout)

        if args.print_parsetable and compiled.parse_table is not None:
            compiled.parse_table.print(file=sys.stdout)

        if args.print_lextable and compiled.lextable is not None:
            compiled.lextable.print(file=sys.stdout)

        if args.lex is not None:
            with open(args.lex, "rb") as infile:
                tokens = list(compiled.lexer(infile, args.lex))
            for token in tokens:
                if token.kind == EOF:
                    break
                print(str(token.position), token.kind, repr(token.value),
                      file=sys.stdout)

        if args.parse is not None:
            with open(args.parse, "rb") as infile:
                lexer = compiled.lexer(infile, args.parse)
            result = compiled.parser(lexer, logger=logger,
                                     trace=args.trace).parse()
            print(repr(result), file=sys.stdout)

    except (GeneratorError, LexError, ParseError, OSError) as e:
        print("error:", e, file=sys.stderr)
        return 1

    return 1 if logger.loggedErrors() else 0


if __name__ == '__main__':
    sys.exit(main())
