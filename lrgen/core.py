
class CantHappen(Exception):
    """
    Exception raised in code branches that should never be reached.
    """
    def __init__(self):
        super().__init__("""It seems you just found a bug

Please report this.""")


class GeneratorError(Exception):
    """
    Base class of all errors raised while generating the lexer or
    parser tables. When one of these is raised no usable table exists.
    """
    pass


class DefinitionError(GeneratorError):
    """
    The description is inconsistent: undefined or cyclic named
    patterns, undefined symbols, conflicting token declarations or a
    lexer without rules.
    """
    pass


class Singleton(type):

    def __new__(cls, name, bases, dict):
        dict['_instance_'] = None
        return super().__new__(cls, name, bases, dict)

    def __call__(cls):
        """
        Retrieve the singleton instance, creating it on first use.
        """
        if cls._instance_ is None:
            cls._instance_ = super().__call__()

        return cls._instance_
