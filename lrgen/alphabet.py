"""
Input alphabets, character sets and the equivalence classes of input
symbols the lexer tables are built over.

Characters are handled as code points throughout. Character sets are
unbounded (up to the largest unicode scalar value), they are clipped to
the alphabet when the symbol classes are constructed.
"""

from bisect import bisect_right
from abc import ABCMeta, abstractmethod

from .core import Singleton, DefinitionError

MAX_CODE = 0x10FFFF


class Epsilon(metaclass=Singleton):
    """
    The label of epsilon transitions in the NFA.
    """

    def __str__(self):
        return "Epsilon()"


class Alphabet(metaclass=ABCMeta):

    @abstractmethod
    def __len__(self):
        return 0

    @property
    @abstractmethod
    def name(self):
        raise NotImplementedError

    @property
    @abstractmethod
    def encoding(self):
        """
        The encoding used to decode byte input for this alphabet.
        """
        raise NotImplementedError

    def __contains__(self, code):
        return 0 <= code < len(self)


class ByteAlphabet(Alphabet):

    def __len__(self):
        return 256

    @property
    def name(self):
        return 'bytes'

    @property
    def encoding(self):
        # latin-1 maps every byte to the code point of the same value
        return 'latin-1'


class UnicodeAlphabet(Alphabet):

    def __len__(self):
        return MAX_CODE + 1

    @property
    def name(self):
        return 'unicode'

    @property
    def encoding(self):
        return 'utf-8'


ALPHABETS = {
    'bytes': ByteAlphabet,
    'unicode': UnicodeAlphabet,
    }


def get_alphabet(alphabet):
    """
    Return the `Alphabet` named by `alphabet`. Alphabet instances are
    passed through.
    """
    if isinstance(alphabet, Alphabet):
        return alphabet

    try:
        return ALPHABETS[alphabet]()
    except KeyError:
        raise DefinitionError("unknown alphabet {}".format(alphabet))


def _code(char):
    if isinstance(char, str):
        return ord(char)
    return char


class CharacterSet(object):
    """
    An immutable set of code points stored as sorted, disjoint,
    non-adjacent inclusive intervals.
    """

    @classmethod
    def from_string(cls, string):
        return cls((ord(c), ord(c)) for c in string)

    @classmethod
    def range(cls, from_, to):
        return cls([(_code(from_), _code(to))])

    @classmethod
    def all(cls):
        return cls([(0, MAX_CODE)])

    def __init__(self, intervals=()):
        self._intervals = self._normalize(intervals)
        self._starts = [lo for lo, hi in self._intervals]

    @staticmethod
    def _normalize(intervals):
        result = []
        for lo, hi in sorted(intervals):
            if lo > hi:
                continue
            if result and lo <= result[-1][1] + 1:
                if hi > result[-1][1]:
                    result[-1] = (result[-1][0], hi)
            else:
                result.append((lo, hi))
        return tuple(result)

    def __iter__(self):
        return iter(self._intervals)

    def __eq__(self, other):
        return isinstance(other, CharacterSet) and \
            self._intervals == other._intervals

    def __hash__(self):
        return hash(self._intervals)

    def __str__(self):
        parts = []
        for lo, hi in self._intervals:
            if lo == hi:
                parts.append(repr(chr(lo)))
            else:
                parts.append("{}-{}".format(repr(chr(lo)), repr(chr(hi))))
        return "CharacterSet([{}])".format(", ".join(parts))

    def __contains__(self, char):
        code = _code(char)
        index = bisect_right(self._starts, code) - 1
        return index >= 0 and code <= self._intervals[index][1]

    def __or__(self, other):
        return CharacterSet(self._intervals + other._intervals)

    def __invert__(self):
        result = []
        prev = 0
        for lo, hi in self._intervals:
            if lo > prev:
                result.append((prev, lo - 1))
            prev = hi + 1
        if prev <= MAX_CODE:
            result.append((prev, MAX_CODE))
        return CharacterSet(result)

    def __and__(self, other):
        return ~(~self | ~other)

    def __sub__(self, other):
        return self & ~other

    @property
    def empty(self):
        return not self._intervals

    @property
    def single(self):
        """
        The only character in the set, or None if the set does not
        contain exactly one character.
        """
        if len(self._intervals) == 1:
            lo, hi = self._intervals[0]
            if lo == hi:
                return chr(lo)
        return None


class SymbolClasses(object):

    def __init__(self, alphabet, charsets):
        """
        Partition `alphabet` into classes of code points, that none of
        the character sets in `charsets` distinguish. The classes are
        the input symbols of the lexer DFA.
        """
        self._alphabet = alphabet
        size = len(alphabet)

        # dict.fromkeys keeps the order deterministic
        charsets = list(dict.fromkeys(charsets))

        bounds = set([0])
        for charset in charsets:
            for lo, hi in charset:
                if lo < size:
                    bounds.add(lo)
                if hi + 1 < size:
                    bounds.add(hi + 1)

        self._starts = sorted(bounds)
        self._segment_class = []

        signatures = {}
        for start in self._starts:
            signature = tuple(start in charset for charset in charsets)
            if signature not in signatures:
                signatures[signature] = len(signatures)
            self._segment_class.append(signatures[signature])

        self._count = len(signatures)

    def __len__(self):
        return self._count

    @property
    def alphabet(self):
        return self._alphabet

    def classify(self, code):
        """
        Return the symbol class of the code point `code` or None if
        `code` is not part of the alphabet.
        """
        if not 0 <= code < len(self._alphabet):
            return None
        return self._segment_class[bisect_right(self._starts, code) - 1]

    def classes_of(self, charset):
        """
        Return the set of symbol classes making up `charset`.
        """
        size = len(self._alphabet)
        result = set()
        for lo, hi in charset:
            if lo >= size:
                break
            hi = min(hi, size - 1)
            first = bisect_right(self._starts, lo) - 1
            last = bisect_right(self._starts, hi) - 1
            for index in range(first, last + 1):
                result.add(self._segment_class[index])
        return result

    def charset(self, cls):
        """
        Return the `CharacterSet` of all code points in class `cls`.
        """
        ends = self._starts[1:] + [len(self._alphabet)]
        return CharacterSet((start, end - 1)
                            for start, end, segment_class
                            in zip(self._starts, ends, self._segment_class)
                            if segment_class == cls)
