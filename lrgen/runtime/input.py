
class Position(object):
    def __init__(self, file, line0, col0, line1, col1):
        self.file  = file
        self.line0 = line0
        self.col0  = col0
        self.line1 = line1
        self.col1  = col1

    def add(self, oth):
        """
        Return the position spanning from the start of this position
        to the end of `oth`.
        """
        return Position(self.file, self.line0, self.col0, oth.line1, oth.col1)

    def __eq__(self, other):
        return isinstance(other, Position) and \
            (self.file, self.line0, self.col0, self.line1, self.col1) == \
            (other.file, other.line0, other.col0, other.line1, other.col1)

    def __hash__(self):
        return hash((self.file, self.line0, self.col0, self.line1, self.col1))

    def __repr__(self):
        return "Position({!r}, {}, {}, {}, {})".format(
            self.file, self.line0, self.col0, self.line1, self.col1)

    def __str__(self):
        return "{:s} Line {:d}:{:d} - {:d}:{:d}".format(
            self.file, self.line0, self.col0, self.line1, self.col1)


class EndOfFile(Exception):
    pass


class InputBuffer(object):

    def __init__(self, string, filename='<string>', encoding='latin-1'):
        """
        An input buffer holding the complete input. Byte strings are
        decoded with `encoding`, a file object is read completely.
        """
        if hasattr(string, 'read'):
            string = string.read()

        if isinstance(string, (bytes, bytearray)):
            string = bytes(string).decode(encoding)

        self._buffer = string
        self._size = len(string)
        self._filename = filename
        self._mapping = ord
        self.reset()

    def reset(self):
        """
        Go back to the start of the input.
        """
        self._root = 0
        self._pos = 0
        self._mark = 0

        self._line = 1
        self._start_of_line = 0

    def set_mapping(self, mapping):
        """
        Set the mapping of input code points to DFA symbols.
        """
        self._mapping = lambda char: mapping(ord(char))

    def step(self):
        """
        Step forward one input character and return its mapped symbol.
        Raises `EndOfFile` when there are no further characters.
        """
        if self._pos == self._size:
            raise EndOfFile
        cur = self._mapping(self._buffer[self._pos])
        self._pos += 1
        return cur

    def mark(self):
        """
        Remember this position as the latest possible match.
        """
        self._mark = self._pos

    def not_stepped(self):
        """
        Return *True* if the complete input is consumed.
        """
        return self._root == self._size

    def current(self):
        """
        Return the character at the start of the current match.
        """
        return self._buffer[self._root:self._root + 1]

    def pos(self):
        """
        Return the current position.
        """
        return Position(self._filename,
                        self._line,
                        self._root - self._start_of_line,
                        self._line,
                        self._root - self._start_of_line)

    def extract(self):
        """
        Extract the text up to the mark and perform line-counting.
        Returns the tuple `text, position`.
        """
        text = self._buffer[self._root:self._mark]

        # calculate line numbers
        line0 = self._line
        sol0 = self._start_of_line
        self._line += text.count('\n')
        sol1 = text.rfind('\n')
        if sol1 != -1:
            self._start_of_line = self._root + sol1 + 1
        pos = Position(self._filename,
                       line0,
                       self._root - sol0,
                       self._line,
                       self._mark - self._start_of_line)

        # reset buffer position markers
        self._pos = self._mark
        self._root = self._mark

        return text, pos

