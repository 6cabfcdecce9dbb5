"""Character-level cursor over Futaba source text, tracking line and column for diagnostics.

Syntax characters of the language are defined here as well.
"""

from futaba.lang.error import Position


SENTENCE_END = "."
SENTENCE_BREAK = ","
LAMBDA_HEAD = "`"
COMMENT_HEAD = ";"

EOF = ""  # returned by peek at end of input


def is_graphic(char):
    """Whether char is a printable, non-space ASCII character."""
    return len(char) == 1 and "!" <= char <= "~"


def is_digit(char):
    return len(char) == 1 and "0" <= char <= "9"


def is_space(char):
    return char in (" ", "\t", "\n", "\r", "\v", "\f")


class Source:
    """Source text of one file (or one shell input) with a cursor. The text itself is never modified."""

    def __init__(self, text, path="<in>"):
        self.text = text
        self.path = path
        self.current = 0
        self.line = 1
        self.column = 1

    @property
    def at_end(self):
        return self.current >= len(self.text)

    @property
    def position(self):
        """Position of the character under the cursor."""
        return Position(self.path, self.line, self.column)

    def peek(self):
        """Returns the character under the cursor, or EOF."""
        return EOF if self.at_end else self.text[self.current]

    def advance(self):
        """Moves the cursor one character ahead, if not at end. Returns whether there is input left."""
        if not self.at_end:
            if self.text[self.current] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.current += 1
        return not self.at_end

    def skip_space(self):
        while is_space(self.peek()):
            self.advance()

    def skip_line(self):
        """Skips to the end of the current line (the newline itself is left under the cursor) or end of input."""
        while self.peek() not in ("\n", EOF):
            self.advance()

    def __repr__(self):
        return f"Source({self.path!r}, {self.position})"
