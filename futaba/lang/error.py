"""Error handling for the Futaba interpreter. Every failure in Futaba is fatal, so errors are raised as FutabaErrors
from the scanner, parser, environment and evaluator, and only ErrorHandler turns them into a diagnostic and a process
exit code. If another type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import enum
import sys
from typing import NamedTuple

from termcolor import colored


class ExitCode(enum.IntEnum):
    """Process exit status, one per fatal condition."""
    SUCCESS = 0
    UNRESOLVED_NAME = 1
    CANNOT_OPEN_FILE = 2
    NO_ARGV = 3
    UNRECOGNIZED_SYMBOL = 4
    UNCOMPLETED_SENTENCE = 5
    RECURSIVE_SELF = 6
    TYPE_MISMATCH = 7
    DIVISION_BY_ZERO = 8
    INTERNAL = 9


class Position(NamedTuple):
    """Location of a character in a source file. line and column start at 1."""
    path: str
    line: int
    column: int

    def __str__(self):
        return f"{self.path}:{self.line}:{self.column}"


class FutabaError(Exception):
    """Templates an error message so that it can be used to raise a Futaba error. msg is a str.format template and
    exprs are the snippets filled into it, which are bolded when the error is displayed.
    """
    exit_code = ExitCode.INTERNAL

    def __init__(self, msg, exprs=None, position=None, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        super().__init__(msg.format(*exprs))
        self.template = msg
        self.exprs = exprs
        self.position = position  # None for errors raised while running
        self.internal = internal

    @property
    def msg(self):
        """Message with expr snippets colored."""
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))


class UnresolvedNameError(FutabaError):
    exit_code = ExitCode.UNRESOLVED_NAME

    def __init__(self, name, position=None):
        super().__init__("unresolved name \"{}\"", name, position)
        self.name = name


class CannotOpenFileError(FutabaError):
    exit_code = ExitCode.CANNOT_OPEN_FILE

    def __init__(self, path):
        super().__init__("cannot open file \"{}\"", str(path))
        self.path = path


class NoArgumentError(FutabaError):
    exit_code = ExitCode.NO_ARGV

    def __init__(self):
        super().__init__("please specify source file by command line argument")


class UnrecognizedSymbolError(FutabaError):
    exit_code = ExitCode.UNRECOGNIZED_SYMBOL

    def __init__(self, symbol, position=None):
        super().__init__("unrecognized symbol '{}'", f"0x{ord(symbol):x}", position)
        self.symbol = symbol


class UnterminatedSentenceError(FutabaError):
    exit_code = ExitCode.UNCOMPLETED_SENTENCE

    def __init__(self, position=None):
        super().__init__("uncompleted sentence, expected '.' before end of input", position=position)


class SelfRecursionError(FutabaError):
    """Raised when an identity value is applied to another identity value, which would forward forever."""
    exit_code = ExitCode.RECURSIVE_SELF

    def __init__(self, caller, callee):
        dump = (f"recursive `self` calling between two pieces\n"
                f"  piece 1: {caller!r} at 0x{id(caller):x} payload at 0x{id(caller.payload):x}\n"
                f"  piece 2: {callee!r} at 0x{id(callee):x} payload at 0x{id(callee.payload):x}")
        super().__init__("{}", dump)
        self.caller = caller
        self.callee = callee


class TypeMismatchError(FutabaError):
    exit_code = ExitCode.TYPE_MISMATCH

    def __init__(self, operator, expected, value):
        super().__init__("'{}' expected {}, got {}", (operator, expected, repr(value)))
        self.operator = operator
        self.value = value


class DivisionByZeroError(FutabaError):
    exit_code = ExitCode.DIVISION_BY_ZERO

    def __init__(self, operator):
        super().__init__("division by zero in '{}'", operator)
        self.operator = operator


class ErrorHandler:
    """Context manager that turns FutabaErrors (and stray Python errors) into colored diagnostics on stderr. When fatal,
    the process exits with the error's exit code; otherwise the error is reported and suppressed.
    """
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream   # None means sys.stderr at time of printing
        self.path = None       # file currently being parsed/run
        self.sources = {}      # path: source text, used for diagnosis

    def register_source(self, path, text):
        """Registers text of path so parse errors can show the offending line. Also makes path the current file."""
        self.path = path
        self.sources[path] = text

    def _print(self, text):
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def _header(self, error):
        if error.position is not None:
            return colored(f"{error.position}: ", attrs=["bold"])
        if self.path is not None:
            return colored(f"{self.path}: ", attrs=["bold"])
        return ""

    def diagnose(self, error, warning=False):
        """Returns the source line of error.position with a caret under the offending column, or None if the line is
        not known.
        """
        position = error.position
        text = self.sources.get(position.path) if position is not None else None
        if text is None:
            return None

        lines = text.split("\n")
        if not 0 < position.line <= len(lines):
            return None

        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        line = lines[position.line - 1].expandtabs(1)
        caret = colored("^", color, attrs=["bold"])
        return "  " + line + "\n  " + " " * (position.column - 1) + caret

    def warn(self, *args, **kwargs):
        """Generates and prints a warning based on args, which are passed to FutabaError. Never stops execution."""
        error = FutabaError(*args, **kwargs)

        warning_msg = self._header(error)
        warning_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        self._print(warning_msg)

        diagnosis = self.diagnose(error, warning=True)
        if diagnosis:
            self._print(diagnosis)

    def throw(self, error):
        """Prints error, a FutabaError, and exits with its exit code if this handler is fatal."""
        error_msg = self._header(error)
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        self._print(error_msg)

        diagnosis = self.diagnose(error)
        if diagnosis:
            self._print(diagnosis)

        if self.fatal:
            sys.exit(int(error.exit_code))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(FutabaError("keyboard interrupt", internal=True))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(FutabaError("maximum recursion depth exceeded, nesting is too deep", internal=True))
        elif issubclass(exc_type, FutabaError):
            self.throw(exc_val)
        else:
            self.throw(FutabaError("unknown error: '{}: {}'", (exc_type.__name__, str(exc_val)), internal=True))
            do_exit = True

        return not do_exit
