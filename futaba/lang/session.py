"""Session control for Futaba. Loads a source file, builds the initial environment out of the native library, parses
sentences and runs them, either from a file or line by line in command-line mode.
"""

from futaba.lang.error import CannotOpenFileError
from futaba.lang.library import Library
from futaba.lang.parser import Parser
from futaba.lang.source import Source
from futaba.pure.value import End, apply


class Session:
    """Governs a Futaba session: the environment every sentence is parsed in, the sentences waiting to run, and the
    results of those that have run.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False, output=None):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.library = Library(output, error_handler)
        self.environment = self.library.environment()

        self.to_exec = []  # parsed sentences, in order
        self.results = []  # value each sentence finished with, usually a Halt

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    text = file.read()
            except (OSError, UnicodeDecodeError):
                raise CannotOpenFileError(path)
            self.add(text)

    def parse(self, text):
        """Returns every sentence of text, parsed in the session's environment."""
        self.error_handler.register_source(self.path, text)
        return Parser(Source(text, self.path), self.environment, self.error_handler).parse_program()

    def add(self, text):
        """Parses text and queues its sentences. Evaluation is delayed until run is called, and if any sentence of
        text fails to parse, none of them is queued.
        """
        self.to_exec.extend(self.parse(text))

    def run(self):
        """Applies every queued sentence to end, in order. Returns the list of all results so far."""
        try:
            while self.to_exec:
                sentence = self.to_exec.pop(0)
                self.results.append(apply(sentence, End()))
        finally:
            self.to_exec.clear()  # sentences left behind by an error are dropped
            self.library.output.flush()
        return self.results

    def pop(self):
        return self.results.pop()
