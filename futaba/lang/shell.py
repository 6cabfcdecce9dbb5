"""Handles interactive/command-line mode for the Futaba interpreter. Uses cmd as backend."""

import cmd

from futaba.lang.environment import names
from futaba.lang.error import UnterminatedSentenceError
from futaba.pure.value import Halt


class Shell(cmd.Cmd):
    """Futaba interpreter shell."""
    intro = "Futaba interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for sentences continued on the next line
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    COMMANDS = ["tree", "names", "help", "exit", "EOF"]

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess
        self._tmp_text = ""

    def parseline(self, line):
        """Only whole-word commands are dispatched, so sentences starting with "?" or "!" reach default."""
        line = line.strip()
        command, __, arg = line.partition(" ")
        if command in Shell.COMMANDS:
            return command, arg.strip(), line
        return None, None, line

    def default(self, line):
        """Runs arbitrary Futaba sentences. A sentence without its "." continues on the next line."""
        text = self._tmp_text + line + "\n"

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            try:
                self.sess.add(text)
            except UnterminatedSentenceError:
                self._tmp_text = text
                self.prompt = self.secondary_prompt
                return

            self.report(self.sess.run())

        self._tmp_text = ""
        self.prompt = self._tmp_prompt

    def report(self, results):
        """Prints the value each sentence delivered to end."""
        while results:
            result = results.pop(0)
            print(result.value if isinstance(result, Halt) else repr(result))

    def do_tree(self, arg):
        """Shows the value tree of sentences without running them."""
        with self.sess.error_handler:
            for sentence in self.sess.parse(arg):
                print(sentence.display())

    def do_names(self, arg):
        """Lists every name in the environment."""
        print(" ".join(names(self.sess.environment)))

    def do_help(self, arg):
        """Prints a short introduction to Futaba sentences instead of the list of commands."""
        print("Welcome to the Futaba interpreter!\n\n"
              "Every value in Futaba is applied to the next one, and a sentence ends with '.'. \n"
              "Results are passed on to a continuation: try '+ 2 3.', then '+ 1 64 put.'. \n"
              "'`x ...' is a lambda with parameter x, and ', ...' makes the rest of the \n"
              "sentence a single argument. 'tree SENTENCE' shows how a sentence is parsed, \n"
              "'names' lists the built-in operators.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
