"""Uses the Futaba parser and evaluator to run .ft files or to run in command-line mode. Also uses the error handling
context manager, which turns every Futaba error into a diagnostic and its exit code. Called from the futaba script.
"""

import argparse

from futaba.lang.error import ErrorHandler, NoArgumentError
from futaba.lang.session import Session
from futaba.lang.shell import Shell


def main(argv=None):
    """Runs the Futaba interpreter. argv defaults to the process arguments."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="futaba", description="Interpreter for the Futaba language.")
        parser.add_argument("file", help="file to interpret and run", nargs="?")
        parser.add_argument("-i", "--interactive", help="go to command-line mode", action="store_true")
        parser.add_argument("-t", "--tree", help="print the value tree of every sentence instead of running it",
                            action="store_true")
        args = parser.parse_args(argv)

        if args.interactive:
            Shell(Session(error_handler, cmd_line=True)).cmdloop()
            return

        if args.file is None:
            raise NoArgumentError()

        sess = Session(error_handler, args.file)
        if args.tree:
            for sentence in sess.to_exec:
                print(sentence.display())
        else:
            sess.run()
