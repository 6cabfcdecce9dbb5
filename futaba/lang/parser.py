"""Single-pass parser for Futaba. There is no syntax tree: the parser resolves names as it reads them and builds
Values directly, so a parsed sentence is ready to be applied to a continuation. Lambda bodies nest on an explicit
stack of Sentences rather than on the Python stack.

Grammar can be loosely defined as follows:

```
<sentence> ::= <term>* "."                  ; terms associate by left: a b c d. = (((a b) c) d)
             | <term>* "," <sentence>       ; the rest of the sentence is the last argument: a b, c d. = (a b) (c d)
<term>     ::= <integer> | <lambda> | <name>
<lambda>   ::= "`" <name> <sentence>        ; the body is a whole sentence, with its own "."
<integer>  ::= <digit>+
<name>     ::= <graphic> (<graphic> except "." and ",")*

<comment>  ::= ";" <char>* <newline>        ; only where a term could start
```

An empty sentence is nil.
"""

from futaba.lang.environment import register, resolve
from futaba.lang.error import UnrecognizedSymbolError, UnterminatedSentenceError
from futaba.lang.library import wrap
from futaba.lang.source import (COMMENT_HEAD, EOF, LAMBDA_HEAD, SENTENCE_BREAK, SENTENCE_END, is_digit, is_graphic)
from futaba.pure.value import Integer, Lambda, Parameter, make_call, make_identity


def is_name_char(char):
    """Whether char may continue a name."""
    return is_graphic(char) and char not in (SENTENCE_END, SENTENCE_BREAK)


def aggregate(result, item):
    """Left-folds item into the sentence built so far."""
    return item if result is None else make_call(result, item)


class Sentence:
    """A sentence being parsed: the terms read so far and the environment they are resolved in. parameter is set
    when the sentence is the body of a lambda.
    """

    def __init__(self, environment, parameter=None):
        self.environment = environment
        self.parameter = parameter
        self.pending = []  # heads interrupted by ",", waiting for the rest as their last argument
        self.result = None

    def add(self, item):
        self.result = aggregate(self.result, item)

    def split(self):
        """Starts the last argument of the terms read so far."""
        self.pending.append(self.result)
        self.result = None

    def close(self):
        """Returns the finished sentence, or the Lambda it is the body of. An empty sentence is nil."""
        result = make_identity() if self.result is None else self.result
        for head in reversed(self.pending):
            result = aggregate(head, result)
        return result if self.parameter is None else Lambda(self.parameter, result)


class Parser:
    """Parses sentences from source, resolving names in environment (a Record chain). If error_handler is given, it
    receives warnings about integer literals that do not fit in 32 bits.
    """

    def __init__(self, source, environment=None, error_handler=None):
        self.source = source
        self.environment = environment
        self.error_handler = error_handler

    def parse_program(self):
        """Parses every sentence until end of input. Returns them in order."""
        sentences = []
        self.skip_blank()
        while not self.source.at_end:
            sentences.append(self.parse_sentence())
            self.skip_blank()
        return sentences

    def parse_sentence(self):
        """Parses one sentence, up to and including its ".", in the parser's environment."""
        return self._sentence(self.environment)

    def skip_blank(self):
        """Skips whitespace and comments."""
        self.source.skip_space()
        while self.source.peek() == COMMENT_HEAD:
            self.source.skip_line()
            self.source.skip_space()

    def _sentence(self, environment):
        # a lambda body is parsed as a nested Sentence on this stack, so nesting costs no Python stack
        sentences = [Sentence(environment)]

        while True:
            self.skip_blank()
            sentence = sentences[-1]
            char = self.source.peek()

            if char == SENTENCE_END:
                self.source.advance()
                value = sentences.pop().close()
                if not sentences:
                    return value
                sentences[-1].add(value)
            elif char == EOF:
                raise UnterminatedSentenceError(self.source.position)
            elif char == SENTENCE_BREAK:
                self.source.advance()
                sentence.split()
            elif char == LAMBDA_HEAD:
                sentences.append(self.parse_lambda_head(sentence.environment))
            else:
                sentence.add(self.parse_term(sentence.environment))

    def parse_term(self, environment):
        """Parses an integer or a name. Lambdas are handled by _sentence."""
        char = self.source.peek()
        if is_digit(char):
            return self.parse_integer()
        elif is_graphic(char):
            return self.parse_name(environment)
        raise UnrecognizedSymbolError(char, self.source.position)

    def read_name(self):
        """Reads a name. The first character is always taken, so the caller must check it."""
        start = self.source.current
        self.source.advance()
        while is_name_char(self.source.peek()):
            self.source.advance()
        return self.source.text[start:self.source.current]

    def parse_integer(self):
        position = self.source.position
        number = 0
        while is_digit(self.source.peek()):
            number = number * 10 + int(self.source.peek())
            self.source.advance()

        wrapped = wrap(number)
        if wrapped != number and self.error_handler is not None:
            self.error_handler.warn("integer literal {} wrapped to {}", (str(number), str(wrapped)), position=position)
        return make_identity(Integer(wrapped))

    def parse_name(self, environment):
        position = self.source.position
        return resolve(environment, self.read_name(), position)

    def parse_lambda_head(self, environment):
        """Parses "`" <name>. Returns the Sentence of the lambda body, with name bound to a fresh Parameter."""
        self.source.advance()

        char = self.source.peek()
        if char == EOF:
            raise UnterminatedSentenceError(self.source.position)
        elif not is_name_char(char):
            raise UnrecognizedSymbolError(char, self.source.position)

        parameter = Parameter(self.read_name())
        return Sentence(register(environment, parameter.name, parameter), parameter)
