"""Native primitive library of Futaba: arithmetic, comparison, the conditional and put, each a curried Operator.

```
+ a b k    ->  k applied to a + b      ; likewise - * /
< a b k    ->  k applied to a < b      ; likewise =, boolean results
? c t e    ->  t if c is true else e   ; the chosen branch is returned unevaluated
put c      ->  writes byte c, then nil
nil        ->  identity value with empty payload
```

Integers are signed 32-bit: results that do not fit wrap around (two's complement) and a warning is reported.
Division truncates toward zero.
"""

import operator as op
import sys

from futaba.lang.environment import register
from futaba.lang.error import DivisionByZeroError, TypeMismatchError
from futaba.pure.value import Boolean, Identity, Integer, Operator, Primitive, TailCall, make_identity


def wrap(number):
    """Wraps number to a signed 32-bit integer."""
    number &= 0xFFFFFFFF
    return number - 0x100000000 if number & 0x80000000 else number


def truncate_divide(dividend, divisor):
    """Integer division rounding toward zero."""
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend < 0) == (divisor < 0) else -quotient


def integer(name, value):
    """Returns the int carried by value, an identity value with an Integer payload. name is the operator that needs
    it, for the error message.
    """
    if isinstance(value, Identity) and isinstance(value.payload, Integer):
        return value.payload.value
    raise TypeMismatchError(name, "an integer", value)


def boolean(name, value):
    """Returns the bool carried by value, an identity value with a Boolean payload."""
    if isinstance(value, Identity) and isinstance(value.payload, Boolean):
        return value.payload.value
    raise TypeMismatchError(name, "a boolean", value)


class Library:
    """Native operators, bound to the output sink written by put and the error handler that receives warnings."""
    ARITHMETIC = {"+": op.add, "-": op.sub, "*": op.mul, "/": truncate_divide}
    COMPARISON = {"<": op.lt, "=": op.eq}
    NAMES = ["put", "+", "-", "*", "/", "<", "=", "?"]  # registration order, nil comes last

    def __init__(self, output=None, error_handler=None):
        self._output = output  # binary stream, defaults to standard output
        self.error_handler = error_handler
        self.operators = {}

        self.define("put", 1, self.put)
        for name, func in Library.ARITHMETIC.items():
            self.define(name, 3, self.arithmetic(name, func))
        for name, func in Library.COMPARISON.items():
            self.define(name, 3, self.comparison(name, func))
        self.define("?", 3, self.conditional)

    @property
    def output(self):
        return self._output if self._output is not None else sys.stdout.buffer

    def define(self, name, arity, reduce):
        self.operators[name] = Operator(name, arity, reduce)

    def environment(self, chain=None):
        """Returns chain extended with every native operator and nil."""
        for name in Library.NAMES:
            chain = register(chain, name, Primitive(self.operators[name]))
        return register(chain, "nil", make_identity())

    def checked(self, name, result):
        """Wraps result to 32 bits, warning if it did not fit."""
        wrapped = wrap(result)
        if wrapped != result and self.error_handler is not None:
            self.error_handler.warn("integer overflow in '{}': {} wrapped to {}", (name, str(result), str(wrapped)))
        return wrapped

    def arithmetic(self, name, func):
        def reduce(left, right, continuation):
            left, right = integer(name, left), integer(name, right)
            if name == "/" and right == 0:
                raise DivisionByZeroError(name)
            result = self.checked(name, func(left, right))
            return TailCall(continuation, make_identity(Integer(result)))

        return reduce

    def comparison(self, name, func):
        def reduce(left, right, continuation):
            result = func(integer(name, left), integer(name, right))
            return TailCall(continuation, make_identity(Boolean(result)))

        return reduce

    @staticmethod
    def conditional(condition, then_branch, else_branch):
        """Returns the branch chosen by condition without evaluating either."""
        return then_branch if boolean("?", condition) else else_branch

    def put(self, value):
        """Writes the low byte of value's integer to the output sink."""
        self.output.write(bytes([integer("put", value) & 0xFF]))
        return make_identity()
