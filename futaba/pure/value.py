"""Values and the apply protocol: the whole evaluation core of Futaba.

Everything computable in Futaba is a Value, and the only way to run anything is to apply one Value to another.
There is no "evaluate expression, return result" step: a result is delivered by applying a continuation to it.

```
Identity(p)          applied to k  ->  k applied to Identity(p)            ; constants, booleans and nil
DeferredCall(f, x)   applied to k  ->  (f applied to x) applied to k       ; what the parser builds
Lambda(p, body)      applied to x  ->  body with p replaced by x           ; unevaluated
Primitive(op, args)  applied to x  ->  Primitive(op, args + x), or op's result once saturated
End                  applied to x  ->  Halt(x)                             ; terminal continuation
```

apply is a trampoline. Values never apply each other directly: a step in tail position is returned as a TailCall,
and a DeferredCall returns a NestedCall whose continuation apply keeps in a list until the nested call has a result.
Evaluation uses constant Python stack no matter how long a program runs or how deeply its calls nest.
"""

from abc import abstractmethod, ABC
from dataclasses import dataclass
from typing import NamedTuple

from futaba.lang.error import FutabaError, SelfRecursionError


@dataclass(frozen=True)
class Integer:
    """Integer payload of an identity value."""
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Boolean:
    """Boolean payload of an identity value, only produced by comparison operators."""
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


class TailCall(NamedTuple):
    """A pending apply(caller, argument), handed back to the trampoline in apply."""
    caller: "Value"
    argument: "Value"


class NestedCall(NamedTuple):
    """A pending apply(caller, argument) whose result is then applied to continuation."""
    caller: "Value"
    argument: "Value"
    continuation: "Value"


def apply(caller, argument):
    """Applies caller to argument and returns the resulting Value. This is the sole evaluation primitive."""
    pending = []  # continuations waiting for the result of a nested call, innermost last
    result = caller.invoke(argument)
    while True:
        if isinstance(result, TailCall):
            result = result.caller.invoke(result.argument)
        elif isinstance(result, NestedCall):
            pending.append(result.continuation)
            result = result.caller.invoke(result.argument)
        elif pending:
            result = result.invoke(pending.pop())
        else:
            return result


class Value(ABC):
    """Superclass of everything computable in Futaba."""
    free = frozenset()  # Parameters occurring unbound in self

    @abstractmethod
    def invoke(self, argument):
        """This method should perform one reduction step of applying self to argument, returning the resulting Value,
        a TailCall to continue with, or a NestedCall whose result is needed first. Use apply instead of calling this
        directly.
        """

    def substitute(self, parameter, value):
        """Returns self with every free occurrence of parameter replaced by value. Does not modify self: only the
        values on a path to an occurrence are rebuilt, and if there is none, self is returned as is.

        Walks the tree with an explicit stack, so the depth of self costs no Python stack.
        """
        if parameter not in self.free:
            return self

        done = {id(parameter): value}  # id(node): node after substitution
        stack = [self]
        while stack:
            node = stack[-1]
            waiting = [child for child in node.nodes if parameter in child.free and id(child) not in done]
            if waiting:
                stack.extend(waiting)
                continue

            stack.pop()
            if id(node) not in done:  # shared children may be pushed more than once
                done[id(node)] = node.rebuild([done.get(id(child), child) for child in node.nodes])
        return done[id(self)]

    def rebuild(self, nodes):
        """Returns a copy of self with nodes as its children. Leaves have no children and return self."""
        return self

    @property
    def nodes(self):
        """Child values, in the order rebuild takes them."""
        return []

    @property
    def label(self):
        """Short description of self, without children."""
        return ""

    def display(self, indents=0):
        """Displays Value tree with readable format, without recursion.

        Format:
        <Value>(<label>, nodes=[
            <Value>(<label>, nodes=[
                ...
                <Value>(<label>)  # <-- if nodes is empty
            ])
        ])
        """
        lines = []
        stack = [(self, indents, "")]  # (value, indents, text after it), or (None, indents, closing text)
        while stack:
            value, depth, suffix = stack.pop()
            if value is None:
                lines.append(f"{'    ' * depth}{suffix}")
                continue

            line = f"{'    ' * depth}{type(value).__name__}({value.label}"
            nodes = value.nodes
            if not nodes:
                lines.append(line + ")" + suffix)
                continue

            lines.append(line + (", nodes=[" if value.label else "nodes=["))
            stack.append((None, depth, "])" + suffix))
            for i in reversed(range(len(nodes))):
                stack.append((nodes[i], depth + 1, "," if i < len(nodes) - 1 else ""))
        return "\n".join(lines)

    def __repr__(self):
        return f"{type(self).__name__}({self.label})"


class Identity(Value):
    """Delivers its payload to whatever continuation it is applied to. Represents integers, booleans and nil."""

    def __init__(self, payload=None):
        self.payload = payload  # Integer, Boolean, or None for nil

    def invoke(self, argument):
        if isinstance(argument, Identity):
            # two identities would forward to each other forever
            raise SelfRecursionError(self, argument)
        return TailCall(argument, Identity(self.payload))

    @property
    def label(self):
        return "nil" if self.payload is None else str(self.payload)

    def __str__(self):
        return self.label


class DeferredCall(Value):
    """Unexecuted application of left to right. Given a continuation k, computes (left applied to right) applied to
    k. Sentences are left-folded chains of DeferredCalls.
    """

    def __init__(self, left, right):
        self.left = left
        self.right = right
        self.free = left.free | right.free

    def invoke(self, argument):
        return NestedCall(self.left, self.right, argument)

    def rebuild(self, nodes):
        return DeferredCall(*nodes)

    @property
    def nodes(self):
        return [self.left, self.right]


class Parameter(Value):
    """Parse-time placeholder for the argument of a Lambda. Every invocation of the Lambda replaces it, so a
    Parameter is never applied while a program runs.
    """

    def __init__(self, name):
        self.name = name
        self.free = frozenset([self])

    def invoke(self, argument):
        raise FutabaError("parameter '{}' applied before being bound", self.name, internal=True)

    @property
    def label(self):
        return repr(self.name)


class Lambda(Value):
    """One-parameter closure. Applying it returns a fresh copy of body with parameter replaced by the argument, left
    unevaluated: the surrounding continuation drives its execution. Every invocation gets its own copy, so nested and
    re-entrant invocations of the same lambda never see each other's argument.
    """

    def __init__(self, parameter, body):
        self.parameter = parameter
        self.body = body
        self.free = body.free - {parameter}  # parameter is bound here, not free

    def invoke(self, argument):
        return self.body.substitute(self.parameter, argument)

    def rebuild(self, nodes):
        return Lambda(*nodes)

    @property
    def nodes(self):
        return [self.parameter, self.body]


class Operator:
    """Native operator of a given arity. reduce is called with all arity arguments once they have been supplied and
    must return a Value or a TailCall.
    """

    def __init__(self, name, arity, reduce):
        self.name = name
        self.arity = arity
        self.reduce = reduce

    def __repr__(self):
        return f"Operator({self.name!r}, {self.arity})"


class Primitive(Value):
    """Curried application of a native Operator. Collects one argument per application until saturated."""

    def __init__(self, operator, args=()):
        self.operator = operator
        self.args = tuple(args)
        self.free = frozenset().union(*(arg.free for arg in self.args))

    def invoke(self, argument):
        args = self.args + (argument,)
        if len(args) < self.operator.arity:
            return Primitive(self.operator, args)
        return self.operator.reduce(*args)

    def rebuild(self, nodes):
        return Primitive(self.operator, nodes)

    @property
    def nodes(self):
        return list(self.args)

    @property
    def label(self):
        return repr(self.operator.name)


class Halt(Value):
    """Successful completion of a program. Records the value delivered to End and absorbs any further application."""

    def __init__(self, value):
        self.value = value

    def invoke(self, argument):
        return self

    @property
    def nodes(self):
        return [self.value]


class End(Value):
    """Terminal continuation of a top-level sentence: halts the chain of applies instead of forwarding."""

    def invoke(self, argument):
        return Halt(argument)


def make_identity(payload=None):
    """Wraps payload (Integer, Boolean or None) in an identity value. make_identity() is nil."""
    return Identity(payload)


def make_call(left, right):
    """Returns a DeferredCall of left applied to right."""
    return DeferredCall(left, right)
