"""Binding environment used while parsing: a persistent chain of Records linking names to Values, searched innermost
first. Extending a chain never modifies it, so any number of lambda bodies may share the same tail. The empty chain
is None.
"""

from futaba.lang.error import UnresolvedNameError


class Record:
    """One binding of name to value, in front of the previous chain."""

    def __init__(self, name, value, previous=None):
        self.name = name
        self.value = value
        self.previous = previous

    def __iter__(self):
        record = self
        while record is not None:
            yield record
            record = record.previous

    def __repr__(self):
        return f"Record({self.name!r}, {self.value!r})"


def register(chain, name, value):
    """Returns a new chain binding name to value in front of chain."""
    return Record(name, value, chain)


def resolve(chain, name, position=None):
    """Returns the value bound to name, innermost binding first. Raises UnresolvedNameError if name is not bound;
    position is only used for that error.
    """
    for record in chain or ():
        if record.name == name:
            return record.value
    raise UnresolvedNameError(name, position)


def names(chain):
    """Names visible from chain, innermost first. Shadowed names are listed once."""
    seen = []
    for record in chain or ():
        if record.name not in seen:
            seen.append(record.name)
    return seen
