import unittest

from futaba.lang.environment import Record, names, register, resolve
from futaba.lang.error import Position, UnresolvedNameError
from futaba.pure.value import Integer, make_identity


class EnvironmentTestCase(unittest.TestCase):

    def setUp(self):
        self.one, self.two = make_identity(Integer(1)), make_identity(Integer(2))
        self.chain = register(register(None, "a", self.one), "b", self.two)

    def test_resolve(self):
        self.assertIs(self.one, resolve(self.chain, "a"))
        self.assertIs(self.two, resolve(self.chain, "b"))

    def test_shadowing(self):
        three = make_identity(Integer(3))
        inner = register(self.chain, "a", three)

        self.assertIs(three, resolve(inner, "a"))
        self.assertIs(self.one, resolve(self.chain, "a"))  # outer chain unaffected
        self.assertEqual(["a", "b"], names(inner))

    def test_persistent(self):
        left = register(self.chain, "c", self.one)
        right = register(self.chain, "d", self.two)

        self.assertIs(self.chain, left.previous)
        self.assertIs(self.chain, right.previous)
        self.assertRaises(UnresolvedNameError, resolve, left, "d")
        self.assertRaises(UnresolvedNameError, resolve, right, "c")
        self.assertEqual(["b", "a"], [record.name for record in self.chain])

    def test_unresolved(self):
        position = Position("test.ft", 3, 7)
        should_raise = [(None, "a"), (self.chain, "c"), (self.chain, "ab"), (self.chain, "")]
        for chain, name in should_raise:
            with self.assertRaises(UnresolvedNameError) as context:
                resolve(chain, name, position)
            self.assertEqual(name, context.exception.name)
            self.assertEqual(position, context.exception.position)

    def test_record(self):
        record = Record("x", self.one)
        self.assertIsNone(record.previous)
        self.assertEqual([record], list(record))


if __name__ == '__main__':
    unittest.main()
