"""
Tests for the internal utilities.

This module verifies the guarantees of the helpers shared by the package:
- The Unset sentinel: singleton identity, falsy semantics, copying, pickling,
  thread safety and finality.
- coalesce(): only Unset is replaced, other falsy values are preserved.
- rename(): decorator behavior and argument checking.
- mirror(): read-only properties returning defensive copies of containers.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from argmatch.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(Unset, self.unset)

    def testRepr(self) -> None:
        self.assertEqual(repr(self.unset), "Unset")
        self.assertEqual(str(self.unset), "Unset")

    def testFalsely(self) -> None:
        self.assertFalse(bool(self.unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(self.unset, None)
        self.assertNotEqual(self.unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)
        # Containers holding the sentinel keep it by identity.
        self.assertIs(copy.deepcopy({"default": self.unset})["default"], self.unset)

    def testPickleRoundTrip(self) -> None:
        data: bytes = pickle.dumps(self.unset)
        self.assertIs(pickle.loads(data), self.unset)

    def testUnionWithType(self) -> None:
        """
        The sentinel can take part in PEP 604 unions.
        """
        self.assertIsInstance(self.unset, str | self.unset)
        self.assertIsInstance("x", self.unset | str)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, self.unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalsyValuesArePreserved(self) -> None:
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):

    def testDecorator(self) -> None:
        @rename("fresh")
        def original():
            pass

        self.assertEqual(original.__name__, "fresh")
        self.assertEqual(original.__qualname__, "fresh")

    def testArgumentChecks(self) -> None:
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename("name")(1)

    def testNotUpdatableCallable(self) -> None:
        with self.assertRaises(TypeError):
            rename("size")(len)


class MirrorTest(TestCase):

    def testReadOnlyCopies(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")
            label = mirror("label")

            def __init__(self):
                self._items = [1, [2]]
                self._table = {"a": {1}}
                self._label = "x"

        holder = Holder()
        items = holder.items
        items[1].append(3)
        self.assertEqual(holder._items, [1, [2]])
        holder.table["a"].add(2)
        self.assertEqual(holder._table, {"a": {1}})
        self.assertEqual(holder.label, "x")
        self.assertEqual(Holder.items.fget.__name__, "items")
        with self.assertRaises(AttributeError):
            holder.items = []

    def testNameMustBeString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


if __name__ == '__main__':
    unittest.main()
