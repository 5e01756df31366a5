"""
Tests for the internal helpers.

This module verifies:
- The Unset sentinel: singleton identity, falsy semantics, representation,
  copying, pickling and finality.
- coalesce(): only Unset is replaced, every other falsy value passes through.
- rename(): both the direct and the decorator forms.
- mirror(): read-only properties that hand out copies of containers.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from pennant.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), UnsetType())
        self.assertIs(Unset, UnsetType())

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

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
            self.assertIs(instance, Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalsyValues(self) -> None:
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):

    def testSetsNames(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testOwnerQualifiesName(self) -> None:
        class Owner:
            pass

        function = rename(lambda: None, "method", Owner)
        self.assertEqual(function.__name__, "method")
        self.assertTrue(function.__qualname__.endswith("Owner.method"))

    def testRejectsNonCallable(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")

    def testRejectsNonIdentifier(self) -> None:
        with self.assertRaises(TypeError):
            rename(print, "not a name")


class MirrorTest(TestCase):

    class Holder:
        items = mirror("items")
        label = mirror("label")

        def __init__(self):
            self._items = [1, [2, 3]]
            self._label = "holder"

    def testReadOnly(self) -> None:
        holder = self.Holder()
        with self.assertRaises(AttributeError):
            holder.label = "other"

    def testReturnsCopies(self) -> None:
        holder = self.Holder()
        items = holder.items
        items.append(4)
        items[1].append(5)
        self.assertEqual(holder.items, [1, [2, 3]])

    def testScalarPassThrough(self) -> None:
        self.assertEqual(self.Holder().label, "holder")


if __name__ == '__main__':
    unittest.main()
