"""
Tests for the utility helpers.

This module verifies:
- The Unset sentinel: singleton identity, falsy semantics, representation,
  copying, pickling, thread safety, finality and PEP 604 unions.
- coalesce(), rename(), mirror() and ordinal().
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from rich.console import Console

from argwright.utils import *


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

    def testFalsy(self) -> None:
        self.assertFalse(bool(self.unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(self.unset, None)
        self.assertNotEqual(self.unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(self.unset), "Unset")
        self.assertEqual(str(self.unset), "Unset")

    def testRichConsolePrint(self) -> None:
        console = Console(color_system=None, force_terminal=False)
        with console.capture() as capture:
            console.print(self.unset)
        self.assertEqual(capture.get().strip(), "Unset")

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(self.unset)), self.unset)

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

    def testUnions(self) -> None:
        """
        The sentinel takes part in isinstance() unions from either side.
        """
        self.assertIsInstance(self.unset, str | Unset)
        self.assertIsInstance(self.unset, Unset | str)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(None, str | Unset)


class HelpersTest(TestCase):

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testRenameFunctionForm(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual((function.__name__, function.__qualname__), ("renamed", "renamed"))

    def testRenameDecoratorForm(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRenameValidation(self) -> None:
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(print, 1)

    def testMirrorServesSnapshots(self) -> None:
        class Holder:
            values = mirror("values")
            table = mirror("table")

            def __init__(self):
                self._values = [1, 2]
                self._table = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.values, (1, 2))
        with self.assertRaises(TypeError):
            holder.table["b"] = 2
        with self.assertRaises(AttributeError):
            holder.values = ()

    def testOrdinal(self) -> None:
        expected = {0: "zeroth", 1: "first", 3: "third", 10: "tenth", 11: "11th", 12: "12th",
                    13: "13th", 21: "21st", 22: "22nd", 23: "23rd", 101: "101st", 111: "111th"}
        for number, word in expected.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), word)

    def testOrdinalValidation(self) -> None:
        with self.assertRaises(TypeError):
            ordinal(True)
        with self.assertRaises(ValueError):
            ordinal(-1)


if __name__ == '__main__':
    unittest.main()
