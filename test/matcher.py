"""
Tokenizer/matcher tests.

Scope
- Option forms: "-xV", "-x V", "-x=V", "--name=V", "--name V", single-dash long
  names, short flag clusters, clusters ending in a value-taking option.
- Option values that look like options ("--xx -123").
- "--" and the lone "-".
- Positional distribution: required reservations, optional and variadic arguments.
- Matching faults and their exact text.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
import warnings
from unittest import TestCase

from argwright import (
    Command,
    Option,
    Flag,
    Argument,
    MissingValueError,
    UnknownParameterError,
    UnexpectedArgumentError,
    UnexpectedValueError,
    DuplicateOptionError,
    DeprecatedParameterWarning,
)
from argwright.converters import integer
from argwright.matcher import Session, match
from argwright.pipeline import Occurrence


def parse(*parameters, argv=(), **options):
    return Command(*parameters, name="test", **options).parse(argv)


class OptionFormsTest(TestCase):

    def testAttachedShortValue(self):
        x = Option("-x", "--xx")
        self.assertEqual(parse(x, argv=["-xvalue"])[x], "value")

    def testSeparateShortValue(self):
        x = Option("-x", "--xx")
        self.assertEqual(parse(x, argv=["-x", "value"])[x], "value")

    def testShortEqualsValue(self):
        x = Option("-x")
        self.assertEqual(parse(x, argv=["-x=value"])[x], "value")

    def testLongEqualsValue(self):
        x = Option("-x", "--xx")
        self.assertEqual(parse(x, argv=["--xx=a=b"])[x], "a=b")

    def testLongEqualsEmptyValue(self):
        x = Option("--xx")
        self.assertEqual(parse(x, argv=["--xx="])[x], "")

    def testSeparateLongValue(self):
        x = Option("-x", "--xx")
        self.assertEqual(parse(x, argv=["--xx", "value"])[x], "value")

    def testSingleDashLongName(self):
        x = Option("-long")
        self.assertEqual(parse(x, argv=["-long", "value"])[x], "value")

    def testValueThatLooksLikeAnOption(self):
        x = Option("-x", "--xx", type=integer)
        self.assertEqual(parse(x, argv=["--xx", "-123"])[x], -123)

    def testAttachedValueCountsAsFirstOfPair(self):
        y = Option("-y", type=integer).pair()
        self.assertEqual(parse(y, argv=["-y10", "1"])[y], (10, 1))

    def testFlagCluster(self):
        a, b, c = Flag("-a"), Flag("-b"), Flag("-c")
        bindings = parse(a, b, c, argv=["-ab"])
        self.assertEqual((bindings[a], bindings[b], bindings[c]), (True, True, False))

    def testClusterEndingInOption(self):
        a, b, o = Flag("-a"), Flag("-b"), Option("-o")
        bindings = parse(a, b, o, argv=["-abovalue"])
        self.assertEqual((bindings[a], bindings[b], bindings[o]), (True, True, "value"))

    def testClusterEndingInOptionWithSeparateValue(self):
        a, o = Flag("-a"), Option("-o")
        bindings = parse(a, o, argv=["-ao", "value"])
        self.assertEqual((bindings[a], bindings[o]), (True, "value"))

    def testRepeatedOptionLastWins(self):
        x = Option("-x", "--xx", type=integer)
        self.assertEqual(parse(x, argv=["-x1", "--xx", "2", "-x3"])[x], 3)

    def testRepeatedListOptionKeepsOrder(self):
        x = Option("-x", type=integer).multiple()
        self.assertEqual(parse(x, argv=["-x3", "-x1", "-x2"])[x], [3, 1, 2])


class SeparatorTest(TestCase):

    def testDoubleDashEndsOptions(self):
        a = Flag("-a")
        files = Argument("FILE").multiple()
        bindings = parse(a, files, argv=["--", "-a", "--xx"])
        self.assertFalse(bindings[a])
        self.assertEqual(bindings[files], ["-a", "--xx"])

    def testLoneDashIsPositional(self):
        source = Argument("SOURCE")
        self.assertEqual(parse(source, argv=["-"])[source], "-")

    def testOptionsAfterPositionals(self):
        source, x = Argument("SOURCE"), Option("-x")
        bindings = parse(source, x, argv=["path", "-x", "1"])
        self.assertEqual((bindings[source], bindings[x]), ("path", "1"))


class DistributionTest(TestCase):

    def testRequiredArgumentsReserveTokens(self):
        first = Argument("FIRST").optional()
        last = Argument("LAST")
        bindings = parse(first, last, argv=["only"])
        self.assertIsNone(bindings[first])
        self.assertEqual(bindings[last], "only")

    def testOptionalArgumentFilledWhenTokensSuffice(self):
        first = Argument("FIRST").optional()
        last = Argument("LAST")
        bindings = parse(first, last, argv=["a", "b"])
        self.assertEqual((bindings[first], bindings[last]), ("a", "b"))

    def testVariadicLeavesReservedTokens(self):
        sources = Argument("SRC").multiple()
        destination = Argument("DST")
        bindings = parse(sources, destination, argv=["a", "b", "c"])
        self.assertEqual(bindings[sources], ["a", "b"])
        self.assertEqual(bindings[destination], "c")

    def testVariadicEmpty(self):
        sources = Argument("SRC").multiple()
        self.assertEqual(parse(sources)[sources], [])

    def testRequiredVariadicEmpty(self):
        with self.assertRaises(MissingValueError) as context:
            parse(Argument("SRC").multiple(required=True))
        self.assertEqual(str(context.exception), 'Missing value for "SRC": argument is required.')

    def testPairedArgument(self):
        point = Argument("POINT", type=integer).pair()
        self.assertEqual(parse(point, argv=["1", "2"])[point], (1, 2))

    def testPairedVariadicArgument(self):
        points = Argument("POINT", type=integer).pair().multiple()
        self.assertEqual(parse(points, argv=["1", "2", "3", "4"])[points], [(1, 2), (3, 4)])

    def testMissingRequiredArgument(self):
        with self.assertRaises(MissingValueError) as context:
            parse(Argument("X"), Argument("Y"), argv=["a"])
        self.assertEqual(context.exception.name, "Y")
        self.assertEqual(str(context.exception), 'Missing value for "Y": argument is required.')

    def testExtraArgument(self):
        with self.assertRaises(UnexpectedArgumentError) as context:
            parse(Argument("X"), argv=["a", "b"])
        self.assertEqual(str(context.exception), 'Unexpected argument "b".')


class MatchingFaultsTest(TestCase):

    def testUnknownLongOption(self):
        with self.assertRaises(UnknownParameterError) as context:
            parse(Option("-x", "--xx"), argv=["--xz=1"])
        self.assertEqual(str(context.exception), 'No such option "--xz".')
        self.assertIn("--xx", context.exception.hint)
        self.assertIn("--xx", context.exception.options["suggestions"])

    def testUnknownShortOption(self):
        with self.assertRaises(UnknownParameterError) as context:
            parse(Flag("-a"), argv=["-z"])
        self.assertEqual(str(context.exception), 'No such option "-z".')

    def testUnknownMemberOfCluster(self):
        with self.assertRaises(UnknownParameterError) as context:
            parse(Flag("-a"), argv=["-az"])
        self.assertEqual(context.exception.name, "-z")

    def testMissingOptionValue(self):
        with self.assertRaises(MissingValueError) as context:
            parse(Option("-x"), argv=["-x"])
        self.assertEqual(str(context.exception), 'Missing value for "-x": option requires a value.')

    def testMissingPairValue(self):
        with self.assertRaises(MissingValueError) as context:
            parse(Option("-y", type=integer).pair(), argv=["-y", "3"])
        self.assertEqual(str(context.exception), 'Missing value for "-y": option requires 2 values.')
        self.assertEqual(context.exception.hint, "add both values of the pair after -y")

    def testFlagWithValue(self):
        with self.assertRaises(UnexpectedValueError) as context:
            parse(Flag("--debug"), argv=["--debug=1"])
        self.assertEqual(
            str(context.exception),
            'Invalid value for "--debug": --debug option does not take a value.',
        )

    def testStrictRejectsRepeatedOption(self):
        x = Option("-x", "--xx")
        with self.assertRaises(DuplicateOptionError) as context:
            parse(x, argv=["-x1", "--xx=2"], strict=True)
        self.assertEqual(
            str(context.exception),
            'Duplicated option "--xx": option cannot be given more than once.',
        )

    def testStrictAllowsRepeatedListOption(self):
        x = Option("-x").multiple()
        self.assertEqual(parse(x, argv=["-x1", "-x2"], strict=True)[x], ["1", "2"])

    def testFirstFaultWins(self):
        with self.assertRaises(UnknownParameterError):
            parse(Option("-x"), argv=["--nope", "-x"])


class SessionTest(TestCase):

    def testOccurrencesRecordInputAndIndex(self):
        x = Option("-x", "--xx")
        occurrences = match({"-x": x, "--xx": x}, (), ["--xx", "1", "-x2"])
        self.assertEqual(occurrences[x], [Occurrence("--xx", ("1",), 0), Occurrence("-x", ("2",), 2)])

    def testUnmatchedParametersAreAbsent(self):
        x = Option("-x")
        self.assertEqual(Session({"-x": x}, ()).match([]), {})

    def testDeprecatedOptionWarns(self):
        old = Option("--old", deprecated=True)
        with self.assertWarns(DeprecatedParameterWarning):
            bindings = parse(old, argv=["--old", "v"])
        self.assertEqual(bindings[old], "v")

    def testDeprecatedOptionUnusedIsSilent(self):
        old = Option("--old", deprecated=True)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            self.assertIsNone(parse(old)[old])


if __name__ == "__main__":
    unittest.main()
