import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock

from debruijn.lang.error import ErrorHandler, GenericException
from debruijn.lang.session import Report, Session, format_names
from debruijn.lang.shell import Shell
from debruijn.main import main, slash_main
from debruijn.pure.parser import ExpectedGot, UnmatchedParens, parse


class ReportTestCase(unittest.TestCase):

    def test_format_names(self):
        cases = {frozenset(): "{}", frozenset({"x"}): "{x}", frozenset({"y", "x", "z"}): "{x, y, z}"}
        for case, expected in cases.items():
            self.assertEqual(expected, format_names(case), case)

    def test_lines(self):
        report = Report.from_term(parse("λx.λy.x y z"))
        lines = list(report.lines(show_tree=False, show_levels=True))
        self.assertEqual([
            "Free Variables: {z}",
            "Bound Variables: {x, y}",
            "Reconstruction: λx. λy. x y z",
            "De Bruijn Indices: λ λ 2 1 z",
            "De Bruijn Levels: λ λ 1 2 z",
        ], lines)

    def test_str(self):
        report = Report.from_term(parse("λx.x"))
        self.assertEqual("Free Variables: {}\n"
                         "Bound Variables: {x}\n"
                         "Abstraction(expr='λx. x', nodes=[\n"
                         "    Variable(expr='x')\n"
                         "])\n"
                         "\n"
                         "Reconstruction: λx. x\n"
                         "De Bruijn Indices: λ 1", str(report))


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.sess = Session(ErrorHandler(file=self.out))

    def test_shell_session_is_not_fatal(self):
        self.assertFalse(self.sess.error_handler.fatal)

    def test_preprocess_line(self):
        cases = {
            "x y  ": ("x y", False),
            "(λx.x": ("(λx.x", True),
            "(λx.x) (y": ("(λx.x) (y", True),
            "x)": ("x)", False),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.preprocess_line(case), case)

    def test_add(self):
        report = self.sess.add("λx.λy.x y")
        self.assertEqual("λ λ 2 1", str(report.indices))
        self.assertEqual(set(), report.free_variables)
        self.assertEqual([report], self.sess.results)

        output = self.sess.pop()
        self.assertIn("Reconstruction: λx. λy. x y", output)
        self.assertNotIn("De Bruijn Levels", output)
        self.assertEqual([], self.sess.results)

    def test_add_error(self):
        with self.assertRaises(ExpectedGot) as context:
            self.sess.add("y\n λx x", line_num=4)

        self.assertEqual(" λx x", context.exception.expr)
        self.assertEqual(4, context.exception.start)
        self.assertEqual(("λx x", 5), self.sess.error_handler.traceback[Session.SH_FILE])
        self.assertEqual([], self.sess.results)

    def test_add_unmatched(self):
        self.assertRaises(UnmatchedParens, self.sess.add, "(x y")

    def test_run_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "term.lc")
            with open(path, "w", encoding="utf-8") as file:
                file.write("\\f.\n  (\\x.f (x x))\n  \\x.f (x x)\n")

            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                Session(ErrorHandler(file=self.out), path, show_levels=True).run()

        self.assertIn("Reconstruction: λf. (λx. f (x x)) (λx. f (x x))", stdout.getvalue())
        self.assertIn("De Bruijn Indices: λ (λ 2 (1 1)) (λ 2 (1 1))", stdout.getvalue())
        self.assertIn("De Bruijn Levels: λ (λ 1 (2 2)) (λ 1 (2 2))", stdout.getvalue())

    def test_run_stdin(self):
        stdout = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO("x_1 y")), contextlib.redirect_stdout(stdout):
            Session(ErrorHandler(file=self.out), Session.STDIN, underscore=False, show_tree=False).run()

        self.assertIn("Free Variables: {1, x, y}", stdout.getvalue())
        self.assertNotIn("nodes=[", stdout.getvalue())

    def test_missing_file(self):
        sess = Session(ErrorHandler(file=self.out), "/nonexistent/term.lc")
        self.assertRaises(GenericException, sess.run)

    def test_invalid_utf8_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "latin1.lc")
            with open(path, "wb") as file:
                file.write(b"\\x.x \xe9")

            with self.assertRaises(GenericException) as context:
                Session(ErrorHandler(file=self.out), path).run()

        self.assertIn("latin1.lc", context.exception.msg)
        self.assertIn("UTF-8", context.exception.msg)
        self.assertFalse(context.exception.internal)


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.errors = io.StringIO()
        self.shell = Shell(Session(ErrorHandler(file=self.errors), show_tree=False), stdout=self.out)

    def test_default(self):
        self.shell.onecmd("λx.x")
        self.assertIn("De Bruijn Indices: λ 1", self.out.getvalue())

    def test_continuation(self):
        self.shell.onecmd("(λx.x")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.assertEqual("", self.out.getvalue())

        # lines are joined with a space, so the abstraction body takes y
        self.shell.onecmd("y)")
        self.assertEqual(Shell.prompt, self.shell.prompt)
        self.assertIn("Reconstruction: λx. x y", self.out.getvalue())

    def test_error_keeps_running(self):
        self.shell.onecmd("λx x")
        self.assertIn("error: ", self.errors.getvalue())

        self.shell.onecmd("x y")
        self.assertIn("Reconstruction: x y", self.out.getvalue())

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))
        self.assertTrue(self.shell.onecmd("EOF"))

    def test_help(self):
        self.shell.onecmd("help")
        self.assertIn("De Bruijn", self.out.getvalue())


class MainTestCase(unittest.TestCase):

    def test_main(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "term.lc")
            with open(path, "w", encoding="utf-8") as file:
                file.write("λx.λy.x y")

            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                main(["--levels", "--no-tree", path])

        self.assertIn("De Bruijn Indices: λ λ 2 1", stdout.getvalue())
        self.assertIn("De Bruijn Levels: λ λ 1 2", stdout.getvalue())

    def test_main_parse_error(self):
        stdout = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO(")")), contextlib.redirect_stdout(stdout):
            with self.assertRaises(SystemExit) as context:
                main(["-"])

        self.assertEqual(1, context.exception.code)
        self.assertIn("unexpected", stdout.getvalue())

    def test_main_invalid_utf8(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "latin1.lc")
            with open(path, "wb") as file:
                file.write(b"\xff")

            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout):
                with self.assertRaises(SystemExit) as context:
                    main([path])

        self.assertEqual(1, context.exception.code)
        self.assertIn("not valid UTF-8", stdout.getvalue())
        self.assertNotIn("[internal]", stdout.getvalue())

    def test_main_nested_abstractions(self):
        stdout = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO("λa." * 600 + "a")), contextlib.redirect_stdout(stdout):
            main(["--no-tree", "-"])

        self.assertIn("De Bruijn Indices: " + "λ " * 600 + "1", stdout.getvalue())

    def test_slash_main(self):
        stdout = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO("\\x.\\y.x\n")), contextlib.redirect_stdout(stdout):
            slash_main()
        self.assertEqual("λx.λy.x\n", stdout.getvalue())


if __name__ == '__main__':
    unittest.main()
