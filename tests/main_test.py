from contextlib import redirect_stderr, redirect_stdout
import io
import os
import re
import unittest

from lambdadsl.main import main

PROGRAMS = os.path.join(os.path.dirname(os.path.abspath(__file__)), "programs")


def run(*argv):
    """Runs main with argv, returns (exit code, stdout, stderr)."""
    stdout, stderr = io.StringIO(), io.StringIO()
    code = 0
    with redirect_stdout(stdout), redirect_stderr(stderr):
        try:
            main(list(argv))
        except SystemExit as exc:
            code = exc.code
    return code, stdout.getvalue(), re.sub(r"\x1b\[[0-9;]*m", "", stderr.getvalue())


class MainTestCase(unittest.TestCase):

    def test_run(self):
        code, stdout, stderr = run("run", "eval (\\x.x a)")

        self.assertEqual(0, code)
        self.assertEqual("a\n", stdout)
        self.assertIn("successfully parsed '<arg>'", stderr)

    def test_run_file(self):
        code, stdout, __ = run("run-file", os.path.join(PROGRAMS, "church.lambda"))

        self.assertEqual(0, code)
        self.assertEqual("λf.λx.(f x)\nλf.λx.(f (f x))\n", stdout)

    def test_parse_error(self):
        code, stdout, stderr = run("run", "eval x\nlet x x")

        self.assertEqual(1, code)
        self.assertEqual("", stdout)
        self.assertIn("<arg>:2:7: error: expected equals, found identifier (x)", stderr)

    def test_missing_file(self):
        code, __, stderr = run("run-file", "/nonexistent/prog.lambda")

        self.assertEqual(1, code)
        self.assertIn("error: '/nonexistent/prog.lambda' could not be opened", stderr)

    def test_max_steps(self):
        code, stdout, stderr = run("--max-steps", "50", "run", "eval a\neval (\\x.((x x) x) \\x.((x x) x))")

        self.assertEqual(1, code)
        self.assertEqual("a\n", stdout)
        self.assertIn("<arg>:2:1: error:", stderr)
        self.assertIn("has no normal form within 50 reduction steps", stderr)

    def test_negative_max_steps(self):
        code, __, __ = run("--max-steps", "-1", "run", "eval a")
        self.assertEqual(2, code)


if __name__ == '__main__':
    unittest.main()
