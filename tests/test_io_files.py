import os
import tempfile
import unittest

from config import CFG
from io_files import write_layout_view_html, write_solutions
from solver.driver import Solution, SolveResult


class WriteOutputsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self._orig_solutions = CFG.SOLUTIONS_OUT
        self._orig_layout = CFG.LAYOUT_HTML

    def tearDown(self) -> None:
        CFG.SOLUTIONS_OUT = self._orig_solutions
        CFG.LAYOUT_HTML = self._orig_layout

    def test_write_solutions_uses_configured_relative_path(self) -> None:
        CFG.SOLUTIONS_OUT = "outputs/custom_solutions.txt"
        result = SolveResult(
            board_kind="rectangle",
            solutions=[Solution(1, "A[01]; B[00]", ("ABB\nABB",), "A B B\nA B B\n")],
        )

        path = write_solutions(result, self.tmpdir.name)

        expected = os.path.join(self.tmpdir.name, "outputs", "custom_solutions.txt")
        self.assertEqual(path, expected)
        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertEqual(contents, "A[01]; B[00]\nA B B\nA B B\n\nfound 1 solutions\n")

    def test_write_solutions_without_any_solution(self) -> None:
        target = os.path.join(self.tmpdir.name, "none.txt")
        path = write_solutions(SolveResult(board_kind="pyramid"), self.tmpdir.name, path=target)

        self.assertEqual(path, target)
        with open(path, "r", encoding="utf-8") as fh:
            self.assertEqual(fh.read(), "No solution\n")

    def test_write_layout_view_html_accepts_absolute_path(self) -> None:
        target = os.path.join(self.tmpdir.name, "html", "layout.html")
        CFG.LAYOUT_HTML = target

        svg = "<svg></svg>"
        legend = "<li>A</li>"

        path = write_layout_view_html(svg, legend, self.tmpdir.name, title="A[00]; B[00]")

        self.assertEqual(path, target)
        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertIn(svg, contents)
        self.assertIn(legend, contents)
        self.assertIn("<h1>A[00]; B[00]</h1>", contents)


if __name__ == "__main__":
    unittest.main()
