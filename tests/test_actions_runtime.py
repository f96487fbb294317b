from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path

from _testutil import ensure_repo_on_path, read_outputs


class TestActionsRuntimeInputs(unittest.TestCase):
    def test_get_input_uses_runner_env_names(self) -> None:
        ensure_repo_on_path()

        from publish_artifact.github.actions import ActionsRuntime, input_env_name

        self.assertEqual(input_env_name("artifact-name"), "INPUT_ARTIFACT-NAME")
        self.assertEqual(input_env_name("my input"), "INPUT_MY_INPUT")

        rt = ActionsRuntime(env={"INPUT_ARTIFACT-NAME": "  demo  "}, out=io.StringIO())
        self.assertEqual(rt.get_input("artifact-name"), "demo")
        self.assertEqual(rt.get_input("artifact-name", trim=False), "  demo  ")
        self.assertEqual(rt.get_input("version"), "")

    def test_boolean_input_core_schema(self) -> None:
        ensure_repo_on_path()

        from publish_artifact.github.actions import ActionsRuntime
        from publish_artifact.infra.errors import InvalidInputError

        for raw, expected in (("true", True), ("True", True), ("TRUE", True), ("false", False), ("FALSE", False)):
            rt = ActionsRuntime(env={"INPUT_DRY-RUN": raw}, out=io.StringIO())
            self.assertIs(rt.get_boolean_input("dry-run"), expected)

        rt = ActionsRuntime(env={}, out=io.StringIO())
        self.assertFalse(rt.get_boolean_input("dry-run", default=False))
        with self.assertRaises(InvalidInputError):
            rt.get_boolean_input("dry-run")

        rt = ActionsRuntime(env={"INPUT_DRY-RUN": "yes"}, out=io.StringIO())
        with self.assertRaises(InvalidInputError):
            rt.get_boolean_input("dry-run", default=False)


class TestActionsRuntimeOutputs(unittest.TestCase):
    def test_set_output_writes_output_file(self) -> None:
        ensure_repo_on_path()

        from publish_artifact.github.actions import ActionsRuntime

        with tempfile.TemporaryDirectory() as td:
            out_file = Path(td) / "github_output"
            out = io.StringIO()
            rt = ActionsRuntime(env={"GITHUB_OUTPUT": str(out_file)}, out=out)

            rt.set_output("published-url", "https://npm.pkg.github.com/demo/1.0.0")
            rt.set_output("metadata", "line1\nline2")

            parsed = read_outputs(out_file)
            self.assertEqual(parsed["published-url"], "https://npm.pkg.github.com/demo/1.0.0")
            self.assertEqual(parsed["metadata"], "line1\nline2")
            self.assertIn("ghadelimiter_", out_file.read_text(encoding="utf-8"))
            self.assertEqual(rt.outputs["published-url"], "https://npm.pkg.github.com/demo/1.0.0")
            self.assertEqual(out.getvalue(), "")

    def test_set_output_without_output_file_uses_command(self) -> None:
        ensure_repo_on_path()

        from publish_artifact.github.actions import ActionsRuntime

        out = io.StringIO()
        rt = ActionsRuntime(env={}, out=out)
        rt.set_output("publication-status", "failed")
        self.assertIn("::set-output name=publication-status::failed", out.getvalue())


class TestActionsRuntimeCommands(unittest.TestCase):
    def test_workflow_commands_are_escaped(self) -> None:
        ensure_repo_on_path()

        from publish_artifact.github.actions import ActionsRuntime, escape_property

        out = io.StringIO()
        rt = ActionsRuntime(env={}, out=out)
        rt.info("plain line")
        rt.warning("100% broken\nsecond")
        rt.debug("dbg")
        rt.set_secret("s3cret")
        rt.set_secret("")

        lines = out.getvalue().splitlines()
        self.assertEqual(
            lines,
            [
                "plain line",
                "::warning::100%25 broken%0Asecond",
                "::debug::dbg",
                "::add-mask::s3cret",
            ],
        )
        self.assertEqual(escape_property("a:b,c"), "a%3Ab%2Cc")

    def test_set_failed_sets_exit_code(self) -> None:
        ensure_repo_on_path()

        from publish_artifact.github.actions import ActionsRuntime

        out = io.StringIO()
        rt = ActionsRuntime(env={}, out=out)
        self.assertEqual(rt.exit_code, 0)
        rt.set_failed("boom")
        self.assertEqual(rt.exit_code, 1)
        self.assertEqual(out.getvalue().strip(), "::error::boom")

    def test_append_summary(self) -> None:
        ensure_repo_on_path()

        from publish_artifact.github.actions import ActionsRuntime

        out = io.StringIO()
        rt = ActionsRuntime(env={}, out=out)
        rt.append_summary("<h1>x</h1>\n")
        self.assertIn("::debug::GITHUB_STEP_SUMMARY not set", out.getvalue())

        with tempfile.TemporaryDirectory() as td:
            summary = Path(td) / "summary.md"
            rt = ActionsRuntime(env={"GITHUB_STEP_SUMMARY": str(summary)}, out=io.StringIO())
            rt.append_summary("<h1>a</h1>\n")
            rt.append_summary("<h1>b</h1>\n")
            self.assertEqual(summary.read_text(encoding="utf-8"), "<h1>a</h1>\n<h1>b</h1>\n")


class TestJobSummary(unittest.TestCase):
    def test_heading_and_table_markup(self) -> None:
        ensure_repo_on_path()

        from publish_artifact.github.actions import ActionsRuntime
        from publish_artifact.github.summary import JobSummary, SummaryCell

        summary = JobSummary()
        summary.add_heading("Published").add_table(
            [
                [SummaryCell("Property", header=True), SummaryCell("Value", header=True)],
                ["Artifact Name", "<demo>"],
            ]
        )
        self.assertEqual(
            summary.stringify(),
            "<h1>Published</h1>\n"
            "<table><tr><th>Property</th><th>Value</th></tr>"
            "<tr><td>Artifact Name</td><td>&lt;demo&gt;</td></tr></table>\n",
        )

        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "summary.md"
            rt = ActionsRuntime(env={"GITHUB_STEP_SUMMARY": str(path)}, out=io.StringIO())
            summary.write(rt)
            self.assertTrue(summary.is_empty())
            self.assertIn("<h1>Published</h1>", path.read_text(encoding="utf-8"))

            # Nothing buffered, nothing written.
            summary.write(rt)
            self.assertEqual(path.read_text(encoding="utf-8").count("<h1>"), 1)


if __name__ == "__main__":
    unittest.main()
