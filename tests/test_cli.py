from __future__ import annotations

import contextlib
import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from _testutil import ensure_repo_on_path, read_outputs


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.repo_root = ensure_repo_on_path()
        self._td = tempfile.TemporaryDirectory()
        self.tmp = Path(self._td.name)
        self._cwd = os.getcwd()
        os.chdir(self.tmp)

    def tearDown(self) -> None:
        os.chdir(self._cwd)
        self._td.cleanup()

    def _env(self, **extra: str):
        env = {
            "INPUT_ARTIFACT-NAME": "demo-artifact",
            "INPUT_VERSION": "1.0.0",
            "INPUT_REGISTRY-URL": "https://npm.pkg.github.com",
            "INPUT_DRY-RUN": "true",
            "GITHUB_OUTPUT": str(self.tmp / "out"),
            "HOME": str(self.tmp / "home"),
            "PATH": os.environ.get("PATH", ""),
        }
        env.update(extra)
        return env

    def _main(self, env, argv):
        from publish_artifact.cli import main

        stdout = io.StringIO()
        with mock.patch.dict(os.environ, env, clear=True), contextlib.redirect_stdout(stdout):
            rc = main(argv)
        return rc, stdout.getvalue()

    def test_dry_run_exit_zero(self) -> None:
        rc, log = self._main(self._env(), ["--action-file", str(self.repo_root / "action.yml")])

        self.assertEqual(rc, 0)
        outputs = read_outputs(self.tmp / "out")
        self.assertEqual(outputs["publication-status"], "success")
        self.assertEqual(outputs["published-url"], "https://npm.pkg.github.com/demo-artifact/1.0.0")
        # No GITHUB_TOKEN, so the download degrades to the working directory.
        self.assertIn("Could not download artifact, using current directory", log)
        self.assertIn("Artifact publication completed successfully", log)

    def test_validation_failure_exit_one(self) -> None:
        rc, log = self._main(self._env(**{"INPUT_VERSION": ""}), [])

        self.assertEqual(rc, 1)
        self.assertIn("::error::❌ Artifact publication failed: Version is required", log)
        self.assertEqual(read_outputs(self.tmp / "out")["publication-status"], "failed")

    def test_missing_action_file_exit_one(self) -> None:
        rc, log = self._main(self._env(), ["--action-file", str(self.tmp / "nope.yml")])

        self.assertEqual(rc, 1)
        self.assertIn("action metadata not found", log)

    def test_version_flag(self) -> None:
        from publish_artifact import __version__
        from publish_artifact.cli import build_parser

        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), self.assertRaises(SystemExit) as ctx:
            build_parser().parse_args(["--version"])
        self.assertEqual(ctx.exception.code, 0)
        self.assertEqual(stdout.getvalue().strip(), f"publish-artifact {__version__}")


if __name__ == "__main__":
    unittest.main()
