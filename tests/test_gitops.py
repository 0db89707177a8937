import asyncio
import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path

from onboarder.gitops import GitClient, GitCommandError, is_git_repository
from onboarder.local.session import ProcessRunner

from conftest import FakeProcessRunner


def _git_available() -> bool:
    return shutil.which("git") is not None


def _run_git(args: list, cwd: Path) -> None:
    subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        check=True,
        capture_output=True,
        text=True,
    )


class GitClientTests(unittest.TestCase):
    def setUp(self) -> None:
        if not _git_available():
            self.skipTest("git binary not found")

    def test_clone_and_fast_forward_local_repo(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            origin = root / "origin"
            origin.mkdir()
            _run_git(["init", "--initial-branch=main"], origin)
            _run_git(["config", "user.email", "bot@example.com"], origin)
            _run_git(["config", "user.name", "Onboarder"], origin)
            (origin / "README.md").write_text("v1", encoding="utf-8")
            _run_git(["add", "README.md"], origin)
            _run_git(["commit", "-m", "initial"], origin)

            client = GitClient(ProcessRunner())
            target = root / "workspace" / "checkout"
            asyncio.run(client.clone(str(origin), target))
            self.assertTrue(is_git_repository(target))
            self.assertEqual((target / "README.md").read_text(encoding="utf-8"), "v1")

            # 在 origin 提交新版本后应能快进更新
            (origin / "README.md").write_text("v2", encoding="utf-8")
            _run_git(["add", "README.md"], origin)
            _run_git(["commit", "-m", "update"], origin)

            asyncio.run(client.pull_ff_only(target))
            self.assertEqual((target / "README.md").read_text(encoding="utf-8"), "v2")

    def test_clone_failure_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            client = GitClient(ProcessRunner())
            with self.assertRaises(GitCommandError) as ctx:
                asyncio.run(client.clone(str(Path(tmp) / "missing"), Path(tmp) / "out"))
            self.assertNotEqual(ctx.exception.exit_code, 0)
            self.assertIn("clone", str(ctx.exception))


class GitClientConfigTests(unittest.TestCase):
    def test_get_global_config_returns_value(self) -> None:
        runner = FakeProcessRunner().when(
            "git", "config", "--global", "--get", "user.name", stdout="Dev Person\n"
        )
        value = asyncio.run(GitClient(runner).get_global_config("user.name"))
        self.assertEqual(value, "Dev Person")

    def test_get_global_config_unset_or_blank_is_none(self) -> None:
        runner = FakeProcessRunner()
        runner.when("git", "config", "--global", "--get", "user.name", exit_code=1)
        runner.when("git", "config", "--global", "--get", "user.email", stdout="  \n")
        client = GitClient(runner)
        self.assertIsNone(asyncio.run(client.get_global_config("user.name")))
        self.assertIsNone(asyncio.run(client.get_global_config("user.email")))

    def test_set_global_config_failure_reports_stderr(self) -> None:
        runner = FakeProcessRunner().when(
            "git", "config", "--global", "user.name", "Dev",
            exit_code=255, stderr="could not lock config file\n",
        )
        with self.assertRaises(GitCommandError) as ctx:
            asyncio.run(GitClient(runner).set_global_config("user.name", "Dev"))
        self.assertEqual(
            str(ctx.exception),
            "Git command git config --global user.name Dev failed with code 255: could not lock config file",
        )


if __name__ == "__main__":
    unittest.main()
