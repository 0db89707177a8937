"""Tests for platform detection and environment refresh."""

import os
import unittest

from onboarder.local.environment import EnvironmentRefresher, combine_path, path_contains
from onboarder.local.probe import Architecture, OperatingSystem, PlatformDetector


class PlatformDetectorTests(unittest.TestCase):
    def _detect(self, system, machine="x86_64", environ=None, proc_version="/nonexistent/version"):
        detector = PlatformDetector(
            environ=environ if environ is not None else {"HOME": "/home/dev"},
            system=lambda: system,
            machine=lambda: machine,
            proc_version_path=proc_version,
        )
        return detector.detect()

    def test_windows_x64(self) -> None:
        facts = self._detect("Windows", "AMD64", {"USERPROFILE": r"C:\Users\dev"})
        self.assertEqual(facts.os, OperatingSystem.WINDOWS)
        self.assertEqual(facts.arch, Architecture.X64)
        self.assertFalse(facts.is_wsl)
        self.assertEqual(facts.home_directory, r"C:\Users\dev")

    def test_macos_arm(self) -> None:
        facts = self._detect("Darwin", "arm64")
        self.assertEqual(facts.os, OperatingSystem.MACOS)
        self.assertEqual(facts.arch, Architecture.ARM64)

    def test_linux_without_wsl(self) -> None:
        facts = self._detect("Linux", "aarch64")
        self.assertEqual(facts.os, OperatingSystem.LINUX)
        self.assertEqual(facts.arch, Architecture.ARM64)
        self.assertFalse(facts.is_wsl)

    def test_wsl_from_environment(self) -> None:
        facts = self._detect("Linux", environ={"HOME": "/home/dev", "WSL_DISTRO_NAME": "Ubuntu-22.04"})
        self.assertTrue(facts.is_wsl)

    def test_wsl_from_kernel_version(self) -> None:
        import tempfile

        with tempfile.NamedTemporaryFile("w", suffix=".version", delete=False) as handle:
            handle.write("Linux version 5.15.90.1-microsoft-standard-WSL2")
            path = handle.name
        try:
            facts = self._detect("Linux", proc_version=path)
        finally:
            os.remove(path)
        self.assertTrue(facts.is_wsl)

    def test_wsl_flag_ignored_outside_linux(self) -> None:
        facts = self._detect("Windows", environ={"USERPROFILE": "C:\\Users\\dev", "WSL_INTEROP": "x"})
        self.assertFalse(facts.is_wsl)

    def test_unknown_platform(self) -> None:
        facts = self._detect("SunOS", "sparc")
        self.assertEqual(facts.os, OperatingSystem.UNKNOWN)
        self.assertEqual(facts.arch, Architecture.UNKNOWN)


class EnvironmentRefresherTests(unittest.TestCase):
    def test_combine_path_orders_machine_first(self) -> None:
        self.assertEqual(combine_path(r"C:\Windows;", r"C:\Users\dev\bin"), r"C:\Windows;C:\Users\dev\bin")
        self.assertEqual(combine_path(None, r"C:\bin"), r"C:\bin")
        self.assertEqual(combine_path("", None), "")

    def test_path_contains_ignores_trailing_separator(self) -> None:
        value = os.pathsep.join(["/usr/bin", "/opt/homebrew/bin/"])
        self.assertTrue(path_contains(value, "/opt/homebrew/bin", case_insensitive=False))
        self.assertFalse(path_contains(value, "/OPT/homebrew/bin", case_insensitive=False))
        self.assertTrue(path_contains(value, "/OPT/homebrew/bin", case_insensitive=True))

    def test_ensure_path_contains_prepends_once(self) -> None:
        environ = {"PATH": "/usr/bin"}
        refresher = EnvironmentRefresher(environ)
        refresher.is_windows = False

        refresher.ensure_path_contains("/opt/homebrew/bin")
        refresher.ensure_path_contains("/opt/homebrew/bin")

        self.assertEqual(environ["PATH"], "/opt/homebrew/bin" + os.pathsep + "/usr/bin")

    def test_refresh_is_noop_off_windows(self) -> None:
        environ = {"PATH": "/usr/bin"}
        refresher = EnvironmentRefresher(environ)
        refresher.is_windows = False
        refresher.refresh()
        self.assertEqual(environ, {"PATH": "/usr/bin"})


if __name__ == "__main__":
    unittest.main()
