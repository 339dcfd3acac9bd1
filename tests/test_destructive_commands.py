#!/usr/bin/env python3
"""
Unit tests for destructive_commands.py.

Both platform tables are exercised explicitly with windows=True/False so the
suite behaves the same on every host.
"""

import sys
from pathlib import Path
from unittest import TestCase, main as unittest_main

import pytest

# Add hooks to path
sys.path.insert(0, str(Path(__file__).parent.parent / "hooks"))

import destructive_commands
from destructive_commands import check_destructive_find, has_nul_redirect, is_destructive_delete


class TestDestructiveDeletePosix(TestCase):
    """rm detection with the POSIX verb table."""

    def assertDelete(self, cmd):
        self.assertTrue(is_destructive_delete(cmd, windows=False), cmd)

    def assertNotDelete(self, cmd):
        self.assertFalse(is_destructive_delete(cmd, windows=False), cmd)

    def test_simple(self):
        self.assertDelete("rm file.txt")

    def test_bare_rm(self):
        self.assertDelete("rm")

    def test_with_flags(self):
        self.assertDelete("rm -rf /tmp/test")

    def test_with_sudo(self):
        self.assertDelete("sudo rm -rf /")

    def test_chained(self):
        self.assertDelete("echo test && rm file.txt")
        self.assertDelete("ls; rm a")
        self.assertDelete("(rm a)")

    def test_command_builtin_and_escape(self):
        self.assertDelete("command rm file")
        self.assertDelete("\\rm file")

    def test_binary_path(self):
        self.assertDelete("/bin/rm file")
        self.assertDelete("cd x && /usr/bin/rm -f y")

    def test_xargs_rm(self):
        self.assertDelete("ls | xargs rm")
        self.assertDelete("cat files.txt | xargs rm -f")
        self.assertDelete("find . -name '*.tmp' | xargs rm")

    def test_xargs_rmdir(self):
        self.assertDelete("ls | xargs rmdir")

    def test_xargs_with_sudo(self):
        self.assertDelete("ls | xargs sudo rm")
        self.assertDelete("find . | sudo xargs rm")

    def test_other_commands_allowed(self):
        self.assertNotDelete("ls -la")
        self.assertNotDelete("trash file.txt")

    def test_embedded_verb_not_matched(self):
        self.assertNotDelete("grep -r 'pattern' .")
        self.assertNotDelete("rma -rm")
        self.assertNotDelete("format disk")
        self.assertNotDelete("echo rm")
        self.assertNotDelete("grep -r rm src/")

    def test_windows_verbs_not_in_posix_table(self):
        self.assertNotDelete("del file.txt")
        self.assertNotDelete("Remove-Item foo")


class TestDestructiveDeleteWindows(TestCase):
    """rm detection with the Windows verb table."""

    def test_windows_verbs(self):
        for cmd in ("del file.txt", "rd /s /q build", "rmdir out", "Remove-Item -Recurse dist", "RM x"):
            self.assertTrue(is_destructive_delete(cmd, windows=True), cmd)

    def test_backslash_binary_path(self):
        self.assertTrue(is_destructive_delete("C:\\tools\\rm file", windows=True))

    def test_xargs(self):
        self.assertTrue(is_destructive_delete("ls | xargs rm", windows=True))

    def test_embedded_verbs_not_matched(self):
        for cmd in ("delete-me.txt", "echo deleted", "dir /s"):
            self.assertFalse(is_destructive_delete(cmd, windows=True), cmd)


class TestDestructiveFindPosix(TestCase):

    def check(self, cmd):
        return check_destructive_find(cmd, windows=False)

    def test_delete(self):
        self.assertEqual(self.check("find . -name '*.tmp' -delete"), "find with -delete option")

    def test_exec_rm(self):
        self.assertEqual(self.check("find . -exec rm {} \\;"), "find with -exec rm/rmdir")

    def test_exec_sudo_rm(self):
        self.assertEqual(self.check("find /var/log -exec sudo rm -f {} +"), "find with -exec rm/rmdir")

    def test_execdir_rm(self):
        self.assertEqual(self.check("find . -execdir rm {} +"), "find with -execdir rm/rmdir")

    def test_xargs_rm(self):
        self.assertEqual(self.check("find . -name '*.tmp' | xargs rm"), "find piped to xargs rm/rmdir")

    def test_exec_mv(self):
        self.assertEqual(self.check("find . -exec mv {} /tmp \\;"), "find with -exec mv")

    def test_ok_rm(self):
        self.assertEqual(self.check("find . -ok rm {} \\;"), "find with -ok rm/rmdir")

    def test_case_insensitive(self):
        self.assertEqual(self.check("find . -NAME x -Delete"), "find with -delete option")

    def test_after_separator(self):
        self.assertEqual(self.check("cd src && find . -delete"), "find with -delete option")

    def test_safe(self):
        self.assertIsNone(self.check("find . -name '*.rs'"))
        self.assertIsNone(self.check("find . -type f -print"))

    def test_requires_find_at_command_boundary(self):
        self.assertIsNone(self.check("grep -- -delete notes.txt"))
        self.assertIsNone(self.check("echo find -delete"))


class TestDestructiveFindWindows(TestCase):

    def test_piped_move(self):
        self.assertEqual(check_destructive_find("dir | move-item dest", windows=True), "piped to move/move-item")
        self.assertEqual(check_destructive_find("Get-ChildItem | Move-Item x", windows=True), "piped to move/move-item")

    def test_safe(self):
        self.assertIsNone(check_destructive_find("dir /s", windows=True))
        self.assertIsNone(check_destructive_find("Get-ChildItem", windows=True))


class TestNulRedirect(TestCase):

    def test_detects_redirects(self):
        for cmd in ("echo hi > nul", "cmd 2>nul", "cmd &> nul", "cmd >> NUL", "cmd > nul && echo ok"):
            self.assertTrue(has_nul_redirect(cmd), cmd)

    def test_ignores_other_targets(self):
        for cmd in ("cmd > /dev/null", "cmd > null.txt", "cmd > nul.txt", "echo nul", "cmd 2>&1"):
            self.assertFalse(has_nul_redirect(cmd), cmd)


class TestPatternTables:

    def test_tables_built_once(self):
        first = destructive_commands._get_tables(False)
        second = destructive_commands._get_tables(False)
        assert first is second

    def test_platform_tables_differ(self):
        assert destructive_commands._get_tables(False) is not destructive_commands._get_tables(True)

    def test_default_follows_host(self, monkeypatch):
        monkeypatch.setattr(destructive_commands, "IS_WINDOWS", True)
        assert is_destructive_delete("del file.txt")
        monkeypatch.setattr(destructive_commands, "IS_WINDOWS", False)
        assert not is_destructive_delete("del file.txt")

    @pytest.mark.parametrize("cmd", ["rm -rf build", "sudo rm x", "ls | xargs rm"])
    def test_idempotent(self, cmd):
        assert is_destructive_delete(cmd, windows=False) == is_destructive_delete(cmd, windows=False)


if __name__ == "__main__":
    unittest_main()
