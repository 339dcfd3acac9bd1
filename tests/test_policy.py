#!/usr/bin/env python3
"""
Unit tests for policy.py reason builders.
"""

import sys
from pathlib import Path
from unittest import TestCase, main as unittest_main

# Add hooks to path
sys.path.insert(0, str(Path(__file__).parent.parent / "hooks"))

import policy
from policy import (
    Ambiguous,
    DangerousPathMatch,
    Matching,
    Mismatch,
    Ok,
    PackageManager,
    SuppressionCheck,
    dangerous_path_reason,
    destructive_find_reason,
    package_manager_reason,
    suppression_reason,
)


class TestFacadeExports(TestCase):

    def test_all_names_resolve(self):
        for name in policy.__all__:
            self.assertTrue(hasattr(policy, name), name)


class TestDangerousPathReason(TestCase):

    def setUp(self):
        self.match = DangerousPathMatch(matched_path="~/", command_type="trash")

    def test_confirm(self):
        reason = dangerous_path_reason(self.match)
        self.assertIn("trash command targeting protected path '~/'", reason)
        self.assertTrue(reason.endswith("Please confirm this operation."))

    def test_deny(self):
        reason = dangerous_path_reason(self.match, confirm=False)
        self.assertTrue(reason.endswith("Please avoid this operation."))


class TestDestructiveFindReason(TestCase):

    def test_confirm(self):
        reason = destructive_find_reason("find with -delete option")
        self.assertIn("find with -delete option", reason)
        self.assertIn("Please confirm", reason)

    def test_deny(self):
        reason = destructive_find_reason("find with -delete option", confirm=False)
        self.assertIn("irreversibly", reason)


class TestPackageManagerReason(TestCase):

    def test_mismatch(self):
        result = Mismatch(command_pm=PackageManager.NPM, expected_pm=PackageManager.PNPM)
        self.assertEqual(
            package_manager_reason(result),
            "Package manager mismatch: This project uses pnpm (detected pnpm-lock.yaml), "
            "but you are trying to use npm. Please use pnpm instead.",
        )

    def test_bun_names_primary_lock_file(self):
        result = Mismatch(command_pm=PackageManager.YARN, expected_pm=PackageManager.BUN)
        self.assertIn("(detected bun.lockb)", package_manager_reason(result))

    def test_other_results_have_no_reason(self):
        ambiguous = Ambiguous(command_pm=PackageManager.NPM,
                              detected_pms=(PackageManager.NPM, PackageManager.YARN))
        for result in (Ok(), Matching(), ambiguous):
            self.assertIsNone(package_manager_reason(result))


class TestSuppressionReason(TestCase):

    def test_ok_allowed(self):
        self.assertIsNone(suppression_reason(SuppressionCheck.OK))

    def test_allow(self):
        reason = suppression_reason(SuppressionCheck.HAS_ALLOW)
        self.assertIn("#[allow(...)]", reason)
        self.assertIn("Fix the underlying issue", reason)

    def test_expect(self):
        reason = suppression_reason(SuppressionCheck.HAS_EXPECT)
        self.assertIn("#[expect(...)] or #![expect(...)]", reason)

    def test_both(self):
        reason = suppression_reason(SuppressionCheck.HAS_BOTH)
        self.assertIn("#[allow(...)] or #[expect(...)]", reason)

    def test_expect_mode_denies_allow_only(self):
        self.assertIn("Use #[expect(...)] instead", suppression_reason(SuppressionCheck.HAS_ALLOW, expect=True))
        self.assertIn("Use #[expect(...)] instead", suppression_reason(SuppressionCheck.HAS_BOTH, expect=True))
        self.assertIsNone(suppression_reason(SuppressionCheck.HAS_EXPECT, expect=True))
        self.assertIsNone(suppression_reason(SuppressionCheck.OK, expect=True))

    def test_additional_context_appended(self):
        reason = suppression_reason(SuppressionCheck.HAS_ALLOW, additional_context="See LINTS.md.")
        self.assertTrue(reason.endswith("warning. See LINTS.md."))

    def test_additional_context_ignored_when_allowed(self):
        self.assertIsNone(suppression_reason(SuppressionCheck.OK, additional_context="x"))


if __name__ == "__main__":
    unittest_main()
