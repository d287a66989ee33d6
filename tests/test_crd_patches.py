#!/usr/bin/env python3
"""
Unit tests for the CRD conversion patch resolution.
"""

import os
import tempfile
import unittest

from helm_chart_gen.crd_patches import (
    extract_conversion_spec,
    extract_kind_and_group_from_filename,
    get_crd_patch_content,
)
from tests.fixtures import CRD_CONVERSION_PATCH, write_file


class TestExtractKindAndGroup(unittest.TestCase):

    def test_crd_base_file_name(self):
        kind, group = extract_kind_and_group_from_filename("batch.tutorial.kubebuilder.io_cronjobs.yaml")
        self.assertEqual(kind, "cronjobs")
        self.assertEqual(group, "batch")

    def test_group_without_domain(self):
        self.assertEqual(extract_kind_and_group_from_filename("foo_bars.yaml"), ("bars", "foo"))

    def test_name_without_separator(self):
        self.assertEqual(extract_kind_and_group_from_filename("cronjobs.yaml"), ("", ""))


class TestGetCrdPatchContent(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.patches_dir = os.path.join(self.tmp.name, "config", "crd", "patches")

    def tearDown(self):
        self.tmp.cleanup()

    def test_group_specific_patch_wins(self):
        """A patch naming group and kind is preferred over a kind-only patch."""
        write_file(os.path.join(self.patches_dir, "webhook_in_foo_bar.yaml"), "group: foo\n")
        write_file(os.path.join(self.patches_dir, "webhook_in_bar.yaml"), "kind only\n")

        content, found = get_crd_patch_content("bar", "foo", self.patches_dir)

        self.assertTrue(found)
        self.assertEqual(content, "group: foo\n")

    def test_kind_only_patch_is_fallback(self):
        write_file(os.path.join(self.patches_dir, "webhook_in_cronjobs.yaml"), CRD_CONVERSION_PATCH)

        content, found = get_crd_patch_content("cronjobs", "batch", self.patches_dir)

        self.assertTrue(found)
        self.assertEqual(content, CRD_CONVERSION_PATCH)

    def test_first_match_in_lexicographic_order(self):
        write_file(os.path.join(self.patches_dir, "webhook_z_cronjobs.yaml"), "z\n")
        write_file(os.path.join(self.patches_dir, "webhook_a_cronjobs.yaml"), "a\n")

        content, found = get_crd_patch_content("cronjobs", "batch", self.patches_dir)

        self.assertTrue(found)
        self.assertEqual(content, "a\n")

    def test_non_webhook_patches_are_ignored(self):
        write_file(os.path.join(self.patches_dir, "cainjection_in_cronjobs.yaml"), "ca\n")

        self.assertEqual(get_crd_patch_content("cronjobs", "batch", self.patches_dir), ("", False))

    def test_missing_patches_directory(self):
        self.assertEqual(get_crd_patch_content("cronjobs", "batch", self.patches_dir), ("", False))

    def test_empty_kind_never_matches(self):
        write_file(os.path.join(self.patches_dir, "webhook_in_cronjobs.yaml"), CRD_CONVERSION_PATCH)

        self.assertEqual(get_crd_patch_content("", "", self.patches_dir), ("", False))


class TestExtractConversionSpec(unittest.TestCase):

    def test_fragment_starts_at_conversion_key(self):
        fragment = extract_conversion_spec(CRD_CONVERSION_PATCH)

        self.assertTrue(fragment.startswith("conversion:\n    strategy: Webhook\n"))
        self.assertTrue(fragment.endswith("      - v1\n"))

    def test_patch_without_conversion(self):
        self.assertEqual(extract_conversion_spec("spec:\n  group: foo\n"), "")


if __name__ == '__main__':
    unittest.main(verbosity=2)
