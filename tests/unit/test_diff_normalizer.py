from __future__ import annotations

import textwrap

from treepatch.tools.normalize import normalize_diff_paths


def test_absolute_paths_become_portable_prefixes() -> None:
    diff = textwrap.dedent(
        """
        diff -ruN /tmp/snap/health-13.3.1/ios/Foo.swift /home/dev/cache/health-13.3.1/ios/Foo.swift
        --- /tmp/snap/health-13.3.1/ios/Foo.swift\t2026-01-01 00:00:00
        +++ /home/dev/cache/health-13.3.1/ios/Foo.swift\t2026-01-01 00:00:00
        @@ -1,3 +1,3 @@
         line1
        -line2
        +line2_modified
         line3
        """
    ).strip()

    result = normalize_diff_paths(diff, "/tmp/snap/health-13.3.1", "/home/dev/cache/health-13.3.1")

    assert "diff -ruN a/ios/Foo.swift b/ios/Foo.swift" in result
    assert "--- a/ios/Foo.swift\t2026-01-01 00:00:00" in result
    assert "+++ b/ios/Foo.swift\t2026-01-01 00:00:00" in result
    assert "/tmp/" not in result
    assert "/home/" not in result


def test_hunk_bodies_are_untouched() -> None:
    diff = "--- /tmp/a/file.txt\n+++ /cache/b/file.txt\n@@ -1 +1 @@\n-/tmp/a/file.txt\n+/cache/b/file.txt"

    result = normalize_diff_paths(diff, "/tmp/a", "/cache/b")

    assert result.splitlines() == [
        "--- a/file.txt",
        "+++ b/file.txt",
        "@@ -1 +1 @@",
        "-/tmp/a/file.txt",
        "+/cache/b/file.txt",
    ]


def test_trailing_slash_on_bases_is_accepted() -> None:
    diff = "--- /tmp/pkg/file.txt\t2026-01-01\n+++ /cache/pkg/file.txt\t2026-01-01"

    result = normalize_diff_paths(diff, "/tmp/pkg/", "/cache/pkg/")

    assert "--- a/file.txt" in result
    assert "+++ b/file.txt" in result
