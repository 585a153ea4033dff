# SPDX-License-Identifier: LGPL-3.0-or-later
import unittest

from vmi2domain.core.list_utils import dedup_preserve_order


class TestDedupPreserveOrder(unittest.TestCase):
    def test_keeps_first_occurrence(self):
        self.assertEqual(dedup_preserve_order(["b", "a", "b", "c", "a"]), ["b", "a", "c"])

    def test_empty(self):
        self.assertEqual(dedup_preserve_order([]), [])

    def test_key(self):
        items = [("tcp", 80), ("TCP", 80), ("udp", 80)]
        result = dedup_preserve_order(items, key=lambda p: (p[0].upper(), p[1]))
        self.assertEqual(result, [("tcp", 80), ("udp", 80)])

    def test_accepts_generator(self):
        self.assertEqual(dedup_preserve_order(i % 3 for i in range(7)), [0, 1, 2])


if __name__ == "__main__":
    unittest.main()
