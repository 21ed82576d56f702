import unittest

from order_invoices.pagination import estimate_page_count, paginate_items, totals_need_new_page


class PaginationTests(unittest.TestCase):
    def test_estimate_page_count_boundary_values(self) -> None:
        self.assertEqual(estimate_page_count(0), 1)
        self.assertEqual(estimate_page_count(11), 1)
        self.assertEqual(estimate_page_count(12), 2)
        self.assertEqual(estimate_page_count(17), 2)
        self.assertEqual(estimate_page_count(18), 2)
        self.assertEqual(estimate_page_count(38), 2)
        self.assertEqual(estimate_page_count(39), 3)
        self.assertEqual(estimate_page_count(44), 3)
        self.assertEqual(estimate_page_count(45), 3)

    def test_paginate_items_preserves_order(self) -> None:
        chunks = paginate_items(list(range(45)))
        self.assertEqual([len(chunk) for chunk in chunks], [17, 27, 1])
        self.assertEqual([value for chunk in chunks for value in chunk], list(range(45)))

    def test_empty_invoice_still_has_first_page(self) -> None:
        chunks = paginate_items([])
        self.assertEqual(chunks, [[]])
        self.assertFalse(totals_need_new_page(chunks))


if __name__ == "__main__":
    unittest.main()
