import unittest
from unittest.mock import patch

from breed_scraper import category
from breed_scraper.errors import PaginationNotFound
from fake_site import CAT_ROOT, FakeFetcher, listing_html

# Three listing pages; "/cats/siamese" appears on pages 0 and 2.
PAGE_LINKS = {
    0: ["/cats/abyssinian", "/cats/bengal", "/cats/siamese"],
    1: ["/cats/birman", "/cats/chartreux"],
    2: ["/cats/siamese", "/cats/sphynx"],
}

def cat_site(last_page=2):
    pages = {CAT_ROOT: listing_html(PAGE_LINKS[0], last_page=last_page)}
    for index, hrefs in PAGE_LINKS.items():
        pages[f"{CAT_ROOT}?page={index}"] = listing_html(hrefs, last_page=last_page, hrefless=1)
    return pages

class PaginationTest(unittest.TestCase):
    def test_reads_last_page_index(self):
        fetcher = FakeFetcher(cat_site(last_page=7))
        self.assertEqual(category.find_last_page_index(fetcher, CAT_ROOT), 7)
        self.assertEqual(fetcher.requested, [CAT_ROOT])

    def test_single_page_category(self):
        fetcher = FakeFetcher({CAT_ROOT: listing_html([], last_page=0)})
        self.assertEqual(category.find_last_page_index(fetcher, CAT_ROOT), 0)

    def test_missing_control_raises(self):
        fetcher = FakeFetcher({CAT_ROOT: listing_html(["/cats/a"])})
        with self.assertRaises(PaginationNotFound) as ctx:
            category.find_last_page_index(fetcher, CAT_ROOT)
        self.assertEqual(ctx.exception.url, CAT_ROOT)

    def test_unusable_href_raises(self):
        for html in (
            '<a class="paginationSkip_last">Last</a>',
            '<a class="paginationSkip_last" href="?page=last">Last</a>',
            '<a class="paginationSkip_last" href="/cats/cat-breeds">Last</a>',
        ):
            with self.subTest(html=html):
                fetcher = FakeFetcher({CAT_ROOT: f"<html><body>{html}</body></html>"})
                with self.assertRaises(PaginationNotFound):
                    category.find_last_page_index(fetcher, CAT_ROOT)

    def test_page_closed_after_lookup(self):
        fetcher = FakeFetcher(cat_site())
        category.find_last_page_index(fetcher, CAT_ROOT)
        self.assertTrue(all(handle.closed for handle in fetcher.handles))

class LinkCollectionTest(unittest.TestCase):
    def test_link_count_is_sum_over_pages(self):
        fetcher = FakeFetcher(cat_site())
        links = category.collect_detail_links(fetcher, CAT_ROOT, 2)
        self.assertEqual(len(links), sum(len(hrefs) for hrefs in PAGE_LINKS.values()))

    def test_links_follow_page_order_and_are_absolute(self):
        fetcher = FakeFetcher(cat_site(), delay=0.01)
        links = category.collect_detail_links(fetcher, CAT_ROOT, 2)
        expected = [f"http://www.purina.com{href}" for i in range(3) for href in PAGE_LINKS[i]]
        self.assertEqual(links, expected)

    def test_every_page_fetched_once(self):
        fetcher = FakeFetcher(cat_site())
        category.collect_detail_links(fetcher, CAT_ROOT, 2)
        self.assertEqual(sorted(fetcher.requested), sorted(f"{CAT_ROOT}?page={i}" for i in range(3)))

    def test_repeated_links_kept_by_default(self):
        fetcher = FakeFetcher(cat_site())
        links = category.collect_detail_links(fetcher, CAT_ROOT, 2)
        self.assertEqual(links.count("http://www.purina.com/cats/siamese"), 2)

    def test_dedupe_keeps_first_occurrence(self):
        fetcher = FakeFetcher(cat_site())
        links = category.collect_detail_links(fetcher, CAT_ROOT, 2, dedupe=True)
        self.assertEqual(links.count("http://www.purina.com/cats/siamese"), 1)
        self.assertEqual(links.index("http://www.purina.com/cats/siamese"), 2)
        self.assertEqual(len(links), 6)

    def test_absolute_hrefs_kept(self):
        fetcher = FakeFetcher({f"{CAT_ROOT}?page=0": listing_html(["https://cdn.example.com/cats/x", "cats/y"])})
        links = category.collect_detail_links(fetcher, CAT_ROOT, 0)
        self.assertEqual(links, ["https://cdn.example.com/cats/x", "http://www.purina.com/cats/y"])

    def test_bounded_listing_pool(self):
        fetcher = FakeFetcher(cat_site(), delay=0.02)
        category.collect_detail_links(fetcher, CAT_ROOT, 2, max_workers=1)
        self.assertEqual(fetcher.max_in_flight, 1)

    def test_negative_index_rejected(self):
        with self.assertRaises(ValueError):
            category.collect_detail_links(FakeFetcher({}), CAT_ROOT, -1)

    @patch("breed_scraper.category.extract_links_from_page", side_effect=lambda fetcher, url: [url[-1]])
    def test_uses_page_query_parameter(self, mock_extract):
        links = category.collect_detail_links(None, CAT_ROOT, 3, base_url="http://h")
        self.assertEqual(links, ["http://h/0", "http://h/1", "http://h/2", "http://h/3"])
        self.assertEqual(mock_extract.call_count, 4)

if __name__ == "__main__":
    unittest.main()
