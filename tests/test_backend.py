import threading
import unittest
from unittest.mock import MagicMock

from breed_scraper.backend import ExtractionWorkerPool, ResultCollection
from breed_scraper.errors import ExtractionFailure, FetchError
from fake_site import FakeFetcher, breed_html

def breed_url(i):
    return f"http://www.purina.com/cats/cat-breeds/breed-{i}"

def breed_site(count, broken=()):
    pages = {}
    for i in range(count):
        if i in broken:
            pages[breed_url(i)] = "<html><body><p>Moved</p></body></html>"
        else:
            pages[breed_url(i)] = breed_html(f"Breed {i} Cat Breed", [("Size", "Medium"), ("Coat", "Short")])
    return pages

class ResultCollectionTest(unittest.TestCase):
    def test_concurrent_appends_are_not_lost(self):
        results = ResultCollection()

        def writer(offset):
            for i in range(500):
                results.append({"name": f"{offset}-{i}"})

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(results), 4000)
        self.assertEqual(len({r["name"] for r in results}), 4000)

    def test_snapshot_is_a_copy(self):
        results = ResultCollection()
        results.append({"name": "a"})
        snap = results.snapshot()
        snap.append({"name": "b"})
        self.assertEqual(len(results), 1)

class ExtractionWorkerPoolTest(unittest.TestCase):
    def test_in_flight_never_exceeds_pool_size(self):
        for pool_size in (1, 3, 8):
            with self.subTest(pool_size=pool_size):
                fetcher = FakeFetcher(breed_site(20), delay=0.02)
                results = ResultCollection()
                pool = ExtractionWorkerPool(fetcher, suffixes=("Cat Breed", "Cat"), pool_size=pool_size)
                failures = pool.run([breed_url(i) for i in range(20)], results)
                self.assertEqual(failures, [])
                self.assertLessEqual(fetcher.max_in_flight, pool_size)
                self.assertGreaterEqual(fetcher.max_in_flight, 1)
                self.assertEqual(len(results), 20)

    def test_records_complete_regardless_of_order(self):
        fetcher = FakeFetcher(breed_site(10), delay=0.005)
        results = ResultCollection()
        ExtractionWorkerPool(fetcher, suffixes=("Cat Breed", "Cat")).run([breed_url(i) for i in range(10)], results)
        self.assertEqual(
            sorted(r["name"] for r in results),
            sorted(f"Breed {i}" for i in range(10)),
        )
        self.assertTrue(all(r == {"name": r["name"], "size": "Medium", "coat": "Short"} for r in results))

    def test_failures_are_isolated(self):
        fetcher = FakeFetcher(breed_site(6, broken={2}))
        links = [breed_url(i) for i in range(6)] + ["http://www.purina.com/missing"]
        results = ResultCollection()
        failures = ExtractionWorkerPool(fetcher, pool_size=2).run(links, results)
        self.assertEqual(len(results), 5)
        self.assertEqual(sorted(f.url for f in failures), sorted([breed_url(2), "http://www.purina.com/missing"]))
        self.assertEqual(
            {type(f.error) for f in failures},
            {ExtractionFailure, FetchError},
        )
        self.assertTrue(all(handle.closed for handle in fetcher.handles))

    def test_duplicate_links_processed_twice(self):
        fetcher = FakeFetcher(breed_site(2))
        results = ResultCollection()
        ExtractionWorkerPool(fetcher).run([breed_url(0), breed_url(1), breed_url(0)], results)
        self.assertEqual(len(results), 3)

    def test_fail_fast_raises_and_keeps_collected_records(self):
        fetcher = FakeFetcher(breed_site(30, broken={0}), delay=0.01)
        results = ResultCollection()
        pool = ExtractionWorkerPool(fetcher, pool_size=1, fail_fast=True)
        with self.assertRaises(ExtractionFailure):
            pool.run([breed_url(i) for i in range(30)], results)
        # queued links were cancelled, so far fewer than 30 pages were requested
        self.assertLess(len(fetcher.requested), 30)
        self.assertEqual(len(results), len(fetcher.requested) - 1)

    def test_unexpected_error_propagates(self):
        task = MagicMock(side_effect=KeyError("boom"))
        pool = ExtractionWorkerPool(None, task=task)
        with self.assertRaises(KeyError):
            pool.run(["u1"], ResultCollection())

    def test_custom_task_receives_fetcher_url_and_suffixes(self):
        task = MagicMock(return_value={"name": "X"})
        fetcher = object()
        results = ResultCollection()
        ExtractionWorkerPool(fetcher, suffixes=["Dog"], task=task).run(["u1"], results)
        task.assert_called_once_with(fetcher, "u1", ("Dog",))
        self.assertEqual(results.snapshot(), [{"name": "X"}])

    def test_invalid_pool_size(self):
        with self.assertRaises(ValueError):
            ExtractionWorkerPool(None, pool_size=0)

    def test_empty_link_list(self):
        results = ResultCollection()
        self.assertEqual(ExtractionWorkerPool(FakeFetcher({})).run([], results), [])
        self.assertEqual(len(results), 0)

if __name__ == "__main__":
    unittest.main()
