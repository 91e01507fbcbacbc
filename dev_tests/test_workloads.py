import unittest
from collections import Counter

from prefix_trie import PrefixTrie
from prefix_trie.workloads import IPConfig, IPGenerator, WorkLoad
from prefix_trie.workloads.ip_generator import to_bits, to_octets
from prefix_trie.workloads.word_generator import (
    WORDS_COMMON,
    gen_words_with_prefix_freq,
    generate_random_words,
    make_typos,
)


# ---------- Helpers for prefix clustering metrics ----------
def two_prefix(w: str) -> str:
    return w[:2] if len(w) >= 2 else w


def neighbor_same_prefix_ratio(words):
    """Fraction of positions i>0 where prefix[i] == prefix[i-1]."""
    if len(words) < 2:
        return 0.0
    num_same = 0
    prev = two_prefix(words[0])
    for w in words[1:]:
        p = two_prefix(w)
        if p == prev:
            num_same += 1
        prev = p
    return num_same / (len(words) - 1)


def levenshtein(a, b):
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        row = [i]
        for j, cb in enumerate(b, 1):
            row.append(min(row[j - 1] + 1, prev[j] + 1, prev[j - 1] + (ca != cb)))
        prev = row
    return prev[-1]


# ---------------------------------- Tests ----------------------------------
class TestGenerateRandomWords(unittest.TestCase):
    def test_length_and_types(self):
        words = generate_random_words(2_000, seed=123)
        self.assertEqual(len(words), 2_000)
        self.assertTrue(all(isinstance(w, str) and len(w) > 0 for w in words))

    def test_reproducibility(self):
        a = generate_random_words(500, seed=999)
        b = generate_random_words(500, seed=999)
        c = generate_random_words(500, seed=1000)
        self.assertEqual(a, b)
        self.assertNotEqual(a, c)

    def test_uniqueness(self):
        n = min(200, len(WORDS_COMMON))
        words = generate_random_words(n, seed=42, unique=True)
        self.assertEqual(len(set(words)), n)

    def test_unique_overflow_raises(self):
        with self.assertRaises(ValueError):
            generate_random_words(len(WORDS_COMMON) + 1, seed=1, unique=True)
        with self.assertRaises(ValueError):
            generate_random_words(0)


class TestPrefixFrequencyGenerator(unittest.TestCase):
    def test_clustering_increases(self):
        low = gen_words_with_prefix_freq(5_000, prefix_freq=0.0, seed=123)
        high = gen_words_with_prefix_freq(5_000, prefix_freq=0.8, seed=123)
        self.assertEqual(len(low), 5_000)
        self.assertEqual(len(high), 5_000)
        self.assertGreater(neighbor_same_prefix_ratio(high), neighbor_same_prefix_ratio(low) + 0.15)

    def test_unique_mode_no_duplicates(self):
        words = gen_words_with_prefix_freq(1_000, prefix_freq=0.2, seed=9, unique=True)
        self.assertEqual(len(set(words)), 1_000)

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            gen_words_with_prefix_freq(0, prefix_freq=0.3)
        with self.assertRaises(ValueError):
            gen_words_with_prefix_freq(10, prefix_freq=1.5)


class TestTypos(unittest.TestCase):
    def test_typos_within_bound(self):
        words = generate_random_words(300, seed=5)
        pairs = make_typos(words, max_edits=2, seed=5)
        self.assertEqual([src for src, _ in pairs], words)
        self.assertTrue(all(levenshtein(src, q) <= 2 for src, q in pairs))

    def test_typos_found_by_fuzzy_match(self):
        words = generate_random_words(300, seed=11)
        t = PrefixTrie(words)
        for src, query in make_typos(words, max_edits=1, seed=11):
            self.assertIn(src, dict(t.match_fuzzy(query, 1)))

    def test_negative_edits_raises(self):
        with self.assertRaises(ValueError):
            make_typos(["abc"], max_edits=-1)


class TestIPGenerator(unittest.TestCase):
    def test_config_validation(self):
        with self.assertRaises(ValueError):
            IPConfig(private_weights={'a': 1.0})
        with self.assertRaises(ValueError):
            IPConfig(min_prefix_len=20, max_prefix_len=10)
        with self.assertRaises(ValueError):
            IPConfig(public_share=1.5)

    def test_bit_helpers(self):
        self.assertEqual(to_bits("10.0.0.1"), "00001010" + "0" * 16 + "00000001")
        self.assertEqual(to_octets("192.168.0.1"), (192, 168, 0, 1))

    def test_batch_and_routes(self):
        gen = IPGenerator(IPConfig(seed=3, min_prefix_len=8, max_prefix_len=16))
        ips = gen.batch(100)
        self.assertEqual(len(ips), 100)
        routes = IPGenerator(IPConfig(seed=3, min_prefix_len=8, max_prefix_len=16)).route_prefixes(100)
        self.assertTrue(all(8 <= len(r) <= 16 and set(r) <= {"0", "1"} for r in routes))
        with self.assertRaises(ValueError):
            gen.batch(0)

    def test_longest_prefix_lookup(self):
        routes = ["00001010", "0000101000000000", "11000000"]
        t = PrefixTrie(routes)
        key = to_bits("10.0.3.4")
        covering = [key[:i] for i in range(len(key) + 1) if t.contains_exact(key[:i])]
        self.assertEqual(covering, ["00001010", "0000101000000000"])


class TestWorkLoad(unittest.TestCase):
    def test_facade(self):
        wl = WorkLoad(seed=1)
        self.assertEqual(len(wl.words(50)), 50)
        self.assertEqual(len(wl.words(50, p_freq=0.5)), 50)
        self.assertEqual(len(wl.ips(5)), 5)
        self.assertEqual(len(wl.routes(5)), 5)
        self.assertEqual(len(wl.typos(["abc", "def"])), 2)
        self.assertEqual(wl.words(20), WorkLoad(seed=1).words(20))

    def test_counter_sanity(self):
        words = WorkLoad(seed=2).words(1_000)
        self.assertLessEqual(len(Counter(words)), len(WORDS_COMMON))


if __name__ == "__main__":
    unittest.main(verbosity=2)
