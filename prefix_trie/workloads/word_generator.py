import random
import math
import string
from collections import defaultdict

from faker.providers.lorem.en_US import Provider as LoremProvider


## Vocabulary comes from Faker's English word list; the broad list adds common
## suffixed forms so that many words share a stem
SUFFIXES = ("s", "ed", "ing", "er", "ly", "ness", "able")

WORDS_COMMON = list(dict.fromkeys(w.lower() for w in LoremProvider.word_list if w.isalpha()))
WORDS_BROAD = list(dict.fromkeys(WORDS_COMMON + [w + s for w in WORDS_COMMON for s in SUFFIXES]))


## Created dictionary for words with identical first two letters
## This is to generate words with common prefixes
prefix_bucket = defaultdict(list)
for word in WORDS_BROAD:
  prefix_bucket[word[:2]].append(word)
prefixes = list(prefix_bucket.keys())
prefix_weights = [len(prefix_bucket[p]) for p in prefixes]


def generate_random_words(num_words, seed=None, unique=False):
  """
  Return n random words from WORDS_COMMON.
  - unique=False: sample with replacement (fast, allows duplicates)
  - unique=True: sample without replacement (requires n <= len(WORDS_COMMON))
  """
  word_list = WORDS_COMMON
  if num_words < 1 or (unique is True and num_words > len(word_list)):
    raise ValueError(f"num_words must be between 1 and {len(word_list)}")
  rng = random.Random(seed)
  if unique:
    return rng.sample(word_list, num_words)
  return rng.choices(word_list, k=num_words)


def _p_eff_log(x, max_mean=100) -> float:
  # Logarithmic mapping of prefix frequency to effective prefix frequency
  if x < 0 or x > 1:
    raise ValueError("Prefix frequency must be between 0 and 1")
  x = max(0.0, min(0.999999, x))
  k = math.log(max_mean)
  p = 1.0 - math.exp(-k * x)
  return min(p, 0.999999)


def gen_words_with_prefix_freq(num_words, prefix_freq=0.0, seed=None, unique=False):
  """Generates a list of words with a given prefix frequency.
  A higher prefix_freq means more consecutive words share a two-letter prefix.
  Prefix frequency is applied logarithmically
  prefix_freq: 0 -> 0.999...
  """
  prefix_freq = _p_eff_log(prefix_freq)

  word_list = WORDS_BROAD
  max_unique = int(len(word_list) // 1.1)
  if num_words < 1 or (unique is True and num_words > max_unique):
    raise ValueError(f"num_words must be between 1 and {max_unique}")
  rng = random.Random(seed)

  rand_words_list = []
  seen = set()
  exhausted = set()

  while len(rand_words_list) < num_words:
    prefix = rng.choices(prefixes, weights=prefix_weights)[0]
    options = prefix_bucket[prefix]
    sample_word = rng.choice(options)
    if unique:
      if prefix in exhausted or sample_word in seen:
        continue
      seen.add(sample_word)
    rand_words_list.append(sample_word)

    trigger = rng.random()
    while trigger < prefix_freq and len(rand_words_list) < num_words:
      new_word = rng.choice(options)
      if unique:
        remaining = [w for w in options if w not in seen]
        if not remaining:
          exhausted.add(prefix)
          break
        if new_word in seen:
          new_word = rng.choice(remaining)
        seen.add(new_word)
      rand_words_list.append(new_word)
      trigger = rng.random()
  return rand_words_list


def mutate(word, edits, rng, alphabet=string.ascii_lowercase):
  """Apply `edits` random single-unit edits (insert / delete / substitute).
  The result is within Levenshtein distance `edits` of `word`."""
  chars = list(word)
  for _ in range(edits):
    op = rng.choice(("insert", "delete", "substitute")) if chars else "insert"
    if op == "insert":
      chars.insert(rng.randint(0, len(chars)), rng.choice(alphabet))
    elif op == "delete":
      del chars[rng.randrange(len(chars))]
    else:
      chars[rng.randrange(len(chars))] = rng.choice(alphabet)
  return "".join(chars)


def make_typos(words, max_edits=1, seed=None, alphabet=string.ascii_lowercase):
  """Return (source, query) pairs where each query is a misspelling of its
  source within `max_edits` edits. Used as fuzzy-match workloads."""
  if max_edits < 0:
    raise ValueError("max_edits must be non-negative")
  rng = random.Random(seed)
  return [(w, mutate(w, rng.randint(0, max_edits), rng, alphabet)) for w in words]
