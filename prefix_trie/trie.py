"""
Prefix trie (unit-per-edge) with sentinel termination, branch compaction,
prefix enumeration and bounded fuzzy matching.

Key design choices:
- **Sentinel termination:** a stored string is marked by a child keyed by the
  module-level `END` marker rather than a flag on the node. Prefix walks and
  termination checks share the same child lookup.
- **Lazy children:** `TrieNode` uses `__slots__` and leaves `children=None`
  until the first child is attached. When the last child is detached the dict
  is dropped again.
- **Generic units:** any sequence of hashable units can be stored. `join`
  rebuilds an output value from a list of units (default `"".join`).
- **Iterative traversals:** enumeration, counting, statistics and fuzzy search
  all use explicit stacks, so very deep tries never hit the recursion limit.


Classes
-------
TrieNode
    Minimal node holding `key` and `children` (dict or None).
MatchResult
    Restartable iterable over the strings matching one prefix.
FuzzyMatch
    `(text, distance)` named tuple produced by `PrefixTrie.match_fuzzy`.
PrefixTrie
    Public API: insert, remove, contains, count, enumeration, fuzzy search,
    statistics.


Complexity (typical)
--------------------
- insert / remove / contains: O(L)
- count / enumerate prefix: O(L + size of the prefix subtree)
- fuzzy match: O(visited nodes * len(query)); pruning bounds visited nodes


Conventions & Notes
-------------------
- **Empty string:** never stored. `insert("")` and `remove("")` are no-ops,
  `contains("")` is always True.
- **Contains semantics:** `contains` answers "is this a prefix of something
  stored"; `contains_exact` answers "is this a stored string".
- **Enumeration order:** follows child insertion order. Callers needing a
  stable order should sort the output.
"""

import logging
import sys
from typing import NamedTuple

from .stats import TrieStats

log = logging.getLogger(__name__)


class _EndMarker:
  __slots__ = ()

  def __repr__(self):
    return "END"


END = _EndMarker()


class TrieNode:
  __slots__ = ("key", "children")

  def __init__(self, key=None):
    self.key = key
    self.children = None

  def child(self, key):
    children = self.children
    return None if children is None else children.get(key)

  def attach(self, key, node):
    if self.children is None:
      self.children = {key: node}
    else:
      self.children[key] = node
    return node

  def detach(self, key):
    children = self.children
    if children:
      children.pop(key, None)
      if not children:
        self.children = None

  def is_terminal(self):
    children = self.children
    return children is not None and END in children


class FuzzyMatch(NamedTuple):
  text: object
  distance: int


class MatchResult:
  """Restartable view over the strings that start with `prefix`.

  Every iteration re-runs the traversal, so the sequence reflects the trie at
  the time iteration starts. `len()` walks the subtree once to count
  terminators without building strings.
  """
  __slots__ = ("_trie", "_prefix")

  def __init__(self, trie, prefix):
    self._trie = trie
    self._prefix = prefix

  def __iter__(self):
    return self._trie.iter_prefix(self._prefix)

  def __len__(self):
    return self._trie.count(self._prefix)

  def __bool__(self):
    return len(self) > 0

  def __repr__(self):
    return f"MatchResult(prefix={self._prefix!r}, count={len(self)})"


class PrefixTrie:
  __slots__ = ("root", "normalize", "join")

  def __init__(self, words=None, *, normalize=None, join="".join):
    """Create an empty trie, optionally seeded from `words`.

    Parameters
    ----------
    words : Iterable | None
        Initial contents, inserted with `batch_insert`.
    normalize : Callable | None, default=None
        Applied to every input at the API boundary (e.g. `str.casefold`).
        None stores inputs unchanged.
    join : Callable[[list], object], default="".join
        Rebuilds an output value from its units. Use `bytes` for byte keys or
        `tuple` for arbitrary hashable units.
    """
    self.root = TrieNode()
    self.normalize = normalize
    self.join = join
    if words is not None:
      self.batch_insert(words)

  def _prepare(self, s):
    return s if self.normalize is None else self.normalize(s)

  def _prepare_batch(self, words, dedup=True, presorted=False):
    """Normalize, and optionally sort/deduplicate, a batch of inputs.

    Parameters
    ----------
    words : Iterable
        Incoming sequences to process.
    dedup : bool, default=True
        Remove duplicates within the batch.
    presorted : bool, default=False
        If True, `words` is already sorted under the trie's `normalize` rule.
        When True + dedup, a stable O(n) pass removes adjacent duplicates.

    Returns
    -------
    list
        Normalized (and possibly sorted/deduplicated) inputs ready for batch ops.
    """
    items = (self._prepare(w) for w in words)

    if not presorted:
      return sorted(set(items)) if dedup else sorted(items)

    if dedup:
      unique = []
      last = None
      for w in items:
        if w != last:
          unique.append(w)
          last = w
      return unique
    return list(items)

  def _walk(self, units):
    node = self.root
    for u in units:
      node = node.child(u)
      if node is None:
        return None
    return node

  # ------------------------------------------------------------------
  # Mutation
  # ------------------------------------------------------------------
  def insert(self, s):
    """Store `s`. Returns True if it was not stored before.

    Walks existing children for the shared prefix, creates one node per
    remaining unit, then attaches the `END` marker under the last node.
    Inserting the same string twice leaves the structure unchanged.
    """
    s = self._prepare(s)
    if not s:
      return False

    node = self.root
    i = 0
    n = len(s)
    while i < n:
      nxt = node.child(s[i])
      if nxt is None:
        break
      node = nxt
      i += 1

    while i < n:
      u = s[i]
      node = node.attach(u, TrieNode(u))
      i += 1

    if node.is_terminal():
      return False
    node.attach(END, TrieNode(END))
    return True

  def remove(self, s):
    """Remove `s` if stored, compacting the branch it leaves behind.

    Returns True when a stored string was removed. Missing strings and
    strings that are only prefixes of stored ones are left untouched.
    """
    return self._remove(self._prepare(s))

  def _remove(self, s):
    if not s:
      return False

    path = []
    node = self.root
    for u in s:
      nxt = node.child(u)
      if nxt is None:
        return False
      path.append((node, u))
      node = nxt

    if not node.is_terminal():
      return False
    node.detach(END)

    # A node is only ever deleted by its parent, once it is childless.
    for parent, u in reversed(path):
      if parent.children[u].children:
        break
      parent.detach(u)
    return True

  def batch_insert(self, words, *, dedup=True, presorted=False):
    """Bulk-insert many inputs using Longest Common Prefix (LCP) reuse.

    Parameters
    ----------
    words : Iterable
        Inputs to insert. Empty inputs are skipped.
    dedup, presorted
        See `_prepare_batch`.

    Returns
    -------
    int
        Number of newly stored strings.

    Notes
    -----
    Iterates inputs in sorted order and keeps the node path of the previous
    input, so a shared prefix is walked only once.
    """
    words = self._prepare_batch(words, dedup, presorted)

    prev = ()
    path = [self.root]
    added = 0

    for w in words:
      if not w:
        continue
      lp, lw = len(prev), len(w)
      i = 0
      while i < lp and i < lw and prev[i] == w[i]:
        i += 1

      path = path[:i + 1]
      node = path[-1]

      for u in w[i:]:
        nxt = node.child(u)
        if nxt is None:
          nxt = node.attach(u, TrieNode(u))
        path.append(nxt)
        node = nxt

      if not node.is_terminal():
        node.attach(END, TrieNode(END))
        added += 1
      prev = w

    log.debug("batch_insert: %d inputs, %d new", len(words), added)
    return added

  def batch_delete(self, words, *, dedup=True, presorted=False):
    """Bulk-delete many inputs with branch compaction.

    Returns
    -------
    tuple[int, int]
        (deleted_count, missing_count)
    """
    words = self._prepare_batch(words, dedup, presorted)

    deleted = 0
    missing = 0
    for w in words:
      if self._remove(w):
        deleted += 1
      else:
        missing += 1

    log.debug("batch_delete: %d deleted, %d missing", deleted, missing)
    return deleted, missing

  def clear(self):
    """Reset to an empty trie. The old node graph is released at once."""
    self.root = TrieNode()
    log.debug("trie cleared")

  # ------------------------------------------------------------------
  # Lookup
  # ------------------------------------------------------------------
  def prefix_search(self, prefix):
    """Return the node at the end of `prefix`, or None if the path is missing."""
    return self._walk(self._prepare(prefix))

  def contains(self, s):
    """Return True when `s` is a stored string or a prefix of one.

    The empty input is always contained.
    """
    return self.prefix_search(s) is not None

  def contains_exact(self, s):
    """Return True only when `s` itself is a stored string."""
    s = self._prepare(s)
    if not s:
      return False
    node = self._walk(s)
    return node is not None and node.is_terminal()

  def count(self, prefix=""):
    """Number of stored strings starting with `prefix` (0 if the path is missing)."""
    node = self.prefix_search(prefix)
    if node is None:
      return 0

    total = 0
    stack = [node]
    while stack:
      n = stack.pop()
      if n.key is END:
        total += 1
      elif n.children:
        stack.extend(n.children.values())
    return total

  def size(self):
    return self.count("")

  def __len__(self):
    return self.size()

  def __iter__(self):
    return self.iter_prefix("")

  # ------------------------------------------------------------------
  # Prefix enumeration
  # ------------------------------------------------------------------
  def iter_prefix(self, prefix="", k=None):
    """Yield stored strings that start with `prefix` using an iterative DFS.

    Parameters
    ----------
    prefix : sequence
        The prefix to enumerate from. Use "" to export the entire trie.
    k : int | None, default=None
        If None, yield all matches; otherwise, yield up to `k` matches.

    Yields
    ------
    object
        `join(units)` for every stored string under the prefix.

    Implementation details
    ----------------------
    - Each stack entry holds `(node, child_iterator, depth)`; on backtrack the
      shared unit buffer is truncated to `depth`, so sibling subtrees never
      see each other's suffixes.
    - Stack height is bounded by the trie depth, not by the number of matches.
    - `END` children emit the buffer and are not pushed.
    """
    prefix = self._prepare(prefix)
    node = self._walk(prefix)
    if node is None or (k is not None and k <= 0):
      return

    join = self.join
    yielded = 0
    buf = list(prefix)

    def child_iter(n):
      if not n.children:
        return iter(())
      return iter(list(n.children.items()))

    stack = [(child_iter(node), len(buf))]

    while stack:
      it, depth = stack[-1]
      try:
        key, child = next(it)
      except StopIteration:
        stack.pop()
        del buf[depth:]
        continue

      del buf[depth:]
      if key is END:
        yield join(buf)
        yielded += 1
        if k is not None and yielded >= k:
          return
        continue

      buf.append(key)
      stack.append((child_iter(child), len(buf)))

  def match(self, prefix, callback):
    """Invoke `callback(s)` once per stored string starting with `prefix`.

    Returns the number of callbacks made.
    """
    n = 0
    for s in self.iter_prefix(prefix):
      callback(s)
      n += 1
    return n

  def match_into(self, prefix, out):
    """Append every match for `prefix` to `out` (anything with `append`)."""
    self.match(prefix, out.append)
    return out

  def matches(self, prefix=""):
    return MatchResult(self, prefix)

  # ------------------------------------------------------------------
  # Fuzzy match
  # ------------------------------------------------------------------
  def match_fuzzy(self, query, max_distance):
    """Return stored strings within Levenshtein distance `max_distance` of `query`.

    Parameters
    ----------
    query : sequence
        Query units.
    max_distance : int
        Maximum number of single-unit insertions, deletions and substitutions.
        A negative bound matches nothing.

    Returns
    -------
    list[FuzzyMatch]
        `(text, distance)` pairs with the exact distance; unordered.

    Implementation details
    ----------------------
    Each stack entry carries the DP row for its node: `row[i]` is the distance
    between `query[:i]` and the path to that node. The root row is
    `0..len(query)`. A child row is derived from its parent row; when the row
    minimum exceeds `max_distance` no descendant can match and the subtree is
    skipped. An `END` child reports the parent's last cell.
    """
    if max_distance < 0:
      return []

    query = self._prepare(query)
    m = len(query)
    join = self.join
    results = []

    buf = []
    stack = [(self.root, 0, list(range(m + 1)))]

    while stack:
      node, depth, prev = stack.pop()
      if depth:
        del buf[depth - 1:]
        buf.append(node.key)
      if not node.children:
        continue

      for key, child in node.children.items():
        if key is END:
          if prev[m] <= max_distance:
            results.append(FuzzyMatch(join(buf), prev[m]))
          continue

        row = [prev[0] + 1]
        for i in range(1, m + 1):
          cost = 0 if query[i - 1] == key else 1
          row.append(min(row[i - 1] + 1, prev[i] + 1, prev[i - 1] + cost))

        if min(row) <= max_distance:
          stack.append((child, depth + 1, row))

    return results

  # ------------------------------------------------------------------
  # Diagnostics
  # ------------------------------------------------------------------
  def get_stats(self):
    """Collect structural statistics in one read-only DFS pass.

    Returns
    -------
    TrieStats
        String/node counts, depth summary, average branching factor over
        internal non-sentinel nodes and an approximate memory footprint.

    Complexity
    ----------
    O(#nodes) time, O(depth) extra space.
    """
    num_nodes = 0
    num_strings = 0
    max_depth = 0
    total_depth = 0
    internal = 0
    total_deg = 0
    memory = 0

    stack = [(self.root, 0)]
    while stack:
      node, depth = stack.pop()
      num_nodes += 1
      memory += sys.getsizeof(node)

      if node.key is END:
        # sentinel depth is the parent's: it consumes no unit
        num_strings += 1
        total_depth += depth - 1
        max_depth = max(max_depth, depth - 1)
        continue

      children = node.children
      if children:
        memory += sys.getsizeof(children)
        internal += 1
        total_deg += len(children)
        for child in children.values():
          stack.append((child, depth + 1))

    return TrieStats(
      num_strings=num_strings,
      num_nodes=num_nodes,
      max_depth=max_depth,
      avg_depth=(total_depth / num_strings) if num_strings else 0.0,
      avg_branching_factor=(total_deg / internal) if internal else 0.0,
      memory_bytes=memory,
    )

  def count_nodes(self, get_avg_branch_factor=False):
    """Return total node count, or average branching factor over internal nodes."""
    stats = self.get_stats()
    if get_avg_branch_factor:
      return stats.avg_branching_factor
    return stats.num_nodes

  def visualize(self):
    from .visualize import render
    return render(self)

  # ------------------------------------------------------------------
  # Serialization
  # ------------------------------------------------------------------
  def to_json(self):
    from .serialization import dumps
    return dumps(self)

  def from_json(self, payload):
    """Replace the contents with the strings in `payload`. Returns success."""
    from .serialization import load_into
    return load_into(self, payload)
