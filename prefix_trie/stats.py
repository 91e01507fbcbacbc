from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class TrieStats:
  """
  Snapshot returned by `PrefixTrie.get_stats`.
      num_strings: int, stored strings (sentinel markers)
      num_nodes: int, every node including the root and sentinel markers
      max_depth: int, longest stored string, in units
      avg_depth: float, mean stored-string length, in units
      avg_branching_factor: float, mean out-degree of internal non-sentinel nodes
      memory_bytes: int, `sys.getsizeof` estimate of nodes and child dicts
  """
  num_strings: int = 0
  num_nodes: int = 1
  max_depth: int = 0
  avg_depth: float = 0.0
  avg_branching_factor: float = 0.0
  memory_bytes: int = 0

  def as_dict(self):
    return asdict(self)
