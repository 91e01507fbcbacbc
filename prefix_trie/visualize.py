"""
Text dump of a trie for debugging.

    Root
    ├── [END]
    └── h
        └── e *
            ├── [END]
            └── y *
                └── [END]

Sentinel markers render as `[END]`; a unit line ends with ` *` when the path
to it is a stored string. Children are sorted, sentinel first, so the output
is stable across insertion orders.
"""

from .trie import END

BRANCH = "├── "
LAST = "└── "
PIPE = "│   "
BLANK = "    "


def _sorted_children(node):
  if not node.children:
    return []
  return sorted(node.children.items(), key=lambda kv: (kv[0] is not END, "" if kv[0] is END else kv[0]))


def render(trie):
  lines = ["Root"]
  stack = [(_sorted_children(trie.root), 0, "")]

  while stack:
    items, idx, indent = stack.pop()
    if idx >= len(items):
      continue
    stack.append((items, idx + 1, indent))

    key, child = items[idx]
    is_last = idx == len(items) - 1
    connector = LAST if is_last else BRANCH

    if key is END:
      lines.append(f"{indent}{connector}[END]")
      continue

    mark = " *" if child.is_terminal() else ""
    lines.append(f"{indent}{connector}{key}{mark}")
    stack.append((_sorted_children(child), 0, indent + (BLANK if is_last else PIPE)))

  return "\n".join(lines) + "\n"
