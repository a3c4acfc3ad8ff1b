"""Dependency graph for pkgmgr.

:class:`DependencyGraph` is a small directed graph keyed by package name.
It owns the two graph algorithms the package manager needs:

1. **Cycle detection:** an iterative depth-first search with three-colour
   marking. An explicit stack replaces recursion so that very deep or
   adversarial graphs cannot exhaust the interpreter's call stack.
2. **Tree rendering:** a depth-first listing indented by depth, in which
   a node that was already expanded is printed once more as a leaf with a
   ``(*)`` marker instead of being expanded again.

Typical usage::

    graph = DependencyGraph.from_result(result)
    cycle = graph.detect_cycle()
    if cycle:
        raise CircularDependencyError(cycle)
    print(graph.render_tree())
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from pkgmgr.models import ResolutionResult, Version
from pkgmgr.constants import TREE_BRANCH, TREE_INDENT, TREE_SEEN_MARKER

# Public API
__all__ = ["DependencyGraph"]


class _Color(Enum):
    WHITE = 0  # not visited
    GRAY = 1  # on the current DFS path
    BLACK = 2  # fully explored


class DependencyGraph:
    """Directed graph over package identities.

    Nodes are package names, optionally labelled with a version; edges
    point from a dependent to its dependency. Node and edge insertion
    order is preserved, which keeps traversal output deterministic.
    """

    def __init__(self) -> None:
        self._versions: Dict[str, Optional[Version]] = {}
        self._edges: Dict[str, List[str]] = {}
        self._incoming: Dict[str, int] = {}

    @classmethod
    def from_result(cls, result: ResolutionResult) -> "DependencyGraph":
        """Build the graph induced by a resolution result.

        Packages become nodes in result order; each package's dependency
        names become outgoing edges.
        """
        graph = cls()
        for package in result:
            graph.add_node(package.name, package.version)
        for source, target in result.edges():
            graph.add_edge(source, target)
        return graph

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_node(self, name: str, version: Optional[Version] = None) -> None:
        """Add ``name`` (or attach a version to an existing bare node)."""
        if name not in self._versions:
            self._versions[name] = version
            self._edges[name] = []
            self._incoming[name] = 0
        elif version is not None:
            self._versions[name] = version

    def add_edge(self, source: str, target: str) -> None:
        """Add an edge ``source -> target``; duplicates are ignored."""
        self.add_node(source)
        self.add_node(target)
        if target not in self._edges[source]:
            self._edges[source].append(target)
            self._incoming[target] += 1

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def nodes(self) -> List[str]:
        """Return node names in insertion order."""
        return list(self._versions)

    def edges(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(source, target)`` pairs in insertion order."""
        for source, targets in self._edges.items():
            for target in targets:
                yield source, target

    def successors(self, name: str) -> List[str]:
        """Return the direct dependencies of ``name``."""
        return list(self._edges.get(name, ()))

    def version_of(self, name: str) -> Optional[Version]:
        """Return the version attached to ``name``, if any."""
        return self._versions.get(name)

    def roots(self) -> List[str]:
        """Return nodes that nothing depends on, in insertion order."""
        return [name for name in self._versions if self._incoming[name] == 0]

    def __contains__(self, name: object) -> bool:
        return name in self._versions

    def __len__(self) -> int:
        return len(self._versions)

    # ------------------------------------------------------------------
    # Algorithms
    # ------------------------------------------------------------------

    def detect_cycle(self) -> Optional[List[str]]:
        """Return the first cycle found, or ``None`` if the graph is acyclic.

        The returned path starts and ends with the same node, e.g.
        ``["a", "b", "a"]`` for ``a -> b -> a``.
        """
        color: Dict[str, _Color] = {name: _Color.WHITE for name in self._versions}

        for start in self._versions:
            if color[start] is not _Color.WHITE:
                continue

            color[start] = _Color.GRAY
            path: List[str] = [start]
            stack: List[Iterator[str]] = [iter(self._edges[start])]

            while stack:
                child = next(stack[-1], None)

                if child is None:
                    color[path.pop()] = _Color.BLACK
                    stack.pop()
                elif color[child] is _Color.GRAY:
                    return path[path.index(child) :] + [child]
                elif color[child] is _Color.WHITE:
                    color[child] = _Color.GRAY
                    path.append(child)
                    stack.append(iter(self._edges[child]))

        return None

    def _label(self, name: str) -> str:
        version = self._versions.get(name)
        return f"{name} v{version}" if version is not None else name

    def render_tree(self) -> str:
        """Render the graph as an indented tree.

        Each root (a node with no dependents) starts a tree. A node
        reached again after it has been expanded is printed as a leaf
        suffixed with ``(*)``. If every node has a dependent (only
        possible with cycles), all nodes are used as roots.

        Returns:
            Newline-separated lines, or ``"No dependencies"`` for an
            empty graph.
        """
        if not self._versions:
            return "No dependencies"

        roots = self.roots() or self.nodes()
        expanded = set()
        lines: List[str] = []

        stack: List[Tuple[str, int]] = [(root, 0) for root in reversed(roots)]
        while stack:
            name, depth = stack.pop()
            prefix = f"{TREE_INDENT * depth}{TREE_BRANCH}"

            if name in expanded:
                lines.append(f"{prefix}{self._label(name)}{TREE_SEEN_MARKER}")
                continue

            expanded.add(name)
            lines.append(f"{prefix}{self._label(name)}")
            for child in reversed(self._edges[name]):
                stack.append((child, depth + 1))

        return "\n".join(lines)

    def __repr__(self) -> str:
        edge_count = sum(len(targets) for targets in self._edges.values())
        return f"DependencyGraph(nodes={len(self._versions)}, edges={edge_count})"
