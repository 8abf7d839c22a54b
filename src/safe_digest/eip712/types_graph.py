"""
Type Dependency Resolution

Builds an index-based graph over the custom struct types of an EIP-712
``types`` map and computes the dependency ordering used by ``encodeType``:
the primary type first, then every transitively referenced struct sorted by
name. Cycles and diamonds are legal; each type is visited exactly once.
"""

from typing import Dict, List, Mapping, Sequence

from .abi import base_type_name


class TypeGraph:
    """
    Arena of struct type names with adjacency stored by index.

    Attributes:
        names: Struct type names in declaration order
        index: Name -> position in ``names``
        edges: For each struct, indices of the struct types its fields reference

    Example:
        graph = TypeGraph({"Mail": [{"name": "from", "type": "Person"}], "Person": [...]})
        graph.resolve("Mail")  # ["Mail", "Person"]
    """

    def __init__(self, types: Mapping[str, Sequence[Mapping[str, str]]]):
        self.names: List[str] = list(types.keys())
        self.index: Dict[str, int] = {name: i for i, name in enumerate(self.names)}
        self.edges: List[List[int]] = []
        for name in self.names:
            targets: List[int] = []
            for field in types[name]:
                target = self.index.get(base_type_name(field["type"]))
                if target is not None and target not in targets:
                    targets.append(target)
            self.edges.append(targets)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self.index

    def resolve(self, primary_type: str) -> List[str]:
        """
        Return ``[primary_type, *sorted(dependencies)]``.

        An unknown ``primary_type`` yields ``[primary_type]``; primitives and
        names absent from the map end the walk.
        """
        start = self.index.get(base_type_name(primary_type))
        if start is None:
            return [primary_type]

        visited = [False] * len(self.names)
        visited[start] = True
        stack = [start]
        while stack:
            node = stack.pop()
            for target in self.edges[node]:
                if not visited[target]:
                    visited[target] = True
                    stack.append(target)

        others = sorted(
            self.names[i] for i, seen in enumerate(visited) if seen and i != start
        )
        return [self.names[start], *others]
