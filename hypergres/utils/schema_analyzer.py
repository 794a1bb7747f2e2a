"""
Relationship analysis over the discovered Sources
"""

import networkx as nx
from typing import Dict, List, Sequence

from ..errors import QueryError
from ..models import Source
from ..query.models import Join


class SchemaAnalyzer:
    """Analyze relationships between Sources"""

    def __init__(self, sources: Sequence[Source] = ()):
        self.relationship_graph = nx.MultiDiGraph()
        self.build(sources)

    def build(self, sources: Sequence[Source]):
        """Build a graph with one edge per `belongs_to` relationship, keyed by local property"""
        self.relationship_graph.clear()

        for source in sources:
            self.relationship_graph.add_node(source.name)

        for source in sources:
            for rel in source.belongs_to:
                self.relationship_graph.add_edge(
                    source.name,
                    rel.relation_name,
                    key=rel.local_property,
                    local_property=rel.local_property,
                    foreign_property=rel.foreign_property
                )

    def joins_for(self, source_name: str, path: Sequence[str]) -> List[Join]:
        """
        Resolve a relation path into Joins.

        Each segment of `path` names a foreign key property of the Source
        reached so far; the resulting Joins nest in the same order.
        """
        if source_name not in self.relationship_graph:
            raise QueryError(f"Unknown source '{source_name}'")

        joins = []
        current = source_name

        for depth, segment in enumerate(path, 1):
            edge = self._edge(current, segment)
            if edge is None:
                raise QueryError(f"'{current}' has no relationship through '{segment}'")

            target, data = edge
            joins.append(Join(
                source=target,
                path=tuple(path[:depth]),
                from_=data['local_property'],
                to=data['foreign_property']
            ))
            current = target

        return joins

    def _edge(self, source_name: str, local_property: str):
        for _, target, key, data in self.relationship_graph.out_edges(source_name, keys=True, data=True):
            if key == local_property:
                return target, data
        return None

    def dependency_order(self) -> List[str]:
        """Get Source names with referenced Sources before the Sources referencing them"""
        # Edges point from the referencing Source to the referenced one
        graph = nx.DiGraph(self.relationship_graph).reverse(copy=True)
        graph.remove_edges_from(list(nx.selfloop_edges(graph)))

        try:
            return list(nx.topological_sort(graph))
        except nx.NetworkXUnfeasible:
            # If there are cycles, fall back to dependency-based ordering
            return self._get_dependency_based_order()

    def _get_dependency_based_order(self) -> List[str]:
        """Sort Sources by number of dependencies (fewer dependencies first)"""
        dependencies = self.dependencies()
        return sorted(dependencies.keys(), key=lambda name: len(dependencies[name]))

    def dependencies(self) -> Dict[str, List[str]]:
        """Names of the other Sources each Source references"""
        dependencies = {}
        for name in self.relationship_graph.nodes:
            dependencies[name] = []
            for target in self.relationship_graph.successors(name):
                if target != name and target not in dependencies[name]:
                    dependencies[name].append(target)
        return dependencies
