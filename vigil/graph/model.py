"""
Graph data model: typed nodes, edges and the graph that owns them.

Node coordinates live in world space (before the camera transform) and
stay None until the layout engine positions them.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional

import networkx as nx


@dataclass
class Node:
    id: str
    label: str
    type: str
    detail: str = ""
    fixed: bool = False
    x: Optional[float] = None
    y: Optional[float] = None
    # Insight nodes only: the node this insight hangs off
    anchor: Optional[str] = None

    @property
    def is_positioned(self) -> bool:
        return self.x is not None and self.y is not None

    def copy(self) -> "Node":
        return replace(self)


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    type: Optional[str] = None


@dataclass
class Graph:
    """Ordered nodes and edges describing one video's metadata."""

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_digraph(self) -> nx.DiGraph:
        """
        Build a NetworkX view of the graph.
        Edges whose endpoints are not both known nodes are dropped.
        """
        G = nx.DiGraph()
        for node in self.nodes:
            G.add_node(node.id, label=node.label, type=node.type)
        for edge in self.edges:
            if edge.source in G.nodes and edge.target in G.nodes:
                G.add_edge(edge.source, edge.target, type=edge.type)
        return G

    def resolved_edges(self) -> List[Edge]:
        """Edges in their original order, without dangling references."""
        G = self.to_digraph()
        return [e for e in self.edges if G.has_edge(e.source, e.target)]


def find_anchor(nodes: List[Node]) -> Optional[Node]:
    for node in nodes:
        if node.fixed:
            return node
    return nodes[0] if nodes else None
