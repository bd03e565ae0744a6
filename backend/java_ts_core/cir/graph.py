import networkx as nx # type: ignore
from typing import Any, Dict, List, Optional, Tuple

class DeclarationGraph:
    """
    Directed graph over emitted TypeScript declarations.
    Nodes: interface name -> {location, path}
    Edges: EXTENDS (child -> parent)
    """
    def __init__(self) -> None:
        self.g = nx.DiGraph()

    def add_declaration(self, name: str, location: str, path: Any = None) -> None:
        # first declaration of a name wins; a bare node may already exist from add_extends
        if self.location_of(name) is not None:
            return
        self.g.add_node(name, location=location, path=path)

    def add_extends(self, child: str, parent: str) -> None:
        self.g.add_edge(child, parent, etype="EXTENDS")

    def location_of(self, name: str) -> Optional[str]:
        if name not in self.g:
            return None
        return self.g.nodes[name].get("location")

    def extends_edges(self) -> List[Tuple[str, str]]:
        """(child, parent) pairs where both ends are known declarations."""
        out = []
        for src, dst, data in self.g.edges(data=True):
            if data.get("etype") != "EXTENDS":
                continue
            if self.location_of(src) is None or self.location_of(dst) is None:
                continue
            out.append((src, dst))
        return out

    def to_debug_json(self) -> Dict[str, Any]:
        nodes = [
            {"id": name, "location": data.get("location")}
            for name, data in self.g.nodes(data=True)
        ]
        edges = [
            {"src": src, "dst": dst, "type": data.get("etype")}
            for src, dst, data in self.g.edges(data=True)
        ]
        return {"nodes": nodes, "edges": edges}
