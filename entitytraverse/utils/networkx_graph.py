import json
import os
from typing import Dict, Iterable, List, Optional

import networkx as nx

from entitytraverse.models import Entity

GRAPH_FILE = "entity_graph.graphml"


def entity_node_id(entity: Entity) -> str:
    return f"{entity.source}::{entity.name}"


def entities_to_schema(entities: Iterable[Entity], rel_file_path: Optional[str] = None) -> Dict[str, List[dict]]:
    """Nodes and edges for one file; relationship targets declared in the same
    file point at their node, anything else becomes a bare target node."""
    entities = list(entities)
    local_ids = {}
    for entity in entities:
        if rel_file_path is None or entity.source == rel_file_path:
            local_ids.setdefault(entity.name, entity_node_id(entity))

    nodes, edges = [], []
    for entity in entities:
        nid = entity_node_id(entity)
        node = {k: v for k, v in entity.to_dict().items() if k != "relationships"}
        node["id"] = nid
        nodes.append(node)
        for rel in entity.relationships:
            target = local_ids.get(rel.target, rel.target)
            if target == nid:
                target = rel.target
            edges.append({
                "from": nid,
                "to": target,
                "relation": rel.type,
                "confidence": rel.confidence,
            })
    return {"nodes": nodes, "edges": edges}


def combine_schemas(old, new):
    return {"nodes": old["nodes"] + new["nodes"], "edges": old["edges"] + new["edges"]}


def build_graph_from_schema(schema) -> nx.DiGraph:
    G = nx.DiGraph()

    for node in schema["nodes"]:
        nid = node["id"]
        attrs = {}
        for (k, v) in node.items():
            if k == "id":
                continue
            if v is None:
                attrs[k] = ""
            elif isinstance(v, (str, int, float, bool)):
                attrs[k] = v
            else:
                attrs[k] = json.dumps(v)
        G.add_node(nid, **attrs)

    for edge in schema["edges"]:
        src = edge["from"]
        dst = edge["to"]
        if dst not in G:
            G.add_node(dst, kind="reference")
        G.add_edge(src, dst, relation=edge.get("relation") or "", confidence=edge.get("confidence", 1.0))

    return G


def build_entity_graph(entities: Iterable[Entity], rel_file_path: Optional[str] = None) -> nx.DiGraph:
    return build_graph_from_schema(entities_to_schema(entities, rel_file_path))


def write_graph(G: nx.DiGraph, graph_dir: str, filename: str = GRAPH_FILE) -> str:
    os.makedirs(graph_dir, exist_ok=True)
    path = os.path.join(graph_dir, filename)
    nx.write_graphml(G, path)
    return path
