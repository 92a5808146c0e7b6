import json
import os
import pickle

import networkx as nx


def load_descriptors(output_dir):
    descriptors = []
    for dirpath, _, files in os.walk(output_dir):
        for fn in sorted(files):
            if not fn.endswith(".json"):
                continue
            fullpath = os.path.join(dirpath, fn)
            with open(fullpath, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                descriptors.append(data)
            elif isinstance(data, list):
                descriptors.extend(d for d in data if isinstance(d, dict))
    return descriptors


def build_graph_from_schema(schema):
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
        rel = edge.get("relation") or ""
        # DiGraph keeps one edge per pair, so relations accumulate
        if G.has_edge(src, dst):
            existing = G.edges[src, dst].get("relation", "")
            rel = ",".join(sorted(set(filter(None, existing.split(",") + [rel]))))
        G.add_edge(src, dst, relation=rel)

    return G


def write_graph(G, graph_dir, basename="component_graph"):
    os.makedirs(graph_dir, exist_ok=True)
    graph_ml = os.path.join(graph_dir, f"{basename}.graphml")
    graph_gp = os.path.join(graph_dir, f"{basename}.gpickle")

    nx.write_graphml(G, graph_ml)
    with open(graph_gp, "wb") as f:
        pickle.dump(G, f)
    return graph_ml, graph_gp
