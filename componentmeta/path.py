import argparse
import pickle

import networkx as nx


def load_graph(graph_path):
    if graph_path.endswith(".gpickle"):
        with open(graph_path, "rb") as f:
            return pickle.load(f)
    elif graph_path.endswith(".graphml"):
        return nx.read_graphml(graph_path)
    else:
        raise RuntimeError(f"Unsupported graph format: {graph_path}")


def format_path(G, node_list):
    enriched = []
    for nid in node_list:
        fp = G.nodes[nid].get("file_path", "")
        mod = G.nodes[nid].get("module", "")
        if fp:
            enriched.append(f"{nid} (file: {fp})")
        elif mod:
            enriched.append(f"{nid} (module: {mod})")
        else:
            enriched.append(nid)
    return " -> ".join(enriched)


def find_path(graph_path, component, source=None, return_obj=False):
    """Render path from ``source`` down to ``component``.

    Without a source, prints the direct neighbours of ``component`` instead.
    """
    G = load_graph(graph_path)
    target = component

    if target not in G:
        print(f"Error: target '{target}' not in graph.")
        return None

    if source:
        if source not in G:
            print(f"Error: source '{source}' not in graph.")
            return None
        try:
            path = nx.shortest_path(G, source=source, target=target)
        except nx.NetworkXNoPath:
            print(f"No path found from '{source}' to '{target}'.")
            return None
        if return_obj:
            return path
        print("  " + format_path(G, path))
        return path

    preds = list(G.predecessors(target))
    succs = list(G.successors(target))

    if preds:
        print(f"\nNodes with edges INTO '{target}' ({len(preds)}):")
        for p in preds:
            rel = G.get_edge_data(p, target).get("relation", "")
            print(f"  {p} --[{rel}]--> {target}")
    else:
        print(f"\nNo incoming edges to '{target}'.")

    if succs:
        print(f"\nNodes with edges OUT OF '{target}' ({len(succs)}):")
        for s in succs:
            rel = G.get_edge_data(target, s).get("relation", "")
            print(f"  {target} --[{rel}]--> {s}")
    else:
        print(f"\nNo outgoing edges from '{target}'.")
    return None


def main():
    parser = argparse.ArgumentParser(description="Find render paths in a component graph")
    parser.add_argument("graph_path", help="Path to a .gpickle or .graphml component graph")
    parser.add_argument("component", help="Target node id (<file_path>::<name>)")
    parser.add_argument("--source", default=None, help="Source node id")
    args = parser.parse_args()
    find_path(args.graph_path, args.component, args.source)


if __name__ == "__main__":
    main()
