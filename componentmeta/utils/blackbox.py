import os
from collections import deque
from typing import Any, Dict, List

from componentmeta.path import load_graph
from componentmeta.utils.networkx_graph import load_descriptors


def getAllComponents(graph_path: str) -> List[str]:
    G = load_graph(graph_path)
    return sorted(n for n, attrs in G.nodes(data=True) if attrs.get("kind") == "component")


def getComponentInfo(output_folder: str, component_name: str, file_path: str = None) -> List[Dict[str, Any]]:
    if not os.path.isdir(output_folder):
        return {
            "error": True,
            "message": f"Folder doesn't exist: {output_folder}",
            "component": None,
        }

    matches = []
    for desc in load_descriptors(output_folder):
        if desc.get("name") != component_name:
            continue
        if file_path and desc.get("file_path") != file_path:
            continue
        matches.append(desc)

    if matches:
        return matches
    where = f" in '{file_path}'" if file_path else ""
    return {
        "error": True,
        "message": f"'{component_name}' not found{where}",
        "component": None,
    }


def _bfs(G, target, depth, neighbours):
    result = []
    visited = {target}
    queue = deque([(target, 0)])
    while queue:
        current_node, current_depth = queue.popleft()
        if current_depth >= depth:
            continue
        for nxt in neighbours(current_node):
            if nxt in visited:
                continue
            visited.add(nxt)
            nxt_depth = current_depth + 1
            if "::" in nxt:
                nxt_module, nxt_component = nxt.rsplit("::", 1)
            else:
                nxt_module, nxt_component = "", nxt
            result.append([nxt, nxt_module, nxt_component, nxt_depth])
            queue.append((nxt, nxt_depth))
    return result


def _load_target(graph_path: str, module_name: str, component_name: str):
    G = load_graph(graph_path)
    target = f"{module_name}::{component_name}"
    if target not in G:
        return G, target, {
            "error": True,
            "message": f"Target '{target}' not in graph",
            "children": [],
        }
    return G, target, None


def getComponentChildren(
    graph_path: str, module_name: str, component_name: str, depth: int = 1
) -> List[List[Any]]:
    G, target, error = _load_target(graph_path, module_name, component_name)
    if error:
        return error
    return _bfs(G, target, depth, G.successors)


def getComponentParents(
    graph_path: str, module_name: str, component_name: str, depth: int = 1
) -> List[List[Any]]:
    G, target, error = _load_target(graph_path, module_name, component_name)
    if error:
        return error
    return _bfs(G, target, depth, G.predecessors)
