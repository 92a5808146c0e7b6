import posixpath

SOURCE_SUFFIXES = (".tsx", ".ts", ".jsx", ".js", ".mjs", ".cjs")


def strip_suffix(path: str) -> str:
    root, ext = posixpath.splitext(path)
    return root if ext in SOURCE_SUFFIXES else path


def make_node_id(descriptor):
    file_path = descriptor.get("file_path") or "unknown"
    name = descriptor.get("name") or posixpath.basename(strip_suffix(file_path))
    return f"{file_path}::{name}"


def resolve_import(file_path, source, module_index):
    # only relative specifiers can point at another scanned file
    if not source.startswith("."):
        return None
    base = posixpath.normpath(posixpath.join(posixpath.dirname(file_path), source))
    for candidate in (base, posixpath.join(base, "index")):
        if candidate in module_index:
            return module_index[candidate]
    return None


def import_bindings(descriptor):
    bindings = {}
    for record in descriptor.get("imports", []):
        for imp in record.get("imports", []):
            bindings[imp["name"]] = (record["source"], imp.get("importedName") or imp["name"], imp["type"])
    return bindings


def external_component_id(tag, source, imported_name, kind):
    if "." in tag or kind != "named":
        return f"{source}::{tag}"
    return f"{source}::{imported_name}"


def adapt_component_descriptors(descriptors):
    nodes = {}
    edges = []
    seen_edges = set()

    def add_edge(src, dst, relation):
        if (src, dst, relation) not in seen_edges:
            seen_edges.add((src, dst, relation))
            edges.append({"from": src, "to": dst, "relation": relation})

    # 1. One node per component file
    module_index = {}
    for desc in descriptors:
        node_id = make_node_id(desc)
        module_index[strip_suffix(desc.get("file_path") or "")] = node_id
        nodes[node_id] = {
            "id": node_id,
            "kind": "component",
            "name": desc.get("name"),
            "file_path": desc.get("file_path"),
            "props": [p["name"] for p in desc.get("props", [])],
            "css_classes": desc.get("cssClasses", []),
            "exports": desc.get("exports", []),
            "is_typescript": desc.get("isTypescript", False),
            "is_class_component": bool(desc.get("methods")),
        }

    # 2. Module dependencies and rendered components
    for desc in descriptors:
        node_id = make_node_id(desc)
        file_path = desc.get("file_path") or ""

        for module in dict.fromkeys(desc.get("dependencies", [])):
            target = resolve_import(file_path, module, module_index)
            if target is None:
                target = module
                nodes.setdefault(target, {"id": target, "kind": "module", "name": module})
            add_edge(node_id, target, "depends_on")

        bindings = import_bindings(desc)
        for tag in desc.get("jsxElements", []):
            head = tag.split(".")[0]
            if head not in bindings:
                continue
            source, imported_name, kind = bindings[head]
            target = resolve_import(file_path, source, module_index)
            if target is None:
                target = external_component_id(tag, source, imported_name, kind)
                nodes.setdefault(target, {"id": target, "kind": "external_component", "name": tag, "module": source})
            add_edge(node_id, target, "renders")

    return {"nodes": list(nodes.values()), "edges": edges}
