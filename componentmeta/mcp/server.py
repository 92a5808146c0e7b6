from fastmcp import FastMCP

import componentmeta.utils.blackbox as blackbox
from componentmeta.extractors.react_extractor import extract_component_descriptor
from componentmeta.main import create_component_data
from componentmeta.mcp.helper import auto_mcp_tool, parsed_data, safe_error
from componentmeta.path import find_path

mcp = FastMCP(
    "Componentmeta MCP", instructions=parsed_data["tool_description"]["instructions"]
)


@auto_mcp_tool(mcp, "extract_component")
@safe_error
def mcp_extract_component(code: str, dialect: str = "tsx"):
    descriptor = extract_component_descriptor(code, dialect)
    if descriptor is None:
        return {"status": "failure", "message": "failed to parse"}
    return descriptor.to_dict()


@auto_mcp_tool(mcp, "create_component_data")
@safe_error
def mcp_create_component_data(
    root_dir: str,
    output_path: str = "./output/components",
    graph_output_path: str = "./output/graph",
):
    summary = create_component_data(root_dir, output_path, graph_output_path, clear_existing=True)
    return {"status": "success", "output_path": output_path, **summary}


@auto_mcp_tool(mcp, "get_component_details")
@safe_error
def mcp_get_component_details(output_folder: str, component_name: str, file_path: str = ""):
    return blackbox.getComponentInfo(output_folder, component_name, file_path or None)


@auto_mcp_tool(mcp, "get_component_children")
@safe_error
def mcp_get_component_children(graph_path: str, module_name: str, component_name: str, depth: int = 1):
    result = blackbox.getComponentChildren(graph_path, module_name, component_name, depth)
    if isinstance(result, dict):
        return result
    return [x[0] for x in result]


@auto_mcp_tool(mcp, "get_component_parents")
@safe_error
def mcp_get_component_parents(graph_path: str, module_name: str, component_name: str, depth: int = 1):
    result = blackbox.getComponentParents(graph_path, module_name, component_name, depth)
    if isinstance(result, dict):
        return result
    return [x[0] for x in result]


@auto_mcp_tool(mcp, "find_render_path")
@safe_error
def mcp_find_render_path(graph_path: str, from_component: str, to_component: str):
    result = find_path(graph_path, to_component, from_component, return_obj=True)
    if result:
        return {"path": " -> ".join(result)}
    return {"output": result}


if __name__ == "__main__":
    mcp.run(transport="sse")
