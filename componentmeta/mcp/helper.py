import inspect
import os
import tomllib
from functools import wraps
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from componentmeta.exceptions import ComponentMetaError
from componentmeta.utils.log import get_logger

logger = get_logger("mcp")

TOOL_DESCRIPTIONS_PATH = os.path.join(os.path.dirname(__file__), "tool_descriptions.toml")


def load_tool_descriptions(path=TOOL_DESCRIPTIONS_PATH):
    with open(path, "rb") as f:
        return tomllib.load(f)


parsed_data = load_tool_descriptions()


def auto_mcp_tool(mcp: FastMCP, tool_key: str):
    """Register ``func`` as tool ``tool_key`` with its TOML parameter docs.

    Every documented parameter must exist on the function, so a renamed
    argument fails at import time instead of shipping a stale description.
    The plain function is returned, so the module keeps a callable name.
    """

    def decorator(func):
        tool_data = parsed_data[tool_key]
        signature = inspect.signature(func)
        documented = {k: v for k, v in tool_data.items() if k != "description"}
        stale = set(documented) - set(signature.parameters)
        if stale:
            raise KeyError(f"[{tool_key}] documents unknown parameters: {sorted(stale)}")

        params = []
        annotations = dict(func.__annotations__)
        for name, param in signature.parameters.items():
            if name in documented:
                base = param.annotation if param.annotation is not inspect.Parameter.empty else str
                annotations[name] = Annotated[base, Field(description=documented[name])]
                param = param.replace(annotation=annotations[name])
            params.append(param)

        func.__annotations__ = annotations
        func.__signature__ = signature.replace(parameters=params)
        mcp.tool(name=tool_key, description=tool_data["description"])(func)
        return func

    return decorator


def safe_error(func):
    """Turn any exception into a ``{"status": "failure"}`` payload for the client."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ComponentMetaError as e:
            logger.warning("%s failed: %s", func.__name__, e)
            return {"status": "failure", "message": str(e)}
        except Exception as e:
            logger.exception("%s raised", func.__name__)
            return {"status": "failure", "message": str(e), "error_type": type(e).__name__}

    return wrapper
