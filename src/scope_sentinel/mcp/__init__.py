"""FastMCP server and tool definitions for scope creep analysis."""


def create_server(project_root=None, config_path=None):
    """Factory function for creating the MCP server instance.

    This is the entry point registered in pyproject.toml under
    [project.entry-points."mcp.servers"].
    """
    from scope_sentinel.mcp.server import create_server as _create_server

    return _create_server(project_root=project_root, config_path=config_path)
