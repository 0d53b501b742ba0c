"""MCP server exposing the image harvester as a tool."""

from __future__ import annotations

import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import HarvestConfig
from .harvester import run_harvest

mcp = FastMCP(name="image-harvest")


@mcp.tool()
async def harvest(
    url: str,
    output_dir: str,
) -> str:
    """Render a web page with Playwright and download its images into output_dir."""

    config = HarvestConfig(
        page_url=url,
        output_root=Path(output_dir).expanduser().resolve(),
    )
    report = await run_harvest(config)
    return "\n".join(str(path) for path in report.saved)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
