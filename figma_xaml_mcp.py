#!/usr/bin/env python3
"""
Figma XAML MCP Server - Model Context Protocol server turning Figma designs into XAML.

This server provides tools to:
- Fetch a selection of Figma nodes and generate a XAML Canvas document
- Convert raw Figma node JSON (e.g. exported by a plugin) without network access

Each conversion reports non-fatal diagnostics (unsupported fills or node
types, missing fonts or bounds) next to the generated markup.
"""

import os
import sys
import json
import re
import logging
from typing import Optional, List, Dict, Any, Union
from enum import Enum

import httpx
from pydantic import BaseModel, Field, field_validator, ConfigDict
from mcp.server.fastmcp import FastMCP

from generators.base import XamlOptions, DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, parse_nodes
from generators.errors import ContractViolation
from generators.xaml_generator import XamlDocument, generate_xaml_document

# ============================================================================
# Constants
# ============================================================================

FIGMA_API_BASE = "https://api.figma.com/v1"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger("figma_xaml_mcp")

# ============================================================================
# Initialize MCP Server
# ============================================================================

mcp = FastMCP("figma_xaml_mcp")

# ============================================================================
# Enums and Types
# ============================================================================

class ResponseFormat(str, Enum):
    """Output format for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


def _extract_file_key(v: str) -> str:
    # Extract file key from URL if full URL provided
    if 'figma.com' in v:
        match = re.search(r'figma\.com/(?:design|file)/([a-zA-Z0-9]+)', v)
        if match:
            return match.group(1)
        raise ValueError("Could not extract file key from Figma URL")
    return v


# ============================================================================
# Pydantic Input Models
# ============================================================================

class FigmaXamlInput(BaseModel):
    """Input model for generating XAML from Figma nodes."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(
        ...,
        description="Figma file key (from URL: figma.com/design/FILE_KEY/...)",
        min_length=10,
        max_length=50
    )
    node_ids: List[str] = Field(
        ...,
        description="Selection of node IDs to convert, in order (e.g., ['1:2', '3:4'])",
        min_length=1,
        max_length=50
    )
    root_name: str = Field(
        default="Root",
        description="x:Name of the root Canvas",
        min_length=1
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)

    @field_validator('node_ids')
    @classmethod
    def normalize_node_ids(cls, v: List[str]) -> List[str]:
        # Convert 1-2 format to 1:2
        return [nid.replace('-', ':') for nid in v]


class XamlConvertInput(BaseModel):
    """Input model for converting raw Figma node JSON."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    nodes_json: Union[str, List[Dict[str, Any]], Dict[str, Any]] = Field(
        ...,
        description="A Figma node object, or a list of them, as JSON text or parsed JSON"
    )
    root_name: str = Field(default="Root", description="x:Name of the root Canvas", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('nodes_json')
    @classmethod
    def parse_nodes_json(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f"nodes_json is not valid JSON: {e}")
        if not isinstance(v, (dict, list)):
            raise ValueError("nodes_json must be a node object or a list of node objects")
        return v


# ============================================================================
# Helpers
# ============================================================================

def _get_figma_token() -> str:
    """Get Figma API token from environment."""
    token = os.environ.get("FIGMA_ACCESS_TOKEN") or os.environ.get("FIGMA_TOKEN")
    if not token:
        raise ValueError(
            "Figma API token not found. Set FIGMA_ACCESS_TOKEN or FIGMA_TOKEN environment variable. "
            "Get your token from: https://www.figma.com/developers/api#access-tokens"
        )
    return token


def _get_options(root_name: str) -> XamlOptions:
    """Generator options from the environment."""
    font_size = os.environ.get("FIGMA_XAML_FONT_SIZE")
    return XamlOptions(
        root_name=root_name,
        default_font_family=os.environ.get("FIGMA_XAML_FONT_FAMILY", DEFAULT_FONT_FAMILY),
        default_font_size=float(font_size) if font_size else DEFAULT_FONT_SIZE,
    )


async def _make_figma_request(
    endpoint: str,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Make authenticated request to Figma API."""
    token = _get_figma_token()

    async with httpx.AsyncClient() as client:
        response = await client.request(
            method=method,
            url=f"{FIGMA_API_BASE}/{endpoint}",
            headers={"X-Figma-Token": token},
            params=params,
            timeout=DEFAULT_TIMEOUT
        )
        response.raise_for_status()
        return response.json()


def _handle_api_error(e: Exception) -> str:
    """Format API errors for user-friendly messages."""
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status == 401:
            return "Error: Invalid Figma API token. Check your FIGMA_ACCESS_TOKEN environment variable."
        elif status == 403:
            return "Error: Access denied. You don't have permission to view this file."
        elif status == 404:
            return "Error: File or node not found. Check the file key and node ID."
        elif status == 429:
            return "Error: Rate limit exceeded. Please wait before making more requests."
        return f"Error: Figma API returned status {status}"
    elif isinstance(e, httpx.TimeoutException):
        return "Error: Request timed out. The file might be too large."
    elif isinstance(e, ContractViolation):
        return f"Error: Invalid design tree: {str(e)}"
    elif isinstance(e, ValueError):
        return f"Error: {str(e)}"
    return f"Error: {type(e).__name__}: {str(e)}"


def _collect_documents(data: Dict[str, Any], node_ids: List[str]) -> List[Dict[str, Any]]:
    """Pick node documents out of a /files/:key/nodes response, in request order."""
    nodes = data.get('nodes') or {}
    documents = []
    for node_id in node_ids:
        entry = nodes.get(node_id)
        if not entry or not entry.get('document'):
            raise ValueError(f"Node '{node_id}' not found.")
        documents.append(entry['document'])
    return documents


def _format_result(document: XamlDocument, response_format: ResponseFormat, source: str) -> str:
    """Render a generation result for the MCP client."""
    diagnostics = [str(d) for d in document.diagnostics]

    if response_format == ResponseFormat.JSON:
        return json.dumps({
            "source": source,
            "xaml": document.text,
            "diagnostics": diagnostics,
        }, indent=2, ensure_ascii=False)

    lines = [
        "# Generated XAML",
        f"**Source:** {source}",
        "",
    ]
    if document.is_empty:
        lines.append("_No visible content in the selection._")
    else:
        lines.extend(["```xml", document.text.rstrip("\n"), "```"])

    if diagnostics:
        lines.extend(["", f"## Diagnostics ({len(diagnostics)})"])
        lines.extend(f"- {d}" for d in diagnostics)

    return "\n".join(lines)


# ============================================================================
# Tools
# ============================================================================

@mcp.tool(
    name="figma_generate_xaml",
    annotations={
        "title": "Generate XAML from Figma",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_generate_xaml(params: FigmaXamlInput) -> str:
    """
    Generate a XAML Canvas document from a selection of Figma nodes.

    Each visible node becomes a positioned Canvas with a traceability comment,
    a TextBlock for text layers and its fills (solid, gradient, image) as a
    Background brush. Element names are made unique across the document.

    Args:
        params: FigmaXamlInput containing:
            - file_key (str): Figma file key
            - node_ids (List[str]): Nodes to convert, in selection order
            - root_name (str): x:Name of the root Canvas
            - response_format: 'markdown' or 'json'

    Returns:
        str: Generated XAML plus diagnostics
    """
    try:
        data = await _make_figma_request(
            f"files/{params.file_key}/nodes",
            params={"ids": ",".join(params.node_ids)}
        )
        documents = _collect_documents(data, params.node_ids)
        document = generate_xaml_document(parse_nodes(documents), _get_options(params.root_name))
        logger.info(
            "Generated XAML for %s (%d nodes, %d diagnostics)",
            params.file_key, len(documents), len(document.diagnostics)
        )
        return _format_result(document, params.response_format, f"`{params.file_key}` {', '.join(params.node_ids)}")

    except Exception as e:
        logger.exception("figma_generate_xaml failed")
        return _handle_api_error(e)


@mcp.tool(
    name="figma_convert_xaml",
    annotations={
        "title": "Convert Figma JSON to XAML",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def figma_convert_xaml(params: XamlConvertInput) -> str:
    """
    Convert raw Figma node JSON (REST API or plugin export) into XAML.

    No Figma API access is needed; use this when the design tree was
    exported by a plugin or fetched elsewhere.

    Args:
        params: XamlConvertInput containing:
            - nodes_json: node object or list of node objects
            - root_name (str): x:Name of the root Canvas
            - response_format: 'markdown' or 'json'

    Returns:
        str: Generated XAML plus diagnostics
    """
    try:
        nodes = parse_nodes(params.nodes_json)
        document = generate_xaml_document(nodes, _get_options(params.root_name))
        return _format_result(document, params.response_format, f"{len(nodes)} node(s) from JSON")

    except Exception as e:
        logger.exception("figma_convert_xaml failed")
        return _handle_api_error(e)


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    # stdout carries the MCP transport
    logging.basicConfig(
        level=os.environ.get("FIGMA_XAML_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    mcp.run()


if __name__ == "__main__":
    main()
