"""Main MCP Server implementation for recording intelligence."""

import argparse
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from fastmcp import FastMCP

from flowforge.container import get_container
from flowforge.domains.quality import GeneratedCode
from flowforge.domains.shared import (
    Action,
    DataFormat,
    FlowView,
    RecordingPayloadError,
    parse_actions,
)

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = """\
flowforge turns a recorded browser session into the building blocks of a
maintainable test: a cleaned action list, stable locators, named flows,
assertions and parameterized test data.

Pass recordings as a list of action objects:
  {"type": "fill", "method": "fill",
   "target": {"type": "getByRole", "selector": "textbox", "options": {"name": "Username"}},
   "args": ["Admin"]}

Start with analyze_recording for the full picture, or call a single stage
(filter_actions, optimize_locators, detect_flows, generate_names,
suggest_assertions, extract_test_data). analyze_code_quality scores code
generated from a recording.
"""

ActionsPayload = Union[List[Dict[str, Any]], Dict[str, Any], str]


def _create_mcp_server() -> FastMCP:
    """Create and configure the FastMCP server with instructions.

    Returns:
        Configured FastMCP server instance.
    """
    return FastMCP("flowforge", instructions=SERVER_INSTRUCTIONS)


# Initialize FastMCP server with instructions
mcp = _create_mcp_server()


def _prepare(actions: ActionsPayload, filter_first: bool) -> Sequence[Action]:
    """Parse a payload and optionally filter it.

    Raises:
        RecordingPayloadError: If the payload cannot be read as actions.
    """
    parsed = parse_actions(actions)
    if not filter_first:
        return parsed
    return get_container().action_filter.filter(parsed).actions


def _payload_error(tool: str, error: RecordingPayloadError) -> Dict[str, Any]:
    logger.warning(f"{tool}: invalid payload: {error}")
    return {"success": False, "error": str(error)}


@mcp.tool(
    name="filter_actions",
    description=(
        "Remove noise, duplicate, redundant and container-click actions from a "
        "recording and merge clear + fill pairs. Returns kept actions, the "
        "removal audit trail and statistics."
    ),
)
async def filter_actions(
    actions: ActionsPayload,
    include_summary: bool = True,
) -> Dict[str, Any]:
    """Filter a recording.

    Args:
        actions: Recorded actions (list, {"actions": [...]}, or JSON text).
        include_summary: Add a human-readable summary.

    Returns:
        Dict[str, Any]: success, actions, removed, merged, stats and
        optionally summary; error on an invalid payload.
    """
    try:
        parsed = parse_actions(actions)
    except RecordingPayloadError as e:
        return _payload_error("filter_actions", e)

    result = get_container().action_filter.filter(parsed)
    response: Dict[str, Any] = {"success": True, **result.to_dict()}
    if include_summary:
        response["summary"] = result.summary()
    return response


@mcp.tool(
    name="optimize_locators",
    description=(
        "Score the stability of each action's locator and suggest ranked "
        "alternatives, an optimized locator and a fallback chain."
    ),
)
async def optimize_locators(
    actions: ActionsPayload,
    filter_first: bool = False,
) -> Dict[str, Any]:
    """Analyze the locator of every action.

    Args:
        actions: Recorded actions.
        filter_first: Run the action filter before analysis.

    Returns:
        Dict[str, Any]: success, locators (one per action), count and the
        number of improved locators.
    """
    try:
        prepared = _prepare(actions, filter_first)
    except RecordingPayloadError as e:
        return _payload_error("optimize_locators", e)

    analyses = get_container().locator_optimizer.optimize_all(prepared)
    return {
        "success": True,
        "locators": [a.to_dict() for a in analyses],
        "count": len(analyses),
        "improved": sum(1 for a in analyses if a.improved),
    }


@mcp.tool(
    name="detect_flows",
    description=(
        "Group a recording into business flows (login, search, form submit, ...), "
        "intent segments and page segments."
    ),
)
async def detect_flows(
    actions: ActionsPayload,
    view: FlowView = "all",
    filter_first: bool = True,
) -> Dict[str, Any]:
    """Detect flows in a recording.

    Args:
        actions: Recorded actions.
        view: "patterns", "intents", "pages" or "all".
        filter_first: Run the action filter before detection.

    Returns:
        Dict[str, Any]: success plus flows, intents and/or pages.
    """
    try:
        prepared = _prepare(actions, filter_first)
    except RecordingPayloadError as e:
        return _payload_error("detect_flows", e)

    container = get_container()
    response: Dict[str, Any] = {"success": True, "view": view}
    if view in ("patterns", "all"):
        flows = container.flow_detector.detect_or_default(prepared)
        response["flows"] = [f.to_dict() for f in flows]
    if view in ("intents", "all"):
        segments = container.intent_segmenter.segment(prepared)
        response["intents"] = [s.to_dict() for s in segments]
    if view in ("pages", "all"):
        pages = container.page_detector.detect(prepared)
        response["pages"] = [p.to_dict() for p in pages]
    return response


@mcp.tool(
    name="generate_names",
    description=(
        "Derive page-object property names, method names and Gherkin step "
        "phrases for each action, using detected flows and pages as context."
    ),
)
async def generate_names(
    actions: ActionsPayload,
    filter_first: bool = True,
) -> Dict[str, Any]:
    """Name every action.

    Args:
        actions: Recorded actions.
        filter_first: Run the action filter before naming.

    Returns:
        Dict[str, Any]: success and names (one bundle per action).
    """
    try:
        prepared = _prepare(actions, filter_first)
    except RecordingPayloadError as e:
        return _payload_error("generate_names", e)

    container = get_container()
    flows = container.flow_detector.detect_or_default(prepared)
    pages = container.page_detector.detect(prepared)
    bundles = container.recording_analyzer.name_actions(prepared, flows, pages)
    return {
        "success": True,
        "names": [b.to_dict() for b in bundles],
        "count": len(bundles),
    }


@mcp.tool(
    name="suggest_assertions",
    description=(
        "Suggest verification points after state-changing actions such as "
        "login, save, delete, search, select and navigation."
    ),
)
async def suggest_assertions(
    actions: ActionsPayload,
    filter_first: bool = True,
) -> Dict[str, Any]:
    """Suggest assertions for a recording.

    Args:
        actions: Recorded actions.
        filter_first: Run the action filter first.

    Returns:
        Dict[str, Any]: success, verification_points and count.
    """
    try:
        prepared = _prepare(actions, filter_first)
    except RecordingPayloadError as e:
        return _payload_error("suggest_assertions", e)

    points = get_container().assertion_suggester.suggest(prepared)
    return {
        "success": True,
        "verification_points": [p.to_dict() for p in points],
        "count": len(points),
    }


@mcp.tool(
    name="extract_test_data",
    description=(
        "Extract and classify literal values from a recording, mask sensitive "
        "fields and build a data-table payload with suggested variations."
    ),
)
async def extract_test_data(
    actions: ActionsPayload,
    format: DataFormat = "json",
    filter_first: bool = True,
) -> Dict[str, Any]:
    """Extract test data.

    Args:
        actions: Recorded actions.
        format: Rendering of the data-table payload, "json" or "yaml".
        filter_first: Run the action filter first.

    Returns:
        Dict[str, Any]: success, the extraction (data, sensitiveFields,
        suggestedVariations, environmentVariables, records) and data_file.
        Sensitive values appear masked only.
    """
    try:
        prepared = _prepare(actions, filter_first)
    except RecordingPayloadError as e:
        return _payload_error("extract_test_data", e)

    extracted = get_container().data_extractor.extract(prepared)
    data_file = extracted.to_yaml() if format == "yaml" else extracted.to_json()
    return {
        "success": True,
        **extracted.to_dict(),
        "format": format,
        "data_file": data_file,
    }


@mcp.tool(
    name="analyze_recording",
    description=(
        "Run the full analysis over a recording: filtering, locators, flows, "
        "names, assertions and test data, in one result."
    ),
)
async def analyze_recording(actions: ActionsPayload) -> Dict[str, Any]:
    """Analyze a recording end to end.

    Args:
        actions: Recorded actions.

    Returns:
        Dict[str, Any]: success, the full analysis and a filter summary.
    """
    try:
        parsed = parse_actions(actions)
    except RecordingPayloadError as e:
        return _payload_error("analyze_recording", e)

    analysis = get_container().recording_analyzer.analyze(parsed)
    return {
        "success": True,
        **analysis.to_dict(),
        "summary": analysis.filter_result.summary(),
    }


@mcp.tool(
    name="analyze_code_quality",
    description=(
        "Score generated page objects and step definitions for locator "
        "stability, framework compliance, naming, structure, maintainability, "
        "reusability, error handling and documentation."
    ),
)
async def analyze_code_quality(code: Dict[str, Any]) -> Dict[str, Any]:
    """Score generated code.

    Args:
        code: {"pageObjects": [{"className", "fileName", "content"}],
            "stepDefinitions": [{"fileName", "content"}], "steps": N}

    Returns:
        Dict[str, Any]: success and the quality report.
    """
    try:
        generated = GeneratedCode.from_dict(code)
    except RecordingPayloadError as e:
        return _payload_error("analyze_code_quality", e)

    report = get_container().recording_analyzer.analyze_quality(generated)
    return {"success": True, **report.to_dict()}


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="flowforge MCP server entry point.")
    parser.add_argument(
        "--transport",
        dest="transport",
        choices=["stdio", "http", "sse"],
        help="Transport to use for the MCP server (default: stdio).",
    )
    parser.add_argument(
        "--host",
        dest="host",
        help="Host/interface for HTTP transport (default 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        dest="port",
        type=int,
        help="Port for HTTP transport (default 8000).",
    )
    parser.add_argument(
        "--path",
        dest="path",
        help="Path for HTTP/streamable endpoints (default '/').",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        help="Log level for the MCP server (e.g., INFO, DEBUG).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Start the flowforge MCP server."""

    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    level = getattr(logging, (args.log_level or "INFO").upper(), logging.INFO)
    logging.basicConfig(level=level)
    logger.info("Starting flowforge MCP server")

    try:
        run_kwargs: Dict[str, Any] = {}

        transport = args.transport or "stdio"
        run_kwargs["transport"] = transport

        if args.log_level:
            run_kwargs["log_level"] = args.log_level

        # Only pass host/port/path when using HTTP/SSE transports
        if transport != "stdio":
            if args.host:
                run_kwargs["host"] = args.host
            if args.port:
                run_kwargs["port"] = args.port
            if args.path:
                run_kwargs["path"] = args.path

        mcp.run(**run_kwargs)
    except KeyboardInterrupt:
        logger.info("flowforge interrupted by user")


if __name__ == "__main__":
    main()
