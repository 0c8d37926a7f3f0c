"""MCP Server for Green Car fare calculation.

This module implements a Model Context Protocol (MCP) server that exposes
Green Car fare quotes, unit-price rankings and station reachability.
"""

import asyncio
import json
import logging
from typing import Any

from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import (
    TextContent,
    Tool,
)

from .. import __version__
from ..config import Settings
from ..core.calculator import GreenFareCalculator
from ..core.exceptions import (
    GreenFareError,
    RouteNotFoundError,
    StationNotFoundError,
    ValidationError,
)
from ..core.models import (
    FareTable,
    OperatingSystemData,
    UnifiedStationData,
)
from ..core.ranking import filter_rankings_by_station, top_rankings
from ..data.loader import load_calculator

logger = logging.getLogger(__name__)

MAX_RANKING_SIZE = 200


class GreenFareMCPServer:
    """MCP Server exposing the Green Car fare calculator."""

    def __init__(
        self,
        calculator: GreenFareCalculator | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            calculator: Calculator to serve; loaded from ``settings`` if omitted
            settings: Data location, defaults to the environment
        """
        self.server = Server("green-per-km")
        self.settings = settings or Settings.from_env()
        self.calculator = calculator or self._load_calculator()
        self._register_handlers()

    def _load_calculator(self) -> GreenFareCalculator:
        """Load the calculator, falling back to an empty network."""
        try:
            calculator = load_calculator(self.settings)
            logger.info(
                f"Loaded {len(calculator.stations)} stations from "
                f"{self.settings.data_dir}"
            )
            return calculator
        except GreenFareError as e:
            logger.warning(f"Failed to load data: {e}. Starting with empty network.")
            return GreenFareCalculator(
                UnifiedStationData(), FareTable(), OperatingSystemData()
            )

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List available tools."""
            return [
                Tool(
                    name="calculate_fare",
                    description="Calculate the JR East Green Car fare, distance, time and unit prices between two stations",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "from_station": {
                                "type": "string",
                                "description": "Departure station name in Japanese (e.g. 東京)",
                            },
                            "to_station": {
                                "type": "string",
                                "description": "Destination station name in Japanese (e.g. 横浜)",
                            },
                            "method": {
                                "type": "string",
                                "description": "Payment method: 'suica' or 'ticket'",
                                "enum": ["suica", "ticket"],
                                "default": "suica",
                            },
                        },
                        "required": ["from_station", "to_station"],
                    },
                ),
                Tool(
                    name="get_rankings",
                    description="Rank station pairs by Green Car price per km or per minute",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "by": {
                                "type": "string",
                                "description": "Rank by 'km' (yen per km) or 'minute' (yen per minute)",
                                "enum": ["km", "minute"],
                                "default": "km",
                            },
                            "order": {
                                "type": "string",
                                "description": "'expensive' (highest unit price first) or 'cheap'",
                                "enum": ["expensive", "cheap"],
                                "default": "expensive",
                            },
                            "station": {
                                "type": "string",
                                "description": "Only pairs including this station (optional)",
                            },
                            "routes": {
                                "type": "array",
                                "items": {"type": "string"},
                                "description": "Restrict to these route identifiers (optional)",
                            },
                            "limit": {
                                "type": "integer",
                                "description": "Maximum number of entries",
                                "default": 30,
                                "minimum": 1,
                                "maximum": MAX_RANKING_SIZE,
                            },
                            "method": {
                                "type": "string",
                                "enum": ["suica", "ticket"],
                                "default": "suica",
                            },
                        },
                    },
                ),
                Tool(
                    name="list_compatible_stations",
                    description="List stations reachable from a station without changing trains (shared route or through service)",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "station_name": {
                                "type": "string",
                                "description": "Exact station name",
                            }
                        },
                        "required": ["station_name"],
                    },
                ),
                Tool(
                    name="list_routes",
                    description="List the routes in the station database",
                    inputSchema={"type": "object", "properties": {}},
                ),
            ]

        @self.server.call_tool()
        async def handle_call_tool(
            name: str, arguments: dict[str, Any]
        ) -> list[TextContent]:
            """Handle tool calls."""
            try:
                if name == "calculate_fare":
                    return await self._calculate_fare(arguments)
                elif name == "get_rankings":
                    return await self._get_rankings(arguments)
                elif name == "list_compatible_stations":
                    return await self._list_compatible_stations(arguments)
                elif name == "list_routes":
                    return await self._list_routes(arguments)
                else:
                    return [TextContent(type="text", text=f"Unknown tool: {name}")]

            except Exception as e:
                logger.error(f"Error in tool {name}: {e}")
                return [TextContent(type="text", text=f"Error: {str(e)}")]

    async def _calculate_fare(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Quote the fare between two stations."""
        from_station = arguments.get("from_station", "")
        to_station = arguments.get("to_station", "")
        method = arguments.get("method", self.settings.default_method)

        try:
            quote = self.calculator.quote(from_station, to_station, method=method)
        except ValidationError as e:
            return [TextContent(type="text", text=f"Invalid input: {str(e)}")]
        except StationNotFoundError as e:
            return [TextContent(type="text", text=f"Unknown station: {e.station}")]
        except RouteNotFoundError as e:
            return [TextContent(type="text", text=f"No route found: {str(e)}")]

        result_text = f"**Green Car fare: {quote.from_station} → {quote.to_station}**\n\n"
        if quote.route:
            result_text += f"• Route: {quote.route}\n"
        elif quote.connection is not None:
            system = self.calculator.operating_system_for(quote.connection)
            system_title = (system.title_ja or system.id) if system else "直通運転"
            result_text += f"• Through service: {system_title}\n"
            for segment in quote.connection.route_segments:
                result_text += (
                    f"   - {segment.from_station} → {segment.to_station} "
                    f"({segment.route}, {segment.km:g}km, {segment.minutes:g}min)\n"
                )
        if quote.alternatives:
            result_text += f"• Other options: {quote.alternatives}\n"
        result_text += f"• Distance: {quote.distance:.1f}km\n"
        result_text += f"• Time: {quote.minutes:g}min\n"
        result_text += f"• Fare ({quote.method}): ¥{quote.fare:,}\n"
        result_text += f"• Per km: {quote.unit_price:.1f} yen/km\n"
        result_text += f"• Per minute: {quote.minute_price:.1f} yen/min\n"

        json_text = "JSON Data:\n" + json.dumps(
            quote.model_dump(by_alias=True), ensure_ascii=False, indent=2
        )
        return [
            TextContent(type="text", text=result_text),
            TextContent(type="text", text=json_text),
        ]

    async def _get_rankings(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Rank station pairs by unit price."""
        key = "minute_price" if arguments.get("by") == "minute" else "unit_price"
        descending = arguments.get("order", "expensive") != "cheap"
        limit = max(1, min(int(arguments.get("limit", 30)), MAX_RANKING_SIZE))
        method = arguments.get("method", self.settings.default_method)
        routes = arguments.get("routes") or None
        station = arguments.get("station")

        items = self.calculator.rankings(method, route_filter=routes, by=key)
        if station:
            items = filter_rankings_by_station(items, station)
        items = top_rankings(items, limit, key=key, descending=descending)

        if not items:
            return [TextContent(type="text", text="No ranking entries found")]

        unit = "yen/min" if key == "minute_price" else "yen/km"
        result_text = f"**Top {len(items)} pairs by {unit}"
        result_text += " (highest first)**\n\n" if descending else " (lowest first)**\n\n"
        for index, item in enumerate(items, 1):
            value = item.minute_price if key == "minute_price" else item.unit_price
            result_text += (
                f"{index}. {item.from_station} → {item.to_station}: "
                f"{value:.1f} {unit} (¥{item.fare:,}, {item.distance:.1f}km, "
                f"{item.minutes:g}min, {item.route})\n"
            )

        return [TextContent(type="text", text=result_text)]

    async def _list_compatible_stations(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """List stations reachable without changing trains."""
        station_name = arguments.get("station_name", "")

        try:
            self.calculator.station(station_name)
        except StationNotFoundError:
            return [
                TextContent(type="text", text=f"Station '{station_name}' not found")
            ]

        reachable = [
            s.name
            for s in self.calculator.compatible_stations(station_name)
            if s.name != station_name
        ]
        result_text = (
            f"**{len(reachable)} stations reachable from {station_name}:**\n"
            + "、".join(reachable)
        )
        return [TextContent(type="text", text=result_text)]

    async def _list_routes(self, arguments: dict[str, Any]) -> list[TextContent]:
        """List routes with their station counts."""
        routes = self.calculator.routes()
        if not routes:
            return [TextContent(type="text", text="No routes in the station database")]

        result_text = f"**{len(routes)} routes:**\n"
        for route in routes:
            count = len(self.calculator.route_stations(route))
            result_text += f"• {route} ({count} stations)\n"
        return [TextContent(type="text", text=result_text)]


async def main() -> None:
    """Main entry point for the MCP server."""
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting Green per km MCP Server")

    server_instance = GreenFareMCPServer()

    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCP Server running with stdio transport")
        await server_instance.server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="green-per-km",
                server_version=__version__,
                capabilities=server_instance.server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def main_sync() -> None:
    """Synchronous wrapper for the async main function - used as entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    main_sync()
