"""Custom exceptions for Green Car fare calculation."""


class GreenFareError(Exception):
    """Base exception for green-per-km errors."""

    pass


class StationNotFoundError(GreenFareError):
    """Raised when a station name cannot be found in a station list."""

    def __init__(self, station: str, message: str | None = None):
        self.station = station
        super().__init__(message or f"Station not found: {station}")


class RouteNotFoundForStationError(GreenFareError):
    """Raised when a station exists but is not on the requested route."""

    def __init__(self, station: str, route: str):
        self.station = station
        self.route = route
        super().__init__(f"Station {station} is not on route {route}")


class RouteNotFoundError(GreenFareError):
    """Raised when two stations share neither a route nor a through service."""

    pass


class DataIntegrityError(GreenFareError):
    """Raised when static data violates its invariants."""

    pass


class DataLoadError(GreenFareError):
    """Raised when a data document cannot be read or parsed."""

    pass


class FareTableParseError(GreenFareError):
    """Raised when the fare table page cannot be parsed."""

    pass


class ValidationError(GreenFareError):
    """Raised when input validation fails."""

    pass
