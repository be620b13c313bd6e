class ForecastError(Exception):
    """
    Base for every failure that aborts a single forecast calculation.
    """
    kind = "forecast_error"


class UpstreamUnavailable(ForecastError):
    """
    A chain collaborator failed or returned malformed data.
    """
    kind = "upstream_unavailable"


class DivisionByZero(ForecastError, ZeroDivisionError):
    kind = "division_by_zero"


class OutOfRangeInput(ForecastError, ValueError):
    kind = "out_of_range"
