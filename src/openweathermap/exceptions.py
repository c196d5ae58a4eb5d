"""Exceptions for the OpenWeatherMap API client.

This module defines custom exceptions for error handling in the
OpenWeatherMap client. All exceptions inherit from OpenWeatherMapError for
easy catching.

Validation errors (query, argument and credential errors) are raised before
any network activity. Response and API errors are raised after a body has
been retrieved. Connection errors come from the HTTP fetcher.

Example:
    Catching all OpenWeatherMap errors::

        from openweathermap import OpenWeatherMapClient, OpenWeatherMapError

        try:
            async with OpenWeatherMapClient(api_key="...") as client:
                weather = await client.get_weather("Berlin")
        except OpenWeatherMapError as e:
            print(f"OpenWeatherMap error: {e}")

    Catching provider errors::

        from openweathermap import OpenWeatherMapAPIError

        try:
            weather = await client.get_weather("Nowhere-on-earth")
        except OpenWeatherMapAPIError as e:
            print(e.code, e.message)  # 404 city not found
"""

from typing import Optional


class OpenWeatherMapError(Exception):
    """Base exception for all OpenWeatherMap errors.

    Example:
        >>> try:
        ...     await client.get_weather("Berlin")
        ... except OpenWeatherMapError as e:
        ...     print(f"OpenWeatherMap operation failed: {e}")
    """

    pass


class OpenWeatherMapAPIError(OpenWeatherMapError):
    """Exception raised when the provider returns an error envelope.

    The provider reports errors as JSON documents carrying a ``message``
    and a ``cod`` field, even when XML was requested.

    Args:
        message: The error message returned by the provider.
        code: The provider's status code, 0 when it sent none.

    Attributes:
        message: Human-readable error message from the provider.
        code: Numeric status code from the provider.

    Example:
        >>> raise OpenWeatherMapAPIError("city not found", 404)
        OpenWeatherMapAPIError: API error 404: city not found
    """

    def __init__(self, message: str, code: int = 0) -> None:
        self.message = message
        self.code = code
        super().__init__(f"API error {code}: {message}")


class OpenWeatherMapResponseError(OpenWeatherMapError):
    """Exception raised when a response body cannot be decoded.

    Args:
        detail: Description of the decoding failure.
        body: The raw body, kept for diagnostics.

    Attributes:
        body: The raw response body, or None when not attached.
    """

    def __init__(self, detail: str, body: Optional[str] = None) -> None:
        self.body = body
        super().__init__(detail)


class OpenWeatherMapConnectionError(OpenWeatherMapError):
    """Exception raised when the HTTP request to the provider fails.

    This occurs on HTTP-level errors, timeouts, DNS failures or network
    connectivity issues. Wraps underlying httpx exceptions.
    """

    pass


class OpenWeatherMapValidationError(OpenWeatherMapError):
    """Exception raised when a caller-supplied option is invalid.

    Examples are a forecast horizon above 16 days, an unknown history
    granularity or an unknown UV index precision.
    """

    pass


class OpenWeatherMapQueryError(OpenWeatherMapError):
    """Exception raised when a place specifier has no recognized shape."""

    pass


class OpenWeatherMapCredentialError(OpenWeatherMapError):
    """Exception raised when an operation needs an API key and none is set."""

    pass
