"""Decoding and validation of provider response bodies.

The provider answers in XML or JSON depending on the requested mode, but
reports errors as JSON documents in every mode::

    {"cod": "404", "message": "city not found"}

Parsing is therefore strict on the success path and tolerant on the
failure path: a body that is not XML is decoded once more as JSON to find
out whether it is an error envelope or simply garbage.

Each decoding stage returns a typed outcome instead of raising:

- ``attempt_xml`` -> ``Element`` or ``Undecodable``
- ``attempt_json`` -> decoded document or ``Undecodable``
- ``classify`` -> document or ``ErrorEnvelope``

The public ``parse_*`` functions turn those outcomes into results or
exceptions.
"""

import json
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, NoReturn, Union

from .exceptions import OpenWeatherMapAPIError, OpenWeatherMapResponseError
from .types import HISTORY_SUCCESS_CODE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Undecodable:
    """A body that could not be decoded in the attempted format."""

    detail: str


@dataclass(frozen=True)
class ErrorEnvelope:
    """A decoded provider error document."""

    message: str
    code: int = 0


def error_code(value: Any) -> int:
    """Convert the provider's ``cod`` field to int, 0 when unusable.

    Example:
        >>> error_code("404")
        404
        >>> error_code(None)
        0
    """
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def attempt_xml(body: str) -> Union[ET.Element, Undecodable]:
    try:
        return ET.fromstring(body)
    except ET.ParseError as e:
        return Undecodable(detail=str(e))


def attempt_json(body: str) -> Union[Any, Undecodable]:
    try:
        return json.loads(body)
    except ValueError as e:
        return Undecodable(detail=str(e))


def classify(document: Any) -> Union[Any, ErrorEnvelope]:
    """Detect a provider error envelope.

    A non-null ``message`` field is the sole error marker; successful
    payloads never carry one.
    """
    if isinstance(document, dict) and document.get("message") is not None:
        return ErrorEnvelope(
            message=str(document["message"]),
            code=error_code(document.get("cod")),
        )
    return document


def _raise_api_error(envelope: ErrorEnvelope, log: logging.Logger) -> NoReturn:
    log.error(f"OpenWeatherMap returned an error {envelope.code}: {envelope.message}")
    raise OpenWeatherMapAPIError(envelope.message, envelope.code)


def parse_xml(body: str, log: logging.Logger = logger) -> ET.Element:
    """Parse an XML response body.

    Args:
        body: Raw response body.
        log: Logger receiving failure reports.

    Returns:
        Root element of the document.

    Raises:
        OpenWeatherMapAPIError: If the body is a JSON error envelope.
        OpenWeatherMapResponseError: If the body is neither XML nor an
            error envelope. The raw body is attached.

    Example:
        >>> root = parse_xml("<current><city id='2950159'/></current>")
        >>> root.find("city").get("id")
        '2950159'
    """
    root = attempt_xml(body)
    if not isinstance(root, Undecodable):
        return root

    document = attempt_json(body)
    if not isinstance(document, Undecodable):
        outcome = classify(document)
        if isinstance(outcome, ErrorEnvelope):
            _raise_api_error(outcome, log)

    log.error(f"OpenWeatherMap returned an invalid xml document: {root.detail}")
    raise OpenWeatherMapResponseError(
        f"Unknown fatal error: OpenWeatherMap returned the following body: {body!r}",
        body=body,
    )


def _decode_json_object(body: str, log: logging.Logger) -> dict[str, Any]:
    document = attempt_json(body)
    if isinstance(document, Undecodable):
        log.error(f"OpenWeatherMap returned invalid json: {document.detail}")
        raise OpenWeatherMapResponseError(
            f"OpenWeatherMap returned an invalid json object. JSON error is: {document.detail}",
            body=body,
        )
    if not isinstance(document, dict):
        log.error(f"OpenWeatherMap returned a json {type(document).__name__}, not an object")
        raise OpenWeatherMapResponseError(
            f"Expected a json object, got {type(document).__name__}", body=body
        )
    return document


def parse_json(body: str, log: logging.Logger = logger) -> dict[str, Any]:
    """Parse a JSON response body.

    Args:
        body: Raw response body.

    Returns:
        Decoded JSON object.

    Raises:
        OpenWeatherMapResponseError: If the body is not a JSON object.
        OpenWeatherMapAPIError: If the object carries a ``message`` field.
    """
    document = _decode_json_object(body, log)
    outcome = classify(document)
    if isinstance(outcome, ErrorEnvelope):
        _raise_api_error(outcome, log)
    return document


def parse_status_envelope(
    body: str,
    success_code: int = HISTORY_SUCCESS_CODE,
    log: logging.Logger = logger,
) -> dict[str, Any]:
    """Parse a JSON envelope whose ``cod`` field signals success.

    Used for responses that carry an informational ``message`` even on
    success (weather history sends ``"message": "Count: 24"``), so the
    status code is checked instead of the presence of ``message``.

    Raises:
        OpenWeatherMapResponseError: If the body is not a JSON object.
        OpenWeatherMapAPIError: If ``cod`` differs from ``success_code``.
    """
    document = _decode_json_object(body, log)
    code = error_code(document.get("cod"))
    if code != success_code:
        message = document.get("message")
        _raise_api_error(
            ErrorEnvelope(
                message=str(message) if message is not None else "Unknown error",
                code=code,
            ),
            log,
        )
    return document
