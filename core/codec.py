"""
Autodiscover (mobilesync) request/response documents.

Requests are built with the request schema namespace; responses are
matched namespace-agnostically since servers differ in what they emit.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Optional

from .errors import ProtocolError, TransportError
from .models import ServerError

log = logging.getLogger(__name__)

REQUEST_SCHEMA = "http://schemas.microsoft.com/exchange/autodiscover/mobilesync/requestschema/2006"
RESPONSE_SCHEMA = "http://schemas.microsoft.com/exchange/autodiscover/mobilesync/responseschema/2006"

# Autodiscover/Response/Action/Settings/Server/Url below the document root
_URL_PATH = "{*}Response/{*}Action/{*}Settings/{*}Server/{*}Url"
_ERROR_PATH = "{*}Response/{*}Error"


def encode_request(email_address: str) -> bytes:
    root = ET.Element("Autodiscover", xmlns=REQUEST_SCHEMA)
    request = ET.SubElement(root, "Request")
    ET.SubElement(request, "EMailAddress").text = email_address
    ET.SubElement(request, "AcceptableResponseSchema").text = RESPONSE_SCHEMA
    ET.indent(root)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def _parse(body: bytes) -> ET.Element:
    try:
        return ET.fromstring(body)
    except ET.ParseError as exc:
        raise TransportError(f"Failed to parse response: {exc}") from exc


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_error(root: ET.Element) -> Optional[ServerError]:
    error = root.find(_ERROR_PATH)
    if error is None:
        return None
    return ServerError(
        error_code=(error.findtext("{*}ErrorCode") or "").strip(),
        message=(error.findtext("{*}Message") or "").strip(),
    )


def decode_response(body: bytes) -> str:
    """
    Turn a response document into the endpoint URL.

    Raises ProtocolError when the server reports an <Error>, and
    TransportError when the body is not XML or carries no URL.
    """
    root = _parse(body)
    if _local_name(root.tag) != "Autodiscover":
        raise TransportError("Failed to get EwsUrl")

    error = parse_error(root)
    if error is not None:
        raise ProtocolError(error.error_code, error.message)

    url = (root.findtext(_URL_PATH) or "").strip()
    if not url:
        log.debug("response has no Action/Settings/Server/Url element")
        raise TransportError("Failed to get EwsUrl")
    return url
