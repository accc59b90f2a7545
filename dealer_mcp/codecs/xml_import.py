"""Third-party XML import documents.

Layout::

    <Dealers>
      <Dealer id="D1">
        <Name>Downtown Motors</Name>
        <Vehicle type="suv" id="V1">
          <Make>Honda</Make>
          <Model>CR-V</Model>
          <Price unit="pounds">20000</Price>
        </Vehicle>
      </Dealer>
    </Dealers>

The parser only reshapes elements into plain import records; deciding whether
a record maps to a valid vehicle is the engine's job.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from dealer_mcp.constants import POUNDS_TO_DOLLARS
from dealer_mcp.errors import DocumentError
from dealer_mcp.normalization import parse_price

logger = logging.getLogger(__name__)


def _text(parent: ET.Element, tag: str) -> str:
    """Text of the first ``tag`` element below ``parent``, or ``""``."""
    node = parent.find(tag)
    if node is None:
        node = parent.find(f".//{tag}")
    if node is None or node.text is None:
        return ""
    return node.text.strip()


def convert_price(amount: float | None, unit: str | None) -> float | None:
    if amount is None:
        return None
    if (unit or "").strip().lower() == "pounds":
        return amount * POUNDS_TO_DOLLARS
    return amount


def vehicle_element_to_record(
    element: ET.Element, dealer_id: str, dealer_name: str,
) -> dict[str, Any]:
    price_node = element.find("Price")
    if price_node is None:
        price_node = element.find(".//Price")
    price: float | None = None
    if price_node is not None:
        price = convert_price(parse_price(price_node.text), price_node.get("unit"))

    return {
        "vehicle_id": (element.get("id") or "").strip(),
        "vehicle_type": (element.get("type") or "").strip().lower(),
        "manufacturer": _text(element, "Make"),
        "model": _text(element, "Model"),
        "price": price,
        "dealer_id": dealer_id,
        "dealer_name": dealer_name,
    }


def parse_import_tree(root: ET.Element) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    dealers = [root] if root.tag == "Dealer" else list(root.iter("Dealer"))
    for dealer in dealers:
        dealer_id = (dealer.get("id") or "").strip()
        dealer_name = _text(dealer, "Name")
        for element in dealer.iter("Vehicle"):
            records.append(vehicle_element_to_record(element, dealer_id, dealer_name))
    return records


def parse_import_string(document: str | bytes) -> list[dict[str, Any]]:
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise DocumentError(f"malformed XML: {exc}") from exc
    return parse_import_tree(root)


def parse_import_document(path: Path) -> list[dict[str, Any]]:
    """Parse an import file into records.  Raises :class:`DocumentError`."""
    try:
        tree = ET.parse(path)
    except FileNotFoundError as exc:
        raise DocumentError(f"import file not found: {path}") from exc
    except (ET.ParseError, OSError) as exc:
        raise DocumentError(f"cannot parse {path}: {exc}") from exc
    records = parse_import_tree(tree.getroot())
    logger.info("Parsed %d vehicle record(s) from %s", len(records), path)
    return records
