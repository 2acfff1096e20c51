"""Turtle loading and the RDF vocabulary used by LV2 and MOD bundles.

Description files are parsed into rdflib graphs and queried by
subject/predicate. Every file is parsed with its bundle directory as base
IRI, so relative references (``<plugin.ttl>``, ``<delay_1/time>``,
``<modgui/thumbnail.png>``) resolve to ``file://`` IRIs inside the bundle.
"""

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from rdflib import Graph, Literal, Namespace
from rdflib.term import Node

from pedalhmi.exceptions import BundleParseError

logger = logging.getLogger(__name__)

LV2 = Namespace("http://lv2plug.in/ns/lv2core#")
PPROPS = Namespace("http://lv2plug.in/ns/ext/port-props#")
PATCH = Namespace("http://lv2plug.in/ns/ext/patch#")
ATOM = Namespace("http://lv2plug.in/ns/ext/atom#")
MOD = Namespace("http://moddevices.com/ns/mod#")
MODGUI = Namespace("http://moddevices.com/ns/modgui#")
MODPEDAL = Namespace("http://moddevices.com/ns/modpedal#")
INGEN = Namespace("http://drobilla.net/ns/ingen#")


def base_iri(bundle: Path) -> str:
    """Base IRI of a bundle directory, with a trailing slash."""
    return bundle.resolve().as_uri().rstrip("/") + "/"


def parse_turtle(path: Path, base: str | None = None) -> Graph:
    """
    Parse one Turtle file.

    Args:
        path: File to parse
        base: Base IRI for relative references (default: the file's directory)

    Raises:
        FileNotFoundError: If the file doesn't exist
        BundleParseError: If the file can't be read or isn't valid Turtle
    """
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    graph = Graph()
    try:
        content = path.read_text(encoding="utf-8")
        graph.parse(data=content, format="turtle", publicID=base or base_iri(path.parent))
    except Exception as e:
        raise BundleParseError(path, str(e)) from e

    logger.debug(f"Parsed {path} ({len(graph)} triples)")
    return graph


def uri_to_path(uri: str) -> str:
    """Convert a ``file://`` IRI to a filesystem path; other IRIs are returned unchanged."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return uri
    return unquote(parsed.path)


def relative_name(uri: str, base: str) -> str:
    """Strip a base IRI from a resolved IRI (``file:///pb/delay_1`` -> ``delay_1``)."""
    if uri.startswith(base):
        return uri[len(base):]
    return uri


def trailing_name(uri: str) -> str:
    """
    Last path segment or fragment of an IRI.

    ``http://example.org/plugins/big-delay#stereo`` -> ``stereo``. Never
    returns an empty string: an IRI with no usable segment is returned whole.
    """
    for part in reversed(uri.replace("#", "/").split("/")):
        if part:
            return part
    return uri


def literal_str(node: Node | None) -> str | None:
    if node is None:
        return None
    return str(node)


def literal_float(node: Node | None, default: float) -> float:
    """Numeric value of a literal, or ``default`` when absent or not a number."""
    if not isinstance(node, Literal):
        return default
    try:
        return float(str(node))
    except ValueError:
        return default


def literal_int(node: Node | None, default: int) -> int:
    if not isinstance(node, Literal):
        return default
    try:
        return int(str(node))
    except ValueError:
        return default
