"""Pedalboard bundles available on disk."""

import logging
from pathlib import Path

from rdflib import URIRef
from rdflib.namespace import DOAP, RDFS

from pedalhmi.exceptions import BundleParseError, MetadataError
from pedalhmi.lv2.rdf import base_iri, parse_turtle, relative_name
from pedalhmi.models import Pedalboard

logger = logging.getLogger(__name__)

MANIFEST = "manifest.ttl"


def read_pedalboard(path: Path) -> Pedalboard:
    """
    Read a pedalboard bundle's name and main description file.

    The main file is the manifest's first ``rdfs:seeAlso``; the name is its
    ``doap:name``, falling back to the bundle directory name.

    Raises:
        MetadataError: If the bundle has no usable manifest
    """
    path = Path(path)
    base = base_iri(path)
    try:
        manifest = parse_turtle(path / MANIFEST, base=base)
    except FileNotFoundError as e:
        raise MetadataError(f"{path.name} has no manifest", path=path) from e

    see_also = sorted(str(ref) for ref in manifest.objects(None, RDFS.seeAlso))
    if not see_also:
        raise MetadataError(
            f"{path.name} does not reference a pedalboard description",
            path=path,
            technical_message=f"No rdfs:seeAlso in {path / MANIFEST}",
        )
    ttl_name = relative_name(see_also[0], base)

    name = None
    try:
        graph = parse_turtle(path / ttl_name, base=base)
        value = graph.value(URIRef(see_also[0]), DOAP.name)
        if value is None:
            value = next(graph.objects(None, DOAP.name), None)
        name = str(value) if value is not None else None
    except (FileNotFoundError, BundleParseError) as e:
        logger.warning(f"Cannot read pedalboard description {path / ttl_name}: {e}")

    return Pedalboard(name or path.stem, path, ttl_name)


def list_pedalboards(pedalboards_dir: Path) -> list[Pedalboard]:
    """
    All pedalboards under a directory, sorted by path.

    The order matches the host's own enumeration, so list positions can be
    used as pedalboard indexes in protocol commands. Unreadable bundles are
    logged and skipped.
    """
    pedalboards_dir = Path(pedalboards_dir).expanduser()
    if not pedalboards_dir.is_dir():
        logger.warning(f"Pedalboards directory not found: {pedalboards_dir}")
        return []

    logger.info(f"Loading pedalboards from {pedalboards_dir}")
    try:
        entries = sorted(pedalboards_dir.iterdir(), key=lambda p: str(p))
    except OSError as e:
        logger.warning(f"Cannot read pedalboards directory {pedalboards_dir}: {e}")
        return []

    pedalboards = []
    for entry in entries:
        if not entry.is_dir():
            continue
        try:
            pedalboards.append(read_pedalboard(entry))
        except MetadataError as e:
            logger.warning(f"Skipping pedalboard {entry.name}: {e.get_full_message()}")
    return pedalboards
