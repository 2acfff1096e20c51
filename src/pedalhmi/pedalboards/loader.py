"""Pedalboard instance graph parsing and resolution against plugin metadata."""

import logging
from pathlib import Path

from rdflib import Graph, Literal, URIRef
from rdflib.namespace import RDF

from pedalhmi.exceptions import BundleParseError
from pedalhmi.lv2 import PluginMetadataCache
from pedalhmi.lv2.rdf import (
    INGEN,
    LV2,
    MODPEDAL,
    base_iri,
    literal_int,
    parse_turtle,
    relative_name,
)
from pedalhmi.models import PedalInstance, Pedalboard

from .library import read_pedalboard
from .state_file import read_file_parameter_state

logger = logging.getLogger(__name__)


def parse_enabled(node) -> bool:
    """ingen:enabled value; absent means enabled."""
    if node is None:
        return True
    if isinstance(node, Literal):
        value = node.toPython()
        if isinstance(value, bool):
            return value
    return str(node).strip().lower() == "true"


class PedalboardStateLoader:
    """
    Turns a pedalboard bundle into an ordered list of PedalInstance.

    Instances are sorted by instance number, which is the order the host
    uses when it numbers plugins. Commands that address pedals by position
    depend on this order.
    """

    def __init__(self, cache: PluginMetadataCache | None = None):
        """
        Initialize loader.

        Args:
            cache: Plugin metadata used to resolve instances (None leaves
                   every pedal without metadata)
        """
        self._cache = cache

    def load(self, path: Path) -> Pedalboard:
        """
        Read a pedalboard bundle and resolve its pedals.

        Raises:
            MetadataError: If the bundle has no usable manifest
        """
        pedalboard = read_pedalboard(Path(path))
        self.get_pedals(pedalboard)
        return pedalboard

    def get_pedals(self, pedalboard: Pedalboard) -> list[PedalInstance]:
        """
        The pedalboard's pedal list, resolved on first request and kept on
        the Pedalboard afterwards.

        An unreadable instance graph yields an empty list.
        """
        if pedalboard.pedals is not None:
            return pedalboard.pedals

        base = base_iri(pedalboard.path)
        try:
            graph = parse_turtle(pedalboard.ttl_path, base=base)
        except (FileNotFoundError, BundleParseError) as e:
            logger.warning(f"Failed to load pedals from {pedalboard.path}: {e}")
            pedalboard.set_pedals([])
            return []

        pedals = self.parse_instances(graph, base, pedalboard.path)
        for pedal in pedals:
            self._resolve(pedal)

        pedalboard.set_pedals(pedals)
        logger.info(f"Loaded {len(pedals)} pedals from {pedalboard.name}")
        return pedals

    def parse_instances(self, graph: Graph, base: str, bundle: Path) -> list[PedalInstance]:
        """
        Enumerate the processing blocks of an instance graph.

        Blocks without an ``lv2:prototype`` are skipped.

        Returns:
            Unresolved instances sorted by instance number
        """
        pedals = []
        for block in set(graph.subjects(RDF.type, INGEN.Block)):
            prototype = graph.value(block, LV2.prototype)
            if prototype is None:
                logger.debug(f"Skipping block without prototype: {block}")
                continue

            instance_number = literal_int(graph.value(block, MODPEDAL.instanceNumber), 0)
            pedals.append(
                PedalInstance(
                    instance=relative_name(str(block), base),
                    plugin_uri=str(prototype),
                    instance_number=instance_number,
                    enabled=parse_enabled(graph.value(block, INGEN.enabled)),
                    values=self._port_values(graph, block),
                    file_values=read_file_parameter_state(bundle, instance_number),
                )
            )

        # Stable on ties, so equal numbers keep the instance name order
        pedals.sort(key=lambda pedal: pedal.instance)
        pedals.sort(key=lambda pedal: pedal.instance_number)
        return pedals

    def _port_values(self, graph: Graph, block: URIRef) -> dict[str, float]:
        """Current control values, stored on ``<instance>/<symbol>`` nodes."""
        prefix = f"{block}/"
        values: dict[str, float] = {}
        for port, value in graph.subject_objects(INGEN.value):
            port_uri = str(port)
            if not port_uri.startswith(prefix) or not isinstance(value, Literal):
                continue
            try:
                values[port_uri[len(prefix):]] = float(str(value))
            except ValueError:
                logger.debug(f"Skipping non-numeric value for {port_uri}: {value}")
        return values

    def _resolve(self, pedal: PedalInstance) -> None:
        if self._cache is None:
            return
        pedal.description = self._cache.get(pedal.plugin_uri)
        if pedal.description is None:
            logger.info(f"No metadata for {pedal.instance} ({pedal.plugin_uri})")
