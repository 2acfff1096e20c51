"""Plugin description extraction from an LV2 bundle.

Given a plugin identifier and its bundle directory, the extractor parses
the bundle's description files (each at most once) and builds an immutable
PluginDescription:

- GUI metadata (label, brand, thumbnail, screenshot) from ``modgui.ttl``,
  then ``modguis.ttl``, then the plugin's own description files, then the
  manifest. Only the ``modgui:gui`` block attached to the requested
  identifier is read, so multi-plugin bundles never leak labels.
- Label fallbacks: ``doap:name``, then the identifier's trailing segment.
- Control ports with ranges, flags and sorted scale points.
- File parameters (``patch:writable`` with ``rdfs:range atom:Path``).

A file that is missing or fails to parse is skipped; extraction always
produces a description.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from rdflib import Graph, Literal, URIRef
from rdflib.namespace import DOAP, RDF, RDFS
from rdflib.term import Node

from pedalhmi.exceptions import BundleParseError
from pedalhmi.models import (
    ControlParameter,
    FileParameter,
    PluginDescription,
    ScalePoint,
    normalize_file_types,
)

from .bundle_index import MANIFEST
from .rdf import (
    ATOM,
    LV2,
    MOD,
    MODGUI,
    PATCH,
    PPROPS,
    base_iri,
    literal_float,
    literal_int,
    literal_str,
    parse_turtle,
    trailing_name,
    uri_to_path,
)

logger = logging.getLogger(__name__)

GUI_FILES = ("modgui.ttl", "modguis.ttl")

# Ports without lv2:index sort after indexed ones
_NO_INDEX = 1 << 31


def sort_scale_points(points: list[ScalePoint]) -> list[ScalePoint]:
    """Sort ascending by value; points with equal values keep their order."""
    return sorted(points, key=lambda point: point.value)


@dataclass
class GuiInfo:
    """GUI fields gathered across the fallback chain."""

    label: str | None = None
    brand: str | None = None
    thumbnail_path: str | None = None
    screenshot_path: str | None = None

    @property
    def complete(self) -> bool:
        return self.label is not None and self.thumbnail_path is not None


class MetadataExtractor:
    """Builds PluginDescription objects from bundle files."""

    def extract(self, uri: str, bundle_path: str | Path) -> PluginDescription:
        """
        Extract one plugin's description.

        Args:
            uri: Plugin identifier
            bundle_path: Directory of the bundle declaring the plugin

        Returns:
            A description; at worst with a derived label and no parameters
        """
        bundle = Path(bundle_path)
        plugin = URIRef(uri)
        base = base_iri(bundle)
        graphs: dict[Path, Graph | None] = {}

        def load(path: Path) -> Graph | None:
            if path not in graphs:
                graphs[path] = self._load_graph(path, base)
            return graphs[path]

        manifest = load(bundle / MANIFEST)
        data_graphs = [
            graph
            for graph in (load(path) for path in self._data_files(manifest, plugin))
            if graph is not None
        ]

        # 1. Dedicated GUI files, singular then plural
        gui = GuiInfo()
        for name in GUI_FILES:
            if gui.complete:
                break
            graph = load(bundle / name)
            if graph is not None:
                self._read_gui(graph, plugin, gui)

        # 2. GUI block embedded in the plugin's own description
        if not gui.complete:
            for graph in data_graphs:
                self._read_gui(graph, plugin, gui)
                if gui.complete:
                    break

        # 3. GUI block embedded in the manifest
        if gui.label is None and manifest is not None:
            self._read_gui(manifest, plugin, gui)

        # 4. doap:name
        if gui.label is None:
            gui.label = self._doap_name(data_graphs, plugin)

        # 5. Identifier's trailing segment
        if gui.label is None:
            gui.label = trailing_name(uri)

        description = PluginDescription(
            uri=uri,
            bundle_path=str(bundle),
            label=gui.label,
            brand=gui.brand,
            thumbnail_path=gui.thumbnail_path,
            screenshot_path=gui.screenshot_path,
            control_parameters=self._control_parameters(data_graphs, plugin),
            file_parameters=self._file_parameters(data_graphs, plugin),
        )
        logger.debug(
            f"Extracted {uri}: label={description.label!r}, "
            f"{len(description.control_parameters)} controls, "
            f"{len(description.file_parameters)} file parameters"
        )
        return description

    # =================================================================
    # Files
    # =================================================================

    def _load_graph(self, path: Path, base: str) -> Graph | None:
        try:
            return parse_turtle(path, base=base)
        except FileNotFoundError:
            return None
        except BundleParseError as e:
            logger.warning(e.get_full_message())
            return None

    def _data_files(self, manifest: Graph | None, plugin: URIRef) -> list[Path]:
        """Description files the manifest lists for the plugin, GUI files excluded."""
        if manifest is None:
            return []
        files = []
        for ref in manifest.objects(plugin, RDFS.seeAlso):
            if not isinstance(ref, URIRef):
                continue
            path = Path(uri_to_path(str(ref)))
            if "modgui" in path.name:
                continue
            files.append(path)
        return files

    # =================================================================
    # GUI metadata
    # =================================================================

    def _read_gui(self, graph: Graph, plugin: URIRef, gui: GuiInfo) -> None:
        """Fill the unset GuiInfo fields from the plugin's own modgui:gui block."""
        for block in graph.objects(plugin, MODGUI.gui):
            if gui.label is None:
                gui.label = literal_str(graph.value(block, MODGUI.label))
            if gui.brand is None:
                gui.brand = literal_str(graph.value(block, MODGUI.brand))
            if gui.thumbnail_path is None:
                gui.thumbnail_path = self._asset_path(graph.value(block, MODGUI.thumbnail))
            if gui.screenshot_path is None:
                gui.screenshot_path = self._asset_path(graph.value(block, MODGUI.screenshot))

    def _asset_path(self, node: Node | None) -> str | None:
        if node is None:
            return None
        return uri_to_path(str(node))

    def _doap_name(self, graphs: list[Graph], plugin: URIRef) -> str | None:
        for graph in graphs:
            name = graph.value(plugin, DOAP.name)
            if name is not None:
                return str(name)
        return None

    # =================================================================
    # Parameters
    # =================================================================

    def _control_parameters(self, graphs: list[Graph], plugin: URIRef) -> list[ControlParameter]:
        """Control ports ordered by lv2:index, then symbol. First definition of a symbol wins."""
        found: dict[str, tuple[int, ControlParameter]] = {}
        for graph in graphs:
            for port in graph.objects(plugin, LV2.port):
                parsed = self._control_parameter(graph, port)
                if parsed is not None and parsed[1].symbol not in found:
                    found[parsed[1].symbol] = parsed
        ordered = sorted(found.values(), key=lambda item: (item[0], item[1].symbol))
        return [param for _, param in ordered]

    def _control_parameter(self, graph: Graph, port: Node) -> tuple[int, ControlParameter] | None:
        types = set(graph.objects(port, RDF.type))
        if LV2.ControlPort not in types:
            return None

        symbol = literal_str(graph.value(port, LV2.symbol))
        if not symbol:
            logger.debug(f"Skipping control port without symbol: {port}")
            return None

        properties = set(graph.objects(port, LV2.portProperty))
        enumeration = LV2.enumeration in properties
        scale_points = self._scale_points(graph, port) if enumeration else []

        param = ControlParameter(
            symbol=symbol,
            name=literal_str(graph.value(port, LV2.name)) or symbol,
            minimum=literal_float(graph.value(port, LV2.minimum), 0.0),
            maximum=literal_float(graph.value(port, LV2.maximum), 1.0),
            default=literal_float(graph.value(port, LV2.default), 0.0),
            toggle=LV2.toggled in properties,
            integer=LV2.integer in properties,
            trigger=PPROPS.trigger in properties,
            enumeration=enumeration,
            output=LV2.OutputPort in types,
            scale_points=scale_points,
        )
        # LV2.index would be str.index
        return literal_int(graph.value(port, LV2["index"]), _NO_INDEX), param

    def _scale_points(self, graph: Graph, port: Node) -> list[ScalePoint]:
        points = []
        for node in graph.objects(port, LV2.scalePoint):
            label = graph.value(node, RDFS.label)
            value = graph.value(node, RDF.value)
            if label is None or not isinstance(value, Literal):
                continue
            try:
                points.append(ScalePoint(label=str(label), value=float(str(value))))
            except ValueError:
                logger.debug(f"Skipping scale point with non-numeric value: {value}")
        return sort_scale_points(points)

    def _file_parameters(self, graphs: list[Graph], plugin: URIRef) -> list[FileParameter]:
        params: list[FileParameter] = []
        seen: set[str] = set()
        for graph in graphs:
            for node in graph.objects(plugin, PATCH.writable):
                uri = str(node)
                if uri in seen or (node, RDFS.range, ATOM.Path) not in graph:
                    continue
                seen.add(uri)
                params.append(
                    FileParameter(
                        uri=uri,
                        label=literal_str(graph.value(node, RDFS.label)) or trailing_name(uri),
                        file_types=self._file_types(graph, node),
                    )
                )
        return params

    def _file_types(self, graph: Graph, node: Node) -> list[str]:
        """Accepted types, given as a comma-separated string or as typed references."""
        raw: list[str] = []
        for value in graph.objects(node, MOD.fileTypes):
            if isinstance(value, Literal):
                raw.append(str(value))
            else:
                raw.append(trailing_name(str(value)))
        return normalize_file_types(raw)
