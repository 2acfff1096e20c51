"""Pytest fixtures for tests.

The fixtures write small but realistic LV2 bundles and MOD pedalboard
bundles into a temporary directory.
"""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from pedalhmi.models import AppConfig

PREFIXES = """\
@prefix atom: <http://lv2plug.in/ns/ext/atom#> .
@prefix doap: <http://usefulinc.com/ns/doap#> .
@prefix ingen: <http://drobilla.net/ns/ingen#> .
@prefix lv2: <http://lv2plug.in/ns/lv2core#> .
@prefix mod: <http://moddevices.com/ns/mod#> .
@prefix modgui: <http://moddevices.com/ns/modgui#> .
@prefix modpedal: <http://moddevices.com/ns/modpedal#> .
@prefix patch: <http://lv2plug.in/ns/ext/patch#> .
@prefix pprops: <http://lv2plug.in/ns/ext/port-props#> .
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .

"""

DELAY_URI = "http://example.org/plugins/delay"
CHORUS_URI = "http://example.org/plugins/chorus"
EMBEDDED_URI = "http://example.org/plugins/embedded"
NAMED_URI = "http://example.org/plugins/named"
BARE_URI = "http://example.org/plugins/bare-amp#mono"

FX_MANIFEST = f"""
<{DELAY_URI}>
    a lv2:Plugin ;
    lv2:binary <fx.so> ;
    rdfs:seeAlso <delay.ttl> , <modguis.ttl> .

<{CHORUS_URI}>
    a lv2:Plugin ;
    lv2:binary <fx.so> ;
    rdfs:seeAlso <chorus.ttl> , <modguis.ttl> .
"""

FX_MODGUIS = f"""
<{DELAY_URI}>
    modgui:gui [
        modgui:label "Tape Delay" ;
        modgui:brand "Example" ;
        modgui:thumbnail <modgui/thumbnail-delay.png> ;
        modgui:screenshot <modgui/screenshot-delay.png> ;
    ] .

<{CHORUS_URI}>
    modgui:gui [
        modgui:label "Chorus" ;
        modgui:brand "Other" ;
        modgui:thumbnail <modgui/thumbnail-chorus.png> ;
    ] .
"""

DELAY_TTL = f"""
<{DELAY_URI}>
    a lv2:Plugin ;
    doap:name "Delay Doap" ;
    patch:writable <{DELAY_URI}#ir> ;
    lv2:port [
        a lv2:InputPort , lv2:ControlPort ;
        lv2:index 2 ;
        lv2:symbol "mode" ;
        lv2:name "Mode" ;
        lv2:default 1 ;
        lv2:minimum 0 ;
        lv2:maximum 2 ;
        lv2:portProperty lv2:enumeration , lv2:integer ;
        lv2:scalePoint [
            rdfs:label "Fast" ;
            rdf:value 2
        ] , [
            rdfs:label "Slow" ;
            rdf:value 0
        ] , [
            rdfs:label "Mid" ;
            rdf:value 1
        ]
    ] , [
        a lv2:InputPort , lv2:ControlPort ;
        lv2:index 1 ;
        lv2:symbol "time" ;
        lv2:name "Time" ;
        lv2:default 0.5 ;
        lv2:minimum 0.01 ;
        lv2:maximum 2.0
    ] , [
        a lv2:InputPort , lv2:ControlPort ;
        lv2:index 3 ;
        lv2:symbol "bypass" ;
        lv2:portProperty lv2:toggled
    ] , [
        a lv2:InputPort , lv2:ControlPort ;
        lv2:index 5 ;
        lv2:symbol "tap" ;
        lv2:name "Tap" ;
        lv2:portProperty pprops:trigger
    ] , [
        a lv2:OutputPort , lv2:ControlPort ;
        lv2:index 4 ;
        lv2:symbol "level" ;
        lv2:name "Level"
    ] , [
        a lv2:InputPort , lv2:ControlPort ;
        lv2:index 6 ;
        lv2:name "No symbol"
    ] , [
        a lv2:InputPort , lv2:AudioPort ;
        lv2:index 0 ;
        lv2:symbol "in" ;
        lv2:name "In"
    ] .

<{DELAY_URI}#ir>
    a lv2:Parameter ;
    rdfs:label "Impulse" ;
    rdfs:range atom:Path ;
    mod:fileTypes "cabsim,ir" .
"""

CHORUS_TTL = f"""
<{CHORUS_URI}>
    a lv2:Plugin ;
    doap:name "Chorus Doap" ;
    patch:writable <{CHORUS_URI}#model> , <{CHORUS_URI}#gain> ;
    lv2:port [
        a lv2:InputPort , lv2:ControlPort ;
        lv2:index 0 ;
        lv2:symbol "rate" ;
        lv2:name "Rate"
    ] .

<{CHORUS_URI}#model>
    a lv2:Parameter ;
    rdfs:range atom:Path ;
    mod:fileTypes mod:nam , mod:nammodel .

<{CHORUS_URI}#gain>
    a lv2:Parameter ;
    rdfs:label "Gain" ;
    rdfs:range atom:Float .
"""

EMBEDDED_MANIFEST = f"""
<{EMBEDDED_URI}>
    a lv2:Plugin ;
    rdfs:seeAlso <embedded.ttl> .
"""

EMBEDDED_TTL = f"""
<{EMBEDDED_URI}>
    a lv2:Plugin ;
    doap:name "Embedded Doap" ;
    modgui:gui [
        modgui:label "Embedded" ;
        modgui:thumbnail <thumb.png>
    ] .
"""

NAMED_MANIFEST = f"""
<{NAMED_URI}>
    a lv2:Plugin ;
    rdfs:seeAlso <named.ttl> .
"""

NAMED_TTL = f"""
<{NAMED_URI}>
    a lv2:Plugin ;
    doap:name "Named Plugin" .
"""

BARE_MANIFEST = f"""
<{BARE_URI}>
    a lv2:Plugin ;
    rdfs:seeAlso <bare.ttl> .
"""

BARE_TTL = f"""
<{BARE_URI}>
    a lv2:Plugin .
"""

PEDALBOARD_MANIFEST = """
<{name}.ttl>
    a lv2:Plugin , ingen:Graph , modpedal:Pedalboard ;
    rdfs:seeAlso <{name}.ttl> .
"""

# Instances are declared out of instance-number order on purpose
BOARD_A_TTL = f"""
<reverb_1>
    a ingen:Block ;
    lv2:prototype <{CHORUS_URI}> ;
    modpedal:instanceNumber 2 ;
    ingen:enabled false ;
    lv2:port <reverb_1/rate> .

<reverb_1/rate>
    a lv2:InputPort , lv2:ControlPort ;
    ingen:value 0.25 .

<delay_1>
    a ingen:Block ;
    lv2:prototype <{DELAY_URI}> ;
    modpedal:instanceNumber 0 ;
    ingen:enabled true ;
    lv2:port <delay_1/time> , <delay_1/mode> .

<delay_1/time>
    a lv2:InputPort , lv2:ControlPort ;
    ingen:value 1.25 .

<delay_1/mode>
    a lv2:InputPort , lv2:ControlPort ;
    ingen:value 2 .

<ghost_1>
    a ingen:Block ;
    lv2:prototype <http://example.org/plugins/missing> ;
    modpedal:instanceNumber 1 .

<orphan_1>
    a ingen:Block ;
    modpedal:instanceNumber 3 .

<>
    a lv2:Plugin , ingen:Graph , modpedal:Pedalboard ;
    doap:name "Board A" .
"""

BOARD_A_DELAY_STATE = f"""
<{DELAY_URI}#ir> "/data/user-files/Reverb IRs/hall.wav" .
<{DELAY_URI}#other> "None" .
<{DELAY_URI}#empty> "" .
<{DELAY_URI}#plain> "plain" .
"""

BOARD_B_TTL = """
<>
    a lv2:Plugin , ingen:Graph , modpedal:Pedalboard .
"""

BANKS_JSON = """[
    {
        "title": "Live",
        "pedalboards": [
            {"bundle": "/root/.pedalboards/a-board.pedalboard", "title": "Board A"},
            {"title": "No bundle"}
        ]
    },
    {
        "pedalboards": []
    }
]"""


def write_bundle(root: Path, name: str, files: dict[str, str], prefixes: bool = True) -> Path:
    """Create a bundle directory with the given Turtle files."""
    bundle = root / name
    bundle.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        path = bundle / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text((PREFIXES if prefixes else "") + content, encoding="utf-8")
    return bundle


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def lv2_root(tmp_path):
    """A bundle root with several plugins, one broken bundle and a non-bundle directory."""
    root = tmp_path / "lv2"
    write_bundle(
        root,
        "fx.lv2",
        {
            "manifest.ttl": FX_MANIFEST,
            "modguis.ttl": FX_MODGUIS,
            "delay.ttl": DELAY_TTL,
            "chorus.ttl": CHORUS_TTL,
        },
    )
    write_bundle(root, "embedded.lv2", {"manifest.ttl": EMBEDDED_MANIFEST, "embedded.ttl": EMBEDDED_TTL})
    write_bundle(root, "named.lv2", {"manifest.ttl": NAMED_MANIFEST, "named.ttl": NAMED_TTL})
    write_bundle(root, "bare.lv2", {"manifest.ttl": BARE_MANIFEST, "bare.ttl": BARE_TTL})
    write_bundle(root, "broken.lv2", {"manifest.ttl": "<this is not turtle"}, prefixes=False)
    write_bundle(root, "notabundle", {"manifest.ttl": NAMED_MANIFEST})
    return root


@pytest.fixture
def pedalboards_dir(tmp_path):
    """Two pedalboards, created in reverse name order."""
    root = tmp_path / "pedalboards"
    write_bundle(
        root,
        "b-board.pedalboard",
        {
            "manifest.ttl": PEDALBOARD_MANIFEST.format(name="b-board"),
            "b-board.ttl": BOARD_B_TTL,
        },
    )
    board_a = write_bundle(
        root,
        "a-board.pedalboard",
        {
            "manifest.ttl": PEDALBOARD_MANIFEST.format(name="a-board"),
            "a-board.ttl": BOARD_A_TTL,
        },
    )
    state = board_a / "effect-0" / "effect.ttl"
    state.parent.mkdir()
    state.write_text(BOARD_A_DELAY_STATE, encoding="utf-8")
    return root


@pytest.fixture
def app_config(tmp_path, lv2_root, pedalboards_dir):
    """Configuration pointing every directory into tmp_path."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return AppConfig(
        host="127.0.0.1",
        port=0,
        socket_timeout=0.2,
        lv2_paths=[lv2_root],
        cache_path=tmp_path / "cache" / "lv2_cache.json",
        pedalboards_dir=pedalboards_dir,
        user_files_dir=tmp_path / "user-files",
        data_dir=data_dir,
    )
