"""Shared pytest fixtures: small TMX/TSX documents and tile data encoders."""

import base64
import gzip
import struct
import zlib

import pytest


TERRAIN_TSX = """<?xml version="1.0" encoding="UTF-8"?>
<tileset version="1.10" tiledversion="1.10.2" name="terrain" class="ground"
         tilewidth="16" tileheight="16" spacing="1" margin="2"
         tilecount="20" columns="5">
  <tileoffset x="0" y="4"/>
  <properties>
    <property name="biome" value="forest"/>
  </properties>
  <image source="terrain.png" width="80" height="64"/>
  <tile id="3" type="water" terrain="0,0,,1">
    <properties>
      <property name="solid" type="bool" value="false"/>
    </properties>
    <animation>
      <frame tileid="3" duration="100"/>
      <frame tileid="4" duration="150"/>
    </animation>
  </tile>
  <tile id="7" class="wall">
    <objectgroup draworder="index" id="2">
      <object id="1" x="0" y="0" width="16" height="8"/>
      <object id="2" x="4" y="4"><ellipse/></object>
    </objectgroup>
  </tile>
</tileset>
"""

SAMPLE_TMX = """<?xml version="1.0" encoding="UTF-8"?>
<map version="1.10" tiledversion="1.10.2" orientation="orthogonal"
     renderorder="right-down" width="3" height="2" tilewidth="16" tileheight="16"
     infinite="0" backgroundcolor="#202020" parallaxoriginx="8" parallaxoriginy="-4"
     nextlayerid="9" nextobjectid="6">
  <properties>
    <property name="music" type="file" value="theme.ogg"/>
    <property name="gravity" type="float" value="9.8"/>
  </properties>
  <tileset firstgid="1" source="terrain.tsx"/>
  <tileset firstgid="21" name="items" tilewidth="16" tileheight="16"
           tilecount="4" columns="2">
    <image source="items.png" width="32" height="32"/>
  </tileset>
  <imagelayer id="5" name="Sky" offsetx="3" repeatx="1">
    <image source="sky.png" width="320" height="240"/>
  </imagelayer>
  <layer id="1" name="Ground" width="3" height="2">
    <data encoding="csv">
1,2,2147483651,
1073741828,0,21
</data>
  </layer>
  <objectgroup id="2" name="Things" color="#ff0000" opacity="0.5" locked="1">
    <object id="1" name="spawn" type="marker" x="8" y="8"><point/></object>
    <object id="2" x="0" y="0" gid="2684354581" width="16" height="16"/>
    <object id="3" x="1.5" y="2.5" rotation="45">
      <polygon points="0,0 16,0 16,16"/>
    </object>
  </objectgroup>
  <layer id="3" name="Decor" width="3" height="2" visible="0"
         parallaxx="0.5" parallaxy="0.25" tintcolor="#80ff0000" class="decor">
    <properties>
      <property name="z" type="int" value="2"/>
    </properties>
    <data encoding="base64">
AAAAAAAAAAADAAAAAAAAAAAAAAAAAAAA
</data>
  </layer>
  <group id="6" name="Props" locked="1">
    <properties>
      <property name="kind" value="outdoor"/>
    </properties>
    <objectgroup id="7" name="Crates">
      <object id="4" x="32" y="16" width="16" height="16"/>
    </objectgroup>
    <group id="8" name="Inner" visible="0">
      <layer id="9" name="Deep" width="1" height="1">
        <data encoding="csv">5</data>
      </layer>
    </group>
  </group>
</map>
"""


@pytest.fixture
def terrain_tsx():
    return TERRAIN_TSX


@pytest.fixture
def sample_tmx():
    return SAMPLE_TMX


@pytest.fixture
def map_dir(tmp_path):
    """A folder holding sample.tmx and the terrain.tsx it references."""
    (tmp_path / "sample.tmx").write_text(SAMPLE_TMX, encoding="utf-8")
    (tmp_path / "terrain.tsx").write_text(TERRAIN_TSX, encoding="utf-8")
    return tmp_path


@pytest.fixture
def encode_cells():
    """Encode raw uint32 cell values the way Tiled writes base64 tile data."""

    def encode(values, compression=None):
        raw = struct.pack("<%dI" % len(values), *values)
        if compression == "zlib":
            raw = zlib.compress(raw)
        elif compression == "gzip":
            raw = gzip.compress(raw)
        return base64.b64encode(raw).decode("ascii")

    return encode


@pytest.fixture
def make_map():
    """Build a minimal map document around the given child elements."""

    def make(body, infinite=False, width=2, height=2):
        return (
            '<map version="1.10" tiledversion="1.10.2" orientation="orthogonal" '
            'renderorder="right-down" width="{w}" height="{h}" tilewidth="16" '
            'tileheight="16" infinite="{inf}">{body}</map>'
        ).format(w=width, h=height, inf="1" if infinite else "0", body=body)

    return make
