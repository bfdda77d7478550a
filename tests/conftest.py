"""
Shared fixtures for rocket document import tests.
"""
import gzip
import sys
import zipfile
from pathlib import Path
from textwrap import dedent

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ork_import.document import parse_document, stage_components


def make_document(*components: str, stages: int = 1) -> str:
    """Wrap component XML snippets in an openrocket/rocket/stage skeleton.

    With ``stages`` > 1 every stage holds the same components.
    """
    body = "\n".join(components)
    stage = f"<stage><name>Sustainer</name><subcomponents>{body}</subcomponents></stage>"
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<openrocket version="1.0" creator="test">'
        "<rocket><name>Test rocket</name><subcomponents>"
        + stage * stages
        + "</subcomponents></rocket></openrocket>"
    )


def stage_of(*components: str):
    """Parsed stage components for the given XML snippets."""
    return stage_components(parse_document(make_document(*components)))


NOSE_CONE = dedent("""
    <nosecone>
      <name>Nose cone</name>
      <length>50</length>
      <thickness>2</thickness>
      <shape>ogive</shape>
      <shapeparameter>1.0</shapeparameter>
      <aftradius>auto</aftradius>
      <aftshoulderradius>23</aftshoulderradius>
      <aftshoulderlength>10</aftshoulderlength>
      <aftshoulderthickness>1</aftshoulderthickness>
      <aftshouldercapped>false</aftshouldercapped>
    </nosecone>
""")

BODY_TUBE = dedent("""
    <bodytube>
      <name>Body tube</name>
      <length>200</length>
      <thickness>2</thickness>
      <radius>25</radius>
      <subcomponents>
        <innertube>
          <name>Motor mount</name>
          <position type="bottom">0</position>
          <length>100</length>
          <radialposition>0</radialposition>
          <radialdirection>0</radialdirection>
          <outerradius>10</outerradius>
          <thickness>1</thickness>
        </innertube>
        <centeringring>
          <name>Centering ring</name>
          <position type="top">110</position>
          <length>5</length>
          <outerradius>auto</outerradius>
          <innerradius>auto</innerradius>
        </centeringring>
        <bulkhead>
          <name>Bulkhead</name>
          <position type="top">0</position>
          <length>3</length>
          <outerradius>auto</outerradius>
        </bulkhead>
        <freeformfinset>
          <name>Fins</name>
          <position type="bottom">0</position>
          <fincount>3</fincount>
          <rotation>0</rotation>
          <thickness>3</thickness>
          <cant>0</cant>
          <tabheight>5</tabheight>
          <tablength>20</tablength>
          <tabposition relativeto="center">0</tabposition>
          <finpoints>
            <point x="0" y="0"/>
            <point x="30" y="40"/>
            <point x="60" y="40"/>
            <point x="60" y="0"/>
          </finpoints>
        </freeformfinset>
      </subcomponents>
    </bodytube>
""")


@pytest.fixture
def rocket_xml() -> str:
    """Nose cone (auto aft radius) followed by a fully equipped body tube."""
    return make_document(NOSE_CONE, BODY_TUBE)


@pytest.fixture
def ork_file(rocket_xml, tmp_path) -> str:
    """The sample rocket zipped the way OpenRocket writes .ork files."""
    path = tmp_path / "sample.ork"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("rocket.ork", rocket_xml)
    return str(path)


@pytest.fixture
def plain_ork_file(rocket_xml, tmp_path) -> str:
    path = tmp_path / "plain.ork"
    path.write_text(rocket_xml, encoding="utf-8")
    return str(path)


@pytest.fixture
def gzip_ork_file(rocket_xml, tmp_path) -> str:
    path = tmp_path / "compressed.ork"
    path.write_bytes(gzip.compress(rocket_xml.encode("utf-8")))
    return str(path)
