"""Pytest configuration and fixtures."""

import io

import pytest
from PIL import Image

from deckexport.config import ExportSettings
from deckexport.dsl.schema import (
    ElementPosition,
    ElementStyle,
    Presentation,
    PresentationSettings,
    Slide,
    SlideBackground,
    SlideContent,
)
from deckexport.engine.resources import ResourceResolver

ALL_FLAGS_OFF = {
    "controls": False,
    "progress": False,
    "center": False,
    "touch": False,
    "loop": False,
    "rtl": False,
    "shuffle": False,
    "fragments": False,
    "embedded": False,
    "help": False,
    "show_notes": False,
    "auto_slide_stoppable": False,
    "mouse_wheel": False,
    "hide_address_bar": False,
    "preview_links": False,
    "focus_body_on_load": False,
    "hash": False,
    "respond_to_hash_changes": False,
    "jump_to_slide": False,
    "history": False,
}


def make_text(element_id: str, text: str, x=50, y=50, width=700, height=80, **style) -> SlideContent:
    """Build a positioned text element."""
    return SlideContent(
        id=element_id,
        type="text",
        content=text,
        style=ElementStyle(
            position=ElementPosition(x=x, y=y, width=width, height=height),
            **style,
        ),
    )


def make_element(element_id: str, kind: str, content: str = "", x=0, y=0, width=100, height=100, **style) -> SlideContent:
    """Build a positioned element of any type."""
    return SlideContent(
        id=element_id,
        type=kind,
        content=content,
        style=ElementStyle(
            position=ElementPosition(x=x, y=y, width=width, height=height),
            **style,
        ),
    )


@pytest.fixture
def export_settings(tmp_path) -> ExportSettings:
    """Settings isolated from the environment, with a small capture size."""
    return ExportSettings(
        _env_file=None,
        output_dir=tmp_path / "exports",
        oversample=1,
        fetch_remote_images=False,
    )


@pytest.fixture
def offline_resolver() -> ResourceResolver:
    """Resolver that never touches the network."""
    return ResourceResolver(fetch_remote=False)


@pytest.fixture
def demo_settings() -> PresentationSettings:
    """Settings of the minimal two-slide deck: title Demo, white theme, flags off."""
    return PresentationSettings(title="Demo", theme="white", auto_slide=0, **ALL_FLAGS_OFF)


@pytest.fixture
def demo_presentation(demo_settings) -> Presentation:
    """Two slides: one "Hello" text box, then an empty slide on #112233."""
    return Presentation(
        id="demo",
        settings=demo_settings,
        slides=[
            Slide(
                id="slide-1",
                title="Intro",
                content=[make_text("hello", "Hello")],
                notes="Say hello",
            ),
            Slide(
                id="slide-2",
                title="Empty",
                background=SlideBackground(color="#112233"),
            ),
        ],
    )


@pytest.fixture
def png_bytes() -> bytes:
    """A 40x20 red PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), (255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_file(tmp_path, png_bytes):
    """Path to a PNG on disk."""
    path = tmp_path / "picture.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def layered_slide() -> Slide:
    """Shape, text and image elements stacked in that order."""
    return Slide(
        id="layered",
        title="Layers",
        content=[
            make_element("bottom-shape", "shape", x=10, y=10, width=300, height=200, background_color="#FF0000"),
            make_text("middle-text", "Over the shape", x=20, y=20, width=280, height=40),
            make_element("top-image", "image", content="/definitely/missing.png", x=40, y=40, width=120, height=90),
        ],
    )
