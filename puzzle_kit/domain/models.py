"""
Domain models for stitch and split layouts and configuration.
"""
from enum import Enum
from typing import Any, List, Optional, Tuple
import attr
import numpy as np

from puzzle_kit.config import (
    BACKGROUND_COLORS,
    RECOMMEND_NARROW_PAIR_RATIO,
    RECOMMEND_TALL_FIRST_IMAGE_RATIO,
    RECOMMEND_WIDE_PAIR_RATIO,
    SPLIT_DEFAULT_COLS,
    SPLIT_DEFAULT_GAP_PX,
    SPLIT_DEFAULT_ROWS,
    SPLIT_OUTPUT_FORMAT,
    STITCH_BACKGROUND_NAME,
    STITCH_GLOBAL_GAP_PX,
    STITCH_OUTPUT_FORMAT,
    STITCH_OUTPUT_QUALITY,
)
from puzzle_kit.domain.errors import UnsupportedLayoutError


class LayoutKind(Enum):
    """The closed set of stitch and split layouts."""
    GRID_2x2 = "GRID_2x2"
    VERTICAL_1xN = "VERTICAL_1xN"
    HORIZONTAL_Nx1 = "HORIZONTAL_Nx1"
    VERTICAL_1x2 = "VERTICAL_1x2"
    HORIZONTAL_2x1 = "HORIZONTAL_2x1"
    T_SHAPE_3 = "T_SHAPE_3"

    @classmethod
    def parse(cls, value: Any) -> 'LayoutKind':
        """Accept a LayoutKind or its string tag."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedLayoutError(value) from None

    @property
    def is_horizontal(self) -> bool:
        return self in (LayoutKind.HORIZONTAL_Nx1, LayoutKind.HORIZONTAL_2x1)

    @property
    def is_vertical(self) -> bool:
        return self in (LayoutKind.VERTICAL_1xN, LayoutKind.VERTICAL_1x2)


class OutputFormat(Enum):
    """Encoded output formats."""
    PNG = "png"
    JPG = "jpg"
    WEBP = "webp"

    @classmethod
    def parse(cls, value: Any) -> 'OutputFormat':
        if isinstance(value, cls):
            return value
        normalized = str(value).lower().lstrip(".")
        if normalized == "jpeg":
            normalized = "jpg"
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unsupported output format: {value!r}") from None

    @property
    def extension(self) -> str:
        return self.value

    @property
    def mime_type(self) -> str:
        return {
            OutputFormat.PNG: "image/png",
            OutputFormat.JPG: "image/jpeg",
            OutputFormat.WEBP: "image/webp",
        }[self]


def _at_least(minimum: int):
    def validate(instance, attribute, value):
        if value < minimum:
            raise ValueError(f"{attribute.name} must be >= {minimum}, got {value}")
    return validate


def _positive_or_none(instance, attribute, value):
    if value is not None and value <= 0:
        raise ValueError(f"{attribute.name} must be positive, got {value}")


@attr.s(frozen=True)
class Dimension:
    """Represents image dimensions."""
    width: int = attr.ib()
    height: int = attr.ib()

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@attr.s(eq=False)
class ImageDescriptor:
    """One source image taking part in a stitch."""
    id: str = attr.ib()
    width: int = attr.ib(validator=_at_least(1))
    height: int = attr.ib(validator=_at_least(1))
    raster: Optional[np.ndarray] = attr.ib(default=None, repr=False)
    visible: bool = attr.ib(default=True)
    local_gap: int = attr.ib(default=0)
    name: Optional[str] = attr.ib(default=None)

    @classmethod
    def from_raster(
        cls,
        image_id: str,
        raster: np.ndarray,
        visible: bool = True,
        local_gap: int = 0,
        name: Optional[str] = None
    ) -> 'ImageDescriptor':
        """Create a descriptor whose natural size is the raster's size."""
        height, width = raster.shape[:2]
        return cls(
            id=image_id,
            width=int(width),
            height=int(height),
            raster=raster,
            visible=visible,
            local_gap=local_gap,
            name=name
        )

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@attr.s(frozen=True)
class BackgroundSettings:
    """Background settings for the canvas; a None color is transparent."""
    color: Optional[Tuple[int, int, int]] = attr.ib(default=None)

    @property
    def is_transparent(self) -> bool:
        return self.color is None

    @classmethod
    def from_name(cls, name: str) -> 'BackgroundSettings':
        """Create background settings from transparent, white or black."""
        key = str(name).lower()
        if key not in BACKGROUND_COLORS:
            raise ValueError(f"Unsupported background color: {name!r}")
        return cls(color=BACKGROUND_COLORS[key])

    @classmethod
    def transparent(cls) -> 'BackgroundSettings':
        return cls(color=None)

    @classmethod
    def coerce(cls, value: Any) -> 'BackgroundSettings':
        """Accept settings, a color name, a BGR tuple or None for transparent."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.transparent()
        if isinstance(value, str):
            return cls.from_name(value)
        return cls(color=tuple(int(c) for c in value))


@attr.s(frozen=True)
class RecommendationThresholds:
    """Aspect ratio thresholds used to recommend a stitch layout."""
    tall_first_image_ratio: float = attr.ib(default=RECOMMEND_TALL_FIRST_IMAGE_RATIO)
    narrow_pair_ratio: float = attr.ib(default=RECOMMEND_NARROW_PAIR_RATIO)
    wide_pair_ratio: float = attr.ib(default=RECOMMEND_WIDE_PAIR_RATIO)

    @classmethod
    def default(cls) -> 'RecommendationThresholds':
        return cls()


@attr.s(frozen=True)
class StitchConfig:
    """Configuration for stitching."""
    global_gap: int = attr.ib(default=STITCH_GLOBAL_GAP_PX)
    background: BackgroundSettings = attr.ib(
        default=BackgroundSettings.from_name(STITCH_BACKGROUND_NAME),
        converter=BackgroundSettings.coerce
    )
    format: OutputFormat = attr.ib(
        default=OutputFormat.parse(STITCH_OUTPUT_FORMAT),
        converter=OutputFormat.parse
    )
    quality: float = attr.ib(default=STITCH_OUTPUT_QUALITY)

    @classmethod
    def default(cls) -> 'StitchConfig':
        """Create a default stitching configuration."""
        return cls()


@attr.s(frozen=True)
class SplitConfig:
    """Configuration for splitting one image into regions."""
    layout: LayoutKind = attr.ib(converter=LayoutKind.parse)
    rows: int = attr.ib(default=SPLIT_DEFAULT_ROWS, validator=_at_least(2))
    cols: int = attr.ib(default=SPLIT_DEFAULT_COLS, validator=_at_least(2))
    gap: int = attr.ib(default=SPLIT_DEFAULT_GAP_PX, validator=_at_least(0))
    format: OutputFormat = attr.ib(
        default=OutputFormat.parse(SPLIT_OUTPUT_FORMAT),
        converter=OutputFormat.parse
    )
    auto_crop_ratio: Optional[float] = attr.ib(default=None, validator=_positive_or_none)


@attr.s(frozen=True)
class Placement:
    """Where one image is drawn on the destination canvas."""
    image_id: str = attr.ib()
    x: int = attr.ib()
    y: int = attr.ib()
    width: int = attr.ib()
    height: int = attr.ib()


@attr.s(frozen=True)
class Scene:
    """Canvas size plus the placement of every drawn image."""
    width: int = attr.ib()
    height: int = attr.ib()
    placements: Tuple[Placement, ...] = attr.ib(converter=tuple, factory=tuple)

    @classmethod
    def create_empty(cls) -> 'Scene':
        return cls(width=0, height=0, placements=())


@attr.s(frozen=True)
class CropRect:
    """Centered auto-crop rectangle in source coordinates."""
    x: int = attr.ib()
    y: int = attr.ib()
    width: int = attr.ib()
    height: int = attr.ib()


@attr.s(frozen=True)
class SplitRegion:
    """A region to cut, relative to the effective (cropped) area."""
    index: int = attr.ib()
    x: int = attr.ib()
    y: int = attr.ib()
    width: int = attr.ib()
    height: int = attr.ib()


@attr.s(eq=False)
class CompositeResult:
    """A stitched BGRA raster and the placements used to draw it."""
    width: int = attr.ib()
    height: int = attr.ib()
    raster: np.ndarray = attr.ib(repr=False)
    placements: List[Placement] = attr.ib(factory=list)

    @classmethod
    def create_empty(cls) -> 'CompositeResult':
        return cls(
            width=0,
            height=0,
            raster=np.zeros((0, 0, 4), dtype=np.uint8),
            placements=[]
        )
