"""
Facade service for stitching and splitting.

This module serves as the main entry point for host applications, combining
the recommender, the stitch engine, the split engine and the encoder.
"""
import numpy as np
from typing import Any, List, Optional, Sequence

from puzzle_kit.domain.models import (
    CompositeResult,
    ImageDescriptor,
    LayoutKind,
    RecommendationThresholds,
    SplitConfig,
    StitchConfig
)
from puzzle_kit.services.image_codec import encode_image
from puzzle_kit.services.layout_recommender import recommend_layout
from puzzle_kit.services.split_manager import split_image
from puzzle_kit.services.stitch_engine import stitch_images


class StitchingService:
    """
    Facade service for coordinating stitch and split requests.

    The service holds configuration only; every call is independent.
    """

    def __init__(
        self,
        config: Optional[StitchConfig] = None,
        thresholds: Optional[RecommendationThresholds] = None
    ):
        """
        Initialize the service with a configuration.

        Args:
            config: Stitch configuration or None to use default
            thresholds: Layout recommendation thresholds or None to use default
        """
        self.config = config or StitchConfig.default()
        self.thresholds = thresholds or RecommendationThresholds.default()

    def recommend(self, images: Sequence) -> LayoutKind:
        """Recommend a layout for the visible images."""
        visible_images = [image for image in images if getattr(image, "visible", True) is not False]
        return recommend_layout(visible_images, self.thresholds)

    def stitch(
        self,
        images: Sequence[ImageDescriptor],
        layout: Any = None
    ) -> CompositeResult:
        """
        Stitch images with the configured gap and background.

        Args:
            images: Image descriptors in composite order
            layout: LayoutKind, its string tag, or None to use the recommendation

        Returns:
            The composite result
        """
        if layout is None:
            layout = self.recommend(images)
        return stitch_images(
            images,
            layout,
            self.config.global_gap,
            self.config.background
        )

    def stitch_to_bytes(
        self,
        images: Sequence[ImageDescriptor],
        layout: Any = None
    ) -> bytes:
        """Stitch images and encode the composite with the configured format and quality."""
        result = self.stitch(images, layout)
        return self.encode(result.raster)

    def encode(self, image: np.ndarray) -> bytes:
        return encode_image(image, self.config.format, self.config.quality)

    def split(self, source: np.ndarray, config: SplitConfig) -> List[bytes]:
        """Cut a source image into encoded regions."""
        return split_image(source, config)
