"""
Strategy selection for PyFastResample.

``resize`` picks a sampler from the relative sizes of source and destination:
shrinking goes to the area-weighted downsampler, anything else to the bicubic
sampler. By default only the widths are compared, so a buffer that gets wider
but shorter still takes the upsampling path. The comparison axis and both
strategies are exposed on ``ResizeConfig``.

Author: B.G.
"""

import enum
import logging
from dataclasses import dataclass

from .. import constants as cte
from ._common import check_buffers, check_kernel_parameters
from .bicubic import _bicubic_into
from .bilinear import _bilinear_into
from .gaussian import _gaussian_into

logger = logging.getLogger(__name__)


class Strategy(enum.Enum):
    """Available reconstruction strategies."""

    AREA_WEIGHTED = "area_weighted"
    BICUBIC = "bicubic"
    BILINEAR = "bilinear"


ROUTING_AXES = ("width", "height", "either")


@dataclass(frozen=True)
class ResizeConfig:
    """
    Configuration of the resize dispatcher.

    Attributes:
        tuning: Spread of the area-weighted kernel
        kernel_base: Base of the area-weighted kernel's exponential
        routing_axis: Dimension compared to detect shrinking:
                      'width' (default), 'height' or 'either'
        downsample: Strategy used when shrinking
        upsample: Strategy used otherwise (enlarging or same size)
    """

    tuning: float = cte.GAUSSIAN_TUNING
    kernel_base: float = cte.GAUSSIAN_KERNEL_BASE
    routing_axis: str = "width"
    downsample: Strategy = Strategy.AREA_WEIGHTED
    upsample: Strategy = Strategy.BICUBIC

    def __post_init__(self):
        check_kernel_parameters(self.tuning, self.kernel_base)
        if self.routing_axis not in ROUTING_AXES:
            raise ValueError(
                f"routing_axis must be one of {ROUTING_AXES}, got '{self.routing_axis}'"
            )
        for name in ("downsample", "upsample"):
            if not isinstance(getattr(self, name), Strategy):
                raise ValueError(f"{name} must be a Strategy, got {getattr(self, name)!r}")


DEFAULT_CONFIG = ResizeConfig()


STRATEGIES = {
    Strategy.AREA_WEIGHTED: lambda source, dest, config: _gaussian_into(
        source, dest, config.tuning, config.kernel_base
    ),
    Strategy.BICUBIC: lambda source, dest, config: _bicubic_into(source, dest),
    Strategy.BILINEAR: lambda source, dest, config: _bilinear_into(source, dest),
}


def is_shrinking(source, dest, routing_axis="width"):
    """
    Decide whether a resize counts as shrinking.

    Args:
        source: Source PixelBuffer
        dest: Destination PixelBuffer
        routing_axis: 'width', 'height' or 'either'

    Returns:
        bool
    """
    if routing_axis == "width":
        return source.width > dest.width
    if routing_axis == "height":
        return source.height > dest.height
    if routing_axis == "either":
        return source.width > dest.width or source.height > dest.height
    raise ValueError(f"routing_axis must be one of {ROUTING_AXES}, got '{routing_axis}'")


def select_strategy(source, dest, config=None):
    """Return the Strategy resize would use for this buffer pair."""
    config = DEFAULT_CONFIG if config is None else config
    if is_shrinking(source, dest, config.routing_axis):
        return config.downsample
    return config.upsample


def resample(source, dest, strategy, config=None):
    """
    Run one named strategy from source into dest.

    Args:
        source: PixelBuffer to read
        dest: Pre-sized PixelBuffer, overwritten in place
        strategy: Strategy member or its value string ('bicubic', ...)
        config: Optional ResizeConfig supplying the kernel parameters

    Returns:
        PixelBuffer: dest
    """
    config = DEFAULT_CONFIG if config is None else config
    try:
        strategy = Strategy(strategy)
    except ValueError:
        valid = [s.value for s in Strategy]
        raise ValueError(f"strategy must be one of {valid}, got {strategy!r}") from None
    check_buffers(source, dest)
    return STRATEGIES[strategy](source, dest, config)


def resize(source, dest, config=None):
    """
    Resize source into dest, choosing the sampler from their sizes.

    Args:
        source: PixelBuffer to read
        dest: PixelBuffer whose width/height are the target size and whose
              data is pre-allocated; overwritten in place
        config: Optional ResizeConfig (default: width-only routing,
                area-weighted downsampling, bicubic upsampling)

    Returns:
        PixelBuffer: dest, for chaining

    Raises:
        InvalidSizeError: If either buffer has a zero dimension
        ShapeMismatchError: If either buffer's data length is wrong

    Example:
        src = PixelBuffer.from_array(rgba)          # (h, w, 4) uint8
        dst = PixelBuffer.allocate(w // 2, h // 2)
        resize(src, dst)                            # area-weighted
    """
    config = DEFAULT_CONFIG if config is None else config
    check_buffers(source, dest)

    strategy = select_strategy(source, dest, config)
    logger.debug(
        "resize %dx%d -> %dx%d via %s",
        source.width,
        source.height,
        dest.width,
        dest.height,
        strategy.value,
    )
    return STRATEGIES[strategy](source, dest, config)


__all__ = [
    "Strategy",
    "ResizeConfig",
    "DEFAULT_CONFIG",
    "STRATEGIES",
    "is_shrinking",
    "select_strategy",
    "resample",
    "resize",
]
