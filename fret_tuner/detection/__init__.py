"""Cross-frame smoothing of pitch estimates and deviations."""

from .median_stabilizer import MedianStabilizer
from .deviation_smoother import DeviationSmoother, smoothing_factor

__all__ = ["MedianStabilizer", "DeviationSmoother", "smoothing_factor"]
