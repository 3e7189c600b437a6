"""Pydantic models for thermalabel."""

from thermalabel.models.label import LabelDimensions, LabelSize, LabelSizeError, validate_label_size
from thermalabel.models.printer import PrinterConfig

__all__ = [
    "LabelDimensions",
    "LabelSize",
    "LabelSizeError",
    "PrinterConfig",
    "validate_label_size",
]
