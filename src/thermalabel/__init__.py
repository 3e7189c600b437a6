"""thermalabel - ZPL label rendering for Phomemo-style thermal printers."""

__version__ = "0.1.0"
