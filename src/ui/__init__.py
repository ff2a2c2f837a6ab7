"""
PalmOrbit UI Module

PyQt5 status window for gesture and transform readout.
"""
from .status_window import StatusWindow

__all__ = [
    'StatusWindow',
]
