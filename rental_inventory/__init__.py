"""Rental inventory service: inventory record lifecycle for a facility-rental business."""

__version__ = "0.1.0"
