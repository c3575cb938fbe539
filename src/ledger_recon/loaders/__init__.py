"""Loaders for the primary XML and companion CSV sources."""

from .xml_loader import PrimaryXMLLoader
from .csv_loader import CompanionCSVLoader

__all__ = ["PrimaryXMLLoader", "CompanionCSVLoader"]
