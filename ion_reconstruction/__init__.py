"""
ion reconstruction uploader.

Creates an asset on the ion tiling service, uploads the source data to the
issued object-storage location, signals completion and polls every produced
asset until tiling finishes.
"""

__version__ = "0.1.0"
