"""
app/mappers package marker.
"""

from app.mappers.header_mapper import HeaderMapper, HeaderMapping, determine_upload_type

__all__ = [
    "HeaderMapper",
    "HeaderMapping",
    "determine_upload_type",
]
