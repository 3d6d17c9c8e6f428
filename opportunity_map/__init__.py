"""
AI Opportunity Map
Relevance of AI capabilities to community-focused conservation projects
"""

__version__ = "0.1.0"
__author__ = "Opportunity Map Team"

from opportunity_map.settings import OpportunityMapSettings, get_settings
from opportunity_map.matrix import MatrixData, MatrixStore, build_matrix_from_rows
from opportunity_map.interaction import DeviceMode, InteractionResolver

__all__ = [
    "OpportunityMapSettings",
    "get_settings",
    "MatrixData",
    "MatrixStore",
    "build_matrix_from_rows",
    "DeviceMode",
    "InteractionResolver",
]
