"""
PawTrack - Visualization Module
"""

from pawtrack.visualization.map_generator import (
    create_report_map,
    save_report_map,
    get_status_color,
)

__all__ = [
    "create_report_map",
    "save_report_map",
    "get_status_color",
]
