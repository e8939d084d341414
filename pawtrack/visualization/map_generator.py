"""
Map Visualization Module for PawTrack

Renders stray reports on an interactive Folium map, one marker per
report colored by status.
"""

import html
import logging
from typing import Optional, Sequence

import folium
from folium.plugins import MarkerCluster

from pawtrack.core.constants import (
    STATUS_COLORS,
    STATUS_LABELS,
    DEFAULT_MAP_CENTER,
    DEFAULT_MAP_ZOOM,
)
from pawtrack.reports.models import Report

logger = logging.getLogger(__name__)


def get_status_color(status: str) -> str:
    """Get marker color based on report status."""
    return STATUS_COLORS.get(status, "gray")


def _popup_html(report: Report) -> str:
    color = get_status_color(report.status)
    when = report.created_at.strftime("%Y-%m-%d %H:%M") if report.created_at else "-"
    photo = (
        f'<img src="{html.escape(report.photo_url)}" style="width: 100%; margin-top: 5px;">'
        if report.photo_url else ""
    )

    return f"""
    <div style="font-family: Arial; min-width: 200px;">
        <h4 style="margin: 0; color: {color};">{html.escape(str(report.animal_type).title())}</h4>
        <hr style="margin: 5px 0;">
        <b>Status:</b> {html.escape(str(report.status))}<br>
        <b>Location:</b> {html.escape(report.location_address)}<br>
        <b>Reported:</b> {when}<br>
        <b>Description:</b> {html.escape(report.description)}<br>
        {photo}
    </div>
    """


def create_report_map(
    reports: Sequence[Report],
    center: Optional[tuple[float, float]] = None,
    zoom: int = DEFAULT_MAP_ZOOM,
    title: str = "PawTrack - Stray Reports",
    cluster_markers: bool = True,
) -> folium.Map:
    """
    Create an interactive map with stray reports.

    Args:
        reports: Reports to plot
        center: Map center (lat, lon). Auto-calculated if None.
        zoom: Initial zoom level (1-18)
        title: Map title
        cluster_markers: Cluster markers when zoomed out

    Returns:
        Folium Map object
    """
    if not reports:
        logger.warning("No reports provided, creating empty map")
        if center is None:
            return folium.Map(location=DEFAULT_MAP_CENTER, zoom_start=2)
        return folium.Map(location=center, zoom_start=zoom)

    if center is None:
        lats = [r.location_lat for r in reports]
        lons = [r.location_lng for r in reports]
        center = (sum(lats) / len(lats), sum(lons) / len(lons))

    report_map = folium.Map(location=center, zoom_start=zoom)

    if cluster_markers:
        marker_group = MarkerCluster(name="Reports")
    else:
        marker_group = folium.FeatureGroup(name="Reports")

    for report in reports:
        color = get_status_color(report.status)

        folium.CircleMarker(
            location=[report.location_lat, report.location_lng],
            radius=10,
            popup=folium.Popup(_popup_html(report), max_width=300),
            tooltip=html.escape(f"{report.animal_type} - {report.status}"),
            color=color,
            fill=True,
            fill_color=color,
            fill_opacity=0.7,
            weight=2,
        ).add_to(marker_group)

    marker_group.add_to(report_map)

    title_html = f'''
    <div style="position: fixed;
                top: 10px; left: 50px;
                background-color: rgba(0,168,115,0.9);
                padding: 10px 20px;
                border-radius: 5px;
                z-index: 9999;
                font-family: Arial;">
        <h3 style="margin: 0; color: white;">{html.escape(title)}</h3>
        <p style="margin: 5px 0 0 0; color: #e0f7fa; font-size: 12px;">
            {len(reports)} reports
        </p>
    </div>
    '''
    report_map.get_root().html.add_child(folium.Element(title_html))

    legend_rows = "".join(
        f'<span style="color: {STATUS_COLORS[status]};">●</span> {label}<br>'
        for status, label in STATUS_LABELS.items()
    )
    legend_html = f'''
    <div style="position: fixed;
                bottom: 30px; right: 30px;
                background-color: rgba(255,255,255,0.9);
                padding: 10px;
                border-radius: 5px;
                z-index: 9999;
                font-family: Arial;
                font-size: 12px;">
        <b>Report Status</b><br>
        {legend_rows}
    </div>
    '''
    report_map.get_root().html.add_child(folium.Element(legend_html))

    logger.info(f"Created map with {len(reports)} reports")
    return report_map


def save_report_map(
    reports: Sequence[Report],
    output_path: str = "pawtrack_reports.html",
    **kwargs,
) -> str:
    """
    Generate and save a report map.

    Returns:
        Path to saved file
    """
    report_map = create_report_map(reports, **kwargs)
    report_map.save(output_path)
    logger.info(f"Map saved to {output_path}")

    return output_path
