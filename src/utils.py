"""Common utilities for the metro flow simulator."""
import re
import pandas as pd


def normalize_station_name(station, index=None):
    """Normalize a station reference (bare string or ``{"name": ...}``) to a plain name.

    Missing or malformed names become the placeholder ``站点N`` when the
    position is known, otherwise an empty string.
    """
    if isinstance(station, dict):
        station = station.get("name")

    if isinstance(station, str):
        name = station
    elif isinstance(station, (int, float)) and not isinstance(station, bool) and not pd.isna(station):
        name = str(station)
    else:
        name = ""

    name = re.sub(r"\s+", "", name)
    if not name and index is not None:
        return f"站点{index + 1}"
    return name
