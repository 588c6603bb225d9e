"""Export derived gait values to tabular and JSON formats.

The analysis core has no persistence of its own; these helpers turn a
:class:`~nordicgait.pipeline.SessionResult` into files for the
consuming application.

Functions
---------
snapshots_to_dataframe
    Per-frame metrics as a pandas DataFrame.
summaries_to_dataframe
    Emitted summaries as a pandas DataFrame.
export_csv
    Write per-frame metrics and summaries to CSV files.
export_summary_json
    Write the final session summary to a JSON file.
"""

import json
import logging
from dataclasses import asdict, fields
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from .aggregate import StatsSummary
from .metrics import GaitSnapshot

logger = logging.getLogger(__name__)

_SNAPSHOT_COLUMNS = [f.name for f in fields(GaitSnapshot)]
_SUMMARY_COLUMNS = [f.name for f in fields(StatsSummary)]


def snapshots_to_dataframe(snapshots: Iterable[GaitSnapshot]) -> pd.DataFrame:
    """One row per frame; gated measurements are NaN (numeric) or None."""
    rows = [s.to_dict() for s in snapshots]
    if not rows:
        return pd.DataFrame(columns=_SNAPSHOT_COLUMNS)
    return pd.DataFrame(rows, columns=_SNAPSHOT_COLUMNS)


def summaries_to_dataframe(summaries: Iterable[StatsSummary]) -> pd.DataFrame:
    rows = [asdict(s) for s in summaries]
    if not rows:
        return pd.DataFrame(columns=_SUMMARY_COLUMNS)
    return pd.DataFrame(rows, columns=_SUMMARY_COLUMNS)


def export_csv(result, output_dir: str, prefix: str = "") -> list:
    """Export per-frame metrics and emitted summaries to CSV files.

    Parameters
    ----------
    result : SessionResult
        Output of ``analyze_frames()`` / ``analyze_pivot()``.
    output_dir : str
        Directory path for output files. Created if it does not exist.
    prefix : str, optional
        Filename prefix (e.g. ``"walker01_"``).

    Returns
    -------
    list of str
        Paths to all created CSV files.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    created = []

    path = out / f"{prefix}metrics.csv"
    snapshots_to_dataframe(result.snapshots).to_csv(path, index=False, float_format="%.3f")
    created.append(str(path))

    if result.summaries:
        path = out / f"{prefix}summaries.csv"
        summaries_to_dataframe(result.summaries).to_csv(path, index=False, float_format="%.3f")
        created.append(str(path))

    logger.info(f"Exported {len(created)} CSV files to {out}")
    return created


def export_summary_json(
    result,
    output_path: str,
    meta: Optional[dict] = None,
) -> str:
    """Export the final session summary as JSON.

    Parameters
    ----------
    result : SessionResult
        Output of ``analyze_frames()`` / ``analyze_pivot()``.
    output_path : str
        Output JSON file path.
    meta : dict, optional
        Source metadata (pivot ``meta`` block) copied into the file.

    Returns
    -------
    str
        Path to the created JSON file.
    """
    from . import __version__

    summary = {
        "metadata": {
            "version": __version__,
            "date": datetime.now().isoformat(),
            "source": (meta or {}).get("video_path", ""),
        },
        "summary": asdict(result.summary),
    }

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(summary, f, indent=2, default=str)

    logger.info(f"Exported summary JSON: {path}")
    return str(path)
