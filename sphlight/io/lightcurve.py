"""
Export of lightcurve time series.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence, Union
import pandas as pd

from sphlight.lightcurve.result import LightcurveResult
from sphlight.core.logging_config import get_logger

logger = get_logger("io.lightcurve")

PathLike = Union[str, Path]

TABLE_COLUMNS = [
    "time",
    "luminosity",
    "luminosity_grey",
    "temperature",
    "rphoto",
    "colour_temperature",
    "lum_bb",
    "r_bb",
    "area",
    "status",
]


def lightcurve_table(results: Sequence[LightcurveResult]) -> pd.DataFrame:
    """
    Tabulate lightcurve results, one row per snapshot.

    Parameters
    ----------
    results : sequence of LightcurveResult
        Results in dump order

    Returns
    -------
    pd.DataFrame
        Columns as in ``TABLE_COLUMNS``
    """
    rows = [{key: r.to_dict()[key] for key in TABLE_COLUMNS} for r in results]
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def export_lightcurve(results: Sequence[LightcurveResult], path: PathLike) -> Path:
    """
    Write a lightcurve to CSV or JSON.

    The JSON form carries the spectra and export metadata as well as the
    scalar columns.

    Parameters
    ----------
    results : sequence of LightcurveResult
        Results in dump order
    path : str or Path
        Output file (.csv or .json)

    Returns
    -------
    Path
    """
    from sphlight import __version__

    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        lightcurve_table(results).to_csv(path, index=False)
    elif suffix == ".json":
        payload = {
            "metadata": {
                "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
                "version": __version__,
                "n_snapshots": len(results),
            },
            "results": [r.to_dict(include_spectrum=True) for r in results],
        }
        with open(path, "w") as f:
            json.dump(payload, f, indent=2)
    else:
        raise ValueError(f"Unsupported lightcurve format: {suffix}. Use .csv or .json")

    logger.info(f"Saved lightcurve with {len(results)} entries to {path}")
    return path
