"""
Batch processing of snapshot sequences into a lightcurve.
"""

import os
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Optional, Sequence, Union

from sphlight.core.abc import RaytraceBackend
from sphlight.core.config import LightcurveSettings
from sphlight.core.logging_config import get_logger
from sphlight.io.snapshot import load_snapshot
from sphlight.lightcurve.result import LightcurveResult, LightcurveStatus
from sphlight.lightcurve.synthesis import get_lightcurve
from sphlight.particles.snapshot import ParticleSet

logger = get_logger("lightcurve.batch")

SnapshotLike = Union[ParticleSet, str, Path]


def _compute_one(
    snapshot: SnapshotLike,
    raytracer: RaytraceBackend,
    settings: LightcurveSettings,
    specfile: Optional[str],
) -> LightcurveResult:
    if not isinstance(snapshot, ParticleSet):
        snapshot = load_snapshot(snapshot)
    return get_lightcurve(snapshot, raytracer, settings, specfile=specfile)


def compute_lightcurve_series(
    snapshots: Sequence[SnapshotLike],
    raytracer: RaytraceBackend,
    settings: Optional[LightcurveSettings] = None,
    specfile_prefix: Optional[Union[str, Path]] = None,
    n_workers: Optional[int] = None,
    use_processes: bool = False,
) -> List[LightcurveResult]:
    """
    Compute lightcurve points for many snapshots in parallel.

    Parameters
    ----------
    snapshots : sequence of ParticleSet or path
        Snapshots, or files readable by ``load_snapshot``
    raytracer : RaytraceBackend
        Projection backend (must be picklable when ``use_processes``)
    settings : LightcurveSettings, optional
        Synthesis settings shared by all snapshots
    specfile_prefix : str or Path, optional
        If given, snapshot i writes its spectrum to ``<prefix>_<i:05d>.spec``
    n_workers : int, optional
        Number of workers. Defaults to ``settings.n_workers``, else CPU count.
    use_processes : bool
        If True, use processes instead of threads

    Returns
    -------
    List[LightcurveResult]
        One result per snapshot, in input order. Snapshots that raise are
        returned as failed results with status ``ERROR``.
    """
    if not snapshots:
        return []

    settings = settings if settings is not None else LightcurveSettings()
    if n_workers is None:
        n_workers = settings.n_workers or os.cpu_count() or 1

    logger.info(f"Computing lightcurve for {len(snapshots)} snapshots with {n_workers} workers")

    executor_class = ProcessPoolExecutor if use_processes else ThreadPoolExecutor

    completed = {}
    with executor_class(max_workers=n_workers) as executor:
        futures = {}
        for i, snapshot in enumerate(snapshots):
            specfile = f"{specfile_prefix}_{i:05d}" if specfile_prefix is not None else None
            future = executor.submit(_compute_one, snapshot, raytracer, settings, specfile)
            futures[future] = i

        for future in as_completed(futures):
            idx = futures[future]
            try:
                completed[idx] = future.result()
            except Exception as e:
                logger.error(f"Error computing lightcurve for snapshot {idx}: {e}")
                snapshot = snapshots[idx]
                time = snapshot.time if isinstance(snapshot, ParticleSet) else None
                completed[idx] = LightcurveResult.failed(LightcurveStatus.ERROR, str(e), time=time)

    results = [completed[i] for i in range(len(snapshots))]
    nfail = sum(1 for r in results if not r.ok)
    logger.info(f"Completed lightcurve of {len(results)} snapshots ({nfail} not OK)")
    return results
