"""
Main CLI entry point for sphlight.
"""

import argparse
import sys

from sphlight import __version__
from sphlight.core.logging_config import setup_logging, get_logger

logger = get_logger("cli.main")


def lightcurve_cmd(args):
    """Lightcurve command."""
    from sphlight.core.config import LightcurveSettings, load_config, validate_lightcurve_config
    from sphlight.core.factory import RaytraceBackendFactory
    from sphlight.io.lightcurve import export_lightcurve, lightcurve_table
    from sphlight.lightcurve.batch import compute_lightcurve_series

    logger.info(f"Loading configuration from {args.config}")
    config = load_config(args.config)
    validate_lightcurve_config(config)
    settings = LightcurveSettings.from_dict(config["lightcurve"])

    raytrace_config = config.get("raytrace") or {}
    backend = raytrace_config.get("backend")
    if backend is None:
        raise ValueError(
            "Configuration must name a raytrace backend under 'raytrace: backend:' "
            "(registered name or 'module:Class')"
        )
    raytracer = RaytraceBackendFactory.create(backend, **(raytrace_config.get("options") or {}))

    results = compute_lightcurve_series(
        args.snapshots,
        raytracer,
        settings,
        specfile_prefix=args.spec,
        n_workers=args.workers,
    )

    if args.output:
        path = export_lightcurve(results, args.output)
        logger.info(f"Saved lightcurve to {path}")
    else:
        print(lightcurve_table(results).to_string(index=False))

    if not any(r.ok for r in results):
        logger.error("No snapshot produced a valid lightcurve point")
        sys.exit(1)


def temperature_cmd(args):
    """Temperature command."""
    from sphlight.eos.temperature import get_temp_from_u

    temp = get_temp_from_u(args.rho, args.u, mu=args.mu, strict=args.strict)
    print(f"T = {temp:.6e} K")


def ionisation_cmd(args):
    """Ionisation command."""
    from sphlight.plasma.ionisation import ionisation_fraction

    state = ionisation_fraction(args.rho, args.temp, args.X, args.Y, strict=args.strict)
    print(f"xh0  = {state.xh0:.6e}")
    print(f"xh1  = {state.xh1:.6e}")
    print(f"xhe0 = {state.xhe0:.6e}")
    print(f"xhe1 = {state.xhe1:.6e}")
    print(f"xhe2 = {state.xhe2:.6e}")
    print(f"status: {state.status.value} after {state.iterations} iterations")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="sphlight: synthetic lightcurves from SPH particle data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Lightcurve command
    lc_parser = subparsers.add_parser(
        "lightcurve", help="Compute luminosity, Teff and spectrum for a series of snapshots"
    )
    lc_parser.add_argument("config", type=str, help="Path to configuration file (YAML or JSON)")
    lc_parser.add_argument(
        "snapshots", type=str, nargs="+", help="Snapshot files (CSV, NPZ or HDF5)"
    )
    lc_parser.add_argument(
        "--spec",
        type=str,
        default=None,
        help="Prefix for per-snapshot spectrum files (<prefix>_<index>.spec)",
    )
    lc_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file for the lightcurve, CSV or JSON (default: print to stdout)",
    )
    lc_parser.add_argument(
        "--workers", type=int, default=None, help="Number of worker threads"
    )
    lc_parser.set_defaults(func=lightcurve_cmd)

    # Temperature command
    temp_parser = subparsers.add_parser(
        "temperature", help="Temperature from density and specific internal energy"
    )
    temp_parser.add_argument("--rho", type=float, required=True, help="Density [g/cm^3]")
    temp_parser.add_argument("--u", type=float, required=True, help="Internal energy [erg/g]")
    temp_parser.add_argument(
        "--mu", type=float, default=0.6, help="Mean molecular weight (default: 0.6)"
    )
    temp_parser.add_argument(
        "--strict", action="store_true", help="Fail if the solver does not converge"
    )
    temp_parser.set_defaults(func=temperature_cmd)

    # Ionisation command
    ion_parser = subparsers.add_parser(
        "ionisation", help="Hydrogen and helium ionisation fractions from the Saha equations"
    )
    ion_parser.add_argument("--rho", type=float, required=True, help="Density [g/cm^3]")
    ion_parser.add_argument("--temp", type=float, required=True, help="Temperature [K]")
    ion_parser.add_argument(
        "-X", type=float, default=0.7, help="Hydrogen mass fraction (default: 0.7)"
    )
    ion_parser.add_argument(
        "-Y", type=float, default=0.28, help="Helium mass fraction (default: 0.28)"
    )
    ion_parser.add_argument(
        "--strict", action="store_true", help="Fail if the solver does not converge"
    )
    ion_parser.set_defaults(func=ionisation_cmd)

    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(level=args.log_level)

    # Execute command
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error executing command: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
