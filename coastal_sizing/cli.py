"""CLI entry point for coastal-sizing."""
import argparse
import math
import os
import sys

CONFIG_FILENAME = "sizing.json"


def resolve_config_path(path):
    """Accept either a sizing.json path or a directory containing it, return the file."""
    path = os.path.abspath(path)
    if os.path.isdir(path):
        path = os.path.join(path, CONFIG_FILENAME)
    if os.path.isfile(path):
        return path
    raise argparse.ArgumentTypeError(f"Path does not exist: {path}")


def _input_path(config_path, name):
    return os.path.join(os.path.dirname(config_path), name)


def cmd_validate(args):
    """Validate a sizing configuration."""
    from coastal_sizing.config import SizingConfig

    try:
        config = SizingConfig.from_file(args.config)
        print(f"Valid configuration: {config.name or os.path.basename(args.config)}")
        print(f"  Criteria: {', '.join(config.enabled) or 'none'}")
        print(f"  h0: {config.h0}m, grade: {config.grade}")
        if config.cfl_enabled:
            print(f"  CFL timestep: {'auto' if config.dt == 0 else f'{config.dt}s'}")
    except Exception as e:
        print(f"Invalid: {e}", file=sys.stderr)
        sys.exit(1)


def cmd_info(args):
    """Show configuration summary and the evaluation grid it implies."""
    from coastal_sizing.config import SizingConfig
    from coastal_sizing.grid import Grid
    from coastal_sizing.inputs import load_boundary

    try:
        config = SizingConfig.from_file(args.config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Config:   {args.config}")
    print(f"Criteria: {', '.join(config.enabled) or 'none'}")
    print(f"h0:       {config.h0}m")
    max_el = "banded" if config.banded_max_el else config.global_max_el
    print(f"max_el:   {max_el}")
    if math.isfinite(config.max_el_ns):
        print(f"max_el_ns: {config.max_el_ns}m")
    if config.inputs is None:
        return
    boundary_path = _input_path(args.config, config.inputs.boundary)
    if os.path.isfile(boundary_path):
        boundary = load_boundary(boundary_path, config.h0)
        grid = Grid.from_bbox(boundary.bbox, config.h0, origin=boundary.origin)
        print(f"Grid:     {grid.nx} x {grid.ny} nodes at {grid.spacing:.6g} degrees")
    print("\nInputs:")
    for key in ("boundary", "bathymetry", "channels"):
        name = getattr(config.inputs, key)
        if name:
            path = _input_path(args.config, name)
            size = f"{os.path.getsize(path):,} bytes" if os.path.isfile(path) else "missing"
            print(f"  {key}: {name} ({size})")


def cmd_build(args):
    """Build a sizing function and write it with its summary."""
    from coastal_sizing.callbacks import LoggingCallback
    from coastal_sizing.config import SizingConfig
    from coastal_sizing.inputs import load_bathymetry, load_boundary, load_channels
    from coastal_sizing.logging_setup import configure_sizing_logging, teardown_sizing_logging
    from coastal_sizing.pipeline import build_sizing_field

    config = SizingConfig.from_file(args.config)
    if config.inputs is None:
        print("Error: configuration has no 'inputs' section", file=sys.stderr)
        sys.exit(1)
    output_dir = args.output_dir or os.path.join(os.path.dirname(args.config), "outputs")
    logger = configure_sizing_logging(output_dir)
    callback = LoggingCallback(logger)
    try:
        boundary = load_boundary(_input_path(args.config, config.inputs.boundary), config.h0)
        bathymetry = None
        if config.inputs.bathymetry:
            bathymetry = load_bathymetry(_input_path(args.config, config.inputs.bathymetry))
        channels = None
        if config.inputs.channels:
            channels = load_channels(_input_path(args.config, config.inputs.channels))
        result = build_sizing_field(
            config, boundary, bathymetry=bathymetry, channels=channels, callback=callback
        )
        field_path = os.path.join(output_dir, args.name)
        result.function.save(field_path)
        callback.on_file("sizing_function", field_path)
        callback.on_file("summary", result.diagnostics.write(output_dir))
    except Exception as e:
        logger.error("Sizing field build failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        teardown_sizing_logging()


def main():
    parser = argparse.ArgumentParser(
        prog="coastal-sizing",
        description="Mesh sizing fields for coastal ocean models",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- build ---
    build_parser = subparsers.add_parser("build", help="Build a sizing function")
    build_parser.add_argument(
        "config", type=resolve_config_path,
        help="Path to sizing.json or directory containing it",
    )
    build_parser.add_argument(
        "--output-dir", "-o", default=None,
        help="Output directory (default: outputs/ next to the config)",
    )
    build_parser.add_argument(
        "--name", "-n", default="sizing_function.npz",
        help="File name of the saved sizing function",
    )

    # --- validate ---
    val_parser = subparsers.add_parser(
        "validate", help="Validate a sizing configuration"
    )
    val_parser.add_argument(
        "config", type=resolve_config_path,
        help="Path to sizing.json or directory containing it",
    )

    # --- info ---
    info_parser = subparsers.add_parser("info", help="Show configuration summary")
    info_parser.add_argument(
        "config", type=resolve_config_path,
        help="Path to sizing.json or directory containing it",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    commands = {
        "build": cmd_build,
        "validate": cmd_validate,
        "info": cmd_info,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
