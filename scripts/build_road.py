"""Build a road mesh from a spline config and export it.

Pipeline:
    1. Load and validate spline.v1.yaml
    2. Place lane nodes (distance or count mode) in an in-memory scene
    3. Write the road mesh as Wavefront OBJ
    4. Write a YAML summary (counts, length, bounds, lane points)

Both outputs are written atomically.

CLI:
    python scripts/build_road.py --config configs/spline.v1.yaml --output outputs/road/
    python scripts/build_road.py --config configs/spline.v1.yaml --output out/ --count 12
    python scripts/build_road.py --config configs/spline.v1.yaml --output out/ --distance 2.5

Output structure:
    <output_dir>/
        <name>.obj
        <name>_summary.yaml
"""

import argparse
import sys
from typing import Any, Dict, Optional

from bezier_road.geometry import CountPlan, DistancePlan, GeometryError, SamplePlan
from bezier_road.nodes import InMemorySceneHost
from bezier_road.spline import BezierSpline
from bezier_road.utils import fs, validators
from bezier_road.utils.logging_config import get_logger, install_excepthook, setup_logging

logger = get_logger(__name__)


def build_road_main(
    config_path: str,
    output_dir: str,
    *,
    name: str = "road",
    plan: Optional[SamplePlan] = None,
) -> Dict[str, Any]:
    """Run the pipeline and return a summary dict.

    Parameters
    ----------
    config_path : str
        Path to a spline.v1.yaml file
    output_dir : str
        Directory for the OBJ and summary files (created if missing)
    name : str
        Base name of the output files
    plan : SamplePlan, optional
        Overrides the sampling section of the config

    Returns
    -------
    dict
        Summary as written to ``<name>_summary.yaml`` plus output paths.
    """
    cfg = validators.load_spline_config(config_path)
    plan = plan if plan is not None else cfg.sample_plan()

    host = InMemorySceneHost()
    spline = BezierSpline.from_config(cfg, host)
    lanes = spline.create_nodes(plan)
    mesh = spline.mesh

    out = fs.ensure_dir(output_dir)
    obj_path = out / f"{name}.obj"
    summary_path = out / f"{name}_summary.yaml"

    fs.atomic_write_text(obj_path, mesh.to_obj(name))

    summary = {
        'config': str(config_path),
        'mode': 'count' if isinstance(plan, CountPlan) else 'distance',
        'control_points': [list(p) for p in spline.control_points],
        'lane_width': spline.lane_width,
        'total_length': float(lanes.total_length),
        'spacing': float(lanes.spacing),
        'lane_pairs': len(lanes),
        'markers': len(host.markers),
        'vertices': mesh.vertex_count,
        'triangles': mesh.triangle_count,
        'bounds': {
            'min': mesh.bounds.minimum.tolist(),
            'max': mesh.bounds.maximum.tolist(),
        },
        'left_lane': lanes.left.tolist(),
        'right_lane': lanes.right.tolist(),
    }
    fs.atomic_yaml_dump(summary, summary_path)

    logger.info(
        "Built %s: %d lane pairs, %d triangles, length %.3f",
        name, len(lanes), mesh.triangle_count, lanes.total_length,
    )

    return {**summary, 'obj_path': str(obj_path), 'summary_path': str(summary_path)}


def main() -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Sample lanes along a Bézier spline and export the road mesh"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/spline.v1.yaml",
        help="Path to spline config",
    )
    parser.add_argument(
        "--output",
        type=str,
        required=True,
        help="Output directory for OBJ and summary",
    )
    parser.add_argument(
        "--name",
        type=str,
        default="road",
        help="Base name for output files",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--distance",
        type=float,
        help="Override: place node pairs every DISTANCE units",
    )
    mode.add_argument(
        "--count",
        type=int,
        help="Override: place COUNT evenly spaced node pairs",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    try:
        cfg = validators.load_spline_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        log_level="DEBUG" if args.verbose else cfg.logging.level,
        log_file=cfg.logging.file,
        json=cfg.logging.json_lines,
        color=cfg.logging.color,
        context={"app": "build_road"},
    )
    install_excepthook()

    plan: Optional[SamplePlan] = None
    try:
        if args.distance is not None:
            plan = DistancePlan(args.distance)
        elif args.count is not None:
            plan = CountPlan(args.count)
        result = build_road_main(args.config, args.output, name=args.name, plan=plan)
    except GeometryError as e:
        logger.error("Road build failed: %s", e)
        return 1

    print("\n=== Road Built ===")
    print(f"Lane pairs: {result['lane_pairs']}  Length: {result['total_length']:.3f}")
    print(f"Mesh: {result['obj_path']}")
    print(f"Summary: {result['summary_path']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
