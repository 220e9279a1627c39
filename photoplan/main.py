import sys
import os
import argparse
import yaml
import logging
from PySide6.QtCore import QCoreApplication
from photoplan.core.mission_pattern_controller import MissionPatternController
from photoplan.core.planning_params import GeodeticPoint
from photoplan.utils.mission_plot import plot_mission


def setup_global_logging(config):
    """Configure logging for the entire application."""
    log_file_path = (config.get("device_options") or {}).get("log_file_path", "data/logs/photoplan_log.txt")

    # Create directory if it doesn't exist
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file_path, mode='a'),
            logging.StreamHandler()  # Also log to console
        ]
    )

    logger = logging.getLogger("PHOTOPLAN.Main")
    logger.info("photoplan logging initialized")
    logger.info(f"Log file: {log_file_path}")


# Function to load configuration
def load_config(path=None):
    if path is None:
        # config.yaml ships next to this module
        base_dir = os.path.dirname(os.path.abspath(__file__))
        path = os.path.join(base_dir, "config.yaml")

    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f) or {}
            print(f"Configuration loaded successfully from: {path}")
            return config
    except FileNotFoundError:
        print(f"Configuration file not found: {path}")
        return {}
    except yaml.YAMLError as e:
        print(f"Error parsing YAML file: {e}")
        return {}


def load_parameters(path):
    """Read a parameter bundle from a YAML or JSON file."""
    with open(path, 'r') as f:
        params = yaml.safe_load(f)
    if not isinstance(params, dict):
        raise ValueError(f"Parameter file must contain a mapping: {path}")
    return params


def _plot_area(params):
    raw = params.get('polygon') or params.get('polyline')
    if not raw:
        return None
    return [GeodeticPoint.from_dict(p) for p in raw]


def build_parser():
    parser = argparse.ArgumentParser(
        prog="photoplan",
        description="Generate photographic coverage waypoints for a survey UAV.")
    parser.add_argument("pattern", choices=["area", "strip", "poi", "spiral"],
                        help="coverage pattern to plan")
    parser.add_argument("params_file", help="YAML or JSON parameter bundle")
    parser.add_argument("--config", default=None, help="application config.yaml")
    parser.add_argument("--camera", default=None, help="camera intrinsics file (YAML or JSON)")
    parser.add_argument("--output", default=None, help="write a QGC WPL 110 .waypoints file")
    parser.add_argument("--json", dest="json_file", default=None, help="write the mission as JSON")
    parser.add_argument("--plot", default=None, help="save a plot of the flight path")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    # Load configuration
    config = load_config(args.config)

    # Setup global logging first
    setup_global_logging(config)

    logger = logging.getLogger("PHOTOPLAN.Main")
    logger.info(f"Planning {args.pattern} mission from {args.params_file}")

    app = QCoreApplication.instance() or QCoreApplication([sys.argv[0]])
    app.setApplicationName("photoplan")

    try:
        params = load_parameters(args.params_file)
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.error(f"Failed to read parameters: {e}")
        return 1

    if args.camera:
        params['camera_file'] = args.camera

    controller = MissionPatternController(config)
    controller.mission_failed.connect(
        lambda pattern, reason: logger.error(f"{pattern} mission failed: {reason}"))

    waypoints = controller.generate_mission(args.pattern, params)
    if not waypoints:
        return 1

    summary = controller.summary
    print(f"Pattern: {summary['pattern']}")
    print(f"Number of Waypoints: {summary['waypoints_count']}")
    print(f"Total Distance: {summary['total_distance_m']:.1f} m ({summary['total_distance_m'] / 1000:.2f} km)")

    if args.output and not controller.export_waypoints(args.output):
        return 1
    if args.json_file and not controller.save_mission(args.json_file):
        return 1
    if args.plot:
        try:
            plot_mission(waypoints, args.plot, area=_plot_area(params),
                         title=f"{args.pattern.capitalize()} Mission")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save plot to {args.plot}: {e}")
            return 1

    logger.info("Mission planning complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
