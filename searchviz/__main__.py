"""Main entry point for the Search Algorithm Visualizer."""

import argparse
import logging
import os
import sys

from . import __version__

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="searchviz",
        description="Visualize and compare classical search algorithms on grids and graphs.",
    )
    parser.add_argument("--headless", action="store_true",
                        help="run without the GUI and print results")
    parser.add_argument("--problem", metavar="FILE",
                        help="problem JSON file (required with --headless)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--algorithm", default="astar", metavar="ID",
                      help="algorithm id: bfs, dfs, ucs, greedy, astar, "
                           "hillClimbing, beamSearch, idaStar (default: astar)")
    mode.add_argument("--compare", action="store_true",
                      help="run every algorithm and print a comparison table")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging verbosity (default: WARNING)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def run_headless(args: argparse.Namespace) -> int:
    """Load a problem, run the search(es) and print a summary. Returns the exit code."""
    from .domain.engine import run_algorithm
    from .domain.metrics import compare_algorithms, format_comparison_table
    from .domain.types import ALGORITHM_NAMES
    from .domain.validation import validate_problem
    from .utils.serialization import load_problem_file

    if not args.problem:
        print("error: --headless requires --problem FILE", file=sys.stderr)
        return 2

    try:
        problem = validate_problem(load_problem_file(args.problem))
        if args.compare:
            report = compare_algorithms(problem)
            print(format_comparison_table(report))
            return 0

        result = run_algorithm(args.algorithm, problem)
    except OSError as e:
        print(f"error: cannot read {args.problem}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Algorithm:      {ALGORITHM_NAMES[result.algorithm]}")
    print(f"Success:        {'yes' if result.success else 'no'}")
    if result.success:
        print(f"Path:           {' -> '.join(result.final_path)}")
        print(f"Path cost:      {result.path_cost:.3f}")
        print(f"Path length:    {result.path_length}")
    print(f"Nodes visited:  {result.nodes_visited}")
    print(f"Steps recorded: {result.total_steps}")
    print(f"Time:           {result.execution_time_ms:.2f} ms")
    print(f"Memory:         ~{result.memory_usage_kb} KB")
    return 0 if result.success else 3


def run_gui(args: argparse.Namespace) -> int:
    """Launch the Qt application."""
    # Disable DPI scaling quirks on macOS
    os.environ.setdefault('QT_AUTO_SCREEN_SCALE_FACTOR', '0')
    os.environ.setdefault('QT_SCALE_FACTOR', '1')
    os.environ.setdefault('QT_LOGGING_RULES', 'qt.qpa.backingstore=false')

    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import QApplication

    QApplication.setHighDpiScaleFactorRoundingPolicy(Qt.HighDpiScaleFactorRoundingPolicy.Floor)

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Search Algorithm Visualizer")
    app.setApplicationVersion(__version__)

    # Import UI components (after QApplication is created)
    from .app.controller import PlaybackController
    from .ui.main_window import MainWindow

    controller = PlaybackController()
    window = MainWindow(controller)
    if args.problem:
        controller.load_problem(args.problem)
    if args.algorithm:
        controller.set_algorithm(args.algorithm)
        index = window.algorithm_combo.findData(controller.algorithm)
        window.algorithm_combo.setCurrentIndex(index)

    window.show()
    return app.exec()


def main(argv=None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    logger.debug("Starting searchviz %s", __version__)

    if args.headless:
        return run_headless(args)
    return run_gui(args)


if __name__ == "__main__":
    sys.exit(main())
