"""Standalone Command-Line Tool for Generating Plots from Build Analyzer Exports.

This script reads an export directory written by ``build-analyzer --export``
and renders interactive charts with Plotly:

1.  **Module chart**: module durations of a single build (with the test
    time of each module), or average durations with min/max range for an
    aggregated export.
2.  **Plugin chart**: estimated time per plugin goal, stacked per module.
    Only available when the export was made with ``--plugins``. These are
    line-count estimates, not measured durations, and the chart says so.

Every chart is saved as HTML; a PNG copy is written when the optional
``kaleido`` package is installed.

Usage examples:
  # Generate every chart available for an export
  python tools/plotter.py --export-dir ./analysis

  # Only the module chart, limited to the 10 slowest modules
  python tools/plotter.py --export-dir ./analysis --chart modules --top-n 10
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Third-party library imports
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import polars as pl

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildanalyzer.storage import ExportManager, detect_export_format  # noqa: E402
from buildanalyzer.storage.data_manager import (  # noqa: E402
    MODULE_STATS_TABLE,
    MODULES_TABLE,
    PLUGIN_TIMINGS_TABLE,
)

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("PlotterTool")


# --- Helper Functions ---


def _to_pandas(df: pl.DataFrame) -> pd.DataFrame:
    """Convert a Polars frame for Plotly without requiring pyarrow."""
    return pd.DataFrame(df.to_dicts(), columns=df.columns)


def _limit_top_n(df: pl.DataFrame, sort_column: str, top_n: Optional[int]) -> pl.DataFrame:
    df = df.sort(sort_column, descending=True)
    if top_n is not None:
        df = df.head(top_n)
    return df


def _create_single_build_module_figure(modules: pd.DataFrame) -> go.Figure:
    """Bar chart of module durations with the test time of each module."""
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=modules["name"],
            y=modules["seconds"],
            name="Module time (s)",
            marker_color="cornflowerblue",
            text=modules["seconds"].round(2),
            textposition="auto",
        )
    )
    fig.add_trace(
        go.Bar(
            x=modules["name"],
            y=modules["test_seconds"],
            name="Test time (s)",
            marker_color="indianred",
        )
    )
    fig.update_layout(
        title_text="Module Durations (Reactor Summary)",
        xaxis=dict(title_text="Module", type="category"),
        yaxis=dict(title_text="Seconds"),
        legend=dict(x=0.80, y=0.98, bordercolor="Black", borderwidth=1),
        barmode="group",
    )
    return fig


def _create_aggregated_module_figure(stats: pd.DataFrame, build_count: int) -> go.Figure:
    """Bar chart of average module durations with min/max error bars."""
    fig = go.Figure(
        go.Bar(
            x=stats["name"],
            y=stats["average_seconds"],
            name="Average time (s)",
            marker_color="cornflowerblue",
            error_y=dict(
                type="data",
                symmetric=False,
                array=stats["max_seconds"] - stats["average_seconds"],
                arrayminus=stats["average_seconds"] - stats["min_seconds"],
            ),
        )
    )
    fig.update_layout(
        title_text=f"Average Module Durations over {build_count} Builds (min/max range)",
        xaxis=dict(title_text="Module", type="category"),
        yaxis=dict(title_text="Seconds"),
    )
    return fig


def _create_plugin_figure(timings: pd.DataFrame) -> go.Figure:
    """Stacked bar chart of estimated plugin time per module."""
    fig = px.bar(
        timings,
        x="module",
        y="estimated_seconds",
        color="plugin_key",
        hover_data=["line_count"],
        labels={
            "module": "Module",
            "estimated_seconds": "Estimated seconds",
            "plugin_key": "Plugin goal",
            "line_count": "Log lines",
        },
        title="Estimated Plugin Time per Module (heuristic: split by log line share, not measured)",
    )
    fig.update_layout(barmode="stack", xaxis=dict(type="category"))
    return fig


def _save_plotly_figure(fig: go.Figure, base_filename: str, output_dir: Path) -> Optional[Path]:
    """Saves a Plotly figure to HTML and, if possible, PNG.

    Args:
        fig: The Plotly Figure object to save.
        base_filename: The base name for the output files (without extension).
        output_dir: The directory where the plot files will be saved.

    Returns:
        Path of the HTML file, or None if it could not be written.
    """
    plot_filename_html = output_dir / f"{base_filename}.html"
    try:
        fig.write_html(plot_filename_html)
        logger.info(f"Interactive plot saved to: {plot_filename_html}")
    except Exception as e:
        logger.error(f"Failed to save plot {plot_filename_html} using Plotly: {e}", exc_info=True)
        return None

    # Attempt to save to PNG, which requires the 'kaleido' package.
    try:
        plot_filename_png = output_dir / f"{base_filename}.png"
        fig.write_image(plot_filename_png, width=1200, height=600)
        logger.info(f"Static plot saved to: {plot_filename_png}")
    except Exception:
        # This is not a critical error. Inform the user how to enable it.
        logger.warning(
            "Failed to save static plot to PNG. To enable this feature, "
            "install the optional 'export' dependencies: "
            "`pip install build-analyzer[export]`"
        )
    return plot_filename_html


# --- Chart Generators ---


def generate_module_plot(manager: ExportManager, output_dir: Path, top_n: Optional[int]) -> Optional[Path]:
    """Render the module chart for a single-build or aggregated export."""
    modules = manager.load_table(MODULES_TABLE)
    if modules is not None:
        if modules.is_empty():
            logger.warning("Module table is empty. Skipping module plot.")
            return None
        modules = _limit_top_n(modules, "seconds", top_n)
        fig = _create_single_build_module_figure(_to_pandas(modules))
        return _save_plotly_figure(fig, "module_durations", output_dir)

    stats = manager.load_table(MODULE_STATS_TABLE)
    if stats is None or stats.is_empty():
        logger.warning("No module data found in export. Skipping module plot.")
        return None

    build_count = manager.load_metadata().get("build_count", 0)
    stats = _limit_top_n(stats, "average_seconds", top_n)
    fig = _create_aggregated_module_figure(_to_pandas(stats), build_count)
    return _save_plotly_figure(fig, "module_average_durations", output_dir)


def generate_plugin_plot(manager: ExportManager, output_dir: Path, top_n: Optional[int]) -> Optional[Path]:
    """Render the plugin chart if the export contains plugin timings."""
    timings = manager.load_table(PLUGIN_TIMINGS_TABLE)
    if timings is None or timings.is_empty():
        logger.info("No plugin timings in export (run with --plugins). Skipping plugin plot.")
        return None

    if top_n is not None:
        # Keep the modules with the largest total estimate.
        top_modules = (
            timings.group_by("module")
            .agg(pl.col("estimated_seconds").sum().alias("total"))
            .sort("total", descending=True)
            .head(top_n)
            .get_column("module")
        )
        timings = timings.filter(pl.col("module").is_in(top_modules))

    fig = _create_plugin_figure(_to_pandas(timings))
    return _save_plotly_figure(fig, "plugin_estimates", output_dir)


def main():
    """Main command-line interface function for the plotter tool."""
    parser = argparse.ArgumentParser(
        description="Generate plots from build-analyzer export directories.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--export-dir",
        type=Path,
        required=True,
        help="Required. Directory written by 'build-analyzer --export'.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory to save plots. Defaults to the specified --export-dir.",
    )
    parser.add_argument(
        "--chart",
        choices=["modules", "plugins", "all"],
        default="all",
        help="Specify which charts to generate. Default: all.",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        metavar="N",
        help="Only plot the N slowest modules.",
    )

    args = parser.parse_args()

    if not args.export_dir.is_dir():
        logger.error(f"Export directory not found: {args.export_dir}")
        sys.exit(1)

    if args.top_n is not None and args.top_n < 1:
        logger.error(f"Invalid --top-n value: {args.top_n}. Must be at least 1.")
        sys.exit(1)

    storage_config = detect_export_format(args.export_dir)
    if storage_config is None:
        logger.error(f"No exported module data found in {args.export_dir}")
        sys.exit(1)

    output_dir = args.output_dir or args.export_dir
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Cannot create output directory '{output_dir}': {e}")
        sys.exit(1)

    manager = ExportManager(args.export_dir, storage_config)

    if args.chart in ("modules", "all"):
        generate_module_plot(manager, output_dir, args.top_n)
    if args.chart in ("plugins", "all"):
        generate_plugin_plot(manager, output_dir, args.top_n)


# Standard Python entry point guard. This allows the script to be imported
# as a module without executing the main function.
if __name__ == "__main__":
    main()
