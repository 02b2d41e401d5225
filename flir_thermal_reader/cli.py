"""
Command-line interface for flir-thermal-reader.
"""

import argparse
import csv
import logging
import sys

import numpy as np

from .config import Settings
from .palettes import PALETTES, get_palette
from .reader import FlirReader
from .rendering import Toolkit

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main entry point for the CLI."""
    try:
        settings = Settings()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    parser = argparse.ArgumentParser(
        description="FLIR radiometric JPEG / FFF reader"
    )

    parser.add_argument(
        "file_path",
        help="Path to the thermal file to read (.jpg or .fff)"
    )

    parser.add_argument(
        "--info",
        action="store_true",
        help="Show decoded camera properties"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show raw and temperature statistics"
    )

    parser.add_argument(
        "--export-csv",
        type=str,
        help="Export temperature data to CSV file"
    )

    parser.add_argument(
        "--png",
        type=str,
        help="Render the image with a palette and save it as PNG"
    )

    parser.add_argument(
        "--palette",
        default=settings.palette,
        choices=["embedded"] + list(PALETTES),
        help="Palette for --png (default: %(default)s)"
    )

    parser.add_argument(
        "--fahrenheit",
        action="store_true",
        default=settings.fahrenheit,
        help="Report temperatures in Fahrenheit"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        reader = FlirReader()
        thermal_image = reader.read_file(args.file_path)
        toolkit = Toolkit(thermal_image)

        if args.info:
            print_info(thermal_image)

        if args.stats:
            print_stats(toolkit, args.fahrenheit)

        if args.export_csv:
            export_to_csv(toolkit, args.export_csv, args.fahrenheit)
            print(f"Data exported to: {args.export_csv}")

        if args.png:
            export_png(toolkit, args.png, args.palette,
                       settings.over_color, settings.under_color)
            print(f"Image rendered to: {args.png}")

        if not any([args.info, args.stats, args.export_csv, args.png]):
            print(f"File loaded successfully: {args.file_path}")
            print(f"Image size: {thermal_image.get_image_shape()}")
            print(f"Creator: {thermal_image.creator}")

    except Exception as e:
        logger.debug("Failed to process %s", args.file_path, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _unit(fahrenheit):
    return "°F" if fahrenheit else "°C"


def print_info(thermal_image):
    """Print decoded properties grouped by record."""
    print("\n=== THERMOGRAPHIC INFORMATION ===")
    print(f"Creator: {thermal_image.creator}")
    print(f"Image size: {thermal_image.get_image_shape()}")
    category = None
    for prop in thermal_image.properties.values():
        if prop.category != category:
            category = prop.category
            print(f"\n[{category}]")
        print(f"{prop.name}: {prop.value}")


def print_stats(toolkit, fahrenheit=False):
    """Print raw and temperature statistics."""
    stats = toolkit.stats
    temps = toolkit.temperatures(fahrenheit)
    unit = _unit(fahrenheit)

    print("\n=== TEMPERATURE STATISTICS ===")
    print(f"Raw range: {stats.min} - {stats.max}")
    print(f"Minimum temperature: {np.nanmin(temps):.2f}{unit}")
    print(f"Maximum temperature: {np.nanmax(temps):.2f}{unit}")
    print(f"Average temperature: {np.nanmean(temps):.2f}{unit}")
    for i in range(1, 10):
        print(f"P{i * 10}: offset {stats.percentile_offset(i / 10):.3f}")


def export_to_csv(toolkit, output_path, fahrenheit=False):
    """Export temperature data to CSV format."""
    data = toolkit.temperatures(fahrenheit)

    with open(output_path, 'w', newline='') as csvfile:
        writer = csv.writer(csvfile)

        # Header
        writer.writerow(['X', 'Y', 'Temperature_F' if fahrenheit else 'Temperature_C'])

        # Data
        for y in range(data.shape[0]):
            for x in range(data.shape[1]):
                writer.writerow([x, y, data[y, x]])


def export_png(toolkit, output_path, palette_name="embedded", over_color=0, under_color=0):
    """Render with the embedded or a built-in palette and save as PNG."""
    if palette_name == "embedded":
        buffer = toolkit.render_default()
    else:
        buffer = toolkit.render_palette(
            get_palette(palette_name),
            over_color=over_color,
            under_color=under_color,
        )
    toolkit.to_image(buffer).save(output_path, format="PNG")


if __name__ == "__main__":
    main()
