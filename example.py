#!/usr/bin/env python3
"""
Example script for flir_thermal_reader

Reads a FLIR radiometric JPEG, prints its calibration and temperature range,
and plots the temperatures next to the raw-count histogram.

Usage:
    python example.py IR_0001.jpg

Requires matplotlib (pip install -e ".[plot]").
"""

import sys

import matplotlib.pyplot as plt
import numpy as np

from flir_thermal_reader import Toolkit, read_jpg


def main():
    """Basic example showing thermal data reading and visualization."""
    jpg_file = sys.argv[1] if len(sys.argv) > 1 else "IR_0001.jpg"

    try:
        image = read_jpg(jpg_file)
    except FileNotFoundError:
        print(f"Error: File '{jpg_file}' not found!")
        return 1

    toolkit = Toolkit(image)
    temps = toolkit.temperatures()

    print(f"File: {jpg_file}")
    print(f"Creator: {image.creator}")
    print(f"Camera: {image.get_property('CameraModel')}")
    print(f"Size: {image.get_image_shape()}")
    print(f"Emissivity: {image.get_property('Emissivity'):.2f}")
    print(f"Range: {np.nanmin(temps):.1f}°C - {np.nanmax(temps):.1f}°C")
    print(f"Median raw value: {toolkit.stats.percentile_value(0.5)}")

    plt.figure(figsize=(12, 5))

    plt.subplot(1, 2, 1)
    plt.imshow(temps, cmap='inferno')
    plt.colorbar(label='Temperature (°C)')
    plt.title(f'Thermal Image - {image.get_property("CameraModel")}')

    plt.subplot(1, 2, 2)
    buckets = 64
    hist = toolkit.histogram(buckets)
    plt.bar(np.arange(buckets), hist, color='red', edgecolor='black')
    plt.title('Raw Value Distribution')
    plt.xlabel('Bucket (min to max raw value)')
    plt.ylabel('Pixel Count')
    plt.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
