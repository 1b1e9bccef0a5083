#!/usr/bin/env python3
"""
Visual check for regions and step-wise triangulation.

Plots a random point cloud with its (partial) triangulation, highlighting
alive edges, next to a demo region with its self-intersections, convexity
label and edge arrows toward a reference point.

Usage:
    python visualize.py [options]

Example:
    python visualize.py --points 40 --steps 25 --seed 3
    python visualize.py --rotate 30 --save /tmp/triangulation.png
"""

import sys
import os
import argparse
import math
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import GeometryConfig, DEFAULT_CONFIG
from geometry import Point2D
from region import PlanarRegion
from transform2d import AffineTransform
from triangulation import Triangulator


def random_point_cloud(count: int, seed: int, size: float = 100.0) -> list[Point2D]:
    """Uniform random points in a size x size square."""
    rng = np.random.default_rng(seed)
    return [Point2D(float(x), float(y)) for x, y in rng.uniform(0.0, size, size=(count, 2))]


def demo_region(config: GeometryConfig = DEFAULT_CONFIG) -> PlanarRegion:
    """Bow-tie with an extra vertex: crosses itself and is not convex."""
    points = [(10, 10), (90, 90), (90, 10), (10, 90), (0, 50)]
    return PlanarRegion.from_points(points, config)


def plot_triangulation(ax, triangulator: Triangulator):
    """Plot points, triangles, dead edges and alive edges."""
    for region in triangulator.triangle_regions():
        tri_poly = plt.Polygon(
            [v.to_tuple() for v in region.vertices],
            facecolor='lightblue', alpha=0.4, edgecolor='none'
        )
        ax.add_patch(tri_poly)

    for start, end in triangulator.dead_segments():
        ax.plot([start.x, end.x], [start.y, end.y], color='black', linewidth=1)

    for start, end in triangulator.alive_segments():
        ax.plot([start.x, end.x], [start.y, end.y], color='orange', linewidth=2.5)

    xs = [p.x for p in triangulator.points]
    ys = [p.y for p in triangulator.points]
    ax.plot(xs, ys, 'o', color='black', markersize=4)


def plot_region(ax, region: PlanarRegion, reference=None, arrow_length: Optional[float] = None):
    """Plot a region with its crossings, label and optional edge arrows."""
    loop = region.edge_loop()
    ax.plot([p.x for p in loop], [p.y for p in loop], color='black', linewidth=2)
    ax.plot([p.x for p in region.vertices], [p.y for p in region.vertices],
            'o', color='black', markersize=6)

    for p in region.intersections:
        ax.plot(p.x, p.y, 'o', color='gray', markersize=5)

    center = region.get_center()
    ax.text(center.x, center.y, region.label(), ha='center', va='center', fontsize=12)

    if reference is not None:
        if arrow_length is None:
            arrow_length = region.config.arrow_length
        ref = Point2D(*reference)
        ax.plot(ref.x, ref.y, 'x', color='red', markersize=8)
        for anchor, (dx, dy) in region.edge_arrows(ref):
            ax.annotate(
                '', xy=(anchor.x + dx * arrow_length, anchor.y + dy * arrow_length),
                xytext=(anchor.x, anchor.y),
                arrowprops=dict(arrowstyle='->', color='steelblue')
            )


def build_figure(triangulator: Triangulator, region: PlanarRegion, reference=None):
    """Create the two-panel figure."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 7))

    ax1 = axes[0]
    state = "completed" if triangulator.is_completed() else "in progress"
    ax1.set_title(f'Triangulation ({len(triangulator.triangles)} triangles, {state})')
    plot_triangulation(ax1, triangulator)
    ax1.set_aspect('equal')
    ax1.grid(True, alpha=0.3)

    ax2 = axes[1]
    ax2.set_title(f'Region ({len(region.intersections)} self-intersections)')
    plot_region(ax2, region, reference)
    ax2.set_aspect('equal')
    ax2.grid(True, alpha=0.3)

    fig.tight_layout()
    return fig


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Plot a step-wise triangulation and a transformed region',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --points 40
  %(prog)s --points 40 --steps 10
  %(prog)s --rotate 45 --scale 0.8 --save out.png
        """
    )
    parser.add_argument('--points', type=int, default=30,
                        help='Number of random points (default: 30)')
    parser.add_argument('--seed', type=int, default=42,
                        help='Random seed (default: 42)')
    parser.add_argument('--steps', type=int, default=None,
                        help='Stop after this many steps (default: run to completion)')
    parser.add_argument('--rotate', type=float, default=0.0,
                        help='Rotate the region about its center, in degrees')
    parser.add_argument('--scale', type=float, default=1.0,
                        help='Scale the region about its center')
    parser.add_argument('--reference', type=float, nargs=2, default=(50.0, 40.0),
                        metavar=('X', 'Y'), help='Reference point for edge arrows')
    parser.add_argument('--config', default=None,
                        help='Geometry config JSON file')
    parser.add_argument('--save', default=None,
                        help='Write the figure to this file instead of showing it')
    parser.add_argument('--debug', action='store_true',
                        help='Print triangulation progress')

    args = parser.parse_args(argv)

    config = GeometryConfig.load(args.config) if args.config else DEFAULT_CONFIG

    triangulator = Triangulator(random_point_cloud(args.points, args.seed), config)
    if args.steps is None:
        triangulator.run_to_completion(debug=args.debug)
    else:
        for _ in range(args.steps):
            if not triangulator.advance():
                break

    region = demo_region(config)
    center = region.get_center()
    region.apply_transform(AffineTransform.rotation_around(math.radians(args.rotate), center))
    region.apply_transform(AffineTransform.uniform_scaling_around(args.scale, center))

    print(f"Points: {len(triangulator.points)}, triangles: {len(triangulator.triangles)}, "
          f"alive edges: {len(triangulator.alive_edges())}, "
          f"region: {region.label()} with {len(region.intersections)} self-intersections")

    fig = build_figure(triangulator, region, args.reference)
    if args.save:
        fig.savefig(args.save, dpi=150)
        print(f"Saved plot to {args.save}")
    else:
        plt.show()
    plt.close(fig)
    return 0


if __name__ == '__main__':
    sys.exit(main())
