"""
Command line entry point: cluster a JSON list of points.

    python -m kmeans points.json --k 2 --bounds '[[0, 15], [0, 15]]'
"""

import argparse
import json
import logging
import sys

from .config import DEFAULT_MAX_EPOCHS, DEFAULT_THRESHOLD, Configuration
from .errors import KMeansError
from .kmeans import run


def parse_args(argv=None):
    ap = argparse.ArgumentParser(prog="kmeans", description="K-means clustering of JSON points")
    ap.add_argument('points', help="JSON file holding a list of points ('-' for stdin)")
    ap.add_argument('--config', help='JSON file with k_clusters, max_epochs, threshold, bounds')
    ap.add_argument('--k', type=int, help='number of clusters')
    ap.add_argument('--max-epochs', type=int, default=None)
    ap.add_argument('--threshold', type=float, default=None)
    ap.add_argument('--bounds', help='JSON list of [low, high] pairs; defaults to the data range')
    ap.add_argument('--seed', type=int, default=None)
    ap.add_argument('--verbose', action='store_true')
    return ap.parse_args(argv)


def _load_json(path):
    if path == '-':
        return json.load(sys.stdin)
    with open(path, encoding='utf-8') as f:
        return json.load(f)


def build_config(args, points) -> Configuration:
    settings = _load_json(args.config) if args.config else {}
    settings = {str(key).replace('-', '_'): value for key, value in settings.items()}
    if args.k is not None:
        settings['k_clusters'] = args.k
    if args.max_epochs is not None:
        settings['max_epochs'] = args.max_epochs
    if args.threshold is not None:
        settings['threshold'] = args.threshold
    if args.bounds is not None:
        settings['bounds'] = json.loads(args.bounds)

    if 'bounds' in settings:
        return Configuration.from_dict(settings)
    if 'k_clusters' not in settings:
        raise KMeansError('number of clusters is required (--k or k_clusters in --config)')
    return Configuration.from_points(
        points,
        k_clusters=settings['k_clusters'],
        max_epochs=settings.get('max_epochs', DEFAULT_MAX_EPOCHS),
        threshold=settings.get('threshold', DEFAULT_THRESHOLD),
    )


def format_result(state) -> dict:
    return {
        'epoch': state.current_epoch,
        'centroids': [None if c is None else c.tolist() for c in state.centroids],
        'groups': [group.tolist() for group in state.groups],
        'empty_clusters': list(state.empty_clusters),
        'inertia': state.inertia(),
    }


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        points = _load_json(args.points)
        config = build_config(args, points)
        state = run(config, points, args.seed)
    except (KMeansError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    json.dump(format_result(state), sys.stdout, indent=2)
    sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
