#!/usr/bin/env python3
"""
CLI script to search Pexels images through a running image search server.

Usage:
    python -m scripts.search_images --query "mountain" --pages 2
"""

import sys
import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import httpx

# Add parent directory to path using pathlib
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.append(project_root)

from app.api.v1.models.models import COLORS, ORIENTATIONS, SIZES
from app.client.results_controller import ResultsController
from app.client.search_form import SearchForm
from app.core.config import settings

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _format_results_for_json(controller: ResultsController) -> Dict[str, Any]:
    """Helper function to format the accumulated results for JSON output."""
    return {
        "images": [image.model_dump(by_alias=True, mode="json") for image in controller.results],
        "totalResults": controller.total_results,
        "nextPage": controller.next_page,
        "warning": controller.warning,
    }


async def search_images(form: SearchForm, pages: int, base_url: str) -> ResultsController:
    """
    Run a search and load up to `pages` pages of results.

    Args:
        form: Filled-in search form
        pages: Number of pages to accumulate
        base_url: Base URL of the image search server

    Returns:
        The controller holding the accumulated results
    """
    criteria = form.criteria()
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        controller = ResultsController(client, per_page=settings.DEFAULT_PER_PAGE)
        logger.info(f"Searching for: {criteria.query}")
        await controller.set_criteria(criteria)
        while controller.can_load_more and controller.next_page <= pages and not controller.error:
            await controller.load_more()
    return controller


def _print_text(controller: ResultsController) -> None:
    results: List = controller.results
    if controller.warning:
        print(f"Note: {controller.warning}")
    print(f"\n{len(results)} of {controller.total_results:,} images for '{controller.criteria.query}'")
    print("-" * 60)
    for i, image in enumerate(results):
        print(f"{i+1}. {image.description or 'Untitled Image'} ({image.width} x {image.height})")
        print(f"   By: {image.author} | {image.source_url}")
        print(f"   Download: {image.original_url}")
        print("-" * 60)


def main() -> None:
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(description='Search Pexels images')
    parser.add_argument('--query', type=str, required=True,
                        help='Search keywords')
    parser.add_argument('--orientation', choices=ORIENTATIONS, action='append', default=[],
                        help='Orientation filter (repeatable; only the first is sent to Pexels)')
    parser.add_argument('--color', choices=COLORS, default=None,
                        help='Color filter')
    parser.add_argument('--size', choices=SIZES, default=None,
                        help='Size filter')
    parser.add_argument('--pages', type=int, default=1,
                        help='Number of pages to load')
    parser.add_argument('--format', choices=['text', 'json'], default='text',
                        help='Output format')
    parser.add_argument('--base-url', type=str, default=settings.BASE_URL,
                        help='Base URL of the image search server')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose output')

    args = parser.parse_args()

    # Configure logging
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    form = SearchForm(query=args.query, orientations=args.orientation)
    if args.color:
        form.set_color(args.color)
    if args.size:
        form.set_size(args.size)

    controller = asyncio.run(search_images(form, max(args.pages, 1), args.base_url))

    if controller.error:
        logger.error(f"Search failed: {controller.error}")
        if not controller.results:
            sys.exit(1)

    if args.format == 'json':
        print(json.dumps(_format_results_for_json(controller), indent=2))
    else:
        _print_text(controller)


if __name__ == "__main__":
    main()
