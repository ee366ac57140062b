"""
Entry point — loads a folder of OpenText documents directly.

This bypasses the MCP server and runs parse, merge and reconcile as a
standalone async operation.  Useful for bootstrapping the store.

Usage:
    python main.py path/to/documents

For MCP server mode (stdio transport):
    python -m src.annotation_graph.server
For the HTTP gateway:
    python -m src.gateway.app
"""

import argparse
import asyncio
import sys

from src.annotation_graph.config import AnnotationGraphSettings
from src.annotation_graph.service import AnnotationGraphService
from src.shared.exceptions import GraphServiceError
from src.shared.logging import setup_logging

logger = setup_logging("annotation-graph.main", level="INFO")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Parse OpenText XML documents and persist the merged graph."
    )
    parser.add_argument("folder", help="Directory containing .xml documents")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    service = await AnnotationGraphService.create(AnnotationGraphSettings())
    try:
        graph, stats = await service.load_folder(args.folder)
    except (GraphServiceError, FileNotFoundError) as e:
        print("Load failed:", e)
        return 1
    finally:
        await service.close()

    print("Load complete:", f"nodes={graph.node_count}", f"edges={graph.edge_count}")
    print("Store operations:", stats.to_dict())
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
