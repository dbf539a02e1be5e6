"""Ingest runner entry point.

Indexes free text, a website or a PDF file into the vector store from the
command line, using the same pipeline as the /ingest endpoints.

Usage:
    python -m services.rag_ingest.ingest_runner --text "Some notes to index"
    python -m services.rag_ingest.ingest_runner --url https://docs.example.com/guide/
    python -m services.rag_ingest.ingest_runner --pdf ./manual.pdf
"""

import argparse
import asyncio
import sys
from pathlib import Path

from services.rag_ingest.IngestService import IngestService
from services.rag_ingest.loaders.PdfLoader import PDF_CONTENT_TYPE
from shared.clients.ClientInterface import ClientInterface
from shared.clients.ClientManager import ClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.models.errors import AppError

DEFAULT_ENGINES = {
    "embed": "gemini",
    "llm": "openai",
    "rag": "qdrant",
    "crawl": "http",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Index content into the knowledge base.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Free text to rewrite and index")
    source.add_argument("--url", help="Seed URL of a website to crawl and index")
    source.add_argument("--pdf", type=Path, help="Path to a PDF file to index")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Run one ingestion and return the process exit code."""
    args = parse_args(argv)
    logger = setup_logging()
    config = HelperConfig(logger=logger)

    clients: dict[str, ClientInterface] = {
        client_type: ClientManager(config, client_type, default_engine=engine).get_client()
        for client_type, engine in DEFAULT_ENGINES.items()
    }

    try:
        # embedding and vector store are required, there is nothing to index into without them
        for client_type in ("embed", "rag"):
            client = clients[client_type]
            try:
                await client.boot()
                await client.do_healthcheck()
            except Exception as e:
                logger.error(f"Error booting {client_type.upper()} client {client.get_engine_name()}: {e}. Aborting.")
                return 1
        await clients["llm"].boot()
        await clients["crawl"].boot()

        ingest_service = IngestService(
            helper_config=config,
            llm_client=clients["llm"],
            embed_client=clients["embed"],
            rag_client=clients["rag"],
            crawl_client=clients["crawl"],
        )
        await ingest_service.indexer.do_ensure_collection()

        if args.text is not None:
            result = await ingest_service.do_ingest_text(args.text)
        elif args.url is not None:
            result = await ingest_service.do_ingest_url(args.url)
        else:
            if not args.pdf.is_file():
                logger.error(f"PDF file not found: {args.pdf}")
                return 1
            result = await ingest_service.do_ingest_pdf(args.pdf.read_bytes(), args.pdf.name, PDF_CONTENT_TYPE)

        logger.info("Ingestion finished: %s", result.model_dump_json(by_alias=True), color="green")
        return 0
    except AppError as e:
        logger.error(f"Ingestion failed: {e.message} ({e.detail})")
        return 1
    finally:
        for client in clients.values():
            await client.close()


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
