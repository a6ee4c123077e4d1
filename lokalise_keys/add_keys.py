"""
Create the keys listed in a YAML file in a Lokalise project.

Usage:
    lokalise-add-keys --project "My App" keys.yaml
    lokalise-add-keys --project "My App" --dry-run keys.yaml
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence

from tqdm import tqdm

from lokalise_keys import __version__
from lokalise_keys.app_config import AppConfig, clamp_batch_size, load_app_config, read_api_token
from lokalise_keys.batching import split_into_batches
from lokalise_keys.errors import AuthError, DuplicateKeyError, LokaliseKeysError, RemoteError
from lokalise_keys.key_file_parser import KeyEntry, parse_key_file
from lokalise_keys.lokalise_client import LokaliseClient, Project
from lokalise_keys.reporter import BatchResult, format_dry_run, report_results

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lokalise-add-keys",
        description="Create localization keys from a YAML file in a Lokalise project.",
    )
    parser.add_argument("-p", "--project", required=True,
                        help="Name of the project in Lokalise")
    parser.add_argument("--dry-run", action="store_true",
                        help="Don't upload things to Lokalise, just parse the input file")
    parser.add_argument("--batch-size", type=int, default=None,
                        help="Maximum number of keys per request (default: from config, at most 500)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("input", metavar="FILE",
                        help="Input file containing the keys you want to add")
    return parser


def create_lokalise_client(api_token: str, app_config: AppConfig) -> LokaliseClient:
    return LokaliseClient(
        api_token,
        base_url=app_config.api_base_url,
        timeout=app_config.request_timeout,
        requests_per_second=app_config.requests_per_second,
    )


async def ensure_keys_are_new(client: LokaliseClient, project: Project, entries: Sequence[KeyEntry]) -> None:
    """
    Raises:
        DuplicateKeyError: If any entry's key already exists in the project.
    """
    existing = await client.list_key_names(project)
    logger.info("Project '%s' already has %d key(s).", project.name, len(existing))
    duplicates = [entry.key for entry in entries if entry.key in existing]
    if duplicates:
        raise DuplicateKeyError(duplicates)


async def upload_batches(
        client: LokaliseClient,
        project: Project,
        batches: List[List[KeyEntry]],
        platforms: Sequence[str]
) -> List[BatchResult]:
    """
    Submit batches one after another, in order.

    A failed batch is recorded and the next one is still attempted. An
    ``AuthError`` is recorded for its batch and stops the loop, since every
    later request would be rejected too; the results gathered so far are
    still returned.
    """
    results = []
    for batch_number, batch in enumerate(tqdm(batches, desc="Uploading keys", unit="batch"), start=1):
        try:
            response = await client.create_keys(project, batch, platforms)
        except AuthError as auth_exc:
            logger.critical("Batch %d/%d rejected, stopping: %s", batch_number, len(batches), auth_exc)
            results.append(BatchResult.from_error(batch_number, batch, auth_exc))
            break
        except RemoteError as remote_exc:
            logger.error("Batch %d/%d failed: %s", batch_number, len(batches), remote_exc)
            results.append(BatchResult.from_error(batch_number, batch, remote_exc))
            continue
        result = BatchResult.from_response(batch_number, batch, response)
        if result.succeeded:
            logger.info("Batch %d/%d: created %d key(s).", batch_number, len(batches), result.created_count)
        else:
            for item_error in result.item_errors:
                logger.warning("Batch %d/%d: %s", batch_number, len(batches), item_error)
        results.append(result)
    return results


async def add_keys(
        project_name: str,
        entries: List[KeyEntry],
        app_config: AppConfig,
        batch_size: int
) -> bool:
    """
    Create ``entries`` in the named project.

    Returns:
        bool: True if every batch was created without errors.
    """
    api_token = read_api_token()

    batches = split_into_batches(entries, batch_size)
    if not batches:
        logger.info("No keys to add.")
        return True

    async with create_lokalise_client(api_token, app_config) as client:
        project = await client.find_project(project_name)
        logger.info("Using project '%s' (%s), base language '%s'.",
                    project.name, project.project_id, project.base_language_iso)

        await ensure_keys_are_new(client, project, entries)

        logger.info("Uploading %d key(s) in %d batch(es) of up to %d.", len(entries), len(batches), batch_size)
        results = await upload_batches(client, project, batches, app_config.platforms)

    return report_results(results, total_batches=len(batches))


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main function to orchestrate parsing and uploading.

    Returns:
        int: Process exit status.
    """
    args = build_arg_parser().parse_args(argv)
    app_config = load_app_config()

    try:
        entries = parse_key_file(args.input)
        logger.info("Parsed %d key(s) from '%s'.", len(entries), args.input)

        if args.dry_run or app_config.dry_run:
            print(format_dry_run(entries, platforms=app_config.platforms), end="")
            return 0

        batch_size = app_config.batch_size
        if args.batch_size is not None:
            batch_size = clamp_batch_size(args.batch_size, logger)

        succeeded = await add_keys(args.project, entries, app_config, batch_size)
    except AuthError as auth_exc:
        logger.critical("%s", auth_exc)
        return 1
    except LokaliseKeysError as tool_exc:
        logger.error("%s", tool_exc)
        return 1

    return 0 if succeeded else 1


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
