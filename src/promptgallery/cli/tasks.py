"""
Maintenance tasks run with invoke.

    promptgallery-tasks backfill-categories --category GOAT
    promptgallery-tasks batch-ingest --directory ./images --email admin@example.com --password ...
"""

import os
import sys

import structlog
from dotenv import load_dotenv
from invoke import Collection, Context, Program, task

from promptgallery import __version__
from promptgallery.config import get_config
from promptgallery.error_handling import GalleryError
from promptgallery.logging_config import configure_structured_logging
from promptgallery.models.card import DEFAULT_CATEGORY
from promptgallery.services.context import create_app_context

logger = structlog.get_logger()

SUPPORTED_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp", ".heic", ".heif"]


def load_environment(env_file: str) -> None:
    """Load ``env_file`` into the environment when it exists."""
    if os.path.exists(env_file):
        logger.info("loading_environment_file", env_file=env_file)
        load_dotenv(dotenv_path=env_file)
    else:
        logger.warning("environment_file_not_found", env_file=env_file)
    get_config().clear_cache()
    configure_structured_logging()


def find_image_files(directory: str, recursive: bool = False) -> list[str]:
    """List supported image files in ``directory``, sorted by path."""
    image_files = []
    if recursive:
        for root, _, files in os.walk(directory):
            for name in files:
                if os.path.splitext(name)[1].lower() in SUPPORTED_EXTENSIONS:
                    image_files.append(os.path.join(root, name))
    else:
        for name in os.listdir(directory):
            path = os.path.join(directory, name)
            if os.path.isfile(path) and os.path.splitext(name)[1].lower() in SUPPORTED_EXTENSIONS:
                image_files.append(path)
    return sorted(image_files)


def read_prompt(image_path: str, prompt_suffix: str = ".txt") -> str | None:
    """Return the prompt stored next to ``image_path`` (``<stem><suffix>``), if any."""
    prompt_path = os.path.splitext(image_path)[0] + prompt_suffix
    if not os.path.isfile(prompt_path):
        return None
    with open(prompt_path, encoding="utf-8") as f:
        prompt = f.read().strip()
    return prompt or None


@task
def backfill_categories(c: Context, category: str = DEFAULT_CATEGORY, env_file: str = ".env", dry_run: bool = False):
    """
    Set the category of every card that has none.

    Args:
        c (Context): Invoke context.
        category (str): Category to assign. Default is the first known category.
        env_file (str): Path to the environment file. Default is '.env'.
        dry_run (bool): If True, only counts the cards that would be updated.
    """
    load_environment(env_file)

    with create_app_context() as app_context:
        missing = [card for card in app_context.catalog if not card.category]
        logger.info("backfill_started", category=category, missing=len(missing), dry_run=dry_run)

        if dry_run:
            print(f"{len(missing)} card(s) would be set to '{category}'.")
            return len(missing)

        updated = app_context.metadata.backfill_category(category)

    logger.info("backfill_completed", category=category, updated=updated)
    print(f"Updated {updated} card(s) to '{category}'.")
    return updated


@task
def batch_ingest(
    c: Context,
    directory: str,
    email: str,
    password: str,
    category: str = DEFAULT_CATEGORY,
    prompt_suffix: str = ".txt",
    env_file: str = ".env",
    recursive: bool = False,
    dry_run: bool = False,
):
    """
    Ingest every image in a directory whose prompt sits in a sibling text file.

    Args:
        c (Context): Invoke context.
        directory (str): Path to the directory containing images.
        email (str): Admin email used to sign in.
        password (str): Admin password.
        category (str): Category for all ingested cards.
        prompt_suffix (str): Extension of the prompt file next to each image. Default is '.txt'.
        env_file (str): Path to the environment file. Default is '.env'.
        recursive (bool): Search for images in subdirectories. Default is False.
        dry_run (bool): If True, lists files to be processed without uploading.
    """
    load_environment(env_file)

    if not os.path.isdir(directory):
        logger.error("directory_not_found", directory=directory)
        return None

    candidates = [(path, read_prompt(path, prompt_suffix)) for path in find_image_files(directory, recursive)]
    skipped = [path for path, prompt in candidates if prompt is None]
    work = [(path, prompt) for path, prompt in candidates if prompt is not None]

    for path in skipped:
        logger.warning("prompt_file_missing", image=path, prompt_suffix=prompt_suffix)

    logger.info("batch_ingest_started", directory=directory, images=len(work), skipped=len(skipped), dry_run=dry_run)

    if dry_run:
        print("\n--- Dry Run Mode: Files to be ingested ---")
        for path, _ in work:
            print(f"- {path}")
        print("--- End of Dry Run ---")
        return {"successful": 0, "failed": 0, "skipped": len(skipped)}

    successful = 0
    failed = 0
    with create_app_context() as app_context:
        app_context.sign_in(email, password)
        try:
            for path, prompt in work:
                try:
                    with open(path, "rb") as f:
                        card = app_context.ingest(f.read(), prompt, category)
                    logger.info("image_ingested", image=path, card_id=card.id)
                    successful += 1
                except (GalleryError, OSError) as e:
                    logger.error("image_ingest_failed", image=path, error=str(e))
                    failed += 1
        finally:
            app_context.sign_out()

    logger.info("batch_ingest_finished", successful=successful, failed=failed, skipped=len(skipped))
    print(f"\nBatch ingest complete. Successful: {successful}, Failed: {failed}, Skipped: {len(skipped)}")
    return {"successful": successful, "failed": failed, "skipped": len(skipped)}


program = Program(namespace=Collection.from_module(sys.modules[__name__]), version=__version__)
