"""
Batch import of a local directory into the gallery.

Run as ``photogallery-admin batch-upload --directory ./photos``.
"""

import mimetypes
import os

import structlog
from invoke import Collection, Context, Program, task

from .. import __version__
from ..config import load_env_file
from ..error_handling import GalleryError
from ..logging_config import configure_structured_logging
from ..services.photos import get_photo_repository

logger = structlog.get_logger()

SUPPORTED_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".webp"]


def find_image_files(directory: str, recursive: bool = False) -> list[str]:
    """Image files under ``directory`` in a stable order."""
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


def guess_mime_type(filename: str) -> str:
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or "application/octet-stream"


@task
def batch_upload(c: Context, directory: str, env_file: str = ".env", recursive: bool = False, dry_run: bool = False):
    """
    Upload images from a local directory in batch.

    Args:
        c (Context): Invoke context.
        directory (str): Path to the directory containing images.
        env_file (str): Path to the environment file. Default is '.env'.
        recursive (bool): Search for images in subdirectories. Default is False.
        dry_run (bool): If True, lists files to be processed without uploading. Default is False.
    """
    if not load_env_file(env_file):
        logger.warning("env_file_not_found", env_file=env_file)

    configure_structured_logging()

    if not os.path.isdir(directory):
        logger.error("directory_not_found", directory=directory)
        return

    logger.info("batch_upload_started", directory=directory, recursive=recursive, dry_run=dry_run)

    image_files = find_image_files(directory, recursive=recursive)
    if not image_files:
        logger.warning("no_image_files_found", directory=directory)
        return

    logger.info("image_files_found", count=len(image_files))

    if dry_run:
        print("\n--- Dry Run Mode: Files to be processed ---")
        for file_path in image_files:
            print(f"- {file_path}")
        print("--- End of Dry Run ---")
        return

    repository = get_photo_repository()
    successful_uploads = 0
    failed_uploads = 0

    for file_path in image_files:
        filename = os.path.basename(file_path)
        try:
            with open(file_path, "rb") as f:
                file_data = f.read()

            record = repository.create(
                file_data=file_data,
                mime_type=guess_mime_type(filename),
                original_name=filename,
            )
            logger.info("upload_successful", filename=filename, photo_id=record.id)
            successful_uploads += 1

        except (GalleryError, OSError) as e:
            logger.error("upload_failed", filename=filename, error=str(e))
            failed_uploads += 1

    logger.info(
        "batch_upload_finished",
        successful=successful_uploads,
        failed=failed_uploads,
        total=len(image_files),
    )
    print(f"\nBatch upload complete. Successful: {successful_uploads}, Failed: {failed_uploads}")


namespace = Collection(batch_upload)
program = Program(namespace=namespace, version=__version__, name="photogallery-admin", binary="photogallery-admin")
