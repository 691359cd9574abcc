"""
Example: upload a file into a folder of a bucket and print a download link.

Credentials come from the environment (or a .env file):
    UTHO_TOKEN=...                          # bearer token, or
    UTHO_ACCESS_KEY=... UTHO_SECRET_KEY=...  # access key pair

Usage:
    python examples/single_file_upload.py innoida my-bucket documents
"""

import asyncio
import sys
from datetime import datetime, timezone

import structlog
from dotenv import load_dotenv

from utho_storage import DurationPresets, UthoError, configure_logging, create_client
from utho_storage.utils.env_config import get_settings

logger = structlog.get_logger(__name__)


async def upload_to_folder(dcslug: str, bucket: str, folder: str) -> int:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    client = create_client(settings)
    if client is None:
        logger.error("No credentials configured", hint="set UTHO_TOKEN or UTHO_ACCESS_KEY/UTHO_SECRET_KEY")
        return 1

    async with client:
        if not await client.bucket_exists(dcslug, bucket):
            logger.error("Bucket not found", dcslug=dcslug, bucket=bucket)
            return 1

        content = f"File 1 - Created at {datetime.now(timezone.utc).isoformat()}"
        try:
            # "folder/file1.txt" lands in folder/, never folder/file1.txt/file1.txt
            await client.put_object(dcslug, bucket, "file1.txt", content, path=folder)
            url = await client.get_object(dcslug, bucket, f"{folder}/file1.txt", DurationPresets.DAY_1)
        except UthoError as e:
            logger.error("Upload failed", error=e.to_dict())
            return 1

    logger.info("Upload complete", location=f"{bucket}/{folder}/file1.txt", url=url)
    return 0


if __name__ == "__main__":
    load_dotenv()
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(upload_to_folder(*sys.argv[1:4])))
