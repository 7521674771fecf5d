import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

import boto3
from dotenv import load_dotenv

from common.serialization import serialize_dataclass

load_dotenv()

logger = logging.getLogger(__name__)


def get_s3_client():
    """Create S3 client."""
    return boto3.client("s3")


def build_s3_key(prefix: str, run_label: str, timestamp: datetime) -> str:
    """Build an S3 key partitioned by date and run."""
    return (
        f"{prefix}/"
        f"year={timestamp.year:04d}/"
        f"month={timestamp.month:02d}/"
        f"day={timestamp.day:02d}/"
        f"{prefix}_{run_label}_{timestamp.strftime('%Y_%m_%d_%H_%M')}.jsonl"
    )


def upload_jsonl_records_to_s3(records: list[Any], prefix: str, run_label: str = "local") -> str:
    """
    Upload a list of dataclass records to S3 as JSONL.

    Args:
        records: List of dataclass objects to upload
        prefix: S3 prefix (e.g., "deduplicated_headlines", "compiled_items")
        run_label: Run id (or "local" for file input) included in the key

    Returns:
        The S3 key written.
    """
    bucket = os.environ["S3_BUCKET_NAME"]
    key = build_s3_key(prefix, run_label, datetime.now(timezone.utc))

    body = "\n".join(
        json.dumps(serialize_dataclass(record), default=str, ensure_ascii=False)
        for record in records
    ) + "\n"

    get_s3_client().put_object(
        Bucket=bucket,
        Key=key,
        Body=body.encode("utf-8"),
        ContentType="application/jsonl",
    )

    logger.info("Uploaded %d records to s3://%s/%s", len(records), bucket, key)
    return key
