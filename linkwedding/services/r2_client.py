# linkwedding/services/r2_client.py
import logging
import os
import time
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from slugify import slugify

from linkwedding.config import settings

logger = logging.getLogger(__name__)

PAYMENT_PROOF_FOLDER = "payment-proofs"


class StorageError(Exception):
    pass


@lru_cache(maxsize=1)
def get_s3_client():
    return boto3.client(
        "s3",
        endpoint_url=f"https://{settings.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=settings.R2_ACCESS_KEY_ID,
        aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
        region_name="auto"
    )


def public_url(key: str) -> str:
    return f"{settings.R2_PUBLIC_BASE.rstrip('/')}/{key}"


def upload_to_r2(file, key: str, content_type: str):
    try:
        get_s3_client().upload_fileobj(
            file,
            settings.R2_BUCKET_NAME,
            key,
            ExtraArgs={"ContentType": content_type}
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError(str(e)) from e
    return key


def delete_from_r2(key: str):
    try:
        get_s3_client().delete_object(Bucket=settings.R2_BUCKET_NAME, Key=key)
    except (BotoCoreError, ClientError):
        logger.warning("Could not delete %s from R2", key)


def upload_payment_proof(file: UploadFile, order_id) -> str:
    """Upload a payment proof image and return its public URL."""
    ext = slugify(os.path.splitext(file.filename or "")[1]) or "png"
    timestamp = int(time.time() * 1000)
    key = f"{PAYMENT_PROOF_FOLDER}/payment-proof-{order_id}-{timestamp}.{ext}"

    upload_to_r2(file.file, key, file.content_type or "application/octet-stream")
    logger.info("Uploaded payment proof %s", key)
    return public_url(key)


def key_from_public_url(url: str):
    base = settings.R2_PUBLIC_BASE.rstrip("/") + "/"
    if not url or not url.startswith(base):
        return None
    return url[len(base):]
