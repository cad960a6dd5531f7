"""
Company logo storage in Azure Blob Storage.

The client is created on first use so the app starts (and tests run)
without storage credentials.
"""
import logging
import os
import uuid
from typing import BinaryIO, Optional

from azure.storage.blob import BlobServiceClient, ContentSettings

import config

logger = logging.getLogger(__name__)

_blob_service: Optional[BlobServiceClient] = None


def get_blob_service() -> BlobServiceClient:
     global _blob_service
     if _blob_service is None:
          if not config.AZURE_STORAGE_ACCOUNT or not config.AZURE_STORAGE_KEY:
               raise RuntimeError("AZURE_STORAGE_ACCOUNT / AZURE_STORAGE_KEY are not set")
          _blob_service = BlobServiceClient.from_connection_string(
               f"DefaultEndpointsProtocol=https;"
               f"AccountName={config.AZURE_STORAGE_ACCOUNT};"
               f"AccountKey={config.AZURE_STORAGE_KEY};"
               f"EndpointSuffix=core.windows.net"
          )
     return _blob_service


def upload_logo(data: BinaryIO, filename: str, user_id: int, content_type: str = "image/png") -> str:
     """
     Upload a logo and return its public URL.

     Blobs are stored as {user_id}/{uuid}{ext} in AZURE_LOGO_CONTAINER.
     """
     container = config.AZURE_LOGO_CONTAINER
     ext = os.path.splitext(filename or "")[1] or ".png"
     blob_name = f"{user_id}/{uuid.uuid4()}{ext}"
     blob_client = get_blob_service().get_blob_client(container=container, blob=blob_name)
     blob_client.upload_blob(data, overwrite=True, content_settings=ContentSettings(content_type=content_type))
     logger.info("Uploaded logo %s for user %s", blob_name, user_id)
     return f"https://{config.AZURE_STORAGE_ACCOUNT}.blob.core.windows.net/{container}/{blob_name}"


def delete_from_blob(blob_url: str) -> None:
     """
     Deletes a file from Azure Blob Storage using its full URL
     """
     # https://{account}.blob.core.windows.net/{container}/{user_id}/{file}
     path = blob_url.split(".blob.core.windows.net/", 1)[-1]
     container, _, blob_name = path.partition("/")
     blob_client = get_blob_service().get_blob_client(container=container, blob=blob_name)
     blob_client.delete_blob()


def is_stored_logo(url: Optional[str]) -> bool:
     """True for URLs that upload_logo produced; external logo URLs are never deleted."""
     if not url or not config.AZURE_STORAGE_ACCOUNT:
          return False
     prefix = f"https://{config.AZURE_STORAGE_ACCOUNT}.blob.core.windows.net/{config.AZURE_LOGO_CONTAINER}/"
     return url.startswith(prefix)
