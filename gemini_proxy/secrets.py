from __future__ import annotations

import logging
import os
from typing import Optional

try:
    from google.cloud import secretmanager
except ImportError:  # pragma: no cover
    secretmanager = None

logger = logging.getLogger("gemini-proxy.secrets")


def get_secret_from_manager(secret_name: str, project_id: Optional[str] = None) -> str:
    """
    Fetch the latest version of a secret from Google Cloud Secret Manager.

    Args:
        secret_name: Name of the secret (e.g., "gemini-api-key")
        project_id: GCP project ID. If None, uses GCP_PROJECT or GOOGLE_CLOUD_PROJECT.

    Returns:
        The secret value as a string, surrounding whitespace removed.

    Raises:
        ImportError: If google-cloud-secret-manager is not installed.
        ValueError: If no project ID can be determined.
    """
    if secretmanager is None:
        logger.warning(
            "google-cloud-secret-manager not installed. "
            "Install it with: pip install 'gemini-proxy[gcp]'"
        )
        raise ImportError("google-cloud-secret-manager is required when USE_SECRET_MANAGER is enabled")

    if project_id is None:
        project_id = os.environ.get("GCP_PROJECT") or os.environ.get("GOOGLE_CLOUD_PROJECT")
        if not project_id:
            raise ValueError(
                "Project ID not specified. Set GEMINI_PROXY_GCP_PROJECT_ID, GCP_PROJECT "
                "or GOOGLE_CLOUD_PROJECT environment variable."
            )

    name = f"projects/{project_id}/secrets/{secret_name}/versions/latest"

    logger.info(f"Fetching secret from Secret Manager: {secret_name}")
    try:
        client = secretmanager.SecretManagerServiceClient()
        response = client.access_secret_version(request={"name": name})
    except Exception as e:
        logger.error(f"Failed to retrieve secret {secret_name}: {e}")
        raise

    logger.info(f"Successfully retrieved secret: {secret_name}")
    return response.payload.data.decode("UTF-8").strip()


def should_use_secret_manager() -> bool:
    """True if USE_SECRET_MANAGER is set to "true", "1" or "yes" (case-insensitive)."""
    return os.environ.get("USE_SECRET_MANAGER", "").lower() in ("true", "1", "yes")
