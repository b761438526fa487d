"""
Core read operations for Cascade Server REST API

Destination lookups during migration only ever read: an asset by id, or an
asset by site and path.
"""

import time
import requests
from typing import Dict, Any, Union

from config import REQUEST_TIMEOUT
from logging_config import logger


def _post(url: str, auth: dict) -> requests.Response:
    started = time.monotonic()
    response = requests.post(url, params=auth, timeout=REQUEST_TIMEOUT)
    logger.log_api_call(
        "POST", url, response.status_code, time.monotonic() - started
    )
    return response


def read_single_asset(
    cms_path: str, auth: dict, asset_type: str, asset_id: str
) -> Union[Dict[str, Any], bool]:
    """Use Cascade Server's REST API read endpoint to read a single asset

    Parameters:
        :cms_path: URI to Cascade Server instance
        :auth: dict object with Cascade Server credentials
        :asset_type: string indicating asset type ("page", "file", "block", etc.)
        :asset_id: string in r.json()['asset'][asset_type]['id']
    """
    if not asset_id:
        logger.logger.warning(f"Refusing to read {asset_type} without an id")
        return False

    read_path = f"{cms_path}/api/v1/read/{asset_type}/{asset_id}"
    try:
        p = _post(read_path, auth)
    except requests.RequestException as e:
        logger.log_error(e, {"asset_type": asset_type, "asset_id": asset_id})
        return False

    if p.status_code != 200:
        return False

    payload = p.json()
    # Cascade answers 200 with success=false for missing assets
    if payload.get("success") in (False, "false"):
        logger.logger.debug(
            f"Read {asset_type} {asset_id} failed: {payload.get('message')}"
        )
        return False
    return payload


def read_asset_by_path(
    cms_path: str, auth: dict, asset_type: str, site_name: str, asset_path: str
) -> Union[Dict[str, Any], bool]:
    """Use Cascade Server's REST API read endpoint to read a single asset by path

    Parameters:
        :cms_path: URI to Cascade Server instance
        :auth: dict object with Cascade Server credentials
        :asset_type: string indicating asset type
        :site_name: string site name
        :asset_path: string path to the asset, with or without leading slash
    """
    if not asset_path.startswith("/"):
        asset_path = "/" + asset_path

    read_path = f"{cms_path}/api/v1/read/{asset_type}/{site_name}{asset_path}"
    try:
        p = _post(read_path, auth)
    except requests.RequestException as e:
        logger.log_error(e, {"asset_type": asset_type, "asset_path": asset_path})
        return False

    if p.status_code != 200:
        return False

    payload = p.json()
    if payload.get("success") in (False, "false"):
        return False
    return payload
