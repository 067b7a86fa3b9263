"""
API Gateway proxy response helpers
"""
import json
from typing import Any, Dict, Optional


def get_query_param(event: Dict[str, Any], name: str) -> Optional[str]:
    """Read a query string parameter from a proxy event"""
    params = event.get("queryStringParameters") or {}
    return params.get(name)


def json_response(status_code: int, body: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", **(headers or {})},
        "body": json.dumps(body),
    }


def redirect_response(location: str, headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    return {
        "statusCode": 302,
        "headers": {"Location": location, **(headers or {})},
        "body": "",
    }
