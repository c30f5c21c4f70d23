"""
Helpers shared by the httpx-based adapters.
"""

import httpx


def response_json(response: httpx.Response) -> dict:
    """Decode a JSON object body, tolerating empty and non-JSON error bodies."""
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {"message": response.text}
    return data if isinstance(data, dict) else {"data": data}
