"""Request and response descriptors for the HTTP client."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from ..common.network import DataType, Method


@dataclass
class RequestParams:
    """A single request to a shop's domain."""
    method: Method
    path: str
    type: Optional[DataType] = None
    data: Optional[Union[Dict[str, Any], str]] = None
    query: Optional[Dict[str, Union[str, int]]] = None
    extra_headers: Dict[str, str] = field(default_factory=dict)
    tries: int = 1


@dataclass
class RequestReturn:
    """Parsed JSON body plus the response headers."""
    body: Any
    headers: Mapping[str, str]
