'''
**netreq**
---------

A minimal synchronous HTTP request helper. One call sends one request with
a method, URL, params and headers, optionally with cookies, and retries
immediately on any error.

    >>> import netreq
    >>> body = netreq.request('GET', 'https://httpbin.org/get', 'a=1')
'''
from netreq.http import (
    BodyReadError,
    ClientConfig,
    HeaderDecodeError,
    HeaderMapping,
    HttpResult,
    InvalidMethodError,
    NetreqError,
    RawJson,
    RequestMethod,
    TransportError,
    request,
    request_with_cookie,
    synchronous_request,
)

__all__ = [
    'BodyReadError',
    'ClientConfig',
    'HeaderDecodeError',
    'HeaderMapping',
    'HttpResult',
    'InvalidMethodError',
    'NetreqError',
    'RawJson',
    'RequestMethod',
    'TransportError',
    'request',
    'request_with_cookie',
    'synchronous_request',
]
