'''
**netreq.http**
---------

The request helper itself: a single-shot dispatcher (`synchronous_request`),
its retried forms (`request`, `request_with_cookie`), the header spec
variants, the retry policy and the error taxonomy.
'''
from netreq.http._client import (
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    ClientConfig,
    HttpResult,
    RequestMethod,
    build_request,
    no_keepalive_transport,
    request,
    request_with_cookie,
    response_cookies,
    synchronous_request,
)
from netreq.http._errors import (
    BodyReadError,
    HeaderDecodeError,
    InvalidMethodError,
    NetreqError,
    TransportError,
)
from netreq.http._headers import HeaderMapping, HeaderSpec, RawJson, apply_headers
from netreq.http._retry import retry_policy

__all__ = [
    'DEFAULT_RETRIES',
    'DEFAULT_TIMEOUT',
    'ClientConfig',
    'HttpResult',
    'RequestMethod',
    'build_request',
    'no_keepalive_transport',
    'request',
    'request_with_cookie',
    'response_cookies',
    'synchronous_request',
    'BodyReadError',
    'HeaderDecodeError',
    'InvalidMethodError',
    'NetreqError',
    'TransportError',
    'HeaderMapping',
    'HeaderSpec',
    'RawJson',
    'apply_headers',
    'retry_policy',
]
