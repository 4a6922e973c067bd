import dataclasses as dc
import enum
import logging
import time
import urllib.request
from collections.abc import Iterable, Mapping
from email.message import Message
from http.cookiejar import Cookie, CookieJar
from typing import NamedTuple, TypeAlias

import httpcore
import httpx

from netreq.http._errors import (
    BodyReadError,
    InvalidMethodError,
    TransportError,
)
from netreq.http._headers import apply_headers
from netreq.http._retry import retry_policy


logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT = 60.0
DEFAULT_RETRIES = 3


CookieInput: TypeAlias = Mapping[str, str] | Iterable[Cookie] | None


class RequestMethod(enum.StrEnum):
    GET = 'GET'
    POST = 'POST'
    PUT = 'PUT'
    DELETE = 'DELETE'
    HEAD = 'HEAD'
    OPTIONS = 'OPTIONS'
    TRACE = 'TRACE'
    CONNECT = 'CONNECT'

    @classmethod
    def parse(cls, method: object) -> 'RequestMethod':
        '''
        Resolve a caller supplied method, case sensitive.

        Raises
        ------
        InvalidMethodError
            If the value is not one of the eight supported methods.
        '''
        try:
            return cls(method)
        except ValueError as exc:
            raise InvalidMethodError(method) from exc

    @property
    def sends_query(self) -> bool:
        '''GET and HEAD carry params in the query string, every other method in the body'''
        return self in (RequestMethod.GET, RequestMethod.HEAD)


class HttpResult(NamedTuple):
    body: str
    cookies: list[Cookie]


@dc.dataclass(slots=True)
class ClientConfig:
    '''
    Configuration options for a netreq request.
    The defaults reproduce the plain helper behaviour: one minute
    per attempt and three retries after the first attempt.
    '''
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    follow_redirects: bool = True
    trust_env: bool = True
    retry_permanent_errors: bool = True

    @property
    def httpx_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.timeout)

    def retry(self) -> retry_policy:
        return retry_policy(
            retries=self.retries,
            retry_permanent_errors=self.retry_permanent_errors,
        )


def _no_keepalive_limits() -> httpx.Limits:
    return httpx.Limits(
        max_connections=1,
        max_keepalive_connections=0,
        keepalive_expiry=0,
    )


_TRANSPORT_ERRORS = (
    httpx.TransportError,
    httpx.InvalidURL,
    httpx.TooManyRedirects,
    httpcore.ConnectError,
)


def no_keepalive_transport(*, trust_env: bool = True) -> httpx.HTTPTransport:
    '''
    An HTTP/1.1 transport with no keep-alive pool and no
    transport level retries, attempts are counted by `retry_policy`.

    Returns
    -------
    httpx.HTTPTransport
    '''
    return httpx.HTTPTransport(
        limits=_no_keepalive_limits(),
        trust_env=trust_env,
        retries=0,
    )


def force_connection_headers(request: httpx.Request) -> None:
    # raw body bytes, and a fresh connection per request
    request.headers['Accept-Encoding'] = ''
    request.headers['Connection'] = 'close'


def build_url(method: RequestMethod, url: str, params: str) -> str:
    '''
    Build the dispatched URL. Query methods get `params` appended
    with `&` when the URL already has a query string, `?` otherwise.
    '''
    if not method.sends_query or not params:
        return url
    separator = '&' if '?' in url else '?'
    return f'{url}{separator}{params}'


def cookie_header(cookies: CookieInput) -> str:
    '''
    Format cookies as a `Cookie` request header value.

    Parameters
    ----------
    cookies : CookieInput
        a `name -> value` mapping (including `httpx.Cookies`)
        or an iterable of `http.cookiejar.Cookie`

    Returns
    -------
    str
        `name=value` pairs joined by `; `, empty when there are none
    '''
    if not cookies:
        return ''
    if isinstance(cookies, Mapping):
        pairs = cookies.items()
    else:
        pairs = ((cookie.name, cookie.value or '') for cookie in cookies)
    return '; '.join(f'{name}={value}' for name, value in pairs)


def build_request(
    method: object,
    url: str,
    params: str = '',
    header: object = '',
    cookies: CookieInput = None,
) -> httpx.Request:
    '''
    Build a single outgoing request without sending it.

    Raises
    ------
    InvalidMethodError
    HeaderDecodeError
    TransportError
        If the URL can not be parsed.
    '''
    request_method = RequestMethod.parse(method)
    target = build_url(request_method, url, params)

    try:
        if request_method.sends_query:
            request = httpx.Request(str(request_method), target)
        else:
            request = httpx.Request(
                str(request_method),
                target,
                content=params.encode('utf-8'),
            )
    except httpx.InvalidURL as exc:
        raise TransportError(f'invalid url {target!r}: {exc}') from exc

    apply_headers(request, header)

    if value := cookie_header(cookies):
        existing = request.headers.get('Cookie')
        request.headers['Cookie'] = f'{existing}; {value}' if existing else value

    force_connection_headers(request)
    return request


def read_body(response: httpx.Response, deadline: float) -> str:
    '''
    Drain the response body, bounded by a wall clock deadline
    (a `time.monotonic()` value).

    Raises
    ------
    BodyReadError
    '''
    chunks: list[bytes] = []
    try:
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise BodyReadError(
                    f'timeout exceeded while reading body from {response.url}'
                )
    except httpx.HTTPError as exc:
        raise BodyReadError(f'error reading body from {response.url}: {exc}') from exc

    if time.monotonic() > deadline:
        raise BodyReadError(f'timeout exceeded while reading body from {response.url}')

    return b''.join(chunks).decode(response.encoding or 'utf-8', errors='replace')


class _SetCookieResponse:
    '''the `info()` shape `CookieJar.make_cookies` reads Set-Cookie headers from'''

    def __init__(self, response: httpx.Response) -> None:
        self._headers = Message()
        for value in response.headers.get_list('Set-Cookie'):
            self._headers['Set-Cookie'] = value

    def info(self) -> Message:
        return self._headers


def response_cookies(response: httpx.Response) -> list[Cookie]:
    '''
    Every cookie the response sets, in header order. Unlike
    `httpx.Response.cookies` no domain or path policy is applied,
    so cookies for other hosts are returned as well.

    Parameters
    ----------
    response : httpx.Response

    Returns
    -------
    list[Cookie]
    '''
    return CookieJar().make_cookies(
        _SetCookieResponse(response),
        urllib.request.Request(str(response.url)),
    )


def synchronous_request(
    method: object,
    url: str,
    params: str = '',
    header: object = '',
    cookies: CookieInput = None,
    *,
    config: ClientConfig | None = None,
) -> HttpResult:
    '''
    Send one request, without retries, and read the full response.

    Parameters
    ----------
    method : RequestMethod | str
    url : str
    params : str, optional
        query string for GET/HEAD, the literal body otherwise
    header : str | Mapping[str, str] | HeaderSpec, optional
        JSON object text or a `str -> str` mapping, by default no headers
    cookies : CookieInput, optional
    config : ClientConfig | None, optional

    Returns
    -------
    HttpResult
        the body text and the cookies set by the response

    Raises
    ------
    InvalidMethodError
    HeaderDecodeError
    TransportError
    BodyReadError
    '''
    config = config or ClientConfig()
    request = build_request(method, url, params, header, cookies)

    deadline = time.monotonic() + config.timeout
    logger.debug(f'Sending request: {request.method} {request.url}')

    with httpx.Client(
        transport=no_keepalive_transport(trust_env=config.trust_env),
        timeout=config.httpx_timeout,
        follow_redirects=config.follow_redirects,
        trust_env=config.trust_env,
    ) as client:
        try:
            response = client.send(request, stream=True)
        except _TRANSPORT_ERRORS as exc:
            raise TransportError(
                f'{request.method} {request.url} failed: {exc}'
            ) from exc

        try:
            logger.debug(f'Received {response.status_code} from {response.url}')
            if time.monotonic() > deadline:
                raise TransportError(
                    f'{request.method} {request.url} failed: '
                    f'timeout of {config.timeout}s exceeded awaiting headers'
                )
            body = read_body(response, deadline)
        finally:
            response.close()

        return HttpResult(body, response_cookies(response))


def request_with_cookie(
    method: object,
    url: str,
    params: str = '',
    header: object = '',
    cookies: CookieInput = None,
    *,
    config: ClientConfig | None = None,
) -> HttpResult:
    '''
    `synchronous_request` retried `config.retries` times (3 by default)
    with no delay between attempts. The last error is raised unchanged
    once every attempt has failed.
    '''
    config = config or ClientConfig()
    return config.retry().call_with_retries(
        synchronous_request,
        method,
        url,
        params,
        header,
        cookies,
        config=config,
    )


def request(
    method: object,
    url: str,
    params: str = '',
    header: object = '',
    *,
    config: ClientConfig | None = None,
) -> str:
    '''
    Retried request without cookies, returning only the body text.
    '''
    return request_with_cookie(method, url, params, header, None, config=config).body
