'''
header specs for netreq requests

A header spec is either raw JSON text (`RawJson`) or an already decoded
mapping (`HeaderMapping`). Plain `str` and `Mapping` values are coerced
into one of the two at the boundary, anything else is rejected.
'''
from __future__ import annotations

import dataclasses as dc
import json
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, TypeAlias

import httpx

from netreq.http._errors import HeaderDecodeError

logger = logging.getLogger(__name__)


SKIPPED_HEADERS = frozenset({'content-length'})


@dc.dataclass(frozen=True, slots=True)
class RawJson:
    '''
    A header spec serialized as a flat JSON object,
    e.g. `{"Accept": "application/json"}`
    '''
    text: str

    def decode(self) -> Mapping[str, str]:
        if not self.text:
            return MappingProxyType({})
        try:
            decoded = json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise HeaderDecodeError(f'JsonToMap err: {exc}') from exc

        if decoded is None:
            return MappingProxyType({})
        if not isinstance(decoded, dict):
            raise HeaderDecodeError(
                f'JsonToMap err: expected a JSON object, got {type(decoded).__name__}'
            )
        return HeaderMapping.from_mapping(decoded, source='JsonToMap err').values


@dc.dataclass(frozen=True, slots=True)
class HeaderMapping:
    '''
    A header spec given as a native `str -> str` mapping.
    '''
    values: Mapping[str, str]

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[Any, Any],
        source: str = 'header is not string or map',
    ) -> HeaderMapping:
        '''
        Validate that every key and value is a string. JSON `null`
        values decode to an empty string.

        Parameters
        ----------
        mapping : Mapping[Any, Any]
        source : str, optional
            prefix for the error message

        Returns
        -------
        HeaderMapping

        Raises
        ------
        HeaderDecodeError
            If a key or value is not a string.
        '''
        values: dict[str, str] = {}
        for key, value in mapping.items():
            if value is None:
                value = ''
            if not isinstance(key, str) or not isinstance(value, str):
                raise HeaderDecodeError(
                    f'{source}: {key!r} -> {value!r} is not a string pair'
                )
            values[key] = value
        return cls(MappingProxyType(values))

    def decode(self) -> Mapping[str, str]:
        return self.values


HeaderSpec: TypeAlias = RawJson | HeaderMapping


def to_header_spec(header: object) -> HeaderSpec:
    '''
    Coerce a caller supplied header value into a `HeaderSpec`.

    Parameters
    ----------
    header : object
        `str`, `Mapping[str, str]`, `RawJson` or `HeaderMapping`

    Returns
    -------
    HeaderSpec

    Raises
    ------
    HeaderDecodeError
        If the value is not a string or a string mapping.
    '''
    if isinstance(header, (RawJson, HeaderMapping)):
        return header
    if isinstance(header, str):
        return RawJson(header)
    if isinstance(header, Mapping):
        return HeaderMapping.from_mapping(header)
    raise HeaderDecodeError('header is not string or map')


def apply_headers(request: httpx.Request, header: object) -> None:
    '''
    Apply a header spec onto an outgoing request, overwriting existing
    values. Empty keys and `Content-Length` are skipped; keys and values
    are stripped of surrounding whitespace.

    Parameters
    ----------
    request : httpx.Request
    header : object
        anything accepted by `to_header_spec`

    Raises
    ------
    HeaderDecodeError
    '''
    values = to_header_spec(header).decode()

    for key, value in values.items():
        name = key.strip()
        if not name:
            continue
        if name.lower() in SKIPPED_HEADERS:
            logger.debug(f'Skipping header {name!r}, computed by the transport')
            continue
        request.headers[name] = value.strip()
