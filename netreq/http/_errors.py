'''
error taxonomy for netreq requests

Every failure raised out of a request derives from `NetreqError`.
The `retryable` flag marks whether another attempt with the same
inputs can possibly succeed.
'''


class NetreqError(Exception):
    '''
    Base class for every error raised by a netreq request.

    Parent: Exception
    '''
    retryable: bool = True


class InvalidMethodError(NetreqError, ValueError):
    '''
    Raised when the request method is not one of the supported methods.

    Parent: NetreqError, ValueError
    '''
    retryable = False

    def __init__(self, method: object) -> None:
        self.method = method
        super().__init__(f'{method} is not a valid request method')


class HeaderDecodeError(NetreqError, ValueError):
    '''
    Raised when a header spec is malformed JSON or an unsupported type.

    Parent: NetreqError, ValueError
    '''
    retryable = False


class TransportError(NetreqError):
    '''
    Raised when the request could not be built or sent
    (DNS, connection, TLS, timeouts, protocol errors).

    Parent: NetreqError
    '''


class BodyReadError(NetreqError):
    '''
    Raised when the response body could not be fully read.

    Parent: NetreqError
    '''
