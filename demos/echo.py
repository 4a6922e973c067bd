import logging
import sys

import netreq


def main() -> int:
    if len(sys.argv) < 3:
        print('usage: echo.py METHOD URL [PARAMS] [HEADER_JSON]')
        return 2

    method, url = sys.argv[1].strip().upper(), sys.argv[2].strip()
    params = sys.argv[3] if len(sys.argv) > 3 else ''
    header = sys.argv[4] if len(sys.argv) > 4 else ''

    logging.basicConfig(level=logging.DEBUG)

    exit_code = 1
    try:
        result = netreq.request_with_cookie(method, url, params, header)
        print(result.body)
        for cookie in result.cookies:
            print(f'cookie: {cookie.name}={cookie.value}')
        exit_code = 0
    except netreq.InvalidMethodError as exc:
        print(exc)
    except netreq.HeaderDecodeError as exc:
        print(f'Bad header JSON: {exc}')
    except netreq.NetreqError as exc:
        print(f'Request failed, check your network connection {exc}')

    return exit_code


if __name__ == '__main__':
    sys.exit(main())
