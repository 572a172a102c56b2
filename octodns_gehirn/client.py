#
#
#

import json
import logging
import posixpath
from urllib.parse import urlsplit, urlunsplit

from requests import Request, Session
from requests.auth import HTTPBasicAuth

from octodns import __VERSION__ as octodns_version

from . import __version__ as package_version
from .exceptions import GehirnApiError, GehirnClientStatusError
from .zone import Zone


class GehirnClient(object):
    BASE_URL = 'https://cp.gehirn.jp/api/dns/'
    CONTENT_TYPE = 'text/json;charset=utf8'

    def __init__(self, token, secret, endpoint=None, session=None):
        self.log = logging.getLogger('GehirnClient')
        self.endpoint = endpoint or self.BASE_URL
        if session is None:
            session = Session()
            session.headers.update(
                {
                    'User-Agent': f'octodns/{octodns_version} octodns-gehirn/{package_version}'
                }
            )
        self._session = session
        self._auth = HTTPBasicAuth(token, secret)

    def build_url(self, relative_path):
        parts = urlsplit(self.endpoint)
        path = posixpath.normpath(
            posixpath.join(
                '/' + parts.path.lstrip('/'), relative_path.lstrip('/')
            )
        )
        return urlunsplit(
            (parts.scheme, parts.netloc, path, parts.query, parts.fragment)
        )

    def make_request(self, method, path, body=None):
        request = Request(
            method,
            self.build_url(path),
            data=body,
            headers={'Content-Type': self.CONTENT_TYPE},
            auth=self._auth,
        )
        # raises MissingSchema/InvalidURL for a malformed endpoint
        return self._session.prepare_request(request)

    def do_request(self, request):
        # send() skips what Session.request picks up from the environment
        settings = self._session.merge_environment_settings(
            request.url, {}, None, None, None
        )
        response = self._session.send(request, **settings)
        self.log.debug(
            'do_request: method=%s, url=%s, status=%d',
            request.method,
            request.url,
            response.status_code,
        )
        if response.status_code != 200:
            status = f'{response.status_code} {response.reason}'
            try:
                error = response.json()['error']
                code, message = error['code'], error['message']
            except (ValueError, KeyError, TypeError):
                raise GehirnClientStatusError(status)
            raise GehirnApiError(code, message)

        if not response.content:
            return None
        return response.json()

    def encode_envelope(self, payload):
        return json.dumps({'Resource': payload})

    def zone(self, zone_id):
        return Zone(self, zone_id)

    def get_zone(self, zone_id):
        zone = self.zone(zone_id)
        zone.fetch()
        return zone
