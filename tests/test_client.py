#
# Tests for the Gehirn HTTP client with a mocked session transport
#

import json
import os
from base64 import b64encode
from unittest import TestCase
from unittest.mock import Mock, patch

from requests import Response
from requests.exceptions import ConnectionError, MissingSchema

from octodns_gehirn.client import GehirnClient
from octodns_gehirn.exceptions import GehirnApiError, GehirnClientStatusError
from octodns_gehirn.zone import Zone


def _response(status_code, body=b'', reason='OK'):
    response = Response()
    response.status_code = status_code
    response.reason = reason
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')
    response._content = body
    return response


class TestGehirnClientUrls(TestCase):
    def test_default_endpoint(self):
        client = GehirnClient('token', 'secret')
        self.assertEqual(GehirnClient.BASE_URL, client.endpoint)
        self.assertEqual(
            'https://cp.gehirn.jp/api/dns/resource/42',
            client.build_url('resource/42'),
        )

    def test_build_url_does_not_compound(self):
        client = GehirnClient(
            'token', 'secret', endpoint='http://mock.tests/api/dns/'
        )
        self.assertEqual(
            'http://mock.tests/api/dns/resource/1',
            client.build_url('resource/1'),
        )
        self.assertEqual(
            'http://mock.tests/api/dns/resource/2/abc',
            client.build_url('resource/2/abc'),
        )
        self.assertEqual('http://mock.tests/api/dns/', client.endpoint)

    def test_build_url_normalizes_slashes(self):
        client = GehirnClient('token', 'secret', endpoint='http://mock.tests')
        self.assertEqual(
            'http://mock.tests/resource/1', client.build_url('/resource/1/')
        )
        self.assertEqual('http://mock.tests/', client.build_url(''))

    def test_make_request(self):
        client = GehirnClient(
            'token', 'secret', endpoint='http://mock.tests/api/dns/'
        )
        request = client.make_request('POST', 'resource/1', '{}')
        self.assertEqual('POST', request.method)
        self.assertEqual('http://mock.tests/api/dns/resource/1', request.url)
        self.assertEqual(
            'text/json;charset=utf8', request.headers['Content-Type']
        )
        expected = b64encode(b'token:secret').decode('ascii')
        self.assertEqual(f'Basic {expected}', request.headers['Authorization'])
        self.assertIn('octodns-gehirn/', request.headers['User-Agent'])

    def test_make_request_malformed_url(self):
        client = GehirnClient('token', 'secret', endpoint='not a url')
        with self.assertRaises(MissingSchema):
            client.make_request('GET', 'resource/1')

    def test_injected_session(self):
        session = Mock()
        client = GehirnClient('token', 'secret', session=session)
        client.make_request('GET', 'resource/1')
        session.prepare_request.assert_called_once()
        session.headers.update.assert_not_called()


class TestGehirnClientDoRequest(TestCase):
    def setUp(self):
        self.client = GehirnClient(
            'token', 'secret', endpoint='http://mock.tests/api/dns/'
        )
        self.send = Mock()
        self.client._session.send = self.send
        self.request = self.client.make_request('GET', 'resource/1')

    def test_success(self):
        self.send.return_value = _response(200, {'Resource': {'ID': 'x'}})
        self.assertEqual(
            {'Resource': {'ID': 'x'}}, self.client.do_request(self.request)
        )
        self.send.assert_called_once()
        self.assertIs(self.request, self.send.call_args.args[0])

    def test_environment_settings_applied(self):
        self.send.return_value = _response(200, {})
        environ = {'REQUESTS_CA_BUNDLE': '/etc/gehirn-ca.pem'}
        with patch.dict(os.environ, environ):
            self.client.do_request(self.request)
        kwargs = self.send.call_args.kwargs
        self.assertEqual('/etc/gehirn-ca.pem', kwargs['verify'])
        self.assertIn('proxies', kwargs)

    def test_success_empty_body(self):
        self.send.return_value = _response(200)
        self.assertIsNone(self.client.do_request(self.request))

    def test_success_bad_json(self):
        self.send.return_value = _response(200, b'<html>')
        with self.assertRaises(ValueError):
            self.client.do_request(self.request)

    def test_provider_error(self):
        self.send.return_value = _response(
            404,
            {'error': {'code': 404, 'message': 'not found'}},
            reason='Not Found',
        )
        with self.assertRaises(GehirnApiError) as ctx:
            self.client.do_request(self.request)
        self.assertEqual('not found', str(ctx.exception))
        self.assertEqual(404, ctx.exception.code)
        self.assertEqual('not found', ctx.exception.message)

    def test_unparseable_error(self):
        self.send.return_value = _response(
            502, b'<html>bad gateway</html>', reason='Bad Gateway'
        )
        with self.assertRaises(GehirnClientStatusError) as ctx:
            self.client.do_request(self.request)
        self.assertEqual('502 Bad Gateway', str(ctx.exception))
        self.assertEqual('502 Bad Gateway', ctx.exception.status)

    def test_error_without_envelope(self):
        self.send.return_value = _response(
            500, {'message': 'oops'}, reason='Internal Server Error'
        )
        with self.assertRaises(GehirnClientStatusError) as ctx:
            self.client.do_request(self.request)
        self.assertEqual('500 Internal Server Error', str(ctx.exception))

    def test_transport_error(self):
        self.send.side_effect = ConnectionError('boom')
        with self.assertRaises(ConnectionError):
            self.client.do_request(self.request)


class TestGehirnClientMisc(TestCase):
    def test_encode_envelope(self):
        client = GehirnClient('token', 'secret')
        self.assertEqual(
            {'Resource': {'Type': 'A'}},
            json.loads(client.encode_envelope({'Type': 'A'})),
        )

    def test_zone(self):
        client = GehirnClient('token', 'secret')
        zone = client.zone(42)
        self.assertIsInstance(zone, Zone)
        self.assertEqual(42, zone.id)
        self.assertIsNone(zone.soa)

    def test_get_zone_fetches(self):
        client = GehirnClient(
            'token', 'secret', endpoint='http://mock.tests/api/dns/'
        )
        client._session.send = Mock(
            return_value=_response(
                200,
                {
                    'Resource': {
                        'A': [
                            {
                                'ID': 'a-1',
                                'HostName': 'www.unit.tests.',
                                'Type': 'A',
                                'TTL': 300,
                                'IPAddress': '1.2.3.4',
                            }
                        ]
                    },
                    'Domain': {'Name': 'unit.tests'},
                },
            )
        )
        zone = client.get_zone(42)
        self.assertEqual('unit.tests', zone.domain)
        self.assertEqual(['a-1'], [r.id for r in zone.a])
        request = client._session.send.call_args[0][0]
        self.assertEqual('GET', request.method)
        self.assertEqual('http://mock.tests/api/dns/resource/42', request.url)
