#
#
#

"""Zone scoped CRUD for Gehirn DNS resource records."""

import logging
import posixpath

from .exceptions import (
    GehirnClientException,
    GehirnClientUnsuccessful,
    GehirnRecordIdUnset,
    GehirnRecordMaybeRegistered,
)
from .records import (
    AAAARecord,
    ARecord,
    CNAMERecord,
    MXRecord,
    NSRecord,
    SOARecord,
    SRVRecord,
    TXTRecord,
)


class Zone(object):
    """Handle on one Gehirn DNS zone.

    After :meth:`fetch` the zone holds the SOA record and one list per record
    kind. Writes only touch the record passed in; the fetched collections
    are replaced wholesale by the next fetch.
    """

    def __init__(self, client, zone_id):
        self.log = logging.getLogger(f'GehirnZone[{zone_id}]')
        self._client = client
        self.id = zone_id
        self.domain = None

        self.soa = None
        self.ns = []
        self.a = []
        self.aaaa = []
        self.cname = []
        self.mx = []
        self.txt = []
        self.srv = []

    def _path(self, record_id=''):
        return posixpath.join('resource', str(self.id), record_id)

    def _request(self, method, record_id='', body=None):
        request = self._client.make_request(
            method, self._path(record_id), body
        )
        return self._client.do_request(request)

    def _encode(self, record):
        payload = record.to_payload()
        # the display name is never written back
        payload.pop('Name', None)
        return self._client.encode_envelope(payload)

    def _decode_into(self, data, record):
        if isinstance(data, dict) and isinstance(data.get('Resource'), dict):
            record.update_from_payload(data['Resource'])

    def _normalize(self):
        if self.soa is not None:
            self.soa.adopt_name()
        for records in (
            self.ns,
            self.a,
            self.aaaa,
            self.cname,
            self.mx,
            self.txt,
            self.srv,
        ):
            for record in records:
                record.adopt_name()

    def fetch(self):
        self.log.debug('fetch:')
        data = self._request('GET')
        if data is None:
            raise GehirnClientException(
                f'Empty response fetching zone {self.id}'
            )
        if 'is_success' in data and not data['is_success']:
            raise GehirnClientUnsuccessful()

        resource = data.get('Resource') or {}
        soa = resource.get('SOA')
        self.soa = SOARecord.from_payload(soa) if soa else None
        self.ns = [NSRecord.from_payload(r) for r in resource.get('NS') or []]
        self.a = [ARecord.from_payload(r) for r in resource.get('A') or []]
        self.aaaa = [
            AAAARecord.from_payload(r) for r in resource.get('AAAA') or []
        ]
        self.cname = [
            CNAMERecord.from_payload(r) for r in resource.get('CNAME') or []
        ]
        self.mx = [MXRecord.from_payload(r) for r in resource.get('MX') or []]
        self.txt = [
            TXTRecord.from_payload(r) for r in resource.get('TXT') or []
        ]
        self.srv = [
            SRVRecord.from_payload(r) for r in resource.get('SRV') or []
        ]
        self.domain = (data.get('Domain') or {}).get('Name')
        self._normalize()

        self.log.debug(
            'fetch:   domain=%s, records=%d',
            self.domain,
            sum(1 for _ in self.records()),
        )
        return self

    def records(self):
        """Yield every fetched record except the SOA."""
        for records in (
            self.ns,
            self.a,
            self.aaaa,
            self.cname,
            self.mx,
            self.txt,
            self.srv,
        ):
            yield from records

    def add_ns(self, name, ns, ttl):
        record = NSRecord(name, ns, ttl)
        self.add_resource(record)
        return record

    def add_a(self, name, addr, ttl):
        record = ARecord(name, addr, ttl)
        self.add_resource(record)
        return record

    def add_aaaa(self, name, addr, ttl):
        record = AAAARecord(name, addr, ttl)
        self.add_resource(record)
        return record

    def add_cname(self, name, to, ttl):
        record = CNAMERecord(name, to, ttl)
        self.add_resource(record)
        return record

    def add_mx(self, name, mail_server, priority, ttl):
        record = MXRecord(name, mail_server, priority, ttl)
        self.add_resource(record)
        return record

    def add_txt(self, name, value, ttl):
        record = TXTRecord(name, value, ttl)
        self.add_resource(record)
        return record

    def add_srv(self, name, target, port, weight, priority, ttl):
        record = SRVRecord(name, target, port, weight, priority, ttl)
        self.add_resource(record)
        return record

    def add_resource(self, record):
        if record.id:
            raise GehirnRecordMaybeRegistered()

        self.log.debug(
            'add_resource: type=%s, host_name=%s', record.type, record.host_name
        )
        data = self._request('POST', body=self._encode(record))
        self._decode_into(data, record)

    def update_resource(self, record):
        if not record.id:
            raise GehirnRecordIdUnset()
        record.clear_name()

        self.log.debug(
            'update_resource: id=%s, type=%s', record.id, record.type
        )
        data = self._request('PUT', record.id, self._encode(record))
        self._decode_into(data, record)

    def delete_resource(self, record):
        if not record.id:
            raise GehirnRecordIdUnset()

        self.log.debug(
            'delete_resource: id=%s, type=%s', record.id, record.type
        )
        data = self._request('DELETE', record.id)
        self._decode_into(data, record)
