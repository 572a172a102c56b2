#
#
#

import logging
from collections import defaultdict

from octodns.provider.base import BaseProvider
from octodns.record import Record

from .exceptions import (
    GehirnApiError,
    GehirnClientException,
    GehirnClientStatusError,
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

__version__ = __VERSION__ = '0.1.0'

# client pulls __version__ for its User-Agent
from .client import GehirnClient  # noqa: E402
from .zone import Zone  # noqa: E402

__all__ = [
    'GehirnProvider',
    'GehirnClient',
    'Zone',
    'GehirnApiError',
    'GehirnClientException',
    'GehirnClientStatusError',
    'GehirnClientUnsuccessful',
    'GehirnRecordIdUnset',
    'GehirnRecordMaybeRegistered',
    'AAAARecord',
    'ARecord',
    'CNAMERecord',
    'MXRecord',
    'NSRecord',
    'SOARecord',
    'SRVRecord',
    'TXTRecord',
]


class GehirnProvider(BaseProvider):
    SUPPORTS_GEO = False
    SUPPORTS_DYNAMIC = False
    SUPPORTS_ROOT_NS = True
    SUPPORTS = set(('A', 'AAAA', 'CNAME', 'MX', 'NS', 'SRV', 'TXT'))

    def __init__(
        self, id, token, secret, zone_ids, endpoint=None, *args, **kwargs
    ):
        self.log = logging.getLogger(f'GehirnProvider[{id}]')
        self.log.debug(
            '__init__: id=%s, token=***, secret=***, endpoint=%s',
            id,
            endpoint,
        )
        super().__init__(id, *args, **kwargs)

        self._client = GehirnClient(token, secret, endpoint=endpoint)
        # Gehirn addresses zones by numeric id only, the names come from config
        self._zone_ids = {
            self._append_dot(str(name)): int(zone_id)
            for name, zone_id in zone_ids.items()
        }

        self._zone_records = {}

    def _append_dot(self, value):
        if not value or value == '@' or value.endswith('.'):
            return value
        return f'{value}.'

    def _relative_name(self, host_name, zone_name):
        host = host_name.rstrip('.').lower()
        zone = zone_name.rstrip('.').lower()
        if host in ('', '@', zone):
            return ''
        suffix = f'.{zone}'
        if host.endswith(suffix):
            return host[: -len(suffix)]
        return host

    def _data_for_multiple(self, _type, records):
        return {
            'ttl': records[0].ttl,
            'type': _type,
            'values': [record.ip_address for record in records],
        }

    _data_for_A = _data_for_multiple
    _data_for_AAAA = _data_for_multiple

    def _data_for_CNAME(self, _type, records):
        record = records[0]
        return {
            'ttl': record.ttl,
            'type': _type,
            'value': self._append_dot(record.alias_to),
        }

    def _data_for_MX(self, _type, records):
        values = []
        for record in records:
            values.append(
                {
                    'preference': int(record.priority),
                    'exchange': self._append_dot(record.mail_server),
                }
            )
        return {'ttl': records[0].ttl, 'type': _type, 'values': values}

    def _data_for_NS(self, _type, records):
        values = []
        for record in records:
            values.append(self._append_dot(record.name_server))
        return {'ttl': records[0].ttl, 'type': _type, 'values': values}

    def _data_for_SRV(self, _type, records):
        values = []
        for record in records:
            values.append(
                {
                    'port': int(record.port),
                    'priority': int(record.priority),
                    'target': self._append_dot(record.target),
                    'weight': int(record.weight),
                }
            )
        return {'ttl': records[0].ttl, 'type': _type, 'values': values}

    def _data_for_TXT(self, _type, records):
        return {
            'ttl': records[0].ttl,
            'type': _type,
            'values': [record.value.replace(';', '\\;') for record in records],
        }

    def list_zones(self):
        self.log.debug('list_zones:')
        return sorted(self._zone_ids.keys())

    def zone_records(self, zone):
        if zone.name not in self._zone_records:
            zone_id = self._zone_ids.get(zone.name)
            if zone_id is None:
                return []
            gehirn_zone = self._client.get_zone(zone_id)
            self._zone_records[zone.name] = list(gehirn_zone.records())

        return self._zone_records[zone.name]

    def populate(self, zone, target=False, lenient=False):
        self.log.debug(
            'populate: name=%s, target=%s, lenient=%s',
            zone.name,
            target,
            lenient,
        )

        values = defaultdict(lambda: defaultdict(list))
        # SOA is never part of zone_records
        for record in self.zone_records(zone):
            name = self._relative_name(record.host_name, zone.name)
            values[name][record.type].append(record)

        before = len(zone.records)
        for name, types in values.items():
            for _type, records in types.items():
                data_for = getattr(self, f'_data_for_{_type}')
                record = Record.new(
                    zone,
                    name,
                    data_for(_type, records),
                    source=self,
                    lenient=lenient,
                )
                zone.add_record(record, lenient=lenient)

        exists = zone.name in self._zone_records
        self.log.info(
            'populate:   found %s records, exists=%s',
            len(zone.records) - before,
            exists,
        )
        return exists

    def _resources_for_multiple(self, record):
        cls = ARecord if record._type == 'A' else AAAARecord
        for value in record.values:
            yield cls(record.fqdn, value, record.ttl)

    _resources_for_A = _resources_for_multiple
    _resources_for_AAAA = _resources_for_multiple

    def _resources_for_CNAME(self, record):
        yield CNAMERecord(record.fqdn, record.value, record.ttl)

    def _resources_for_MX(self, record):
        for value in record.values:
            yield MXRecord(
                record.fqdn, value.exchange, value.preference, record.ttl
            )

    def _resources_for_NS(self, record):
        for value in record.values:
            yield NSRecord(record.fqdn, value, record.ttl)

    def _resources_for_SRV(self, record):
        for value in record.values:
            yield SRVRecord(
                record.fqdn,
                value.target,
                value.port,
                value.weight,
                value.priority,
                record.ttl,
            )

    def _resources_for_TXT(self, record):
        for value in record.values:
            yield TXTRecord(record.fqdn, value.replace('\\;', ';'), record.ttl)

    def _resources_for(self, record):
        resources_for = getattr(self, f'_resources_for_{record._type}')
        return list(resources_for(record))

    def _existing_resources(self, record):
        zone = record.zone
        return [
            resource
            for resource in self.zone_records(zone)
            if resource.type == record._type
            and self._relative_name(resource.host_name, zone.name)
            == record.name
        ]

    def _apply_Create(self, gehirn_zone, change):
        for resource in self._resources_for(change.new):
            gehirn_zone.add_resource(resource)

    def _apply_Update(self, gehirn_zone, change):
        existing = self._existing_resources(change.existing)
        desired = self._resources_for(change.new)
        for old, new in zip(existing, desired):
            new.id = old.id
            gehirn_zone.update_resource(new)
        for old in existing[len(desired) :]:
            gehirn_zone.delete_resource(old)
        for new in desired[len(existing) :]:
            gehirn_zone.add_resource(new)

    def _apply_Delete(self, gehirn_zone, change):
        for resource in self._existing_resources(change.existing):
            gehirn_zone.delete_resource(resource)

    def _apply(self, plan):
        desired = plan.desired
        changes = plan.changes
        self.log.debug(
            '_apply: zone=%s, len(changes)=%d', desired.name, len(changes)
        )

        zone_id = self._zone_ids.get(desired.name)
        if zone_id is None:
            raise GehirnClientException(
                f'No Gehirn zone id configured for {desired.name}'
            )
        gehirn_zone = self._client.zone(zone_id)

        for change in changes:
            class_name = change.__class__.__name__
            getattr(self, f'_apply_{class_name}')(gehirn_zone, change)

        # Clear out the cache if any
        self._zone_records.pop(desired.name, None)
