#
#
#

"""Gehirn DNS resource record model.

Every record kind holds an :class:`Envelope` carrying the fields common to
all records (id, host name, display name, type and TTL) and delegates the
shared capabilities to it. The set of kinds is closed: ``RECORD_CLASSES``
is the only place a kind can be looked up by its type tag.
"""

from datetime import timedelta
from typing import Dict, Optional, Protocol, Tuple

from .exceptions import GehirnClientException


class GehirnRecord(Protocol):
    """Protocol implemented by every Gehirn record kind."""

    id: str
    host_name: str

    @property
    def name(self) -> str: ...

    @property
    def type(self) -> str: ...

    @property
    def ttl(self) -> int: ...

    @property
    def duration(self) -> timedelta: ...

    def clear_name(self) -> None:
        """Drop the transient display name."""
        ...

    def adopt_name(self) -> None:
        """Move a server supplied display name into the host name."""
        ...

    def to_payload(self) -> Dict:
        """Return the flat JSON object sent to the API."""
        ...

    def update_from_payload(self, data: Dict) -> None:
        """Overwrite the fields present in an API response object."""
        ...


class Envelope(object):
    KEYS = ('ID', 'Name', 'HostName', 'Type', 'TTL')

    def __init__(self, host_name='', _type='', ttl=0, id='', name=''):
        self.id = id
        self.name = name
        self.host_name = host_name
        self.type = _type
        self.ttl = ttl

    def to_payload(self):
        payload = {}
        if self.id:
            payload['ID'] = self.id
        if self.name:
            payload['Name'] = self.name
        payload['HostName'] = self.host_name
        payload['Type'] = self.type
        payload['TTL'] = self.ttl
        return payload

    def update_from_payload(self, data):
        if 'Type' in data and data['Type'] != self.type:
            raise GehirnClientException(
                f'Record type mismatch: expected {self.type}, '
                f'got {data["Type"]}'
            )
        if 'ID' in data:
            self.id = data['ID'] or ''
        if 'Name' in data:
            self.name = data['Name'] or ''
        if 'HostName' in data:
            self.host_name = data['HostName']
        if 'TTL' in data:
            self.ttl = data['TTL']

    def __repr__(self):
        return (
            f'Envelope(id={self.id!r}, name={self.name!r}, '
            f'host_name={self.host_name!r}, type={self.type!r}, '
            f'ttl={self.ttl!r})'
        )


class _RecordKind(object):
    # (json key, attribute name) pairs for the kind specific fields
    FIELDS: Tuple[Tuple[str, str], ...] = ()
    TYPE: Optional[str] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        for key, _ in cls.FIELDS:
            if key in Envelope.KEYS:
                raise TypeError(
                    f'{cls.__name__} field {key} collides with the envelope'
                )

    def __init__(self, host_name, ttl):
        self.envelope = Envelope(host_name, self.TYPE, ttl)

    @classmethod
    def from_payload(cls, data):
        record = cls()
        record.update_from_payload(data)
        return record

    @property
    def id(self):
        return self.envelope.id

    @id.setter
    def id(self, value):
        self.envelope.id = value

    @property
    def host_name(self):
        return self.envelope.host_name

    @host_name.setter
    def host_name(self, value):
        self.envelope.host_name = value

    @property
    def name(self):
        return self.envelope.name

    @property
    def display_name(self):
        return self.envelope.name or self.envelope.host_name

    @property
    def type(self):
        return self.envelope.type

    @property
    def ttl(self):
        return self.envelope.ttl

    @property
    def duration(self):
        return timedelta(seconds=self.envelope.ttl)

    def clear_name(self):
        self.envelope.name = ''

    def adopt_name(self):
        envelope = self.envelope
        if envelope.name and envelope.name != envelope.host_name:
            envelope.host_name = envelope.name
        envelope.name = ''

    def to_payload(self):
        payload = self.envelope.to_payload()
        for key, attr in self.FIELDS:
            payload[key] = getattr(self, attr)
        return payload

    def update_from_payload(self, data):
        self.envelope.update_from_payload(data)
        for key, attr in self.FIELDS:
            if key in data:
                setattr(self, attr, data[key])

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.to_payload() == other.to_payload()

    def __repr__(self):
        fields = ', '.join(
            f'{attr}={getattr(self, attr)!r}' for _, attr in self.FIELDS
        )
        return f'{self.__class__.__name__}({fields}, {self.envelope!r})'


class SOARecord(_RecordKind):
    TYPE = 'SOA'
    FIELDS = (
        ('MNAME', 'mname'),
        ('RNAME', 'rname'),
        ('Serial', 'serial'),
        ('Refresh', 'refresh'),
        ('Retry', 'retry'),
        ('Expire', 'expire'),
        ('NegativeCacheTTL', 'negative_cache_ttl'),
    )

    def __init__(
        self,
        host_name='',
        mname='',
        rname='',
        serial=0,
        refresh=0,
        retry=0,
        expire=0,
        negative_cache_ttl=0,
        ttl=0,
    ):
        super().__init__(host_name, ttl)
        self.mname = mname
        self.rname = rname
        self.serial = serial
        self.refresh = refresh
        self.retry = retry
        self.expire = expire
        self.negative_cache_ttl = negative_cache_ttl


class NSRecord(_RecordKind):
    TYPE = 'NS'
    FIELDS = (('NameServer', 'name_server'),)

    def __init__(self, host_name='', name_server='', ttl=0):
        super().__init__(host_name, ttl)
        self.name_server = name_server


class ARecord(_RecordKind):
    TYPE = 'A'
    FIELDS = (('IPAddress', 'ip_address'),)

    def __init__(self, host_name='', ip_address='', ttl=0):
        super().__init__(host_name, ttl)
        self.ip_address = ip_address


class AAAARecord(_RecordKind):
    TYPE = 'AAAA'
    FIELDS = (('IPAddress', 'ip_address'),)

    def __init__(self, host_name='', ip_address='', ttl=0):
        super().__init__(host_name, ttl)
        self.ip_address = ip_address


class CNAMERecord(_RecordKind):
    TYPE = 'CNAME'
    FIELDS = (('AliasTo', 'alias_to'),)

    def __init__(self, host_name='', alias_to='', ttl=0):
        super().__init__(host_name, ttl)
        self.alias_to = alias_to


class MXRecord(_RecordKind):
    TYPE = 'MX'
    FIELDS = (('MailServer', 'mail_server'), ('Priority', 'priority'))

    def __init__(self, host_name='', mail_server='', priority=0, ttl=0):
        super().__init__(host_name, ttl)
        self.mail_server = mail_server
        self.priority = priority


class TXTRecord(_RecordKind):
    TYPE = 'TXT'
    FIELDS = (('Value', 'value'),)

    def __init__(self, host_name='', value='', ttl=0):
        super().__init__(host_name, ttl)
        self.value = value


class SRVRecord(_RecordKind):
    TYPE = 'SRV'
    FIELDS = (
        ('Priority', 'priority'),
        ('Weight', 'weight'),
        ('Port', 'port'),
        ('Target', 'target'),
    )

    def __init__(
        self,
        host_name='',
        target='',
        port=0,
        weight=0,
        priority=0,
        ttl=0,
    ):
        super().__init__(host_name, ttl)
        self.target = target
        self.port = port
        self.weight = weight
        self.priority = priority


RECORD_CLASSES = {
    cls.TYPE: cls
    for cls in (
        SOARecord,
        NSRecord,
        ARecord,
        AAAARecord,
        CNAMERecord,
        MXRecord,
        TXTRecord,
        SRVRecord,
    )
}


def record_from_payload(data: Dict) -> GehirnRecord:
    """Build the record kind matching ``data['Type']``.

    Raises:
        GehirnClientException: If the type is not one of the known kinds
    """
    _type = data.get('Type')
    try:
        cls = RECORD_CLASSES[_type]
    except KeyError:
        raise GehirnClientException(f'Unsupported record type {_type!r}')
    return cls.from_payload(data)
