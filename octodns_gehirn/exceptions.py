#
#
#

from octodns.provider import ProviderException


class GehirnClientException(ProviderException):
    pass


class GehirnApiError(GehirnClientException):
    def __init__(self, code, message):
        super().__init__(message)
        self.code = code
        self.message = message


class GehirnClientStatusError(GehirnClientException):
    def __init__(self, status):
        super().__init__(status)
        self.status = status


class GehirnClientUnsuccessful(GehirnClientException):
    def __init__(self):
        super().__init__('Unsuccessful')


class GehirnRecordMaybeRegistered(GehirnClientException):
    def __init__(self):
        super().__init__(
            'This record is maybe registered at Gehirn DNS. '
            'Use update_resource(record) instead of this method'
        )


class GehirnRecordIdUnset(GehirnClientException):
    def __init__(self):
        super().__init__('Record id is unset')
