""" The :class:`Location` identifies a single stored item: the bucket type
    (a namespace for bucket properties), the bucket, and the key.
"""

DEFAULT_BUCKET_TYPE = b'default'


def _as_bytes(value, charset):

    try:
        value.decode
    except AttributeError:
        pass
    else:
        return bytes(value)

    try:
        return value.encode(charset)
    except AttributeError:
        raise TypeError('expected str or bytes, not ' + type(value).__name__)


class Location:
    """ An immutable reference to one key. The *bucket*, *key*, and
        *bucket_type* may be given as strings or bytes; strings are encoded
        using *charset*. All three are stored, and returned, as bytes.
    """

    __slots__ = ('_bucket_type', '_bucket', '_key', '_charset')

    def __init__(self, bucket, key, bucket_type=DEFAULT_BUCKET_TYPE, charset='utf-8'):

        bucket_type = _as_bytes(bucket_type, charset)
        bucket = _as_bytes(bucket, charset)
        key = _as_bytes(key, charset)

        if bucket_type == b'':
            raise ValueError('the bucket type cannot be empty')
        if bucket == b'':
            raise ValueError('the bucket cannot be empty')
        if key == b'':
            raise ValueError('the key cannot be empty')

        object.__setattr__(self, '_bucket_type', bucket_type)
        object.__setattr__(self, '_bucket', bucket)
        object.__setattr__(self, '_key', key)
        object.__setattr__(self, '_charset', charset)


    def __setattr__(self, name, value):
        raise AttributeError('a Location cannot be modified')


    def __delattr__(self, name):
        raise AttributeError('a Location cannot be modified')


    def __eq__(self, other):
        if not isinstance(other, Location):
            return NotImplemented

        return self.parts() == other.parts()


    def __hash__(self):
        return hash(self.parts())


    def __repr__(self):
        parts = (self._bucket_type, self._bucket, self._key)
        return 'Location(type=%r, bucket=%r, key=%r)' % parts


    @property
    def bucket_type(self):
        return self._bucket_type


    @property
    def bucket(self):
        return self._bucket


    @property
    def key(self):
        return self._key


    @property
    def charset(self):
        return self._charset


    def has_default_bucket_type(self):
        return self._bucket_type == DEFAULT_BUCKET_TYPE


    def parts(self):
        """ Return the (bucket type, bucket, key) tuple.
        """

        return (self._bucket_type, self._bucket, self._key)


# end of class Location


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
