""" Translate an :class:`kvcmd.options.OptionSet` into calls against a
    :class:`kvcmd.protocol.fetch.FetchOperation.Builder`. There is exactly
    one rule per option kind; no two kinds touch the same builder field, so
    the order in which rules run has no effect on the built operation.
"""

from .options import ConfigurationError, FetchOption


Type = FetchOption.Type


def _r(builder, quorum):
    builder.with_r(quorum.int_value)


def _pr(builder, quorum):
    builder.with_pr(quorum.int_value)


def _n_val(builder, n_val):
    builder.with_n_val(n_val)


def _timeout(builder, milliseconds):
    builder.with_timeout(milliseconds)


def _deleted_vclock(builder, flag):
    builder.with_return_deleted_vclock(flag)


def _head(builder, flag):
    builder.with_head_only(flag)


def _basic_quorum(builder, flag):
    builder.with_basic_quorum(flag)


def _if_modified(builder, vclock):
    builder.with_if_not_modified(vclock.bytes)


def _sloppy_quorum(builder, flag):
    builder.with_sloppy_quorum(flag)


def _notfound_ok(builder, flag):
    builder.with_notfound_ok(flag)


rules = {
    Type.R: _r,
    Type.PR: _pr,
    Type.N_VAL: _n_val,
    Type.TIMEOUT: _timeout,
    Type.DELETED_VCLOCK: _deleted_vclock,
    Type.HEAD: _head,
    Type.BASIC_QUORUM: _basic_quorum,
    Type.IF_MODIFIED: _if_modified,
    Type.SLOPPY_QUORUM: _sloppy_quorum,
    Type.NOTFOUND_OK: _notfound_ok,
}


_missing = [type.name for type in Type if type not in rules]
if _missing:
    raise ImportError('no translation rule for fetch option(s): ' + ', '.join(_missing))



def apply(builder, options):
    """ Invoke the builder setter for each entry in *options*. An entry whose
        kind has no rule raises :class:`ConfigurationError`.
    """

    for type, value in options.entries():
        try:
            rule = rules[type]
        except KeyError:
            raise ConfigurationError('no translation rule for fetch option: ' + repr(type))

        rule(builder, value)

    return builder



def build(location, options, builder):
    """ Produce the operation for fetching *location* with *options*. The
        *builder* is expected to already hold the bucket and key; the bucket
        type is always set here, whether or not any options are present.
    """

    builder.with_bucket_type(location.bucket_type)
    apply(builder, options)
    return builder.build()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
