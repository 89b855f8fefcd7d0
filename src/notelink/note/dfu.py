""" Firmware update (DFU) status, as reported by the module to the hub.
"""

from .contract import Contract, Field


phase_unknown = ''
phase_idle = 'idle'
phase_error = 'error'
phase_downloading = 'downloading'
phase_sideloading = 'sideloading'
phase_ready = 'ready'
phase_ready_retry = 'ready-retry'
phase_updating = 'updating'
phase_completed = 'completed'

phases = (phase_unknown, phase_idle, phase_error, phase_downloading,
          phase_sideloading, phase_ready, phase_ready_retry, phase_updating,
          phase_completed)


class DFUState(Contract):
    """ Progress of a single firmware update. *version* always describes
        the firmware that is currently running.
    """

    fields = dict(
        type=Field('type', default=''),
        file=Field('file', default=''),
        length=Field('length', default=0),
        crc32=Field('crc32', default=0),
        md5=Field('md5', default=''),
        phase=Field('mode', default=''),
        status=Field('status', default=''),
        began_secs=Field('began', default=0),
        retry_count=Field('retry', default=0),
        consecutive_errors=Field('errors', default=0),
        binary_retries=Field('binretry', default=0),
        dfu_start_count=Field('dfu_started', default=0),
        dfu_completed_count=Field('dfu_completed', default=0),
        odfu_started_count=Field('odfu_started', default=0),
        odfu_target=Field('odfu_target', default=''),
        read_from_service=Field('read', default=0),
        updated_secs=Field('updated', default=0),
        download_complete=Field('dl_complete', default=False),
        disabled_reason=Field('disabled', default=''),
        min_notecard_version=Field('min_card_version', default=''),
        version=Field('version', default=''),
    )


class DFUEnv(Contract):
    """ The DFU states passed to the hub whenever any of them changes.
    """

    fields = dict(
        card=Field('card', kind=DFUState),
        user=Field('user', kind=DFUState),
        modem=Field('modem', kind=DFUState),
        star=Field('star', kind=DFUState),
    )


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
