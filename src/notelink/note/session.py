""" Records describing a device's connection sessions with the hub and the
    usage accumulated during them.
"""

from .contract import Contract, Field


class DeviceUsage(Contract):
    """ Usage counters, cumulative since the device was provisioned.
    """

    fields = dict(
        since=Field('since', default=0),
        duration_secs=Field('duration', default=0),
        rcvd_bytes=Field('bytes_rcvd', default=0),
        sent_bytes=Field('bytes_sent', default=0),
        tcp_sessions=Field('sessions_tcp', default=0),
        tls_sessions=Field('sessions_tls', default=0),
        rcvd_notes=Field('notes_rcvd', default=0),
        sent_notes=Field('notes_sent', default=0),
    )


class TowerLocation(Contract):

    fields = dict(
        name=Field('n', default=''),
        country_code=Field('c', default=''),
        timezone_id=Field('z', default=0),
        olc=Field('l', default=''),
        lat=Field('lat', default=0.0),
        lon=Field('lon', default=0.0),
        timezone=Field('zone', default=''),
        mcc=Field('mcc', default=0),
        mnc=Field('mnc', default=0),
        lac=Field('lac', default=0),
        cid=Field('cid', default=0),
    )


class DeviceSession(Contract):
    """ One device session. The *this* and *next* usage snapshots bracket
        the session; *period* is the difference, estimated until the next
        session begins.
    """

    fields = dict(
        session_uid=Field('session', default=''),
        device_uid=Field('device', default=''),
        device_sn=Field('sn', default=''),
        product_uid=Field('product', default=''),
        fleet_uid=Field('fleet', default=''),
        addr=Field('addr', default=''),
        cell_id=Field('cell', default=''),
        where=Field('tower', default=TowerLocation, kind=TowerLocation),
        this=Field('this', default=DeviceUsage, kind=DeviceUsage),
        next=Field('next', default=DeviceUsage, kind=DeviceUsage),
        period=Field('period', default=DeviceUsage, kind=DeviceUsage),
        voltage=Field('voltage', default=DeviceUsage, kind=DeviceUsage),
        temp=Field('temp', default=DeviceUsage, kind=DeviceUsage),
        last_work_done=Field('LastWorkDone', default=0),
    )


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
