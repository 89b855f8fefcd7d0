""" Description of the host, attached to ``hub.set`` requests so that the
    hub can tell which client library and platform a device is used with.
"""

import os
import platform
import sys


agent = 'notelink'


def user_agent(interface, port):
    """ Return the user agent dictionary for a module attached through
        *interface* on *port*.
    """

    ua = dict()
    ua['agent'] = agent
    ua['compiler'] = '%s %s %s/%s' % (platform.python_implementation(), platform.python_version(), sys.platform, platform.machine())
    ua['req_interface'] = interface
    ua['req_port'] = str(port)

    cores = os.cpu_count()
    if cores:
        ua['cpu_cores'] = cores

    os_name = platform.system()
    if os_name:
        ua['os_name'] = os_name.lower()

    os_platform = platform.platform(terse=True)
    if os_platform:
        ua['os_platform'] = os_platform

    return ua


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
