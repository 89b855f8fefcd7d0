""" Persistent selection of the module port. The settings live in
    ``config.json`` in the directory returned by :func:`directory`, and
    can be overridden per process through the environment.
"""

import os

from . import json


filename = 'config.json'

default_interface = 'serial'

home_variable = 'NOTELINK_HOME'
home_default = '.notelink'


class Settings:
    """ The saved port selection. Any attribute may be None, meaning the
        built-in default applies.

        :ivar interface: ``'serial'`` or ``'i2c'``.
        :ivar port: Serial device name, or I2C bus.
        :ivar port_config: Baud rate for serial, 7-bit address for I2C.
    """

    attributes = ('interface', 'port', 'port_config')

    def __init__(self, interface=None, port=None, port_config=None):

        self.interface = interface
        self.port = port
        self.port_config = port_config


    def __eq__(self, other):
        if isinstance(other, Settings):
            return self.to_dict() == other.to_dict()
        return NotImplemented


    def __repr__(self):
        return 'Settings(%r)' % (self.to_dict(),)


    def to_dict(self):
        result = dict()

        for attribute in self.attributes:
            value = getattr(self, attribute)
            if value is not None:
                result[attribute] = value

        return result


    @staticmethod
    def path():
        return os.path.join(directory(), filename)


    @classmethod
    def load(cls):
        """ Return the saved settings, or empty settings if nothing has
            been saved yet.
        """

        path = cls.path()

        try:
            with open(path, 'rb') as reader:
                contents = reader.read()
        except FileNotFoundError:
            return cls()

        loaded = json.loads(contents)

        if not isinstance(loaded, dict):
            raise ValueError('invalid settings in ' + path)

        settings = cls()

        for attribute in cls.attributes:
            try:
                value = loaded[attribute]
            except KeyError:
                continue
            setattr(settings, attribute, value)

        return settings


    def save(self):
        """ Write the settings to disk, replacing the file in one step.
        """

        path = self.path()
        base = os.path.dirname(path)

        if os.path.exists(base):
            pass
        else:
            os.makedirs(base, mode=0o775)

        temporary = path + '.tmp'
        try:
            with open(temporary, 'wb') as writer:
                writer.write(json.pretty(self.to_dict()))
        except Exception:
            if os.path.exists(temporary):
                os.remove(temporary)
            raise

        os.replace(temporary, path)


# end of class Settings



def defaults():
    """ Return the (interface, port, port_config) to use when the caller
        does not specify one. The environment variables
        ``NOTELINK_INTERFACE``, ``NOTELINK_PORT`` and
        ``NOTELINK_PORT_CONFIG`` take precedence over the saved
        :class:`Settings`, which take precedence over the built-in
        defaults for the chosen interface.
    """

    settings = Settings.load()

    interface = os.environ.get('NOTELINK_INTERFACE', settings.interface)
    port = os.environ.get('NOTELINK_PORT', settings.port)
    port_config = os.environ.get('NOTELINK_PORT_CONFIG', settings.port_config)

    if interface is None or interface == '':
        interface = default_interface

    interface = interface.lower()

    if port is None or port == '' or port_config is None or port_config == '':
        default_port, default_config = interface_defaults(interface)

        if port is None or port == '':
            port = default_port
        if port_config is None or port_config == '':
            port_config = default_config

    port_config = int(str(port_config), 0)

    return interface, port, port_config



def interface_defaults(interface):

    # Deferred import; enumerating serial ports is only needed when no port
    # was configured.

    from .transport import i2c
    from .transport import serial

    if interface == 'serial':
        return serial.default_port()
    if interface == 'i2c':
        return i2c.defaults()

    raise ValueError('unknown module interface: ' + repr(interface))



def directory(default=None):
    """ Return the directory holding the saved settings.

        An explicit *default* wins: it must be an absolute path, is created
        if missing, and is exported as ``$NOTELINK_HOME`` so that child
        processes agree. Otherwise ``$NOTELINK_HOME`` is used if set, then
        ``.notelink`` under the user's home directory. The answer is
        remembered after the first call; set :attr:`directory.found` to
        None to look again.
    """

    if default is not None:
        chosen = os.path.expandvars(str(default))

        if not os.path.isabs(chosen):
            raise ValueError('settings directory must be an absolute path: ' + repr(chosen))

        os.makedirs(chosen, mode=0o775, exist_ok=True)
        os.environ[home_variable] = chosen
        directory.found = chosen

    if directory.found is None:
        chosen = os.environ.get(home_variable)

        if not chosen:
            user_home = os.environ.get('HOME')
            if not user_home:
                raise RuntimeError('cannot locate the settings directory: neither %s nor HOME is set' % (home_variable))
            chosen = os.path.join(user_home, home_default)

        directory.found = chosen

    return directory.found

directory.found = None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
