""" Vocabulary for hub access control. A grant names a resource, either a
    single one such as ``dev:864475040540000`` or every resource of a kind
    such as ``dev:*``, and the actions allowed on it.
"""

separator = ':'
wildcard = '*'

resource_app = 'app:'
resource_apps = 'app:*'
resource_device = 'dev:'
resource_devices = 'dev:*'
resource_notefile = 'file:'
resource_notefiles = 'file:*'
resource_account = 'account:'
resource_accounts = 'account:*'
resource_route = 'route:'
resource_routes = 'route:*'
resource_module_firmwares = 'notecard:*'
resource_user_firmwares = 'firmware:*'

action_read = 'read'
action_update = 'update'
action_create = 'create'
action_delete = 'delete'
action_monitor = 'monitor'

# Combining actions in a single grant.

action_and = '&'
action_or = '|'

valid_actions = dict(
    app='app:create,app:read,app:update,app:delete,app:monitor',
    dev='dev:read,dev:update,dev:delete,dev:monitor',
    file='file:create,file:read,file:update,file:delete',
    account='account:create,account:read,account:update,account:delete',
    route='route:create,route:read,route:update,route:delete',
    notecard='notecard:create,notecard:read,notecard:update,notecard:delete',
    firmware='firmware:create,firmware:read,firmware:update,firmware:delete',
)


def resource(kind, name=wildcard):
    """ Return the resource string for *name* of the given *kind*, such as
        ``resource('dev', 'dev:123')``. The default names every resource of
        that kind. A *name* that already carries the prefix is not prefixed
        again.
    """

    prefix = kind + separator

    if name.startswith(prefix):
        return name

    return prefix + name


def split(resource):
    """ Split a resource string into its (kind, name); the name is
        :data:`wildcard` for a grant covering every resource of the kind.
    """

    kind, found, name = resource.partition(separator)

    if found == '':
        raise ValueError('resource %r has no kind prefix' % (resource))

    return kind, name


def is_wildcard(resource):
    return split(resource)[1] == wildcard


def allowed(kind, action):
    """ Return True if *action* is meaningful for resources of *kind*.
    """

    try:
        actions = valid_actions[kind]
    except KeyError:
        return False

    return (kind + separator + action) in actions.split(',')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
