""" The note is the replicated unit of data: a free-form JSON *body*, an
    opaque binary *payload*, and the bookkeeping needed to reconcile copies
    of the same note that were changed independently by different
    endpoints.

    Every change is recorded in the note's history stack as a
    :class:`History` entry naming the endpoint that made it, along with a
    per-endpoint sequence number. The stack holds at most one entry per
    endpoint, newest first. When two copies of a note meet, the histories
    decide whether one copy already contains everything the other knows
    (:func:`is_subsumed_by`), which one is newer (:func:`compare`), and how
    to combine them when neither is (:func:`merge`). Copies that cannot be
    ordered are kept side by side in the conflict list of the merged note
    until an endpoint resolves them with :func:`update`.

    All operations here are pure data transforms; none of them block, and
    none of them fail for a validly shaped note.
"""

from .. import clock
from .. import json
from .contract import Contract, Field


class NoteBodyError(ValueError):
    """ The JSON supplied for a note body could not be parsed.
    """


class History(Contract):
    """ One endpoint's authorship of one logical update to a note. The
        *where* field is an opaque location token; reconciliation never
        looks at it.
    """

    fields = dict(
        when=Field('w', default=0),
        where=Field('l', default=''),
        endpoint_id=Field('e', default=''),
        sequence=Field('s', default=0),
    )

    def subsumes(self, other):
        """ Return True if this entry records the same endpoint as *other*
            at an equal or later sequence number.
        """

        return self.endpoint_id == other.endpoint_id and self.sequence >= other.sequence


# end of class History



class Note(Contract):
    """ A single replicated record. See the module documentation for the
        semantics of the history and conflict fields; the JSON layout uses
        single-letter keys to keep notes compact on constrained links.
    """

    fields = dict(
        body=Field('b', omit='none'),
        payload=Field('p', kind='bytes'),
        change=Field('c', default=0),
        histories=Field('h', default=list, kind=History, container=list),
        conflicts=Field('x', default=list, container=list),
        updates=Field('u', default=0),
        deleted=Field('d', default=False),
        sent=Field('s', default=False),
        bulk=Field('k', default=False),
    )

    @classmethod
    def create(cls, body=None, payload=None):
        """ Return a new note with the supplied contents. A freshly created
            note has no history; the creating endpoint is recorded by the
            first :func:`update`.
        """

        note = cls()
        note.body = body
        note.payload = payload
        return note


    @classmethod
    def decode(cls, data):
        """ Construct a note from its JSON encoding.
        """

        return cls.from_dict(json.loads(data))


    def encode(self):
        """ Return the JSON encoding of this note, as bytes.
        """

        return json.dumps(self.to_dict())


    def endpoint_id(self):
        """ Return the endpoint that made the most recent change, or the
            empty string if the note has never been updated.
        """

        if self.histories:
            return self.histories[0].endpoint_id
        return ''


    def get_body(self):
        return self.body


    def set_body(self, body):
        self.body = body


    def set_body_json(self, data):
        """ Replace the body with the parsed contents of the JSON text
            *data*. If *data* cannot be parsed the body is cleared and
            :class:`NoteBodyError` is raised.
        """

        try:
            body = json.loads(data)
        except (json.DecodeError, ValueError) as e:
            self.body = None
            raise NoteBodyError('note body is not valid JSON: ' + str(e)) from e

        self.body = body


    def get_payload(self):
        return self.payload


    def set_payload(self, payload):
        if payload is not None:
            payload = bytes(payload)
        self.payload = payload


    def update(self, endpoint_id, resolve_conflicts=False, deleted=False, where=''):
        """ Record a local change to this note made by *endpoint_id*; see
            :func:`update`.
        """

        return update(self, endpoint_id, resolve_conflicts, deleted, where)


    def compare(self, incoming):
        return compare(self, incoming)


    def is_subsumed_by(self, incoming):
        return is_subsumed_by(self, incoming)


    def merge(self, incoming):
        return merge(self, incoming)


# end of class Note


# A note's conflicts are themselves notes; the field can only refer to the
# class once the class exists.

Note.fields['conflicts'].kind = Note



def update(note, endpoint_id, resolve_conflicts=False, deleted=False, where=''):
    """ Record a change to *note* by *endpoint_id*, modifying the note in
        place; the note is also returned for convenience.

        The update counter advances by one and a new history entry for the
        endpoint is placed at the top of the stack, replacing any older
        entry for the same endpoint. Its sequence number is the new update
        count, or one past the endpoint's previous sequence number if that
        is larger.

        Conflicts are then folded into the history. In the default,
        implicit mode only conflicts last written by this same endpoint are
        folded, since making a new change on top of one's own conflicting
        change settles it; all other conflicts are preserved verbatim. With
        *resolve_conflicts* set, every conflict is folded and the conflict
        list is emptied. Folding a conflict merges each of its history
        entries that carries new information into the stack at position 1,
        directly below the entry for this update.
    """

    updates = note.updates + 1
    sequence = updates

    for history in note.histories:
        if history.endpoint_id == endpoint_id and history.sequence >= sequence:
            sequence = history.sequence + 1

    histories = _sparse(note.histories, endpoint_id)

    top = History(when=clock.now(), where=where, endpoint_id=endpoint_id, sequence=sequence)
    histories.insert(0, top)

    note.deleted = deleted
    note.updates = updates

    remaining = list()

    for conflict in note.conflicts:
        if resolve_conflicts == False and conflict.endpoint_id() != endpoint_id:
            remaining.append(conflict)
            continue

        for history in conflict.histories:
            if _covered(history, histories):
                continue

            if history.endpoint_id == endpoint_id:
                # The conflict saw a later change by this endpoint than the
                # local copy did. Advance the new top entry past it, which
                # also makes the conflict's entry redundant.
                top.sequence = history.sequence + 1
                continue

            histories = [current for current in histories if not history.subsumes(current)]
            histories.insert(1, history.copy())

    note.histories = histories

    if resolve_conflicts:
        note.conflicts = list()
    else:
        note.conflicts = remaining

    return note



def compare(local, incoming):
    """ Order two copies of the same note. Returns a tuple
        (*conflict_data_differs*, *order*), where *order* is -1 if
        *incoming* is newer than *local*, 1 if *local* is newer, and 0 if
        neither is.

        Copies with more updates are newer. Otherwise the top history
        entries decide: a zero timestamp is older than any other, then
        later timestamps are newer, and remaining ties go to the
        lexicographically greater endpoint. Only when the top entries are
        indistinguishable are the conflict lists examined; the first
        element of the result is True if they do not hold the same
        siblings.
    """

    if incoming.updates > local.updates:
        return (False, -1)
    if local.updates > incoming.updates:
        return (False, 1)

    local_key = _top_key(local)
    incoming_key = _top_key(incoming)

    if local_key < incoming_key:
        return (False, -1)
    if local_key > incoming_key:
        return (False, 1)

    if _same_conflicts(local.conflicts, incoming.conflicts):
        return (False, 0)

    return (True, 0)



def is_subsumed_by(local, incoming):
    """ Return True if *incoming* already holds every change recorded in
        *local*: each history entry of *local*, including those of its
        conflicts, is matched by an entry in *incoming* (or one of its
        conflicts) for the same endpoint with an equal or later sequence
        number.
    """

    coverage = _all_histories(incoming)

    for history in _all_histories(local):
        if not _covered(history, coverage):
            return False

    return True



def merge(local, incoming):
    """ Reconcile two copies of a note, returning a new note; neither
        argument is modified.

        Each side is flattened into the note itself plus its conflicts.
        Any flattened note whose changes are all held by another is
        dropped. The newest survivor becomes the result and the rest,
        newest first, become its conflict list. The result does not depend
        on the order of the arguments.
    """

    candidates = list()
    seen = set()

    for note in _flatten(local) + _flatten(incoming):
        canonical = json.canonical(note.to_dict())
        if canonical in seen:
            continue
        seen.add(canonical)
        candidates.append((_rank(note, canonical), note))

    candidates.sort(key=lambda candidate: candidate[0], reverse=True)
    ranked = [note for rank, note in candidates]

    survivors = list()

    for index, note in enumerate(ranked):
        if _dominated(index, ranked) == False:
            survivors.append(note)

    winner = survivors[0].copy()
    winner.conflicts = [survivor.copy() for survivor in survivors[1:]]
    return winner



def _all_histories(note):
    """ Return every history entry of *note* and, recursively, of its
        conflicts.
    """

    histories = list(note.histories)

    for conflict in note.conflicts:
        histories.extend(_all_histories(conflict))

    return histories



def _covered(history, histories):
    for current in histories:
        if current.subsumes(history):
            return True
    return False



def _dominated(index, ranked):
    """ Return True if the note at *index* in the *ranked* sequence is
        subsumed by another. Two notes that subsume each other carry the
        same information; the higher-ranked of the pair is kept.
    """

    note = ranked[index]

    for other_index, other in enumerate(ranked):
        if other_index == index:
            continue
        if is_subsumed_by(note, other) == False:
            continue
        if other_index < index or is_subsumed_by(other, note) == False:
            return True

    return False



def _flatten(note):
    flattened = note.copy()
    flattened.conflicts = list()
    notes = [flattened]

    for conflict in note.conflicts:
        notes.extend(_flatten(conflict))

    return notes



def _rank(note, canonical):
    """ Sort key consistent with :func:`compare`, extended with the
        canonical encoding so that distinct notes never tie.
    """

    return (note.updates, _top_key(note), canonical)



def _same_conflicts(local, incoming):
    if len(local) != len(incoming):
        return False

    for sibling in local:
        for other in incoming:
            differs, order = compare(sibling, other)
            if order == 0:
                break
        else:
            return False

    return True



def _sparse(histories, endpoint_id):
    """ Return copies of *histories* without any entry for *endpoint_id*,
        keeping only the most advanced entry for every other endpoint.
    """

    best = dict()

    for history in histories:
        if history.endpoint_id == endpoint_id:
            continue
        try:
            prior = best[history.endpoint_id]
        except KeyError:
            best[history.endpoint_id] = history
        else:
            if history.sequence > prior.sequence:
                best[history.endpoint_id] = history

    return [history.copy() for history in histories if best.get(history.endpoint_id) is history]



def _top_key(note):
    """ Ordering key for the most recent history entry of *note*. A zero
        timestamp sorts before any nonzero timestamp.
    """

    if note.histories:
        top = note.histories[0]
        when = top.when
        endpoint_id = top.endpoint_id
    else:
        when = 0
        endpoint_id = ''

    return (when != 0, when, endpoint_id)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
