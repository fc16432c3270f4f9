class MoverError(RuntimeError):
    """Failure in one stage of moving messages between queues.

    `moved` is the number of messages confirmed sent and deleted before the failure.
    """

    stage = 'moving messages'

    def __init__(self, reason: str, moved: int = 0):
        RuntimeError.__init__(self, f'{self.stage}: {reason}')
        self.reason = reason
        self.moved = moved


class QueueResolutionError(MoverError):
    stage = 'resolving queue url'


class QueueAttributesError(MoverError):
    stage = 'getting queue attributes'


class ReceiveError(MoverError):
    stage = 'receiving messages'


class SendError(MoverError):
    stage = 'sending message batch'


class DeleteError(MoverError):
    """The delete call failed as a whole. The sent messages are still in the source queue."""
    stage = 'deleting messages from source queue'


class PartialDeleteError(MoverError):
    stage = 'deleting all moved messages'


class MigrationError(MoverError):
    stage = 'migrating messages'
