import logging


class ScheduledTask:
    """Handle for a delayed call; ``cancel()`` prevents it from running."""

    def __init__(self, name=''):
        self.name = name
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self):
        state = 'cancelled' if self.cancelled else ('done' if self.done else 'pending')
        return f"<ScheduledTask {self.name} {state}>"


class BackgroundScheduler:
    """Runs delayed and immediate work on Socket.IO background tasks.

    Delays are slept in steps of at most ``poll_interval`` seconds so a
    cancelled task releases its worker soon after ``cancel()``.
    """

    def __init__(self, socketio, logger=None, poll_interval: float = 0.5):
        self.socketio = socketio
        self.logger = logger or logging.getLogger(__name__)
        self.poll_interval = poll_interval

    def call_later(self, delay_sec: float, fn, *args, name='') -> ScheduledTask:
        task = ScheduledTask(name)

        def _runner():
            slept = 0.0
            while slept < delay_sec and not task.cancelled:
                step = min(self.poll_interval, delay_sec - slept)
                self.socketio.sleep(step)
                slept += step
            if task.cancelled:
                self.logger.debug(f"[timer-abort] task={name} cancelled")
                return
            try:
                fn(*args)
            except Exception:
                self.logger.exception(f"[timer-error] task={name}")
            finally:
                task.done = True

        self.socketio.start_background_task(_runner)
        return task

    def spawn(self, fn, *args, name='') -> ScheduledTask:
        return self.call_later(0, fn, *args, name=name)


class SocketIOTransport:
    """Room membership and event emission on one Socket.IO namespace.

    Talks to the underlying server directly so it works from background
    tasks, outside of any request context.
    """

    def __init__(self, socketio, namespace='/'):
        self.socketio = socketio
        self.namespace = namespace

    def join(self, sid: str, room: str) -> None:
        self.socketio.server.enter_room(sid, room, namespace=self.namespace)

    def leave(self, sid: str, room: str) -> None:
        self.socketio.server.leave_room(sid, room, namespace=self.namespace)

    def close(self, room: str) -> None:
        self.socketio.server.close_room(room, namespace=self.namespace)

    def emit(self, event: str, data=None, to=None, skip_sid=None) -> None:
        self.socketio.emit(event, data, to=to, skip_sid=skip_sid, namespace=self.namespace)
