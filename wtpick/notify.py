import click


class Notifier:
    """User-visible status lines.

    Messages go to stderr so stdout stays free for the switch target. A
    `redraw()` queues the last message for the next picker run to display.
    """

    def __init__(self) -> None:
        self.last_message: str | None = None
        self._pending_status: str | None = None

    def echo(self, message: str) -> None:
        self.last_message = message
        click.echo(message, err=True)

    def redraw(self) -> None:
        self._pending_status = self.last_message

    def take_status(self) -> str | None:
        status, self._pending_status = self._pending_status, None
        return status
