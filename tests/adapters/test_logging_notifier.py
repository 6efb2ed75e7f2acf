from trip_request.adapters.notify import LoggingNotifier
from trip_request.domain.models import Severity, UserMessage


def test_show_and_hide():
    notifier = LoggingNotifier()
    message = UserMessage("Trip planner error", "Trip not possible.", Severity.ERROR)

    notifier.show(message)
    assert notifier.current == message

    notifier.hide()
    assert notifier.current is None
    assert list(notifier.history) == [message]


def test_history_keeps_only_recent_messages():
    notifier = LoggingNotifier(history_size=3)
    messages = [UserMessage("Geocoder", f"attempt {i}", Severity.WARNING) for i in range(10)]

    for message in messages:
        notifier.show(message)

    assert list(notifier.history) == messages[-3:]
    assert notifier.current == messages[-1]
